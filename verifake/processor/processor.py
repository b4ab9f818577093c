# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Generation pass driver.

Pipeline:
  discovery → declaration_filter → (per interface) introspect → fake_class
  → emit → dispatch → emit

A pass is a pure function of its input: nothing is cached between passes and
identical sources produce byte-identical modules. Rejected declarations are
reported to the sink and skipped; the pass always completes for every
remaining interface.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .declaration_filter import filter_declarations
from .diagnostics import DiagnosticSink
from .discovery import discover
from .dispatch import synthesize_dispatch
from .emit import CodeGenerator, FileCodeGenerator, InMemoryCodeGenerator
from .fake_class import render_fake, synthesize_fake
from .introspect import introspect
from .model import AnnotatedDeclaration, FakeClassDescriptor, InterfaceDescriptor, SourceUnit
from .naming import is_reserved


def reserved_parameters(interface: InterfaceDescriptor) -> List[str]:
	"""`op(param)` for every parameter whose name generated code binds itself."""
	return [
		f"{op.name}({param.name})"
		for op in interface.operations
		for param in op.params
		if is_reserved(param.name)
	]


@dataclass
class ProcessResult:
	pairs: List[Tuple[InterfaceDescriptor, FakeClassDescriptor]] = field(default_factory=list)
	units: List[SourceUnit] = field(default_factory=list)
	dispatch: Optional[SourceUnit] = None


class FakeProcessor:
	"""Generate one fake per eligible interface plus the shared dispatch module."""

	def __init__(self, code_generator: CodeGenerator, sink: DiagnosticSink) -> None:
		self._code_generator = code_generator
		self._sink = sink

	def process(self, declarations: Iterable[AnnotatedDeclaration]) -> ProcessResult:
		result = ProcessResult()
		interfaces = filter_declarations(declarations, self._sink)

		modules: Dict[str, str] = {}
		for name, decl in interfaces.items():
			interface = introspect(decl)
			clashes = reserved_parameters(interface)
			if clashes:
				self._sink.error(
					f"Parameter names reserved for generated code in {name}: {', '.join(clashes)}",
					decl.span,
					phase="generate",
				)
				continue
			fake = synthesize_fake(interface)
			owner = modules.get(fake.module)
			if owner is not None:
				self._sink.error(
					f"Fake module {fake.module} is already generated for {owner}",
					decl.span,
					phase="generate",
				)
				continue
			modules[fake.module] = name

			unit = render_fake(fake)
			self._code_generator.write(unit)
			self._sink.info(f"Generating fake for: {name}", phase="generate")
			result.pairs.append((interface, fake))
			result.units.append(unit)

		result.dispatch = synthesize_dispatch(result.pairs)
		if result.dispatch is not None:
			self._code_generator.write(result.dispatch)
			result.units.append(result.dispatch)
		return result


@dataclass(frozen=True)
class GenerateOptions:
	paths: List[Path]
	source_root: Path
	# Where `verifake_generated` is written; fakes always sit beside their interface.
	out_dir: Path
	dry_run: bool = False


def generate(opts: GenerateOptions, sink: DiagnosticSink) -> ProcessResult:
	"""Discover declarations under `opts.paths` and generate their fakes."""
	discovery = discover(opts.paths, opts.source_root, sink)
	code_generator: CodeGenerator
	if opts.dry_run:
		code_generator = InMemoryCodeGenerator()
	else:
		code_generator = FileCodeGenerator(opts.source_root, dispatch_dir=opts.out_dir)
	return FakeProcessor(code_generator, sink).process(discovery.declarations)


def generate_sources(
	declarations: Sequence[AnnotatedDeclaration],
	sink: Optional[DiagnosticSink] = None,
) -> Dict[str, str]:
	"""Run a pass in memory and return module name -> generated text."""
	code_generator = InMemoryCodeGenerator()
	FakeProcessor(code_generator, sink or DiagnosticSink()).process(declarations)
	return {name: unit.text for name, unit in code_generator.units.items()}
