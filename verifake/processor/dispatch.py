# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Dispatch table synthesis: one `verifake_generated.Fakes` module per pass.

The module maps each interface's qualified name to its fake class and
exposes two entry points:

	fake_for(identity)  # qualified name -> fresh fake, erased to `object`
	fake(cls)           # class object -> fresh fake, narrowed to `cls`

`verifake.core.fake` forwards to the second one. A pass without any
interface produces no dispatch module at all.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from .discovery import GENERATED_BANNER
from .model import DispatchEntry, FakeClassDescriptor, InterfaceDescriptor, SourceUnit
from .naming import FAKES_MODULE, FAKES_PACKAGE, RUNTIME_ALIAS, dispatch_alias
from .source_builder import SourceBuilder

UNSUPPORTED_TYPE = "Unsupported type"


def dispatch_entries(
	pairs: Sequence[Tuple[InterfaceDescriptor, FakeClassDescriptor]],
) -> List[DispatchEntry]:
	"""One entry per interface, with import aliases unique within the module."""
	entries: List[DispatchEntry] = []
	taken: Dict[str, int] = {}
	for interface, fake in pairs:
		alias = dispatch_alias(fake.package, fake.class_name)
		count = taken.get(alias, 0) + 1
		taken[alias] = count
		if count > 1:
			alias = f"{alias}_{count}"
		entries.append(
			DispatchEntry(
				identity=interface.qualified_name,
				fake_module=fake.module,
				class_name=fake.class_name,
				alias=alias,
			)
		)
	return entries


def render_dispatch(entries: Sequence[DispatchEntry]) -> str:
	b = SourceBuilder()
	b.add_statement(f"{GENERATED_BANNER}. Do not edit.")
	b.add_statement("from __future__ import annotations")
	b.add_blank()
	b.add_statement("from typing import Callable, TypeVar, cast")
	b.add_blank()
	b.add_statement(f"import verifake.core as {RUNTIME_ALIAS}")
	b.add_statements(
		sorted(f"from {e.fake_module} import {e.class_name} as {e.alias}" for e in entries)
	)
	b.add_blank()
	b.add_statement('T = TypeVar("T")')
	b.add_blank()
	b.add_statement("_FACTORIES: dict[str, Callable[[], object]] = {")
	b.add_statements(f"\t{e.identity!r}: {e.alias}," for e in entries)
	b.add_statement("}")
	b.add_blank()
	b.add_blank()
	b.begin_control_flow("def fake_for(identity: str) -> object")
	b.add_statement('"""Return a fresh fake of the interface registered under `identity`."""')
	b.add_statement("factory = _FACTORIES.get(identity)")
	b.begin_control_flow("if factory is None")
	b.add_statement(f'raise {RUNTIME_ALIAS}.UnsupportedTypeError(f"{UNSUPPORTED_TYPE} {{identity}}")')
	b.end_control_flow()
	b.add_statement("return factory()")
	b.end_control_flow()
	b.add_blank()
	b.add_blank()
	b.begin_control_flow("def fake(cls: type[T]) -> T")
	b.add_statement('"""Return a fresh fake implementing `cls`."""')
	b.add_statement(f"return cast(T, fake_for({RUNTIME_ALIAS}.type_identity(cls)))")
	b.end_control_flow()
	return b.render()


def synthesize_dispatch(
	pairs: Sequence[Tuple[InterfaceDescriptor, FakeClassDescriptor]],
) -> Optional[SourceUnit]:
	"""Dispatch module for all fakes of one pass, or None when there are none."""
	if not pairs:
		return None
	text = render_dispatch(dispatch_entries(pairs))
	return SourceUnit(package=FAKES_PACKAGE, module_name=FAKES_MODULE, text=text)
