# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Declaration filter: select the `Verify`-marked declarations that can be faked.

Two checks run in order, each reported per declaration without stopping the
pass:
  - only typed bindings (properties) may carry the marker;
  - the declared type must be an interface (a `Protocol` class).

Survivors are keyed by the interface's qualified name; when several
declarations name the same interface the first one wins, so each interface is
generated exactly once.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, Iterator, TypeVar, cast

from .diagnostics import DiagnosticSink
from .model import AnnotatedDeclaration, ClassDecl, DeclKind, TypeKind
from .naming import qualified_name

ONLY_PROPERTIES = "Only properties can be annotated with Verify"
ONLY_INTERFACES = "Only interfaces can be verified"

T = TypeVar("T", bound=AnnotatedDeclaration)


def _check(
	decls: Iterable[T],
	message: str,
	condition: Callable[[T], bool],
	sink: DiagnosticSink,
) -> Iterator[T]:
	for decl in decls:
		if condition(decl):
			yield decl
		else:
			sink.error(message, decl.span, phase="filter")


def _is_interface(decl: AnnotatedDeclaration) -> bool:
	return decl.resolved is not None and decl.resolved.kind is TypeKind.INTERFACE


def filter_declarations(
	declarations: Iterable[AnnotatedDeclaration],
	sink: DiagnosticSink,
) -> Dict[str, ClassDecl]:
	"""Return eligible interfaces by qualified name, in first-seen order."""
	properties = _check(declarations, ONLY_PROPERTIES, lambda d: d.kind is DeclKind.PROPERTY, sink)
	interfaces = _check(properties, ONLY_INTERFACES, _is_interface, sink)

	out: Dict[str, ClassDecl] = {}
	for decl in interfaces:
		resolved = cast(ClassDecl, decl.resolved)
		out.setdefault(qualified_name(resolved.module.name, resolved.qualname), resolved)
	return out
