# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Data model shared by the generator passes.

Pipeline placement:
  discovery (AnnotatedDeclaration) → declaration_filter (ClassDecl)
  → introspect (InterfaceDescriptor) → fake_class (FakeClassDescriptor)
  → dispatch (DispatchEntry) → emit (SourceUnit)

Descriptors are immutable once built; each pass derives new values from the
previous pass instead of mutating them.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, FrozenSet, Optional, Tuple

from .diagnostics import Span


class DeclKind(Enum):
	"""Syntactic kind of a construct carrying the `Verify` marker."""

	PROPERTY = "property"
	FUNCTION = "function"
	CLASS = "class"
	PARAMETER = "parameter"
	# Local variables and other non-attribute binding targets.
	VARIABLE = "variable"


class TypeKind(Enum):
	INTERFACE = "interface"
	CLASS = "class"
	ENUM = "enum"
	OTHER = "other"


class ParamKind(Enum):
	POSITIONAL_ONLY = "positional_only"
	POSITIONAL_OR_KEYWORD = "positional_or_keyword"
	VAR_POSITIONAL = "var_positional"
	KEYWORD_ONLY = "keyword_only"
	VAR_KEYWORD = "var_keyword"


@dataclass(frozen=True)
class ImportRef:
	"""
	A name bound by an import statement at module top level.

	`name` is None for `import a.b [as c]`; otherwise the statement was
	`from module import name [as local]`. `module` is always absolute.
	"""

	local: str
	module: str
	name: Optional[str] = None
	aliased: bool = False
	type_checking: bool = False  # bound under `if TYPE_CHECKING:`

	@property
	def target(self) -> str:
		"""Dotted path the local name refers to."""
		if self.name is None:
			return self.module if self.aliased else self.local
		return f"{self.module}.{self.name}"


@dataclass(eq=False)
class SourceModule:
	"""One parsed Python source file."""

	name: str
	path: Path
	tree: ast.Module
	imports: Dict[str, ImportRef] = field(default_factory=dict)
	classes: Dict[str, ast.ClassDef] = field(default_factory=dict)  # qualname -> node
	top_level_names: FrozenSet[str] = frozenset()

	@property
	def package(self) -> str:
		if self.path.name == "__init__.py":
			return self.name
		return self.name.rpartition(".")[0]


@dataclass(frozen=True)
class ClassDecl:
	"""A class declared in one of the scanned modules."""

	module: SourceModule
	qualname: str
	node: ast.ClassDef
	kind: TypeKind

	@property
	def simple_name(self) -> str:
		return self.qualname.rpartition(".")[2]

	@property
	def span(self) -> Span:
		return Span(str(self.module.path), self.node.lineno, self.node.col_offset + 1)


@dataclass(frozen=True)
class AnnotatedDeclaration:
	"""
	A construct marked with `Verify`, as found by discovery.

	`resolved` is the class the declared type refers to, or None when the type
	is not a class of the scanned project (builtins, `Callable[...]`, third
	party types). Function and class declarations carry no type.
	"""

	name: str
	kind: DeclKind
	span: Span
	resolved: Optional[ClassDecl] = None
	type_text: Optional[str] = None


@dataclass(frozen=True)
class ParamDescriptor:
	name: str
	kind: ParamKind = ParamKind.POSITIONAL_OR_KEYWORD
	annotation: Optional[str] = None
	default: Optional[str] = None


@dataclass(frozen=True)
class OperationDescriptor:
	"""
	One operation declared directly on an interface.

	`qualified_name` is the identity recorded in invocations and compared
	while verifying. `return_type` is the annotation text, "None" when the
	operation has no result (including when it was not annotated).
	"""

	name: str
	qualified_name: str
	params: Tuple[ParamDescriptor, ...]
	return_type: str = "None"
	is_async: bool = False

	@property
	def returns_none(self) -> bool:
		return self.return_type == "None"


@dataclass(frozen=True)
class InterfaceDescriptor:
	qualified_name: str
	simple_name: str
	qualname: str
	module: str
	package: str
	operations: Tuple[OperationDescriptor, ...]
	# Import statements the fake module needs for annotations and defaults.
	imports: Tuple[ImportRef, ...] = ()


@dataclass(frozen=True)
class FieldSpec:
	"""One piece of verification state and its initial value expression."""

	name: str
	annotation: str
	initializer: str


@dataclass(frozen=True)
class MethodSpec:
	operation: OperationDescriptor
	signature: str
	body: Tuple[str, ...]  # lines, indented relative to the method body


@dataclass(frozen=True)
class FakeClassDescriptor:
	class_name: str
	interface: InterfaceDescriptor
	fields: Tuple[FieldSpec, ...]
	methods: Tuple[MethodSpec, ...]
	package: str
	module: str  # dotted module the fake is written to


@dataclass(frozen=True)
class DispatchEntry:
	identity: str
	fake_module: str
	class_name: str
	alias: str


@dataclass(frozen=True)
class SourceUnit:
	"""One generated Python module."""

	package: str
	module_name: str
	text: str

	@property
	def qualified_module(self) -> str:
		return f"{self.package}.{self.module_name}" if self.package else self.module_name

	@property
	def relative_path(self) -> Path:
		parts = self.package.split(".") if self.package else []
		return Path(*parts, f"{self.module_name}.py")
