# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Discovery: find `Verify`-marked declarations in Python sources.

Every `.py` file under the given paths is parsed with the standard `ast`
module (never imported or executed). A project index maps module names to
their classes and top-level imports so that annotation expressions can be
resolved to the class they name:

	from typing import Annotated
	from verifake import Verify, fake
	from shop.api import Analytics

	class TestCheckout:
		analytics: Annotated[Analytics, Verify] = fake(Analytics)

Resolution is static and best-effort: local classes, absolute and relative
imports, attribute access through imported modules, re-exports from package
`__init__` files, string forward references and generic subscripts
(`Repo[int]` names `Repo`). Anything else resolves to None and is later
rejected as "not an interface".

Module level names, class attributes and `self.x` assignments inside methods
are properties. Markers on function parameters, function locals and other
targets are still collected, with their own kind, so the filter can report
them instead of silently dropping them.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from .diagnostics import DiagnosticSink, Span
from .model import AnnotatedDeclaration, ClassDecl, DeclKind, ImportRef, SourceModule, TypeKind
from .naming import qualified_name

# First line of every generated module; such files are not scanned again.
GENERATED_BANNER = "# Generated by verifake"

VERIFY_TARGETS = frozenset({"verifake.Verify", "verifake.core.Verify", "verifake.core.fakes.Verify"})
ANNOTATED_TARGETS = frozenset({"typing.Annotated", "typing_extensions.Annotated"})
PROTOCOL_TARGETS = frozenset({"typing.Protocol", "typing_extensions.Protocol"})
ENUM_TARGETS = frozenset({"enum.Enum", "enum.IntEnum", "enum.StrEnum", "enum.Flag", "enum.IntFlag"})
TYPE_CHECKING_TARGETS = frozenset({"typing.TYPE_CHECKING", "typing_extensions.TYPE_CHECKING"})

_MAX_RESOLVE_DEPTH = 8


@dataclass
class DiscoveryResult:
	modules: List[SourceModule] = field(default_factory=list)
	declarations: List[AnnotatedDeclaration] = field(default_factory=list)


def module_name_for_path(path: Path, source_root: Path) -> Optional[str]:
	"""
	Map `<root>/shop/api.py` to `shop.api` and `<root>/shop/__init__.py` to
	`shop`. Returns None for files outside `source_root`.
	"""
	try:
		rel = path.resolve().relative_to(source_root.resolve())
	except ValueError:
		return None
	parts = list(rel.with_suffix("").parts)
	if parts and parts[-1] == "__init__":
		parts = parts[:-1]
	if not parts:
		return None
	return ".".join(parts)


def absolute_import_module(package: str, level: int, module: Optional[str]) -> Optional[str]:
	"""
	Resolve the module of a (possibly relative) `from ... import` statement.

	level=1 means "from .", level=2 means "from ..", etc.
	"""
	if level == 0:
		return module
	parts = package.split(".") if package else []
	up = level - 1
	if up > len(parts):
		return None
	base = parts[: len(parts) - up]
	if module:
		base = base + module.split(".")
	return ".".join(base) or None


def collect_source_files(paths: Iterable[Path]) -> List[Path]:
	"""Python files under `paths`, deduplicated and sorted."""
	found: Dict[Path, Path] = {}
	for root in paths:
		if root.is_dir():
			for path in root.rglob("*.py"):
				rel_parts = path.relative_to(root).parts
				if any(part.startswith(".") or part == "__pycache__" for part in rel_parts):
					continue
				found.setdefault(path.resolve(), path)
		elif root.suffix == ".py":
			found.setdefault(root.resolve(), root)
	return [found[key] for key in sorted(found)]


def dotted_name(expr: Optional[ast.expr], module: SourceModule) -> Optional[str]:
	"""
	Dotted path a name or attribute chain refers to inside `module`.

	Unknown bare names (builtins, undefined) are returned unchanged.
	"""
	if isinstance(expr, ast.Name):
		ref = module.imports.get(expr.id)
		if ref is not None:
			return ref.target
		if expr.id in module.top_level_names:
			return qualified_name(module.name, expr.id)
		return expr.id
	if isinstance(expr, ast.Attribute):
		base = dotted_name(expr.value, module)
		return None if base is None else f"{base}.{expr.attr}"
	return None


def unquote(expr: Optional[ast.expr]) -> Optional[ast.expr]:
	"""Parse string forward references (`"Analytics"`) into expressions."""
	if isinstance(expr, ast.Constant) and isinstance(expr.value, str):
		try:
			return ast.parse(expr.value, mode="eval").body
		except SyntaxError:
			return None
	return expr


def _add_import(
	stmt: ast.stmt,
	package: str,
	imports: Dict[str, ImportRef],
	type_checking: bool,
) -> None:
	if isinstance(stmt, ast.Import):
		for alias in stmt.names:
			if alias.asname:
				imports[alias.asname] = ImportRef(
					local=alias.asname, module=alias.name, aliased=True, type_checking=type_checking
				)
			else:
				local = alias.name.split(".")[0]
				imports[local] = ImportRef(local=local, module=alias.name, type_checking=type_checking)
	elif isinstance(stmt, ast.ImportFrom):
		if stmt.module == "__future__":
			return
		module = absolute_import_module(package, stmt.level, stmt.module)
		if module is None:
			return
		for alias in stmt.names:
			if alias.name == "*":
				continue
			local = alias.asname or alias.name
			imports[local] = ImportRef(
				local=local,
				module=module,
				name=alias.name,
				aliased=alias.asname is not None,
				type_checking=type_checking,
			)


def _collect_classes(body: Sequence[ast.stmt], prefix: str, out: Dict[str, ast.ClassDef]) -> None:
	for stmt in body:
		if isinstance(stmt, ast.ClassDef):
			qualname = prefix + stmt.name
			out[qualname] = stmt
			_collect_classes(stmt.body, qualname + ".", out)


def _top_level_names(tree: ast.Module) -> frozenset[str]:
	names: set[str] = set()
	for stmt in tree.body:
		if isinstance(stmt, (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
			names.add(stmt.name)
		elif isinstance(stmt, ast.Assign):
			for target in stmt.targets:
				if isinstance(target, ast.Name):
					names.add(target.id)
		elif isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name):
			names.add(stmt.target.id)
	return frozenset(names)


@dataclass(frozen=True)
class _Scope:
	"""Where a statement list sits while scanning for markers."""

	prefix: str
	in_function: bool = False
	# Inside a method: its instance parameter and the prefix of its class.
	self_name: Optional[str] = None
	class_prefix: str = ""


def _binding(target: ast.expr, scope: _Scope) -> Tuple[str, DeclKind]:
	"""
	Name and kind of an annotated assignment target.

	Module and class level names and `self.x` inside a method are properties;
	function locals and any other target are plain variables.
	"""
	if isinstance(target, ast.Name):
		kind = DeclKind.VARIABLE if scope.in_function else DeclKind.PROPERTY
		return scope.prefix + target.id, kind
	if (
		isinstance(target, ast.Attribute)
		and isinstance(target.value, ast.Name)
		and scope.self_name is not None
		and target.value.id == scope.self_name
	):
		return scope.class_prefix + target.attr, DeclKind.PROPERTY
	return scope.prefix + ast.unparse(target), DeclKind.VARIABLE


def _all_args(args: ast.arguments) -> List[ast.arg]:
	out = [*args.posonlyargs, *args.args]
	if args.vararg is not None:
		out.append(args.vararg)
	out.extend(args.kwonlyargs)
	if args.kwarg is not None:
		out.append(args.kwarg)
	return out


def _nested_bodies(stmt: ast.stmt) -> Iterator[Sequence[ast.stmt]]:
	"""Statement lists of compound statements (`if`, `with`, `try`, `match`, loops)."""
	for name in ("body", "orelse", "finalbody"):
		value = getattr(stmt, name, None)
		if isinstance(value, list):
			yield value
	for handler in getattr(stmt, "handlers", ()):
		yield handler.body
	for case in getattr(stmt, "cases", ()):
		yield case.body


class ProjectIndex:
	"""All scanned modules plus static name resolution across them."""

	def __init__(self) -> None:
		self.modules: Dict[str, SourceModule] = {}
		self._class_decls: Dict[str, ClassDecl] = {}

	def load(self, path: Path, source_root: Path, sink: DiagnosticSink) -> Optional[SourceModule]:
		"""Parse `path` and add it to the index; problems become diagnostics."""
		# Bytes, so that `ast.parse` honours PEP 263 coding cookies.
		source = path.read_bytes()
		if source.startswith(GENERATED_BANNER.encode("ascii")):
			return None
		name = module_name_for_path(path, source_root)
		if name is None:
			sink.error(f"cannot derive a module name (outside source root {source_root})", Span(str(path)), phase="parse")
			return None
		try:
			tree = ast.parse(source, filename=str(path))
		except SyntaxError as exc:
			sink.error(f"syntax error: {exc.msg}", Span(str(path), exc.lineno, exc.offset), phase="parse")
			return None
		except ValueError as exc:
			# Undecodable bytes and NUL bytes, depending on the interpreter version.
			sink.error(f"cannot decode source: {exc}", Span(str(path)), phase="parse")
			return None

		module = SourceModule(name=name, path=path, tree=tree)
		module.top_level_names = _top_level_names(tree)
		_collect_classes(tree.body, "", module.classes)
		for stmt in tree.body:
			_add_import(stmt, module.package, module.imports, type_checking=False)
		for stmt in tree.body:
			if isinstance(stmt, ast.If) and self.dotted(stmt.test, module) in TYPE_CHECKING_TARGETS:
				for inner in stmt.body:
					_add_import(inner, module.package, module.imports, type_checking=True)
		self.modules[name] = module
		return module

	def dotted(self, expr: Optional[ast.expr], module: SourceModule) -> Optional[str]:
		return dotted_name(expr, module)

	def lookup_class(self, dotted: str, depth: int = 0) -> Optional[ClassDecl]:
		"""Find the class `dotted` names, following re-exports."""
		if depth > _MAX_RESOLVE_DEPTH:
			return None
		parts = dotted.split(".")
		for i in range(len(parts) - 1, 0, -1):
			module = self.modules.get(".".join(parts[:i]))
			if module is None:
				continue
			rest = parts[i:]
			qualname = ".".join(rest)
			if qualname in module.classes:
				return self._class_decl(module, qualname, depth)
			ref = module.imports.get(rest[0])
			if ref is not None:
				return self.lookup_class(".".join([ref.target, *rest[1:]]), depth + 1)
			return None
		return None

	def resolve_type(self, type_expr: Optional[ast.expr], module: SourceModule) -> Optional[ClassDecl]:
		expr = unquote(type_expr)
		if isinstance(expr, ast.Subscript):
			expr = expr.value
		target = self.dotted(expr, module)
		return self.lookup_class(target) if target else None

	def _class_decl(self, module: SourceModule, qualname: str, depth: int) -> ClassDecl:
		key = qualified_name(module.name, qualname)
		decl = self._class_decls.get(key)
		if decl is None:
			node = module.classes[qualname]
			decl = ClassDecl(module=module, qualname=qualname, node=node, kind=self._classify(module, node, depth))
			self._class_decls[key] = decl
		return decl

	def _classify(self, module: SourceModule, node: ast.ClassDef, depth: int) -> TypeKind:
		bases = [b.value if isinstance(b, ast.Subscript) else b for b in node.bases]
		targets = [self.dotted(b, module) for b in bases]
		if any(t in PROTOCOL_TARGETS for t in targets):
			return TypeKind.INTERFACE
		for target in targets:
			if target is None:
				continue
			if target in ENUM_TARGETS:
				return TypeKind.ENUM
			base = self.lookup_class(target, depth + 1)
			if base is not None and base.kind is TypeKind.ENUM:
				return TypeKind.ENUM
		return TypeKind.CLASS

	# Marker scanning ---------------------------------------------------------

	def is_verify(self, expr: ast.expr, module: SourceModule) -> bool:
		return self.dotted(expr, module) in VERIFY_TARGETS

	def verify_annotated(self, annotation: ast.expr, module: SourceModule) -> Optional[ast.expr]:
		"""The declared type when `annotation` is `Annotated[T, ..., Verify, ...]`."""
		annotation = unquote(annotation)
		if not isinstance(annotation, ast.Subscript):
			return None
		if self.dotted(annotation.value, module) not in ANNOTATED_TARGETS:
			return None
		args = annotation.slice
		if not isinstance(args, ast.Tuple) or len(args.elts) < 2:
			return None
		if not any(self.is_verify(meta, module) for meta in args.elts[1:]):
			return None
		return args.elts[0]

	def scan(self, module: SourceModule) -> List[AnnotatedDeclaration]:
		out: List[AnnotatedDeclaration] = []
		self._scan_body(module, module.tree.body, _Scope(prefix=""), out)
		return out

	def _declaration(
		self,
		module: SourceModule,
		name: str,
		kind: DeclKind,
		span: Span,
		type_expr: ast.expr,
	) -> AnnotatedDeclaration:
		return AnnotatedDeclaration(
			name=name,
			kind=kind,
			span=span,
			resolved=self.resolve_type(type_expr, module),
			type_text=ast.unparse(type_expr),
		)

	def _scan_body(
		self,
		module: SourceModule,
		body: Sequence[ast.stmt],
		scope: _Scope,
		out: List[AnnotatedDeclaration],
	) -> None:
		for stmt in body:
			span = Span(str(module.path), stmt.lineno, stmt.col_offset + 1)
			if isinstance(stmt, ast.AnnAssign):
				type_expr = self.verify_annotated(stmt.annotation, module)
				if type_expr is None:
					continue
				name, kind = _binding(stmt.target, scope)
				out.append(self._declaration(module, name, kind, span, type_expr))
			elif isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
				if any(self.is_verify(d, module) for d in stmt.decorator_list):
					out.append(AnnotatedDeclaration(name=scope.prefix + stmt.name, kind=DeclKind.FUNCTION, span=span))
				self._scan_function(module, stmt, scope, out)
			elif isinstance(stmt, ast.ClassDef):
				if any(self.is_verify(d, module) for d in stmt.decorator_list):
					out.append(AnnotatedDeclaration(name=scope.prefix + stmt.name, kind=DeclKind.CLASS, span=span))
				self._scan_body(module, stmt.body, _Scope(prefix=f"{scope.prefix}{stmt.name}."), out)
			else:
				for nested in _nested_bodies(stmt):
					self._scan_body(module, nested, scope, out)

	def _scan_function(
		self,
		module: SourceModule,
		func: Union[ast.FunctionDef, ast.AsyncFunctionDef],
		scope: _Scope,
		out: List[AnnotatedDeclaration],
	) -> None:
		owner = f"{scope.prefix}{func.name}"
		args = func.args
		for arg in _all_args(args):
			if arg.annotation is None:
				continue
			type_expr = self.verify_annotated(arg.annotation, module)
			if type_expr is None:
				continue
			span = Span(str(module.path), arg.lineno, arg.col_offset + 1)
			out.append(self._declaration(module, f"{owner}.{arg.arg}", DeclKind.PARAMETER, span, type_expr))

		positional = [*args.posonlyargs, *args.args]
		is_method = not scope.in_function and bool(scope.prefix) and bool(positional)
		inner = _Scope(
			prefix=f"{owner}.<locals>.",
			in_function=True,
			self_name=positional[0].arg if is_method else None,
			class_prefix=scope.prefix,
		)
		self._scan_body(module, func.body, inner, out)


def discover(paths: Sequence[Path], source_root: Path, sink: DiagnosticSink) -> DiscoveryResult:
	"""
	Parse all sources under `paths` and return the `Verify`-marked
	declarations in file order.

	The whole project is indexed before scanning so that declarations may
	refer to interfaces defined in files that sort after them.
	"""
	index = ProjectIndex()
	result = DiscoveryResult()
	for path in collect_source_files(paths):
		module = index.load(path, source_root, sink)
		if module is not None:
			result.modules.append(module)
	for module in result.modules:
		result.declarations.extend(index.scan(module))
	return result
