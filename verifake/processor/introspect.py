# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Interface introspection: turn a `Protocol` class into an InterfaceDescriptor.

Only operations declared directly in the class body are collected; members
inherited from other protocols are not. Properties, static methods, class
methods and `@overload` stubs are not operations and are skipped.

Besides the operations this pass works out which import statements the fake
module needs so that every name used by an annotation or a default value is
bound there as it is in the interface's own module.
"""

from __future__ import annotations

import ast
from typing import Dict, Iterable, List, Optional, Set, Union

from .discovery import dotted_name, unquote
from .model import (
	ClassDecl,
	ImportRef,
	InterfaceDescriptor,
	OperationDescriptor,
	ParamDescriptor,
	ParamKind,
	SourceModule,
)
from .naming import operation_name, qualified_name

FunctionNode = Union[ast.FunctionDef, ast.AsyncFunctionDef]

SKIPPED_DECORATORS = frozenset(
	{
		"property",
		"staticmethod",
		"classmethod",
		"functools.cached_property",
		"typing.overload",
		"typing_extensions.overload",
	}
)
_ACCESSOR_ATTRS = frozenset({"getter", "setter", "deleter"})


def _is_operation(node: FunctionNode, module: SourceModule) -> bool:
	if node.name == "__init__":
		return False
	for deco in node.decorator_list:
		expr = deco.func if isinstance(deco, ast.Call) else deco
		if isinstance(expr, ast.Attribute) and expr.attr in _ACCESSOR_ATTRS:
			return False
		if dotted_name(expr, module) in SKIPPED_DECORATORS:
			return False
	return True


def _annotation_text(expr: Optional[ast.expr]) -> Optional[str]:
	return None if expr is None else ast.unparse(expr)


def _return_type(node: FunctionNode) -> str:
	returns = node.returns
	if returns is None:
		return "None"
	if isinstance(returns, ast.Constant) and isinstance(returns.value, str):
		return returns.value.strip()
	return ast.unparse(returns)


def _params(args: ast.arguments) -> List[ParamDescriptor]:
	positional = [*args.posonlyargs, *args.args]
	defaults: List[Optional[ast.expr]] = [None] * (len(positional) - len(args.defaults))
	defaults.extend(args.defaults)

	out: List[ParamDescriptor] = []
	for i, (arg, default) in enumerate(zip(positional, defaults)):
		if i == 0:
			continue  # self
		kind = ParamKind.POSITIONAL_ONLY if i < len(args.posonlyargs) else ParamKind.POSITIONAL_OR_KEYWORD
		out.append(
			ParamDescriptor(
				name=arg.arg,
				kind=kind,
				annotation=_annotation_text(arg.annotation),
				default=_annotation_text(default),
			)
		)
	if args.vararg is not None:
		out.append(
			ParamDescriptor(
				name=args.vararg.arg,
				kind=ParamKind.VAR_POSITIONAL,
				annotation=_annotation_text(args.vararg.annotation),
			)
		)
	for arg, kw_default in zip(args.kwonlyargs, args.kw_defaults):
		out.append(
			ParamDescriptor(
				name=arg.arg,
				kind=ParamKind.KEYWORD_ONLY,
				annotation=_annotation_text(arg.annotation),
				default=_annotation_text(kw_default),
			)
		)
	if args.kwarg is not None:
		out.append(
			ParamDescriptor(
				name=args.kwarg.arg,
				kind=ParamKind.VAR_KEYWORD,
				annotation=_annotation_text(args.kwarg.annotation),
			)
		)
	return out


def _referenced_names(node: FunctionNode) -> Set[str]:
	"""Free names used by the annotations and default values of `node`."""
	args = node.args
	annotations: List[Optional[ast.expr]] = [node.returns]
	annotations.extend(a.annotation for a in [*args.posonlyargs, *args.args, *args.kwonlyargs])
	for extra in (args.vararg, args.kwarg):
		if extra is not None:
			annotations.append(extra.annotation)
	exprs: List[Optional[ast.expr]] = [unquote(a) for a in annotations]
	exprs.extend(args.defaults)
	exprs.extend(args.kw_defaults)

	names: Set[str] = set()
	for expr in exprs:
		if expr is None:
			continue
		for sub in ast.walk(expr):
			if isinstance(sub, ast.Name):
				names.add(sub.id)
	return names


def _required_imports(decl: ClassDecl, names: Iterable[str]) -> tuple[ImportRef, ...]:
	module = decl.module
	top = decl.qualname.split(".")[0]
	refs: Dict[str, ImportRef] = {top: ImportRef(local=top, module=module.name, name=top)}
	for name in sorted(names):
		if name in refs:
			continue
		ref = module.imports.get(name)
		if ref is not None:
			refs[name] = ref
		elif name in module.top_level_names:
			refs[name] = ImportRef(local=name, module=module.name, name=name)
	return tuple(refs[key] for key in sorted(refs))


def introspect(decl: ClassDecl) -> InterfaceDescriptor:
	"""Collect the directly declared operations of an interface, in body order."""
	interface_name = qualified_name(decl.module.name, decl.qualname)
	operations: List[OperationDescriptor] = []
	names: Set[str] = set()

	for node in decl.node.body:
		if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
			continue
		if not _is_operation(node, decl.module):
			continue
		operations.append(
			OperationDescriptor(
				name=node.name,
				qualified_name=operation_name(interface_name, node.name),
				params=tuple(_params(node.args)),
				return_type=_return_type(node),
				is_async=isinstance(node, ast.AsyncFunctionDef),
			)
		)
		names |= _referenced_names(node)

	return InterfaceDescriptor(
		qualified_name=interface_name,
		simple_name=decl.simple_name,
		qualname=decl.qualname,
		module=decl.module.name,
		package=decl.module.package,
		operations=tuple(operations),
		imports=_required_imports(decl, names),
	)
