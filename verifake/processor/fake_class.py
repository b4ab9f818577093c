# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Fake class synthesis: InterfaceDescriptor → FakeClassDescriptor → SourceUnit.

The generated class subclasses the interface and `Verifiable`, embeds a
`VerificationState` and overrides every operation with a body that either
records the call or checks it against the recorded calls:

	def track(self, event: str) -> None:
		_verifake_state = self.verifake_state
		if _verifake_state.verifying:
			# pop the oldest invocation, compare the operation name, then run
			# the parameter matchers against the recorded arguments
			...
		else:
			_verifake_state.invocations.append(_verifake.Invocation("shop.api.Analytics.track", (event,)))

Operations returning anything but `None` cannot be faked: their body raises
unconditionally instead of inventing a return value.

All runtime names are reached through the `_verifake` module alias and all
generated locals start with `_verifake_`, so they cannot shadow names the
interface's annotations or defaults rely on.
"""

from __future__ import annotations

from typing import List, Tuple

from .discovery import GENERATED_BANNER
from .model import (
	FakeClassDescriptor,
	FieldSpec,
	ImportRef,
	InterfaceDescriptor,
	MethodSpec,
	OperationDescriptor,
	ParamDescriptor,
	ParamKind,
	SourceUnit,
)
from .naming import RUNTIME_ALIAS, fake_class_name, fake_module, reserved
from .source_builder import SourceBuilder, indent

UNSUPPORTED_RETURN = "Only functions with return type None can be verified"
NO_INVOCATION = "Expected an invocation, but got none instead"

RUNTIME_IMPORT = f"import verifake.core as {RUNTIME_ALIAS}"

_STATE = reserved("state")
_INVOCATION = reserved("invocation")
_MATCHERS = reserved("matchers")


def state_fields() -> Tuple[FieldSpec, ...]:
	return (
		FieldSpec("invocations", f"list[{RUNTIME_ALIAS}.Invocation]", "[]"),
		FieldSpec("parameter_matchers", f"list[{RUNTIME_ALIAS}.Matcher]", f"[{RUNTIME_ALIAS}.equals]"),
		FieldSpec("verifying", "bool", "False"),
	)


def _render_param(param: ParamDescriptor) -> str:
	if param.kind is ParamKind.VAR_POSITIONAL:
		name = f"*{param.name}"
	elif param.kind is ParamKind.VAR_KEYWORD:
		name = f"**{param.name}"
	else:
		name = param.name
	if param.annotation is not None:
		text = f"{name}: {param.annotation}"
		return text if param.default is None else f"{text} = {param.default}"
	return name if param.default is None else f"{name}={param.default}"


def render_signature(op: OperationDescriptor) -> str:
	parts: List[str] = ["self"]
	params = list(op.params)
	has_var_positional = any(p.kind is ParamKind.VAR_POSITIONAL for p in params)
	keyword_marker_done = has_var_positional
	for i, param in enumerate(params):
		if param.kind is ParamKind.KEYWORD_ONLY and not keyword_marker_done:
			parts.append("*")
			keyword_marker_done = True
		parts.append(_render_param(param))
		is_last_positional_only = param.kind is ParamKind.POSITIONAL_ONLY and (
			i + 1 == len(params) or params[i + 1].kind is not ParamKind.POSITIONAL_ONLY
		)
		if is_last_positional_only:
			parts.append("/")
	prefix = "async def" if op.is_async else "def"
	return f"{prefix} {op.name}({', '.join(parts)}) -> {op.return_type}"


def _arguments_tuple(names: List[str]) -> str:
	if len(names) == 1:
		return f"({names[0]},)"
	return f"({', '.join(names)})"


def _method_body(op: OperationDescriptor) -> Tuple[str, ...]:
	b = SourceBuilder()
	if not op.returns_none:
		b.add_statement(f"raise {RUNTIME_ALIAS}.UnsupportedReturnTypeError({UNSUPPORTED_RETURN!r})")
		return b.build()

	name_literal = repr(op.qualified_name)
	args = [p.name for p in op.params]
	n = len(args)

	b.add_statement(f"{_STATE} = self.verifake_state")
	b.begin_control_flow(f"if {_STATE}.verifying")
	b.begin_control_flow(f"if not {_STATE}.invocations")
	b.add_statement(f"raise {RUNTIME_ALIAS}.VerificationError({NO_INVOCATION!r})")
	b.end_control_flow()
	b.add_statement(f"{_INVOCATION} = {_STATE}.invocations.pop(0)")
	b.begin_control_flow(f"if {_INVOCATION}.function_name != {name_literal}")
	b.add_statement(
		f"raise {RUNTIME_ALIAS}.VerificationError("
		f'f"Expected function call {op.qualified_name}, {{{_INVOCATION}.function_name}} was called instead")'
	)
	b.end_control_flow()
	if args:
		b.add_statement(f"{_MATCHERS} = {_STATE}.parameter_matchers")
		# A single matcher (verify_ignore_params) applies to every parameter.
		if n > 1:
			b.begin_control_flow(f"if len({_MATCHERS}) == 1")
			b.add_statement(f"{_MATCHERS} = {_MATCHERS} * {n}")
			b.next_control_flow(f"elif len({_MATCHERS}) != {n}")
		else:
			b.begin_control_flow(f"if len({_MATCHERS}) != 1")
		b.add_statement(
			f"raise {RUNTIME_ALIAS}.VerificationError("
			f'f"Expected {n} parameter matchers, found {{len({_MATCHERS})}} instead")'
		)
		b.end_control_flow()
		for i, name in enumerate(args):
			recorded = f"{_INVOCATION}.parameters[{i}]"
			b.begin_control_flow(f"if not {_MATCHERS}[{i}]({name}, {recorded})")
			b.add_statement(
				f"raise {RUNTIME_ALIAS}.VerificationError("
				f'f"Expected argument {name}={{{name}!r}}, found {{{recorded}!r}} instead.")'
			)
			b.end_control_flow()
		b.add_statement(f"{_STATE}.parameter_matchers = [{RUNTIME_ALIAS}.equals]")
	b.next_control_flow("else")
	b.add_statement(
		f"{_STATE}.invocations.append({RUNTIME_ALIAS}.Invocation({name_literal}, {_arguments_tuple(args)}))"
	)
	b.end_control_flow()
	return b.build()


def synthesize_fake(interface: InterfaceDescriptor) -> FakeClassDescriptor:
	"""Build the fake class description for one interface."""
	class_name = fake_class_name(interface.qualname)
	methods = tuple(
		MethodSpec(operation=op, signature=render_signature(op), body=_method_body(op))
		for op in interface.operations
	)
	return FakeClassDescriptor(
		class_name=class_name,
		interface=interface,
		fields=state_fields(),
		methods=methods,
		package=interface.package,
		module=fake_module(interface.package, class_name),
	)


def render_import(ref: ImportRef) -> str:
	if ref.name is None:
		return f"import {ref.module} as {ref.local}" if ref.aliased else f"import {ref.module}"
	if ref.aliased:
		return f"from {ref.module} import {ref.name} as {ref.local}"
	return f"from {ref.module} import {ref.name}"


def _import_block(imports: Tuple[ImportRef, ...]) -> List[str]:
	runtime = sorted({render_import(r) for r in imports if not r.type_checking})
	typing_only = sorted({render_import(r) for r in imports if r.type_checking})

	lines: List[str] = []
	if typing_only:
		lines.append("from typing import TYPE_CHECKING")
		lines.append("")
	lines.append(RUNTIME_IMPORT)
	lines.extend(runtime)
	if typing_only:
		lines.append("")
		lines.append("if TYPE_CHECKING:")
		lines.extend(indent(typing_only, 1))
	return lines


def render_fake(fake: FakeClassDescriptor) -> SourceUnit:
	"""Render the module holding one fake class."""
	interface = fake.interface
	b = SourceBuilder()
	b.add_statement(f"{GENERATED_BANNER} from {interface.qualified_name}. Do not edit.")
	b.add_statement("from __future__ import annotations")
	b.add_blank()
	b.add_statements(_import_block(interface.imports))
	b.add_blank()
	b.add_blank()

	b.begin_control_flow(f"class {fake.class_name}({interface.qualname}, {RUNTIME_ALIAS}.Verifiable)")
	b.add_statement(f'"""Verifiable fake of `{interface.qualified_name}`."""')
	b.add_blank()
	b.begin_control_flow("def __init__(self) -> None")
	b.add_statement(f"self.verifake_state = {RUNTIME_ALIAS}.VerificationState(")
	b.add_statements(f"\t{f.name}={f.initializer}," for f in fake.fields)
	b.add_statement(")")
	b.end_control_flow()
	for method in fake.methods:
		b.add_blank()
		b.begin_control_flow(method.signature)
		b.add_statements(method.body)
		b.end_control_flow()
	b.end_control_flow()

	return SourceUnit(package=fake.package, module_name=fake.class_name, text=b.render())
