# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Verification helpers operating on generated fakes.

Typical use:

	analytics = fake(Analytics)
	service.run(analytics)

	with verify(analytics):
		analytics.track("started")
		verify_params(analytics.count, eq("clicks"), any_value(0))
		verify_ignore_params(analytics.flush, None)

Calls made inside `verify` are checked in order against the calls recorded
before it. The helpers return whatever the fake method returns, so an
`async` operation is verified with `await verify_params(...)`.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Iterator, List

from .errors import PreconditionError, VerificationError
from .parameter import Parameter
from .state import VerificationState, always, state_of


def _verifying_state(func: Callable[..., Any], helper: str) -> VerificationState:
	target = getattr(func, "__self__", None)
	state = state_of(target)
	if not state.verifying:
		raise PreconditionError(f"You can only call {helper} inside a verify block")
	return state


@contextmanager
def verify(*fakes: object) -> Iterator[None]:
	"""
	Switch `fakes` into verifying mode for the duration of the block.

	On a clean exit every recorded invocation must have been verified.
	"""
	if not fakes:
		raise PreconditionError("verify needs at least one fake")
	states: List[VerificationState] = [state_of(f) for f in fakes]
	for state in states:
		if state.verifying:
			raise PreconditionError("Fake is already being verified")

	for state in states:
		state.verifying = True
	try:
		yield
	finally:
		for state in states:
			state.verifying = False

	for obj, state in zip(fakes, states):
		if state.invocations:
			names = ", ".join(inv.function_name for inv in state.invocations)
			raise VerificationError(
				f"Expected no more invocations on {type(obj).__name__}, found {names} instead"
			)


def verify_params(func: Callable[..., Any], *params: Parameter[Any]) -> Any:
	"""
	Verify one call of `func` (a bound fake method) matching `params`.

	Each parameter's matcher is consumed by exactly this verification.
	"""
	state = _verifying_state(func, "verify_params")
	if not params:
		raise PreconditionError("verify_params needs at least one Parameter")
	state.parameter_matchers = [p.matcher for p in params]
	return func(*(p.expected for p in params))


def verify_ignore_params(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
	"""Verify one call of `func` without comparing any of its arguments."""
	state = _verifying_state(func, "verify_ignore_params")
	state.parameter_matchers = [always]
	return func(*args, **kwargs)
