# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Verification state shared by every generated fake.

A generated fake embeds one `VerificationState` (composition, not mixin
fields) and exposes it as `verifake_state`. The helpers in
`verifake.core.verification` only ever talk to that structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Tuple

from .errors import PreconditionError

Matcher = Callable[[Any, Any], bool]

MUST_BE_VERIFIABLE = "Only fakes generated by verifake can be verified"


def equals(expected: Any, actual: Any) -> bool:
	"""Default parameter matcher: plain `==`."""
	return expected == actual


def always(expected: Any, actual: Any) -> bool:
	"""Matcher that accepts any pair of values."""
	return True


def default_matchers() -> List[Matcher]:
	return [equals]


@dataclass(frozen=True)
class Invocation:
	"""
	One recorded call on a fake.

	`function_name` is the qualified operation name
	(`<module>.<Interface>.<method>`); `parameters` holds the argument values
	in declaration order, whatever their type.
	"""

	function_name: str
	parameters: Tuple[Any, ...] = ()


@dataclass
class VerificationState:
	invocations: List[Invocation] = field(default_factory=list)
	parameter_matchers: List[Matcher] = field(default_factory=default_matchers)
	verifying: bool = False


class Verifiable:
	"""Capability implemented by every generated fake."""

	verifake_state: VerificationState


def state_of(obj: object) -> VerificationState:
	"""Return the verification state of a fake, or raise if `obj` is not one."""
	if not isinstance(obj, Verifiable):
		raise PreconditionError(f"{MUST_BE_VERIFIABLE}, got {type(obj).__name__}")
	return obj.verifake_state


def type_identity(cls: type) -> str:
	"""Runtime identity of a class, as used for dispatch keys."""
	return f"{cls.__module__}.{cls.__qualname__}"
