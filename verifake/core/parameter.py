# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Expected parameters for `verify_params`.

A `Parameter` pairs the value passed to the fake while verifying with the
predicate used to compare it against the recorded argument.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from .state import always, equals

T = TypeVar("T")


@dataclass(frozen=True)
class Parameter(Generic[T]):
	"""
	An expected argument value and its matcher.

	`matcher(expected, actual)` must return True when the recorded `actual`
	argument satisfies the expectation.
	"""

	expected: T
	matcher: Callable[[T, T], bool]


def eq(expected: T) -> Parameter[T]:
	"""Expect an argument equal (`==`) to `expected`."""
	return Parameter(expected, equals)


def same_as(expected: T, matcher: Callable[[T, T], bool]) -> Parameter[T]:
	"""Expect an argument accepted by a custom `matcher`."""
	return Parameter(expected, matcher)


def any_value(anything: T) -> Parameter[T]:
	"""
	Accept whatever argument was recorded.

	`anything` is only used to make the verifying call; its value is ignored.
	"""
	return Parameter(anything, always)
