# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Entry point for obtaining fakes, plus the `Verify` marker.

`fake()` forwards to the dispatch module written by the generator
(`verifake_generated.Fakes`). Until the generator has run, that module does not
exist and `fake()` explains what is missing.
"""

from __future__ import annotations

import importlib
from typing import Any, TypeVar, cast

from .errors import MissingGeneratedCodeError

T = TypeVar("T")

GENERATED_PACKAGE = "verifake_generated"
GENERATED_MODULE = "Fakes"


class _VerifyMarker:
	"""
	Marks a typed binding whose interface should get a generated fake.

	Used as `Annotated` metadata:

		analytics: Annotated[Analytics, Verify] = fake(Analytics)

	Applying it as a decorator is accepted at runtime (the target is returned
	unchanged) but rejected by the generator.
	"""

	def __call__(self, target: Any) -> Any:
		return target

	def __repr__(self) -> str:
		return "Verify"


Verify = _VerifyMarker()


def fake(cls: type[T]) -> T:
	"""Create a fresh fake implementation of the interface `cls`."""
	dotted = f"{GENERATED_PACKAGE}.{GENERATED_MODULE}"
	try:
		generated = importlib.import_module(dotted)
	except ModuleNotFoundError as exc:
		if exc.name not in (GENERATED_PACKAGE, dotted):
			raise
		raise MissingGeneratedCodeError(
			"Generated code is missing. Please run the verifake generator."
		) from exc
	return cast(T, generated.fake(cls))
