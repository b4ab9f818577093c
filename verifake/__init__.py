# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
verifake: generated, verifiable fakes for `typing.Protocol` interfaces.

`verifake.core` is the runtime used by tests and generated code;
`verifake.processor` is the generator (`verifake` on the command line).
"""

from .core import (
	Parameter,
	Verify,
	any_value,
	eq,
	fake,
	same_as,
	verify,
	verify_ignore_params,
	verify_params,
)

__all__ = [
	"Parameter",
	"Verify",
	"any_value",
	"eq",
	"fake",
	"same_as",
	"verify",
	"verify_ignore_params",
	"verify_params",
]
