# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
verifake runtime: the pieces generated fakes and tests call into.

Generated code imports this package as `_verifake` and only uses names
exported here.
"""

from .errors import (
	MissingGeneratedCodeError,
	PreconditionError,
	UnsupportedReturnTypeError,
	UnsupportedTypeError,
	VerifakeError,
	VerificationError,
)
from .fakes import GENERATED_MODULE, GENERATED_PACKAGE, Verify, fake
from .parameter import Parameter, any_value, eq, same_as
from .state import (
	Invocation,
	Matcher,
	Verifiable,
	VerificationState,
	always,
	equals,
	state_of,
	type_identity,
)
from .verification import verify, verify_ignore_params, verify_params

__all__ = [
	"GENERATED_MODULE",
	"GENERATED_PACKAGE",
	"Invocation",
	"Matcher",
	"MissingGeneratedCodeError",
	"Parameter",
	"PreconditionError",
	"UnsupportedReturnTypeError",
	"UnsupportedTypeError",
	"Verifiable",
	"VerifakeError",
	"VerificationError",
	"VerificationState",
	"Verify",
	"always",
	"any_value",
	"eq",
	"equals",
	"fake",
	"same_as",
	"state_of",
	"type_identity",
	"verify",
	"verify_ignore_params",
	"verify_params",
]
