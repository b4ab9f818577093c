# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Exceptions raised at test time by generated fakes and the verification helpers.

The generator itself never raises these; it only emits code that does.
"""

from __future__ import annotations


class VerifakeError(Exception):
	"""Base class for all verifake runtime errors."""


class VerificationError(VerifakeError, AssertionError):
	"""
	A verifying call did not match the recorded invocations.

	Also an `AssertionError`: pytest reports it as a failed assertion.
	"""


class UnsupportedReturnTypeError(VerifakeError):
	"""A faked operation with a non-`None` return type was called."""


class UnsupportedTypeError(VerifakeError, TypeError):
	"""No fake was generated for the requested type."""


class PreconditionError(VerifakeError):
	"""A verification helper was used on a non-fake or outside a verify block."""


class MissingGeneratedCodeError(VerifakeError):
	"""`fake()` was called before the generator produced the dispatch module."""
