# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Names and placement of generated code.

Rules:
  - qualified interface name: `<module>.<class qualname>`; it is both the
    dispatch key and the prefix of every recorded operation name, so equally
    named operations of different interfaces never compare equal.
  - fake class: `<simple name>_Fake` (nested classes join their qualname
    with `_`).
  - fake module: `<interface package>.<fake class>`, i.e. the fake lives
    next to the interface.
  - dispatch module: `verifake_generated.Fakes`, shared by all interfaces;
    fakes are imported there under `<safe package>_<fake class>` aliases.
"""

from __future__ import annotations

from verifake.core import GENERATED_MODULE, GENERATED_PACKAGE

FAKE_SUFFIX = "_Fake"

# Locals and module aliases introduced by generated code. Interface parameter
# names must not start with this prefix.
RESERVED_PREFIX = "_verifake_"
RUNTIME_ALIAS = "_verifake"

FAKES_PACKAGE = GENERATED_PACKAGE
FAKES_MODULE = GENERATED_MODULE


def qualified_name(module: str, qualname: str) -> str:
	return f"{module}.{qualname}" if module else qualname


def operation_name(interface_qualified_name: str, operation: str) -> str:
	return f"{interface_qualified_name}.{operation}"


def fake_class_name(qualname: str) -> str:
	return qualname.replace(".", "_") + FAKE_SUFFIX


def fake_module(package: str, class_name: str) -> str:
	return f"{package}.{class_name}" if package else class_name


def safe_package(package: str) -> str:
	"""
	Package turned into an identifier prefix.

	The root package has no name of its own, so it maps to `_root`.
	"""
	if not package:
		return "_root"
	return package.replace(".", "_")


def dispatch_alias(package: str, class_name: str) -> str:
	return f"{safe_package(package)}_{class_name}"


def reserved(name: str) -> str:
	return RESERVED_PREFIX + name


def is_reserved(name: str) -> bool:
	"""True for names generated code binds itself (runtime alias, locals)."""
	return name == RUNTIME_ALIAS or name.startswith(RESERVED_PREFIX)
