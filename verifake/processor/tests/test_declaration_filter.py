# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from pathlib import Path

from verifake.processor import DiagnosticSink, discover
from verifake.processor.declaration_filter import ONLY_INTERFACES, ONLY_PROPERTIES, filter_declarations
from verifake.processor.model import DeclKind, TypeKind


def _write_file(path: Path, text: str) -> None:
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(text, encoding="utf-8")


def _discover(root: Path):
	sink = DiagnosticSink()
	result = discover([root], root, sink)
	return result, sink


def _interfaces(root: Path):
	"""Write a small package with one interface, one class and one enum."""
	_write_file(root / "depot" / "__init__.py", "from .ports import Mailer\n")
	_write_file(
		root / "depot" / "ports.py",
		"from enum import Enum\n"
		"from typing import Protocol\n"
		"\n"
		"class Mailer(Protocol):\n"
		"\tdef send(self, to: str) -> None: ...\n"
		"\n"
		"class SmtpMailer:\n"
		"\tdef send(self, to: str) -> None: ...\n"
		"\n"
		"class Color(Enum):\n"
		"\tRED = 1\n",
	)


def test_declarations_are_found_in_file_order(tmp_path: Path):
	_interfaces(tmp_path)
	_write_file(
		tmp_path / "wiring.py",
		"from typing import Annotated\n"
		"import verifake\n"
		"from verifake import Verify as V\n"
		"from depot.ports import Mailer\n"
		"\n"
		"mailer: Annotated[Mailer, V]\n"
		"\n"
		"class Suite:\n"
		"\tother: Annotated['Mailer', verifake.Verify]\n"
		"\n"
		"\t@verifake.Verify\n"
		"\tdef helper(self) -> None: ...\n",
	)
	result, sink = _discover(tmp_path)

	assert not sink.diagnostics
	assert [(d.name, d.kind) for d in result.declarations] == [
		("mailer", DeclKind.PROPERTY),
		("Suite.other", DeclKind.PROPERTY),
		("Suite.helper", DeclKind.FUNCTION),
	]
	mailer = result.declarations[0]
	assert mailer.resolved is not None
	assert mailer.resolved.kind is TypeKind.INTERFACE
	assert mailer.type_text == "Mailer"
	assert result.declarations[1].resolved is mailer.resolved


def test_types_resolve_through_relative_imports_and_reexports(tmp_path: Path):
	_interfaces(tmp_path)
	_write_file(tmp_path / "depot" / "tests" / "__init__.py", "")
	_write_file(
		tmp_path / "depot" / "tests" / "wiring.py",
		"from typing import Annotated\n"
		"from verifake.core import Verify\n"
		"import depot\n"
		"from .. import ports\n"
		"from ..ports import SmtpMailer, Color\n"
		"\n"
		"a: Annotated[depot.Mailer, Verify]\n"
		"b: Annotated[ports.Mailer, Verify]\n"
		"c: Annotated[SmtpMailer, Verify]\n"
		"d: Annotated[Color, Verify]\n"
		"e: Annotated[list[int], Verify]\n",
	)
	result, _ = _discover(tmp_path)
	kinds = {d.name: (d.resolved.kind if d.resolved else None) for d in result.declarations}

	assert kinds == {
		"a": TypeKind.INTERFACE,
		"b": TypeKind.INTERFACE,
		"c": TypeKind.CLASS,
		"d": TypeKind.ENUM,
		"e": None,
	}


def test_non_properties_and_non_interfaces_are_rejected(tmp_path: Path):
	_interfaces(tmp_path)
	_write_file(
		tmp_path / "wiring.py",
		"from typing import Annotated, Callable\n"
		"from verifake import Verify\n"
		"from depot.ports import Color, Mailer, SmtpMailer\n"
		"\n"
		"@Verify\n"
		"class Wrong: ...\n"
		"\n"
		"@Verify\n"
		"def also_wrong() -> None: ...\n"
		"\n"
		"smtp: Annotated[SmtpMailer, Verify]\n"
		"color: Annotated[Color, Verify]\n"
		"callback: Annotated[Callable[[], None], Verify]\n"
		"mailer: Annotated[Mailer, Verify]\n",
	)
	result, sink = _discover(tmp_path)
	eligible = filter_declarations(result.declarations, sink)

	assert list(eligible) == ["depot.ports.Mailer"]
	assert [d.message for d in sink.errors] == [
		ONLY_PROPERTIES,
		ONLY_PROPERTIES,
		ONLY_INTERFACES,
		ONLY_INTERFACES,
		ONLY_INTERFACES,
	]
	assert all(d.phase == "filter" for d in sink.errors)
	assert [d.span.line for d in sink.errors] == [6, 9, 11, 12, 13]


def test_duplicate_declarations_keep_first_occurrence(tmp_path: Path):
	_interfaces(tmp_path)
	_write_file(
		tmp_path / "a_wiring.py",
		"from typing import Annotated\n"
		"from verifake import Verify\n"
		"from depot import Mailer\n"
		"first: Annotated[Mailer, Verify]\n"
		"second: Annotated[Mailer, Verify]\n",
	)
	_write_file(
		tmp_path / "b_wiring.py",
		"from typing import Annotated\n"
		"from verifake import Verify\n"
		"from depot.ports import Mailer\n"
		"third: Annotated[Mailer, Verify]\n",
	)
	result, sink = _discover(tmp_path)
	eligible = filter_declarations(result.declarations, sink)

	assert len(result.declarations) == 3
	assert list(eligible) == ["depot.ports.Mailer"]
	assert not sink.diagnostics


def test_unmarked_annotations_are_ignored(tmp_path: Path):
	_interfaces(tmp_path)
	_write_file(
		tmp_path / "wiring.py",
		"from typing import Annotated\n"
		"from depot.ports import Mailer\n"
		"Verify = object()\n"
		"plain: Mailer\n"
		"other: Annotated[Mailer, 'Verify']\n"
		"local: Annotated[Mailer, Verify]\n",
	)
	result, _ = _discover(tmp_path)
	assert result.declarations == []


def test_syntax_errors_are_reported_and_skipped(tmp_path: Path):
	_interfaces(tmp_path)
	_write_file(tmp_path / "broken.py", "def oops(:\n")
	result, sink = _discover(tmp_path)

	assert [m.name for m in result.modules] == ["depot", "depot.ports"]
	assert len(sink.errors) == 1
	err = sink.errors[0]
	assert err.phase == "parse"
	assert err.message.startswith("syntax error")
	assert err.span.file is not None and err.span.file.endswith("broken.py")


def test_generated_modules_are_not_scanned(tmp_path: Path):
	_interfaces(tmp_path)
	_write_file(
		tmp_path / "depot" / "Mailer_Fake.py",
		"# Generated by verifake from depot.ports.Mailer. Do not edit.\n"
		"from typing import Annotated\n"
		"from verifake import Verify\n"
		"from depot.ports import SmtpMailer\n"
		"x: Annotated[SmtpMailer, Verify]\n",
	)
	result, _ = _discover(tmp_path)
	assert "depot.Mailer_Fake" not in [m.name for m in result.modules]
	assert result.declarations == []


def test_parameters_locals_and_instance_attributes(tmp_path: Path):
	_interfaces(tmp_path)
	_write_file(
		tmp_path / "wiring.py",
		"from typing import Annotated\n"
		"from verifake import Verify\n"
		"from depot.ports import Mailer\n"
		"\n"
		"def test_send(mailer: Annotated[Mailer, Verify]) -> None:\n"
		"\tlocal: Annotated[Mailer, Verify] = mailer\n"
		"\n"
		"class TestSuite:\n"
		"\tdef setup_method(self) -> None:\n"
		"\t\tself.mailer: Annotated[Mailer, Verify] = object()\n"
		"\t\tif True:\n"
		"\t\t\tself.backup: Annotated['Mailer', Verify] = object()\n",
	)
	result, sink = _discover(tmp_path)

	assert [(d.name, d.kind) for d in result.declarations] == [
		("test_send.mailer", DeclKind.PARAMETER),
		("test_send.<locals>.local", DeclKind.VARIABLE),
		("TestSuite.mailer", DeclKind.PROPERTY),
		("TestSuite.backup", DeclKind.PROPERTY),
	]
	assert all(d.resolved is not None and d.resolved.kind is TypeKind.INTERFACE for d in result.declarations)

	eligible = filter_declarations(result.declarations, sink)
	assert list(eligible) == ["depot.ports.Mailer"]
	assert [(d.message, d.span.line) for d in sink.errors] == [
		(ONLY_PROPERTIES, 5),
		(ONLY_PROPERTIES, 6),
	]
	assert sink.errors[0].span.column == 15


def test_coding_cookies_are_honoured(tmp_path: Path):
	_interfaces(tmp_path)
	(tmp_path / "legacy.py").write_bytes(
		b"# -*- coding: latin-1 -*-\n"
		b"from typing import Annotated\n"
		b"from verifake import Verify\n"
		b"from depot.ports import Mailer\n"
		b"caf\xe9 = '\xe9'\n"
		b"mailer: Annotated[Mailer, Verify]\n"
	)
	result, sink = _discover(tmp_path)

	assert not sink.diagnostics
	assert "legacy" in [m.name for m in result.modules]
	assert [d.name for d in result.declarations] == ["mailer"]


def test_undecodable_sources_are_reported_and_skipped(tmp_path: Path):
	_interfaces(tmp_path)
	(tmp_path / "binary.py").write_bytes(b"name = '\xff\xfe'\n")
	result, sink = _discover(tmp_path)

	assert [m.name for m in result.modules] == ["depot", "depot.ports"]
	assert len(sink.errors) == 1
	assert sink.errors[0].phase == "parse"
	assert sink.errors[0].span.file is not None and sink.errors[0].span.file.endswith("binary.py")
