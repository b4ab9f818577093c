# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Fixtures for generator tests.

`project` is a throwaway source tree on `sys.path`. Modules imported from it
(including the generated `verifake_generated` package) are dropped from
`sys.modules` after each test so every test sees only its own sources.
"""

from __future__ import annotations

import importlib
import sys
import textwrap
from pathlib import Path
from types import ModuleType
from typing import Iterator, Tuple

import pytest

from verifake.core import GENERATED_PACKAGE
from verifake.processor import DiagnosticSink, GenerateOptions, ProcessResult, generate


class Project:
	def __init__(self, root: Path) -> None:
		self.root = root

	def write(self, rel: str, text: str) -> Path:
		path = self.root / rel
		path.parent.mkdir(parents=True, exist_ok=True)
		path.write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")
		return path

	def generate(self, dry_run: bool = False) -> Tuple[ProcessResult, DiagnosticSink]:
		sink = DiagnosticSink()
		opts = GenerateOptions(paths=[self.root], source_root=self.root, out_dir=self.root, dry_run=dry_run)
		return generate(opts, sink), sink

	def load(self, module: str) -> ModuleType:
		importlib.invalidate_caches()
		return importlib.import_module(module)


def _owned_by(module: ModuleType | None, name: str, root: Path) -> bool:
	if name == GENERATED_PACKAGE or name.startswith(GENERATED_PACKAGE + "."):
		return True
	origin = getattr(module, "__file__", None)
	return origin is not None and Path(origin).resolve().is_relative_to(root.resolve())


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Project]:
	before = set(sys.modules)
	monkeypatch.syspath_prepend(str(tmp_path))
	yield Project(tmp_path)
	for name in set(sys.modules) - before:
		if _owned_by(sys.modules.get(name), name, tmp_path):
			del sys.modules[name]
