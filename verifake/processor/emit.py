# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source emission boundary.

The processor hands every generated module to a `CodeGenerator`; where the
text ends up (disk, memory) is the generator's business.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Protocol

from .model import SourceUnit
from .naming import FAKES_PACKAGE


class CodeGenerator(Protocol):
	def write(self, unit: SourceUnit) -> None:
		...


class FileCodeGenerator:
	"""
	Write units below `out_dir`, following their package path.

	The dispatch package goes below `dispatch_dir` when one is given. Fake
	modules always stay in `out_dir`, the tree their interfaces live in: a
	regular package only imports submodules from its own directory.

	A file whose content is already identical is left untouched so repeated
	runs do not change modification times.
	"""

	def __init__(self, out_dir: Path, dispatch_dir: Optional[Path] = None) -> None:
		self.out_dir = out_dir
		self.dispatch_dir = dispatch_dir
		self.written: List[Path] = []
		self.unchanged: List[Path] = []

	def write(self, unit: SourceUnit) -> None:
		root = self.out_dir
		if self.dispatch_dir is not None and unit.package == FAKES_PACKAGE:
			root = self.dispatch_dir
		path = root / unit.relative_path
		if path.exists() and path.read_text(encoding="utf-8") == unit.text:
			self.unchanged.append(path)
			return
		path.parent.mkdir(parents=True, exist_ok=True)
		path.write_text(unit.text, encoding="utf-8")
		self.written.append(path)


class InMemoryCodeGenerator:
	"""Collect units by qualified module name (dry runs and tests)."""

	def __init__(self) -> None:
		self.units: Dict[str, SourceUnit] = {}

	def write(self, unit: SourceUnit) -> None:
		self.units[unit.qualified_module] = unit
