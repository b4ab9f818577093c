# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Textual Python source builder used by the fake and dispatch synthesizers.

Control flow is opened with a header (`if x`, `else`) and closed explicitly,
so the synthesizers read top to bottom like the code they emit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

INDENT = "\t"


@dataclass
class SourceBuilder:
	lines: List[str] = field(default_factory=list)
	depth: int = 0

	def add_statement(self, text: str) -> "SourceBuilder":
		self.lines.append(INDENT * self.depth + text)
		return self

	def add_statements(self, texts: Iterable[str]) -> "SourceBuilder":
		for text in texts:
			self.add_statement(text)
		return self

	def add_blank(self) -> "SourceBuilder":
		self.lines.append("")
		return self

	def begin_control_flow(self, header: str) -> "SourceBuilder":
		self.add_statement(f"{header}:")
		self.depth += 1
		return self

	def next_control_flow(self, header: str) -> "SourceBuilder":
		self.depth -= 1
		return self.begin_control_flow(header)

	def end_control_flow(self) -> "SourceBuilder":
		if self.depth == 0:
			raise ValueError("end_control_flow without matching begin_control_flow")
		self.depth -= 1
		return self

	def build(self) -> Tuple[str, ...]:
		if self.depth != 0:
			raise ValueError(f"unterminated control flow (depth {self.depth})")
		return tuple(self.lines)

	def render(self) -> str:
		return "\n".join(self.build()) + "\n"


def indent(lines: Iterable[str], depth: int) -> List[str]:
	"""Indent non-empty lines by `depth` levels."""
	prefix = INDENT * depth
	return [prefix + line if line else line for line in lines]
