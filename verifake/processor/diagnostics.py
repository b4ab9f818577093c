# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Diagnostics produced while generating fakes.

Rejected declarations and progress messages are collected here instead of
being raised, so one bad declaration never aborts a generation pass. The CLI
decides how to print them (human-readable lines or JSON).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass(frozen=True)
class Span:
	"""Source location; all fields None denotes an unknown location."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None

	def __str__(self) -> str:
		line = "?" if self.line is None else str(self.line)
		column = "?" if self.column is None else str(self.column)
		return f"{self.file or '<unknown>'}:{line}:{column}"


@dataclass
class Diagnostic:
	"""One generator diagnostic (error or info)."""

	message: str
	severity: str = "error"
	# Pass that emitted the diagnostic: "parse", "filter", "generate".
	phase: Optional[str] = None
	span: Span = field(default_factory=Span)
	notes: List[str] = field(default_factory=list)


class DiagnosticSink:
	"""Ordered accumulator for diagnostics of one generation pass."""

	def __init__(self) -> None:
		self.diagnostics: List[Diagnostic] = []

	def error(self, message: str, span: Optional[Span] = None, *, phase: Optional[str] = None) -> None:
		self.diagnostics.append(
			Diagnostic(message=message, severity="error", phase=phase, span=span or Span())
		)

	def info(self, message: str, *, phase: Optional[str] = None) -> None:
		self.diagnostics.append(Diagnostic(message=message, severity="info", phase=phase))

	@property
	def errors(self) -> List[Diagnostic]:
		return [d for d in self.diagnostics if d.severity == "error"]

	@property
	def has_errors(self) -> bool:
		return any(d.severity == "error" for d in self.diagnostics)


def format_diagnostic(diag: Diagnostic) -> str:
	if diag.severity == "info":
		return f"{diag.severity}: {diag.message}"
	return f"{diag.span}: {diag.severity}: {diag.message}"


def diagnostic_to_json(diag: Diagnostic) -> dict[str, Any]:
	return {
		"phase": diag.phase,
		"message": diag.message,
		"severity": diag.severity,
		"file": diag.span.file,
		"line": diag.span.line,
		"column": diag.span.column,
		"notes": list(diag.notes),
	}
