# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
verifake generator.

Turns `Protocol` interfaces referenced by `Annotated[..., Verify]` bindings
into fake classes plus a shared dispatch module. Exposes the CLI entrypoint
and the in-process API used by tests and build hooks.
"""

from .cli import main
from .diagnostics import Diagnostic, DiagnosticSink, Span
from .discovery import discover
from .processor import FakeProcessor, GenerateOptions, ProcessResult, generate, generate_sources

__all__ = [
	"Diagnostic",
	"DiagnosticSink",
	"FakeProcessor",
	"GenerateOptions",
	"ProcessResult",
	"Span",
	"discover",
	"generate",
	"generate_sources",
	"main",
]
