# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
`verifake` command line.

Scans Python sources for `Annotated[Interface, Verify]` bindings and writes a
fake module next to every interface plus `verifake_generated/Fakes.py` (below
`--out` when given).

Exit codes: 0 success, 1 some declaration was rejected (fakes for the other
interfaces are still written), 2 usage or I/O error.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from .diagnostics import DiagnosticSink, diagnostic_to_json, format_diagnostic
from .processor import GenerateOptions, generate


def _build_parser() -> argparse.ArgumentParser:
	p = argparse.ArgumentParser(
		prog="verifake",
		description="Generate verifiable fakes for Protocol interfaces marked with Verify",
	)
	p.add_argument(
		"paths",
		nargs="*",
		type=Path,
		help="Source files or directories to scan (default: the source root)",
	)
	p.add_argument(
		"--source-root",
		type=Path,
		default=Path("."),
		help="Directory module names are derived from (default: .)",
	)
	p.add_argument(
		"--out",
		type=Path,
		default=None,
		help=(
			"Directory the verifake_generated package is written to (default: the source root); "
			"fakes are always written beside their interface"
		),
	)
	p.add_argument("--json", action="store_true", help="Emit machine-readable JSON on stdout")
	p.add_argument("-v", "--verbose", action="store_true", help="Also print progress messages")
	p.add_argument(
		"--dry-run",
		action="store_true",
		help="Generate in memory and list the modules that would be written",
	)
	return p


def main(argv: List[str] | None = None) -> int:
	p = _build_parser()
	args = p.parse_args(argv)

	source_root: Path = args.source_root
	if not source_root.is_dir():
		p.error(f"source root is not a directory: {source_root}")
	paths: List[Path] = list(args.paths) or [source_root]
	for path in paths:
		if not path.exists():
			p.error(f"no such file or directory: {path}")

	opts = GenerateOptions(
		paths=paths,
		source_root=source_root,
		out_dir=args.out if args.out is not None else source_root,
		dry_run=bool(args.dry_run),
	)
	sink = DiagnosticSink()
	try:
		result = generate(opts, sink)
	except OSError as err:
		if args.json:
			payload: Dict[str, Any] = {
				"exit_code": 2,
				"diagnostics": [
					{"phase": "io", "message": str(err), "severity": "error", "file": None, "line": None, "column": None}
				],
				"modules": [],
			}
			print(json.dumps(payload))
		else:
			print(f"error: {err}", file=sys.stderr)
		return 2

	exit_code = 1 if sink.has_errors else 0
	if args.json:
		payload = {
			"exit_code": exit_code,
			"diagnostics": [diagnostic_to_json(d) for d in sink.diagnostics],
			"modules": [unit.qualified_module for unit in result.units],
		}
		print(json.dumps(payload))
		return exit_code

	for diag in sink.diagnostics:
		if diag.severity == "info" and not args.verbose:
			continue
		print(format_diagnostic(diag), file=sys.stderr)
	if args.dry_run:
		for unit in result.units:
			print(unit.relative_path.as_posix())
	return exit_code
