# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
from pathlib import Path

import pytest

from verifake import fake
from verifake.processor.cli import main


def _write_file(path: Path, text: str) -> None:
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(text, encoding="utf-8")


def _project(root: Path, wiring: str) -> None:
	_write_file(root / "alerts" / "__init__.py", "")
	_write_file(
		root / "alerts" / "ports.py",
		"from typing import Protocol\n"
		"\n"
		"class Pager(Protocol):\n"
		"\tdef page(self, who: str, urgent: bool = False) -> None: ...\n"
		"\n"
		"class Console:\n"
		"\tpass\n",
	)
	_write_file(root / "wiring.py", wiring)


GOOD = (
	"from typing import Annotated\n"
	"from verifake import Verify\n"
	"from alerts.ports import Pager\n"
	"pager: Annotated[Pager, Verify]\n"
)

MIXED = GOOD + "from alerts.ports import Console\nconsole: Annotated[Console, Verify]\n"


def test_cli_writes_fake_and_dispatch_modules(tmp_path: Path, capsys):
	_project(tmp_path, GOOD)

	assert main(["--source-root", str(tmp_path)]) == 0

	assert (tmp_path / "alerts" / "Pager_Fake.py").read_text(encoding="utf-8").startswith("# Generated by verifake")
	assert (tmp_path / "verifake_generated" / "Fakes.py").exists()
	captured = capsys.readouterr()
	assert captured.out == ""
	assert captured.err == ""


def test_cli_verbose_reports_progress(tmp_path: Path, capsys):
	_project(tmp_path, GOOD)

	assert main(["--source-root", str(tmp_path), "-v"]) == 0
	assert "info: Generating fake for: alerts.ports.Pager" in capsys.readouterr().err


def test_cli_rejections_exit_one_but_still_generate(tmp_path: Path, capsys):
	_project(tmp_path, MIXED)
	out_dir = tmp_path / "gen"

	assert main(["--source-root", str(tmp_path), "--out", str(out_dir)]) == 1

	err = capsys.readouterr().err
	assert f"{tmp_path / 'wiring.py'}:6:1: error: Only interfaces can be verified" in err
	assert (tmp_path / "alerts" / "Pager_Fake.py").exists()
	assert (out_dir / "verifake_generated" / "Fakes.py").exists()
	assert not (out_dir / "alerts").exists()


def test_cli_json_output(tmp_path: Path, capsys):
	_project(tmp_path, MIXED)

	assert main(["--source-root", str(tmp_path), "--json", "--dry-run"]) == 1

	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 1
	assert payload["modules"] == ["alerts.Pager_Fake", "verifake_generated.Fakes"]
	assert [(d["severity"], d["phase"], d["message"]) for d in payload["diagnostics"]] == [
		("error", "filter", "Only interfaces can be verified"),
		("info", "generate", "Generating fake for: alerts.ports.Pager"),
	]
	assert payload["diagnostics"][0]["line"] == 6
	assert not (tmp_path / "verifake_generated").exists()


def test_cli_dry_run_lists_paths(tmp_path: Path, capsys):
	_project(tmp_path, GOOD)

	assert main(["--source-root", str(tmp_path), "--dry-run"]) == 0

	assert capsys.readouterr().out.splitlines() == ["alerts/Pager_Fake.py", "verifake_generated/Fakes.py"]
	assert not (tmp_path / "alerts" / "Pager_Fake.py").exists()


def test_cli_empty_pass_writes_nothing(tmp_path: Path):
	_project(tmp_path, "x = 1\n")

	assert main(["--source-root", str(tmp_path)]) == 0
	assert sorted(p.name for p in tmp_path.rglob("*_Fake.py")) == []
	assert not (tmp_path / "verifake_generated").exists()


def test_cli_scans_only_given_paths(tmp_path: Path):
	_project(tmp_path, GOOD)
	_write_file(tmp_path / "other.py", "")

	assert main(["--source-root", str(tmp_path), str(tmp_path / "other.py")]) == 0
	assert not (tmp_path / "verifake_generated").exists()


def test_cli_usage_errors(tmp_path: Path, capsys):
	with pytest.raises(SystemExit) as exc:
		main(["--source-root", str(tmp_path / "missing")])
	assert exc.value.code == 2
	assert "source root is not a directory" in capsys.readouterr().err

	with pytest.raises(SystemExit) as exc:
		main(["--source-root", str(tmp_path), str(tmp_path / "nope.py")])
	assert exc.value.code == 2


def test_cli_out_dir_fakes_stay_importable(project, tmp_path: Path, monkeypatch):
	_project(project.root, GOOD)
	out_dir = tmp_path / "gen"

	assert main(["--source-root", str(project.root), "--out", str(out_dir)]) == 0

	monkeypatch.syspath_prepend(str(out_dir))
	ports = project.load("alerts.ports")
	pager = fake(ports.Pager)
	assert type(pager).__module__ == "alerts.Pager_Fake"
	pager.page("oncall")
	assert [inv.parameters for inv in pager.verifake_state.invocations] == [("oncall", False)]
