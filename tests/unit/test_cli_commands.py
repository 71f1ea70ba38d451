"""Unit tests for the CLI: Typer command registration and basic behavior.

Exercised via typer.testing.CliRunner against a throwaway project with a
make step importable from a temp directory.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from pubforge.cli.app import app

runner = CliRunner()

_MAKE_MODULE = '''
def make(options):
    return [
        {"artifacts": ["out/make/app-linux.tar.gz"], "platform": "linux", "arch": "x64"},
        {"artifacts": ["out/make/app-linux.deb"], "platform": "linux", "arch": "x64"},
    ]
'''


@pytest.fixture
def cli_project(tmp_path: Path, monkeypatch) -> Path:
    """A project configured with the local_file target and an importable make step."""
    module_dir = tmp_path / "modules"
    module_dir.mkdir()
    (module_dir / "pubforge_cli_make.py").write_text(_MAKE_MODULE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(module_dir))

    project = tmp_path / "project"
    project.mkdir()
    (project / "pubforge.toml").write_text(
        'project_name = "cli_app"\n'
        'publishers = ["local_file"]\n\n'
        "[extra]\n"
        'make = "pubforge_cli_make:make"\n',
        encoding="utf-8",
    )
    return project


def _manifests(project: Path) -> list[Path]:
    return sorted((project / "out" / "publish-manifests").glob("*.json"))


class TestCliApp:
    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "publish" in result.output
        assert "snapshots" in result.output
        assert "targets" in result.output

    def test_targets_lists_builtins(self):
        result = runner.invoke(app, ["targets"])
        assert result.exit_code == 0
        assert "noop" in result.output
        assert "local_file" in result.output


class TestPublishCommand:
    def test_live_publish(self, cli_project: Path):
        result = runner.invoke(app, ["publish", str(cli_project), "--non-interactive"])
        assert result.exit_code == 0, result.output
        assert "Publish complete" in result.output
        assert len(_manifests(cli_project)) == 1

    def test_dry_run_then_resume(self, cli_project: Path):
        result = runner.invoke(app, ["publish", str(cli_project), "--dry-run", "--non-interactive"])
        assert result.exit_code == 0, result.output
        assert _manifests(cli_project) == []

        listed = runner.invoke(app, ["snapshots", str(cli_project)])
        assert listed.exit_code == 0
        assert "Snapshot Records" in listed.output

        resumed = runner.invoke(
            app, ["publish", str(cli_project), "--dry-run-resume", "--non-interactive"]
        )
        assert resumed.exit_code == 0, resumed.output
        assert len(_manifests(cli_project)) == 1

    def test_explicit_target(self, cli_project: Path):
        result = runner.invoke(
            app, ["publish", str(cli_project), "-t", "noop", "--non-interactive"]
        )
        assert result.exit_code == 0, result.output
        assert _manifests(cli_project) == []

    def test_flags_mutually_exclusive(self, cli_project: Path):
        result = runner.invoke(
            app, ["publish", str(cli_project), "--dry-run", "--dry-run-resume"]
        )
        assert result.exit_code == 1
        assert "mutually exclusive" in result.output

    def test_unknown_target_fails(self, cli_project: Path):
        result = runner.invoke(
            app, ["publish", str(cli_project), "-t", "nowhere", "--non-interactive"]
        )
        assert result.exit_code == 1
        assert "Publish failed" in result.output

    def test_missing_make_fails(self, tmp_path: Path):
        result = runner.invoke(app, ["publish", str(tmp_path), "--non-interactive"])
        assert result.exit_code == 1
        assert "Publish failed" in result.output

    def test_snapshots_empty(self, tmp_path: Path):
        result = runner.invoke(app, ["snapshots", str(tmp_path)])
        assert result.exit_code == 0
        assert "No snapshot records" in result.output
