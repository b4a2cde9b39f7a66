"""Tests for clipnote init and the top-level app."""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from clipnote.cli.main import app
from clipnote.db.connection import Database
from clipnote.db.migrations import current_version

runner = CliRunner()


def test_init_creates_db_and_config(project: Path) -> None:
    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0, result.output
    assert "Created database" in result.output
    assert (project / ".clipnote.db").exists()
    assert (project / "clipnote.yaml").exists()

    with Database(project / ".clipnote.db") as conn:
        assert current_version(conn) == 1


def test_init_twice_reports_found(project: Path) -> None:
    runner.invoke(app, ["init"])
    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0
    assert "Found database" in result.output


def test_init_no_config(project: Path) -> None:
    result = runner.invoke(app, ["init", "--db", "custom.db", "--no-config"])
    assert result.exit_code == 0
    assert (project / "custom.db").exists()
    assert not (project / "clipnote.yaml").exists()


def test_version_flag_and_command() -> None:
    for args in (["--version"], ["version"]):
        result = runner.invoke(app, args)
        assert result.exit_code == 0
        assert result.output.startswith("clipnote ")


def test_commands_need_a_database(project: Path) -> None:
    for args in (["list"], ["stats"], ["history"], ["search", "pasta"], ["show", "abc"]):
        result = runner.invoke(app, args)
        assert result.exit_code == 1, args
        assert "clipnote init" in result.output


def test_invalid_project_config_exits_1(project: Path, db: Path) -> None:
    (project / "clipnote.yaml").write_text("search:\n  top_k: 0\n", encoding="utf-8")
    result = runner.invoke(app, ["search", "pasta", "--db", str(db)])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output
