"""CLI test fixtures: isolated cwd, no global config, offline LLM tier."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from clipnote.cli.main import app


@pytest.fixture
def project(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("clipnote.config._GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml")
    monkeypatch.setenv("CLIPNOTE_OFFLINE", "1")
    monkeypatch.setattr("clipnote.cli.common.console.width", 200)
    return tmp_path


@pytest.fixture
def db(project: Path) -> Path:
    """Initialised project database."""
    path = project / ".clipnote.db"
    result = CliRunner().invoke(app, ["init", "--db", str(path), "--no-config"])
    assert result.exit_code == 0, result.output
    return path
