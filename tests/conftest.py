"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from clipnote.db.connection import Database
from clipnote.db.schema import initialize


@pytest.fixture
def tmp_db(tmp_path):
    """File-based DB in tmp_path with schema initialized, closed after test."""
    db = Database(tmp_path / ".clipnote.db")
    conn = db.connect()
    initialize(conn)
    yield conn
    conn.close()


@pytest.fixture(autouse=True)
def _no_llm_keys(monkeypatch):
    """Tests never reach a real provider: strip keys and model overrides."""
    for var in ("OPENROUTER_API_KEY", "OPENAI_API_KEY", "CLIPNOTE_GENERATION_MODEL", "CLIPNOTE_OFFLINE"):
        monkeypatch.delenv(var, raising=False)
