"""Tests for database schema initialization."""

from __future__ import annotations

import sqlite3

import pytest

from clipnote.db.schema import CURRENT_VERSION, initialize


def _table_columns(conn, table: str) -> set[str]:
    rows = conn.execute(f"PRAGMA table_info({table})").fetchall()
    return {row["name"] for row in rows}


def test_content_items_columns(tmp_db):
    assert _table_columns(tmp_db, "content_items") == {
        "id", "title", "source_type", "url", "platform",
        "raw_text", "summary", "created_at", "updated_at",
    }


def test_item_tags_columns(tmp_db):
    assert _table_columns(tmp_db, "item_tags") == {"item_id", "position", "tag"}


def test_chat_messages_columns(tmp_db):
    assert _table_columns(tmp_db, "chat_messages") == {
        "id", "message", "response", "matched_items", "created_at",
    }


def test_schema_version_recorded(tmp_db):
    version = tmp_db.execute("SELECT MAX(version) FROM schema_version").fetchone()[0]
    assert version == CURRENT_VERSION


def test_initialize_idempotent(tmp_db):
    initialize(tmp_db)
    rows = tmp_db.execute("SELECT COUNT(*) FROM schema_version").fetchone()[0]
    assert rows == CURRENT_VERSION


def test_tags_cascade_on_item_delete(tmp_db):
    tmp_db.execute("INSERT INTO content_items (id, source_type) VALUES ('n1', 'note')")
    tmp_db.execute("INSERT INTO item_tags (item_id, position, tag) VALUES ('n1', 0, 'garden')")
    tmp_db.execute("DELETE FROM content_items WHERE id = 'n1'")
    assert tmp_db.execute("SELECT COUNT(*) FROM item_tags").fetchone()[0] == 0


def test_duplicate_tag_position_rejected(tmp_db):
    tmp_db.execute("INSERT INTO content_items (id, source_type) VALUES ('n1', 'note')")
    tmp_db.execute("INSERT INTO item_tags (item_id, position, tag) VALUES ('n1', 0, 'a')")
    with pytest.raises(sqlite3.IntegrityError):
        tmp_db.execute("INSERT INTO item_tags (item_id, position, tag) VALUES ('n1', 0, 'b')")
