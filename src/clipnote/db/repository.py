"""Repository pattern for all clipnote database operations.

Single interface for: content items, their ordered tags, and chat history.
Tags live in item_tags as one row per tag, so a tag containing a comma
round-trips unchanged.
"""

from __future__ import annotations

import json
import sqlite3

from clipnote.db.models import ChatMessage, ContentItem

_ITEM_COLUMNS = "id, title, source_type, url, platform, raw_text, summary, created_at, updated_at"


class Repository:
    """Data access layer for all clipnote database entities.

    Wraps an open sqlite3.Connection. The connection is owned by the caller
    and must be closed after use.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialise with an open database connection.

        Args:
            conn: An open sqlite3.Connection with the schema initialised
                (see clipnote.db.schema.initialize).
        """
        self._conn = conn

    # ------------------------------------------------------------------
    # Content items
    # ------------------------------------------------------------------

    def add_item(self, item: ContentItem) -> None:
        """Insert a new content item together with its tags."""
        self._conn.execute(
            """
            INSERT INTO content_items (id, title, source_type, url, platform, raw_text, summary)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                item.id,
                item.title,
                item.source_type,
                item.url,
                item.platform,
                item.raw_text,
                item.summary,
            ),
        )
        self._write_tags(item.id, item.tags)
        self._conn.commit()

    def replace_content(self, item: ContentItem) -> None:
        """Overwrite title, text, summary and tags of an existing item (re-ingest)."""
        self._conn.execute(
            """
            UPDATE content_items
            SET title = ?, url = ?, platform = ?, raw_text = ?, summary = ?,
                updated_at = datetime('now')
            WHERE id = ?
            """,
            (item.title, item.url, item.platform, item.raw_text, item.summary, item.id),
        )
        self._write_tags(item.id, item.tags)
        self._conn.commit()

    def get_item(self, item_id: str) -> ContentItem | None:
        """Return an item by ID (or unique ID prefix), or None if not found."""
        row = self._conn.execute(
            f"SELECT {_ITEM_COLUMNS} FROM content_items WHERE id = ?", (item_id,)
        ).fetchone()
        if row is None and item_id:
            rows = self._conn.execute(
                f"SELECT {_ITEM_COLUMNS} FROM content_items WHERE id LIKE ? LIMIT 2",
                (item_id + "%",),
            ).fetchall()
            row = rows[0] if len(rows) == 1 else None
        return self._row_to_item(row) if row else None

    def get_item_by_url(self, url: str) -> ContentItem | None:
        """Return the video item ingested from *url*, or None."""
        row = self._conn.execute(
            f"SELECT {_ITEM_COLUMNS} FROM content_items WHERE url = ? AND source_type = 'video'",
            (url,),
        ).fetchone()
        return self._row_to_item(row) if row else None

    def list_items(self, source_type: str | None = None) -> list[ContentItem]:
        """Return items newest first, optionally filtered by source type."""
        if source_type is None:
            rows = self._conn.execute(
                f"SELECT {_ITEM_COLUMNS} FROM content_items ORDER BY created_at DESC, rowid DESC"
            ).fetchall()
        else:
            rows = self._conn.execute(
                f"SELECT {_ITEM_COLUMNS} FROM content_items WHERE source_type = ? "
                "ORDER BY created_at DESC, rowid DESC",
                (source_type,),
            ).fetchall()
        return [self._row_to_item(r) for r in rows]

    def update_tags(self, item_id: str, tags: list[str]) -> None:
        self._write_tags(item_id, tags)
        self._touch(item_id)
        self._conn.commit()

    def update_title(self, item_id: str, title: str) -> None:
        self._conn.execute(
            "UPDATE content_items SET title = ? WHERE id = ?", (title, item_id)
        )
        self._touch(item_id)
        self._conn.commit()

    def delete_item(self, item_id: str) -> bool:
        """Delete an item and its tags. Returns False if nothing was deleted."""
        cur = self._conn.execute("DELETE FROM content_items WHERE id = ?", (item_id,))
        self._conn.commit()
        return cur.rowcount > 0

    def count_items(self) -> dict[str, int]:
        """Return {'video': n, 'note': m}."""
        counts = {t: 0 for t in ("video", "note")}
        for row in self._conn.execute(
            "SELECT source_type, COUNT(*) AS n FROM content_items GROUP BY source_type"
        ).fetchall():
            counts[row["source_type"]] = row["n"]
        return counts

    def tag_counts(self, limit: int = 10) -> list[tuple[str, int]]:
        """Most used tags across all items, most frequent first."""
        rows = self._conn.execute(
            "SELECT tag, COUNT(*) AS n FROM item_tags GROUP BY tag ORDER BY n DESC, tag LIMIT ?",
            (limit,),
        ).fetchall()
        return [(r["tag"], r["n"]) for r in rows]

    def average_text_length(self) -> int:
        row = self._conn.execute(
            "SELECT AVG(LENGTH(raw_text)) FROM content_items"
        ).fetchone()
        return round(row[0]) if row and row[0] is not None else 0

    # ------------------------------------------------------------------
    # Chat history
    # ------------------------------------------------------------------

    def add_chat_message(self, message: ChatMessage) -> int:
        """Insert a chat exchange. Returns the new message id."""
        cur = self._conn.execute(
            "INSERT INTO chat_messages (message, response, matched_items) VALUES (?, ?, ?)",
            (message.message, message.response, json.dumps(message.matched_items)),
        )
        self._conn.commit()
        return cur.lastrowid

    def list_chat_messages(self, limit: int | None = None) -> list[ChatMessage]:
        """Return chat history oldest first (the last *limit* exchanges if given)."""
        sql = "SELECT id, message, response, matched_items, created_at FROM chat_messages"
        if limit is not None:
            sql = f"SELECT * FROM ({sql} ORDER BY id DESC LIMIT {int(limit)})"
        rows = self._conn.execute(sql + " ORDER BY id").fetchall()
        return [
            ChatMessage(
                id=r["id"],
                message=r["message"],
                response=r["response"],
                matched_items=json.loads(r["matched_items"] or "[]"),
                created_at=r["created_at"],
            )
            for r in rows
        ]

    def clear_chat_messages(self) -> int:
        cur = self._conn.execute("DELETE FROM chat_messages")
        self._conn.commit()
        return cur.rowcount

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _write_tags(self, item_id: str, tags: list[str]) -> None:
        self._conn.execute("DELETE FROM item_tags WHERE item_id = ?", (item_id,))
        self._conn.executemany(
            "INSERT INTO item_tags (item_id, position, tag) VALUES (?, ?, ?)",
            [(item_id, i, tag) for i, tag in enumerate(tags)],
        )

    def _touch(self, item_id: str) -> None:
        self._conn.execute(
            "UPDATE content_items SET updated_at = datetime('now') WHERE id = ?", (item_id,)
        )

    def _tags_for(self, item_id: str) -> list[str]:
        rows = self._conn.execute(
            "SELECT tag FROM item_tags WHERE item_id = ? ORDER BY position", (item_id,)
        ).fetchall()
        return [r["tag"] for r in rows]

    def _row_to_item(self, row: sqlite3.Row) -> ContentItem:
        return ContentItem(
            id=row["id"],
            title=row["title"],
            source_type=row["source_type"],
            url=row["url"],
            platform=row["platform"],
            raw_text=row["raw_text"],
            summary=row["summary"],
            tags=self._tags_for(row["id"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
