"""Tests for clipnote ingest and clipnote note."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from clipnote.cli.main import app
from clipnote.db.connection import Database
from clipnote.db.repository import Repository

runner = CliRunner()

URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

TRANSCRIPT = " ".join(
    f"In part {i} of this tutorial the developer shows how to debug python code with pandas."
    for i in range(12)
)


def _items(db: Path):
    with Database(db) as conn:
        return Repository(conn).list_items()


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# URL validation
# ---------------------------------------------------------------------------


def test_ingest_unsupported_platform(db: Path, project: Path) -> None:
    transcript = _write(project / "t.txt", TRANSCRIPT)
    result = runner.invoke(
        app, ["ingest", "https://vimeo.com/123", "-t", str(transcript), "--db", str(db)]
    )
    assert result.exit_code == 1
    assert "Unsupported platform" in result.output
    assert _items(db) == []


def test_ingest_invalid_content_url(db: Path, project: Path) -> None:
    transcript = _write(project / "t.txt", TRANSCRIPT)
    result = runner.invoke(
        app, ["ingest", "https://www.youtube.com/feed/trending", "-t", str(transcript), "--db", str(db)]
    )
    assert result.exit_code == 1
    assert "Invalid YouTube URL" in result.output


def test_ingest_missing_db(project: Path) -> None:
    transcript = _write(project / "t.txt", TRANSCRIPT)
    result = runner.invoke(app, ["ingest", URL, "-t", str(transcript), "--db", "missing.db"])
    assert result.exit_code == 1
    assert "clipnote init" in result.output


def test_ingest_unreadable_transcript(db: Path) -> None:
    result = runner.invoke(app, ["ingest", URL, "-t", "nope.txt", "--db", str(db)])
    assert result.exit_code == 1
    assert "Cannot read transcript" in result.output


# ---------------------------------------------------------------------------
# Successful ingest
# ---------------------------------------------------------------------------


def test_ingest_text_transcript(db: Path, project: Path) -> None:
    transcript = _write(project / "t.txt", TRANSCRIPT)
    result = runner.invoke(app, ["ingest", URL, "-t", str(transcript), "--db", str(db)])
    assert result.exit_code == 0, result.output

    [item] = _items(db)
    assert item.source_type == "video"
    assert item.platform == "youtube"
    assert item.url == URL
    assert item.title == "Untitled YouTube Video"
    assert item.raw_text == TRANSCRIPT
    assert item.summary
    assert 3 <= len(item.tags) <= 6
    assert "Stored video" in result.output


def test_ingest_json_captions_with_title(db: Path, project: Path) -> None:
    captions = {
        "title": "Debugging Pandas",
        "captions": [{"start": i, "text": f"Sentence number {i} about python data."} for i in range(5)]
        + [{"start": 9, "text": "No text"}],
    }
    transcript = _write(project / "captions.json", json.dumps(captions))
    result = runner.invoke(app, ["ingest", URL, "-t", str(transcript), "--db", str(db)])
    assert result.exit_code == 0, result.output

    [item] = _items(db)
    assert item.title == "Debugging Pandas"
    assert "No text" not in item.raw_text
    assert item.raw_text.startswith("Sentence number 0 about python data.")


def test_ingest_invalid_json(db: Path, project: Path) -> None:
    _write(project / "bad.json", "{not json")
    result = runner.invoke(app, ["ingest", URL, "-t", "bad.json", "--db", str(db)])
    assert result.exit_code == 1
    assert "invalid JSON" in result.output


def test_ingest_from_stdin_with_title(db: Path) -> None:
    result = runner.invoke(
        app,
        ["ingest", "https://youtu.be/abc123", "-t", "-", "--title", "Piped", "--db", str(db)],
        input="A short clip about sourdough bread and the perfect recipe.",
    )
    assert result.exit_code == 0, result.output
    [item] = _items(db)
    assert item.title == "Piped"
    assert "food" in item.tags


def test_ingest_empty_transcript_stores_placeholder(db: Path, project: Path) -> None:
    transcript = _write(project / "empty.txt", "   ")
    result = runner.invoke(
        app, ["ingest", "https://www.instagram.com/reel/Cxyz/", "-t", str(transcript), "--db", str(db)]
    )
    assert result.exit_code == 0, result.output
    assert "No transcript" in result.output

    [item] = _items(db)
    assert item.title == "Untitled Instagram Content"
    assert item.tags == []
    assert item.summary.startswith("Unable to generate summary - no content available.")
    assert item.raw_text.startswith("No transcript available for this instagram content (Cxyz).")


def test_reingest_same_url_updates_item(db: Path, project: Path) -> None:
    first = _write(project / "a.txt", TRANSCRIPT)
    second = _write(project / "b.txt", "A new transcript about cooking a pasta recipe at home.")
    runner.invoke(app, ["ingest", URL, "-t", str(first), "--db", str(db)])
    [original] = _items(db)

    result = runner.invoke(app, ["ingest", URL, "-t", str(second), "--db", str(db)])
    assert result.exit_code == 0, result.output
    assert "Updating existing item" in result.output

    [item] = _items(db)
    assert item.id == original.id
    assert item.raw_text.startswith("A new transcript")
    assert "food" in item.tags


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------


def test_note_with_user_tags(db: Path) -> None:
    result = runner.invoke(
        app,
        [
            "note", "--title", "Groceries", "--body", "Buy flour and yeast.",
            "--tag", "shopping", "--tag", "home, errands", "--db", str(db),
        ],
    )
    assert result.exit_code == 0, result.output
    [item] = _items(db)
    assert item.source_type == "note"
    assert item.tags == ["shopping", "home", "errands"]
    assert item.summary == "Buy flour yeast."


def test_note_generates_tags(db: Path) -> None:
    result = runner.invoke(
        app,
        ["note", "--title", "Dinner", "--body", "Try the new pasta recipe from the cooking class.", "--db", str(db)],
    )
    assert result.exit_code == 0, result.output
    [item] = _items(db)
    assert "food" in item.tags


def test_note_from_file(db: Path, project: Path) -> None:
    body = _write(project / "note.md", "Meeting notes about the marketing campaign budget.")
    result = runner.invoke(app, ["note", "--title", "Meeting", "--file", str(body), "--db", str(db)])
    assert result.exit_code == 0, result.output
    [item] = _items(db)
    assert item.raw_text == "Meeting notes about the marketing campaign budget."


def test_note_requires_title_and_body(db: Path) -> None:
    result = runner.invoke(app, ["note", "--title", "", "--body", "text", "--db", str(db)])
    assert result.exit_code == 1
    assert "Title and content are required" in result.output

    result = runner.invoke(app, ["note", "--title", "T", "--db", str(db)])
    assert result.exit_code == 1
    assert _items(db) == []
