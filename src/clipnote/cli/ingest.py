"""clipnote ingest / note — store content items with summary and tags.

ingest: a social-media URL plus the transcript the extraction service produced
        (plain text, a JSON captions list, or '-' for stdin). Re-ingesting the
        same URL updates the stored item in place.
note:   a free-form note; tags are generated unless given with --tag.
"""

from __future__ import annotations

import json
import uuid
from pathlib import Path
from typing import Annotated

import typer

from clipnote.cli.common import DEFAULT_DB, console, enrich_with_progress, load_cfg, open_db
from clipnote.cli.errors import (
    err_empty_note,
    err_invalid_content_url,
    err_transcript_file,
    err_unsupported_url,
)
from clipnote.db.models import ContentItem, decode_tags
from clipnote.db.repository import Repository
from clipnote.ingest.pipeline import failed_extraction, failed_transcript_text
from clipnote.ingest.sources import (
    TranscriptResult,
    captions_to_text,
    detect_platform,
    extract_content_id,
    resolve_title,
)


def ingest_cmd(
    url: Annotated[str, typer.Argument(help="YouTube, Instagram, X or Facebook URL.")],
    transcript: Annotated[
        str,
        typer.Option(
            "--transcript", "-t",
            help="Transcript file (.txt, or .json captions list); '-' reads stdin.",
        ),
    ],
    title: Annotated[
        str | None,
        typer.Option("--title", help="Title override (default: from captions JSON or placeholder)."),
    ] = None,
    db: Annotated[
        Path,
        typer.Option("--db", help="Path to .clipnote.db."),
    ] = DEFAULT_DB,
    offline: Annotated[
        bool,
        typer.Option("--offline", help="Skip the LLM; use local heuristics only."),
    ] = False,
) -> None:
    """Ingest a video transcript: summarize, tag and store it."""
    platform = detect_platform(url)
    if platform == "unknown":
        console.print(err_unsupported_url(url))
        raise typer.Exit(1)

    content_id = extract_content_id(url, platform)
    if content_id is None:
        console.print(err_invalid_content_url(url, platform))
        raise typer.Exit(1)

    result = _read_transcript(transcript)
    if title:
        result.title = title

    cfg = load_cfg(offline)
    conn = open_db(db)
    repo = Repository(conn)

    try:
        existing = repo.get_item_by_url(url)
        if existing:
            console.print(f"[yellow]↻ Updating existing item {existing.id[:8]}[/]")
        else:
            console.print(f"[bold]→ {platform} {content_id}[/]")

        if result.success:
            raw_text = result.text
            enrichment = enrich_with_progress(raw_text, cfg)
            item_title = resolve_title(result, platform)
        else:
            console.print(f"  [red]✗ No transcript:[/] {result.error or 'Unknown error'}")
            raw_text = failed_transcript_text(result, platform, content_id)
            enrichment = failed_extraction(platform)
            item_title = resolve_title(result, platform)

        item = ContentItem(
            id=existing.id if existing else str(uuid.uuid4()),
            title=item_title,
            source_type="video",
            url=url,
            platform=platform,
            raw_text=raw_text,
            summary=enrichment.summary,
            tags=enrichment.tags,
        )
        if existing:
            repo.replace_content(item)
        else:
            repo.add_item(item)
    finally:
        conn.close()

    _print_stored(item)


def note_cmd(
    title: Annotated[str, typer.Option("--title", help="Note title.")] = "",
    body: Annotated[str, typer.Option("--body", "-b", help="Note text.")] = "",
    file: Annotated[
        Path | None,
        typer.Option("--file", "-f", help="Read the note text from a file."),
    ] = None,
    tag: Annotated[
        list[str] | None,
        typer.Option("--tag", help="Tag (repeatable, or comma-separated). Generated when omitted."),
    ] = None,
    db: Annotated[
        Path,
        typer.Option("--db", help="Path to .clipnote.db."),
    ] = DEFAULT_DB,
    offline: Annotated[
        bool,
        typer.Option("--offline", help="Skip the LLM; use local heuristics only."),
    ] = False,
) -> None:
    """Add a note; it is summarized and tagged like a transcript."""
    if file is not None:
        try:
            body = file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            console.print(err_transcript_file(str(file), str(exc)))
            raise typer.Exit(1) from exc

    if not title.strip() or not body.strip():
        console.print(err_empty_note())
        raise typer.Exit(1)

    cfg = load_cfg(offline)
    conn = open_db(db)
    try:
        enrichment = enrich_with_progress(body.strip(), cfg)
        user_tags = decode_tags(",".join(tag or []))
        item = ContentItem(
            id=str(uuid.uuid4()),
            title=title.strip(),
            source_type="note",
            raw_text=body.strip(),
            summary=enrichment.summary,
            tags=user_tags or enrichment.tags,
        )
        Repository(conn).add_item(item)
    finally:
        conn.close()

    _print_stored(item)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _read_transcript(source: str) -> TranscriptResult:
    """Load transcript text (and maybe a title) from a file or stdin."""
    try:
        if source == "-":
            raw = typer.get_text_stream("stdin").read()
        else:
            raw = Path(source).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        console.print(err_transcript_file(source, str(exc)))
        raise typer.Exit(1) from exc

    title = ""
    text = raw
    if source.lower().endswith(".json"):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            console.print(err_transcript_file(source, f"invalid JSON ({exc.msg})"))
            raise typer.Exit(1) from exc
        if isinstance(data, dict):
            title = str(data.get("title") or "")
            captions = data.get("captions") or []
        else:
            captions = data
        if not isinstance(captions, list):
            console.print(err_transcript_file(source, "expected a list of captions"))
            raise typer.Exit(1)
        text = captions_to_text([c for c in captions if isinstance(c, dict)])

    text = text.strip()
    if not text:
        return TranscriptResult(success=False, title=title, error="Transcript is empty")
    return TranscriptResult(success=True, text=text, title=title)


def _print_stored(item: ContentItem) -> None:
    console.print(f"[green]✓[/] Stored {item.source_type} [bold]{item.title}[/] ({item.id[:8]})")
    console.print(f"  Summary: {item.summary}")
    console.print(f"  Tags:    {', '.join(item.tags) if item.tags else '[dim](none)[/]'}")
