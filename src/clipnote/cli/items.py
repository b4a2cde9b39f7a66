"""clipnote list / show / retag / tag / rename / edit / remove / stats — stored item management.

Item ids may be abbreviated to any unique prefix (as printed by `clipnote list`).
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.panel import Panel
from rich.table import Table

from clipnote.cli.common import DEFAULT_DB, console, enrich_with_progress, load_cfg, open_db
from clipnote.cli.errors import err_empty_note, err_item_not_found, err_transcript_file
from clipnote.db.models import SOURCE_TYPES, ContentItem, decode_tags
from clipnote.db.repository import Repository
from clipnote.ingest.tagger import generate_tags

logger = logging.getLogger(__name__)

_DbOption = Annotated[Path, typer.Option("--db", help="Path to .clipnote.db.")]


def list_cmd(
    source_type: Annotated[
        str | None,
        typer.Option("--type", help="Only 'video' or 'note' items."),
    ] = None,
    db: _DbOption = DEFAULT_DB,
) -> None:
    """List stored items, newest first."""
    if source_type is not None and source_type not in SOURCE_TYPES:
        console.print(f"[red]Error:[/] --type must be one of: {', '.join(SOURCE_TYPES)}")
        raise typer.Exit(1)

    conn = open_db(db)
    try:
        items = Repository(conn).list_items(source_type)
    finally:
        conn.close()

    if not items:
        console.print("[dim]No items stored yet.[/]\n  Run:  clipnote ingest URL --transcript FILE")
        return

    table = Table(title=f"{len(items)} item(s)")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Type")
    table.add_column("Title", style="bold")
    table.add_column("Tags")
    table.add_column("Created", style="dim")
    for item in items:
        kind = item.platform if item.source_type == "video" and item.platform else item.source_type
        table.add_row(
            item.id[:8],
            kind,
            item.title,
            ", ".join(item.tags),
            (item.created_at or "")[:16],
        )
    console.print(table)


def show_cmd(
    item_id: Annotated[str, typer.Argument(help="Item id or unique prefix.")],
    full: Annotated[
        bool,
        typer.Option("--full", help="Print the whole transcript / note text."),
    ] = False,
    db: _DbOption = DEFAULT_DB,
) -> None:
    """Show one item: summary, tags and (part of) its text."""
    conn = open_db(db)
    try:
        item = _require_item(Repository(conn), item_id)
    finally:
        conn.close()

    text = item.raw_text if full or len(item.raw_text) <= 500 else item.raw_text[:500] + "…"
    lines = [
        f"ID:      {item.id}",
        f"Type:    {item.source_type}" + (f" ({item.platform})" if item.platform else ""),
    ]
    if item.url:
        lines.append(f"URL:     {item.url}")
    lines += [
        f"Tags:    {', '.join(item.tags) if item.tags else '(none)'}",
        f"Created: {item.created_at or ''}",
        "",
        "[bold]Summary[/]",
        item.summary or "[dim](none)[/]",
        "",
        "[bold]Text[/]",
        text or "[dim](empty)[/]",
    ]
    console.print(Panel("\n".join(lines), title=f"[bold]{item.title}[/]", expand=False))


def retag_cmd(
    item_id: Annotated[
        str | None,
        typer.Argument(help="Item id or unique prefix (omit with --all)."),
    ] = None,
    all_items: Annotated[
        bool,
        typer.Option("--all", help="Regenerate tags for every stored item."),
    ] = False,
    db: _DbOption = DEFAULT_DB,
) -> None:
    """Regenerate tags from each item's text and summary."""
    if bool(item_id) == all_items:
        console.print("[red]Error:[/] Pass exactly one of ITEM_ID or --all.")
        raise typer.Exit(1)

    cfg = load_cfg()
    conn = open_db(db)
    repo = Repository(conn)
    failed = 0
    try:
        targets = repo.list_items() if all_items else [_require_item(repo, item_id or "")]
        for item in targets:
            try:
                tags = generate_tags(
                    item.raw_text,
                    item.summary,
                    min_tags=cfg.tagging.min_tags,
                    max_tags=cfg.tagging.max_tags,
                )
                repo.update_tags(item.id, tags)
            except Exception as exc:  # noqa: BLE001
                failed += 1
                logger.warning("Retag failed for %s: %s", item.id, exc)
                console.print(f"  [red]✗[/] {item.title} ({item.id[:8]}): {exc}")
                continue
            console.print(f"  [green]✓[/] {item.title}: {', '.join(tags) or '(none)'}")
    finally:
        conn.close()

    console.print(f"\nRetagged {len(targets) - failed}/{len(targets)} item(s).")
    if failed:
        raise typer.Exit(1)


def rename_cmd(
    item_id: Annotated[str, typer.Argument(help="Item id or unique prefix.")],
    title: Annotated[str, typer.Argument(help="New title.")],
    db: _DbOption = DEFAULT_DB,
) -> None:
    """Change an item's title."""
    if not title.strip():
        console.print("[red]Error:[/] Title must not be empty.")
        raise typer.Exit(1)

    conn = open_db(db)
    try:
        repo = Repository(conn)
        item = _require_item(repo, item_id)
        repo.update_title(item.id, title.strip())
    finally:
        conn.close()
    console.print(f"[green]✓[/] Renamed {item.id[:8]}: [bold]{title.strip()}[/]")


def tag_cmd(
    item_id: Annotated[str, typer.Argument(help="Item id or unique prefix.")],
    set_tags: Annotated[
        list[str],
        typer.Option("--set", help="Tag (repeatable, or comma-separated). Replaces the current tags."),
    ],
    db: _DbOption = DEFAULT_DB,
) -> None:
    """Replace an item's tags with the given list."""
    tags = decode_tags(",".join(set_tags))
    if not tags:
        console.print("[red]Error:[/] At least one non-empty tag is required.")
        raise typer.Exit(1)

    conn = open_db(db)
    try:
        repo = Repository(conn)
        item = _require_item(repo, item_id)
        repo.update_tags(item.id, tags)
    finally:
        conn.close()
    console.print(f"[green]✓[/] Tagged {item.id[:8]}: {', '.join(tags)}")


def edit_cmd(
    item_id: Annotated[str, typer.Argument(help="Note id or unique prefix.")],
    title: Annotated[str | None, typer.Option("--title", help="New title.")] = None,
    body: Annotated[str | None, typer.Option("--body", "-b", help="New note text.")] = None,
    file: Annotated[
        Path | None,
        typer.Option("--file", "-f", help="Read the new note text from a file."),
    ] = None,
    tag: Annotated[
        list[str] | None,
        typer.Option("--tag", help="Tag (repeatable, or comma-separated). Replaces the current tags."),
    ] = None,
    db: _DbOption = DEFAULT_DB,
    offline: Annotated[
        bool,
        typer.Option("--offline", help="Skip the LLM; use local heuristics only."),
    ] = False,
) -> None:
    """Edit a note. New text is re-summarized and re-tagged unless --tag is given."""
    if file is not None:
        try:
            body = file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            console.print(err_transcript_file(str(file), str(exc)))
            raise typer.Exit(1) from exc

    if (title is not None and not title.strip()) or (body is not None and not body.strip()):
        console.print(err_empty_note())
        raise typer.Exit(1)

    user_tags = decode_tags(",".join(tag or []))
    cfg = load_cfg(offline)
    conn = open_db(db)
    try:
        repo = Repository(conn)
        item = _require_item(repo, item_id)
        if item.source_type != "note":
            console.print(
                "[red]Error:[/] Only notes can be edited.\n"
                "  Use:  clipnote rename  or  clipnote tag  for videos."
            )
            raise typer.Exit(1)

        updated = dataclasses.replace(item)
        if title is not None:
            updated.title = title.strip()
        if body is not None and body.strip() != item.raw_text:
            enrichment = enrich_with_progress(body.strip(), cfg)
            updated.raw_text = body.strip()
            updated.summary = enrichment.summary
            updated.tags = enrichment.tags
        if user_tags:
            updated.tags = user_tags
        repo.replace_content(updated)
    finally:
        conn.close()
    console.print(f"[green]✓[/] Updated note [bold]{updated.title}[/] ({updated.id[:8]})")
    console.print(f"  Tags:    {', '.join(updated.tags) if updated.tags else '[dim](none)[/]'}")


def remove_cmd(
    item_id: Annotated[str, typer.Argument(help="Item id or unique prefix.")],
    db: _DbOption = DEFAULT_DB,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Remove an item and its tags."""
    conn = open_db(db)
    repo = Repository(conn)
    try:
        item = _require_item(repo, item_id)
        console.print(f"\nRemove {item.source_type}: [bold]{item.title}[/] ({item.id[:8]})")

        if not yes:
            if not typer.confirm("Confirm removal?", default=False):
                console.print("[dim]Cancelled.[/]")
                raise typer.Exit(0)

        repo.delete_item(item.id)
    finally:
        conn.close()
    console.print(f"[green]✓[/] Removed: {item.title}")


def stats_cmd(db: _DbOption = DEFAULT_DB) -> None:
    """Show item counts, average text length and the most used tags."""
    conn = open_db(db)
    try:
        repo = Repository(conn)
        counts = repo.count_items()
        avg_len = repo.average_text_length()
        top_tags = repo.tag_counts(limit=10)
    finally:
        conn.close()

    total = sum(counts.values())
    lines = [
        f"Items:   [bold]{total}[/]  |  Videos: [bold]{counts.get('video', 0)}[/]  |  "
        f"Notes: [bold]{counts.get('note', 0)}[/]",
        f"Average text length: [bold]{avg_len:,}[/] chars",
    ]
    console.print(Panel("\n".join(lines), title="[bold]Library[/]", expand=False))

    if not top_tags:
        console.print("[dim]No tags yet.[/]")
        return

    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Tag", style="bold")
    table.add_column("Count", justify="right")
    for tag, count in top_tags:
        table.add_row(tag, str(count))
    console.print(Panel(table, title="[bold]Top tags[/]", expand=False))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _require_item(repo: Repository, item_id: str) -> ContentItem:
    item = repo.get_item(item_id)
    if item is None:
        console.print(err_item_not_found(item_id))
        raise typer.Exit(1)
    return item
