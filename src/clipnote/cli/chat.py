"""clipnote search / chat / history — query the stored library.

search:  keyword relevance ranking over titles, summaries, text and tags.
chat:    answer a question from the best hits (LLM, or the local composer).
history: replay or clear saved chat exchanges.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.markdown import Markdown
from rich.table import Table

from clipnote.cli.common import DEFAULT_DB, console, load_cfg, open_db, report_tier
from clipnote.db.models import ChatMessage
from clipnote.db.repository import Repository
from clipnote.rag.responder import answer
from clipnote.rag.search import search

_DbOption = Annotated[Path, typer.Option("--db", help="Path to .clipnote.db.")]


def search_cmd(
    query: Annotated[str, typer.Argument(help="Search query.")],
    top_k: Annotated[
        int | None,
        typer.Option("--top-k", "-k", min=1, help="Maximum hits (default: search.top_k)."),
    ] = None,
    db: _DbOption = DEFAULT_DB,
) -> None:
    """Rank stored items by keyword relevance."""
    cfg = load_cfg(offline=True)
    conn = open_db(db)
    try:
        items = Repository(conn).list_items()
    finally:
        conn.close()

    results = search(query, items, top_k=top_k or cfg.search.top_k)
    if not results:
        console.print(f"[dim]No matches for '{query}'.[/]")
        return

    table = Table(title=f"Results for '{query}'")
    table.add_column("Score", justify="right", style="bold")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title")
    table.add_column("Snippet", overflow="fold")
    for r in results:
        snippet = r.matched_snippet[:160] + ("…" if len(r.matched_snippet) > 160 else "")
        table.add_row(str(r.relevance_score), r.item.id[:8], r.item.title, snippet)
    console.print(table)


def chat_cmd(
    message: Annotated[str, typer.Argument(help="Question about your saved content.")],
    db: _DbOption = DEFAULT_DB,
    no_save: Annotated[
        bool,
        typer.Option("--no-save", help="Do not record this exchange in the history."),
    ] = False,
    offline: Annotated[
        bool,
        typer.Option("--offline", help="Skip the LLM; use local heuristics only."),
    ] = False,
) -> None:
    """Ask a question; the answer is grounded in the most relevant items."""
    if not message.strip():
        console.print("[red]Error:[/] Message is required.")
        raise typer.Exit(1)

    cfg = load_cfg(offline)
    conn = open_db(db)
    repo = Repository(conn)
    try:
        items = repo.list_items()
        with console.status("Thinking…"):
            reply = answer(message, items, cfg)
        if reply.llm_available is not None:
            report_tier(cfg, reply.llm_available)

        if not no_save:
            repo.add_chat_message(
                ChatMessage(
                    message=message,
                    response=reply.response,
                    matched_items=reply.matched_items(),
                )
            )
    finally:
        conn.close()

    console.print(Markdown(reply.response))
    if reply.results:
        sources = ", ".join(f"{r.item.title} ({r.relevance_score})" for r in reply.results)
        console.print(f"\n[dim]Sources: {sources}[/]")


def history_cmd(
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", min=1, help="Show only the last N exchanges."),
    ] = None,
    clear: Annotated[
        bool,
        typer.Option("--clear", help="Delete the whole chat history."),
    ] = False,
    db: _DbOption = DEFAULT_DB,
) -> None:
    """Show (or clear) saved chat exchanges, oldest first."""
    conn = open_db(db)
    repo = Repository(conn)
    try:
        if clear:
            removed = repo.clear_chat_messages()
            console.print(f"[green]✓[/] Cleared {removed} message(s).")
            return
        messages = repo.list_chat_messages(limit)
    finally:
        conn.close()

    if not messages:
        console.print("[dim]No chat history.[/]")
        return

    for msg in messages:
        console.print(f"[dim]{msg.created_at or ''}[/]  [bold cyan]You:[/] {msg.message}")
        console.print(f"[bold green]Assistant:[/] {msg.response}")
        if msg.matched_items:
            titles = ", ".join(m.get("title", "?") for m in msg.matched_items)
            console.print(f"[dim]  matched: {titles}[/]")
        console.print()
