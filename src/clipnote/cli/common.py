"""Helpers shared by the clipnote commands."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from clipnote.cli.errors import err_config, err_no_db, warn_llm_unavailable
from clipnote.config import ClipnoteConfig, ConfigError, load_config
from clipnote.db.connection import Database
from clipnote.db.schema import initialize
from clipnote.ingest.pipeline import Enrichment, enrich, summarizer_from_config

console = Console()

DEFAULT_DB = Path(".clipnote.db")


def open_db(db_path: Path, *, create: bool = False) -> sqlite3.Connection:
    """Open the project database and run migrations.

    Exits with code 1 when the file is missing and *create* is False.
    """
    if not create and not db_path.exists():
        console.print(err_no_db(str(db_path)))
        raise typer.Exit(1)
    conn = Database(db_path).connect()
    initialize(conn)
    return conn


def load_cfg(offline: bool = False) -> ClipnoteConfig:
    """Load config for a command; --offline disables the LLM tier."""
    try:
        cfg = load_config()
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1) from exc
    if offline:
        cfg.generation.enabled = False
    return cfg


def report_tier(cfg: ClipnoteConfig, llm_available: bool) -> None:
    """Tell the user once when an enabled LLM could not be reached."""
    if cfg.generation.enabled and not llm_available:
        console.print(warn_llm_unavailable(cfg.generation.model))


def enrich_with_progress(text: str, cfg: ClipnoteConfig) -> Enrichment:
    """Summarize and tag *text* behind a spinner; probes the LLM only for long text."""
    summarizer = summarizer_from_config(cfg)
    needs_llm = len(text) > cfg.summary.short_text_limit
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True,
        console=console,
    ) as prog:
        prog.add_task("Summarizing…", total=None)
        llm_available = needs_llm and summarizer.llm_available()
        enrichment = enrich(text, cfg, summarizer=summarizer, llm_available=llm_available)
    if needs_llm:
        report_tier(cfg, llm_available)
    return enrichment
