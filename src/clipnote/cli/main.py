"""clipnote CLI entry point."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from clipnote.cli.chat import chat_cmd, history_cmd, search_cmd
from clipnote.cli.common import console
from clipnote.cli.ingest import ingest_cmd, note_cmd
from clipnote.cli.init import init_cmd
from clipnote.cli.items import (
    edit_cmd,
    list_cmd,
    remove_cmd,
    rename_cmd,
    retag_cmd,
    show_cmd,
    stats_cmd,
    tag_cmd,
)


def _installed_version() -> str:
    try:
        return importlib.metadata.version("clipnote")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"clipnote {_installed_version()}")
        raise typer.Exit()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, rich_tracebacks=True)],
        force=True,
    )


app = typer.Typer(
    name="clipnote",
    help=(
        "clipnote — summarize, tag and search saved videos and notes.\n\n"
        "  clipnote ingest URL -t transcript.txt   Store a video transcript.\n"
        "  clipnote chat \"what did I save about X?\"   Ask about your library."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Debug logging."),
    ] = False,
) -> None:
    """clipnote — summarize, tag and search saved videos and notes."""
    _setup_logging(verbose)


app.command("init")(init_cmd)
app.command("ingest")(ingest_cmd)
app.command("note")(note_cmd)
app.command("list")(list_cmd)
app.command("show")(show_cmd)
app.command("retag")(retag_cmd)
app.command("tag")(tag_cmd)
app.command("rename")(rename_cmd)
app.command("edit")(edit_cmd)
app.command("remove")(remove_cmd)
app.command("stats")(stats_cmd)
app.command("search")(search_cmd)
app.command("chat")(chat_cmd)
app.command("history")(history_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed clipnote version."""
    typer.echo(f"clipnote {_installed_version()}")


if __name__ == "__main__":
    app()
