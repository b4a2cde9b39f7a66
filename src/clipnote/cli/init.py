"""clipnote init — create the project database and a default clipnote.yaml."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from clipnote.cli.common import DEFAULT_DB, console, open_db
from clipnote.config import write_project_config
from clipnote.db.migrations import current_version


def init_cmd(
    db: Annotated[
        Path,
        typer.Option("--db", help="Path to .clipnote.db (created if missing)."),
    ] = DEFAULT_DB,
    no_config: Annotated[
        bool,
        typer.Option("--no-config", help="Do not write clipnote.yaml."),
    ] = False,
) -> None:
    """Initialise a clipnote project in the current directory."""
    existed = db.exists()
    conn = open_db(db, create=True)
    try:
        version = current_version(conn)
    finally:
        conn.close()

    verb = "Found" if existed else "Created"
    console.print(f"[green]✓[/] {verb} database {db} (schema v{version})")

    if not no_config:
        cfg_path = write_project_config(Path.cwd())
        console.print(f"[green]✓[/] Config: {cfg_path.name}")
