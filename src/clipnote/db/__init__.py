"""clipnote database layer."""

from clipnote.db.connection import Database
from clipnote.db.migrations import MIGRATIONS, run_migrations
from clipnote.db.schema import initialize

__all__ = [
    "Database",
    "initialize",
    "run_migrations",
    "MIGRATIONS",
]
