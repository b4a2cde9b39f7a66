"""clipnote rich error messages — actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from clipnote.cli.errors import err_no_db
    console.print(err_no_db(".clipnote.db"))
    raise typer.Exit(1)
"""

from __future__ import annotations


def err_no_db(db_path: str = ".clipnote.db") -> str:
    """No database found at *db_path*."""
    return (
        f"[red]Error:[/] No database found at '{db_path}'.\n"
        "  Run:  clipnote init"
    )


def err_unsupported_url(url: str) -> str:
    """URL is not from a supported platform."""
    return (
        f"[red]Error:[/] Unsupported platform: '{url}'\n"
        "  Only YouTube, Instagram, X (Twitter), and Facebook URLs are supported."
    )


def err_invalid_content_url(url: str, platform: str) -> str:
    """Platform recognised, but no content id in the URL."""
    names = {"youtube": "YouTube", "instagram": "Instagram", "x": "X/Twitter", "facebook": "Facebook"}
    return (
        f"[red]Error:[/] Invalid {names.get(platform, platform)} URL: '{url}'\n"
        "  Use the full link to a single video, reel or post."
    )


def err_item_not_found(item_id: str) -> str:
    """Item id unknown (or an ambiguous prefix)."""
    return (
        f"[yellow]Item not found:[/] '{item_id}'\n"
        "  Run:  clipnote list  to see stored items and their ids."
    )


def err_transcript_file(path: str, reason: str) -> str:
    """Transcript / captions file could not be read."""
    return (
        f"[red]Error:[/] Cannot read transcript '{path}': {reason}\n"
        "  Pass a UTF-8 text file, a JSON captions list, or '-' for stdin."
    )


def err_empty_note() -> str:
    return (
        "[red]Error:[/] Title and content are required.\n"
        "  Use:  clipnote note --title TITLE --body TEXT  (or --file PATH)"
    )


def err_config(message: str) -> str:
    return f"[red]Error:[/] Invalid configuration.\n  {message}"


def warn_llm_unavailable(model: str) -> str:
    """Shown once per command when the LLM tier is skipped."""
    return (
        f"[yellow]⚠[/] LLM '{model}' unavailable — using local heuristics.\n"
        "  Set the provider API key (e.g. export OPENROUTER_API_KEY=...) to enable it."
    )
