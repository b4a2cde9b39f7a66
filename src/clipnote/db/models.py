"""Domain models for the clipnote database layer."""

from __future__ import annotations

from dataclasses import dataclass, field

SOURCE_TYPES = ("video", "note")


@dataclass
class ContentItem:
    id: str
    title: str
    source_type: str  # video | note
    raw_text: str = ""
    summary: str = ""
    tags: list[str] = field(default_factory=list)
    url: str | None = None
    platform: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


@dataclass
class ChatMessage:
    message: str
    response: str
    matched_items: list[dict] = field(default_factory=list)  # {id, title, relevance_score, type}
    created_at: str | None = None
    id: int | None = None  # set after insert


def encode_tags(tags: list[str]) -> str:
    """Comma-joined form used by exports; commas inside a tag become spaces."""
    return ",".join(t.replace(",", " ").strip() for t in tags if t.strip())


def decode_tags(raw: str | None) -> list[str]:
    """Split a comma-joined tag string, dropping blanks and duplicates (first wins)."""
    seen: list[str] = []
    for part in (raw or "").split(","):
        tag = part.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen
