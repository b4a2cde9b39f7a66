"""Transcript cleanup and sentence splitting shared by the scoring passes."""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")
_BRACKETED_RE = re.compile(r"\[.*?\]")
_PARENTHESIZED_RE = re.compile(r"\(.*?\)")
_FILLER_RE = re.compile(
    r"\b(um|uh|ah|er|like|you know|so|basically|actually|literally)\b",
    re.IGNORECASE,
)
_CONNECTOR_RE = re.compile(
    r"\b(and|but|or|so|then|now|well|okay|alright)\s+",
    re.IGNORECASE,
)
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")

MIN_SENTENCE_LENGTH = 20


def preprocess(text: str) -> str:
    """Strip transcription noise from *text*.

    Removes ``[Music]``-style and ``(inaudible)``-style annotations, filler
    words and weak connectors, then normalises whitespace.
    """
    if not text:
        return ""
    cleaned = _WHITESPACE_RE.sub(" ", text)
    cleaned = _BRACKETED_RE.sub("", cleaned)
    cleaned = _PARENTHESIZED_RE.sub("", cleaned)
    cleaned = _FILLER_RE.sub("", cleaned)
    cleaned = _CONNECTOR_RE.sub("", cleaned)
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def split_sentences(text: str, min_length: int = MIN_SENTENCE_LENGTH) -> list[str]:
    """Split on runs of ``.``, ``!`` or ``?`` and keep trimmed pieces >= *min_length* chars."""
    pieces = (p.strip() for p in _SENTENCE_SPLIT_RE.split(text))
    return [p for p in pieces if len(p) >= min_length]


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()
