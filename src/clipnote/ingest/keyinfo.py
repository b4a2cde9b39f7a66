"""Pattern-based extraction of numbers, dates, names, questions and conclusions."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_NUMBER_RE = re.compile(r"\b\d+(?:\.\d+)?%?")
_DATE_RE = re.compile(
    r"\b(?:january|february|march|april|may|june|july|august|september|october|november|december)"
    r"\s+\d{1,2}(?:st|nd|rd|th)?,?\s+\d{4}"
    r"|\b\d{1,2}/\d{1,2}/\d{2,4}"
    r"|\b\d{4}-\d{2}-\d{2}\b",
    re.IGNORECASE,
)
_NAME_RE = re.compile(r"\b[A-Z][a-z]+\s+[A-Z][a-z]+\b")
_QUESTION_RE = re.compile(r"[^.!?]*\?[^.!?]*")
_CONCLUSION_RE = re.compile(
    r"\b(?:in conclusion|to summarize|finally|overall|in summary|to wrap up|in the end)\b[^.!?]*[.!?]",
    re.IGNORECASE,
)


@dataclass
class KeyInformation:
    """Raw matches in source order; duplicates are kept."""

    numbers: list[str] = field(default_factory=list)
    dates: list[str] = field(default_factory=list)
    names: list[str] = field(default_factory=list)
    questions: list[str] = field(default_factory=list)
    conclusions: list[str] = field(default_factory=list)


def extract_key_info(text: str) -> KeyInformation:
    return KeyInformation(
        numbers=_NUMBER_RE.findall(text),
        dates=_DATE_RE.findall(text),
        names=_NAME_RE.findall(text),
        questions=_QUESTION_RE.findall(text),
        conclusions=_CONCLUSION_RE.findall(text),
    )
