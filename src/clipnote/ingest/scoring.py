"""Sentence importance scoring for extractive summaries.

Each sentence gets a non-negative score built from:
  - importance keywords (high +3, medium +2, low +1 per keyword present)
  - position (+3 first, +2 last, +1 within the first 10 %)
  - content cues (digits, '?', ':', two-capitalised-word spans)
  - length (+1 for 30-150 chars, -2 under 20, -1 over 200)
  - repetition (-1 when tokens exceed 1.5x unique tokens)
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from clipnote.ingest.text import split_sentences

IMPORTANCE_KEYWORDS: dict[int, tuple[str, ...]] = {
    3: ("main", "key", "important", "crucial", "essential", "primary", "major", "critical", "vital"),
    2: (
        "first", "second", "third", "finally", "conclusion",
        "summary", "problem", "solution", "result", "outcome",
    ),
    1: (
        "tip", "trick", "method", "technique", "strategy",
        "approach", "because", "therefore", "however",
    ),
}

_DIGIT_RE = re.compile(r"\d+")
_NAME_RE = re.compile(r"\b[A-Z][a-z]+\s+[A-Z][a-z]+\b")


@dataclass
class ScoredSentence:
    """A sentence with its importance score and original position."""

    text: str
    score: float
    position_index: int


def score_sentences(
    text: str,
    keywords: dict[int, tuple[str, ...]] = IMPORTANCE_KEYWORDS,
) -> list[ScoredSentence]:
    """Split *text* into sentences and score each one, preserving source order.

    With two sentences or fewer there is nothing to discriminate, so every
    sentence scores 1.
    """
    sentences = split_sentences(text)
    if len(sentences) <= 2:
        return [ScoredSentence(text=s, score=1, position_index=i) for i, s in enumerate(sentences)]

    total = len(sentences)
    return [
        ScoredSentence(
            text=sentence,
            score=_score(sentence, index, total, keywords),
            position_index=index,
        )
        for index, sentence in enumerate(sentences)
    ]


def _score(sentence: str, index: int, total: int, keywords: dict[int, tuple[str, ...]]) -> float:
    score = 0
    lower = sentence.lower()

    for weight, words in keywords.items():
        score += weight * sum(1 for word in words if word in lower)

    if index == 0:
        score += 3
    if index == total - 1:
        score += 2
    if index < total * 0.1:
        score += 1

    if _DIGIT_RE.search(sentence):
        score += 1
    if "?" in sentence:
        score += 1
    if ":" in sentence:
        score += 1
    if _NAME_RE.search(sentence):
        score += 1

    length = len(sentence)
    if 30 <= length <= 150:
        score += 1
    if length < 20:
        score -= 2
    if length > 200:
        score -= 1

    tokens = lower.split()
    if len(tokens) > len(set(tokens)) * 1.5:
        score -= 1

    return max(0, score)


def select_top(scored: list[ScoredSentence], count: int) -> list[ScoredSentence]:
    """Return the *count* best sentences, re-ordered by original position.

    Ties keep source order (sorted() is stable).
    """
    best = sorted(scored, key=lambda s: s.score, reverse=True)[:count]
    return sorted(best, key=lambda s: s.position_index)
