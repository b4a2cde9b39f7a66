"""Coarse topic labels from fixed keyword sets."""

from __future__ import annotations

TOPIC_KEYWORDS: dict[str, tuple[str, ...]] = {
    "technology": ("tech", "software", "app", "digital", "computer", "internet", "ai", "machine learning"),
    "business": ("business", "company", "startup", "market", "revenue", "profit", "customer", "product"),
    "education": ("learn", "study", "course", "education", "school", "university", "student", "teacher"),
    "health": ("health", "medical", "fitness", "wellness", "doctor", "treatment", "medicine", "exercise"),
    "science": ("science", "research", "study", "experiment", "data", "analysis", "theory", "hypothesis"),
    "entertainment": ("movie", "music", "game", "fun", "entertainment", "show", "series", "book"),
}

MIN_KEYWORD_HITS = 2


def classify_topics(
    text: str,
    table: dict[str, tuple[str, ...]] = TOPIC_KEYWORDS,
) -> list[str]:
    """Return topics with at least two keyword hits, in table order.

    Keywords match as plain substrings ("ai" also hits "said"). Order follows
    the table, not hit count.
    """
    lower = text.lower()
    return [
        topic
        for topic, keywords in table.items()
        if sum(1 for keyword in keywords if keyword in lower) >= MIN_KEYWORD_HITS
    ]
