"""Keyword relevance search across stored content items.

Per query term and item field, occurrences are weighted and capped:

  field       per match   cap
  title          10        30
  summary         5        20
  transcript      1        10
  tags            8        25

An item's relevance score is the sum over all terms. Items scoring 0 are
dropped; the rest are ranked best-first and cut to top_k.
"""

from __future__ import annotations

import re
import string
from dataclasses import dataclass

from clipnote.db.models import ContentItem, encode_tags

STOP_WORDS: frozenset[str] = frozenset(
    [
        "what", "how", "why", "when", "where", "tell", "me", "about", "the", "a", "an",
        "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by", "is",
        "are", "was", "were", "be", "been", "have", "has", "had", "do", "does", "did",
        "will", "would", "could", "should", "may", "might", "can", "i", "you", "he",
        "she", "it", "we", "they", "my", "your", "his", "her", "its", "our", "their",
    ]
)

# (per-match points, cap) per field
FIELD_WEIGHTS: dict[str, tuple[int, int]] = {
    "title": (10, 30),
    "summary": (5, 20),
    "transcript": (1, 10),
    "tags": (8, 25),
}

DEFAULT_TOP_K = 5

_ALPHA_RE = re.compile(r"^[a-zA-Z]+$")
_PHRASE_MIN_LENGTH = 5
_SNIPPET_CONTEXT = 200
_LOOSE_SNIPPET_CONTEXT = 300


@dataclass
class SearchResult:
    """One ranked hit: the item, its score and the best matching excerpt."""

    item: ContentItem
    relevance_score: int
    matched_snippet: str = ""

    def projection(self) -> dict:
        """Lightweight form stored with chat history."""
        return {
            "id": self.item.id,
            "title": self.item.title,
            "relevance_score": self.relevance_score,
            "type": self.item.source_type,
        }


def extract_search_terms(query: str) -> list[str]:
    """Lowercased content words of *query*, plus the whole query as a phrase.

    Tokens are trimmed of surrounding punctuation ("topic?" -> "topic"); then
    tokens of two characters or fewer, stop words and tokens with any
    non-letter character are dropped. The full lowercased query is appended
    when it is longer than five characters.
    """
    lower = query.lower()
    terms = [
        word
        for word in (token.strip(string.punctuation) for token in lower.split())
        if len(word) > 2 and word not in STOP_WORDS and _ALPHA_RE.match(word)
    ]
    if len(lower) > _PHRASE_MIN_LENGTH:
        terms.append(lower)
    return terms


def search(
    query: str,
    items: list[ContentItem],
    top_k: int = DEFAULT_TOP_K,
) -> list[SearchResult]:
    """Rank *items* against *query* and return at most *top_k* hits with score > 0."""
    terms = extract_search_terms(query)
    if not terms:
        return []

    results: list[SearchResult] = []
    for item in items:
        fields = searchable_fields(item)
        score = score_fields(fields, terms)
        if score > 0:
            content = " ".join(fields.values())
            results.append(
                SearchResult(
                    item=item,
                    relevance_score=score,
                    matched_snippet=extract_relevant_content(content, terms),
                )
            )

    results.sort(key=lambda r: r.relevance_score, reverse=True)
    return results[:top_k]


def searchable_fields(item: ContentItem) -> dict[str, str]:
    """Lowercased field texts; a note's body is scored as its summary."""
    if item.source_type == "note":
        summary, transcript = item.raw_text, ""
    else:
        summary, transcript = item.summary, item.raw_text
    return {
        "title": (item.title or "").lower(),
        "summary": (summary or "").lower(),
        "transcript": (transcript or "").lower(),
        "tags": encode_tags(item.tags).lower(),
    }


def score_fields(fields: dict[str, str], terms: list[str]) -> int:
    score = 0
    for term in terms:
        pattern = re.compile(re.escape(term))
        for name, text in fields.items():
            per_match, cap = FIELD_WEIGHTS[name]
            hits = len(pattern.findall(text))
            score += min(hits * per_match, cap)
    return score


def extract_relevant_content(content: str, terms: list[str]) -> str:
    """Return the longest excerpt around the first term that matches *content*.

    Whole-word matches are tried for every term before falling back to plain
    substring matches with a wider window. Returns "" when nothing matches.
    """
    for term in terms:
        pattern = re.compile(
            rf"(?:^|\s)(.{{0,{_SNIPPET_CONTEXT}}}\b{re.escape(term)}\b.{{0,{_SNIPPET_CONTEXT}}})(?:\s|$)",
            re.IGNORECASE,
        )
        best = _longest_match(pattern, content)
        if best:
            return best

    for term in terms:
        pattern = re.compile(
            rf".{{0,{_LOOSE_SNIPPET_CONTEXT}}}{re.escape(term)}.{{0,{_LOOSE_SNIPPET_CONTEXT}}}",
            re.IGNORECASE,
        )
        best = _longest_match(pattern, content)
        if best:
            return best

    return ""


def _longest_match(pattern: re.Pattern[str], content: str) -> str:
    longest = ""
    for match in pattern.finditer(content):
        if len(match.group(0)) > len(longest):
            longest = match.group(0)
    return longest.strip()
