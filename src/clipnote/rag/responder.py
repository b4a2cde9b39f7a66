"""Chat answers over stored content: LLM tier with a local response composer.

Pipeline:
  1. search() ranks the stored items for the question.
  2. No hits → fixed "nothing found" message, the LLM is never called.
  3. LLM available → build_context() + one chat completion.
  4. LLM unavailable or failing → simple_response() from the ranked hits.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from clipnote.config import ClipnoteConfig
from clipnote.db.models import ContentItem
from clipnote.rag.llm_client import complete, is_available
from clipnote.rag.search import SearchResult, search

logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = (
    "I couldn't find any relevant content in your videos for that query. "
    "Try asking about specific topics or using different keywords."
)

_CHAT_SYSTEM = """\
You are an expert video content assistant. Analyze the provided video information \
and give a comprehensive, detailed answer to the user's question.

INSTRUCTIONS:
1. Be comprehensive: provide a detailed explanation based on the video content.
2. Be specific: reference actual content, concepts, and details from the videos.
3. Be structured: organize your response logically with clear sections if needed.
4. Be conversational: write in a helpful, engaging tone.

GUIDELINES:
- If multiple videos are relevant, explain how they relate and what each covers.
- Use the relevance scores to prioritize information from the most relevant videos.
- Quote or paraphrase specific content from the videos to support your explanations."""

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


@dataclass
class ChatAnswer:
    """The reply plus the hits it was built from."""

    response: str
    results: list[SearchResult] = field(default_factory=list)
    # Outcome of the availability check; None when the LLM tier was never considered.
    llm_available: bool | None = None

    def matched_items(self) -> list[dict]:
        return [r.projection() for r in self.results]


def answer(
    message: str,
    items: list[ContentItem],
    cfg: ClipnoteConfig,
    llm_available: bool | None = None,
) -> ChatAnswer:
    """Answer *message* from *items*.

    Args:
        message:       The user's question.
        items:         Candidate content items (videos and notes).
        cfg:           Loaded configuration (generation + search settings).
        llm_available: Result of an earlier probe; probed here when None, the
                       LLM is enabled and the search found something.
    """
    results = search(message, items, top_k=cfg.search.top_k)
    if not results:
        return ChatAnswer(response=NO_RESULTS_MESSAGE)

    if not cfg.generation.enabled:
        return ChatAnswer(response=simple_response(message, results), results=results)

    if llm_available is None:
        llm_available = is_available(cfg.generation.model)

    if not llm_available:
        logger.warning("LLM not available, falling back to simple response")
        return ChatAnswer(
            response=simple_response(message, results), results=results, llm_available=False
        )

    try:
        response = complete(
            model=cfg.generation.model,
            messages=[
                {"role": "system", "content": _CHAT_SYSTEM},
                {
                    "role": "user",
                    "content": f"Context:\n{build_context(message, results)}\n\nUser Question: {message}",
                },
            ],
            max_tokens=cfg.generation.chat_max_tokens,
            temperature=cfg.generation.chat_temperature,
            timeout=cfg.generation.timeout,
        )
    except Exception as exc:
        logger.warning("LLM generation failed, falling back to simple response: %s", exc)
        response = ""

    return ChatAnswer(
        response=response or simple_response(message, results),
        results=results,
        llm_available=True,
    )


# ------------------------------------------------------------------
# LLM context
# ------------------------------------------------------------------


def build_context(message: str, results: list[SearchResult]) -> str:
    """Render ranked hits as the plain-text context block sent to the LLM."""
    parts = [
        f'User Query: "{message}"',
        f"Found {len(results)} relevant item(s) from your content:",
        "",
    ]
    for index, result in enumerate(results, start=1):
        item = result.item
        label = "Note" if item.source_type == "note" else "Video"
        parts.append(f'=== {label} {index}: "{item.title}" ===')
        parts.append(f"Relevance Score: {result.relevance_score}")
        parts.append(f"Type: {item.source_type}")
        if item.summary:
            parts.append(f"Summary: {item.summary}")
        if result.matched_snippet:
            parts.append(f"Key Content: {result.matched_snippet}")
        if item.source_type == "video" and item.raw_text:
            extra = extract_better_context(item.raw_text, message)
            if extra and extra != result.matched_snippet:
                parts.append(f"Additional Context: {extra}")
        parts.append("")
    return "\n".join(parts)


def extract_better_context(transcript: str, query: str) -> str:
    """Up to three transcript sentences mentioning a query word, else the first two."""
    query_terms = [w for w in query.lower().split(" ") if len(w) > 2]
    sentences = [s for s in _SENTENCE_SPLIT_RE.split(transcript) if len(s.strip()) > 20]

    relevant = [s for s in sentences if any(t in s.lower() for t in query_terms)]
    chosen = relevant[:3] if relevant else sentences[:2]
    if not chosen:
        return ""
    return ". ".join(s.strip() for s in chosen) + "."


# ------------------------------------------------------------------
# Local tier
# ------------------------------------------------------------------


def simple_response(message: str, results: list[SearchResult]) -> str:
    """Compose an answer from the hits alone. *results* must be non-empty."""
    lower = message.lower()

    if "summary" in lower or "summarize" in lower:
        summaries = [f'"{r.item.title}": {r.item.summary}' for r in results if r.item.summary][:3]
        if summaries:
            return "Here are summaries from your most relevant videos:\n\n" + "\n\n".join(summaries)

    if "videos about" in lower or "content about" in lower:
        titles = "\n".join(f"• {r.item.title}" for r in results[:5])
        return f"I found these videos related to your query:\n\n{titles}"

    top = results[0]
    response = f'Based on your videos, I found relevant information in "{top.item.title}".'
    if top.matched_snippet:
        response += f'\n\nHere\'s what I found: "{top.matched_snippet}"'
    others = len(results) - 1
    if others:
        response += f"\n\nI also found related content in {others} other video{'s' if others > 1 else ''}."
    return response
