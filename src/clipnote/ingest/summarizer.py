"""Transcript summarizer — LLM tier with a local extractive fallback.

Short transcripts (<= short_text_limit chars) always use the short extract.
Longer transcripts go to the LLM when it is available and answers with
non-empty text; otherwise compose_summary() builds an extractive summary from
scored sentences, key information and topic context.
"""

from __future__ import annotations

import logging
import math
import re

from clipnote.ingest.keyinfo import extract_key_info
from clipnote.ingest.scoring import score_sentences, select_top
from clipnote.ingest.text import collapse_whitespace, preprocess, split_sentences
from clipnote.ingest.topics import classify_topics
from clipnote.rag.llm_client import complete, is_available

logger = logging.getLogger(__name__)

NO_CONTENT_SUMMARY = "No content available for summary."
UNUSABLE_SUMMARY = "Unable to generate meaningful summary from the available content."

_PASSTHROUGH_LENGTH = 150
_MIN_SUMMARY_LENGTH = 50
_SIMILARITY_LIMIT = 0.8
_DEFAULT_MAX_LENGTH = 500

_SYSTEM_PROMPT = (
    "You are an expert at creating concise, accurate summaries. "
    "Create a clear, well-structured summary that captures the main points and key information. "
    "Focus on the most important details and maintain the original meaning."
)
_USER_PROMPT = """\
Please summarize the following text. Context: This is a transcript from a video or audio recording

Text to summarize:
{text}"""

_DEFAULT_MODEL = "openrouter/meta-llama/llama-3.1-8b-instruct"
_DEFAULT_MAX_TOKENS = 500

_DOUBLE_PERIOD_RE = re.compile(r"\.\s*\.")
_DIGIT_RE = re.compile(r"\d+")
_TERMINAL_RE = re.compile(r"[.!?]$")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_ALNUM_RE = re.compile(r"[^\W_]")


# ------------------------------------------------------------------
# Local tier
# ------------------------------------------------------------------


def simple_summary(text: str) -> str:
    """Short-text extract: the cleaned text, or its first three sentences."""
    clean = preprocess(text)
    if len(clean) <= _PASSTHROUGH_LENGTH:
        return clean
    sentences = split_sentences(clean)[:3]
    if not sentences:
        return clean[:_PASSTHROUGH_LENGTH]
    return ". ".join(sentences) + "."


def compose_summary(text: str, max_length: int = _DEFAULT_MAX_LENGTH) -> str:
    """Build an extractive summary of *text* without any network call."""
    if not text or not text.strip():
        return NO_CONTENT_SUMMARY

    clean = preprocess(text)
    if len(clean) <= _PASSTHROUGH_LENGTH:
        return clean or UNUSABLE_SUMMARY

    scored = score_sentences(clean)
    count = min(4, max(2, math.ceil(len(scored) * 0.3)))
    selected = select_top(scored, count)
    if not selected:
        return UNUSABLE_SUMMARY
    summary = ". ".join(s.text for s in selected)

    key_info = extract_key_info(clean)
    if key_info.numbers and not _DIGIT_RE.search(summary):
        summary = f"The discussion mentions {key_info.numbers[0]}. {summary}"

    topics = classify_topics(clean)
    if topics:
        framed = f"This {topics[0]}-focused discussion covers: {summary}"
        if len(framed) < max_length:
            summary = framed

    if not _TERMINAL_RE.search(summary):
        summary += "."

    summary = post_process(summary, clean, max_length=max_length)
    if not _ALNUM_RE.search(summary):
        return UNUSABLE_SUMMARY
    return summary


def post_process(summary: str, original: str, max_length: int = _DEFAULT_MAX_LENGTH) -> str:
    """Tidy punctuation, de-duplicate against the source and clip to *max_length*."""
    summary = collapse_whitespace(_DOUBLE_PERIOD_RE.sub(".", summary))

    if similarity(summary, original) > _SIMILARITY_LIMIT:
        sentences = [s for s in _SENTENCE_SPLIT_RE.split(summary) if s.strip()]
        if len(sentences) > 2:
            keep = math.ceil(len(sentences) * 0.7)
            summary = ". ".join(s.strip() for s in sentences[:keep]) + "."

    summary = clip_to_length(summary, max_length)

    if len(summary) < _MIN_SUMMARY_LENGTH:
        first = _SENTENCE_SPLIT_RE.split(original)[0]
        if len(first) > 20:
            summary = first[:200] + ("..." if len(first) > 200 else "")

    return summary


def clip_to_length(summary: str, max_length: int = _DEFAULT_MAX_LENGTH) -> str:
    """Cut *summary* after the last period within *max_length*, or hard-truncate with "...".

    The result is at most max_length + 3 characters.
    """
    if len(summary) <= max_length:
        return summary
    cutoff = summary.rfind(".", 0, max_length + 1)
    if cutoff > 200:
        return summary[: cutoff + 1]
    return summary[:max_length] + "..."


def similarity(a: str, b: str) -> float:
    """Jaccard similarity of the lowercase whitespace-token sets of *a* and *b*."""
    words_a = set(a.lower().split())
    words_b = set(b.lower().split())
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)


# ------------------------------------------------------------------
# Two-tier entry point
# ------------------------------------------------------------------


class Summarizer:
    """Summarize transcripts with an LLM, falling back to compose_summary().

    Args:
        model:            LiteLLM model string for summary generation.
        max_tokens:       Maximum tokens in the generated summary.
        temperature:      Sampling temperature for the LLM call.
        max_length:       Character bound for locally composed summaries.
        short_text_limit: Transcripts at or under this length skip the LLM.
        use_llm:          False forces the local tier.
    """

    def __init__(
        self,
        model: str = _DEFAULT_MODEL,
        max_tokens: int = _DEFAULT_MAX_TOKENS,
        temperature: float = 0.3,
        max_length: int = _DEFAULT_MAX_LENGTH,
        short_text_limit: int = 500,
        use_llm: bool = True,
        timeout: float = 30.0,
    ) -> None:
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._max_length = max_length
        self._short_text_limit = short_text_limit
        self._use_llm = use_llm
        self._timeout = timeout

    @property
    def model(self) -> str:
        return self._model

    def llm_available(self) -> bool:
        """Single availability probe; callers reuse the answer for the whole request."""
        return self._use_llm and is_available(self._model)

    def summarize(self, transcript: str, llm_available: bool | None = None) -> str:
        """Return a summary for *transcript*.

        Args:
            transcript:    Raw transcript or note text.
            llm_available: Result of an earlier probe. None probes now.

        Both tiers honour max_length (see clip_to_length).
        """
        if not transcript or not transcript.strip():
            return NO_CONTENT_SUMMARY

        if len(transcript) <= self._short_text_limit:
            return simple_summary(transcript) or UNUSABLE_SUMMARY

        if llm_available is None:
            llm_available = self.llm_available()

        if llm_available:
            summary = self._generate(transcript).strip()
            if summary:
                return clip_to_length(summary, self._max_length)
            logger.warning("LLM returned no summary, falling back to local summarizer")

        return compose_summary(transcript, max_length=self._max_length)

    def _generate(self, transcript: str) -> str:
        """Ask the LLM for a summary. Returns "" on failure."""
        try:
            return complete(
                model=self._model,
                messages=[
                    {"role": "system", "content": _SYSTEM_PROMPT},
                    {"role": "user", "content": _USER_PROMPT.format(text=transcript)},
                ],
                max_tokens=self._max_tokens,
                temperature=self._temperature,
                timeout=self._timeout,
            )
        except Exception as exc:
            logger.warning("LLM summarization failed, falling back to local summarizer: %s", exc)
            return ""


def generate_summary(
    transcript: str,
    summarizer: Summarizer | None = None,
    llm_available: bool | None = None,
) -> str:
    """Module-level convenience wrapper around Summarizer.summarize()."""
    return (summarizer or Summarizer()).summarize(transcript, llm_available=llm_available)
