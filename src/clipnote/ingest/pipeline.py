"""Ingestion enrichment: transcript → {summary, tags}.

The LLM availability probe runs once per ingested item; the same answer is
used for the whole pass so a request never switches tiers halfway through.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from clipnote.config import ClipnoteConfig
from clipnote.ingest.sources import TranscriptResult
from clipnote.ingest.summarizer import Summarizer
from clipnote.ingest.tagger import generate_tags

logger = logging.getLogger(__name__)


@dataclass
class Enrichment:
    summary: str
    tags: list[str] = field(default_factory=list)


def summarizer_from_config(cfg: ClipnoteConfig) -> Summarizer:
    g = cfg.generation
    return Summarizer(
        model=g.model,
        max_tokens=g.summary_max_tokens,
        temperature=g.summary_temperature,
        max_length=cfg.summary.max_length,
        short_text_limit=cfg.summary.short_text_limit,
        use_llm=g.enabled,
        timeout=g.timeout,
    )


def enrich(
    text: str,
    cfg: ClipnoteConfig,
    summarizer: Summarizer | None = None,
    llm_available: bool | None = None,
) -> Enrichment:
    """Summarize and tag *text*.

    Args:
        text:          Transcript or note body.
        cfg:           Loaded configuration (tag bounds, generation settings).
        summarizer:    Pre-built summarizer; built from *cfg* when omitted.
        llm_available: Result of an earlier probe; probed here when None and
                       the text is long enough to need the LLM.
    """
    summarizer = summarizer or summarizer_from_config(cfg)
    needs_llm = cfg.generation.enabled and len(text or "") > cfg.summary.short_text_limit
    if llm_available is None:
        llm_available = needs_llm and summarizer.llm_available()
    if needs_llm and not llm_available:
        logger.info("LLM tier unavailable, using local summarizer")

    summary = summarizer.summarize(text, llm_available=llm_available)
    tags = generate_tags(
        text,
        summary,
        min_tags=cfg.tagging.min_tags,
        max_tags=cfg.tagging.max_tags,
    )
    return Enrichment(summary=summary, tags=tags)


def failed_extraction(platform: str) -> Enrichment:
    """Placeholder enrichment stored when the transcript service could not deliver text."""
    return Enrichment(
        summary=(
            "Unable to generate summary - no content available. "
            f"This {platform} content may not have captions enabled or may be restricted."
        ),
        tags=[],
    )


def failed_transcript_text(result: TranscriptResult, platform: str, content_id: str | None) -> str:
    return (
        f"No transcript available for this {platform} content ({content_id}). "
        f"{result.error or 'Unknown error'}"
    )
