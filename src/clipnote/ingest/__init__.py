"""clipnote ingest pipeline — cleanup, scoring, summaries and tags."""

from clipnote.ingest.keyinfo import KeyInformation, extract_key_info
from clipnote.ingest.scoring import ScoredSentence, score_sentences
from clipnote.ingest.summarizer import Summarizer, compose_summary, generate_summary
from clipnote.ingest.tagger import generate_tags
from clipnote.ingest.text import preprocess
from clipnote.ingest.topics import classify_topics

__all__ = [
    "KeyInformation",
    "ScoredSentence",
    "Summarizer",
    "classify_topics",
    "compose_summary",
    "extract_key_info",
    "generate_summary",
    "generate_tags",
    "preprocess",
    "score_sentences",
]
