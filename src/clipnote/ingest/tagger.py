"""Weighted keyword-category tagging.

score(tag) = sum over keywords of (matches / total_tokens) * 1000 * weight
             x 1.2 when more than one keyword of the category matched
plus additive contextual tags (question-heavy, problem-solving, ...).
The top min(max_tags, max(min_tags, floor(n * 0.6))) tags are returned,
or ["general"] when nothing scored.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

FALLBACK_TAG = "general"

_MULTI_MATCH_BONUS = 1.2


@dataclass(frozen=True)
class TagCategory:
    keywords: tuple[str, ...]
    weight: float


@dataclass(frozen=True)
class ContextRule:
    """Adds *increment* to *tag* when *pattern* matches more than *min_count* times.

    With min_count=0 a single match is enough.
    """

    tag: str
    pattern: re.Pattern[str]
    increment: float
    min_count: int = 0


TAG_CATEGORIES: dict[str, TagCategory] = {
    # Technology & programming
    "artificial-intelligence": TagCategory(
        ("ai", "artificial intelligence", "machine learning", "ml", "neural network",
         "deep learning", "chatgpt", "openai", "llm", "gpt"),
        3,
    ),
    "programming": TagCategory(
        ("code", "coding", "programming", "developer", "software", "algorithm",
         "function", "variable", "debug", "compile"),
        2.5,
    ),
    "web-development": TagCategory(
        ("html", "css", "javascript", "react", "vue", "angular", "frontend",
         "backend", "api", "website", "web app"),
        2.5,
    ),
    "mobile-development": TagCategory(
        ("mobile", "ios", "android", "app development", "flutter", "react native",
         "swift", "kotlin", "mobile app"),
        2.5,
    ),
    "data-science": TagCategory(
        ("data", "analytics", "statistics", "python", "pandas", "numpy",
         "visualization", "dataset", "analysis"),
        2.5,
    ),
    "blockchain": TagCategory(
        ("blockchain", "crypto", "bitcoin", "ethereum", "nft", "defi",
         "smart contract", "cryptocurrency", "web3"),
        2,
    ),
    "cloud-computing": TagCategory(
        ("aws", "azure", "google cloud", "cloud computing", "docker", "kubernetes",
         "serverless", "microservices"),
        2,
    ),
    "cybersecurity": TagCategory(
        ("security", "hacking", "encryption", "vulnerability", "penetration testing",
         "cybersecurity", "firewall"),
        2,
    ),
    # Business & industry
    "entrepreneurship": TagCategory(
        ("startup", "entrepreneur", "business", "funding", "venture capital",
         "investment", "founder", "pitch"),
        2,
    ),
    "marketing": TagCategory(
        ("marketing", "advertising", "brand", "social media", "seo",
         "content marketing", "campaign", "audience"),
        2,
    ),
    "finance": TagCategory(
        ("finance", "money", "investment", "trading", "stock", "market",
         "economy", "financial", "budget"),
        2,
    ),
    "productivity": TagCategory(
        ("productivity", "time management", "organization", "efficiency",
         "workflow", "automation", "optimization"),
        1.5,
    ),
    # Content types
    "tutorial": TagCategory(
        ("tutorial", "how to", "guide", "step by step", "learn", "instruction",
         "walkthrough", "lesson"),
        2,
    ),
    "review": TagCategory(
        ("review", "opinion", "analysis", "comparison", "pros and cons", "rating",
         "evaluation", "assessment"),
        1.5,
    ),
    "news": TagCategory(
        ("news", "update", "announcement", "breaking", "latest", "current events",
         "report", "breaking news"),
        1.5,
    ),
    "interview": TagCategory(
        ("interview", "conversation", "discussion", "talk", "podcast", "q&a",
         "chat", "dialogue"),
        1.5,
    ),
    "entertainment": TagCategory(
        ("entertainment", "funny", "comedy", "humor", "fun", "amusing",
         "hilarious", "joke", "meme"),
        1,
    ),
    # Specific topics
    "gaming": TagCategory(
        ("game", "gaming", "video game", "gameplay", "streamer", "twitch",
         "esports", "gamer", "console"),
        2,
    ),
    "health-fitness": TagCategory(
        ("health", "fitness", "wellness", "medical", "nutrition", "exercise",
         "workout", "diet", "mental health"),
        2,
    ),
    "education": TagCategory(
        ("education", "learning", "course", "teaching", "student", "university",
         "school", "academic", "study"),
        2,
    ),
    "science": TagCategory(
        ("science", "research", "experiment", "discovery", "scientific", "study",
         "theory", "hypothesis"),
        2,
    ),
    "travel": TagCategory(
        ("travel", "trip", "vacation", "destination", "tourism", "adventure",
         "journey", "explore"),
        1.5,
    ),
    "food": TagCategory(
        ("food", "cooking", "recipe", "restaurant", "chef", "cuisine", "meal",
         "dish", "ingredient"),
        1.5,
    ),
}

CONTEXT_RULES: tuple[ContextRule, ...] = (
    ContextRule("q-and-a", re.compile(r"\?"), 2, min_count=3),
    ContextRule(
        "time-management",
        re.compile(r"\b(minute|hour|day|week|month|year|time|schedule|deadline)\b", re.IGNORECASE),
        1,
    ),
    ContextRule(
        "problem-solving",
        re.compile(r"\b(problem|solution|solve|fix|issue|troubleshoot|debug)\b", re.IGNORECASE),
        2,
    ),
    ContextRule(
        "beginner-friendly",
        re.compile(
            r"\b(beginner|basic|introduction|getting started|first time|new to)\b", re.IGNORECASE
        ),
        1.5,
    ),
    ContextRule(
        "advanced",
        re.compile(
            r"\b(advanced|expert|professional|complex|sophisticated|in-depth)\b", re.IGNORECASE
        ),
        1.5,
    ),
    ContextRule(
        "tips-and-tricks",
        re.compile(r"\b(tip|trick|hack|secret|technique|method|strategy)\b", re.IGNORECASE),
        2,
    ),
)


def generate_tags(
    transcript: str,
    summary: str,
    *,
    min_tags: int = 3,
    max_tags: int = 6,
    categories: dict[str, TagCategory] = TAG_CATEGORIES,
    rules: tuple[ContextRule, ...] = CONTEXT_RULES,
) -> list[str]:
    """Return ranked tags for a transcript and its summary.

    Returns [] when the combined text has no tokens at all, and
    ["general"] when tokens exist but nothing scored.
    """
    content = f"{transcript or ''} {summary or ''}".lower()
    total_tokens = len(content.split())
    if total_tokens == 0:
        return []

    scores = score_categories(content, total_tokens, categories)
    apply_context_rules(content, scores, rules)

    ordered = sorted(scores.items(), key=lambda kv: kv[1], reverse=True)
    ranked = [tag for tag, score in ordered if score > 0]
    limit = min(max_tags, max(min_tags, math.floor(len(ranked) * 0.6)))
    return ranked[:limit] or [FALLBACK_TAG]


def score_categories(
    content: str,
    total_tokens: int,
    categories: dict[str, TagCategory] = TAG_CATEGORIES,
) -> dict[str, float]:
    """Length-normalised keyword score per category (nonzero entries only)."""
    scores: dict[str, float] = {}
    for tag, category in categories.items():
        score = 0.0
        matched_keywords = 0
        for keyword in category.keywords:
            hits = len(_keyword_pattern(keyword).findall(content))
            if hits:
                score += hits / total_tokens * 1000 * category.weight
                matched_keywords += 1
        if matched_keywords > 1:
            score *= _MULTI_MATCH_BONUS
        if score > 0:
            scores[tag] = score
    return scores


def apply_context_rules(
    content: str,
    scores: dict[str, float],
    rules: tuple[ContextRule, ...] = CONTEXT_RULES,
) -> None:
    """Add contextual increments into *scores* in place."""
    for rule in rules:
        if rule.min_count:
            hits = len(rule.pattern.findall(content))
        else:
            hits = 1 if rule.pattern.search(content) else 0
        if hits > rule.min_count:
            scores[rule.tag] = scores.get(rule.tag, 0.0) + rule.increment


def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE)
