"""Social-media URL handling: platform detection, content ids, caption flattening.

Transcript extraction itself is done by an external service; this module only
defines the shape it must return (TranscriptResult) and the protocol it
implements (TranscriptExtractor).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import urlparse

PLATFORMS = ("youtube", "instagram", "x", "facebook")

_PLATFORM_HOSTS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("youtube", ("youtube.com", "youtu.be")),
    ("instagram", ("instagram.com",)),
    ("x", ("x.com", "twitter.com")),
    ("facebook", ("facebook.com",)),
)

_ID_PATTERNS: dict[str, tuple[re.Pattern[str], ...]] = {
    "youtube": (
        re.compile(r"youtube\.com/watch\?v=([^&\n?#]+)"),
        re.compile(r"youtu\.be/([^&\n?#]+)"),
        re.compile(r"youtube\.com/embed/([^&\n?#]+)"),
        re.compile(r"youtube\.com/v/([^&\n?#]+)"),
        re.compile(r"youtube\.com/shorts/([^&\n?#]+)"),
    ),
    "instagram": (
        re.compile(r"instagram\.com/reel/([^/?#]+)"),
        re.compile(r"instagram\.com/p/([^/?#]+)"),
        re.compile(r"instagram\.com/tv/([^/?#]+)"),
    ),
    "x": (
        re.compile(r"(?:x|twitter)\.com/\w+/status/(\d+)"),
        re.compile(r"(?:x|twitter)\.com/i/status/(\d+)"),
    ),
    "facebook": (
        re.compile(r"facebook\.com/watch/?\?v=(\d+)"),
        re.compile(r"facebook\.com/.*/videos/(\d+)"),
        re.compile(r"facebook\.com/video\.php\?v=(\d+)"),
        re.compile(r"facebook\.com/share/v/([^/?#]+)"),
        re.compile(r"facebook\.com/reel/(\d+)"),
    ),
}

_PLACEHOLDER_TITLES: dict[str, str] = {
    "youtube": "Untitled YouTube Video",
    "instagram": "Untitled Instagram Content",
    "x": "Untitled X Post",
    "facebook": "Untitled Facebook Video",
}

_NO_TITLE = "No title found"


@dataclass
class TranscriptResult:
    """What a transcript extraction service hands back for one URL."""

    success: bool
    text: str = ""
    title: str = ""
    error: str | None = None


class TranscriptExtractor(Protocol):
    def extract(self, url: str) -> TranscriptResult: ...


def detect_platform(url: str) -> str:
    """Return 'youtube', 'instagram', 'x', 'facebook' or 'unknown'."""
    host = _host_of(url)
    for platform, hosts in _PLATFORM_HOSTS:
        if any(host == h or host.endswith("." + h) for h in hosts):
            return platform
    return "unknown"


def _host_of(url: str) -> str:
    if "://" not in url:
        url = "https://" + url
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return ""
    return host.lower()


def extract_content_id(url: str, platform: str | None = None) -> str | None:
    """Return the platform-specific content id in *url*, or None."""
    platform = platform or detect_platform(url)
    for pattern in _ID_PATTERNS.get(platform, ()):
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def placeholder_title(platform: str) -> str:
    return _PLACEHOLDER_TITLES.get(platform, "Untitled Content")


def resolve_title(result: TranscriptResult, platform: str) -> str:
    """Use the extracted title unless it is blank or the service's 'no title' marker."""
    title = (result.title or "").strip()
    if title and title != _NO_TITLE:
        return title
    return placeholder_title(platform)


def captions_to_text(captions: list[dict]) -> str:
    """Join caption texts into one transcript, dropping 'No text' entries."""
    parts = [
        str(c.get("text", "")).strip()
        for c in captions
        if c.get("text") and str(c["text"]).strip() != "No text"
    ]
    return re.sub(r"\s+", " ", " ".join(p for p in parts if p)).strip()
