"""Tests for platform detection, content ids and caption handling."""

from __future__ import annotations

import pytest

from clipnote.ingest.sources import (
    TranscriptResult,
    captions_to_text,
    detect_platform,
    extract_content_id,
    placeholder_title,
    resolve_title,
)


@pytest.mark.parametrize(
    ("url", "platform"),
    [
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", "youtube"),
        ("https://youtu.be/dQw4w9WgXcQ", "youtube"),
        ("https://m.youtube.com/shorts/abc123", "youtube"),
        ("https://www.instagram.com/reel/Cxyz123/", "instagram"),
        ("https://x.com/someone/status/1234567890", "x"),
        ("https://twitter.com/someone/status/1234567890", "x"),
        ("https://www.facebook.com/watch?v=987654321", "facebook"),
        ("youtube.com/watch?v=abc", "youtube"),
        ("https://vimeo.com/123", "unknown"),
        ("https://notx.com/a/status/1", "unknown"),
        ("not a url", "unknown"),
    ],
)
def test_detect_platform(url, platform):
    assert detect_platform(url) == platform


@pytest.mark.parametrize(
    ("url", "content_id"),
    [
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42", "dQw4w9WgXcQ"),
        ("https://youtu.be/dQw4w9WgXcQ?si=x", "dQw4w9WgXcQ"),
        ("https://www.youtube.com/embed/abc123", "abc123"),
        ("https://www.youtube.com/shorts/short1", "short1"),
        ("https://www.instagram.com/p/Post42/", "Post42"),
        ("https://www.instagram.com/tv/Tv9?igsh=1", "Tv9"),
        ("https://x.com/i/status/555", "555"),
        ("https://www.facebook.com/page/videos/777/", "777"),
        ("https://www.facebook.com/share/v/AbC9/", "AbC9"),
        ("https://www.facebook.com/reel/31337", "31337"),
    ],
)
def test_extract_content_id(url, content_id):
    assert extract_content_id(url) == content_id


def test_extract_content_id_missing():
    assert extract_content_id("https://www.youtube.com/feed/trending") is None
    assert extract_content_id("https://x.com/someone") is None
    assert extract_content_id("https://vimeo.com/123") is None


def test_placeholder_titles():
    assert placeholder_title("youtube") == "Untitled YouTube Video"
    assert placeholder_title("x") == "Untitled X Post"
    assert placeholder_title("other") == "Untitled Content"


def test_resolve_title_prefers_extracted():
    assert resolve_title(TranscriptResult(True, "t", " My Video "), "youtube") == "My Video"


@pytest.mark.parametrize("title", ["", "   ", "No title found"])
def test_resolve_title_placeholder(title):
    assert resolve_title(TranscriptResult(True, "t", title), "instagram") == "Untitled Instagram Content"


def test_captions_to_text_drops_no_text_entries():
    captions = [
        {"start": 0, "text": "Hello  there"},
        {"start": 1, "text": "No text"},
        {"start": 2, "text": ""},
        {"start": 3},
        {"start": 4, "text": "general\nKenobi"},
    ]
    assert captions_to_text(captions) == "Hello there general Kenobi"
