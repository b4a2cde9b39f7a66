"""Tests for sentence importance scoring."""

from __future__ import annotations

from clipnote.ingest.scoring import ScoredSentence, score_sentences, select_top
from clipnote.ingest.text import preprocess


def test_two_sentences_or_fewer_score_one():
    scored = score_sentences("The first sentence is long enough. The second sentence is long too.")
    assert [s.score for s in scored] == [1, 1]
    assert [s.position_index for s in scored] == [0, 1]


def test_empty_text_yields_no_sentences():
    assert score_sentences("") == []


def test_preserves_source_order():
    text = (
        "Opening remarks about the weekly plan. "
        "A middle sentence without anything special. "
        "Closing words for the whole session."
    )
    scored = score_sentences(text)
    assert [s.position_index for s in scored] == [0, 1, 2]
    assert scored[0].text.startswith("Opening")


def test_position_bonuses():
    text = (
        "Opening remarks about the weekly plan. "
        "A middle sentence without anything special. "
        "Closing words for the whole session."
    )
    first, middle, last = score_sentences(text)
    # first: +3 position, +1 first 10 %, +1 length
    assert first.score == 5
    # last: +2 position, +1 length
    assert last.score == 3
    # middle: length only
    assert middle.score == 1


def test_keyword_weights_and_content_cues():
    text = (
        "Opening remarks about the weekly plan. "
        "The key result: revenue grew 40 percent. "
        "Closing words for the whole session."
    )
    middle = score_sentences(text)[1]
    # key +3, result +2, digit +1, colon +1, length +1
    assert middle.score == 8


def test_repetition_penalty_reduces_score():
    raw = (
        "Opening remarks about the weekly plan. "
        + " ".join(["um so basically the the important important thing is the result"] * 6)
        + ". Closing words for the whole session."
    )
    scored = score_sentences(preprocess(raw))
    repeated = scored[1]
    assert repeated.text.startswith("the the important")
    # important +3, result +2, over 200 chars -1, repetition -1
    assert repeated.score == 3

    clean = score_sentences(
        "Opening remarks about the weekly plan. "
        "The important result of this phase was reviewed. "
        "Closing words for the whole session."
    )[1]
    assert repeated.score < clean.score


def test_scores_never_negative():
    text = "x" * 25 + ". " + "word " * 60 + ". " + "y" * 25 + "."
    assert all(s.score >= 0 for s in score_sentences(text))


def test_custom_keyword_table():
    text = (
        "Opening remarks about the weekly plan. "
        "A sentence about pasta and sauce today. "
        "Closing words for the whole session."
    )
    default = score_sentences(text)[1].score
    custom = score_sentences(text, keywords={5: ("pasta",)})[1].score
    assert custom == default + 5


def test_select_top_reorders_by_position():
    scored = [
        ScoredSentence("a", 1, 0),
        ScoredSentence("b", 5, 1),
        ScoredSentence("c", 3, 2),
        ScoredSentence("d", 4, 3),
    ]
    assert [s.text for s in select_top(scored, 2)] == ["b", "d"]


def test_select_top_ties_keep_source_order():
    scored = [ScoredSentence(t, 2, i) for i, t in enumerate("abc")]
    assert [s.text for s in select_top(scored, 2)] == ["a", "b"]
