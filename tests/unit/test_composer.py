"""Test quick deck and batch composition."""

import pytest

from deck_export.composer import (
    BatchRow,
    CompositionError,
    LessonMeta,
    compose_batch,
    compose_quick_deck,
    parse_lesson_meta,
)


def _titles(deck):
    return [s.payload.title for s in deck.slides]


def _bodies(deck):
    return [s.payload.body for s in deck.slides]


def test_single_slide_keeps_whole_content():
    deck = compose_quick_deck("My deck", "p1\n\np2", subject="Math", lesson="L1")

    assert _titles(deck) == ["My deck"]
    assert _bodies(deck) == ["p1\n\np2"]
    assert deck.slides[0].payload.subject == "Math"
    assert deck.slides[0].layout is None
    assert deck.warnings == []


def test_content_blocks_become_slides_with_own_titles():
    deck = compose_quick_deck("Deck", "Intro\nfirst body\n---\nNext\nsecond body")

    assert _titles(deck) == ["Intro", "Next"]
    assert _bodies(deck) == ["first body", "second body"]


def test_per_slide_titles_take_precedence():
    deck = compose_quick_deck("A\n---\nB", "x\nbody x\n---\ny\nbody y")

    assert deck.title == "A"
    assert _titles(deck) == ["A", "B"]
    assert _bodies(deck) == ["body x", "body y"]


def test_paragraphs_are_distributed_over_text_boxes(two_text_layout):
    content = "\n\n".join(f"p{i}" for i in range(1, 8))

    deck = compose_quick_deck("Deck", content, layouts=[two_text_layout, two_text_layout])

    assert _bodies(deck) == ["p1\n\np2\n\np3", "p4\n\np5\n\np6"]
    assert len(deck.warnings) == 1
    assert "1 paragraph(s)" in deck.warnings[0]


def test_last_layout_repeats_for_extra_slides(two_text_layout):
    deck = compose_quick_deck("Deck", "A\na\n---\nB\nb\n---\nC\nc", layouts=[None, two_text_layout])

    assert len(deck.slides) == 3
    assert all(s.layout == two_text_layout for s in deck.slides)


def test_template_deck_uses_layout_count(two_text_layout):
    deck = compose_quick_deck("Deck", "p1\n\np2", layouts=[two_text_layout], template_deck=True)

    assert len(deck.slides) == 1
    assert _bodies(deck) == ["p1\n\np2"]
    assert deck.warnings == []


def test_structured_content_is_not_distributed(two_text_layout):
    content = "\\--\\--a\\-b"

    deck = compose_quick_deck("Deck", content, layouts=[two_text_layout, two_text_layout])

    assert _bodies(deck) == [content, content]


@pytest.mark.parametrize("raw,expected", [
    ("Math\nFractions", LessonMeta("Math", "Fractions")),
    ("Math | Fractions", LessonMeta("Math", "Fractions")),
    ("Math - Fractions", LessonMeta("Math", "Fractions")),
    ("Math-Fractions", LessonMeta("", "Math-Fractions")),
    ("Fractions", LessonMeta("", "Fractions")),
    ("Math |", LessonMeta("Math", "Math")),
    ("  \n Only \n ", LessonMeta("", "Only")),
    ("", LessonMeta("", "")),
    (None, LessonMeta("", "")),
])
def test_parse_lesson_meta(raw, expected):
    assert parse_lesson_meta(raw) == expected


def test_batch_one_deck_per_row():
    rows = [
        ("Math | Fractions", "Intro\nwhat is a fraction\n---\nPractice\n1/2 + 1/4"),
        ("", "   "),
        BatchRow("Science", "Cells\nbody"),
    ]

    result = compose_batch(rows)

    assert [d.title for d in result.decks] == ["Fractions", "Science"]
    first = result.decks[0]
    assert _titles(first) == ["Intro", "Practice"]
    assert first.slides[0].payload.subject == "Math"
    assert first.slides[0].payload.lesson == "Fractions"
    assert result.warnings == []


def test_batch_repeated_layout(two_text_layout):
    result = compose_batch([("Deck", "A\na\n---\nB\nb")], repeated_layout=two_text_layout)

    assert [s.layout for s in result.decks[0].slides] == [two_text_layout, two_text_layout]


def test_batch_truncates_to_template_page_count():
    result = compose_batch(
        [("Math | Fractions", "A\na\n---\nB\nb\n---\nC\nc")],
        template_layouts=["L1", "L2"],
    )

    deck = result.decks[0]
    assert [s.layout for s in deck.slides] == ["L1", "L2"]
    assert result.warnings == [
        "Content exceeds template page count: 3 pages for presentation 'Fractions', template has 2 pages."
    ]
    assert deck.warnings == result.warnings


@pytest.mark.parametrize("row", [("Name", ""), ("", "Title\nbody")])
def test_batch_half_filled_row_is_rejected(row):
    with pytest.raises(CompositionError, match="Row 1"):
        compose_batch([row])


def test_batch_row_without_blocks_is_rejected():
    with pytest.raises(CompositionError, match="Content is empty or invalid"):
        compose_batch([("Deck", "---\n---")])


def test_per_slide_titles_without_layouts_keep_every_paragraph():
    deck = compose_quick_deck("A\n---\nB", "p1\n\np2")

    assert _titles(deck) == ["A", "B"]
    assert _bodies(deck) == ["p1", "p2"]
    assert deck.warnings == []


def test_empty_layout_counts_fallback_text_box():
    deck = compose_quick_deck("Deck", "p1\n\np2\n\np3", layouts=['{"elements": []}', "{}"])

    assert _bodies(deck) == ["p1", "p2"]
    assert len(deck.warnings) == 1
