"""Test wrapping, clipping and alignment with a character-count measure."""

import pytest

from deck_export.text_layout import Box, aligned_x, clip, layout_box, max_lines, wrap


def measure(text):
    return float(len(text))


def test_short_line_is_unchanged():
    assert wrap("hello world", measure, 20) == ["hello world"]


def test_greedy_word_wrap():
    assert wrap("aaa bbb ccc ddd", measure, 7) == ["aaa bbb", "ccc ddd"]


def test_explicit_newlines_and_blank_lines_are_kept():
    assert wrap("one\n\ntwo\r\nthree", measure, 10) == ["one", "", "two", "three"]


def test_trailing_newlines_do_not_add_blank_lines():
    assert wrap("hello\n", measure, 20) == ["hello"]
    assert wrap("hello\r\n\n", measure, 20) == ["hello"]
    assert wrap("a\n\nb\n", measure, 20) == ["a", "", "b"]


def test_overlong_word_sits_alone():
    assert wrap("a verylongword b", measure, 5) == ["a", "verylongword", "b"]


def test_wrapped_lines_fit_width():
    text = "the quick brown fox jumps over the lazy dog " * 4
    for line in wrap(text, measure, 12):
        assert measure(line) <= 12


def test_wrap_is_idempotent_for_fitting_lines():
    first = wrap("alpha beta gamma delta", measure, 11)

    assert wrap("\n".join(first), measure, 11) == first


@pytest.mark.parametrize("inner_height,line_height,expected", [
    (100, 20, 5),
    (99, 20, 4),
    (10, 20, 1),
    (0, 20, 1),
])
def test_max_lines(inner_height, line_height, expected):
    assert max_lines(inner_height, line_height) == expected


def test_clip_drops_excess_lines():
    assert clip(["a", "b", "c", "d"], 45, 20) == ["a", "b"]


@pytest.mark.parametrize("align,expected", [("left", 16), ("center", 26), ("right", 36)])
def test_aligned_x(align, expected):
    assert aligned_x(10, inner_width=30, line_width=10, align=align, padding=6) == expected


def test_aligned_x_never_starts_left_of_padding():
    assert aligned_x(0, inner_width=5, line_width=50, align="right", padding=6) == 6


def test_layout_box_clips_to_floor_of_height():
    box = Box(x=0, y=0, w=32, h=52)  # inner 20 x 40
    text = " ".join(["word"] * 30)

    block = layout_box(text, measure, box, line_height=12)

    assert len(block.lines) == 3
    assert block.dropped > 0
    assert [line.index for line in block.lines] == [0, 1, 2]
    assert all(measure(line.text) <= block.inner_width for line in block.lines)


def test_layout_box_center_alignment():
    block = layout_box("abcd", measure, Box(x=100, y=0, w=32, h=40), line_height=10, align="center")

    assert block.lines[0].x == 100 + 6 + 8
    assert block.dropped == 0


def test_layout_box_empty_text_gives_single_blank_line():
    block = layout_box("", measure, Box(0, 0, 100, 100), line_height=10)

    assert [line.text for line in block.lines] == [""]
