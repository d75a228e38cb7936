"""Test layout JSON parsing and element ordering."""

import json

import pytest

from deck_export.layout_parser import (
    EMPTY_LAYOUT,
    count_text_boxes,
    elements_from,
    extract_slide_data,
    fallback_layout,
    ordered_elements,
    ordered_text_elements,
    parse_elements,
)
from deck_export.models import ElementType, LayoutElement


def test_parse_template_layout(two_text_layout):
    result = parse_elements(two_text_layout)

    assert result.ok
    assert len(result) == 5
    types = [e.type for e in result]
    assert types.count(ElementType.TEXT) == 2
    title = result.elements[0]
    assert title.style.font_size == 36
    assert title.style.bold is True
    assert title.style.align == "center"


def test_parse_saved_slide_shape():
    saved = json.dumps({
        "layout": {"elements": [{"type": "title", "x": 1, "y": 2, "w": 3, "h": 4}]},
        "data": {"title": "T", "content": "C"},
    })

    result = parse_elements(saved)

    assert result.ok
    assert result.elements[0].type is ElementType.TITLE
    assert (result.elements[0].x, result.elements[0].y) == (1, 2)


def test_parse_template_key_instead_of_layout():
    result = parse_elements({"template": {"elements": [{"type": "text"}]}})

    assert result.ok
    assert result.elements[0].type is ElementType.TEXT


@pytest.mark.parametrize("raw", [
    None,
    "",
    "   ",
    "not json",
    "[1, 2, 3]",
    '{"elements": "nope"}',
    '{"elements": []}',
    '{"elements": [1, "two", null]}',
    '{"layout": 5}',
    42,
])
def test_malformed_layouts_yield_empty_variant(raw):
    result = parse_elements(raw)

    assert result is EMPTY_LAYOUT
    assert not result.ok
    assert list(result) == []


def test_element_defaults_and_sanitizing():
    element = LayoutElement.from_element({
        "type": "Mystery",
        "x": "abc",
        "y": -20,
        "slotIndex": 0,
        "style": {"align": "justify", "bold": "true", "fontSize": "22"},
    })

    assert element.type is ElementType.VARIABLE
    assert element.x == 40
    assert element.y == 0
    assert (element.w, element.h) == (320, 80)
    assert element.slot_index is None
    assert element.style.align == "left"
    assert element.style.bold is True
    assert element.style.font_size == 22
    assert element.style.color is None


def test_explicit_slot_index_kept():
    element = LayoutElement.from_element({"type": "text", "slotIndex": 2})

    assert element.slot_index == 2


def test_elements_are_immutable():
    element = LayoutElement.from_element({"type": "text"})

    with pytest.raises(AttributeError):
        element.x = 10


def test_ordered_text_elements_reading_order(two_text_layout):
    elements = parse_elements(two_text_layout).elements

    ordered = ordered_text_elements(elements)

    assert [e.id for e in ordered] == [2, 3, 4]
    assert all(e.is_text_box() for e in ordered)


def test_ordered_elements_top_to_bottom_left_to_right(two_text_layout):
    ordered = ordered_elements(parse_elements(two_text_layout).elements)

    assert [e.id for e in ordered] == [1, 2, 3, 4, 5]


def test_count_text_boxes(two_text_layout):
    assert count_text_boxes(parse_elements(two_text_layout).elements) == 3
    assert count_text_boxes([]) == 0


def test_fallback_layout_is_title_and_body():
    elements = fallback_layout("Arial")

    assert [e.type for e in elements] == [ElementType.TITLE, ElementType.TEXT]
    title, body = elements
    assert title.style.font_size == 40 and title.style.bold
    assert body.w == 720 and body.h == 360
    assert all(e.style.font_family == "Arial" for e in elements)


def test_elements_from_accepts_all_forms(two_text_layout):
    parsed = elements_from(two_text_layout)

    assert len(parsed) == 5
    assert elements_from(parsed) == parsed
    assert elements_from(None) == []
    assert elements_from("garbage") == []


def test_extract_slide_data():
    saved = json.dumps({"layout": {"elements": []}, "data": {"title": "Hello"}})

    assert extract_slide_data(saved) == {"title": "Hello"}
    assert extract_slide_data('{"title": "legacy"}') == {"title": "legacy"}
    assert extract_slide_data("{broken") == {}
    assert extract_slide_data(None) == {}
