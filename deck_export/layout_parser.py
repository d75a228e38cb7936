#!/usr/bin/env python3
"""
Layout parser for converting layout JSON to LayoutElement objects.

Layout descriptions come from template slides (``{"elements": [...]}``) or
from saved slides (``{"layout": {"elements": [...]}, "data": {...}}``).
Parsing never raises: anything malformed produces :data:`EMPTY_LAYOUT`, and
callers branch on :attr:`LayoutParseResult.ok` instead of catching errors.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from .models import ElementStyle, ElementType, LayoutElement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutParseResult:
    """
    Tagged result of parsing a layout description.

    ``ok`` is False for the empty variant (missing, malformed or element-less
    input); ``elements`` is then always an empty tuple.
    """
    ok: bool
    elements: tuple = ()

    def __iter__(self):
        return iter(self.elements)

    def __len__(self):
        return len(self.elements)


EMPTY_LAYOUT = LayoutParseResult(ok=False)


def _load_root(layout_json: Any) -> Optional[Dict]:
    if isinstance(layout_json, dict):
        return layout_json
    if not isinstance(layout_json, (str, bytes)) or not layout_json.strip():
        return None
    try:
        root = json.loads(layout_json)
    except (ValueError, TypeError) as e:
        logger.debug(f"⚠️ Unparsable layout JSON: {e}")
        return None
    return root if isinstance(root, dict) else None


def _elements_array(root: Dict) -> Optional[list]:
    """Find the elements array in either the template or the saved-slide shape."""
    elements = root.get("elements")
    if isinstance(elements, list):
        return elements
    for key in ("layout", "template"):
        nested = root.get(key)
        if isinstance(nested, dict) and isinstance(nested.get("elements"), list):
            return nested["elements"]
    return None


def parse_elements(layout_json: Any) -> LayoutParseResult:
    """
    Parse a layout description into LayoutElement objects.

    Args:
        layout_json: JSON string (or decoded mapping) of a layout or saved slide

    Returns:
        LayoutParseResult; the empty variant when nothing usable was found
    """
    root = _load_root(layout_json)
    if root is None:
        return EMPTY_LAYOUT

    raw_elements = _elements_array(root)
    if not raw_elements:
        return EMPTY_LAYOUT

    elements = tuple(
        LayoutElement.from_element(item) for item in raw_elements if isinstance(item, dict)
    )
    if not elements:
        return EMPTY_LAYOUT
    return LayoutParseResult(ok=True, elements=elements)


def extract_slide_data(content_json: Any) -> Dict[str, Any]:
    """Return the ``data`` map of a saved slide, or the root map for legacy slides."""
    root = _load_root(content_json)
    if root is None:
        return {}
    data = root.get("data")
    if isinstance(data, dict):
        return data
    return root


def _reading_order_key(element: LayoutElement):
    return (element.y, element.x)


def ordered_elements(elements: Sequence[LayoutElement]) -> List[LayoutElement]:
    """All elements in reading order: top-to-bottom, then left-to-right."""
    return sorted(elements, key=_reading_order_key)


def ordered_text_elements(elements: Sequence[LayoutElement]) -> List[LayoutElement]:
    """Text and caption elements in reading order."""
    return [e for e in ordered_elements(elements) if e.is_text_box()]


def count_text_boxes(elements: Sequence[LayoutElement]) -> int:
    """Number of elements that consume a body paragraph."""
    return sum(1 for e in elements if e.is_text_box())


def fallback_layout(font_family: Optional[str] = None) -> List[LayoutElement]:
    """
    Minimal synthetic layout used when a slide has no elements.

    One title box across the top and one body box spanning most of the
    800x600 editor canvas.
    """
    title_style = ElementStyle(font_family=font_family, font_size=40, bold=True, align="left")
    body_style = ElementStyle(font_family=font_family, font_size=18, align="left")
    return [
        LayoutElement(type=ElementType.TITLE, x=40, y=40, w=720, h=90, style=title_style, id=1),
        LayoutElement(type=ElementType.TEXT, x=40, y=150, w=720, h=360, style=body_style, id=2),
    ]


def elements_from(layout: Any) -> List[LayoutElement]:
    """
    Layout elements from any accepted layout form.

    Accepts a sequence of LayoutElement objects, a JSON string, a decoded
    mapping, or None.
    """
    if isinstance(layout, (list, tuple)) and all(isinstance(e, LayoutElement) for e in layout):
        return list(layout)
    result = parse_elements(layout)
    return list(result.elements) if result.ok else []
