#!/usr/bin/env python3
"""Content resolver binding slide text and metadata to layout element slots."""

import datetime
import logging
import re
from typing import Callable, Dict, List, Optional, Sequence

from . import structured_content
from .layout_parser import fallback_layout, ordered_elements
from .models import (
    ElementType,
    LayoutElement,
    ResolvedElement,
    SlideContentPayload,
    StructuredContent,
)

logger = logging.getLogger(__name__)

IMAGE_PLACEHOLDER = "[Image]"

_VARIABLE_PATTERN = re.compile(r'\{\{\s*([a-zA-Z0-9_]+)\s*\}\}')


def _iso_today() -> str:
    return datetime.date.today().isoformat()


class ParagraphCursor:
    """
    Forward-only cursor over free-text paragraphs.

    One cursor is shared by every slide of a single presentation-level call so
    that no paragraph is used twice or skipped; a new call starts a new cursor.
    """

    def __init__(self, paragraphs: Sequence[str]):
        self.paragraphs = list(paragraphs)
        self.position = 0

    @classmethod
    def from_content(cls, content: Optional[str]) -> "ParagraphCursor":
        return cls(structured_content.split_paragraphs(content))

    @property
    def remaining(self) -> int:
        return max(0, len(self.paragraphs) - self.position)

    def take(self) -> str:
        """Return the next paragraph, or ``""`` once exhausted."""
        if self.position >= len(self.paragraphs):
            return ""
        paragraph = self.paragraphs[self.position]
        self.position += 1
        return paragraph

    def take_many(self, count: int) -> str:
        """Consume up to *count* paragraphs and join them with blank lines."""
        if count <= 0:
            return ""
        end = min(self.position + count, len(self.paragraphs))
        taken = self.paragraphs[self.position:end]
        self.position = max(self.position, end)
        return "\n\n".join(taken)


class ContentResolver:
    """
    Resolve a slide's content into display strings, one per layout element.

    Args:
        font_family: Font used by the synthetic fallback layout
        today: Callable returning the current date string (ISO by default)
        image_placeholder: Marker emitted for image slots without content
    """

    def __init__(
        self,
        font_family: Optional[str] = None,
        today: Callable[[], str] = _iso_today,
        image_placeholder: str = IMAGE_PLACEHOLDER,
        debug: bool = False,
    ):
        self.font_family = font_family
        self.today = today
        self.image_placeholder = image_placeholder
        self.debug = debug

    def resolve(
        self,
        elements: Sequence[LayoutElement],
        payload: SlideContentPayload,
        cursor: Optional[ParagraphCursor] = None,
    ) -> List[ResolvedElement]:
        """
        Bind *payload* to *elements* and return resolved elements in reading order.

        Args:
            elements: Layout elements of the slide (may be empty)
            payload: Title, body and metadata of the slide
            cursor: Paragraph cursor shared across slides; a private one is
                built from the body when omitted

        Returns:
            One ResolvedElement per element; never raises for missing data
        """
        if not elements:
            if self.debug:
                logger.info("📐 Empty layout, using synthetic title/body fallback")
            elements = fallback_layout(self.font_family)

        ordered = ordered_elements(elements)
        slots = self._assign_slots(ordered)
        data = payload.metadata()

        structured = None
        if structured_content.is_structured(payload.body):
            structured = structured_content.parse(payload.body)
            if structured.dates and structured.dates[0] and not data.get("date"):
                data["date"] = structured.dates[0]
        elif cursor is None:
            cursor = ParagraphCursor.from_content(payload.body)

        resolved = []
        for element, slot in zip(ordered, slots):
            if structured is not None:
                text = self._resolve_structured(element, slot, structured, data)
            else:
                text = self._resolve_free_text(element, cursor, data)
            resolved.append(ResolvedElement(element=element, text=text))
        if self.debug:
            logger.debug(f"🔗 Resolved {len(resolved)} elements for slide '{payload.title}'")
        return resolved

    def _assign_slots(self, ordered: Sequence[LayoutElement]) -> List[int]:
        """Effective 1-based slot per element, using a local per-type counter."""
        counters: Dict[ElementType, int] = {}
        slots = []
        for element in ordered:
            current = counters.get(element.type, 0)
            slot = element.slot_index if element.slot_index else current + 1
            counters[element.type] = max(current, slot)
            slots.append(slot)
        return slots

    def _resolve_structured(self, element: LayoutElement, slot: int,
                            structured: StructuredContent, data: Dict[str, str]) -> str:
        get_at = structured_content.get_at
        if element.type is ElementType.TITLE:
            return data.get("title", "")
        if element.type is ElementType.TEXT:
            return get_at(structured.texts, slot)
        if element.type is ElementType.CAPTION:
            return get_at(structured.captions, slot)
        if element.type is ElementType.DATE:
            return get_at(structured.dates, slot) or self.today()
        if element.type is ElementType.IMAGE:
            return get_at(structured.images, slot) or self.image_placeholder
        return self.substitute_variables(element.text, data)

    def _resolve_free_text(self, element: LayoutElement, cursor: ParagraphCursor,
                           data: Dict[str, str]) -> str:
        if element.type is ElementType.TITLE:
            return data.get("title", "")
        if element.is_text_box():
            return cursor.take()
        if element.type is ElementType.DATE:
            return self.today()
        if element.type is ElementType.IMAGE:
            return self.image_placeholder
        return self.substitute_variables(element.text, data)

    def substitute_variables(self, template: Optional[str], data: Dict[str, str]) -> str:
        """Replace ``{{key}}`` tokens with metadata values; ``date`` defaults to today."""
        if not template:
            return ""

        def replace(match):
            key = match.group(1)
            if key.lower() == "date":
                return data.get("date") or self.today()
            value = data.get(key)
            return "" if value is None else str(value)

        return _VARIABLE_PATTERN.sub(replace, template)
