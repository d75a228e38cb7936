#!/usr/bin/env python3
"""
Deck composition: turning free text input into per-slide payloads.

Two entry points feed the exporter:

* :func:`compose_quick_deck` - one title/content pair, optionally split into
  several slides with ``---`` blocks or spread over several layouts;
* :func:`compose_batch` - spreadsheet rows of ``(name, content)``, one
  presentation per row.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union

from . import structured_content
from .content_resolver import ParagraphCursor
from .layout_parser import count_text_boxes, elements_from, fallback_layout
from .models import SlideContentPayload, SlideSource

logger = logging.getLogger(__name__)

DEFAULT_BATCH_TITLE = "Batch presentation"


class CompositionError(ValueError):
    """Raised when batch input cannot be turned into slides."""


@dataclass(frozen=True)
class LessonMeta:
    subject: str
    lesson: str


@dataclass(frozen=True)
class BatchRow:
    """One spreadsheet row: column A is the name, column B the content."""
    name: str
    content: str


@dataclass
class ComposedDeck:
    title: str
    slides: List[SlideSource] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class BatchResult:
    decks: List[ComposedDeck] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def _usable_layouts(layouts: Optional[Sequence[Any]]) -> List[Any]:
    if not layouts:
        return []
    return [lj for lj in layouts if lj is not None and not (isinstance(lj, str) and not lj.strip())]


def compose_quick_deck(
    title: str,
    content: str,
    layouts: Optional[Sequence[Any]] = None,
    subject: str = "",
    lesson: str = "",
    template_deck: bool = False,
) -> ComposedDeck:
    """
    Compose the slides of a single presentation.

    Args:
        title: Presentation title; ``---`` blocks give one title per slide
        content: Body text; ``---`` blocks give one body per slide, the first
            line of each block being the slide title
        layouts: Layout per slide (the last one repeats when there are more
            slides than layouts)
        subject: Metadata for ``{{subject}}``
        lesson: Metadata for ``{{lesson}}``
        template_deck: When True the slide count is the number of layouts
            (a template deck) rather than the number of content blocks

    Returns:
        ComposedDeck whose slides are ready for export
    """
    title = title or ""
    content = content or ""
    layouts = _usable_layouts(layouts)

    title_blocks = structured_content.split_slide_blocks(title)
    content_blocks = structured_content.split_slide_blocks(content)
    per_slide_titles = len(title_blocks) > 1
    per_slide_contents = len(content_blocks) > 1

    if template_deck and layouts:
        slide_count = len(layouts)
    elif per_slide_contents:
        slide_count = len(content_blocks)
    else:
        slide_count = max(len(title_blocks) if per_slide_titles else 1, 1)
    if layouts and not template_deck:
        slide_count = max(slide_count, len(layouts))

    structured_mode = structured_content.is_structured(content)
    cursor = None if structured_mode else ParagraphCursor.from_content(content)
    distribute = not per_slide_contents and not structured_mode and (template_deck or slide_count > 1)

    deck = ComposedDeck(title=title_blocks[0] if per_slide_titles else title)
    for i in range(slide_count):
        layout = layouts[min(i, len(layouts) - 1)] if layouts else None
        slide_title = title
        if per_slide_titles:
            slide_title = title_blocks[i] if i < len(title_blocks) else title_blocks[0]

        if per_slide_contents:
            block = content_blocks[i] if i < len(content_blocks) else ""
            parsed = structured_content.parse_title_and_body(block)
            if not per_slide_titles and parsed.title:
                slide_title = parsed.title
            body = parsed.body
        elif distribute:
            # Paragraphs are spread over the text boxes of each slide in turn.
            body = cursor.take_many(count_text_boxes(elements_from(layout) or fallback_layout()))
        else:
            body = content

        payload = SlideContentPayload(title=slide_title, body=body, subject=subject or "", lesson=lesson or "")
        deck.slides.append(SlideSource(payload=payload, layout=layout))

    if cursor is not None and distribute and cursor.remaining:
        deck.warnings.append(
            f"{cursor.remaining} paragraph(s) did not fit into the text boxes of '{deck.title}'"
        )
    logger.debug(f"🧩 Composed {len(deck.slides)} slide(s) for '{deck.title}'")
    return deck


def parse_lesson_meta(raw: Optional[str]) -> LessonMeta:
    """
    Split a row name into subject and lesson.

    Supported forms, in order: two lines (subject, lesson), ``subject | lesson``,
    ``subject - lesson``; anything else is taken as the lesson.
    """
    text = (raw or "").strip()
    if not text:
        return LessonMeta("", "")

    normalized = text.replace("\r\n", "\n")
    if "\n" in normalized:
        lines = [line.strip() for line in normalized.split("\n") if line.strip()]
        if len(lines) >= 2:
            return LessonMeta(lines[0], lines[1])
        if len(lines) == 1:
            return LessonMeta("", lines[0])

    for separator in ("|", " - "):
        if separator in text:
            subject, _, lesson = text.partition(separator)
            subject, lesson = subject.strip(), lesson.strip()
            if subject or lesson:
                return LessonMeta(subject, lesson or subject)

    return LessonMeta("", text)


def _as_row(row: Union[BatchRow, Tuple[str, str]]) -> BatchRow:
    if isinstance(row, BatchRow):
        return row
    name, content = row
    return BatchRow(name="" if name is None else str(name), content="" if content is None else str(content))


def compose_batch(
    rows: Iterable[Union[BatchRow, Tuple[str, str]]],
    template_layouts: Optional[Sequence[Any]] = None,
    repeated_layout: Any = None,
) -> BatchResult:
    """
    Compose one presentation per spreadsheet row.

    Args:
        rows: ``(name, content)`` pairs; fully blank rows are skipped
        template_layouts: Layouts of a template deck; slide *i* uses layout
            *i* and extra content blocks are dropped with a warning
        repeated_layout: Layout repeated for every slide when no template
            deck is given

    Returns:
        BatchResult with the composed decks and non-fatal warnings

    Raises:
        CompositionError: for half-filled rows, rows without slide blocks,
            or slide blocks without a title line
    """
    template_layouts = _usable_layouts(template_layouts)
    result = BatchResult()

    for row_number, raw in enumerate(rows, start=1):
        row = _as_row(raw)
        name_blank = not row.name.strip()
        content_blank = not row.content.strip()
        if name_blank and content_blank:
            continue
        if name_blank or content_blank:
            raise CompositionError(f"Row {row_number}: both name and content are required")

        meta = parse_lesson_meta(row.name)
        title = meta.lesson or meta.subject or row.name or DEFAULT_BATCH_TITLE

        blocks = structured_content.split_slide_blocks(row.content)
        if not blocks:
            raise CompositionError(f"Content is empty or invalid for presentation: {title}")

        deck = ComposedDeck(title=title)
        if template_layouts and len(blocks) > len(template_layouts):
            warning = (
                f"Content exceeds template page count: {len(blocks)} pages for "
                f"presentation '{title}', template has {len(template_layouts)} pages."
            )
            deck.warnings.append(warning)
            result.warnings.append(warning)
            logger.warning(f"⚠️ {warning}")
            blocks = blocks[:len(template_layouts)]

        for i, block in enumerate(blocks):
            parsed = structured_content.parse_title_and_body(block)
            if not parsed.title:
                raise CompositionError(f"A slide has no title (first line) in presentation: {title}")
            layout = template_layouts[i] if template_layouts else repeated_layout
            payload = SlideContentPayload(
                title=parsed.title,
                body=parsed.body,
                subject=meta.subject,
                lesson=meta.lesson,
            )
            deck.slides.append(SlideSource(payload=payload, layout=layout))

        result.decks.append(deck)

    return result
