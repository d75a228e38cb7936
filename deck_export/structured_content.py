"""
Parser for the delimiter-based structured content field.

A single free-text ``content`` field can describe several typed slots:

* ``\\--`` separates sections, always in the order image, caption, text, date;
* ``\\-`` separates slots inside a section (slot #1, slot #2, ...).

Users frequently type the tokens with a doubled backslash (``\\\\--``), which
is normalised to the canonical single-backslash form before parsing.  Empty
slots are kept so that "skip slot 1, fill slot 2" can be expressed.

The same module also splits multi-slide text on ``---`` block separators and
falls back to blank-line paragraphs for free text.
"""
import re
from typing import List, Optional

from .models import StructuredContent, TitleAndBody

SECTION_DELIMITER = "\\--"
SLOT_DELIMITER = "\\-"
BLOCK_SEPARATOR = "---"

_ESCAPED_SECTION = "\\\\--"
_ESCAPED_SLOT = "\\\\-"

_DATE_PATTERN = re.compile(r'^(\d{1,2})/(\d{1,2})/(\d{1,4})$')
_LINE_BLOCK_PATTERN = re.compile(r'^[ \t]*---[ \t]*$', re.MULTILINE)
_INLINE_BLOCK_PATTERN = re.compile(r'\s*---\s*')
_PARAGRAPH_PATTERN = re.compile(r'\n\s*\n+')


def normalize_delimiters(content: Optional[str]) -> str:
    """Normalise line endings and the escaped delimiter convention."""
    normalized = (content or "").replace("\r\n", "\n")
    normalized = normalized.replace(_ESCAPED_SECTION, SECTION_DELIMITER)
    normalized = normalized.replace(_ESCAPED_SLOT, SLOT_DELIMITER)
    return normalized


def is_structured(content: Optional[str]) -> bool:
    """Return True if *content* uses any structured delimiter token."""
    if content is None or not content.strip():
        return False
    # The section token contains the slot token, so one check covers both.
    return SLOT_DELIMITER in normalize_delimiters(content)


def parse(content: Optional[str]) -> StructuredContent:
    """
    Split *content* into the four ordered slot lists.

    Missing trailing sections become empty lists; dates are normalised to
    ``DD/MM/YYYY`` when they look like ``D/M/YYYY``.
    """
    sections = normalize_delimiters(content).split(SECTION_DELIMITER)

    def section(idx: int) -> str:
        return sections[idx] if idx < len(sections) else ""

    return StructuredContent(
        images=split_slots(section(0)),
        captions=split_slots(section(1)),
        texts=split_slots(section(2)),
        dates=[normalize_date(d) for d in split_slots(section(3))],
    )


def split_slots(section: Optional[str]) -> List[str]:
    """Split one section into trimmed slots, keeping empty ones."""
    if section is None or not section.strip():
        return []
    if SLOT_DELIMITER in section:
        return [part.strip() for part in section.split(SLOT_DELIMITER)]
    return [section.strip()]


def get_at(items: Optional[List[str]], slot_index: int) -> str:
    """Return the 1-based *slot_index* entry of *items*, or ``""`` if absent."""
    if not items or slot_index is None or slot_index <= 0:
        return ""
    idx = slot_index - 1
    if idx >= len(items):
        return ""
    value = items[idx]
    return "" if value is None else str(value)


def normalize_date(raw: Optional[str]) -> str:
    """
    Zero-pad loose ``D/M/YYYY`` dates to ``DD/MM/YYYY``.

    Anything that does not match is returned trimmed but otherwise unchanged.
    """
    text = (raw or "").strip()
    match = _DATE_PATTERN.match(text)
    if not match:
        return text
    day, month, year = match.groups()
    return f"{int(day):02d}/{int(month):02d}/{year}"


def split_slide_blocks(raw: Optional[str]) -> List[str]:
    """
    Split a multi-slide text field on ``---`` separators.

    A separator on its own line is preferred; if none is found but ``---``
    appears inline, inline occurrences are used instead.  Blank blocks are
    dropped.
    """
    if raw is None:
        return []
    normalized = raw.replace("\r\n", "\n")
    if not normalized.strip():
        return []

    parts = _LINE_BLOCK_PATTERN.split(normalized)
    if len(parts) == 1 and BLOCK_SEPARATOR in normalized:
        parts = _INLINE_BLOCK_PATTERN.split(normalized)

    return [p.strip() for p in parts if p and p.strip()]


def parse_title_and_body(block: Optional[str]) -> TitleAndBody:
    """First non-blank line is the title; the remaining lines are the body."""
    normalized = (block or "").replace("\r\n", "\n").strip()
    if not normalized:
        return TitleAndBody("", "")

    lines = normalized.split("\n")
    idx = 0
    while idx < len(lines) and not lines[idx].strip():
        idx += 1
    title = lines[idx].strip() if idx < len(lines) else ""
    body = "\n".join(lines[idx + 1:]).strip()
    return TitleAndBody(title, body)


def split_paragraphs(content: Optional[str]) -> List[str]:
    """Split free text into paragraphs on blank lines."""
    if content is None:
        return []
    parts = _PARAGRAPH_PATTERN.split(content.replace("\r\n", "\n"))
    return [p.strip() for p in parts if p.strip()]
