"""
Format-agnostic text layout: wrapping, vertical clipping and alignment.

Renderers supply a ``measure`` callable returning the width of a string in
their native units (points for PDF, pixels for PNG); everything else here is
shared so the three output formats wrap text the same way.
"""
import math
import re
from dataclasses import dataclass, field
from typing import Callable, List

Measure = Callable[[str], float]

DEFAULT_PADDING = 6

_WHITESPACE = re.compile(r'\s+')


@dataclass(frozen=True)
class Box:
    x: float
    y: float
    w: float
    h: float


@dataclass(frozen=True)
class PlacedLine:
    """One wrapped line with its start x and 0-based line index inside the box."""
    text: str
    x: float
    index: int


@dataclass
class TextBlock:
    lines: List[PlacedLine] = field(default_factory=list)
    line_height: float = 0.0
    inner_width: float = 0.0
    inner_height: float = 0.0
    dropped: int = 0  # wrapped lines clipped by the box height


def wrap(text: str, measure: Measure, max_width: float) -> List[str]:
    """
    Greedy word wrap.

    Explicit newlines are honoured first and blank lines are kept as ``""``.
    A single word wider than *max_width* is placed alone on its own line.
    """
    normalized = (text or "").replace("\r\n", "\n").rstrip("\n")
    lines: List[str] = []
    for paragraph in normalized.split("\n"):
        if not paragraph.strip():
            lines.append("")
            continue
        if measure(paragraph.rstrip()) <= max_width:
            lines.append(paragraph.rstrip())
            continue

        current = ""
        for word in _WHITESPACE.split(paragraph.strip()):
            if not current:
                current = word
                continue
            candidate = f"{current} {word}"
            if measure(candidate) <= max_width:
                current = candidate
            else:
                lines.append(current)
                current = word
        if current:
            lines.append(current)
    return lines


def max_lines(inner_height: float, line_height: float) -> int:
    """Number of lines that fit in *inner_height*; at least one."""
    # A box shorter than one line still shows its first line.
    return max(1, int(math.floor(inner_height / max(1e-6, line_height))))


def clip(lines: List[str], inner_height: float, line_height: float) -> List[str]:
    """Drop the lines that do not fit vertically."""
    return lines[:max_lines(inner_height, line_height)]


def aligned_x(box_x: float, inner_width: float, line_width: float, align: str,
              padding: float = DEFAULT_PADDING) -> float:
    """Start x of a line for left/center/right alignment inside a padded box."""
    start = box_x + padding
    if align == "center":
        return start + max(0.0, (inner_width - line_width) / 2)
    if align == "right":
        return start + max(0.0, inner_width - line_width)
    return start


def layout_box(text: str, measure: Measure, box: Box, line_height: float,
               align: str = "left", padding: float = DEFAULT_PADDING) -> TextBlock:
    """
    Wrap, clip and align *text* inside *box*.

    Args:
        text: Display text, may contain explicit newlines
        measure: Width function in the target format's units
        box: Element box in the target format's top-left coordinate space
        line_height: Line advance in the same units
        align: ``left``, ``center`` or ``right``
        padding: Inset applied on all four sides

    Returns:
        TextBlock with positioned lines; excess lines are dropped silently
    """
    inner_w = max(1.0, box.w - padding * 2)
    inner_h = max(1.0, box.h - padding * 2)

    wrapped = wrap(text, measure, inner_w)
    visible = clip(wrapped, inner_h, line_height)

    placed = [
        PlacedLine(text=line, x=aligned_x(box.x, inner_w, measure(line) if line else 0.0, align, padding), index=i)
        for i, line in enumerate(visible)
    ]
    return TextBlock(
        lines=placed,
        line_height=line_height,
        inner_width=inner_w,
        inner_height=inner_h,
        dropped=len(wrapped) - len(visible),
    )
