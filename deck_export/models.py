"""
Data models for the deck export engine.
"""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ElementType(str, Enum):
    TITLE = "title"
    TEXT = "text"
    CAPTION = "caption"
    DATE = "date"
    IMAGE = "image"
    VARIABLE = "variable"

    @classmethod
    def parse(cls, raw) -> "ElementType":
        """Map a raw layout type string to an ElementType; unknown types become VARIABLE."""
        value = str(raw or "").strip().lower()
        for member in cls:
            if member.value == value:
                return member
        return cls.VARIABLE


class ExportFormat(str, Enum):
    PPTX = "PPTX"
    PDF = "PDF"
    PNG = "PNG"


@dataclass(frozen=True)
class ElementStyle:
    """
    Text style of a layout element.
    """
    font_family: Optional[str] = None
    font_size: float = 18.0
    bold: bool = False
    italic: bool = False
    underline: bool = False
    color: Optional[str] = None  # None means the theme text color
    align: str = "left"

    def rgb(self, default: str = "#111827") -> tuple:
        """Color as an (r, g, b) tuple, falling back to *default*."""
        return hex_to_rgb(self.color or default)

    @classmethod
    def from_dict(cls, style: Optional[Dict]) -> "ElementStyle":
        if not isinstance(style, dict):
            return cls()
        align = str(style.get("align") or "left").strip().lower()
        if align not in ("left", "center", "right"):
            align = "left"
        family = style.get("fontFamily")
        return cls(
            font_family=str(family).strip() if family and str(family).strip() else None,
            font_size=_number_or(style.get("fontSize"), 18.0),
            bold=_to_bool(style.get("bold")),
            italic=_to_bool(style.get("italic")),
            underline=_to_bool(style.get("underline")),
            color=str(style.get("color")) if style.get("color") else None,
            align=align,
        )


@dataclass(frozen=True)
class LayoutElement:
    """
    One placeholder on a slide, in editor-canvas units with a top-left origin.
    """
    type: ElementType
    x: float
    y: float
    w: float
    h: float
    style: ElementStyle = field(default_factory=ElementStyle)
    slot_index: Optional[int] = None  # explicit 1-based slot binding
    id: Optional[int] = None
    text: str = ""  # static text of variable elements, may hold {{key}} tokens

    def is_text_box(self) -> bool:
        """Text and caption elements consume body paragraphs."""
        return self.type in (ElementType.TEXT, ElementType.CAPTION)

    @classmethod
    def from_element(cls, element: Dict) -> "LayoutElement":
        """
        Create a LayoutElement from a layout JSON element dictionary.
        """
        slot = int(round(_number_or(element.get("slotIndex"), 0)))
        raw_id = element.get("id")
        try:
            element_id = int(raw_id) if raw_id is not None else None
        except (TypeError, ValueError):
            element_id = None
        return cls(
            type=ElementType.parse(element.get("type")),
            x=max(0.0, _number_or(element.get("x"), 40.0)),
            y=max(0.0, _number_or(element.get("y"), 40.0)),
            w=max(0.0, _number_or(element.get("w"), 320.0)),
            h=max(0.0, _number_or(element.get("h"), 80.0)),
            style=ElementStyle.from_dict(element.get("style")),
            slot_index=slot if slot >= 1 else None,
            id=element_id,
            text="" if element.get("text") is None else str(element.get("text")),
        )


@dataclass(frozen=True)
class StructuredContent:
    """
    The four ordered slot lists of a structured content field.
    """
    images: List[str] = field(default_factory=list)
    captions: List[str] = field(default_factory=list)
    texts: List[str] = field(default_factory=list)
    dates: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class TitleAndBody:
    title: str
    body: str


@dataclass
class SlideContentPayload:
    """
    Resolved bundle for one output slide: title, raw body and metadata.
    """
    title: str = ""
    body: str = ""
    subject: str = ""
    lesson: str = ""
    date: str = ""

    def metadata(self) -> Dict[str, str]:
        """Keys available to {{key}} substitution in variable elements."""
        return {
            "title": self.title,
            "content": self.body,
            "subject": self.subject,
            "lesson": self.lesson,
            "date": self.date,
        }

    @classmethod
    def from_data(cls, data: Dict, default_title: str = "") -> "SlideContentPayload":
        """Build a payload from a saved slide's data map."""
        def text(key):
            value = data.get(key)
            return "" if value is None else str(value)

        title = data.get("title", data.get("name", default_title))
        return cls(
            title="" if title is None else str(title),
            body=text("content"),
            subject=text("subject"),
            lesson=text("lesson"),
            date=text("date"),
        )


@dataclass(frozen=True)
class ResolvedElement:
    """
    A layout element paired with its final display string for one render pass.
    """
    element: LayoutElement
    text: str

    @property
    def type(self) -> ElementType:
        return self.element.type

    @property
    def style(self) -> ElementStyle:
        return self.element.style


@dataclass
class RenderedSlide:
    """All resolved elements of one output slide, in reading order."""
    elements: List[ResolvedElement]
    title: str = ""


def hex_to_rgb(hex_color: str) -> tuple:
    """Convert hex color to RGB tuple."""
    value = (hex_color or "").strip().lstrip('#')
    if len(value) != 6:
        return (17, 24, 39)
    try:
        return tuple(int(value[i:i+2], 16) for i in (0, 2, 4))
    except ValueError:
        return (17, 24, 39)


def _number_or(value, fallback: float) -> float:
    if value is None or isinstance(value, bool):
        return fallback
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    return number if math.isfinite(number) else fallback


def _to_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true" if value is not None else False


@dataclass
class SlideSource:
    """
    One slide to export: its content payload and an optional layout.

    ``layout`` may be a layout JSON string, a decoded mapping, a list of
    LayoutElement objects, or None for the synthetic fallback layout.
    """
    payload: SlideContentPayload
    layout: Any = None
