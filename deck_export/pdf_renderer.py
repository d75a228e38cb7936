#!/usr/bin/env python3
"""
PDF renderer drawing resolved slides onto fixed-size pages.

Layout geometry uses a top-left origin; PDF pages use a bottom-left origin,
so every box is flipped with ``page_height - (y + h)`` before drawing.
"""

import io
import logging
from typing import List, Optional

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from .css_utils import ExportSettings
from .fonts import load_pdf_font, select_font
from .models import ElementType, RenderedSlide, ResolvedElement
from .text_layout import Box, layout_box

logger = logging.getLogger(__name__)

PLACEHOLDER_GLYPH = "?"
MIN_FONT_SIZE = 6

# The 14 standard Type 1 fonts, limited to WinAnsi encoding.
_STANDARD_FONTS = {
    "Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique",
    "Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique",
    "Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic",
    "Symbol", "ZapfDingbats",
}


def sanitize_pdf_text(text: Optional[str]) -> str:
    """Replace every character outside printable ASCII with the placeholder glyph."""
    return "".join(ch if 32 <= ord(ch) <= 126 else PLACEHOLDER_GLYPH for ch in (text or ""))


def encodable_text(text: str, font_name: str) -> str:
    """
    Substitute characters the font's encoding cannot represent.

    Standard Type 1 fonts only cover WinAnsi; embedded TrueType and CID fonts
    are returned unchanged.
    """
    if font_name not in _STANDARD_FONTS:
        return text
    out = []
    for ch in text:
        try:
            ch.encode("cp1252")
            out.append(ch)
        except UnicodeEncodeError:
            out.append(PLACEHOLDER_GLYPH)
    return "".join(out)


def safe_text_width(text: str, font_name: str, font_size: float) -> float:
    """Width of *text* in points; estimates when the font cannot measure it."""
    if not text:
        return 0.0
    try:
        return pdfmetrics.stringWidth(encodable_text(text, font_name), font_name, font_size)
    except (KeyError, UnicodeError, ValueError):
        safe = sanitize_pdf_text(text)
        try:
            return pdfmetrics.stringWidth(safe, font_name, font_size)
        except (KeyError, UnicodeError, ValueError):
            return len(safe) * font_size * 0.6


class PDFRenderer:
    """
    Renderer for converting resolved slides to a fixed-page PDF document.
    """

    def __init__(self, settings: Optional[ExportSettings] = None, debug: bool = False):
        self.settings = settings or ExportSettings()
        self.debug = debug
        self.warnings: List[str] = []

    def render(self, slides: List[RenderedSlide]) -> bytes:
        """
        Render slides to PDF, one page per slide.

        Args:
            slides: Resolved slides

        Returns:
            The PDF file content
        """
        width = float(self.settings.canvas_width)
        height = float(self.settings.canvas_height)
        out = io.BytesIO()
        pdf = canvas.Canvas(out, pagesize=(width, height))

        for slide_idx, rendered in enumerate(slides):
            r, g, b = self.settings.background_rgb
            pdf.setFillColorRGB(r / 255, g / 255, b / 255)
            pdf.rect(0, 0, width, height, stroke=0, fill=1)

            for resolved in rendered.elements:
                dropped = self._draw_element(pdf, resolved, height)
                if dropped:
                    self.warnings.append(
                        f"Slide {slide_idx + 1}: {dropped} line(s) of {resolved.type.value} text did not fit"
                    )
            pdf.showPage()

        pdf.save()
        return out.getvalue()

    def _fonts_for(self, resolved: ResolvedElement):
        style = resolved.style
        bold = style.bold or resolved.type is ElementType.IMAGE
        family = style.font_family or self.settings.font_family
        latin = load_pdf_font("latin", bold, family)
        cjk = load_pdf_font("cjk", bold)
        return select_font(resolved.text, latin, cjk)

    def _draw_element(self, pdf, resolved: ResolvedElement, page_height: float) -> int:
        """Draw one element box and its text; return the number of clipped lines."""
        el = resolved.element
        style = resolved.style
        pad = self.settings.padding
        font_name = self._fonts_for(resolved)
        font_size = max(MIN_FONT_SIZE, style.font_size)
        align = "center" if resolved.type is ElementType.IMAGE else style.align

        bottom = page_height - (el.y + el.h)
        br, bg, bb = self.settings.border_rgb
        pdf.setStrokeColorRGB(br / 255, bg / 255, bb / 255)
        pdf.rect(el.x, bottom, max(1, el.w), max(1, el.h), stroke=1, fill=0)

        block = layout_box(
            resolved.text,
            lambda s: safe_text_width(s, font_name, font_size),
            Box(el.x, el.y, el.w, el.h),
            line_height=font_size * self.settings.line_height,
            align=align,
            padding=pad,
        )

        r, g, b = style.rgb(self.settings.text_color)
        pdf.setFillColorRGB(r / 255, g / 255, b / 255)
        pdf.setStrokeColorRGB(r / 255, g / 255, b / 255)
        pdf.setFont(font_name, font_size)

        first_baseline = page_height - el.y - pad - font_size
        for line in block.lines:
            if not line.text:
                continue
            baseline = first_baseline - line.index * block.line_height
            self._draw_line(pdf, line.text, line.x, baseline, font_name, font_size)
            if style.underline:
                underline_y = baseline - font_size * 0.12
                pdf.line(line.x, underline_y,
                         line.x + safe_text_width(line.text, font_name, font_size), underline_y)

        if block.dropped and self.debug:
            logger.debug(f"✂️ Dropped {block.dropped} line(s) in {resolved.type.value} box")
        return block.dropped

    def _draw_line(self, pdf, text: str, x: float, y: float, font_name: str, font_size: float):
        try:
            pdf.drawString(x, y, encodable_text(text, font_name))
        except (KeyError, UnicodeError, ValueError) as e:
            logger.debug(f"⚠️ Unencodable text in PDF line, substituting: {e}")
            pdf.drawString(x, y, sanitize_pdf_text(text))
