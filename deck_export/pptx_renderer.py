#!/usr/bin/env python3
"""
PowerPoint renderer for converting resolved slides to an editable deck.
"""

import io
import logging
from typing import List, Optional

from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.oxml.ns import qn
from pptx.oxml.xmlchemy import OxmlElement
from pptx.util import Emu, Pt

from .css_utils import ExportSettings
from .fonts import select_font
from .models import ElementType, RenderedSlide, ResolvedElement

logger = logging.getLogger(__name__)

CJK_FONT_FAMILY = "Noto Sans JP"
MIN_BOX_PT = 10
MIN_FONT_PT = 1
MAX_FONT_PT = 4000

_ALIGNMENTS = {
    "left": PP_ALIGN.LEFT,
    "center": PP_ALIGN.CENTER,
    "right": PP_ALIGN.RIGHT,
}


def _clamp(value, low, high):
    return min(high, max(low, value))


class PPTXRenderer:
    """
    Renderer for converting resolved slides to PowerPoint text boxes.

    Editor-canvas geometry is rescaled to the deck's page size with independent
    x/y scale factors.
    """

    def __init__(self, settings: Optional[ExportSettings] = None, debug: bool = False,
                 cjk_font_family: str = CJK_FONT_FAMILY):
        self.settings = settings or ExportSettings()
        self.debug = debug
        self.cjk_font_family = cjk_font_family

    def render(self, slides: List[RenderedSlide]) -> bytes:
        """
        Render slides to a PPTX document.

        Args:
            slides: Resolved slides, one output slide each

        Returns:
            The PPTX file content
        """
        prs = Presentation()
        slide_w = prs.slide_width
        slide_h = prs.slide_height
        scale_x = slide_w / self.settings.canvas_width
        scale_y = slide_h / self.settings.canvas_height

        for slide_idx, rendered in enumerate(slides):
            slide_layout = prs.slide_layouts[6]  # Blank layout
            slide = prs.slides.add_slide(slide_layout)
            self._apply_background(slide)

            for resolved in rendered.elements:
                x, y, w, h = self._anchor(resolved, scale_x, scale_y, slide_w, slide_h)
                self._add_text_box(slide, resolved, x, y, w, h)

            if self.debug:
                logger.info(f"📄 Slide {slide_idx + 1}: {len(rendered.elements)} text boxes")

        out = io.BytesIO()
        prs.save(out)
        return out.getvalue()

    def _apply_background(self, slide):
        bg = self.settings.background_rgb
        if bg == (255, 255, 255):
            return
        fill = slide.background.fill
        fill.solid()
        fill.fore_color.rgb = RGBColor(*bg)

    def _anchor(self, resolved: ResolvedElement, scale_x, scale_y, slide_w, slide_h):
        """Element geometry in EMU, clamped to the page."""
        el = resolved.element
        min_size = Pt(MIN_BOX_PT)
        return (
            Emu(int(_clamp(el.x * scale_x, 0, slide_w))),
            Emu(int(_clamp(el.y * scale_y, 0, slide_h))),
            Emu(int(_clamp(el.w * scale_x, min_size, slide_w))),
            Emu(int(_clamp(el.h * scale_y, min_size, slide_h))),
        )

    def _add_text_box(self, slide, resolved: ResolvedElement, x, y, w, h):
        textbox = slide.shapes.add_textbox(x, y, w, h)
        text_frame = textbox.text_frame
        text_frame.word_wrap = True
        text_frame.vertical_anchor = MSO_ANCHOR.MIDDLE

        is_image = resolved.type is ElementType.IMAGE
        align = "center" if is_image else resolved.style.align
        lines = (resolved.text or "").replace("\r\n", "\n").split("\n")

        for idx, line in enumerate(lines):
            paragraph = text_frame.paragraphs[0] if idx == 0 else text_frame.add_paragraph()
            paragraph.alignment = _ALIGNMENTS.get(align, PP_ALIGN.LEFT)
            run = paragraph.add_run()
            run.text = line
            self._apply_run_style(run, resolved, is_image)

    def _apply_run_style(self, run, resolved: ResolvedElement, is_image: bool):
        style = resolved.style
        latin_family = style.font_family or self.settings.font_family
        family = select_font(resolved.text, latin_family, self.cjk_font_family)

        font = run.font
        if is_image:
            font.bold = True
        else:
            font.size = Pt(_clamp(style.font_size, MIN_FONT_PT, MAX_FONT_PT))
            font.bold = style.bold
            font.italic = style.italic
            if style.underline:
                font.underline = True
            font.color.rgb = RGBColor(*style.rgb(self.settings.text_color))
        font.name = family
        self._set_east_asian_typeface(run, self.cjk_font_family)

    def _set_east_asian_typeface(self, run, typeface: str):
        """Add an <a:ea> typeface so CJK glyphs use the CJK font in any viewer."""
        rPr = run._r.get_or_add_rPr()
        ea = rPr.find(qn('a:ea'))
        if ea is None:
            ea = OxmlElement('a:ea')
            latin = rPr.find(qn('a:latin'))
            if latin is not None:
                latin.addnext(ea)
            else:
                rPr.append(ea)
        ea.set('typeface', typeface)

