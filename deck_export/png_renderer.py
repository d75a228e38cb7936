#!/usr/bin/env python3
"""
Raster renderer producing one PNG per slide, packaged as a zip archive.
"""

import io
import logging
import zipfile
from typing import List, Optional

from PIL import Image, ImageDraw

from .css_utils import ExportSettings
from .fonts import load_image_font, select_font
from .models import ElementType, RenderedSlide, ResolvedElement
from .text_layout import Box, layout_box

logger = logging.getLogger(__name__)

BORDER_RGBA = (0, 0, 0, 25)
MIN_FONT_SIZE = 6


def slide_filename(index: int, ext: str = "png") -> str:
    """Archive entry name for the 1-based slide *index*."""
    return f"slide-{index:03d}.{ext}"


class PNGRenderer:
    """
    Renderer for converting resolved slides to antialiased PNG images.
    """

    def __init__(self, settings: Optional[ExportSettings] = None, debug: bool = False):
        self.settings = settings or ExportSettings()
        self.debug = debug
        self.warnings: List[str] = []

    def render(self, slides: List[RenderedSlide]) -> bytes:
        """
        Render every slide to PNG and zip them as ``slide-001.png``, ``slide-002.png``...

        Returns:
            The zip archive content
        """
        out = io.BytesIO()
        with zipfile.ZipFile(out, "w", zipfile.ZIP_DEFLATED) as archive:
            for slide_idx, rendered in enumerate(slides, start=1):
                image = self.render_slide(rendered, slide_idx)
                png = io.BytesIO()
                image.save(png, format="PNG")
                archive.writestr(slide_filename(slide_idx), png.getvalue())
                if self.debug:
                    logger.info(f"🖼️ Rendered {slide_filename(slide_idx)}")
        return out.getvalue()

    def render_slide(self, rendered: RenderedSlide, slide_number: int = 1) -> Image.Image:
        """Draw one slide onto a fresh white canvas."""
        size = (self.settings.canvas_width, self.settings.canvas_height)
        image = Image.new("RGB", size, self.settings.background_rgb)
        draw = ImageDraw.Draw(image, "RGBA")
        draw.fontmode = "L"  # antialiased glyphs

        for resolved in rendered.elements:
            dropped = self._draw_element(draw, resolved)
            if dropped:
                self.warnings.append(
                    f"Slide {slide_number}: {dropped} line(s) of {resolved.type.value} text did not fit"
                )
        return image

    def _font_for(self, resolved: ResolvedElement, size: int):
        style = resolved.style
        bold = style.bold or resolved.type is ElementType.IMAGE
        family = style.font_family or self.settings.font_family
        latin = ("latin", family)
        cjk = ("cjk", "")
        kind, preferred = select_font(resolved.text, latin, cjk)
        return load_image_font(kind, size, bold, preferred)

    def _draw_element(self, draw: ImageDraw.ImageDraw, resolved: ResolvedElement) -> int:
        el = resolved.element
        style = resolved.style
        pad = self.settings.padding
        x, y = int(round(el.x)), int(round(el.y))
        w, h = int(round(el.w)), int(round(el.h))

        # Faint box outline for visual debugging of the layout
        draw.rectangle([x, y, x + max(1, w), y + max(1, h)], outline=BORDER_RGBA)

        font_size = max(MIN_FONT_SIZE, int(round(style.font_size)))
        font = self._font_for(resolved, font_size)
        ascent, descent = font.getmetrics()
        line_height = ascent + descent
        align = "center" if resolved.type is ElementType.IMAGE else style.align

        block = layout_box(resolved.text, font.getlength, Box(x, y, w, h),
                           line_height=line_height, align=align, padding=pad)

        color = style.rgb(self.settings.text_color)
        for line in block.lines:
            if not line.text:
                continue
            top = y + pad + line.index * line_height
            draw.text((line.x, top), line.text, font=font, fill=color)
            if style.underline:
                baseline = top + ascent + 1
                draw.line([(line.x, baseline), (line.x + font.getlength(line.text), baseline)],
                          fill=color, width=1)
        return block.dropped
