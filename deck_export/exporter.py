#!/usr/bin/env python3
"""
Main export module that ties together the content resolver and the renderers.
"""

import dataclasses
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from . import structured_content
from .content_resolver import ContentResolver, ParagraphCursor
from .css_utils import ExportSettings
from .layout_parser import elements_from, extract_slide_data
from .models import ExportFormat, RenderedSlide, SlideContentPayload, SlideSource
from .pdf_renderer import PDFRenderer
from .png_renderer import PNGRenderer
from .pptx_renderer import PPTXRenderer

logger = logging.getLogger(__name__)

DEFAULT_FONT_FAMILY = "Noto Sans JP"

MEDIA_TYPES = {
    ExportFormat.PPTX: "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ExportFormat.PDF: "application/pdf",
    ExportFormat.PNG: "application/zip",
}

EXTENSIONS = {
    ExportFormat.PPTX: "pptx",
    ExportFormat.PDF: "pdf",
    ExportFormat.PNG: "zip",
}

RENDERERS = {
    ExportFormat.PPTX: PPTXRenderer,
    ExportFormat.PDF: PDFRenderer,
    ExportFormat.PNG: PNGRenderer,
}


class ExportError(Exception):
    """A whole export request failed; no artifact is produced."""


def parse_format(raw: Union[str, ExportFormat]) -> ExportFormat:
    """Parse a requested format name case-insensitively."""
    if isinstance(raw, ExportFormat):
        return raw
    value = str(raw or "").strip().upper()
    try:
        return ExportFormat(value)
    except ValueError:
        raise ExportError(f"Unsupported export format: {raw}") from None


@dataclass
class ExportRequest:
    """
    One export call.

    Attributes:
        slides: Slides in output order
        format: PPTX, PDF or PNG
        font_family: Preferred font, used only where an element sets none
        shared_content: Free text whose paragraphs are consumed across all
            slides with a single cursor instead of each slide's own body
        title: Used for the artifact file name
        warnings: Non-fatal warnings collected upstream (e.g. by composition)
    """
    slides: List[SlideSource]
    format: Union[str, ExportFormat] = ExportFormat.PPTX
    font_family: Optional[str] = None
    shared_content: Optional[str] = None
    title: str = "presentation"
    warnings: List[str] = field(default_factory=list)


@dataclass
class ExportResult:
    content: bytes
    format: ExportFormat
    filename: str
    media_type: str
    warnings: List[str] = field(default_factory=list)


def _safe_filename(title: str, ext: str) -> str:
    stem = re.sub(r'[\\/:*?"<>|\s]+', "_", (title or "").strip()).strip("_") or "presentation"
    return f"{stem}.{ext}"


class DeckExporter:
    """
    Resolve slides and render them to one of the three export formats.
    """

    def __init__(
        self,
        *,
        theme: str = "default",
        debug: bool = False,
        today: Optional[Callable[[], str]] = None,
    ):
        """Create a new :class:`DeckExporter`.

        Parameters
        ----------
        theme
            Name of the CSS theme supplying canvas size, padding, colours and
            the default font family.
        debug
            Enable verbose logging.
        today
            Callable returning the date string used for date placeholders;
            defaults to today's ISO date.
        """
        self.debug = debug
        self.theme = theme
        self.today = today
        self.settings = ExportSettings.from_theme(theme)

    def _settings_for(self, request: ExportRequest) -> ExportSettings:
        font = (request.font_family or "").strip()
        return dataclasses.replace(self.settings, font_family=font) if font else self.settings

    def _resolver(self, settings: ExportSettings) -> ContentResolver:
        kwargs = {"font_family": settings.font_family, "debug": self.debug}
        if self.today is not None:
            kwargs["today"] = self.today
        return ContentResolver(**kwargs)

    def resolve_slides(self, request: ExportRequest,
                       settings: Optional[ExportSettings] = None) -> List[RenderedSlide]:
        """
        Resolve every slide of *request* to display strings.

        Slot counters are fresh per slide.  With ``shared_content`` in free-text
        mode one paragraph cursor is shared across all slides of this call.
        """
        settings = settings or self._settings_for(request)
        resolver = self._resolver(settings)

        shared = request.shared_content
        cursor = None
        if shared is not None and not structured_content.is_structured(shared):
            cursor = ParagraphCursor.from_content(shared)

        rendered = []
        for source in request.slides:
            payload = source.payload
            if shared is not None:
                payload = dataclasses.replace(payload, body=shared)
            elements = elements_from(source.layout)
            resolved = resolver.resolve(elements, payload, cursor=cursor)
            rendered.append(RenderedSlide(elements=resolved, title=payload.title))
        return rendered

    def export(self, request: ExportRequest) -> ExportResult:
        """
        Export *request* to a single artifact.

        Returns:
            ExportResult with the document (or zip) bytes and warnings

        Raises:
            ExportError: for an unsupported format or any rendering failure
        """
        fmt = parse_format(request.format)
        settings = self._settings_for(request)

        try:
            slides = self.resolve_slides(request, settings)
            renderer = RENDERERS[fmt](settings=settings, debug=self.debug)
            content = renderer.render(slides)
        except Exception as e:
            logger.error(f"Failed to generate {fmt.value} export", exc_info=self.debug)
            raise ExportError(f"{fmt.value} export failed: {e}") from e

        warnings = list(request.warnings) + list(getattr(renderer, "warnings", []))
        if self.debug:
            logger.info(f"Exported {len(slides)} slide(s) as {fmt.value} ({len(content)} bytes)")
            for warning in warnings:
                logger.info(f"⚠️ {warning}")

        return ExportResult(
            content=content,
            format=fmt,
            filename=_safe_filename(request.title, EXTENSIONS[fmt]),
            media_type=MEDIA_TYPES[fmt],
            warnings=warnings,
        )

    def export_saved_slides(
        self,
        contents: Iterable[str],
        format: Union[str, ExportFormat],
        presentation_title: str = "",
        font_family: Optional[str] = None,
    ) -> ExportResult:
        """
        Export saved slides (``{"layout": {...}, "data": {...}}`` JSON strings).

        A slide's title comes from ``data.title``, then ``data.name``, then
        *presentation_title*.
        """
        slides = []
        for content_json in contents:
            data = extract_slide_data(content_json)
            payload = SlideContentPayload.from_data(data, default_title=presentation_title)
            slides.append(SlideSource(payload=payload, layout=content_json))
        request = ExportRequest(
            slides=slides,
            format=format,
            font_family=font_family or DEFAULT_FONT_FAMILY,
            title=presentation_title or "presentation",
        )
        return self.export(request)


def main():
    """Command-line entry point for the deck exporter."""
    import argparse
    import sys

    from .composer import compose_quick_deck

    def _build_parser() -> argparse.ArgumentParser:
        p = argparse.ArgumentParser(prog="deck-export", description="Export slide content to PPTX, PDF or PNG.")
        p.add_argument("content", type=Path, help="Text file with the slide content")
        p.add_argument("--title", default="", help="Presentation title ('---' separates per-slide titles)")
        p.add_argument("--subject", default="", help="Subject metadata")
        p.add_argument("--lesson", default="", help="Lesson metadata")
        p.add_argument("--layout", "-l", type=Path, action="append", default=[], help="Layout JSON file (repeatable, one per slide)")
        p.add_argument("--template-deck", action="store_true", help="Treat the layouts as a template deck (one slide per layout)")
        p.add_argument("--format", "-f", default="PPTX", help="PPTX, PDF or PNG")
        p.add_argument("--font", default=None, help="Preferred font family")
        p.add_argument("--theme", "-t", default="default", help="CSS theme to use (default, dark, …)")
        p.add_argument("--output", "-o", type=Path, help="Destination file (default: <title>.<ext> in the current directory)")
        p.add_argument("--debug", action="store_true", help="Enable verbose logging")
        return p

    parser = _build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=os.getenv("DECK_EXPORT_LOG_LEVEL", "DEBUG" if args.debug else "INFO").upper(),
        format="%(levelname)s  %(message)s",
    )

    if not args.content.exists():
        logger.error(f"Content file '{args.content}' not found")
        sys.exit(1)

    layouts = []
    for layout_path in args.layout:
        if not layout_path.exists():
            logger.error(f"Layout file '{layout_path}' not found")
            sys.exit(1)
        layouts.append(layout_path.read_text(encoding="utf-8"))

    deck = compose_quick_deck(
        title=args.title,
        content=args.content.read_text(encoding="utf-8"),
        layouts=layouts,
        subject=args.subject,
        lesson=args.lesson,
        template_deck=args.template_deck,
    )

    exporter = DeckExporter(theme=args.theme, debug=args.debug)
    request = ExportRequest(
        slides=deck.slides,
        format=args.format,
        font_family=args.font,
        title=deck.title or args.content.stem,
        warnings=deck.warnings,
    )
    try:
        result = exporter.export(request)
    except ExportError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    output_path = args.output or Path(result.filename)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(result.content)

    for warning in result.warnings:
        logger.warning(f"⚠️ {warning}")
    logger.info("✅ %s written to %s (%d slide(s))", result.format.value, output_path, len(deck.slides))


if __name__ == "__main__":
    main()
