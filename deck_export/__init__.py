"""
Deck Export Package

Resolves slide content into layout placeholders and exports decks as
PPTX, PDF or per-slide PNG images.
"""

from .composer import compose_batch, compose_quick_deck
from .content_resolver import ContentResolver, ParagraphCursor
from .exporter import DeckExporter, ExportError, ExportRequest, ExportResult
from .models import ExportFormat, LayoutElement, SlideContentPayload, SlideSource

__all__ = [
    'DeckExporter',
    'ExportError',
    'ExportRequest',
    'ExportResult',
    'ExportFormat',
    'ContentResolver',
    'ParagraphCursor',
    'LayoutElement',
    'SlideContentPayload',
    'SlideSource',
    'compose_quick_deck',
    'compose_batch',
]
