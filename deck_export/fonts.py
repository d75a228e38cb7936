#!/usr/bin/env python3
"""
Font resolution for the PDF and PNG renderers.

Text runs containing Japanese/CJK codepoints are drawn with a CJK-capable
font, everything else with a Latin font.  Fonts are looked up in this order:

1. fonts bundled in ``deck_export/fonts`` (consistent output everywhere);
2. well-known system font paths;
3. a built-in base font of the rendering library.

Loading never raises.  Loaded fonts are cached for the life of the process
and are never mutated after loading.
"""
from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import Iterable, List, Tuple, TypeVar

from PIL import ImageFont
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfbase.ttfonts import TTFont

logger = logging.getLogger(__name__)

__all__ = [
    "contains_cjk",
    "select_font",
    "font_candidates",
    "load_pdf_font",
    "load_image_font",
]

F = TypeVar("F")

BUNDLED_FONT_DIR = Path(__file__).parent / "fonts"

# Inclusive codepoint ranges that require the CJK font.
CJK_RANGES: Tuple[Tuple[int, int], ...] = (
    (0x3040, 0x309F),  # Hiragana
    (0x30A0, 0x30FF),  # Katakana
    (0x31F0, 0x31FF),  # Katakana phonetic extensions
    (0xFF66, 0xFF9D),  # Halfwidth Katakana
    (0x3400, 0x4DBF),  # CJK unified ideographs extension A
    (0x4E00, 0x9FFF),  # CJK unified ideographs
    (0x3000, 0x303F),  # CJK symbols and punctuation
)

_BUNDLED = {
    ("latin", False): ("NotoSans-VF.ttf", "NotoSans-Regular.ttf", "DejaVuSans.ttf"),
    ("latin", True): ("NotoSans-Bold.ttf", "DejaVuSans-Bold.ttf"),
    ("cjk", False): ("NotoSansJP-VF.ttf", "NotoSansJP-Regular.ttf", "NotoSansJP-Regular.otf"),
    ("cjk", True): ("NotoSansJP-Bold.ttf",),
}

_SYSTEM = {
    ("latin", False): (
        "C:/Windows/Fonts/arial.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans.ttf",
        "/Library/Fonts/Arial.ttf",
        "/System/Library/Fonts/Supplemental/Arial.ttf",
    ),
    ("latin", True): (
        "C:/Windows/Fonts/arialbd.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf",
        "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
    ),
    ("cjk", False): (
        "C:/Windows/Fonts/meiryo.ttc",
        "C:/Windows/Fonts/meiryo.ttf",
        "C:/Windows/Fonts/yugothm.ttc",
        "C:/Windows/Fonts/msgothic.ttc",
        "/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc",
        "/usr/share/fonts/noto-cjk/NotoSansCJK-Regular.ttc",
        "/System/Library/Fonts/ヒラギノ角ゴシック W3.ttc",
    ),
    ("cjk", True): (
        "C:/Windows/Fonts/meiryob.ttc",
        "/usr/share/fonts/opentype/noto/NotoSansCJK-Bold.ttc",
        "/usr/share/fonts/noto-cjk/NotoSansCJK-Bold.ttc",
    ),
}

PDF_BASE_FONTS = {False: "Helvetica", True: "Helvetica-Bold"}
PDF_CJK_BASE_FONT = "HeiseiKakuGo-W5"


def contains_cjk(text: str | None) -> bool:
    """Return True if *text* has any Hiragana/Katakana/CJK ideograph/CJK punctuation."""
    if not text:
        return False
    for ch in text:
        cp = ord(ch)
        for low, high in CJK_RANGES:
            if low <= cp <= high:
                return True
    return False


def select_font(text: str | None, latin_font: F, cjk_font: F) -> F:
    """Pick *cjk_font* for runs containing CJK codepoints, else *latin_font*."""
    return cjk_font if contains_cjk(text) else latin_font


def font_candidates(kind: str, bold: bool = False, preferred_family: str = "") -> List[Path]:
    """
    Ordered font file candidates for *kind* (``latin`` or ``cjk``).

    Bundled fonts come first, then system fonts.  A bold request falls back to
    the regular candidates when no bold face is found.
    """
    weights = (True, False) if bold else (False,)
    bundled: List[Path] = []
    system: List[Path] = []
    for weight in weights:
        bundled.extend(BUNDLED_FONT_DIR / name for name in _BUNDLED[(kind, weight)])
        paths = list(_SYSTEM[(kind, weight)])
        if kind == "latin" and "arial" in (preferred_family or "").lower():
            paths.sort(key=lambda p: "arial" not in p.lower())
        system.extend(Path(p) for p in paths)
    return bundled + system


def _existing(paths: Iterable[Path]) -> Iterable[Path]:
    for path in paths:
        try:
            if path.is_file():
                yield path
        except OSError:
            continue


@functools.lru_cache(maxsize=None)
def load_pdf_font(kind: str = "latin", bold: bool = False, preferred_family: str = "") -> str:
    """
    Register and return a reportlab font name for *kind*.

    Returns a built-in base font name when no TrueType file can be loaded.
    """
    for path in _existing(font_candidates(kind, bold, preferred_family)):
        name = f"deck-{kind}-{'bold' if bold else 'regular'}-{path.stem}"
        try:
            subfont = {"subfontIndex": 0} if path.suffix.lower() == ".ttc" else {}
            pdfmetrics.registerFont(TTFont(name, str(path), **subfont))
            logger.debug(f"🔤 PDF {kind} font loaded from {path}")
            return name
        except Exception as e:
            logger.debug(f"⚠️ Could not load PDF font {path}: {e}")

    if kind == "cjk":
        try:
            pdfmetrics.registerFont(UnicodeCIDFont(PDF_CJK_BASE_FONT))
            return PDF_CJK_BASE_FONT
        except Exception as e:
            logger.warning(f"⚠️ Built-in CJK font unavailable, using Helvetica: {e}")
    return PDF_BASE_FONTS[bold]


@functools.lru_cache(maxsize=None)
def load_image_font(kind: str = "latin", size: int = 18, bold: bool = False,
                    preferred_family: str = "") -> ImageFont.ImageFont:
    """
    Load a Pillow font for *kind* at *size* pixels.

    Falls back to Pillow's built-in scalable default font.
    """
    size = max(6, int(size))
    for path in _existing(font_candidates(kind, bold, preferred_family)):
        try:
            font = ImageFont.truetype(str(path), size)
            logger.debug(f"🔤 Image {kind} font loaded from {path} at {size}px")
            return font
        except OSError as e:
            logger.debug(f"⚠️ Could not load image font {path}: {e}")
    return ImageFont.load_default(size=size)
