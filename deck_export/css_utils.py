"""
CSS theme utilities for the exporters.

Every renderer reads canvas size, padding, colours and the default font family
from the theme's ``:root`` variables through :class:`CSSParser`, and the
resolved values are frozen into an :class:`ExportSettings`.
"""
import re
from dataclasses import dataclass
from typing import Dict, Optional

from .models import hex_to_rgb
from .theme_loader import get_css


class CSSParser:
    """
    Theme CSS variable extraction.
    """

    def __init__(self, theme: str = "default"):
        self.theme = theme
        self.css_content = get_css(theme)
        self._css_vars = None

    def get_css_variables(self) -> Dict[str, str]:
        """Extract all CSS variables from :root section. Cached for performance."""
        if self._css_vars is not None:
            return self._css_vars

        root_match = re.search(r':root\s*\{([^}]+)\}', self.css_content, re.DOTALL)
        if not root_match:
            raise ValueError(f"No :root section found in theme '{self.theme}'")

        variable_pattern = r'--([^:]+):\s*([^;]+);'
        css_vars = re.findall(variable_pattern, root_match.group(1))
        self._css_vars = {name.strip(): value.strip() for name, value in css_vars}
        return self._css_vars

    def get_raw_value(self, variable_name: str) -> str:
        """Get raw CSS variable value."""
        value = self.get_css_variables().get(variable_name)
        if not value:
            raise ValueError(f"CSS variable '--{variable_name}' not found in theme '{self.theme}'")
        return value

    def get_px_value(self, variable_name: str) -> int:
        """Get pixel value from CSS variable."""
        value = self.get_raw_value(variable_name)
        px_match = re.search(r'(\d+)px', value)
        if not px_match:
            raise ValueError(f"CSS variable '--{variable_name}' is not a pixel value: {value}")
        return int(px_match.group(1))

    def get_color(self, variable_name: str) -> str:
        value = self.get_raw_value(variable_name)
        if not re.fullmatch(r'#[0-9a-fA-F]{6}', value):
            raise ValueError(f"CSS variable '--{variable_name}' is not a #rrggbb color: {value}")
        return value

    def get_font_family(self) -> str:
        return self.get_raw_value('slide-font-family').strip('\'"')

    def get_line_height(self) -> float:
        """Extract line-height from CSS."""
        line_height_match = re.search(r'line-height:\s*([\d.]+)', self.css_content)
        if not line_height_match:
            raise ValueError(f"❌ CSS theme '{self.theme}' missing line-height")
        return float(line_height_match.group(1))


@dataclass(frozen=True)
class ExportSettings:
    """
    Resolved export configuration.

    Editor-canvas units map 1:1 to PDF points and PNG pixels; the PPTX renderer
    rescales them to its own page size.
    """
    canvas_width: int = 800
    canvas_height: int = 600
    padding: int = 6
    font_family: str = "Noto Sans JP"
    line_height: float = 1.2
    text_color: str = "#111827"
    border_color: str = "#e6e6e6"
    background_color: str = "#ffffff"
    theme: str = "default"

    @property
    def background_rgb(self) -> tuple:
        return hex_to_rgb(self.background_color)

    @property
    def border_rgb(self) -> tuple:
        return hex_to_rgb(self.border_color)

    @classmethod
    def from_theme(cls, theme: str = "default", font_family: Optional[str] = None) -> "ExportSettings":
        """
        Build settings from a theme CSS file.

        Args:
            theme: Theme name under ``deck_export/themes``
            font_family: Overrides the theme's ``--slide-font-family`` when set

        Raises:
            FileNotFoundError, ValueError: for unknown or incomplete themes
        """
        css = CSSParser(theme)
        return cls(
            canvas_width=css.get_px_value('canvas-width'),
            canvas_height=css.get_px_value('canvas-height'),
            padding=css.get_px_value('box-padding'),
            font_family=(font_family or "").strip() or css.get_font_family(),
            line_height=css.get_line_height(),
            text_color=css.get_color('text-color'),
            border_color=css.get_color('border-color'),
            background_color=css.get_color('background-color'),
            theme=theme,
        )
