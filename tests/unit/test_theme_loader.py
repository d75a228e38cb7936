"""Test theme loader functionality."""

import pytest

from deck_export.css_utils import CSSParser, ExportSettings
from deck_export.theme_loader import get_css, list_available_themes, validate_theme


def test_get_css_default():
    """Test that default theme loads and returns CSS content."""
    css = get_css("default")

    assert isinstance(css, str)
    assert ":root" in css
    assert "--canvas-width" in css


def test_get_css_dark():
    css = get_css("dark")

    assert "#1a1a1a" in css  # Dark background color


def test_get_css_invalid_theme():
    """Test that invalid theme names raise appropriate errors."""
    with pytest.raises(FileNotFoundError):
        get_css("nonexistent")

    # Invalid characters (path traversal attempt)
    with pytest.raises(ValueError):
        get_css("../evil")

    with pytest.raises(ValueError):
        get_css("theme/../../evil")


def test_list_available_themes():
    themes = list_available_themes()

    assert "default" in themes
    assert "dark" in themes
    assert themes == sorted(themes)


def test_validate_theme():
    assert validate_theme("default") is True
    assert validate_theme("dark") is True
    assert validate_theme("nonexistent") is False
    assert validate_theme("../evil") is False


def test_css_parser_reads_root_variables():
    css = CSSParser("default")

    assert css.get_px_value("canvas-width") == 800
    assert css.get_px_value("box-padding") == 6
    assert css.get_font_family() == "Noto Sans JP"
    assert css.get_line_height() == 1.2
    with pytest.raises(ValueError):
        css.get_raw_value("missing-variable")
    with pytest.raises(ValueError):
        css.get_px_value("text-color")


def test_export_settings_from_default_theme():
    settings = ExportSettings.from_theme("default")

    assert (settings.canvas_width, settings.canvas_height) == (800, 600)
    assert settings.padding == 6
    assert settings.font_family == "Noto Sans JP"
    assert settings.text_color == "#111827"
    assert settings.background_rgb == (255, 255, 255)


def test_export_settings_dark_theme_and_font_override():
    settings = ExportSettings.from_theme("dark", font_family="Arial")

    assert settings.font_family == "Arial"
    assert settings.background_rgb == (0x1a, 0x1a, 0x1a)
    assert settings.theme == "dark"
