"""Theme loader for export theme CSS files."""
from pathlib import Path
from typing import List

THEMES_DIR = Path(__file__).parent / "themes"


def get_css(theme: str = "default") -> str:
    """
    Load CSS content for the specified theme.

    Args:
        theme: Theme name (default, dark, etc.)

    Returns:
        CSS content as string

    Raises:
        FileNotFoundError: If theme file doesn't exist
        ValueError: If theme name is invalid
    """
    # Validate theme name (security: prevent path traversal)
    if not theme or not theme.replace("_", "").replace("-", "").isalnum():
        raise ValueError(f"Invalid theme name: {theme}")

    theme_path = THEMES_DIR / f"{theme}.css"

    if not theme_path.exists():
        raise FileNotFoundError(
            f"Theme '{theme}' not found. Available themes: {list_available_themes()}"
        )

    return theme_path.read_text(encoding="utf-8")


def list_available_themes() -> List[str]:
    """
    List all available themes.

    Returns:
        List of theme names
    """
    if not THEMES_DIR.exists():
        return []

    return sorted(f.stem for f in THEMES_DIR.glob("*.css") if f.is_file())


def validate_theme(theme: str) -> bool:
    """
    Check if a theme exists.
    """
    try:
        get_css(theme)
        return True
    except (FileNotFoundError, ValueError):
        return False
