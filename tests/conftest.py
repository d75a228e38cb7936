import json
import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path so `import deck_export` works
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

FIXED_TODAY = "2024-03-05"


@pytest.fixture
def today():
    """Deterministic replacement for the current date."""
    return lambda: FIXED_TODAY


@pytest.fixture
def two_text_layout():
    """Title on top, two text boxes side by side, a caption and a date below."""
    return json.dumps({
        "elements": [
            {"id": 1, "type": "title", "x": 40, "y": 30, "w": 720, "h": 80,
             "style": {"fontSize": 36, "bold": True, "align": "center"}},
            {"id": 3, "type": "text", "x": 420, "y": 140, "w": 340, "h": 200,
             "style": {"fontSize": 18}},
            {"id": 2, "type": "text", "x": 40, "y": 140, "w": 340, "h": 200,
             "style": {"fontSize": 18, "color": "#ff0000"}},
            {"id": 4, "type": "caption", "x": 40, "y": 360, "w": 720, "h": 60,
             "style": {"fontSize": 14, "italic": True}},
            {"id": 5, "type": "date", "x": 600, "y": 540, "w": 160, "h": 40,
             "style": {"fontSize": 12, "align": "right"}},
        ]
    })
