# verbico/ui/styles.py
"""
Stylesheet for the translation page.

The rules live in styles.css next to this module and are inlined into the
page head by VerbicoApp.create_ui().
"""

from pathlib import Path

_CSS_FILE = Path(__file__).parent / "styles.css"


def _load_css() -> str:
    try:
        return _CSS_FILE.read_text(encoding="utf-8")
    except FileNotFoundError:
        # Page still works unstyled
        return ""


COMPLETE_CSS = _load_css()
