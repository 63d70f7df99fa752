# verbico/__init__.py
"""
Verbico - Text + Voice Translation Application

A browser-based translator using NiceGUI and the Gemini API.
"""

import tomllib
from pathlib import Path


def _get_version() -> str:
    """
    Read the version from pyproject.toml.

    Keeps the displayed version in sync with the packaging metadata without
    having to edit this file on every release.

    Returns:
        str: version string (e.g. "0.1.0")
    """
    pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
    try:
        if pyproject_path.exists():
            with open(pyproject_path, "rb") as f:
                data = tomllib.load(f)
            return data.get("project", {}).get("version", "0.0.0")
    except (OSError, tomllib.TOMLDecodeError):
        pass

    # Installed without the source tree: hardcoded version
    return "0.1.0"


__version__ = _get_version()
__app_name__ = "Verbico AI"
