"""
HTTP endpoints served alongside the NiceGUI page.
"""

from .routes import DETECT_PATH, TRANSLATE_PATH, create_api_router

__all__ = ['DETECT_PATH', 'TRANSLATE_PATH', 'create_api_router']
