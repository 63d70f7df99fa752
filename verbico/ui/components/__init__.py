# verbico/ui/components/__init__.py
"""
UI components for Verbico.

Component imports are lazy-loaded for faster startup.
Use explicit imports like:
    from verbico.ui.components.text_panel import create_source_panel
"""

# Lazy-loaded components via __getattr__
_LAZY_IMPORTS = {
    "create_language_selector": "language_selector",
    "create_swap_button": "language_selector",
    "create_source_panel": "text_panel",
    "create_result_panel": "text_panel",
    "create_error_banner": "text_panel",
    "create_history_panel": "history_panel",
    "VoiceRecorder": "voice_recorder",
}


def __getattr__(name: str):
    """Lazy-load component modules on first access."""
    if name in _LAZY_IMPORTS:
        module_name = _LAZY_IMPORTS[name]
        import importlib

        module = importlib.import_module(f".{module_name}", __package__)
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = list(_LAZY_IMPORTS)
