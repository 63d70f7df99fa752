# verbico/services/__init__.py
"""
Service layer for Verbico.

Services that pull in httpx are lazy-loaded.
Use explicit imports like:
    from verbico.services.translation_client import TranslationClient
"""

# Fast imports - no third-party dependencies
from .exceptions import (
    CapabilityError,
    TranslationError,
    TransportError,
    UpstreamShapeError,
    ValidationError,
    VerbicoError,
)
from .language_detector import LanguageDetector
from .prompt_builder import PromptBuilder

# Lazy-loaded services via __getattr__
_LAZY_IMPORTS = {
    'GeminiClient': 'gemini_client',
    'TranslationBridge': 'translation_bridge',
    'DetectionBridge': 'detection_bridge',
    'TranslationClient': 'translation_client',
    'TranslationService': 'translation_service',
    'SpeechRecognitionService': 'speech',
    'TextToSpeechService': 'speech',
    'RecognitionState': 'speech',
}

# Submodules that can be accessed via __getattr__ (for patching support)
_SUBMODULES = {
    'gemini_client',
    'translation_bridge',
    'detection_bridge',
    'translation_client',
    'translation_service',
    'speech',
    'languages',
}


def __getattr__(name: str):
    """Lazy-load service modules on first access."""
    import importlib
    # Support accessing submodules directly (for unittest.mock.patch)
    if name in _SUBMODULES:
        return importlib.import_module(f'.{name}', __package__)
    if name in _LAZY_IMPORTS:
        module_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(f'.{module_name}', __package__)
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'VerbicoError',
    'TranslationError',
    'TransportError',
    'UpstreamShapeError',
    'ValidationError',
    'CapabilityError',
    'LanguageDetector',
    'PromptBuilder',
    'GeminiClient',
    'TranslationBridge',
    'DetectionBridge',
    'TranslationClient',
    'TranslationService',
    'SpeechRecognitionService',
    'TextToSpeechService',
    'RecognitionState',
]
