"""
Data models for Verbico.
"""

from .types import (
    Language,
    TranslationRecord,
    BridgeTranslation,
    SpeechResult,
    SpeechUtterance,
    SpeechResultCallback,
    SpeechErrorCallback,
)

__all__ = [
    'Language',
    'TranslationRecord',
    'BridgeTranslation',
    'SpeechResult',
    'SpeechUtterance',
    'SpeechResultCallback',
    'SpeechErrorCallback',
]
