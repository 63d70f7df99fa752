# verbico/models/types.py
"""
Core data types for the Verbico translation application.
"""

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class Language:
    """A supported language (catalog entry)."""
    code: str                        # ISO-639-1 code (e.g., "en")
    name: str                        # English display name
    native_name: str                 # Name in the language itself

    @property
    def label(self) -> str:
        """Dropdown label, e.g. "Spanish (Español)"."""
        return f"{self.name} ({self.native_name})"


def _new_record_id() -> str:
    return uuid.uuid4().hex


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class TranslationRecord:
    """
    A single completed translation.
    Created on success, never mutated, evicted only by history capacity or clear.
    """
    source_text: str
    translated_text: str
    source_language: str             # Catalog code actually used (never "auto")
    target_language: str             # Catalog code
    id: str = field(default_factory=_new_record_id)
    timestamp: int = field(default_factory=_now_ms)   # Epoch milliseconds

    @property
    def preview(self) -> str:
        """Get preview of source text (truncated)"""
        max_len = 50
        if len(self.source_text) <= max_len:
            return self.source_text
        return self.source_text[:max_len] + "..."

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys used by the persisted history blob."""
        return {
            "id": self.id,
            "sourceText": self.source_text,
            "translatedText": self.translated_text,
            "sourceLanguage": self.source_language,
            "targetLanguage": self.target_language,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TranslationRecord":
        """Inverse of to_dict(). Raises KeyError/TypeError/ValueError on bad input."""
        return cls(
            id=str(data["id"]),
            source_text=str(data["sourceText"]),
            translated_text=str(data["translatedText"]),
            source_language=str(data["sourceLanguage"]),
            target_language=str(data["targetLanguage"]),
            timestamp=int(data["timestamp"]),
        )


@dataclass(frozen=True)
class BridgeTranslation:
    """
    Translation Bridge output.

    passthrough is True when the upstream reply carried no usable text and the
    original input was returned instead, so callers can tell a real
    translation from a no-op.
    """
    text: str
    passthrough: bool = False


@dataclass(frozen=True)
class SpeechResult:
    """One increment of a streaming recognition session (not persisted)."""
    text: str
    is_final: bool


@dataclass(frozen=True)
class SpeechUtterance:
    """Text handed to a speech synthesis engine."""
    text: str
    language: str                    # BCP-47 tag
    rate: float = 0.8
    pitch: float = 1.0


# Callback types
SpeechResultCallback = Callable[[SpeechResult], None]
SpeechErrorCallback = Callable[[str], None]
