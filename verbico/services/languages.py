# verbico/services/languages.py
"""
Supported language catalog.
"""

from typing import Optional

from verbico.models.types import Language

# Pseudo source language meaning "detect before translating"
AUTO_DETECT = "auto"
AUTO_DETECT_LABEL = "Auto-detect"

DEFAULT_LANGUAGE = "en"

SUPPORTED_LANGUAGES: tuple[Language, ...] = (
    Language("en", "English", "English"),
    Language("es", "Spanish", "Español"),
    Language("fr", "French", "Français"),
    Language("de", "German", "Deutsch"),
    Language("it", "Italian", "Italiano"),
    Language("pt", "Portuguese", "Português"),
    Language("ru", "Russian", "Русский"),
    Language("ja", "Japanese", "日本語"),
    Language("ko", "Korean", "한국어"),
    Language("zh", "Chinese", "中文"),
    Language("ar", "Arabic", "العربية"),
    Language("hi", "Hindi", "हिन्दी"),
    Language("nl", "Dutch", "Nederlands"),
    Language("sv", "Swedish", "Svenska"),
    Language("pl", "Polish", "Polski"),
)

_LANGUAGES_BY_CODE: dict[str, Language] = {lang.code: lang for lang in SUPPORTED_LANGUAGES}

SUPPORTED_CODES: frozenset[str] = frozenset(_LANGUAGES_BY_CODE)

# Locale handed to the browser speech engines for each catalog code
_SPEECH_LOCALES: dict[str, str] = {
    "en": "en-US",
    "es": "es-ES",
    "fr": "fr-FR",
    "de": "de-DE",
    "it": "it-IT",
    "pt": "pt-BR",
    "ru": "ru-RU",
    "ja": "ja-JP",
    "ko": "ko-KR",
    "zh": "zh-CN",
    "ar": "ar-SA",
    "hi": "hi-IN",
    "nl": "nl-NL",
    "sv": "sv-SE",
    "pl": "pl-PL",
}


def get_language(code: str) -> Optional[Language]:
    """Return the catalog entry for a code, or None."""
    return _LANGUAGES_BY_CODE.get(code)


def get_language_name(code: str) -> str:
    """Return the English display name for a code."""
    language = _LANGUAGES_BY_CODE.get(code)
    return language.name if language else "Unknown Language"


def is_supported(code: str) -> bool:
    return code in _LANGUAGES_BY_CODE


def to_speech_locale(code: str) -> str:
    """Map a catalog code (or "auto") to a BCP-47 tag for speech engines."""
    if code == AUTO_DETECT:
        return _SPEECH_LOCALES[DEFAULT_LANGUAGE]
    return _SPEECH_LOCALES.get(code, code)


def language_options(include_auto: bool = False) -> dict[str, str]:
    """Options for a language dropdown: code -> label, in catalog order."""
    options: dict[str, str] = {}
    if include_auto:
        options[AUTO_DETECT] = AUTO_DETECT_LABEL
    for language in SUPPORTED_LANGUAGES:
        options[language.code] = language.label
    return options
