# verbico/services/language_detector.py
"""
Local language detection from Unicode code-point ranges.

Used when the Gemini API is not configured or cannot be reached. The result is
a best-effort guess; mixed-script text is classified by whichever rule matches
first, not by majority content.
"""

import re

from verbico.services.languages import DEFAULT_LANGUAGE


def _code_point_class(*ranges: tuple[int, int]) -> re.Pattern[str]:
    """Compile a character class from inclusive code-point ranges."""
    body = ''.join(f'{re.escape(chr(lo))}-{re.escape(chr(hi))}' for lo, hi in ranges)
    return re.compile(f'[{body}]')


# Script rules, checked in order (first match wins)
_SCRIPT_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (_code_point_class((0x0600, 0x06FF)), "ar"),                    # Arabic
    (_code_point_class((0x4E00, 0x9FFF)), "zh"),                    # CJK Unified Ideographs
    (_code_point_class((0x3040, 0x309F), (0x30A0, 0x30FF)), "ja"),  # Hiragana / Katakana
    (_code_point_class((0xAC00, 0xD7AF)), "ko"),                    # Hangul Syllables
    (_code_point_class((0x0400, 0x04FF)), "ru"),                    # Cyrillic
)

# Any accented Latin letter enables the secondary cascade
_RE_EXTENDED_LATIN = re.compile('[àáâãäåæçèéêëìíîïðñòóôõöøùúûüýþÿ]')

# Diacritic rules for Latin-script languages (checked in order)
_DIACRITIC_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile('[ñ¿¡]'), "es"),
    (re.compile('[àâçéèêëîïôùûüÿ]'), "fr"),
    (re.compile('[äöüß]'), "de"),
    (re.compile('[àèéìíîòóù]'), "it"),
    (re.compile('[ãçõ]'), "pt"),
)


class LanguageDetector:
    """
    Character-range language detector.

    Detection priority:
    1. Arabic block → "ar"
    2. CJK ideographs → "zh"
    3. Hiragana/Katakana → "ja"
    4. Hangul syllables → "ko"
    5. Cyrillic → "ru"
    6. Accented Latin letters → es / fr / de / it / pt by diacritic set
    7. Anything else → "en"

    Rule 2 runs before rule 3, so Japanese text containing kanji is reported
    as Chinese.

    Example:
        detector = LanguageDetector()
        detector.detect("Привет")  # "ru"
    """

    def __init__(self, latin_diacritics: bool = True):
        self.latin_diacritics = latin_diacritics

    def detect(self, text: str) -> str:
        """
        Guess the language of text.

        Args:
            text: Text to analyze (may be empty)

        Returns:
            A catalog language code; never raises.
        """
        if not text:
            return DEFAULT_LANGUAGE

        for pattern, code in _SCRIPT_RULES:
            if pattern.search(text):
                return code

        if self.latin_diacritics:
            lowered = text.lower()
            if _RE_EXTENDED_LATIN.search(lowered):
                for pattern, code in _DIACRITIC_RULES:
                    if pattern.search(lowered):
                        return code

        return DEFAULT_LANGUAGE


# Shared default instance (stateless, safe to reuse)
language_detector = LanguageDetector()


def detect_language_local(text: str) -> str:
    """Detect language locally without the API.

    Convenience function that delegates to the shared LanguageDetector.
    """
    return language_detector.detect(text)
