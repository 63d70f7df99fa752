# verbico/services/prompt_builder.py
"""
Builds the instructions sent to the generative API.

Prompt file structure (all optional, under the prompts directory):
- translate.txt: translation instruction
- detect_language.txt: language detection instruction

Templates use the placeholders {source_language}, {target_language} and
{input_text}. When a file is missing the built-in default is used.
"""

import logging
from pathlib import Path
from typing import Optional

from verbico.services.languages import AUTO_DETECT

logger = logging.getLogger(__name__)

# Wording used in place of a source language when it is auto-detected
AUTO_SOURCE_PLACEHOLDER = "the detected language"

DEFAULT_TRANSLATE_TEMPLATE = (
    "You are a professional translator. Translate the following text from "
    "{source_language} to {target_language}. Return ONLY the translated text "
    "without any explanations, prefixes, or additional content.\n\n"
    'Text to translate: "{input_text}"'
)

DEFAULT_DETECT_TEMPLATE = (
    "Detect the language of this text and respond with only the ISO 639-1 "
    'language code (2 letters): "{input_text}"'
)


class PromptBuilder:
    """
    Builds translation and detection prompts.
    Templates are read once from prompts_dir and cached.
    """

    def __init__(self, prompts_dir: Optional[Path] = None):
        self.prompts_dir = prompts_dir
        self._templates: dict[str, str] = {}

    def _get_template(self, filename: str, default: str) -> str:
        if filename in self._templates:
            return self._templates[filename]

        template = default
        if self.prompts_dir:
            prompt_path = self.prompts_dir / filename
            if prompt_path.exists():
                try:
                    template = prompt_path.read_text(encoding='utf-8').strip()
                except (OSError, UnicodeDecodeError) as e:
                    logger.warning("Failed to read prompt template %s: %s", prompt_path, e)
                    template = default

        self._templates[filename] = template
        return template

    @staticmethod
    def _fill(template: str, **values: str) -> str:
        # str.replace rather than str.format: user text may contain braces
        result = template
        for key, value in values.items():
            result = result.replace("{" + key + "}", value)
        return result

    def build_translation(self, text: str, target_language: str, source_language: str = AUTO_DETECT) -> str:
        """
        Build the translation instruction.

        Args:
            text: Raw user text (embedded verbatim)
            target_language: Target language code
            source_language: Source language code, or "auto"
        """
        source = AUTO_SOURCE_PLACEHOLDER if source_language == AUTO_DETECT else source_language
        template = self._get_template("translate.txt", DEFAULT_TRANSLATE_TEMPLATE)
        # input_text last so placeholders inside user text stay untouched
        return self._fill(
            template,
            source_language=source,
            target_language=target_language,
            input_text=text,
        )

    def build_detection(self, text: str) -> str:
        """Build the language detection instruction."""
        template = self._get_template("detect_language.txt", DEFAULT_DETECT_TEMPLATE)
        return self._fill(template, input_text=text)

    def reload(self) -> None:
        """Forget cached templates so edited files are picked up."""
        self._templates.clear()
