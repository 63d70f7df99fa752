# verbico/services/translation_bridge.py
"""
Translation Bridge: forwards one translation request to the Gemini API.
"""

import logging

from verbico.config.settings import AppSettings
from verbico.models.types import BridgeTranslation
from verbico.services.gemini_client import GeminiClient
from verbico.services.languages import AUTO_DETECT
from verbico.services.prompt_builder import PromptBuilder

logger = logging.getLogger(__name__)

_QUOTE_CHARS = "\"'"


def clean_translation(raw: str) -> str:
    """Strip surrounding whitespace and one layer of leading/trailing quotes."""
    text = raw.strip()
    if text and text[0] in _QUOTE_CHARS:
        text = text[1:]
    if text and text[-1] in _QUOTE_CHARS:
        text = text[:-1]
    return text.strip()


class TranslationBridge:
    """
    Builds the translation prompt, submits it, and cleans up the reply.

    Transport and decoding failures propagate as TranslationError subclasses.
    A reply with no candidate text is not an error: the input text is returned
    unchanged and the outcome is flagged as passthrough.
    """

    def __init__(
        self,
        client: GeminiClient,
        settings: AppSettings,
        prompt_builder: PromptBuilder | None = None,
    ):
        self.client = client
        self.settings = settings
        self.prompt_builder = prompt_builder or PromptBuilder()

    async def translate_with_outcome(
        self,
        text: str,
        target_language: str,
        source_language: str = AUTO_DETECT,
    ) -> BridgeTranslation:
        prompt = self.prompt_builder.build_translation(text, target_language, source_language)
        result = await self.client.generate(prompt, self.settings.translation_model)

        raw = result.text
        translated = clean_translation(raw) if raw else ""
        if not translated:
            logger.warning(
                "Translation reply had no usable text (model=%s); returning input unchanged",
                result.model,
            )
            return BridgeTranslation(text=text, passthrough=True)

        logger.debug("Translated %d chars %s -> %s", len(text), source_language, target_language)
        return BridgeTranslation(text=translated, passthrough=False)

    async def translate(
        self,
        text: str,
        target_language: str,
        source_language: str = AUTO_DETECT,
    ) -> str:
        """
        Translate text.

        Args:
            text: Source text
            target_language: Target language code
            source_language: Source language code or "auto"

        Returns:
            Translated text, or the input text when the reply carried none.

        Raises:
            TransportError / UpstreamShapeError (both TranslationError)
        """
        outcome = await self.translate_with_outcome(text, target_language, source_language)
        return outcome.text
