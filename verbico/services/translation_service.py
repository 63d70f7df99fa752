# verbico/services/translation_service.py
"""
Translation orchestration: detect (when auto) -> translate -> history.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from verbico.models.types import TranslationRecord
from verbico.services.languages import AUTO_DETECT

if TYPE_CHECKING:
    from verbico.services.translation_client import TranslationClient
    from verbico.storage.session_history import SessionHistory

logger = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "Please enter text to translate"


class TranslationService:
    """
    Runs one user translation request end to end.

    Each call takes a sequence number. When a newer call has started by the
    time a call completes, its result is stale: it is dropped (None is
    returned) and history is left untouched.
    """

    def __init__(self, client: "TranslationClient", history: Optional["SessionHistory"]):
        self.client = client
        self.history = history
        self._sequence = 0

    @property
    def latest_sequence(self) -> int:
        return self._sequence

    def _is_stale(self, sequence: int) -> bool:
        return sequence != self._sequence

    async def translate(
        self,
        text: str,
        target_language: str,
        source_language: str = AUTO_DETECT,
    ) -> Optional[TranslationRecord]:
        """
        Translate text and record it in history.

        Args:
            text: User input
            target_language: Target language code
            source_language: Source language code or "auto"

        Returns:
            The new TranslationRecord, or None if a newer request superseded this one.

        Raises:
            ValueError: text is blank
            TranslationError: translation failed (user-facing message)
        """
        if not text or not text.strip():
            raise ValueError(EMPTY_INPUT_MESSAGE)

        self._sequence += 1
        sequence = self._sequence

        resolved_source = source_language
        if source_language == AUTO_DETECT:
            resolved_source = await self.client.detect_language(text)
            logger.debug("Detected source language: %s", resolved_source)
            if self._is_stale(sequence):
                logger.debug("Discarding stale request #%d after detection", sequence)
                return None

        translated = await self.client.translate_text(text, target_language, resolved_source)
        if self._is_stale(sequence):
            logger.debug("Discarding stale request #%d", sequence)
            return None

        record = TranslationRecord(
            source_text=text,
            translated_text=translated,
            source_language=resolved_source,
            target_language=target_language,
        )
        if self.history is not None:
            self.history.add(record)
        logger.info(
            "Translated %d chars (%s -> %s)",
            len(text), resolved_source, target_language,
        )
        return record
