# verbico/services/translation_client.py
"""
Client-side wrappers over the internal JSON endpoints.

The UI never talks to the generative API directly; it goes through
/api/translate and /api/detect-language so both paths share one server-side
implementation.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from verbico.services.exceptions import TRANSLATION_FAILED_MESSAGE, TranslationError
from verbico.services.language_detector import detect_language_local
from verbico.services.languages import AUTO_DETECT, is_supported

logger = logging.getLogger(__name__)

TRANSLATE_ENDPOINT = "/api/translate"
DETECT_ENDPOINT = "/api/detect-language"


def _server_error(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return None


class TranslationClient:
    """
    Async wrapper for the internal translation endpoints.

    translate_text() surfaces every failure as one user-facing TranslationError;
    detect_language() never fails and degrades to the local heuristic.
    """

    def __init__(
        self,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            transport=transport,
            timeout=timeout,
        )

    async def _post(self, path: str, body: dict[str, Any]) -> httpx.Response:
        return await self._client.post(path, json=body)

    async def translate_text(
        self,
        text: str,
        target_language: str,
        source_language: str = AUTO_DETECT,
    ) -> str:
        """
        Translate text through /api/translate.

        Raises:
            TranslationError: with the generic user-facing message
        """
        body = {
            "text": text,
            "targetLanguage": target_language,
            "sourceLanguage": source_language,
        }
        try:
            response = await self._post(TRANSLATE_ENDPOINT, body)
        except httpx.HTTPError as e:
            logger.error("Translation request failed: %s", e)
            raise TranslationError(TRANSLATION_FAILED_MESSAGE) from e

        if not response.is_success:
            logger.error(
                "Translation error (HTTP %d): %s",
                response.status_code,
                _server_error(response) or response.reason_phrase,
            )
            raise TranslationError(TRANSLATION_FAILED_MESSAGE)

        try:
            data = response.json()
        except ValueError as e:
            logger.error("Translation reply is not JSON: %s", e)
            raise TranslationError(TRANSLATION_FAILED_MESSAGE) from e

        translated = data.get("translatedText") if isinstance(data, dict) else None
        if not isinstance(translated, str):
            logger.error("Translation reply has no translatedText")
            raise TranslationError(TRANSLATION_FAILED_MESSAGE)
        return translated

    async def detect_language(self, text: str) -> str:
        """Detect the language of text; falls back to the local heuristic."""
        try:
            response = await self._post(DETECT_ENDPOINT, {"text": text})
            if response.is_success:
                data = response.json()
                code = data.get("language") if isinstance(data, dict) else None
                if isinstance(code, str) and is_supported(code):
                    return code
                logger.warning("Detection reply outside the catalog: %r", code)
            else:
                logger.warning(
                    "Language detection error (HTTP %d): %s",
                    response.status_code,
                    _server_error(response) or response.reason_phrase,
                )
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Language detection request failed: %s", e)

        return detect_language_local(text)

    async def aclose(self) -> None:
        await self._client.aclose()
