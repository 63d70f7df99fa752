# verbico/api/routes.py
"""
Internal JSON endpoints backing the browser UI.

- POST /api/translate        {text, targetLanguage, sourceLanguage} -> {translatedText}
- POST /api/detect-language  {text} -> {language}

Failures are reported as {"error": message} with a non-200 status.
"""

import logging
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from starlette.requests import Request

from verbico.services.detection_bridge import DetectionBridge
from verbico.services.exceptions import TranslationError
from verbico.services.languages import AUTO_DETECT
from verbico.services.translation_bridge import TranslationBridge

logger = logging.getLogger(__name__)

TRANSLATE_PATH = "/api/translate"
DETECT_PATH = "/api/detect-language"


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


async def _read_json_object(request: Request) -> dict[str, Any] | None:
    try:
        body = await request.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def create_api_router(
    translation_bridge: TranslationBridge,
    detection_bridge: DetectionBridge,
) -> APIRouter:
    """Build the router; the bridges are captured by the handlers."""
    router = APIRouter()

    @router.post(TRANSLATE_PATH)
    async def translate(request: Request):
        body = await _read_json_object(request)
        if body is None:
            return _error("Invalid JSON body", 400)

        text = body.get("text")
        target_language = body.get("targetLanguage")
        source_language = body.get("sourceLanguage") or AUTO_DETECT
        if not isinstance(text, str) or not text:
            return _error("Text is required", 400)
        if not isinstance(target_language, str) or not target_language:
            return _error("Target language is required", 400)
        if not isinstance(source_language, str):
            return _error("Source language must be a string", 400)

        try:
            translated = await translation_bridge.translate(text, target_language, source_language)
        except TranslationError as e:
            logger.error("Translation API error: %s", e)
            return _error("Failed to translate text", 500)
        except Exception as e:
            logger.exception("Unexpected translation failure: %s", e)
            return _error("Failed to translate text", 500)

        return {"translatedText": translated}

    @router.post(DETECT_PATH)
    async def detect_language(request: Request):
        body = await _read_json_object(request)
        text = body.get("text") if body is not None else None
        if not isinstance(text, str) or not text:
            return _error("Text is required", 400)

        try:
            language = await detection_bridge.detect(text)
        except Exception as e:
            logger.exception("Language detection API error: %s", e)
            return _error("Failed to detect language", 500)

        return {"language": language}

    return router
