# verbico/services/gemini_client.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from verbico.config.settings import AppSettings
from verbico.services.exceptions import TransportError, UpstreamShapeError

logger = logging.getLogger(__name__)


def build_generate_payload(prompt: str) -> dict[str, Any]:
    """Request body for a single-prompt generateContent call."""
    return {
        "contents": [
            {
                "parts": [
                    {"text": prompt},
                ],
            },
        ],
    }


def extract_candidate_text(payload: dict[str, Any]) -> Optional[str]:
    """Return candidates[0].content.parts[0].text, or None if any link is missing."""
    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    first = candidates[0]
    if not isinstance(first, dict):
        return None
    content = first.get("content")
    if not isinstance(content, dict):
        return None
    parts = content.get("parts")
    if not isinstance(parts, list) or not parts:
        return None
    part = parts[0]
    if not isinstance(part, dict):
        return None
    text = part.get("text")
    return text if isinstance(text, str) else None


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"][:200]
    return response.text[:200]


@dataclass(frozen=True)
class GenerateResult:
    payload: dict[str, Any]
    model: str

    @property
    def text(self) -> Optional[str]:
        return extract_candidate_text(self.payload)


class GeminiClient:
    """
    Minimal async client for the Gemini generateContent endpoint.

    One prompt per request, no streaming, no retries. Failures are mapped to
    TransportError (network, missing key, non-200) or UpstreamShapeError
    (reply body is not a JSON object).
    """

    def __init__(
        self,
        settings: AppSettings,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._settings = settings
        self._http_client = http_client
        self._owns_client = http_client is None

    @property
    def has_api_key(self) -> bool:
        return bool(self._settings.api_key)

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._settings.request_timeout)
        return self._http_client

    def endpoint_url(self, model: str) -> str:
        base = self._settings.api_base_url.rstrip("/")
        return f"{base}/{self._settings.api_version}/models/{model}:generateContent"

    async def generate(self, prompt: str, model: str) -> GenerateResult:
        """
        Submit one prompt and return the decoded reply.

        Raises:
            TransportError: no API key, connection failure, or non-200 status
            UpstreamShapeError: reply body is not a JSON object
        """
        api_key = self._settings.api_key
        if not api_key:
            raise TransportError("Gemini API key is not configured")

        client = self._get_http_client()
        try:
            response = await client.post(
                self.endpoint_url(model),
                params={"key": api_key},
                headers={"Content-Type": "application/json"},
                json=build_generate_payload(prompt),
            )
        except httpx.HTTPError as e:
            raise TransportError(f"Gemini API request failed: {e}") from e

        if response.status_code != 200:
            detail = _error_detail(response)
            logger.warning("Gemini API error (HTTP %d): %s", response.status_code, detail)
            raise TransportError(
                f"Gemini API error (HTTP {response.status_code}): {detail}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamShapeError(f"Gemini API returned invalid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise UpstreamShapeError("Gemini API returned a non-object payload")

        return GenerateResult(payload=payload, model=model)

    async def aclose(self) -> None:
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None
