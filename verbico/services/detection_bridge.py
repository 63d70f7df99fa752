# verbico/services/detection_bridge.py
"""
Detection Bridge: asks the Gemini API for a language code, degrading to local
character-range detection.

Detection is an ordered list of strategies. Each strategy returns a catalog
code or None ("try next"); the heuristic strategy always answers, so
DetectionBridge.detect() never fails.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from verbico.config.settings import AppSettings
from verbico.services.exceptions import TranslationError, ValidationError
from verbico.services.gemini_client import GeminiClient
from verbico.services.language_detector import LanguageDetector
from verbico.services.languages import DEFAULT_LANGUAGE, is_supported
from verbico.services.prompt_builder import PromptBuilder

logger = logging.getLogger(__name__)


def validate_language_code(raw: Optional[str]) -> str:
    """Normalize an upstream reply and check it against the catalog.

    Raises:
        ValidationError: reply is empty or not a supported code
    """
    code = (raw or "").strip().lower()
    if not is_supported(code):
        raise ValidationError(f"Unsupported language code: {code[:20]!r}")
    return code


class DetectionStrategy(ABC):
    """One step of the detection fallback chain."""

    name: str = "strategy"

    @abstractmethod
    async def detect(self, text: str) -> Optional[str]:
        """Return a catalog code, or None to let the next strategy try."""
        pass


class UpstreamDetectionStrategy(DetectionStrategy):
    """Ask the generative API for an ISO 639-1 code."""

    name = "upstream"

    def __init__(
        self,
        client: GeminiClient,
        settings: AppSettings,
        prompt_builder: Optional[PromptBuilder] = None,
    ):
        self.client = client
        self.settings = settings
        self.prompt_builder = prompt_builder or PromptBuilder()

    async def detect(self, text: str) -> Optional[str]:
        if not self.client.has_api_key:
            logger.debug("No API key configured; skipping upstream detection")
            return None

        prompt = self.prompt_builder.build_detection(text)
        try:
            result = await self.client.generate(prompt, self.settings.detection_model)
            return validate_language_code(result.text)
        except TranslationError as e:
            logger.warning("Upstream language detection failed: %s", e)
        except ValidationError as e:
            logger.warning("Upstream language detection returned invalid code: %s", e)
        return None


class HeuristicDetectionStrategy(DetectionStrategy):
    """Local code-point range detection (always answers)."""

    name = "heuristic"

    def __init__(self, detector: Optional[LanguageDetector] = None):
        self.detector = detector or LanguageDetector()

    async def detect(self, text: str) -> Optional[str]:
        return self.detector.detect(text)


class DetectionBridge:
    """
    Runs detection strategies in order until one answers.

    Example:
        bridge = DetectionBridge([
            UpstreamDetectionStrategy(client, settings),
            HeuristicDetectionStrategy(),
        ])
        code = await bridge.detect("Bonjour à tous")
    """

    def __init__(self, strategies: Sequence[DetectionStrategy]):
        self.strategies = list(strategies)

    @classmethod
    def create(
        cls,
        client: GeminiClient,
        settings: AppSettings,
        prompt_builder: Optional[PromptBuilder] = None,
    ) -> "DetectionBridge":
        """Standard chain: upstream API first, then the local heuristic."""
        return cls([
            UpstreamDetectionStrategy(client, settings, prompt_builder),
            HeuristicDetectionStrategy(),
        ])

    async def detect(self, text: str) -> str:
        """
        Detect the language of text.

        Returns:
            A supported language code; "en" if every strategy declined.
        """
        for strategy in self.strategies:
            try:
                code = await strategy.detect(text)
            except Exception as e:
                logger.exception("Detection strategy %s raised: %s", strategy.name, e)
                continue
            if code is not None and is_supported(code):
                logger.debug("Language detected by %s: %s", strategy.name, code)
                return code
        return DEFAULT_LANGUAGE
