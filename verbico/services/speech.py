# verbico/services/speech.py
"""
Speech recognition and synthesis adapters.

The services hold no platform code: they drive an injected engine
(RecognitionEngine / SynthesisEngine). The browser engines live in
verbico.ui.browser_speech; tests use in-memory fakes.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Optional, Sequence

from verbico.models.types import (
    SpeechErrorCallback,
    SpeechResult,
    SpeechResultCallback,
    SpeechUtterance,
)
from verbico.services.exceptions import CapabilityError

logger = logging.getLogger(__name__)

RECOGNITION_UNSUPPORTED_MESSAGE = "Speech recognition is not supported in this browser"
SYNTHESIS_UNSUPPORTED_MESSAGE = "Text-to-speech is not supported in this browser"

DEFAULT_RECOGNITION_LANGUAGE = "en-US"
SPEECH_RATE = 0.8
SPEECH_PITCH = 1.0

# (transcript, is_final) pairs from the engine's current result index onward
ResultBatch = Sequence[tuple[str, bool]]


class RecognitionState(Enum):
    """Recording state of a recognition service"""
    IDLE = "idle"
    RECORDING = "recording"


class RecognitionEngine(ABC):
    """Platform speech recognizer (single utterance, interim results on)."""

    @property
    @abstractmethod
    def supported(self) -> bool:
        pass

    @abstractmethod
    def start(
        self,
        language: str,
        on_results: Callable[[ResultBatch], None],
        on_error: Callable[[str], None],
        on_end: Callable[[], None],
    ) -> None:
        """Begin one session. Raises CapabilityError if the platform refuses."""
        pass

    @abstractmethod
    def abort(self) -> None:
        pass


class SynthesisEngine(ABC):
    """Platform text-to-speech."""

    @property
    @abstractmethod
    def supported(self) -> bool:
        pass

    @abstractmethod
    def speak(self, utterance: SpeechUtterance) -> None:
        pass

    @abstractmethod
    def cancel(self) -> None:
        pass


def fold_results(batch: ResultBatch) -> list[SpeechResult]:
    """
    Collapse an engine batch into at most one interim and one final result.

    Interim transcripts are concatenated into SpeechResult(is_final=False),
    final transcripts into SpeechResult(is_final=True); empty parts are dropped.
    """
    interim = ""
    final = ""
    for transcript, is_final in batch:
        if is_final:
            final += transcript
        else:
            interim += transcript

    results = []
    if interim:
        results.append(SpeechResult(text=interim, is_final=False))
    if final:
        results.append(SpeechResult(text=final, is_final=True))
    return results


class SpeechRecognitionService:
    """
    Streaming speech-to-text over a RecognitionEngine.

    State: IDLE -> RECORDING (start) -> IDLE (error, end, or stop).
    Starting a new session aborts the previous one; callbacks from a
    superseded session are ignored.
    """

    def __init__(
        self,
        engine: Optional[RecognitionEngine],
        language: str = DEFAULT_RECOGNITION_LANGUAGE,
    ):
        self.engine = engine
        self.language = language
        self._state = RecognitionState.IDLE
        self._session = 0

    @property
    def state(self) -> RecognitionState:
        return self._state

    @property
    def is_recording(self) -> bool:
        return self._state == RecognitionState.RECORDING

    @property
    def supported(self) -> bool:
        return self.engine is not None and self.engine.supported

    def set_language(self, language: str) -> None:
        """Set the BCP-47 tag used by the next start_recognition()."""
        self.language = language

    def start_recognition(
        self,
        on_result: SpeechResultCallback,
        on_error: SpeechErrorCallback,
        on_end: Optional[Callable[[], None]] = None,
    ) -> None:
        if not self.supported:
            on_error(RECOGNITION_UNSUPPORTED_MESSAGE)
            return

        if self._state == RecognitionState.RECORDING:
            self.engine.abort()

        self._session += 1
        session = self._session

        def handle_results(batch: ResultBatch) -> None:
            if session != self._session:
                return
            for result in fold_results(batch):
                on_result(result)

        def handle_error(reason: str) -> None:
            if session != self._session:
                return
            self._state = RecognitionState.IDLE
            logger.warning("Speech recognition error: %s", reason)
            on_error(reason)

        def handle_end() -> None:
            if session != self._session:
                return
            self._state = RecognitionState.IDLE
            if on_end is not None:
                on_end()

        try:
            self.engine.start(self.language, handle_results, handle_error, handle_end)
        except CapabilityError as e:
            self._state = RecognitionState.IDLE
            logger.warning("Speech recognition unavailable: %s", e)
            on_error(str(e))
            return

        self._state = RecognitionState.RECORDING
        logger.debug("Speech recognition session %d started (%s)", session, self.language)

    def stop_recognition(self) -> None:
        if self._state != RecognitionState.RECORDING:
            return
        # Invalidate the session so late engine events are ignored
        self._session += 1
        self._state = RecognitionState.IDLE
        if self.engine is not None:
            self.engine.abort()


class TextToSpeechService:
    """Speaks text through a SynthesisEngine, one utterance at a time."""

    def __init__(self, engine: Optional[SynthesisEngine]):
        self.engine = engine

    @property
    def supported(self) -> bool:
        return self.engine is not None and self.engine.supported

    def speak(self, text: str, language: str) -> None:
        if not self.supported:
            logger.warning(SYNTHESIS_UNSUPPORTED_MESSAGE)
            return

        self.engine.cancel()
        self.engine.speak(SpeechUtterance(
            text=text,
            language=language,
            rate=SPEECH_RATE,
            pitch=SPEECH_PITCH,
        ))

    def stop(self) -> None:
        if self.supported:
            self.engine.cancel()
