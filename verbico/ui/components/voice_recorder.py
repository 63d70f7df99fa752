# verbico/ui/components/voice_recorder.py
"""
Microphone button that fills the source textarea from speech.
Only final recognition results are delivered; interim results are ignored.
"""

import logging
from typing import Callable, Optional

from nicegui import ui

from verbico.models.types import SpeechResult
from verbico.services.languages import to_speech_locale
from verbico.services.speech import SpeechRecognitionService
from verbico.ui.state import AppState

logger = logging.getLogger(__name__)


class VoiceRecorder:
    """
    Toggle button around a SpeechRecognitionService.

    The recognition locale follows the source language ("en-US" for auto).
    """

    def __init__(
        self,
        state: AppState,
        service: SpeechRecognitionService,
        on_transcript: Callable[[str], None],
        on_error: Optional[Callable[[str], None]] = None,
    ):
        self.state = state
        self.service = service
        self.on_transcript = on_transcript
        self.on_error = on_error
        self._button: Optional[ui.button] = None

    def toggle(self) -> None:
        if self.state.recording:
            self.stop()
        else:
            self.start()

    def start(self) -> None:
        self.service.set_language(to_speech_locale(self.state.source_language))
        self.service.start_recognition(self._handle_result, self._handle_error, self._handle_end)
        # Unsupported engines report through _handle_error without starting
        self.state.recording = self.service.is_recording
        self._update_button()

    def stop(self) -> None:
        self.service.stop_recognition()
        self.state.recording = False
        self._update_button()

    def _handle_result(self, result: SpeechResult) -> None:
        if not result.is_final:
            return
        self.state.recording = False
        self._update_button()
        self.on_transcript(result.text)

    def _handle_end(self) -> None:
        # Session closed without a final transcript (silence, interim only)
        if self.state.recording:
            self.state.recording = False
            self._update_button()

    def _handle_error(self, reason: str) -> None:
        logger.error("Speech recognition error: %s", reason)
        self.state.recording = False
        self._update_button()
        if self.on_error is not None:
            self.on_error(reason)

    def _update_button(self) -> None:
        if self._button is None:
            return
        recording = self.state.recording
        label = 'Stop recording' if recording else 'Start recording'
        self._button.props(f'icon={"stop" if recording else "mic"} aria-label="{label}"')
        if recording:
            self._button.classes(add='recording')
        else:
            self._button.classes(remove='recording')

    def set_enabled(self, enabled: bool) -> None:
        if self._button is not None:
            self._button.set_enabled(enabled)

    def render(self) -> ui.button:
        self._button = ui.button(icon='mic', on_click=self.toggle).props(
            'round unelevated aria-label="Start recording"'
        ).classes('voice-btn')
        self._update_button()
        return self._button
