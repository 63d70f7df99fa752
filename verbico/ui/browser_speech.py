# verbico/ui/browser_speech.py
"""
Speech engines backed by the browser's Web Speech API.

Python drives window.verbicoSpeech (speech.js) through run_javascript();
recognition events come back as NiceGUI global events.
"""

import json
import logging
from pathlib import Path
from typing import Callable, Optional

from nicegui import Client, ui
from nicegui.events import GenericEventArguments

from verbico.models.types import SpeechUtterance
from verbico.services.exceptions import CapabilityError
from verbico.services.speech import (
    RECOGNITION_UNSUPPORTED_MESSAGE,
    RecognitionEngine,
    ResultBatch,
    SynthesisEngine,
)

logger = logging.getLogger(__name__)

RESULT_EVENT = 'verbico_speech_result'
ERROR_EVENT = 'verbico_speech_error'
END_EVENT = 'verbico_speech_end'

PROBE_TIMEOUT = 5.0  # seconds

_JS_FILE = Path(__file__).parent / "speech.js"


def _load_js() -> str:
    if _JS_FILE.exists():
        return _JS_FILE.read_text(encoding="utf-8")
    logger.warning("speech.js not found; browser speech disabled")
    return ""


SPEECH_JS = _load_js()


def add_speech_script() -> None:
    """Inject the Web Speech shim into the current page."""
    if SPEECH_JS:
        ui.add_head_html(f'<script>{SPEECH_JS}</script>')


async def _probe(client: Client, expression: str) -> bool:
    try:
        result = await client.run_javascript(
            f'Boolean(window.verbicoSpeech && window.verbicoSpeech.{expression}())',
            timeout=PROBE_TIMEOUT,
        )
    except TimeoutError:
        logger.warning("Browser did not answer speech capability probe (%s)", expression)
        return False
    return bool(result)


class BrowserRecognitionEngine(RecognitionEngine):
    """
    RecognitionEngine over window.SpeechRecognition.

    Must be created inside a page context (registers ui.on handlers on the
    current client). Support is unknown (False) until probe() has run.
    """

    def __init__(self, client: Client):
        self.client = client
        self._supported = False
        self._session = 0
        self._on_results: Optional[Callable[[ResultBatch], None]] = None
        self._on_error: Optional[Callable[[str], None]] = None
        self._on_end: Optional[Callable[[], None]] = None

        ui.on(RESULT_EVENT, self._handle_result)
        ui.on(ERROR_EVENT, self._handle_error)
        ui.on(END_EVENT, self._handle_end)

    @property
    def supported(self) -> bool:
        return self._supported

    async def probe(self) -> bool:
        self._supported = await _probe(self.client, 'recognitionSupported')
        logger.debug("Browser speech recognition supported: %s", self._supported)
        return self._supported

    def start(self, language, on_results, on_error, on_end) -> None:
        if not self._supported:
            raise CapabilityError(RECOGNITION_UNSUPPORTED_MESSAGE)
        self._session += 1
        self._on_results = on_results
        self._on_error = on_error
        self._on_end = on_end
        self.client.run_javascript(
            f'window.verbicoSpeech.start({json.dumps(language)}, {self._session})'
        )

    def abort(self) -> None:
        self._session += 1
        self._on_results = self._on_error = self._on_end = None
        self.client.run_javascript('window.verbicoSpeech && window.verbicoSpeech.abort()')

    def _current(self, e: GenericEventArguments) -> bool:
        args = e.args if isinstance(e.args, dict) else {}
        return args.get('session') == self._session

    def _handle_result(self, e: GenericEventArguments) -> None:
        if not self._current(e) or self._on_results is None:
            return
        batch = [
            (str(item[0]), bool(item[1]))
            for item in e.args.get('results') or []
            if isinstance(item, (list, tuple)) and len(item) == 2
        ]
        self._on_results(batch)

    def _handle_error(self, e: GenericEventArguments) -> None:
        if not self._current(e) or self._on_error is None:
            return
        self._on_error(str(e.args.get('error') or 'unknown'))

    def _handle_end(self, e: GenericEventArguments) -> None:
        if not self._current(e) or self._on_end is None:
            return
        self._on_end()


class BrowserSynthesisEngine(SynthesisEngine):
    """SynthesisEngine over window.speechSynthesis."""

    def __init__(self, client: Client):
        self.client = client
        self._supported = False

    @property
    def supported(self) -> bool:
        return self._supported

    async def probe(self) -> bool:
        self._supported = await _probe(self.client, 'synthesisSupported')
        logger.debug("Browser speech synthesis supported: %s", self._supported)
        return self._supported

    def speak(self, utterance: SpeechUtterance) -> None:
        self.client.run_javascript(
            'window.verbicoSpeech.speak('
            f'{json.dumps(utterance.text)}, {json.dumps(utterance.language)}, '
            f'{utterance.rate}, {utterance.pitch})'
        )

    def cancel(self) -> None:
        self.client.run_javascript('window.verbicoSpeech && window.verbicoSpeech.cancel()')
