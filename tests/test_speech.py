# tests/test_speech.py
"""Tests for verbico.services.speech with in-memory engines"""

from unittest.mock import MagicMock

import pytest

from verbico.models.types import SpeechResult, SpeechUtterance
from verbico.services.exceptions import CapabilityError
from verbico.services.speech import (
    RECOGNITION_UNSUPPORTED_MESSAGE,
    RecognitionEngine,
    RecognitionState,
    SpeechRecognitionService,
    SynthesisEngine,
    TextToSpeechService,
    fold_results,
)


class FakeRecognitionEngine(RecognitionEngine):
    """Records sessions; tests fire engine events through the stored callbacks."""

    def __init__(self, supported=True, refuse=False):
        self._supported = supported
        self.refuse = refuse
        self.sessions = []
        self.abort_count = 0

    @property
    def supported(self):
        return self._supported

    def start(self, language, on_results, on_error, on_end):
        if self.refuse:
            raise CapabilityError("microphone blocked")
        self.sessions.append({
            "language": language,
            "results": on_results,
            "error": on_error,
            "end": on_end,
        })

    def abort(self):
        self.abort_count += 1

    @property
    def current(self):
        return self.sessions[-1]


class FakeSynthesisEngine(SynthesisEngine):

    def __init__(self, supported=True):
        self._supported = supported
        self.calls = []

    @property
    def supported(self):
        return self._supported

    def speak(self, utterance):
        self.calls.append(("speak", utterance))

    def cancel(self):
        self.calls.append(("cancel", None))


@pytest.fixture
def engine():
    return FakeRecognitionEngine()


@pytest.fixture
def service(engine):
    return SpeechRecognitionService(engine)


class TestFoldResults:

    def test_interim_and_final_are_concatenated(self):
        results = fold_results([("hel", False), ("lo ", True), ("wor", False), ("ld", True)])
        assert results == [
            SpeechResult(text="helwor", is_final=False),
            SpeechResult(text="lo ld", is_final=True),
        ]

    def test_empty_parts_are_dropped(self):
        assert fold_results([]) == []
        assert fold_results([("hi", False)]) == [SpeechResult("hi", False)]
        assert fold_results([("hi", True)]) == [SpeechResult("hi", True)]


class TestSpeechRecognitionService:

    def test_unsupported_reports_error_without_starting(self):
        service = SpeechRecognitionService(FakeRecognitionEngine(supported=False))
        on_result, on_error = MagicMock(), MagicMock()

        service.start_recognition(on_result, on_error)

        on_error.assert_called_once_with(RECOGNITION_UNSUPPORTED_MESSAGE)
        assert service.state == RecognitionState.IDLE

    def test_missing_engine_is_unsupported(self):
        service = SpeechRecognitionService(None)
        on_error = MagicMock()
        service.start_recognition(MagicMock(), on_error)
        on_error.assert_called_once_with(RECOGNITION_UNSUPPORTED_MESSAGE)

    def test_engine_refusal_reports_error(self):
        service = SpeechRecognitionService(FakeRecognitionEngine(refuse=True))
        on_error = MagicMock()

        service.start_recognition(MagicMock(), on_error)

        on_error.assert_called_once_with("microphone blocked")
        assert service.state == RecognitionState.IDLE

    def test_start_uses_configured_language(self, engine, service):
        service.set_language("fr-FR")
        service.start_recognition(MagicMock(), MagicMock())

        assert engine.current["language"] == "fr-FR"
        assert service.state == RecognitionState.RECORDING

    def test_partial_results_then_final(self, engine, service):
        received = []
        service.start_recognition(received.append, MagicMock())

        engine.current["results"]([("hel", False)])
        engine.current["results"]([("hello", False)])
        engine.current["results"]([("hello world", True)])

        assert received == [
            SpeechResult("hel", False),
            SpeechResult("hello", False),
            SpeechResult("hello world", True),
        ]
        finals = [r for r in received if r.is_final]
        assert len(finals) == 1

    def test_engine_error_returns_to_idle(self, engine, service):
        on_error = MagicMock()
        service.start_recognition(MagicMock(), on_error)

        engine.current["error"]("no-speech")

        on_error.assert_called_once_with("no-speech")
        assert service.state == RecognitionState.IDLE

    def test_engine_end_returns_to_idle(self, engine, service):
        service.start_recognition(MagicMock(), MagicMock())
        engine.current["end"]()
        assert service.state == RecognitionState.IDLE

    def test_engine_end_notifies_caller(self, engine, service):
        on_end = MagicMock()
        service.start_recognition(MagicMock(), MagicMock(), on_end)
        first_session = engine.current
        service.start_recognition(MagicMock(), MagicMock(), on_end)

        first_session["end"]()
        on_end.assert_not_called()

        engine.current["end"]()
        on_end.assert_called_once_with()

    def test_stop_aborts_and_ignores_late_events(self, engine, service):
        on_result = MagicMock()
        service.start_recognition(on_result, MagicMock())
        session = engine.current

        service.stop_recognition()
        session["results"]([("late", True)])

        assert engine.abort_count == 1
        assert service.state == RecognitionState.IDLE
        on_result.assert_not_called()

    def test_stop_when_idle_is_noop(self, engine, service):
        service.stop_recognition()
        assert engine.abort_count == 0

    def test_restart_cancels_previous_session(self, engine, service):
        first_results = MagicMock()
        second_results = MagicMock()
        service.start_recognition(first_results, MagicMock())
        first_session = engine.current
        service.start_recognition(second_results, MagicMock())

        assert engine.abort_count == 1
        first_session["results"]([("old", True)])
        first_session["end"]()
        first_results.assert_not_called()
        assert service.state == RecognitionState.RECORDING

        engine.current["results"]([("new", True)])
        second_results.assert_called_once_with(SpeechResult("new", True))

    def test_set_language_applies_to_next_start_only(self, engine, service):
        service.start_recognition(MagicMock(), MagicMock())
        service.set_language("de-DE")
        assert engine.current["language"] == "en-US"

        service.start_recognition(MagicMock(), MagicMock())
        assert engine.current["language"] == "de-DE"


class TestTextToSpeechService:

    def test_speak_cancels_then_speaks_with_fixed_rate_and_pitch(self):
        engine = FakeSynthesisEngine()
        tts = TextToSpeechService(engine)

        tts.speak("Hola", "es-ES")

        assert engine.calls == [
            ("cancel", None),
            ("speak", SpeechUtterance(text="Hola", language="es-ES", rate=0.8, pitch=1.0)),
        ]

    def test_speaking_twice_cancels_first(self):
        engine = FakeSynthesisEngine()
        tts = TextToSpeechService(engine)

        tts.speak("one", "en-US")
        tts.speak("two", "en-US")

        assert [name for name, _ in engine.calls] == ["cancel", "speak", "cancel", "speak"]
        assert engine.calls[-1][1].text == "two"

    def test_unsupported_is_noop(self, caplog):
        engine = FakeSynthesisEngine(supported=False)
        tts = TextToSpeechService(engine)

        with caplog.at_level("WARNING"):
            tts.speak("Hola", "es-ES")
            tts.stop()

        assert engine.calls == []
        assert "Text-to-speech is not supported" in caplog.text

    def test_stop_cancels(self):
        engine = FakeSynthesisEngine()
        TextToSpeechService(engine).stop()
        assert engine.calls == [("cancel", None)]
