# tests/test_browser_speech.py
"""
Tests for the Web Speech engines in verbico.ui.browser_speech.
The client is mocked; browser events are fed straight into the handlers.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from verbico.models.types import SpeechUtterance
from verbico.services.exceptions import CapabilityError
from verbico.ui.browser_speech import (
    END_EVENT,
    ERROR_EVENT,
    RESULT_EVENT,
    BrowserRecognitionEngine,
    BrowserSynthesisEngine,
)


def _event(**args):
    return SimpleNamespace(args=args)


@pytest.fixture
def registered_handlers():
    handlers = {}
    with patch('verbico.ui.browser_speech.ui.on', side_effect=lambda name, fn: handlers.__setitem__(name, fn)):
        yield handlers


@pytest.fixture
def client():
    mock = MagicMock()
    mock.run_javascript = MagicMock()
    return mock


async def _supported_engine(client):
    """Recognition engine that has passed its capability check."""
    engine = BrowserRecognitionEngine(client)
    client.run_javascript = AsyncMock(return_value=True)
    assert await engine.probe() is True
    client.run_javascript = MagicMock()
    return engine


class TestBrowserRecognitionEngine:

    def test_registers_browser_events(self, registered_handlers, client):
        BrowserRecognitionEngine(client)
        assert set(registered_handlers) == {RESULT_EVENT, ERROR_EVENT, END_EVENT}

    def test_start_before_capability_check_is_refused(self, registered_handlers, client):
        engine = BrowserRecognitionEngine(client)
        assert engine.supported is False
        with pytest.raises(CapabilityError):
            engine.start("en-US", MagicMock(), MagicMock(), MagicMock())
        client.run_javascript.assert_not_called()

    @pytest.mark.asyncio
    async def test_capability_check_timeout_means_unsupported(self, registered_handlers, client):
        engine = BrowserRecognitionEngine(client)
        client.run_javascript = AsyncMock(side_effect=TimeoutError)

        assert await engine.probe() is False
        assert engine.supported is False

    @pytest.mark.asyncio
    async def test_start_sends_language_and_session(self, registered_handlers, client):
        engine = await _supported_engine(client)

        engine.start("fr-FR", MagicMock(), MagicMock(), MagicMock())

        client.run_javascript.assert_called_once_with('window.verbicoSpeech.start("fr-FR", 1)')

    @pytest.mark.asyncio
    async def test_malformed_result_items_are_skipped(self, registered_handlers, client):
        engine = await _supported_engine(client)
        on_results = MagicMock()
        engine.start("en-US", on_results, MagicMock(), MagicMock())

        registered_handlers[RESULT_EVENT](_event(session=1, results=[['hi', True], 'bad', ['x']]))

        on_results.assert_called_once_with([('hi', True)])

    @pytest.mark.asyncio
    async def test_events_from_old_session_are_dropped(self, registered_handlers, client):
        engine = await _supported_engine(client)
        first_results = MagicMock()
        engine.start("en-US", first_results, MagicMock(), MagicMock())
        second_results = MagicMock()
        second_end = MagicMock()
        engine.start("en-US", second_results, MagicMock(), second_end)

        registered_handlers[RESULT_EVENT](_event(session=1, results=[['old', True]]))
        registered_handlers[END_EVENT](_event(session=1))
        first_results.assert_not_called()
        second_results.assert_not_called()
        second_end.assert_not_called()

        registered_handlers[RESULT_EVENT](_event(session=2, results=[['new', True]]))
        second_results.assert_called_once_with([('new', True)])

    @pytest.mark.asyncio
    async def test_abort_detaches_callbacks(self, registered_handlers, client):
        engine = await _supported_engine(client)
        on_error = MagicMock()
        engine.start("en-US", MagicMock(), on_error, MagicMock())

        engine.abort()
        registered_handlers[ERROR_EVENT](_event(session=1, error='network'))

        on_error.assert_not_called()
        client.run_javascript.assert_called_with('window.verbicoSpeech && window.verbicoSpeech.abort()')

    @pytest.mark.asyncio
    async def test_error_reason_is_forwarded(self, registered_handlers, client):
        engine = await _supported_engine(client)
        on_error = MagicMock()
        engine.start("en-US", MagicMock(), on_error, MagicMock())

        registered_handlers[ERROR_EVENT](_event(session=1, error='not-allowed'))
        registered_handlers[ERROR_EVENT](_event(session=1))

        assert [c.args[0] for c in on_error.call_args_list] == ['not-allowed', 'unknown']

    @pytest.mark.asyncio
    async def test_non_dict_event_args_are_ignored(self, registered_handlers, client):
        engine = await _supported_engine(client)
        on_end = MagicMock()
        engine.start("en-US", MagicMock(), MagicMock(), on_end)

        registered_handlers[END_EVENT](SimpleNamespace(args=['unexpected']))

        on_end.assert_not_called()


class TestBrowserSynthesisEngine:

    @pytest.mark.asyncio
    async def test_capability_check_reads_browser_answer(self, client):
        engine = BrowserSynthesisEngine(client)
        client.run_javascript = AsyncMock(return_value=False)

        assert await engine.probe() is False
        assert engine.supported is False

    def test_speak_sends_text_locale_rate_and_pitch(self, client):
        engine = BrowserSynthesisEngine(client)

        engine.speak(SpeechUtterance('Hola "amigo"', 'es-ES'))

        client.run_javascript.assert_called_once_with(
            'window.verbicoSpeech.speak("Hola \\"amigo\\"", "es-ES", 0.8, 1.0)'
        )

    def test_cancel(self, client):
        BrowserSynthesisEngine(client).cancel()
        client.run_javascript.assert_called_once_with(
            'window.verbicoSpeech && window.verbicoSpeech.cancel()'
        )
