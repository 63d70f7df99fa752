# tests/test_app.py
"""
Tests for VerbicoApp event handlers.
The page is never built, so widget references stay None.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from verbico.config.settings import AppSettings
from verbico.models.types import TranslationRecord
from verbico.services.exceptions import TranslationError
from verbico.services.translation_service import EMPTY_INPUT_MESSAGE
from verbico.ui.app import VerbicoApp
from verbico.ui.state import AppState


@pytest.fixture
def app(tmp_path):
    verbico_app = VerbicoApp(settings_path=tmp_path / "settings.json", settings=AppSettings())
    verbico_app.state = AppState(history_store=MagicMock())
    verbico_app.translation_service = MagicMock()
    verbico_app.translation_service.translate = AsyncMock()
    return verbico_app


class TestTranslate:

    @pytest.mark.asyncio
    async def test_success_shows_translation(self, app):
        app.state.source_text = "Hola mundo"
        app.translation_service.translate.return_value = TranslationRecord(
            "Hola mundo", "Hello world", "es", "en"
        )

        await app._translate()

        app.translation_service.translate.assert_awaited_once_with("Hola mundo", "es", "auto")
        assert app.state.translated_text == "Hello world"
        assert app.state.translating is False
        assert app.state.error_message == ""

    @pytest.mark.asyncio
    async def test_failure_sets_error(self, app):
        app.state.source_text = "Hello"
        app.state.translated_text = ""
        app.translation_service.translate.side_effect = TranslationError("Failed to translate text")

        await app._translate()

        assert app.state.error_message == "Failed to translate text"
        assert app.state.translated_text == ""
        assert app.state.translating is False

    @pytest.mark.asyncio
    async def test_stale_result_leaves_output_untouched(self, app):
        app.state.source_text = "Hello"
        app.translation_service.translate.return_value = None

        await app._translate()

        assert app.state.translated_text == ""
        assert app.state.translating is False

    @pytest.mark.asyncio
    async def test_blank_input_is_not_sent(self, app):
        app.state.source_text = "   "

        await app._translate()

        app.translation_service.translate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_input_message_from_service(self, app):
        app.state.source_text = "x"
        app.translation_service.translate.side_effect = ValueError(EMPTY_INPUT_MESSAGE)

        await app._translate()

        assert app.state.error_message == EMPTY_INPUT_MESSAGE


class TestHandlers:

    def test_language_change_is_saved(self, app, tmp_path):
        app._on_target_language_change("fr")

        assert app.state.target_language == "fr"
        saved = json.loads((tmp_path / "user_settings.json").read_text())
        assert saved["default_target_language"] == "fr"

    def test_swap_is_saved(self, app, tmp_path):
        app.state.source_language = "en"
        app.state.target_language = "es"

        app._on_swap()

        saved = json.loads((tmp_path / "user_settings.json").read_text())
        assert saved == {"default_source_language": "es", "default_target_language": "en"}

    def test_select_history_loads_record(self, app):
        record = TranslationRecord("Bonjour", "Hello", "fr", "en")
        app._on_select_history(record)
        assert app.state.source_text == "Bonjour"
        assert app.state.translated_text == "Hello"

    def test_transcript_replaces_input(self, app):
        app.state.translated_text = "old"
        app._on_transcript("spoken words")
        assert app.state.source_text == "spoken words"
        assert app.state.translated_text == ""

    def test_speak_uses_speech_locale(self, app):
        app._tts = MagicMock()
        app._speak("Hola", "es")
        app._tts.speak.assert_called_once_with("Hola", "es-ES")

    def test_each_page_gets_its_own_view(self, app):
        app._translation_client = MagicMock()

        first = app.create_page_app()
        second = app.create_page_app()

        assert first is not app and first is not second
        assert first.state is not second.state
        assert first.state.history_store is app.state.history_store
        assert second.state.history_store is app.state.history_store
        assert first.translation_service is not second.translation_service
        assert first.translation_service.client is app._translation_client

        first.state.set_source_text("only in the first tab")
        assert second.state.source_text == ""

    def test_init_state_uses_saved_pair(self, tmp_path):
        settings = AppSettings(default_source_language="de", default_target_language="ja")
        verbico_app = VerbicoApp(settings_path=tmp_path / "settings.json", settings=settings)
        verbico_app.init_state()
        assert verbico_app.state.source_language == "de"
        assert verbico_app.state.target_language == "ja"
