# verbico/ui/app.py
"""
Verbico AI - NiceGUI application.

One process serves both the page and the internal JSON API. The page talks to
the API over HTTP (TranslationClient) so browser and server share one path.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from nicegui import Client as nicegui_Client
from nicegui import app as nicegui_app
from nicegui import ui

from verbico import __app_name__
from verbico.config.settings import (
    AppSettings,
    get_default_prompts_dir,
    get_default_settings_path,
)
from verbico.services.exceptions import TranslationError
from verbico.services.languages import to_speech_locale
from verbico.services.speech import SpeechRecognitionService, TextToSpeechService
from verbico.ui.state import AppState

logger = logging.getLogger(__name__)

SUBTITLE = "Translate text and speech between multiple languages in real-time"
CLIENT_CONNECT_TIMEOUT = 30.0  # seconds


class VerbicoApp:
    """Main application - wires settings, services and the page together."""

    def __init__(
        self,
        settings_path: Optional[Path] = None,
        settings: Optional[AppSettings] = None,
    ):
        self._settings_path = settings_path or get_default_settings_path()
        self._settings = settings
        self.state = AppState()

        # Services (created in create_services)
        self._gemini_client = None
        self._translation_client = None
        self.translation_service = None
        self.router = None

        # Per-page speech services
        self._recognition: Optional[SpeechRecognitionService] = None
        self._tts: Optional[TextToSpeechService] = None

        # UI references
        self._source_select = None
        self._target_select = None
        self._source_textarea = None
        self._translate_button = None
        self._recorder = None
        self._result_section = None
        self._error_section = None
        self._history_section = None

    @property
    def settings(self) -> AppSettings:
        """Lazy-load settings on first access."""
        if self._settings is None:
            self._settings = AppSettings.load(self._settings_path)
            logger.info(
                "Settings loaded (model=%s, api_key=%s)",
                self._settings.translation_model,
                "set" if self._settings.has_api_key else "missing",
            )
        return self._settings

    def init_state(self) -> None:
        """Copy persisted defaults into the UI state."""
        settings = self.settings
        self.state.source_language = settings.default_source_language
        self.state.target_language = settings.default_target_language
        self.state.max_history_entries = settings.max_history_entries

    def create_services(self) -> None:
        """Create the upstream client, both bridges, the API router and the
        client-side translation service."""
        from verbico.api.routes import create_api_router
        from verbico.services.detection_bridge import DetectionBridge
        from verbico.services.gemini_client import GeminiClient
        from verbico.services.prompt_builder import PromptBuilder
        from verbico.services.translation_bridge import TranslationBridge
        from verbico.services.translation_client import TranslationClient
        from verbico.services.translation_service import TranslationService

        settings = self.settings
        if not settings.has_api_key:
            logger.warning(
                "No Gemini API key found in the environment; "
                "translation will fail and detection uses the local heuristic"
            )

        prompt_builder = PromptBuilder(get_default_prompts_dir())
        self._gemini_client = GeminiClient(settings)
        self.router = create_api_router(
            TranslationBridge(self._gemini_client, settings, prompt_builder),
            DetectionBridge.create(self._gemini_client, settings, prompt_builder),
        )

        self._translation_client = TranslationClient(
            settings.internal_api_url,
            timeout=settings.request_timeout,
        )
        # Accessing state.history loads the persisted list
        self.state.history
        self.translation_service = TranslationService(
            self._translation_client,
            self.state.history_store,
        )

    def create_page_app(self) -> "VerbicoApp":
        """Per-connection view: own state, widgets and speech services.

        HTTP clients and the history store are shared with this instance,
        which stays the owner closed by shutdown().
        """
        from verbico.services.translation_service import TranslationService

        # Accessing state.history loads the shared store on first use
        self.state.history
        history_store = self.state.history_store

        page = VerbicoApp(self._settings_path, self.settings)
        page.state = AppState(history_store=history_store, _history_initialized=True)
        page.init_state()
        page.router = self.router
        if self._translation_client is not None:
            page.translation_service = TranslationService(self._translation_client, history_store)
        return page

    async def shutdown(self) -> None:
        """Close HTTP clients and the history database."""
        if self._translation_client is not None:
            await self._translation_client.aclose()
        if self._gemini_client is not None:
            await self._gemini_client.aclose()
        self.state.close()
        logger.info("Verbico shut down")

    # =========================================================================
    # Event handlers
    # =========================================================================

    def _save_language_pair(self) -> None:
        settings = self.settings
        settings.default_source_language = self.state.source_language
        settings.default_target_language = self.state.target_language
        try:
            settings.save(self._settings_path)
        except OSError as e:
            logger.warning("Failed to save language selection: %s", e)

    def _on_source_text_change(self, text: str) -> None:
        had_result = bool(self.state.translated_text or self.state.error_message)
        self.state.set_source_text(text)
        if had_result and not (self.state.translated_text or self.state.error_message):
            self._refresh_result()
        self._update_controls()

    def _on_source_language_change(self, code: str) -> None:
        if code == self.state.source_language:
            return
        self.state.set_source_language(code)
        self._save_language_pair()
        self._refresh_result()

    def _on_target_language_change(self, code: str) -> None:
        if code == self.state.target_language:
            return
        self.state.set_target_language(code)
        self._save_language_pair()
        self._refresh_result()

    def _on_swap(self) -> None:
        self.state.swap_languages()
        self._save_language_pair()
        self._sync_inputs()
        self._refresh_result()

    def _on_transcript(self, text: str) -> None:
        self.state.set_source_text(text)
        self._sync_inputs()
        self._refresh_result()

    def _on_speech_error(self, reason: str) -> None:
        ui.notify(reason, type='warning')

    def _on_select_history(self, record) -> None:
        self.state.load_record(record)
        self._sync_inputs()
        self._refresh_result()

    def _on_clear_history(self) -> None:
        self.state.clear_history()
        self._refresh_history()

    def _copy_text(self, text: str) -> None:
        """Copy specified text to clipboard"""
        if text:
            ui.clipboard.write(text)
            ui.notify('Copied to clipboard', type='positive')

    def _speak(self, text: str, language: str) -> None:
        if self._tts is not None and text:
            self._tts.speak(text, to_speech_locale(language))

    async def _translate(self) -> None:
        """Run one translation from the current input."""
        state = self.state
        if not state.can_translate() or self.translation_service is None:
            return

        state.translating = True
        state.error_message = ""
        self._update_controls()
        self._refresh_result()

        try:
            record = await self.translation_service.translate(
                state.source_text,
                state.target_language,
                state.source_language,
            )
        except (ValueError, TranslationError) as e:
            state.error_message = str(e)
        else:
            if record is not None:
                state.translated_text = record.translated_text
                self._refresh_history()
        finally:
            state.translating = False
            self._update_controls()
            self._refresh_result()

    # =========================================================================
    # UI
    # =========================================================================

    def _sync_inputs(self) -> None:
        """Push state values into widgets (their change handlers see no change)."""
        if self._source_select is not None:
            self._source_select.value = self.state.source_language
        if self._target_select is not None:
            self._target_select.value = self.state.target_language
        if self._source_textarea is not None:
            self._source_textarea.value = self.state.source_text
        self._update_controls()

    def _update_controls(self) -> None:
        translating = self.state.translating
        if self._translate_button is not None:
            self._translate_button.set_enabled(self.state.can_translate())
            if translating:
                self._translate_button.props(add='loading')
            else:
                self._translate_button.props(remove='loading')
        if self._source_textarea is not None:
            self._source_textarea.set_enabled(not translating)
        if self._recorder is not None:
            self._recorder.set_enabled(not translating)

    def _refresh_result(self) -> None:
        if self._result_section is not None:
            self._result_section.refresh()
        if self._error_section is not None:
            self._error_section.refresh()

    def _refresh_history(self) -> None:
        if self._history_section is not None:
            self._history_section.refresh()

    def _create_speech_services(self, client: nicegui_Client):
        from verbico.ui.browser_speech import BrowserRecognitionEngine, BrowserSynthesisEngine

        recognition_engine = BrowserRecognitionEngine(client)
        synthesis_engine = BrowserSynthesisEngine(client)
        self._recognition = SpeechRecognitionService(recognition_engine)
        self._tts = TextToSpeechService(synthesis_engine)
        return recognition_engine, synthesis_engine

    def create_ui(self) -> None:
        """Build the page (called inside the page context)."""
        from verbico.ui.browser_speech import add_speech_script
        from verbico.ui.components.history_panel import create_history_panel
        from verbico.ui.components.language_selector import (
            create_language_selector,
            create_swap_button,
        )
        from verbico.ui.components.text_panel import (
            create_error_banner,
            create_result_panel,
            create_source_panel,
        )
        from verbico.ui.components.voice_recorder import VoiceRecorder
        from verbico.ui.styles import COMPLETE_CSS

        state = self.state

        ui.add_head_html('<meta name="viewport" content="width=device-width, initial-scale=1.0">')
        ui.add_head_html(f'<style>{COMPLETE_CSS}</style>')
        add_speech_script()

        self._recorder = VoiceRecorder(
            state,
            self._recognition,
            on_transcript=self._on_transcript,
            on_error=self._on_speech_error,
        )

        with ui.column().classes('page-header w-full items-center'):
            ui.label(__app_name__).classes('page-title')
            ui.label(SUBTITLE).classes('page-subtitle')

        with ui.column().classes('translation-card gap-4'):
            with ui.row().classes('w-full no-wrap gap-6'):
                # Source column
                with ui.column().classes('flex-1 gap-3'):
                    with ui.row().classes('w-full no-wrap items-center'):
                        self._source_select = create_language_selector(
                            'From', state.source_language, self._on_source_language_change,
                            include_auto=True,
                        )
                        create_swap_button(self._on_swap)
                    self._source_textarea = create_source_panel(
                        state, self._recorder, self._on_source_text_change, self._translate,
                    )

                # Target column
                with ui.column().classes('flex-1 gap-3'):
                    self._target_select = create_language_selector(
                        'To', state.target_language, self._on_target_language_change,
                    )

                    @ui.refreshable
                    def result_section():
                        create_result_panel(state, self._copy_text, self._speak)

                    self._result_section = result_section
                    result_section()

            @ui.refreshable
            def error_section():
                create_error_banner(state.error_message)

            self._error_section = error_section
            error_section()

            with ui.row().classes('w-full justify-center'):
                self._translate_button = ui.button(
                    'Translate', icon='translate', on_click=self._translate,
                ).props('unelevated no-caps').classes('translate-btn')

        @ui.refreshable
        def history_section():
            create_history_panel(
                state.history,
                on_select=self._on_select_history,
                on_copy=self._copy_text,
                on_speak=self._speak,
                on_clear=self._on_clear_history,
            )

        self._history_section = history_section
        history_section()

        self._update_controls()


def create_app(settings_path: Optional[Path] = None) -> VerbicoApp:
    """Create the application and its services."""
    verbico_app = VerbicoApp(settings_path)
    verbico_app.init_state()
    verbico_app.create_services()
    return verbico_app


def run_app(settings_path: Optional[Path] = None, show: bool = True) -> None:
    """Register routes and the page, then start NiceGUI (blocks)."""
    verbico_app = create_app(settings_path)
    settings = verbico_app.settings

    nicegui_app.include_router(verbico_app.router)
    nicegui_app.on_shutdown(verbico_app.shutdown)

    @ui.page('/')
    async def main_page(client: nicegui_Client):
        page_app = verbico_app.create_page_app()
        recognition_engine, synthesis_engine = page_app._create_speech_services(client)
        page_app.create_ui()

        try:
            await client.connected(timeout=CLIENT_CONNECT_TIMEOUT)
        except TimeoutError:
            logger.warning("Client did not connect; speech features stay disabled")
            return
        await recognition_engine.probe()
        await synthesis_engine.probe()

    logger.info("Starting %s on %s:%d", __app_name__, settings.host, settings.port)
    ui.run(
        host=settings.host,
        port=settings.port,
        title=__app_name__,
        favicon='🌐',
        dark=False,
        reload=False,
        show=show,
        reconnect_timeout=30.0,
        uvicorn_logging_level='warning',
    )
