# verbico/ui/components/text_panel.py
"""
Source and result panels of the translation card.
"""

import logging
from typing import Awaitable, Callable

from nicegui import ui

from verbico.ui.components.voice_recorder import VoiceRecorder
from verbico.ui.state import AppState

logger = logging.getLogger(__name__)

SOURCE_PLACEHOLDER = 'Enter text or use voice input...'
RESULT_PLACEHOLDER = 'Translation will appear here...'


def create_source_panel(
    state: AppState,
    recorder: VoiceRecorder,
    on_source_change: Callable[[str], None],
    on_translate: Callable[[], Awaitable[None]],
) -> ui.textarea:
    """Create the input textarea with the voice recorder and Ctrl/Cmd+Enter handler."""
    with ui.element('div').classes('text-box'):
        textarea = ui.textarea(
            placeholder=SOURCE_PLACEHOLDER,
            value=state.source_text,
            on_change=lambda e: on_source_change(e.value or ''),
        ).classes('w-full source-textarea').props(
            'outlined aria-label="Text to translate"'
        )
        if state.translating:
            textarea.disable()

        # Ctrl/Cmd+Enter translates; prevent the newline in the browser
        async def handle_keydown(e):
            if state.can_translate():
                try:
                    await on_translate()
                except Exception as ex:
                    logger.exception("Ctrl+Enter translation error: %s", ex)

        textarea.on(
            'keydown',
            handle_keydown,
            js_handler='''(e) => {
                if ((e.ctrlKey || e.metaKey) && e.key === "Enter") {
                    e.preventDefault();
                    emit(e);
                }
            }'''
        )

        with ui.element('div').classes('text-box-actions'):
            recorder.render()

    return textarea


def create_result_panel(
    state: AppState,
    on_copy: Callable[[str], None],
    on_speak: Callable[[str, str], None],
) -> None:
    """Create the output box; copy/speak appear once there is a translation."""
    with ui.element('div').classes('text-box result-box'):
        if state.translating:
            with ui.row().classes('w-full h-full items-center justify-center'):
                ui.spinner(size='lg')
            return

        if state.translated_text:
            ui.label(state.translated_text).classes('result-text')
        else:
            ui.label(RESULT_PLACEHOLDER).classes('result-placeholder')

        if state.translated_text:
            text = state.translated_text
            language = state.target_language
            with ui.element('div').classes('text-box-actions'):
                ui.button(icon='content_copy', on_click=lambda: on_copy(text)).props(
                    'flat round dense aria-label="Copy translation"'
                ).classes('icon-btn')
                ui.button(icon='volume_up', on_click=lambda: on_speak(text, language)).props(
                    'flat round dense aria-label="Speak translation"'
                ).classes('icon-btn')


def create_error_banner(message: str) -> None:
    if message:
        with ui.row().classes('error-banner w-full items-center').props('role="alert"'):
            ui.icon('error_outline')
            ui.label(message)
