# verbico/ui/components/history_panel.py
"""
"Recent Translations" list.
"""

from datetime import datetime
from typing import Callable

from nicegui import ui

from verbico.models.types import TranslationRecord
from verbico.services.languages import get_language_name


def format_record_meta(record: TranslationRecord) -> str:
    """e.g. "English → Spanish • 14:05:09" (local time)."""
    time_text = datetime.fromtimestamp(record.timestamp / 1000).strftime('%H:%M:%S')
    return (
        f"{get_language_name(record.source_language)} → "
        f"{get_language_name(record.target_language)} • {time_text}"
    )


def create_history_item(
    record: TranslationRecord,
    on_select: Callable[[TranslationRecord], None],
    on_copy: Callable[[str], None],
    on_speak: Callable[[str, str], None],
) -> None:
    """Create one clickable history card with copy/speak buttons."""
    with ui.element('div').classes('history-item') as item:
        item.on('click', lambda: on_select(record))

        with ui.row().classes('w-full no-wrap items-start'):
            with ui.column().classes('flex-1 gap-1'):
                ui.label(record.source_text).classes('history-source')
                ui.label(record.translated_text).classes('history-translation')

            # @click.stop keeps the card click from firing
            ui.button(
                icon='content_copy',
                on_click=lambda: on_copy(record.translated_text),
            ).props('flat round dense size=sm @click.stop aria-label="Copy translation"')
            ui.button(
                icon='volume_up',
                on_click=lambda: on_speak(record.translated_text, record.target_language),
            ).props('flat round dense size=sm @click.stop aria-label="Speak translation"')

        ui.label(format_record_meta(record)).classes('history-meta')


def create_history_panel(
    records: list[TranslationRecord],
    on_select: Callable[[TranslationRecord], None],
    on_copy: Callable[[str], None],
    on_speak: Callable[[str, str], None],
    on_clear: Callable[[], None],
) -> None:
    """Create the history section; nothing is shown when there is no history."""
    if not records:
        return

    with ui.column().classes('history-section w-full'):
        with ui.row().classes('w-full items-center justify-between'):
            ui.label('Recent Translations').classes('history-heading')
            ui.button('Clear History', on_click=on_clear).props('flat no-caps dense').classes(
                'clear-history-btn'
            )
        for record in records:
            create_history_item(record, on_select, on_copy, on_speak)
