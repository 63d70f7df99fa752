# verbico/ui/components/language_selector.py
"""
Language dropdowns and the swap button.
"""

from typing import Callable

from nicegui import ui

from verbico.services.languages import language_options


def create_language_selector(
    label: str,
    value: str,
    on_change: Callable[[str], None],
    include_auto: bool = False,
    disabled: bool = False,
) -> ui.select:
    """Create a labelled language dropdown ("Name (Native)" entries)."""
    select = ui.select(
        options=language_options(include_auto=include_auto),
        value=value,
        label=label,
        on_change=lambda e: on_change(e.value),
    ).classes('language-select').props(f'outlined dense aria-label="{label} language"')
    if disabled:
        select.disable()
    return select


def create_swap_button(on_swap: Callable[[], None], disabled: bool = False) -> ui.button:
    btn = ui.button(icon='swap_horiz', on_click=on_swap).props(
        'flat round aria-label="Swap languages"'
    ).classes('swap-btn')
    btn.tooltip('Swap languages')
    if disabled:
        btn.disable()
    return btn
