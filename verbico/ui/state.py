# verbico/ui/state.py
"""
Application state management for Verbico.
"""

import logging
import sqlite3
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from verbico.models.types import TranslationRecord
from verbico.services.languages import AUTO_DETECT, DEFAULT_LANGUAGE

# Deferred imports for faster startup
if TYPE_CHECKING:
    from verbico.storage.session_history import SessionHistory

# Module logger
logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """
    Application state.
    Single source of truth for the translation page.
    History is persisted to the local SQLite database.
    """
    # Translation panel
    source_text: str = ""
    translated_text: str = ""
    source_language: str = AUTO_DETECT
    target_language: str = "es"
    translating: bool = False
    error_message: str = ""

    # Voice input
    recording: bool = False

    max_history_entries: int = 10

    # History store (lazy initialized on first access for faster startup)
    history_store: Optional["SessionHistory"] = field(default=None, repr=False)
    _history_initialized: bool = field(default=False, repr=False)

    def _ensure_history(self) -> None:
        """Lazy initialize the history store on first access"""
        if self._history_initialized:
            return

        self._history_initialized = True
        try:
            if self.history_store is None:
                from verbico.storage.history_db import HistoryDB, get_default_db_path
                from verbico.storage.session_history import SessionHistory
                self.history_store = SessionHistory(
                    HistoryDB(get_default_db_path()),
                    max_entries=self.max_history_entries,
                )
            self.history_store.load()
        except (OSError, sqlite3.Error) as e:
            logger.warning("Failed to initialize history database: %s", e)
            self.history_store = None

    @property
    def history(self) -> list[TranslationRecord]:
        """Recent translations, newest first."""
        self._ensure_history()
        if self.history_store is None:
            return []
        return self.history_store.entries

    def can_translate(self) -> bool:
        return bool(self.source_text.strip()) and not self.translating

    def reset_result(self) -> None:
        """Clear the shown translation and error"""
        self.translated_text = ""
        self.error_message = ""

    def set_source_text(self, text: str) -> None:
        if text != self.source_text:
            self.source_text = text
            self.reset_result()

    def set_source_language(self, code: str) -> None:
        if code != self.source_language:
            self.source_language = code
            self.reset_result()

    def set_target_language(self, code: str) -> None:
        if code != self.target_language:
            self.target_language = code
            self.reset_result()

    def swap_languages(self) -> None:
        """
        Exchange the language pair and the two texts.

        An auto-detect source stays auto-detect, and the target becomes
        English since there is no concrete source language to move over.
        """
        old_source = self.source_language
        if old_source != AUTO_DETECT:
            self.source_language = self.target_language
        self.target_language = DEFAULT_LANGUAGE if old_source == AUTO_DETECT else old_source
        self.source_text, self.translated_text = self.translated_text, self.source_text
        self.error_message = ""

    def load_record(self, record: TranslationRecord) -> None:
        """Show a history record in the translation panel"""
        self.source_text = record.source_text
        self.translated_text = record.translated_text
        self.source_language = record.source_language
        self.target_language = record.target_language
        self.error_message = ""

    def clear_history(self) -> None:
        """Clear all history from memory and database"""
        self._ensure_history()
        if self.history_store is not None:
            self.history_store.clear()

    def reload_history(self) -> None:
        """Reload history from the database"""
        self._ensure_history()
        if self.history_store is not None:
            self.history_store.load()

    def close(self) -> None:
        """Close the history database (called on shutdown)"""
        if self.history_store is not None:
            self.history_store.db.close()
