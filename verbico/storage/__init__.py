# verbico/storage/__init__.py
"""
Storage module for Verbico.
Handles local persistence of the recent translations list.
"""

from verbico.storage.history_db import HistoryDB, get_default_db_path
from verbico.storage.session_history import (
    HISTORY_STORAGE_KEY,
    MAX_HISTORY_ENTRIES,
    SessionHistory,
)

__all__ = [
    'HistoryDB',
    'get_default_db_path',
    'SessionHistory',
    'HISTORY_STORAGE_KEY',
    'MAX_HISTORY_ENTRIES',
]
