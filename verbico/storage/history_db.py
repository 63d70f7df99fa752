# verbico/storage/history_db.py
"""
SQLite-backed key/value store for locally persisted UI data.
Data is stored on the user's device only.
"""

import logging
import sqlite3
import threading
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def get_default_db_path() -> Path:
    """Get default database path in user's home directory"""
    db_dir = Path.home() / '.verbico'
    db_dir.mkdir(parents=True, exist_ok=True)
    return db_dir / 'history.db'


class HistoryDB:
    """
    SQLite key/value table holding opaque text blobs.

    Uses one connection per thread. SQLite errors are logged and reported
    as "no data" / False rather than raised.
    """

    # Database configuration
    DB_TIMEOUT = 30.0  # Connection timeout in seconds

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path or get_default_db_path()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        # Thread-local storage for connections (one per thread)
        self._local = threading.local()
        self._lock = threading.Lock()

        # Track all connections for shutdown (thread ID -> connection)
        self._all_connections: dict[int, sqlite3.Connection] = {}
        self._connections_lock = threading.Lock()

        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(
            self.db_path,
            timeout=self.DB_TIMEOUT,
            check_same_thread=False,
        )
        conn.execute('PRAGMA journal_mode=WAL')
        return conn

    def _get_connection(self) -> sqlite3.Connection:
        """Get (or open) the connection for the current thread."""
        conn = getattr(self._local, 'connection', None)
        if conn is None:
            conn = self._connect()
            self._local.connection = conn
            with self._connections_lock:
                self._all_connections[threading.get_ident()] = conn
        return conn

    def _init_db(self):
        """Initialize database schema"""
        # Short-lived connection so construction does not hold the file open
        with self._lock:
            conn = self._connect()
            try:
                conn.execute('''
                    CREATE TABLE IF NOT EXISTS kv_store (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    )
                ''')
                conn.commit()
            finally:
                conn.close()

    def load_blob(self, key: str) -> Optional[str]:
        """Return the stored value for key, or None if absent or unreadable."""
        try:
            conn = self._get_connection()
            row = conn.execute(
                'SELECT value FROM kv_store WHERE key = ?',
                (key,)
            ).fetchone()
            return row[0] if row else None
        except sqlite3.Error as e:
            logger.warning("Failed to load %s: %s", key, e)
            return None

    def save_blob(self, key: str, value: str) -> bool:
        """Insert or replace the value for key. Returns False on error."""
        try:
            conn = self._get_connection()
            with self._lock:
                conn.execute(
                    '''
                    INSERT INTO kv_store (key, value, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    ''',
                    (key, value)
                )
                conn.commit()
            return True
        except sqlite3.Error as e:
            logger.warning("Failed to save %s: %s", key, e)
            return False

    def delete(self, key: str) -> bool:
        """Delete key. Returns True if a row was removed."""
        try:
            conn = self._get_connection()
            with self._lock:
                cursor = conn.execute('DELETE FROM kv_store WHERE key = ?', (key,))
                conn.commit()
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            logger.warning("Failed to delete %s: %s", key, e)
            return False

    def close(self):
        """Close connections from all threads, checkpointing the WAL first."""
        with self._connections_lock:
            for thread_id, conn in list(self._all_connections.items()):
                try:
                    conn.execute('PRAGMA wal_checkpoint(TRUNCATE)')
                    conn.close()
                    logger.debug("Closed DB connection for thread %d", thread_id)
                except sqlite3.Error as e:
                    logger.debug("Error closing DB connection for thread %d: %s", thread_id, e)
            self._all_connections.clear()

        if hasattr(self._local, 'connection'):
            self._local.connection = None
