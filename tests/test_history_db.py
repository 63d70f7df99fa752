# tests/test_history_db.py
"""
Tests for the HistoryDB key/value store.
"""

import sqlite3
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from verbico.storage.history_db import HistoryDB, get_default_db_path


@pytest.fixture
def temp_db():
    """Create a temporary database for testing"""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / 'test_history.db'
        db = HistoryDB(db_path)
        yield db
        db.close()  # Properly close database connection


class TestHistoryDB:
    """Test cases for HistoryDB"""

    def test_init_creates_database(self):
        """Test that initialization creates the database file"""
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = Path(tmpdir) / 'subdir' / 'test.db'
            db = HistoryDB(db_path)
            assert db_path.exists()
            db.close()

    def test_load_missing_key(self, temp_db):
        assert temp_db.load_blob('translationHistory') is None

    def test_save_and_load(self, temp_db):
        assert temp_db.save_blob('translationHistory', '{"translations": []}') is True
        assert temp_db.load_blob('translationHistory') == '{"translations": []}'

    def test_save_overwrites(self, temp_db):
        temp_db.save_blob('k', 'first')
        temp_db.save_blob('k', 'second')
        assert temp_db.load_blob('k') == 'second'

    def test_keys_are_independent(self, temp_db):
        temp_db.save_blob('a', '1')
        temp_db.save_blob('b', '2')
        assert temp_db.load_blob('a') == '1'
        assert temp_db.load_blob('b') == '2'

    def test_delete(self, temp_db):
        temp_db.save_blob('k', 'v')
        assert temp_db.delete('k') is True
        assert temp_db.load_blob('k') is None
        assert temp_db.delete('k') is False

    def test_unicode_round_trip(self, temp_db):
        value = '{"sourceText": "こんにちは", "translatedText": "Привет"}'
        temp_db.save_blob('k', value)
        assert temp_db.load_blob('k') == value

    def test_persists_across_instances(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = Path(tmpdir) / 'test.db'
            db = HistoryDB(db_path)
            db.save_blob('k', 'v')
            db.close()

            reopened = HistoryDB(db_path)
            assert reopened.load_blob('k') == 'v'
            reopened.close()

    def test_sqlite_error_degrades_to_no_data(self, temp_db):
        with patch.object(temp_db, '_get_connection', side_effect=sqlite3.OperationalError('locked')):
            assert temp_db.load_blob('k') is None
            assert temp_db.save_blob('k', 'v') is False
            assert temp_db.delete('k') is False


def test_get_default_db_path(tmp_path, monkeypatch):
    monkeypatch.setattr(Path, 'home', lambda: tmp_path)
    path = get_default_db_path()
    assert path == tmp_path / '.verbico' / 'history.db'
    assert path.parent.exists()
