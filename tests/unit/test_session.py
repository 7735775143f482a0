"""
Unit tests for session management.

Tests SQLiteSession, MemorySession, and SessionData.
"""
import pytest
import tempfile
from pathlib import Path
from datetime import datetime

from onedrivepy.core.auth import AuthState, TokenData
from onedrivepy.core.session import (
    SessionStorage,
    SessionData,
    SQLiteSession,
    MemorySession
)


@pytest.fixture
def auth_state():
    return AuthState(
        token=TokenData(
            access_token='at',
            obtained=1700000000.0,
            expires_in=3600,
            refresh_token='rt',
            scope='files.readwrite offline_access',
        )
    )


class TestSessionData:
    """Tests for SessionData model."""

    def test_create_session_data(self, auth_state):
        data = SessionData(client_id='client-id', state=auth_state)

        assert data.client_id == 'client-id'
        assert data.state.access_token == 'at'
        assert isinstance(data.created_at, datetime)

    def test_round_trip(self, auth_state):
        """Test JSON serialization keeps the state."""
        data = SessionData(client_id='client-id', state=auth_state)

        restored = SessionData.from_json(data.to_json())

        assert restored.client_id == 'client-id'
        assert restored.state == auth_state
        assert restored.created_at == data.created_at

    def test_is_valid(self, auth_state):
        assert SessionData(client_id='client-id', state=auth_state).is_valid()
        assert not SessionData(client_id='client-id').is_valid()
        assert not SessionData(client_id='', state=auth_state).is_valid()

    def test_update_timestamp(self):
        data = SessionData(client_id='client-id')
        old = data.updated_at

        data.update_timestamp()

        assert data.updated_at >= old


class TestMemorySession:
    """Tests for MemorySession storage."""

    def test_protocol(self):
        assert isinstance(MemorySession(), SessionStorage)

    def test_save_load_delete(self, auth_state):
        storage = MemorySession()
        assert not storage.exists()
        assert storage.load() is None

        storage.save(SessionData(client_id='client-id', state=auth_state))

        assert storage.exists()
        assert storage.load().state.refresh_token == 'rt'

        storage.delete()

        assert not storage.exists()


class TestSQLiteSession:
    """Tests for SQLiteSession storage."""

    @pytest.fixture
    def temp_dir(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    def test_file_name(self, temp_dir):
        with SQLiteSession('account', base_path=temp_dir) as storage:
            assert storage.path == temp_dir / 'account.session'
            assert storage.path.exists()

    def test_explicit_path(self, temp_dir):
        path = temp_dir / 'nested' / 'custom.session'

        with SQLiteSession(path) as storage:
            assert storage.path == path
            assert path.exists()

    def test_save_and_load(self, temp_dir, auth_state):
        with SQLiteSession('account', base_path=temp_dir) as storage:
            storage.save(SessionData(client_id='client-id', state=auth_state))

        with SQLiteSession('account', base_path=temp_dir) as storage:
            loaded = storage.load()

        assert loaded.client_id == 'client-id'
        assert loaded.state == auth_state

    def test_save_replaces(self, temp_dir, auth_state):
        with SQLiteSession('account', base_path=temp_dir) as storage:
            storage.save(SessionData(client_id='first'))
            storage.save(SessionData(client_id='second', state=auth_state))

            assert storage.load().client_id == 'second'

    def test_delete(self, temp_dir, auth_state):
        with SQLiteSession('account', base_path=temp_dir) as storage:
            storage.save(SessionData(client_id='client-id', state=auth_state))
            storage.delete()

            assert not storage.exists()
            assert storage.load() is None

    def test_delete_file(self, temp_dir):
        storage = SQLiteSession('account', base_path=temp_dir)

        storage.delete_file()

        assert not storage.path.exists()
