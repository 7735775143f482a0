"""Tests for the onedrive command line."""
import pytest
from typer.testing import CliRunner

from onedrivepy.cli import main as cli
from onedrivepy.core.auth import AuthState, TokenData
from onedrivepy.core.session import SessionData, SQLiteSession


runner = CliRunner()


@pytest.fixture(autouse=True)
def session_path(tmp_path, monkeypatch):
    """Keep CLI sessions inside a temporary directory."""
    path = tmp_path / "session"
    monkeypatch.setattr(cli, "get_session_path", lambda: path)
    monkeypatch.delenv("ONEDRIVE_CLIENT_ID", raising=False)
    monkeypatch.delenv("ONEDRIVE_CLIENT_SECRET", raising=False)
    return path


class TestCli:
    """Test suite for CLI commands that need no network."""

    def test_login_url(self, session_path):
        result = runner.invoke(cli.app, ["login-url", "--client-id", "client-id"])

        assert result.exit_code == 0
        assert "client_id=client-id" in result.output.replace("\n", "")
        stored = SQLiteSession(str(session_path)).load()
        assert stored.state.redirect_uri == cli.DEFAULT_REDIRECT_URI

    def test_client_id_from_environment(self, monkeypatch):
        monkeypatch.setenv("ONEDRIVE_CLIENT_ID", "env-client")

        result = runner.invoke(cli.app, ["login-url"])

        assert result.exit_code == 0
        assert "client_id=env-client" in result.output.replace("\n", "")

    def test_client_id_required(self):
        result = runner.invoke(cli.app, ["status"])

        assert result.exit_code != 0

    def test_status_without_token(self):
        result = runner.invoke(cli.app, ["status", "--client-id", "client-id"])

        assert result.exit_code == 0
        assert "missing" in result.output

    def test_status_with_token(self, session_path):
        with SQLiteSession(str(session_path)) as storage:
            storage.save(SessionData(
                client_id="client-id",
                state=AuthState(token=TokenData(access_token="at", obtained=0, expires_in=10))
            ))

        result = runner.invoke(cli.app, ["status", "--client-id", "client-id"])

        assert result.exit_code == 0
        assert "expired" in result.output

    def test_ls_requires_login(self):
        result = runner.invoke(cli.app, ["ls", "--client-id", "client-id"])

        assert result.exit_code == 1
        assert "Not logged in" in result.output

    def test_logout(self, session_path):
        SQLiteSession(str(session_path)).close()

        result = runner.invoke(cli.app, ["logout"])

        assert result.exit_code == 0
        assert not session_path.with_suffix(".session").exists()
