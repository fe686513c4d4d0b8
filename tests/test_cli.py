"""Tests for spotify_login/cli.py.

The shared manager is replaced with a real SessionManager wired to fakes.
"""

import logging
from concurrent.futures import Future
from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlparse

import pytest

from spotify_login import cli
from spotify_login.auth.errors import RefreshError
from spotify_login.auth.session_manager import SessionManager
from spotify_login.utils import set_log_level


@pytest.fixture()
def manager(monkeypatch, accounts_client, executor, clock):
    manager = SessionManager(client=accounts_client, executor=executor, clock=clock)
    manager.configure("id", "secret", "myapp://callback")
    monkeypatch.setattr(cli, "get_shared_manager", lambda: manager)
    return manager


class TestUrlCommand:
    def test_prints_web_url(self, manager, capsys):
        assert cli.main(["url", "--scope", "streaming", "--scope", "user-read-email"]) == 0

        url = capsys.readouterr().out.strip()
        assert url.startswith("https://accounts.spotify.com/authorize?")
        assert parse_qs(urlparse(url).query)["scope"] == ["streaming user-read-email"]

    def test_prints_app_url(self, manager, capsys):
        assert cli.main(["url", "--app", "--scope", "streaming"]) == 0
        assert capsys.readouterr().out.startswith("spotify-action://authorize?")

    def test_default_scopes_from_environment(self, manager, monkeypatch, capsys):
        monkeypatch.setenv("CLIENT_ID", "id")
        monkeypatch.setenv("CLIENT_SECRET", "secret")
        monkeypatch.setenv("SPOTIFY_SCOPES", "streaming playlist-read-private")

        assert cli.main(["url"]) == 0

        url = capsys.readouterr().out.strip()
        assert parse_qs(urlparse(url).query)["scope"] == ["streaming playlist-read-private"]

    def test_unknown_default_scope_is_configuration_error(self, manager, monkeypatch):
        monkeypatch.setenv("CLIENT_ID", "id")
        monkeypatch.setenv("CLIENT_SECRET", "secret")
        monkeypatch.setenv("SPOTIFY_SCOPES", "not-a-scope")

        assert cli.main(["url"]) == 2

    def test_unconfigured_is_configuration_error(self, monkeypatch, accounts_client, executor):
        monkeypatch.setattr(cli, "get_shared_manager", lambda: SessionManager(client=accounts_client, executor=executor))
        assert cli.main(["url", "--scope", "streaming"]) == 2


class TestLoginCommand:
    def test_login_with_pasted_redirect(self, manager, monkeypatch, capsys):
        monkeypatch.setattr("builtins.input", lambda prompt: "myapp://callback?code=abc")

        assert cli.main(["login", "--no-browser", "--scope", "streaming"]) == 0
        assert manager.session.access_token == "codeToken"

    def test_foreign_redirect_fails(self, manager, monkeypatch):
        monkeypatch.setattr("builtins.input", lambda prompt: "https://example.com/?code=abc")

        assert cli.main(["login", "--no-browser", "--scope", "streaming"]) == 1
        assert manager.session is None

    def test_opens_browser(self, manager, monkeypatch):
        opened = MagicMock()
        monkeypatch.setattr(cli.webbrowser, "open", opened)
        monkeypatch.setattr("builtins.input", lambda prompt: "myapp://callback?error=access_denied")

        assert cli.main(["login", "--scope", "streaming"]) == 1
        assert opened.call_args.args[0].startswith("https://accounts.spotify.com/authorize?")


class TestTokenCommand:
    def test_prints_token(self, manager, make_session, capsys):
        manager.session = make_session(access_token="fakeToken")

        assert cli.main(["token"]) == 0
        assert capsys.readouterr().out.strip() == "fakeToken"

    def test_no_session(self, manager):
        assert cli.main(["token"]) == 1

    def test_refresh_failure(self, manager, monkeypatch):
        failed = Future()
        failed.set_exception(RefreshError("boom"))
        monkeypatch.setattr(manager, "get_access_token", lambda: failed)

        assert cli.main(["token"]) == 1


class TestWhoamiAndLogout:
    def test_whoami(self, manager, make_session, capsys):
        manager.session = make_session()
        assert cli.main(["whoami"]) == 0
        assert "FakeUser (12345, US)" in capsys.readouterr().out

    def test_logout(self, manager, make_session):
        manager.session = make_session()
        assert cli.main(["logout"]) == 0
        assert manager.session is None
        assert cli.main(["whoami"]) == 1


class TestLogLevel:
    @pytest.fixture(autouse=True)
    def _restore_level(self):
        yield
        set_log_level("INFO")

    def test_flag_sets_package_loggers(self, manager):
        assert cli.main(["--log-level", "DEBUG", "logout"]) == 0

        assert logging.getLogger("spotify_login.cli").level == logging.DEBUG
        assert logging.getLogger("spotify_login.auth.session_manager").level == logging.DEBUG

    def test_level_from_environment(self, manager, monkeypatch):
        monkeypatch.setenv("CLIENT_ID", "id")
        monkeypatch.setenv("CLIENT_SECRET", "secret")
        monkeypatch.setenv("LOG_LEVEL", "WARNING")

        assert cli.main(["logout"]) == 0

        assert logging.getLogger("spotify_login.cli").level == logging.WARNING

    def test_unknown_level(self, manager):
        assert cli.main(["--log-level", "LOUD", "logout"]) == 2
