"""Unit tests for spotify_login/auth/token_manager.py (SessionStore)."""

import json
from datetime import datetime

from spotify_login.auth.token_manager import SessionStore


class TestSessionStore:
    def test_creates_parent_directory(self, tmp_path):
        SessionStore(tmp_path / "nested" / "dir" / "session.json")
        assert (tmp_path / "nested" / "dir").is_dir()

    def test_missing_file_loads_none(self, tmp_path):
        assert SessionStore(tmp_path / "session.json").load() is None

    def test_save_then_load(self, tmp_path, make_session):
        store = SessionStore(tmp_path / "session.json")
        session = make_session(expiration_date=datetime(2031, 3, 4, 5, 6, 7))

        store.save(session)

        assert store.load() == session

    def test_file_layout(self, tmp_path, make_session):
        path = tmp_path / "session.json"
        SessionStore(path).save(make_session(access_token="a", refresh_token="r",
                                             expiration_date=datetime(2031, 1, 1)))

        data = json.loads(path.read_text())
        assert data["access_token"] == "a"
        assert data["refresh_token"] == "r"
        assert data["expires_at"] == "2031-01-01T00:00:00"
        assert data["user"]["id"] == "12345"

    def test_corrupt_file_loads_none(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json")
        assert SessionStore(path).load() is None

    def test_incomplete_file_loads_none(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text(json.dumps({"access_token": "a"}))
        assert SessionStore(path).load() is None

    def test_clear(self, tmp_path, make_session):
        path = tmp_path / "session.json"
        store = SessionStore(path)
        store.save(make_session())

        store.clear()
        store.clear()

        assert not path.exists()
        assert store.load() is None
