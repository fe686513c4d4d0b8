"""Unit tests for spotify_login/config/settings.py."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from spotify_login.config import AppConfig, SpotifyConfig, get_config, reset_config


class TestSpotifyConfig:
    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CLIENT_ID", "id")
        monkeypatch.setenv("CLIENT_SECRET", "secret")
        monkeypatch.setenv("REDIRECT_URI", "myapp://callback")
        monkeypatch.setenv("SHOW_DIALOG", "true")
        monkeypatch.setenv("TOKEN_PATH", "/tmp/s.json")

        config = SpotifyConfig.from_env()

        assert config.client_id == "id"
        assert config.redirect_uri == "myapp://callback"
        assert config.show_dialog is True
        assert config.token_storage_path == Path("/tmp/s.json")

    def test_defaults(self):
        config = SpotifyConfig.from_env()
        assert config.redirect_uri == "http://127.0.0.1:8888/callback"
        assert config.show_dialog is False

    def test_validate_requires_client_id(self):
        with pytest.raises(ValueError, match="CLIENT_ID"):
            SpotifyConfig("", "secret", "myapp://").validate()

    def test_validate_requires_secret(self):
        with pytest.raises(ValueError, match="CLIENT_SECRET"):
            SpotifyConfig("id", "", "myapp://").validate()


class TestAppConfig:
    def test_load_from_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("CLIENT_ID=file-id\nCLIENT_SECRET=file-secret\nMAX_RETRIES=5\n")

        # load_dotenv writes straight into os.environ
        with patch.dict(os.environ, clear=False):
            os.environ.pop("MAX_RETRIES", None)
            config = AppConfig.load(str(env_file))

        assert config.spotify.client_id == "file-id"
        assert config.max_retries == 5
        assert "CLIENT_ID" not in os.environ

    def test_get_config_is_cached(self, monkeypatch):
        monkeypatch.setenv("CLIENT_ID", "id")
        monkeypatch.setenv("CLIENT_SECRET", "secret")

        first = get_config()
        assert get_config() is first

        reset_config()
        assert get_config() is not first

    def test_missing_credentials_raise(self):
        with pytest.raises(ValueError):
            get_config()
