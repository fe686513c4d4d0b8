"""
Centralized configuration from environment variables.
Loads client credentials and settings without hardcoding.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv


def _env_flag(name: str, default: str = 'false') -> bool:
    """Read a boolean flag from the environment."""
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class SpotifyConfig:
    """Spotify client configuration."""
    client_id: str
    client_secret: str
    redirect_uri: str
    show_dialog: bool = False
    token_storage_path: Path = Path('data/.spotify_session.json')
    scopes: str = "user-read-private"

    @classmethod
    def from_env(cls) -> 'SpotifyConfig':
        """Load from environment variables."""
        return cls(
            client_id=os.getenv('CLIENT_ID', ''),
            client_secret=os.getenv('CLIENT_SECRET', ''),
            redirect_uri=os.getenv('REDIRECT_URI', 'http://127.0.0.1:8888/callback'),
            show_dialog=_env_flag('SHOW_DIALOG'),
            token_storage_path=Path(os.getenv('TOKEN_PATH', 'data/.spotify_session.json')),
            scopes=os.getenv('SPOTIFY_SCOPES', 'user-read-private')
        )

    def validate(self) -> None:
        """Validate required fields are present."""
        if not self.client_id:
            raise ValueError("CLIENT_ID environment variable is required")
        if not self.client_secret:
            raise ValueError("CLIENT_SECRET environment variable is required")
        if not self.redirect_uri:
            raise ValueError("REDIRECT_URI environment variable is required")


@dataclass
class AppConfig:
    """Application-wide configuration."""
    spotify: SpotifyConfig
    log_level: str = "INFO"
    max_retries: int = 3
    retry_delay: float = 1.0
    request_timeout: float = 30.0

    @classmethod
    def load(cls, env_file: Optional[str] = None) -> 'AppConfig':
        """
        Load all configuration.

        Args:
            env_file: Path to .env file (optional, will search parent dirs)
        """
        # Load environment from .env file if it exists
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()  # Searches parent directories

        config = cls(
            spotify=SpotifyConfig.from_env(),
            log_level=os.getenv('LOG_LEVEL', 'INFO'),
            max_retries=int(os.getenv('MAX_RETRIES', '3')),
            retry_delay=float(os.getenv('RETRY_DELAY', '1.0')),
            request_timeout=float(os.getenv('REQUEST_TIMEOUT', '30'))
        )

        # Validate critical settings
        config.spotify.validate()

        return config


# Singleton instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get or create configuration singleton."""
    global _config
    if _config is None:
        _config = AppConfig.load()
    return _config


def reset_config() -> None:
    """Reset configuration (useful for testing)."""
    global _config
    _config = None
