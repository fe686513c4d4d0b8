"""
Configuration package for spotify-login.
Centralized configuration management using environment variables.
"""
from .settings import (
    SpotifyConfig,
    AppConfig,
    get_config,
    reset_config
)

__all__ = [
    'SpotifyConfig',
    'AppConfig',
    'get_config',
    'reset_config'
]
