"""
spotify-login: OAuth login and session management for Spotify clients.
"""
from .auth import (
    SpotifyLoginError,
    ParseError,
    SessionError,
    ConfigurationError,
    RefreshError,
    Scope,
    User,
    Session,
    AuthenticationURLType,
    ParsedCallback,
    URLBuilder,
    SessionStore,
    SessionManager,
    get_shared_manager,
    reset_shared_manager
)
from .clients import SpotifyAccountsClient, TokenGrant
from .config import SpotifyConfig, AppConfig, get_config, reset_config

__version__ = '1.0.0'

__all__ = [
    'SpotifyLoginError',
    'ParseError',
    'SessionError',
    'ConfigurationError',
    'RefreshError',
    'Scope',
    'User',
    'Session',
    'AuthenticationURLType',
    'ParsedCallback',
    'URLBuilder',
    'SessionStore',
    'SessionManager',
    'get_shared_manager',
    'reset_shared_manager',
    'SpotifyAccountsClient',
    'TokenGrant',
    'SpotifyConfig',
    'AppConfig',
    'get_config',
    'reset_config'
]
