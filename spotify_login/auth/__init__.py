"""
Authentication module for Spotify login.
Handles URL building, callback parsing, sessions and token refresh.
"""
from .errors import (
    SpotifyLoginError,
    ParseError,
    SessionError,
    ConfigurationError,
    RefreshError
)
from .scopes import Scope
from .session import User, Session
from .url_builder import AuthenticationURLType, ParsedCallback, URLBuilder
from .token_manager import SessionStore
from .session_manager import SessionManager, get_shared_manager, reset_shared_manager

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
    'reset_shared_manager'
]
