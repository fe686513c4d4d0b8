"""
Error kinds reported by the login flow.

None of these escape from token requests or URL parsing: they are delivered
through the returned future or the callback's error slot.
"""


class SpotifyLoginError(Exception):
    """Base class for login errors."""


class ParseError(SpotifyLoginError):
    """Callback URL carries no authorization code."""


class SessionError(SpotifyLoginError):
    """No session is present."""


class ConfigurationError(SpotifyLoginError):
    """Manager has not been configured with client credentials."""


class RefreshError(SpotifyLoginError):
    """Token exchange or refresh failed."""
