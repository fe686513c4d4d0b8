"""
API clients package.
Handles communication with the Spotify Accounts service.
"""
from .accounts_api import SpotifyAccountsClient, TokenGrant

__all__ = [
    'SpotifyAccountsClient',
    'TokenGrant'
]
