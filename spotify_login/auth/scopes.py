"""
Spotify authorization scopes.
"""
from enum import Enum
from typing import Iterable


class Scope(str, Enum):
    """Scopes that can be requested during authorization."""
    STREAMING = 'streaming'
    USER_READ_EMAIL = 'user-read-email'
    USER_READ_PRIVATE = 'user-read-private'
    USER_READ_BIRTHDATE = 'user-read-birthdate'
    USER_TOP_READ = 'user-top-read'
    USER_READ_RECENTLY_PLAYED = 'user-read-recently-played'
    USER_LIBRARY_READ = 'user-library-read'
    USER_LIBRARY_MODIFY = 'user-library-modify'
    USER_FOLLOW_READ = 'user-follow-read'
    USER_FOLLOW_MODIFY = 'user-follow-modify'
    USER_READ_PLAYBACK_STATE = 'user-read-playback-state'
    USER_MODIFY_PLAYBACK_STATE = 'user-modify-playback-state'
    USER_READ_CURRENTLY_PLAYING = 'user-read-currently-playing'
    PLAYLIST_READ_PRIVATE = 'playlist-read-private'
    PLAYLIST_READ_COLLABORATIVE = 'playlist-read-collaborative'
    PLAYLIST_MODIFY_PUBLIC = 'playlist-modify-public'
    PLAYLIST_MODIFY_PRIVATE = 'playlist-modify-private'
    UGC_IMAGE_UPLOAD = 'ugc-image-upload'


def join_scopes(scopes: Iterable[Scope]) -> str:
    """Join scopes into the space separated form the accounts service expects."""
    return ' '.join(Scope(scope).value for scope in scopes)


def split_scopes(value: str) -> list:
    """Inverse of :func:`join_scopes`."""
    return [Scope(part) for part in value.split()]
