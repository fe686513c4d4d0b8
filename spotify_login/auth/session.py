"""
Session value types: the logged in user and their credentials.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class User:
    """Spotify user profile."""
    country: Optional[str]
    display_name: Optional[str]
    filter_enabled: bool
    profile_url: Optional[str]
    number_of_followers: int
    endpoint_url: Optional[str]
    id: str

    @classmethod
    def from_profile(cls, payload: Dict[str, Any]) -> 'User':
        """
        Build a user from a ``/v1/me`` response.

        Args:
            payload: Decoded profile JSON

        Returns:
            User instance
        """
        explicit_content = payload.get('explicit_content') or {}
        external_urls = payload.get('external_urls') or {}
        followers = payload.get('followers') or {}

        return cls(
            country=payload.get('country'),
            display_name=payload.get('display_name'),
            filter_enabled=bool(explicit_content.get('filter_enabled', False)),
            profile_url=external_urls.get('spotify'),
            number_of_followers=int(followers.get('total') or 0),
            endpoint_url=payload.get('href'),
            id=payload['id']
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'country': self.country,
            'display_name': self.display_name,
            'filter_enabled': self.filter_enabled,
            'profile_url': self.profile_url,
            'number_of_followers': self.number_of_followers,
            'endpoint_url': self.endpoint_url,
            'id': self.id
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'User':
        return cls(**data)


@dataclass(frozen=True)
class Session:
    """
    Credentials of a logged in user.

    Sessions are never mutated: a refresh produces a new instance via
    :meth:`refreshed`.
    """
    user: User
    access_token: str
    refresh_token: str
    expiration_date: datetime

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """
        Check whether the access token can still be used.

        A session expiring exactly at ``now`` is already invalid.

        Args:
            now: Reference time (defaults to the current time)

        Returns:
            True if the token has not expired yet
        """
        if now is None:
            now = datetime.now()
        return now < self.expiration_date

    def refreshed(
        self,
        access_token: str,
        expiration_date: datetime,
        refresh_token: Optional[str] = None
    ) -> 'Session':
        """Return a copy carrying a renewed access token."""
        return replace(
            self,
            access_token=access_token,
            expiration_date=expiration_date,
            refresh_token=refresh_token or self.refresh_token
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'user': self.user.to_dict(),
            'access_token': self.access_token,
            'refresh_token': self.refresh_token,
            'expires_at': self.expiration_date.isoformat()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Session':
        return cls(
            user=User.from_dict(data['user']),
            access_token=data['access_token'],
            refresh_token=data['refresh_token'],
            expiration_date=datetime.fromisoformat(data['expires_at'])
        )
