"""
Spotify Accounts service client.
Exchanges authorization codes, refreshes access tokens and fetches the
current user's profile.
"""
import base64
import requests
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional

from ..auth.session import User
from ..config import SpotifyConfig
from ..utils import setup_logger, mask_secret, retry_on_failure, validate_response


logger = setup_logger(__name__)


@dataclass(frozen=True)
class TokenGrant:
    """Tokens issued by the accounts service."""
    access_token: str
    refresh_token: Optional[str]
    expires_in: int

    def expiration_date(self, now: Optional[datetime] = None) -> datetime:
        """Absolute expiry of the access token."""
        if now is None:
            now = datetime.now()
        return now + timedelta(seconds=self.expires_in)

    @classmethod
    def from_response(cls, token_data: Dict) -> 'TokenGrant':
        return cls(
            access_token=token_data['access_token'],
            refresh_token=token_data.get('refresh_token'),
            expires_in=int(token_data.get('expires_in', 3600))
        )


class SpotifyAccountsClient:
    """
    HTTP client for the token and profile endpoints.

    Responsibilities:
    - Exchange authorization code for tokens
    - Refresh access tokens
    - Fetch the user profile
    - Retry transient failures with exponential backoff
    """

    TOKEN_URL = "https://accounts.spotify.com/api/token"
    PROFILE_URL = "https://api.spotify.com/v1/me"

    def __init__(
        self,
        http: Optional[requests.Session] = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 30.0
    ):
        """
        Initialize accounts client.

        Args:
            http: requests session to use (a new one by default)
            max_retries: Retries for transient failures
            retry_delay: Initial backoff delay in seconds
            timeout: Per-request timeout in seconds
        """
        self.http = http or requests.Session()
        self.timeout = timeout
        self._retry = retry_on_failure(max_retries=max_retries, initial_delay=retry_delay)

    @staticmethod
    def _basic_auth(config: SpotifyConfig) -> str:
        credentials = f"{config.client_id}:{config.client_secret}".encode('utf-8')
        return f"Basic {base64.b64encode(credentials).decode('utf-8')}"

    def _post_token(self, config: SpotifyConfig, data: Dict) -> TokenGrant:
        headers = {
            'Authorization': self._basic_auth(config),
            'Content-Type': 'application/x-www-form-urlencoded'
        }

        @self._retry
        def send() -> requests.Response:
            return self.http.post(self.TOKEN_URL, data=data, headers=headers, timeout=self.timeout)

        return TokenGrant.from_response(validate_response(send()))

    def exchange_code(self, config: SpotifyConfig, code: str) -> TokenGrant:
        """
        Exchange authorization code for access/refresh tokens.

        Args:
            config: Client configuration
            code: Authorization code from the redirect

        Returns:
            Issued tokens

        Raises:
            APIError: If the exchange fails
        """
        logger.info("Exchanging authorization code for tokens...")

        grant = self._post_token(config, {
            'grant_type': 'authorization_code',
            'code': code,
            'redirect_uri': config.redirect_uri
        })

        logger.info("✅ Tokens obtained")
        return grant

    def refresh(self, config: SpotifyConfig, refresh_token: str) -> TokenGrant:
        """
        Refresh access token using refresh token.

        The reply may omit ``refresh_token``, in which case the old one stays
        in use.

        Raises:
            APIError: If the refresh fails
        """
        logger.info(f"Refreshing access token (refresh token {mask_secret(refresh_token)})...")

        grant = self._post_token(config, {
            'grant_type': 'refresh_token',
            'refresh_token': refresh_token
        })

        logger.info("✅ Access token refreshed")
        return grant

    def fetch_profile(self, access_token: str) -> User:
        """
        Fetch the profile of the user owning the token.

        Raises:
            APIError: If the request fails
        """
        headers = {'Authorization': f'Bearer {access_token}'}

        @self._retry
        def send() -> requests.Response:
            return self.http.get(self.PROFILE_URL, headers=headers, timeout=self.timeout)

        profile = validate_response(send())
        logger.debug(f"Fetched profile for user {profile.get('id')}")
        return User.from_profile(profile)
