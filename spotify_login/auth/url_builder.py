"""
Authentication URL construction and callback parsing.

Builds the authorization request for the two delivery mechanisms (web page or
native app hand-off) and turns the redirect the user comes back on into an
authorization code or an error.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional
from urllib.parse import parse_qs, quote, urlencode, urlparse

from .scopes import Scope, join_scopes


class AuthenticationURLType(Enum):
    """Delivery mechanism for the authorization request."""
    WEB = 'web'
    APP = 'app'


@dataclass(frozen=True)
class ParsedCallback:
    """Result of parsing a redirect URL."""
    code: Optional[str]
    error: bool
    error_description: Optional[str] = None


class URLBuilder:
    """
    Builds authorization URLs and parses the redirects that answer them.

    Holds immutable client configuration only, so instances can be shared
    between threads freely.
    """

    WEB_AUTH_URL = "https://accounts.spotify.com/authorize"
    APP_AUTH_URL = "spotify-action://authorize"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        show_dialog: bool = False
    ):
        """
        Initialize URL builder.

        Args:
            client_id: Application client ID
            client_secret: Application client secret
            redirect_uri: Redirect URI registered for the application
            show_dialog: Force the consent dialog on the web flow
        """
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._show_dialog = show_dialog

    @property
    def client_id(self) -> str:
        return self._client_id

    @property
    def client_secret(self) -> str:
        return self._client_secret

    @property
    def redirect_uri(self) -> str:
        return self._redirect_uri

    @property
    def show_dialog(self) -> bool:
        return self._show_dialog

    def authentication_url(
        self,
        url_type: AuthenticationURLType,
        scopes: Iterable[Scope] = ()
    ) -> str:
        """
        Build the authorization request URL.

        Args:
            url_type: Web page or native app hand-off
            scopes: Scopes to request (may be empty)

        Returns:
            Authorization URL
        """
        params = {
            'client_id': self._client_id,
            'response_type': 'code',
            'redirect_uri': self._redirect_uri,
        }

        scope = join_scopes(scopes)
        if scope:
            params['scope'] = scope

        if url_type is AuthenticationURLType.WEB:
            base_url = self.WEB_AUTH_URL
            params['show_dialog'] = 'true' if self._show_dialog else 'false'
        else:
            base_url = self.APP_AUTH_URL

        params['nosignup'] = 'true'
        params['nolinks'] = 'true'

        return f"{base_url}?{urlencode(params, quote_via=quote)}"

    def can_handle_url(self, url: str) -> bool:
        """
        Check whether a URL is a redirect for this application.

        Only scheme and host are compared; path and query are ignored.
        """
        try:
            expected = urlparse(self._redirect_uri)
            actual = urlparse(url)
        except ValueError:
            return False
        return (
            actual.scheme.lower() == expected.scheme.lower()
            and actual.hostname == expected.hostname
        )

    def parse(self, url: str) -> ParsedCallback:
        """
        Extract the authorization code from a redirect URL.

        Args:
            url: Redirect URL

        Returns:
            ParsedCallback with the code, or ``error=True`` when none is present
        """
        try:
            query_params = parse_qs(urlparse(url).query, keep_blank_values=True)
        except ValueError:
            return ParsedCallback(code=None, error=True)

        code = query_params.get('code', [''])[0]
        if code:
            return ParsedCallback(code=code, error=False)

        description = query_params.get('error', [None])[0]
        return ParsedCallback(code=None, error=True, error_description=description)
