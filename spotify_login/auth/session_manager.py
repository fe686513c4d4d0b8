"""
Session manager: owns the current session and vends access tokens.

Responsibilities:
- Hold client configuration and the logged in session
- Turn redirect URLs into sessions (code exchange + profile fetch)
- Return cached access tokens, refreshing expired ones
- Coalesce concurrent refreshes into a single network call
"""
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from datetime import datetime
from typing import Callable, Iterable, Optional

from .errors import ConfigurationError, ParseError, RefreshError, SessionError, SpotifyLoginError
from .scopes import Scope
from .session import Session, User
from .token_manager import SessionStore
from .url_builder import AuthenticationURLType, URLBuilder
from ..clients.accounts_api import SpotifyAccountsClient
from ..config import AppConfig, SpotifyConfig, get_config
from ..utils import setup_logger


logger = setup_logger(__name__)

TokenCallback = Callable[[Optional[str], Optional[Exception]], None]


def _completed(result=None, error: Optional[Exception] = None) -> Future:
    """Build an already finished future."""
    future: Future = Future()
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(result)
    return future


class SessionManager:
    """
    Owns client configuration and the current session.

    All reads and writes of the configuration, the session and the in-flight
    refresh happen under one lock. Network work runs on the executor.
    """

    def __init__(
        self,
        config: Optional[SpotifyConfig] = None,
        client: Optional[SpotifyAccountsClient] = None,
        store: Optional[SessionStore] = None,
        executor: Optional[Executor] = None,
        clock: Callable[[], datetime] = datetime.now
    ):
        """
        Initialize session manager.

        Args:
            config: Client configuration (the manager starts unconfigured without it)
            client: Accounts service client used for exchange, refresh and profile
            store: Session persistence; a stored session is restored on startup
            executor: Executor running network calls
            clock: Returns the current time
        """
        self._lock = threading.Lock()
        self._config = config
        self._client = client or SpotifyAccountsClient()
        self._store = store
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=2, thread_name_prefix='spotify-login'
        )
        self._clock = clock
        self._refresh_future: Optional[Future] = None
        self._refreshing: Optional[Session] = None
        self._session: Optional[Session] = store.load() if store else None

        if self._session is not None:
            logger.info(f"Restored session for user {self._session.user.id}")

    @classmethod
    def from_config(cls, app_config: AppConfig, **kwargs) -> 'SessionManager':
        """Build a manager wired from application configuration."""
        client = SpotifyAccountsClient(
            max_retries=app_config.max_retries,
            retry_delay=app_config.retry_delay,
            timeout=app_config.request_timeout
        )
        store = SessionStore(app_config.spotify.token_storage_path)
        return cls(config=app_config.spotify, client=client, store=store, **kwargs)

    # -- configuration -----------------------------------------------------

    def configure(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        show_dialog: bool = False
    ) -> None:
        """
        Set client credentials. An existing session is kept.
        """
        with self._lock:
            if self._config is None:
                config = SpotifyConfig(client_id, client_secret, redirect_uri, show_dialog)
            else:
                config = SpotifyConfig(
                    client_id, client_secret, redirect_uri, show_dialog,
                    token_storage_path=self._config.token_storage_path,
                    scopes=self._config.scopes
                )
            self._config = config
        logger.debug(f"Configured for client {client_id}")

    @property
    def config(self) -> Optional[SpotifyConfig]:
        with self._lock:
            return self._config

    @property
    def is_configured(self) -> bool:
        return self.config is not None

    # -- session accessors -------------------------------------------------

    @property
    def session(self) -> Optional[Session]:
        with self._lock:
            return self._session

    @session.setter
    def session(self, session: Optional[Session]) -> None:
        with self._lock:
            self._set_session(session)

    def _set_session(self, session: Optional[Session]) -> None:
        # Caller holds the lock
        if session is not self._session:
            # An in-flight refresh belongs to the replaced session
            self._refreshing = None
            self._refresh_future = None
        self._session = session
        if self._store is None:
            return
        try:
            if session is None:
                self._store.clear()
            else:
                self._store.save(session)
        except OSError as e:
            logger.warning(f"Continuing with in-memory session only: {e}")

    @property
    def user(self) -> Optional[User]:
        session = self.session
        return session.user if session else None

    @property
    def display_name(self) -> Optional[str]:
        user = self.user
        return user.display_name if user else None

    @property
    def user_id(self) -> Optional[str]:
        user = self.user
        return user.id if user else None

    @property
    def country(self) -> Optional[str]:
        user = self.user
        return user.country if user else None

    # -- authentication URLs -----------------------------------------------

    def url_builder(self) -> URLBuilder:
        """
        URL builder for the current configuration.

        Raises:
            ConfigurationError: If the manager is not configured
        """
        config = self.config
        if config is None:
            raise ConfigurationError("Call configure() before building authentication URLs")
        return URLBuilder(
            config.client_id, config.client_secret, config.redirect_uri, config.show_dialog
        )

    def authentication_url(
        self,
        url_type: AuthenticationURLType = AuthenticationURLType.WEB,
        scopes: Iterable[Scope] = ()
    ) -> str:
        return self.url_builder().authentication_url(url_type, scopes)

    def can_handle_url(self, url: str) -> bool:
        if not self.is_configured:
            return False
        return self.url_builder().can_handle_url(url)

    def handle_url(self, url: str) -> Optional[Future]:
        """
        Complete a login from the redirect URL.

        Args:
            url: Redirect URL received from the browser or the app

        Returns:
            None if the URL is not a redirect for this client, otherwise a
            future resolving to the new session. The future fails with
            ParseError when the redirect carries no code and RefreshError when
            the code exchange fails.
        """
        config = self.config
        if config is None:
            logger.warning("Received a URL before configure() was called, ignoring it")
            return None

        builder = self.url_builder()
        if not builder.can_handle_url(url):
            return None

        parsed = builder.parse(url)
        if parsed.error:
            reason = parsed.error_description or "no authorization code"
            logger.error(f"Authorization failed: {reason}")
            return _completed(error=ParseError(f"Authorization failed: {reason}"))

        return self._executor.submit(self._login, config, parsed.code)

    def _login(self, config: SpotifyConfig, code: str) -> Session:
        try:
            grant = self._client.exchange_code(config, code)
            user = self._client.fetch_profile(grant.access_token)
        except Exception as e:
            logger.error(f"❌ Login failed: {e}")
            raise RefreshError(f"Code exchange failed: {e}") from e

        session = Session(
            user=user,
            access_token=grant.access_token,
            refresh_token=grant.refresh_token or '',
            expiration_date=grant.expiration_date(self._clock())
        )
        with self._lock:
            self._set_session(session)

        logger.info(f"✅ Logged in as {user.display_name or user.id}")
        return session

    # -- tokens ------------------------------------------------------------

    def get_access_token(self, callback: Optional[TokenCallback] = None) -> Future:
        """
        Get a usable access token.

        Returns the cached token while the session is valid and refreshes it
        otherwise. Callers arriving during a refresh share it.

        Args:
            callback: Optional ``callback(token, error)``; exactly one of the
                two arguments is not None

        Returns:
            Future resolving to the access token, or failing with
            SessionError, ConfigurationError or RefreshError
        """
        with self._lock:
            session = self._session
            if session is None:
                future = _completed(error=SessionError("No session, log in first"))
            elif self._config is None:
                # Token is withheld even when still valid
                future = _completed(error=ConfigurationError("Call configure() before requesting tokens"))
            elif session.is_valid(self._clock()):
                future = _completed(session.access_token)
            elif self._refreshing is session and self._refresh_future is not None:
                logger.debug("Joining in-flight token refresh")
                future = self._refresh_future
            else:
                future = self._executor.submit(self._refresh, self._config, session)
                self._refreshing = session
                self._refresh_future = future

        if callback is not None:
            future.add_done_callback(lambda f: callback(*_outcome(f)))
        return future

    def _refresh(self, config: SpotifyConfig, session: Session) -> str:
        try:
            try:
                grant = self._client.refresh(config, session.refresh_token)
                renewed = session.refreshed(
                    access_token=grant.access_token,
                    expiration_date=grant.expiration_date(self._clock()),
                    refresh_token=grant.refresh_token
                )
            except SpotifyLoginError:
                raise
            except Exception as e:
                logger.error(f"❌ Token refresh failed: {e}")
                raise RefreshError(f"Token refresh failed: {e}") from e

            with self._lock:
                # A logout or new login during the refresh wins
                if self._session is session:
                    self._set_session(renewed)
            return renewed.access_token
        finally:
            with self._lock:
                # Only the refresh that is still current clears the in-flight state
                if self._refreshing is session:
                    self._refreshing = None
                    self._refresh_future = None

    def logout(self) -> None:
        """Forget the session. Configuration is kept."""
        with self._lock:
            had_session = self._session is not None
            self._set_session(None)
        if had_session:
            logger.info("Logged out")

    def close(self) -> None:
        """Release the executor if this manager created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=False)


def _outcome(future: Future):
    error = future.exception()
    if error is not None:
        return None, error
    return future.result(), None


# Process-wide instance for the application's composition root
_shared: Optional[SessionManager] = None
_shared_lock = threading.Lock()


def get_shared_manager() -> SessionManager:
    """Get or create the shared session manager."""
    global _shared
    with _shared_lock:
        if _shared is None:
            try:
                app_config = get_config()
            except ValueError as e:
                logger.debug(f"Starting unconfigured: {e}")
                _shared = SessionManager()
            else:
                _shared = SessionManager.from_config(app_config)
        return _shared


def reset_shared_manager() -> None:
    """Drop the shared session manager (useful for testing)."""
    global _shared
    with _shared_lock:
        if _shared is not None:
            _shared.close()
        _shared = None
