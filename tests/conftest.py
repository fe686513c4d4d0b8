"""Shared test fixtures for the spotify-login test suite.

Fixtures
--------
- ``clock``: a controllable clock to pass as ``SessionManager(clock=...)``.
- ``make_user`` / ``make_session``: factories for value objects.
- ``accounts_client``: a ``MagicMock`` standing in for the network client.
- ``executor``: a real thread pool, shut down after the test.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest

from spotify_login.auth.session import Session, User
from spotify_login.clients.accounts_api import TokenGrant
from spotify_login.config import reset_config


NOW = datetime(2024, 5, 1, 12, 0, 0)


class FakeClock:
    """Callable clock whose time only moves when told to."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def make_user():
    def factory(
        country="US",
        display_name="FakeUser",
        filter_enabled=True,
        profile_url="https://open.spotify.com/user/fakeuser",
        number_of_followers=20,
        endpoint_url="https://api.spotify.com/v1/users/fakeuser",
        id="12345",
    ):
        return User(
            country=country,
            display_name=display_name,
            filter_enabled=filter_enabled,
            profile_url=profile_url,
            number_of_followers=number_of_followers,
            endpoint_url=endpoint_url,
            id=id,
        )

    return factory


@pytest.fixture()
def make_session(make_user):
    def factory(access_token="accessToken", refresh_token="refreshToken", expiration_date=None, user=None):
        return Session(
            user=user or make_user(),
            access_token=access_token,
            refresh_token=refresh_token,
            expiration_date=expiration_date or datetime.max,
        )

    return factory


@pytest.fixture()
def accounts_client(make_user):
    client = MagicMock()
    client.refresh.return_value = TokenGrant("newToken", None, 3600)
    client.exchange_code.return_value = TokenGrant("codeToken", "codeRefresh", 3600)
    client.fetch_profile.return_value = make_user()
    return client


@pytest.fixture()
def executor():
    pool = ThreadPoolExecutor(max_workers=4)
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture(autouse=True)
def _clean_singletons(monkeypatch):
    """Keep configuration and shared manager singletons from leaking between tests."""
    from spotify_login.auth import reset_shared_manager

    for var in ("CLIENT_ID", "CLIENT_SECRET", "REDIRECT_URI", "TOKEN_PATH", "SHOW_DIALOG"):
        monkeypatch.delenv(var, raising=False)
    reset_config()
    reset_shared_manager()
    yield
    reset_shared_manager()
    reset_config()
