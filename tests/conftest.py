# tests/conftest.py
import base64
import json
import re
import time

import pytest

from zeroone.auth import SessionAuth
from zeroone.client import ZeroOneClient
from zeroone.config import ApiSettings

BASE_URL = "https://api.example.com/api"
LOGIN_URL = f"{BASE_URL}/auth/login"


def view_url(path: str) -> re.Pattern[str]:
    """Match a view endpoint URL with any query string."""
    return re.compile(rf"{re.escape(BASE_URL)}/{re.escape(path)}(\?.*)?$")


@pytest.fixture
def make_token():
    """Build an unsigned JWT carrying the given claims."""

    def _b64(data: dict) -> str:
        raw = json.dumps(data).encode("utf-8")
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")

    def _make(claims: dict) -> str:
        return f"{_b64({'alg': 'HS256', 'typ': 'JWT'})}.{_b64(claims)}.signature"

    return _make


@pytest.fixture
def valid_token(make_token) -> str:
    return make_token({"exp": int(time.time()) + 3600, "sub": "user"})


@pytest.fixture
def expired_token(make_token) -> str:
    return make_token({"exp": int(time.time()) - 60, "sub": "user"})


@pytest.fixture
def settings(monkeypatch) -> ApiSettings:
    """Settings isolated from the environment and any local .env file."""
    for var in ("ZEROONE_EMAIL", "ZEROONE_PASSWORD", "ZEROONE_COMPANY_ID"):
        monkeypatch.delenv(var, raising=False)
    return ApiSettings(
        _env_file=None,
        base_url=BASE_URL,
        email="user@example.com",
        password="secret",
        company_id="42",
    )


@pytest.fixture
def client(settings) -> ZeroOneClient:
    """A client with no session yet; its first request logs in."""
    return ZeroOneClient(settings=settings)


@pytest.fixture
def logged_in_client(client, valid_token) -> ZeroOneClient:
    """A client already holding a token that is valid for an hour."""
    assert isinstance(client.auth_strategy, SessionAuth)
    client.auth_strategy._access_token = valid_token
    return client
