"""Tests for the authentication strategies and session handling."""

import asyncio
import base64
import json
import time
from unittest.mock import patch

import httpx
from loguru import logger
from pydantic import ValidationError as PydanticValidationError
import pytest

from zeroone.auth import SessionAuth, StaticTokenAuth, decode_token_claims
from zeroone.exceptions import AuthError, ConfigurationError
from zeroone.models import Credentials

from .conftest import LOGIN_URL

CREDENTIALS = Credentials(email="user@example.com", password="secret", company_id="42")

# Valid base64 whose JSON is too deeply nested for the parser
DEEPLY_NESTED_TOKEN = "e30.{}.sig".format(
    base64.urlsafe_b64encode(b"[" * 100_000 + b"]" * 100_000).rstrip(b"=").decode()
)


@pytest.fixture
def session_auth() -> SessionAuth:
    return SessionAuth(CREDENTIALS, login_url=LOGIN_URL)


@pytest.fixture
def log_messages():
    """Collect messages logged at WARNING level or above."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(str(m)), level="WARNING")
    yield messages
    logger.remove(handler_id)


def test_static_token_auth_init_no_token():
    """Test StaticTokenAuth raises ConfigurationError if no token is provided."""
    with pytest.raises(
        ConfigurationError, match="StaticTokenAuth requires a non-empty 'token'."
    ):
        StaticTokenAuth(token="")
    with pytest.raises(ConfigurationError):
        StaticTokenAuth(token=None)


def test_static_token_auth_rejects_unusable_tokens(make_token):
    with pytest.raises(ConfigurationError, match="not a JWT"):
        StaticTokenAuth(token="test_token")
    with pytest.raises(ConfigurationError, match="no 'exp' claim"):
        StaticTokenAuth(token=make_token({"sub": "user"}))


@pytest.mark.asyncio
async def test_static_token_auth_authenticate(valid_token):
    auth = StaticTokenAuth(token=valid_token)
    request = httpx.Request("GET", "http://example.com")

    await auth.async_authenticate(request)

    assert request.headers["Authorization"] == f"Bearer {valid_token}"
    assert auth.is_session_valid() is True


@pytest.mark.asyncio
async def test_static_token_auth_warns_near_expiry(make_token, log_messages):
    token = make_token({"exp": int(time.time()) + 10})
    auth = StaticTokenAuth(token=token)
    request = httpx.Request("GET", "http://example.com")

    await auth.async_authenticate(request)

    assert request.headers["Authorization"] == f"Bearer {token}"
    assert auth.is_session_valid() is False
    assert any("will not be renewed" in m for m in log_messages)


@pytest.mark.asyncio
async def test_static_token_auth_refuses_expired_token(expired_token):
    auth = StaticTokenAuth(token=expired_token)
    request = httpx.Request("GET", "http://example.com")

    with pytest.raises(AuthError, match="expired"):
        await auth.async_authenticate(request)
    assert "Authorization" not in request.headers


def test_decode_token_claims_reads_exp(make_token):
    claims = decode_token_claims(make_token({"exp": 1700000000, "sub": "user"}))
    assert claims.exp == 1700000000
    assert claims.expires_at is not None
    assert claims.expires_at.year == 2023


@pytest.mark.parametrize(
    "token",
    [
        "not-a-jwt",
        "a.b",
        "a.!!!.c",
        "eyJhbGciOiJIUzI1NiJ9.bm90IGpzb24.sig",
        pytest.param(DEEPLY_NESTED_TOKEN, id="deeply-nested"),
    ],
)
def test_decode_token_claims_rejects_garbage(token):
    with pytest.raises(ValueError):
        decode_token_claims(token)


def test_session_invalid_without_token(session_auth):
    assert session_auth.access_token is None
    assert session_auth.is_session_valid() is False


def test_session_valid_with_fresh_token(session_auth, valid_token):
    session_auth._access_token = valid_token
    assert session_auth.is_session_valid() is True


def test_session_invalid_with_expired_token(session_auth, expired_token):
    session_auth._access_token = expired_token
    assert session_auth.is_session_valid() is False


def test_session_expiry_margin_boundary(session_auth, make_token):
    """A token is only reused if it outlives now plus the 30 second margin."""
    now = 1_000_000.0
    with patch("zeroone.auth.time.time", return_value=now):
        for exp in (now - 10, now, now + 10, now + 29, now + 30):
            session_auth._access_token = make_token({"exp": exp})
            assert session_auth.is_session_valid() is False, exp
        for exp in (now + 30.5, now + 31, now + 3600):
            session_auth._access_token = make_token({"exp": exp})
            assert session_auth.is_session_valid() is True, exp


def test_session_custom_expiry_margin(make_token):
    auth = SessionAuth(CREDENTIALS, login_url=LOGIN_URL, expiry_margin=0)
    now = 1_000_000.0
    with patch("zeroone.auth.time.time", return_value=now):
        auth._access_token = make_token({"exp": now + 1})
        assert auth.is_session_valid() is True


@pytest.mark.parametrize(
    "claims", [{"sub": "user"}, {"exp": "tomorrow"}, {"exp": None}]
)
def test_session_invalid_with_unusable_exp(session_auth, make_token, claims):
    session_auth._access_token = make_token(claims)
    assert session_auth.is_session_valid() is False


@pytest.mark.parametrize(
    "token",
    ["definitely.not.a-token", pytest.param(DEEPLY_NESTED_TOKEN, id="deeply-nested")],
)
def test_session_invalid_with_undecodable_token(session_auth, token):
    session_auth._access_token = token
    assert session_auth.is_session_valid() is False


@pytest.mark.asyncio
async def test_authenticate_installs_token(session_auth, valid_token, httpx_mock):
    httpx_mock.add_response(
        method="POST",
        url=LOGIN_URL,
        json={"message": "ok", "token": valid_token, "userName": "User"},
    )

    await session_auth.authenticate()

    assert session_auth.access_token == valid_token
    assert session_auth.is_session_valid() is True
    request = httpx_mock.get_request()
    assert json.loads(request.content) == {
        "email": "user@example.com",
        "password": "secret",
        "empresaId": "42",
    }


@pytest.mark.asyncio
async def test_authenticate_replaces_previous_token(
    session_auth, expired_token, valid_token, httpx_mock
):
    session_auth._access_token = expired_token
    httpx_mock.add_response(method="POST", url=LOGIN_URL, json={"token": valid_token})

    await session_auth.authenticate()

    assert session_auth.access_token == valid_token


@pytest.mark.asyncio
async def test_authenticate_rejected_leaves_no_token(session_auth, httpx_mock):
    httpx_mock.add_response(
        method="POST", url=LOGIN_URL, status_code=401, text="Credenciales invalidas"
    )

    with pytest.raises(AuthError, match="Credenciales invalidas"):
        await session_auth.authenticate()

    assert session_auth.access_token is None
    assert session_auth.is_session_valid() is False


@pytest.mark.asyncio
async def test_authenticate_network_error(session_auth, httpx_mock):
    httpx_mock.add_exception(httpx.ConnectError("Network unreachable"), url=LOGIN_URL)

    with pytest.raises(AuthError, match="Network unreachable"):
        await session_auth.authenticate()
    assert session_auth.access_token is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        b'{"message": "ok"}',
        b'{"message": "ok", "token": ""}',
        b"null",
        b"<html>gateway</html>",
    ],
)
async def test_authenticate_without_usable_token(session_auth, httpx_mock, body):
    httpx_mock.add_response(method="POST", url=LOGIN_URL, content=body)

    with pytest.raises(AuthError):
        await session_auth.authenticate()
    assert session_auth.access_token is None


@pytest.mark.asyncio
async def test_async_authenticate_logs_in_when_needed(
    session_auth, valid_token, httpx_mock
):
    httpx_mock.add_response(method="POST", url=LOGIN_URL, json={"token": valid_token})

    request = httpx.Request("GET", "http://example.com")
    await session_auth.async_authenticate(request)

    assert request.headers["Authorization"] == f"Bearer {valid_token}"


@pytest.mark.asyncio
async def test_async_authenticate_reuses_valid_token(session_auth, valid_token):
    session_auth._access_token = valid_token

    with patch.object(session_auth, "_login") as mock_login:
        request = httpx.Request("GET", "http://example.com")
        await session_auth.async_authenticate(request)
        mock_login.assert_not_called()

    assert request.headers["Authorization"] == f"Bearer {valid_token}"


@pytest.mark.asyncio
async def test_concurrent_requests_share_one_login(
    session_auth, valid_token, httpx_mock
):
    """Several tasks that find no session trigger a single login exchange."""
    httpx_mock.add_response(method="POST", url=LOGIN_URL, json={"token": valid_token})

    requests = [httpx.Request("GET", f"http://example.com/{i}") for i in range(5)]
    await asyncio.gather(*(session_auth.async_authenticate(r) for r in requests))

    assert len(httpx_mock.get_requests(url=LOGIN_URL)) == 1
    assert all(r.headers["Authorization"] == f"Bearer {valid_token}" for r in requests)


@pytest.mark.asyncio
async def test_session_auth_close_owned_client(session_auth):
    session_auth._token_client = httpx.AsyncClient()
    with patch.object(session_auth._token_client, "aclose") as mock_aclose:
        await session_auth.async_close()
        mock_aclose.assert_called_once()
    assert session_auth._token_client is None


@pytest.mark.asyncio
async def test_session_auth_does_not_close_injected_client():
    http_client = httpx.AsyncClient()
    auth = SessionAuth(CREDENTIALS, login_url=LOGIN_URL, http_client=http_client)
    await auth.async_close()
    assert not http_client.is_closed
    await http_client.aclose()


def test_session_auth_requires_login_url():
    with pytest.raises(ConfigurationError):
        SessionAuth(CREDENTIALS, login_url="")


def test_credentials_are_frozen():
    with pytest.raises(PydanticValidationError):
        CREDENTIALS.email = "other@example.com"  # type: ignore[misc]
    assert "secret" not in repr(CREDENTIALS)


@pytest.mark.asyncio
async def test_session_auth_own_login_client_sends_user_agent(valid_token, httpx_mock):
    auth = SessionAuth(CREDENTIALS, login_url=LOGIN_URL, user_agent="zeroone-test/1.0")
    httpx_mock.add_response(method="POST", url=LOGIN_URL, json={"token": valid_token})

    await auth.authenticate()

    assert httpx_mock.get_request().headers["User-Agent"] == "zeroone-test/1.0"
    await auth.async_close()
