"""Authentication strategies for the ZeroOne API.

Every ZeroOne endpoint except ``auth/login`` expects ``Authorization: Bearer
<token>``, where the token is a JWT issued by the login endpoint. Two
strategies provide it:

- ``SessionAuth`` logs in with the account credentials and logs in again
  whenever the held token is about to expire.
- ``StaticTokenAuth`` attaches a token obtained elsewhere and refuses to use
  it once it has expired.
"""

import asyncio
import base64
import json
import time
from typing import Protocol

import httpx
from pydantic import ValidationError as PydanticValidationError

from .constants import (
    DEFAULT_AUTH_TIMEOUT,
    DEFAULT_SESSION_EXPIRY_MARGIN,
    DEFAULT_USER_AGENT,
)
from .exceptions import AuthError, ConfigurationError
from .log_config import logger
from .models import Credentials, LoginResponse, TokenClaims
from .transport import create_http_client


class AuthStrategy(Protocol):
    """What ``ZeroOneClient`` needs from an authentication strategy."""

    async def async_authenticate(self, request: httpx.Request) -> None:
        """Set the ``Authorization`` header on `request`.

        Raises:
            AuthError: If no usable token can be obtained.
        """
        ...

    async def async_close(self) -> None:
        """Release any transport the strategy owns. Must be idempotent."""
        ...


def decode_token_claims(token: str) -> TokenClaims:
    """Decode the payload of a JWT without verifying its signature.

    The token was issued to this client by the login endpoint and only its
    expiry is read, for bookkeeping. Do not use this to trust third-party
    tokens.

    Raises:
        ValueError: If the token is not a three-part JWT or its payload is not
            a JSON object (covers base64, UTF-8, JSON and validation failures,
            including payloads nested too deeply to parse).
    """
    parts = token.split(".")
    if len(parts) != 3:  # noqa: PLR2004
        raise ValueError("Invalid JWT format")
    payload_b64 = parts[1]
    padding = "=" * (-len(payload_b64) % 4)
    try:
        payload = json.loads(
            base64.urlsafe_b64decode(payload_b64 + padding).decode("utf-8")
        )
    except RecursionError as e:
        raise ValueError("JWT payload is nested too deeply") from e
    return TokenClaims.model_validate(payload)


def token_outlives(token: str | None, margin: float) -> bool:
    """Return True if `token` carries an ``exp`` later than now plus `margin`.

    A missing or undecodable token, or one without ``exp``, yields False.
    Never raises.
    """
    if token is None:
        return False
    try:
        claims = decode_token_claims(token)
    except ValueError as e:
        logger.debug(f"Token could not be decoded: {e}")
        return False
    if claims.exp is None:
        logger.debug("Token has no 'exp' claim.")
        return False
    return time.time() + margin < claims.exp


class StaticTokenAuth:
    """Implements AuthStrategy with a pre-issued ZeroOne access token.

    The token is never renewed. Requests made while it is still valid but
    within `expiry_margin` seconds of expiring log a warning; once it has
    expired, requests fail with ``AuthError`` before being sent.
    """

    def __init__(
        self, token: str | None, *, expiry_margin: int = DEFAULT_SESSION_EXPIRY_MARGIN
    ):
        if not token:
            raise ConfigurationError("StaticTokenAuth requires a non-empty 'token'.")
        try:
            claims = decode_token_claims(token)
        except ValueError as e:
            raise ConfigurationError(f"StaticTokenAuth token is not a JWT: {e}") from e
        if claims.exp is None:
            raise ConfigurationError("StaticTokenAuth token has no 'exp' claim.")
        self._token: str = token
        self._claims = claims
        self._expiry_margin = expiry_margin
        logger.debug(f"StaticTokenAuth initialized; token expires at {claims.expires_at}.")

    @property
    def access_token(self) -> str:
        return self._token

    def is_session_valid(self) -> bool:
        return token_outlives(self._token, self._expiry_margin)

    async def async_authenticate(self, request: httpx.Request) -> None:
        """Attach the token, refusing one that has already expired.

        Raises:
            AuthError: If the token's ``exp`` is in the past.
        """
        if not token_outlives(self._token, 0):
            raise AuthError(
                f"Pre-issued token expired at {self._claims.expires_at}; "
                "log in again or use SessionAuth."
            )
        if not self.is_session_valid():
            logger.warning(
                f"Pre-issued token expires at {self._claims.expires_at} and will not be renewed."
            )
        request.headers["Authorization"] = f"Bearer {self._token}"

    async def async_close(self) -> None:
        """StaticTokenAuth owns no transport."""


class SessionAuth:
    """Implements AuthStrategy by logging in with email, password and company id.

    Holds a single access token. Before each request the token's ``exp``
    claim is checked; if the token is missing or expires within
    ``expiry_margin`` seconds, a new login exchange is performed and the new
    token replaces the old one for every later request.

    The login path is guarded by an ``asyncio.Lock`` so concurrent requests
    that all find the session invalid share one exchange.

    Attributes:
        _credentials: Login credentials, fixed for the lifetime of the strategy.
        _login_url: Absolute URL of the login endpoint.
        _expiry_margin: Seconds a token must outlive "now" to be reused.
        _access_token: The currently held token, or None.
        _token_client: The httpx.AsyncClient used for the login exchange.
        _auth_lock: Serializes login exchanges.
    """

    def __init__(
        self,
        credentials: Credentials,
        login_url: str,
        *,
        expiry_margin: int = DEFAULT_SESSION_EXPIRY_MARGIN,
        timeout: float = DEFAULT_AUTH_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Args:
            credentials: Account credentials sent to the login endpoint.
            login_url: Absolute URL of ``auth/login``.
            expiry_margin: Seconds a token must outlive "now" to be reused.
            timeout: Timeout in seconds for the login exchange.
            user_agent: ``User-Agent`` for a login client created here.
            http_client: Transport for the login exchange, usually the one
                ``ZeroOneClient`` sends API calls through. Not closed by
                `async_close`. If omitted, a certifi-verified client is
                created on first login and owned by this strategy.
        """
        if not login_url:
            raise ConfigurationError("SessionAuth requires a 'login_url'.")
        self._credentials = credentials
        self._login_url = login_url
        self._expiry_margin = expiry_margin
        self._timeout = timeout
        self._user_agent = user_agent
        self._access_token: str | None = None
        self._should_close_client = http_client is None
        self._token_client: httpx.AsyncClient | None = http_client
        self._auth_lock = asyncio.Lock()
        logger.debug("SessionAuth initialized.")

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def access_token(self) -> str | None:
        """The token currently attached to requests, if any."""
        return self._access_token

    def is_session_valid(self) -> bool:
        """Return True if the held token can start a request right now.

        The token must carry an ``exp`` claim later than the current time plus
        the expiry margin. A missing or undecodable token counts as invalid;
        this method never raises.
        """
        return token_outlives(self._access_token, self._expiry_margin)

    async def _get_token_client(self) -> httpx.AsyncClient:
        """Lazily creates the login client when none was injected."""
        if self._token_client is None:
            self._token_client = create_http_client(self._timeout, self._user_agent)
        return self._token_client

    async def _login(self) -> str:
        """Exchange the credentials for a new token and install it.

        Must be called with ``_auth_lock`` held.

        Returns:
            The newly installed access token.

        Raises:
            AuthError: If the exchange fails or returns no token.
        """
        logger.info(f"Logging in to {self._login_url}")
        client = await self._get_token_client()
        try:
            response = await client.post(
                self._login_url,
                json=self._credentials.model_dump(by_alias=True),
                timeout=self._timeout,
            )
        except httpx.RequestError as e:
            logger.error(f"Error during login request: {e}")
            raise AuthError(f"Login request failed: {e}") from e

        if not response.is_success:
            logger.error(
                f"Login rejected with status {response.status_code}: {response.text}"
            )
            raise AuthError(f"Login failed: {response.text}", response=response)

        try:
            login_response = LoginResponse.model_validate_json(response.content)
        except PydanticValidationError as e:
            logger.error(f"Could not decode login response: {e}")
            raise AuthError("Login response could not be decoded.", response=response) from e

        if not login_response.token:
            raise AuthError(
                "Login succeeded but no token was returned.", response=response
            )

        self._access_token = login_response.token
        logger.info(
            f"Logged in as {login_response.user_name or self._credentials.email}."
        )
        return login_response.token

    async def authenticate(self) -> None:
        """Log in unconditionally and replace the held token.

        Raises:
            AuthError: If the exchange fails. The held token is left unchanged.
        """
        async with self._auth_lock:
            await self._login()

    async def ensure_session(self) -> str:
        """Return a usable token, logging in first if the session is invalid."""
        token = self._access_token
        if token is not None and self.is_session_valid():
            return token
        async with self._auth_lock:
            # Another task may have logged in while we waited for the lock
            token = self._access_token
            if token is not None and self.is_session_valid():
                return token
            return await self._login()

    async def async_authenticate(self, request: httpx.Request) -> None:
        """Ensures a valid session and adds the Authorization header."""
        logger.trace("Authenticating request using SessionAuth.")
        token = await self.ensure_session()
        request.headers["Authorization"] = f"Bearer {token}"

    async def async_close(self) -> None:
        """Closes the login client if this strategy created it."""
        if self._should_close_client and self._token_client:
            await self._token_client.aclose()
            self._token_client = None
            logger.debug("SessionAuth internal client closed.")
