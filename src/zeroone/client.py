"""Asynchronous HTTP client for the ZeroOne API.

This module provides the ZeroOneClient class, which owns the HTTP transport,
resolves credentials into an authentication strategy, applies that strategy
to every request, and maps transport failures onto the zeroone exception
hierarchy. Typed view operations live in ``zeroone.resources``.
"""

from collections.abc import Mapping
from http import HTTPStatus
from typing import Any, Self

import httpx
from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from .auth import AuthStrategy, SessionAuth, StaticTokenAuth
from .config import ApiSettings, get_settings
from .endpoints import login_path
from .exceptions import (
    APIError,
    AuthError,
    ConfigurationError,
    DecodeError,
    NetworkError,
    NotFoundError,
    TimeoutError,
    ZeroOneRequestError,
)
from .log_config import logger
from .models import Credentials
from .resources import ViewsClient
from .transport import create_http_client
from .types import RequestData


class ZeroOneClient:
    """Asynchronous client for the ZeroOne business-data API.

    Authentication is resolved once at construction:
    - If `auth_strategy` is explicitly provided, it is used.
    - Otherwise a `SessionAuth` is built from `email`, `password` and
      `company_id`. Values passed to the constructor take precedence over
      those found in `settings` (environment variables or .env files).

    Typical usage:
    ```python
    async with ZeroOneClient(email="me@example.com", password="...", company_id="42") as client:
        page = await client.views.fetch_view("actividades", Activity, page_number=1, page_size=50)
    ```

    Attributes:
        views (ViewsClient): Typed operations on views.
        _settings (ApiSettings): The resolved settings for this client instance.
        _base_url (str): The base URL for API requests.
        _auth_strategy (AuthStrategy): Strategy applied to every request.
        _http_client (httpx.AsyncClient): The underlying transport.
        _should_close_client (bool): Whether this instance owns `_http_client`.
    """

    def __init__(
        self,
        settings: ApiSettings | None = None,
        auth_strategy: AuthStrategy | None = None,
        *,
        email: str | None = None,
        password: str | None = None,
        company_id: str | None = None,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initializes the ZeroOneClient.

        Args:
            settings: An optional `ApiSettings` instance. If `None`, global settings
                are loaded via `zeroone.config.get_settings()`.
            auth_strategy: An optional explicit `AuthStrategy` instance. If provided,
                it overrides credential-based authentication.
            email: Account email, overriding `settings.email`.
            password: Account password, overriding `settings.password`.
            company_id: Company id, overriding `settings.company_id`.
            base_url: Overrides `settings.base_url`.
            http_client: Optional pre-configured httpx.AsyncClient instance. It is
                not closed by `aclose()`.

        Raises:
            ConfigurationError: If no `auth_strategy` is given and the
                credentials are incomplete.
        """
        self._settings: ApiSettings = (
            settings if settings is not None else get_settings()
        )
        self._base_url: str = (base_url or self._settings.base_url).rstrip("/")

        credentials = (
            None
            if auth_strategy is not None
            else self._resolve_credentials(email, password, company_id)
        )

        self._should_close_client = http_client is None  # Close only if we created it
        self._http_client = http_client or self._create_default_http_client()

        if credentials is None:
            logger.info(
                f"Using explicitly provided authentication strategy: {type(auth_strategy).__name__}"
            )
            self._auth_strategy: AuthStrategy = auth_strategy
        else:
            # Logins go through the same transport as API calls
            self._auth_strategy = SessionAuth(
                credentials,
                login_url=f"{self._base_url}/{login_path()}",
                expiry_margin=self._settings.session_expiry_margin,
                timeout=self._settings.auth_timeout,
                user_agent=self._settings.user_agent,
                http_client=self._http_client,
            )
            logger.info(f"Using session authentication for {credentials.email}.")

        self._views = ViewsClient(api_client=self)
        logger.debug("ZeroOneClient initialized.")

    def _resolve_credentials(
        self, email: str | None, password: str | None, company_id: str | None
    ) -> Credentials:
        _email = email or self._settings.email
        _password = password or self._settings.password
        _company_id = company_id or self._settings.company_id
        missing = [
            name
            for name, value in (
                ("email", _email),
                ("password", _password),
                ("company_id", _company_id),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"ZeroOneClient requires credentials; missing: {', '.join(missing)}."
            )
        return Credentials(email=_email, password=_password, company_id=_company_id)

    def _create_default_http_client(self) -> httpx.AsyncClient:
        """Create the certifi-verified transport this client owns."""
        return create_http_client(
            timeout=self._settings.request_timeout,
            user_agent=self._settings.user_agent,
            base_url=self._base_url,
        )

    @property
    def views(self) -> ViewsClient:
        """Provides access to the ViewsClient for view operations."""
        return self._views

    @property
    def auth_strategy(self) -> AuthStrategy:
        return self._auth_strategy

    @property
    def is_authenticated(self) -> bool:
        """True if the auth strategy currently holds a token it would reuse.

        Always False for strategies that hold no token of their own.
        """
        if isinstance(self._auth_strategy, SessionAuth | StaticTokenAuth):
            return self._auth_strategy.is_session_valid()
        return False

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any | None = None,
    ) -> httpx.Response:
        """Send one authenticated request to the given API path.

        The auth strategy runs first; an `AuthError` aborts before the request
        is sent.

        Args:
            method: HTTP method (GET, POST, etc.).
            path: Request path relative to the base URL.
            params: Query parameters.
            json: JSON-serializable request body.

        Returns:
            httpx.Response: The successful (2xx/3xx) response.

        Raises:
            AuthError: If authentication fails.
            NotFoundError: For 404 responses.
            APIError: For other 4xx/5xx responses.
            TimeoutError: If the request times out.
            NetworkError: For connection-level errors.
            ZeroOneRequestError: For other transport errors.
        """
        request_data = RequestData(
            method=method,
            path=path,
            params=params,
            json_data=json,
            headers={"User-Agent": self._settings.user_agent},
        )
        request = request_data.build_request(
            self._base_url, self._settings.request_timeout
        )

        try:
            await self._auth_strategy.async_authenticate(request)
        except AuthError as e:
            logger.error(f"Authentication failed before request: {e}")
            raise

        logger.debug(f"Sending request: {request.method} {request.url}")
        if request.content:
            logger.trace(f"Request Body: {request.content.decode()}")

        try:
            response = await self._http_client.send(request)
        except httpx.TimeoutException as e:
            logger.error(f"Request timed out: {request.url}")
            raise TimeoutError("Request timed out", request=request) from e
        except httpx.NetworkError as e:
            logger.error(f"Network error occurred for {request.url}: {e}")
            raise NetworkError(
                f"Network error for {request.url}: {e}", request=request
            ) from e
        except httpx.RequestError as e:
            logger.error(f"HTTP request error for {request.url}: {e}")
            raise ZeroOneRequestError(
                f"HTTP request error for {request.url}: {e}", request=request
            ) from e

        logger.debug(f"Received response: {response.status_code} for {request.url}")
        logger.trace(f"Response Body: {response.text}")

        if response.status_code >= HTTPStatus.BAD_REQUEST:
            error_cls = (
                NotFoundError
                if response.status_code == HTTPStatus.NOT_FOUND
                else APIError
            )
            raise error_cls(
                f"API request failed with status {response.status_code}",
                response=response,
                request=request,
            )
        return response

    def decode(self, response: httpx.Response, model: Any) -> Any:
        """Validate a response body against a type understood by pydantic.

        Args:
            response: A successful response.
            model: The expected type, e.g. ``list[Project]`` or ``ViewResponse[Activity]``.

        Raises:
            DecodeError: If the body is not valid JSON or does not match `model`.
        """
        try:
            return TypeAdapter(model).validate_json(response.content)
        except PydanticValidationError as e:
            raise DecodeError(
                f"Response body does not match {getattr(model, '__name__', model)}: {e}",
                response=response,
            ) from e

    async def aclose(self) -> None:
        """Close the underlying HTTP client and any auth-specific clients."""
        if (
            self._should_close_client
            and self._http_client
            and not self._http_client.is_closed
        ):
            await self._http_client.aclose()
            logger.info(f"ZeroOneClient internal HTTP client closed. Client ID: {id(self)}.")
        await self._auth_strategy.async_close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Exit the async context manager and clean up resources."""
        await self.aclose()


__all__ = ["ZeroOneClient"]
