"""Exception hierarchy for the zeroone library.

::

    ZeroOneError
    ├── APIError             non-success status
    │   └── NotFoundError    404
    ├── DecodeError          body does not match the expected shape
    ├── TransportError       the request never produced a response
    │   ├── TimeoutError
    │   ├── NetworkError
    │   └── ZeroOneRequestError
    ├── ConfigurationError
    ├── AuthError            login failed; never absorbed by view operations
    └── ValidationError      invalid arguments, raised before sending
"""

import httpx


def _request_url(
    response: httpx.Response | None, request: httpx.Request | None
) -> httpx.URL | None:
    if response is not None:
        try:
            return response.request.url
        except RuntimeError:  # Response built without a request
            pass
    return request.url if request is not None else None


class ZeroOneError(Exception):
    """Base exception class for all zeroone errors.

    Args:
        message: The error message.
        response: The response that triggered the error, if any.
        request: The request that triggered the error, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        response: httpx.Response | None = None,
        request: httpx.Request | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.response = response
        self.request = request

    def __str__(self) -> str:
        url = _request_url(self.response, self.request)
        details = []
        if self.response is not None:
            details.append(f"Status: {self.response.status_code}")
        if url is not None:
            details.append(f"URL: {url}")
        if not details:
            return self.message
        return f"{self.message} ({', '.join(details)})"


class APIError(ZeroOneError):
    """The API answered with a 4xx or 5xx status."""

    @property
    def status_code(self) -> int | None:
        return self.response.status_code if self.response is not None else None

    @property
    def body(self) -> str:
        """The raw response body, or an empty string if none is attached."""
        return self.response.text if self.response is not None else ""


class NotFoundError(APIError):
    """The view or endpoint does not exist (404)."""


class DecodeError(ZeroOneError):
    """A response body does not match the expected shape."""


class TransportError(ZeroOneError):
    """The request failed before any response was received."""

    def __init__(self, message: str, *, request: httpx.Request | None = None):
        super().__init__(message, request=request)


class TimeoutError(TransportError):
    """The request did not complete within the configured timeout."""


class NetworkError(TransportError):
    """Connection-level failure, e.g. DNS resolution or connection refused."""


class ZeroOneRequestError(TransportError):
    """Any other transport failure reported by httpx."""


class ConfigurationError(ZeroOneError):
    """Missing or inconsistent client configuration."""

    def __init__(self, message: str):
        super().__init__(message)


class AuthError(ZeroOneError):
    """The login exchange failed or yielded no usable token."""


class ValidationError(ZeroOneError):
    """Invalid arguments detected client-side, before any request is sent."""
