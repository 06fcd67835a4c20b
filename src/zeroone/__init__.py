"""zeroone: an asynchronous Python client for the ZeroOne business-data API.

The client logs in with email, password and company id, keeps the issued
bearer token in memory and renews it shortly before it expires. Records are
read and written through generic view operations whose record type is chosen
by the caller.
"""

__version__ = "0.1.0"

from .auth import AuthStrategy, SessionAuth, StaticTokenAuth
from .client import ZeroOneClient
from .config import ApiSettings, get_settings
from .exceptions import (
    APIError,
    AuthError,
    ConfigurationError,
    DecodeError,
    NetworkError,
    NotFoundError,
    TimeoutError,
    TransportError,
    ValidationError,
    ZeroOneError,
    ZeroOneRequestError,
)
from .log_config import configure_logging
from .models import (
    Activity,
    Client,
    Credentials,
    ListsResponse,
    Project,
    ViewResponse,
)
from .resources import ViewsClient

__all__ = [
    "__version__",
    # Client
    "ZeroOneClient",
    "ViewsClient",
    "ApiSettings",
    "get_settings",
    "configure_logging",
    # Authentication
    "AuthStrategy",
    "SessionAuth",
    "StaticTokenAuth",
    # Exceptions
    "ZeroOneError",
    "APIError",
    "AuthError",
    "ConfigurationError",
    "DecodeError",
    "NetworkError",
    "NotFoundError",
    "TimeoutError",
    "TransportError",
    "ValidationError",
    "ZeroOneRequestError",
    # Models
    "Activity",
    "Client",
    "Credentials",
    "ListsResponse",
    "Project",
    "ViewResponse",
]
