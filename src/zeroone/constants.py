"""Constants used throughout the zeroone library.

This module defines the API base URL, endpoint path templates and default
client settings.
"""

ZEROONE_API_BASE_URL = "https://api.zeroone.la/api"

# Endpoint path templates, relative to the base URL
LOGIN_PATH = "auth/login"
VIEW_PATH = "vistas/{view_id}"
VIEW_DATA_PATH = "vistas/{view_id}/datos"
VIEW_BULK_LOAD_PATH = "vistas/{view_id}/carga-masiva-datos"

# Default settings
DEFAULT_TIMEOUT: float = 30.0  # Default request timeout in seconds
DEFAULT_AUTH_TIMEOUT: float = 15.0  # Timeout for the login exchange
DEFAULT_SESSION_EXPIRY_MARGIN: int = 30  # Seconds a token must outlive "now"
DEFAULT_PAGE_SIZE: int = 20
ITERATE_PAGE_SIZE: int = 100

ZEROONE_VERSION: str = "0.1.0"
DEFAULT_USER_AGENT: str = f"zeroone/{ZEROONE_VERSION}"
