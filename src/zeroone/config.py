# zeroone/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_AUTH_TIMEOUT,
    DEFAULT_SESSION_EXPIRY_MARGIN,
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    ZEROONE_API_BASE_URL,
)


class ApiSettings(BaseSettings):
    """
    Manages user-configurable settings for the ZeroOne client, loaded from
    environment variables (prefixed with 'ZEROONE_') or a .env/secrets.env file.

    Credentials are optional here because they can also be passed directly
    to ``ZeroOneClient``.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "secrets.env"),  # Look in both .env and secrets.env
        env_file_encoding="utf-8",
        env_prefix="ZEROONE_",
        extra="ignore",  # Ignore extra fields found in environment
        case_sensitive=False,
    )

    # --- Connection Settings ---
    base_url: str = Field(
        default=ZEROONE_API_BASE_URL, description="Base URL of the ZeroOne API"
    )
    request_timeout: float = Field(
        default=DEFAULT_TIMEOUT, gt=0, description="Default request timeout in seconds"
    )
    auth_timeout: float = Field(
        default=DEFAULT_AUTH_TIMEOUT,
        gt=0,
        description="Timeout in seconds for the login exchange",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent header for requests",
    )

    # --- Session Settings ---
    session_expiry_margin: int = Field(
        default=DEFAULT_SESSION_EXPIRY_MARGIN,
        ge=0,
        description="Seconds a token must remain valid beyond now to be reused",
    )

    # --- Credentials ---
    email: str | None = Field(default=None, description="ZeroOne account email")
    password: str | None = Field(default=None, description="ZeroOne account password")
    company_id: str | None = Field(
        default=None, description="ZeroOne company (empresa) id"
    )


# Create a single, cached instance of settings
@lru_cache
def get_settings() -> ApiSettings:
    """
    Provides access to the application settings.

    Settings are loaded from environment variables (prefixed with 'ZEROONE_')
    or .env/secrets.env files. The instance is cached for performance.

    Returns:
        ApiSettings: The application settings instance.
    """
    return ApiSettings()
