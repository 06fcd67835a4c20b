"""Construction of the httpx transport shared by API calls and logins."""

import ssl

import certifi
import httpx

from .log_config import logger


def create_http_client(
    timeout: float, user_agent: str, base_url: str = ""
) -> httpx.AsyncClient:
    """Create an httpx.AsyncClient verifying TLS against the certifi bundle.

    Args:
        timeout: Default timeout in seconds for every request.
        user_agent: Value of the ``User-Agent`` header.
        base_url: Optional base URL for relative request paths.

    Returns:
        httpx.AsyncClient: Configured HTTP client. The caller owns it.
    """
    try:
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        verify_ssl: ssl.SSLContext | bool = ssl_context
        logger.debug("Using certifi SSL context.")
    except (OSError, ssl.SSLError):
        verify_ssl = True
        logger.warning("certifi bundle failed to load. Using default SSL verification.")

    return httpx.AsyncClient(
        base_url=base_url,
        timeout=timeout,
        verify=verify_ssl,
        headers={"User-Agent": user_agent},
    )
