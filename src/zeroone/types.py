# zeroone/types.py
"""Request description passed between the client and its auth strategy."""

from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field


class RequestData(BaseModel):
    """One API call, described relative to the client's base URL.

    Attributes:
        method: HTTP method.
        path: Endpoint path relative to the base URL, e.g. ``vistas/x/datos``.
        params: Query parameters.
        json_data: JSON-serializable body.
        headers: Extra headers; the auth strategy adds ``Authorization`` later.
    """

    method: str
    path: str
    params: Mapping[str, Any] | None = None
    json_data: Any | None = None
    headers: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    def url(self, base_url: str) -> str:
        return f"{base_url.rstrip('/')}/{self.path.lstrip('/')}"

    def build_request(self, base_url: str, timeout: float) -> httpx.Request:
        """Build the ``httpx.Request``, carrying `timeout` for ``AsyncClient.send``."""
        return httpx.Request(
            method=self.method.upper(),
            url=self.url(base_url),
            params=self.params,
            json=self.json_data,
            headers=self.headers,
            extensions={"timeout": httpx.Timeout(timeout).as_dict()},
        )
