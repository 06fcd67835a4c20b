"""Defines ZeroOne API endpoint paths and the paged query parameter model.

Paths are relative to the configured base URL. View ids are opaque strings
chosen by the API, so they are percent-encoded before being placed in a path.
"""

from typing import Any
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    DEFAULT_PAGE_SIZE,
    LOGIN_PATH,
    VIEW_BULK_LOAD_PATH,
    VIEW_DATA_PATH,
    VIEW_PATH,
)
from .exceptions import ValidationError


def _encode_view_id(view_id: str) -> str:
    if not view_id or not view_id.strip():
        raise ValidationError("view_id must be a non-empty string.")
    return quote(view_id, safe="")


def login_path() -> str:
    return LOGIN_PATH


def view_path(view_id: str) -> str:
    """Path of a view's base endpoint, used for single-record creation."""
    return VIEW_PATH.format(view_id=_encode_view_id(view_id))


def view_data_path(view_id: str) -> str:
    """Path of a view's paged data endpoint."""
    return VIEW_DATA_PATH.format(view_id=_encode_view_id(view_id))


def view_bulk_load_path(view_id: str) -> str:
    """Path of a view's bulk load endpoint."""
    return VIEW_BULK_LOAD_PATH.format(view_id=_encode_view_id(view_id))


class ViewQuery(BaseModel):
    """Query parameters for one page of a view.

    Attributes:
        page_number: 1-based page index (``pageNumber``).
        page_size: Records per page (``pageSize``).
        sort_by_date: Order by date (``O_Fecha``).
        sort_by_project: Order by project (``O_Proyecto``).
        sort_by_user: Order by user (``O_Usuario``).
    """

    page_number: int = Field(default=1, ge=1, alias="pageNumber")
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, alias="pageSize")
    sort_by_date: bool = Field(default=False, alias="O_Fecha")
    sort_by_project: bool = Field(default=False, alias="O_Proyecto")
    sort_by_user: bool = Field(default=False, alias="O_Usuario")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_params(self) -> dict[str, str]:
        """Render as query parameters, booleans as lowercase strings."""
        params: dict[str, Any] = self.model_dump(by_alias=True)
        return {
            key: str(value).lower() if isinstance(value, bool) else str(value)
            for key, value in params.items()
        }
