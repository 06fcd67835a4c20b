"""Generic envelope models for ZeroOne view requests and responses.

Every view shares the same wrapper shapes regardless of the record type it
holds, so the envelopes are generic over ``ItemType``. The caller picks the
record type per call (``ViewResponse[Activity]``, ``CreateEnvelope[Project]``)
and pydantic does the encoding and decoding.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Record type carried by an envelope; opaque to the client
ItemType = TypeVar("ItemType")


class ViewResponse(BaseModel, Generic[ItemType]):
    """One page of records returned by a view's data endpoint.

    Attributes:
        parent_view_id: Identifier of the parent view (``VistaPadreId``);
            ``""`` when the API omits it or sends ``null``.
        items: Records on this page (``Items``). ``None`` when the API omits
            the collection or sends ``null``, which callers treat as a failed
            decode rather than an empty page.
    """

    parent_view_id: str = Field(default="", alias="VistaPadreId")
    items: list[ItemType] | None = Field(default=None, alias="Items")

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @field_validator("parent_view_id", mode="before")
    @classmethod
    def _null_parent_view_id(cls, value: Any) -> Any:
        return "" if value is None else value


class CreateEnvelope(BaseModel, Generic[ItemType]):
    """Request body for creating a single record in a view."""

    data: ItemType = Field(alias="Dato")
    parameters: dict[str, Any] = Field(default_factory=dict, alias="Parametros")

    model_config = ConfigDict(populate_by_name=True)


class BulkCreateEnvelope(BaseModel, Generic[ItemType]):
    """Request body for the bulk load endpoint of a view."""

    data: list[ItemType] = Field(alias="datos")

    model_config = ConfigDict(populate_by_name=True)
