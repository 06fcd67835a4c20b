"""Typed operations on ZeroOne views.

A view is a remote collection identified by an opaque id. ``ViewsClient``
offers three operations on any view (fetch a page, create one record, bulk
load records) plus page iteration. The record type is chosen by the caller
for every call and passed as a type, e.g. ``Activity`` or ``dict[str, Any]``;
this module never inspects record fields itself.

Failure policy: authentication failures (``AuthError``) always propagate.
Every other failure raised while talking to the API (error status, transport
error, undecodable body) is logged and turned into a ``None`` result.
Invalid arguments raise ``ValidationError`` before anything is sent.
"""

from collections.abc import AsyncIterator, Sequence
from typing import TYPE_CHECKING, TypeVar

from pydantic import ValidationError as PydanticValidationError

from .constants import ITERATE_PAGE_SIZE
from .endpoints import ViewQuery, view_bulk_load_path, view_data_path, view_path
from .exceptions import APIError, AuthError, ValidationError, ZeroOneError
from .log_config import logger
from .models import BulkCreateEnvelope, CreateEnvelope, ViewResponse

if TYPE_CHECKING:
    from .client import ZeroOneClient

T = TypeVar("T")


class BaseResourceClient:
    """Base class for resource clients.

    Attributes:
        _api_client: The `ZeroOneClient` used to send requests.
    """

    def __init__(self, api_client: "ZeroOneClient"):
        self._api_client = api_client
        logger.debug(f"{self.__class__.__name__} initialized")


def _log_failure(operation: str, view_id: str, error: ZeroOneError) -> None:
    if isinstance(error, APIError):
        logger.error(
            f"ZeroOne {operation} on view '{view_id}' failed with status "
            f"{error.status_code}: {error.body}"
        )
    else:
        logger.error(f"ZeroOne {operation} on view '{view_id}' failed: {error}")


class ViewsClient(BaseResourceClient):
    """Client for the ZeroOne views endpoints."""

    async def fetch_view(
        self,
        view_id: str,
        model: type[T],
        page_number: int,
        page_size: int,
        sort_by_date: bool = False,
        sort_by_project: bool = False,
        sort_by_user: bool = False,
    ) -> ViewResponse[T] | None:
        """Fetch one page of records from a view.

        Args:
            view_id: The view to query.
            model: Record type used to decode ``Items``.
            page_number: 1-based page index.
            page_size: Records per page.
            sort_by_date: Order by date.
            sort_by_project: Order by project.
            sort_by_user: Order by user.

        Returns:
            ViewResponse[T] | None: The decoded page, or None if the request
                failed or the response carried no item collection.

        Raises:
            AuthError: If authentication fails.
            ValidationError: If the view id or paging arguments are invalid.
        """
        try:
            query = ViewQuery(
                page_number=page_number,
                page_size=page_size,
                sort_by_date=sort_by_date,
                sort_by_project=sort_by_project,
                sort_by_user=sort_by_user,
            )
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid paging arguments: {e}") from e
        path = view_data_path(view_id)

        logger.info(
            f"Fetching view '{view_id}': page={query.page_number}, size={query.page_size}"
        )
        try:
            response = await self._api_client.request(
                "GET", path, params=query.to_params()
            )
            page = self._api_client.decode(response, ViewResponse[model])
        except AuthError:
            raise
        except ZeroOneError as e:
            _log_failure("fetch", view_id, e)
            return None

        if page.items is None:
            logger.error(
                f"ZeroOne fetch on view '{view_id}' succeeded but the response had no items."
            )
            return None
        return page

    async def create_record(
        self, view_id: str, item: T, model: type[T] | None = None
    ) -> T | None:
        """Create a single record in a view.

        Args:
            view_id: The target view.
            item: The record to create.
            model: Record type used to encode `item` and decode the reply.
                Defaults to ``type(item)``.

        Returns:
            T | None: The first record the API returns, or None on failure.

        Raises:
            AuthError: If authentication fails.
            ValidationError: If the view id is invalid or `item` does not fit `model`.
        """
        model = model or type(item)
        path = view_path(view_id)
        try:
            body = CreateEnvelope[model](data=item).model_dump(
                mode="json", by_alias=True
            )
        except PydanticValidationError as e:
            raise ValidationError(f"Item does not match {model.__name__}: {e}") from e

        logger.info(f"Creating record in view '{view_id}'")
        try:
            response = await self._api_client.request("POST", path, json=body)
            created = self._api_client.decode(response, list[model] | None)
        except AuthError:
            raise
        except ZeroOneError as e:
            _log_failure("create", view_id, e)
            return None

        if not created:
            logger.error(
                f"ZeroOne create on view '{view_id}' succeeded but returned no record."
            )
            return None
        return created[0]

    async def bulk_create(
        self, view_id: str, items: Sequence[T], model: type[T] | None = None
    ) -> list[T] | None:
        """Create many records in a view with one bulk load request.

        Args:
            view_id: The target view.
            items: Records to create, sent in order.
            model: Record type used to encode `items` and decode the reply.
                Defaults to the type of the first item.

        Returns:
            list[T] | None: The records returned by the API in response
                order, or None on failure.

        Raises:
            AuthError: If authentication fails.
            ValidationError: If the view id is invalid, `items` is empty with
                no `model`, or an item does not fit `model`.
        """
        if model is None:
            if not items:
                raise ValidationError("bulk_create needs a model when items is empty.")
            model = type(items[0])
        path = view_bulk_load_path(view_id)
        try:
            body = BulkCreateEnvelope[model](data=list(items)).model_dump(
                mode="json", by_alias=True
            )
        except PydanticValidationError as e:
            raise ValidationError(f"Items do not match {model.__name__}: {e}") from e

        logger.info(f"Bulk loading {len(items)} records into view '{view_id}'")
        try:
            response = await self._api_client.request("POST", path, json=body)
            created = self._api_client.decode(response, list[model] | None)
        except AuthError:
            raise
        except ZeroOneError as e:
            _log_failure("bulk create", view_id, e)
            return None

        if created is None:
            logger.error(
                f"ZeroOne bulk create on view '{view_id}' succeeded but decoded to null."
            )
        return created

    async def iterate_view(
        self,
        view_id: str,
        model: type[T],
        page_size: int = ITERATE_PAGE_SIZE,
        sort_by_date: bool = False,
        sort_by_project: bool = False,
        sort_by_user: bool = False,
    ) -> AsyncIterator[T]:
        """Yield every record of a view, fetching pages in order from page 1.

        Iteration stops after a short or empty page, or when a page cannot be
        fetched (the failure is logged by `fetch_view`).

        Raises:
            AuthError: If authentication fails.
            ValidationError: If the arguments are invalid.
        """
        page_number = 1
        while True:
            page = await self.fetch_view(
                view_id,
                model,
                page_number=page_number,
                page_size=page_size,
                sort_by_date=sort_by_date,
                sort_by_project=sort_by_project,
                sort_by_user=sort_by_user,
            )
            if page is None or not page.items:
                break
            for item in page.items:
                yield item
            if len(page.items) < page_size:
                break
            page_number += 1
        logger.debug(f"Finished iterating view '{view_id}' after page {page_number}.")


__all__ = ["BaseResourceClient", "ViewsClient"]
