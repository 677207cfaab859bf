from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from dataclasses import replace
from typing import Any, TypeVar

from pydantic import ValidationError

from notion_sync.integrations.core.exceptions import ResponseDecodeError
from notion_sync.integrations.core.types import RequestDefinition
from notion_sync.models.pagination import PaginatedEnvelope

logger = logging.getLogger(__name__)

T = TypeVar("T")

PageFetcher = Callable[[str | None], Awaitable[PaginatedEnvelope[T]]]


class CursorPagination:
    """Cursor pagination where the cursor travels either in the JSON body
    (POST search / query) or in the query string (GET children)."""

    def __init__(
        self,
        cursor_in_body: bool,
        cursor_response_key: str = "next_cursor",
        cursor_request_param: str = "start_cursor",
        has_more_key: str = "has_more",
        items_key: str = "results",
        page_size_param: str | None = "page_size",
        default_page_size: int = 100,
    ):
        self.cursor_in_body = cursor_in_body
        self.cursor_response_key = cursor_response_key
        self.cursor_request_param = cursor_request_param
        self.has_more_key = has_more_key
        self.items_key = items_key
        self.page_size_param = page_size_param
        self.default_page_size = default_page_size

    def get_initial_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if self.page_size_param:
            params[self.page_size_param] = self.default_page_size
        return params

    def has_more_pages(self, response: dict[str, Any]) -> bool:
        return bool(response.get(self.has_more_key))

    def page_request(
        self, request: RequestDefinition, cursor: str | None
    ) -> RequestDefinition:
        """Copy of ``request`` asking for the page that starts at ``cursor``.

        A page size already present on the request wins over the default; any
        cursor on it is replaced by ``cursor``.
        """
        source = request.body if self.cursor_in_body else request.params
        page_params = {**self.get_initial_params(), **(source or {})}
        page_params.pop(self.cursor_request_param, None)
        if cursor:
            page_params[self.cursor_request_param] = cursor

        if self.cursor_in_body:
            return replace(request, body=page_params)
        return replace(request, params=page_params)

    def read_envelope(self, data: Any) -> PaginatedEnvelope[dict[str, Any]]:
        if not isinstance(data, dict) or not isinstance(data.get(self.items_key), list):
            raise ResponseDecodeError(
                f"Paginated response is missing a '{self.items_key}' list", data
            )
        if self.has_more_pages(data) and not data.get(self.cursor_response_key):
            raise ResponseDecodeError(
                f"Response has '{self.has_more_key}' set but no '{self.cursor_response_key}'",
                data,
            )
        try:
            return PaginatedEnvelope[dict[str, Any]].model_validate(
                {
                    "object": data.get("object", "list"),
                    "results": data[self.items_key],
                    "next_cursor": data.get(self.cursor_response_key),
                    "has_more": data.get(self.has_more_key, False),
                }
            )
        except ValidationError as e:
            raise ResponseDecodeError(f"Invalid paginated response: {e}", data) from e


async def iter_pages(
    fetch_page: PageFetcher[T], start_cursor: str | None = None
) -> AsyncGenerator[PaginatedEnvelope[T], None]:
    """Yield every page in server order, starting at ``start_cursor``.

    Callers that can live with partial results may stop iterating (or catch
    the error) whenever they like; nothing is buffered here.
    """
    cursor = start_cursor
    seen: set[str] = set()

    while True:
        envelope = await fetch_page(cursor)
        yield envelope

        if not envelope.has_more:
            return
        if not envelope.next_cursor:
            raise ResponseDecodeError(
                "Page reports more results but carries no cursor",
                envelope.model_dump(exclude={"results"}),
            )
        if envelope.next_cursor in seen:
            raise ResponseDecodeError(
                f"Cursor '{envelope.next_cursor}' was returned twice",
                envelope.model_dump(exclude={"results"}),
            )
        seen.add(envelope.next_cursor)
        cursor = envelope.next_cursor


async def fetch_all(
    fetch_page: PageFetcher[T], start_cursor: str | None = None
) -> list[T]:
    """Drain a cursor-paginated listing into one list, keeping server order.

    Any page failure aborts the whole fetch with that error.
    """
    items: list[T] = []
    pages = 0
    async for envelope in iter_pages(fetch_page, start_cursor):
        items.extend(envelope.results)
        pages += 1
    logger.debug("Fetched %s items across %s pages", len(items), pages)
    return items
