from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from notion_sync.constants.enums import SearchObjectType
from notion_sync.integrations.core.client import ApiClient
from notion_sync.integrations.core.interfaces import INotionProvider
from notion_sync.integrations.core.pagination import (
    CursorPagination,
    PageFetcher,
    fetch_all,
)
from notion_sync.integrations.core.types import (
    AuthContext,
    HttpMethod,
    RequestDefinition,
)
from notion_sync.integrations.providers.notion.adapters import (
    adapt_block,
    adapt_database,
    adapt_database_row,
    adapt_page,
)
from notion_sync.integrations.providers.notion.constants import (
    NOTION_API_BASE,
    NOTION_API_VERSION,
    NOTION_BLOCK_CHILDREN_ENDPOINT,
    NOTION_DATABASE_QUERY_ENDPOINT,
    NOTION_DEFAULT_PAGE_SIZE,
    NOTION_MAX_PAGE_SIZE,
    NOTION_SEARCH_ENDPOINT,
)
from notion_sync.integrations.providers.notion.paginators import (
    NotionBlockChildrenPaginator,
    NotionDatabaseQueryPaginator,
    NotionSearchPaginator,
)
from notion_sync.models.blocks import Block
from notion_sync.models.database import DatabaseRow, DatabaseSchema
from notion_sync.models.page import PageRecord
from notion_sync.models.pagination import PaginatedEnvelope
from notion_sync.models.query import DatabaseQuery

logger = logging.getLogger(__name__)

T = TypeVar("T")


class NotionProvider(INotionProvider):
    """Typed read operations against the Notion REST API.

    Every listing is decoded page by page, so a malformed item fails the call
    with ``ResponseDecodeError`` instead of surfacing later.
    """

    def __init__(
        self,
        api_client: ApiClient,
        base_url: str = NOTION_API_BASE,
        page_size: int = NOTION_DEFAULT_PAGE_SIZE,
        notion_version: str = NOTION_API_VERSION,
    ):
        self._api_client = api_client
        self._base_url = base_url.rstrip("/")
        self._page_size = min(max(1, page_size), NOTION_MAX_PAGE_SIZE)
        self._headers = {"Notion-Version": notion_version}

    async def close(self) -> None:
        await self._api_client.close()

    async def list_databases(self, auth_context: AuthContext) -> list[DatabaseSchema]:
        logger.debug("Listing databases shared with the integration")
        databases = await fetch_all(
            self._page_fetcher(
                self._search_request(SearchObjectType.DATABASE),
                NotionSearchPaginator(self._page_size),
                auth_context,
                adapt_database,
            )
        )
        logger.info(f"Found {len(databases)} databases")
        return databases

    async def search_pages(self, auth_context: AuthContext) -> list[PageRecord]:
        logger.debug("Listing pages shared with the integration")
        pages = await fetch_all(
            self._page_fetcher(
                self._search_request(SearchObjectType.PAGE),
                NotionSearchPaginator(self._page_size),
                auth_context,
                adapt_page,
            )
        )
        logger.info(f"Found {len(pages)} pages")
        return pages

    async def query_database(
        self,
        database_id: str,
        auth_context: AuthContext,
        query: DatabaseQuery | None = None,
    ) -> PaginatedEnvelope[DatabaseRow]:
        query = query or DatabaseQuery()
        fetch_page = self._page_fetcher(
            self._query_request(database_id, query),
            NotionDatabaseQueryPaginator(self._page_size),
            auth_context,
            adapt_database_row,
        )
        return await fetch_page(query.start_cursor)

    async def query_database_rows(
        self,
        database_id: str,
        auth_context: AuthContext,
        query: DatabaseQuery | None = None,
    ) -> list[DatabaseRow]:
        query = query or DatabaseQuery()
        rows = await fetch_all(
            self._page_fetcher(
                self._query_request(database_id, query),
                NotionDatabaseQueryPaginator(self._page_size),
                auth_context,
                adapt_database_row,
            ),
            start_cursor=query.start_cursor,
        )
        logger.debug(f"Fetched {len(rows)} rows from database {database_id}")
        return rows

    async def list_block_children(
        self, block_id: str, auth_context: AuthContext
    ) -> list[Block]:
        request = RequestDefinition(
            method=HttpMethod.GET,
            url=self._url(NOTION_BLOCK_CHILDREN_ENDPOINT.format(block_id=block_id)),
            headers=self._headers,
        )
        blocks = await fetch_all(
            self._page_fetcher(
                request,
                NotionBlockChildrenPaginator(self._page_size),
                auth_context,
                adapt_block,
            )
        )
        logger.debug(f"Fetched {len(blocks)} child blocks of {block_id}")
        return blocks

    def _page_fetcher(
        self,
        request: RequestDefinition,
        paginator: CursorPagination,
        auth_context: AuthContext,
        adapt: Callable[[Any], T],
    ) -> PageFetcher[T]:
        async def fetch_page(cursor: str | None) -> PaginatedEnvelope[T]:
            data = await self._api_client.execute_json(
                paginator.page_request(request, cursor), auth_context
            )
            envelope = paginator.read_envelope(data)
            return PaginatedEnvelope(
                object=envelope.object,
                results=[adapt(item) for item in envelope.results],
                next_cursor=envelope.next_cursor,
                has_more=envelope.has_more,
            )

        return fetch_page

    def _search_request(self, object_type: SearchObjectType) -> RequestDefinition:
        return RequestDefinition(
            method=HttpMethod.POST,
            url=self._url(NOTION_SEARCH_ENDPOINT),
            headers=self._headers,
            body={"filter": {"property": "object", "value": object_type.value}},
        )

    def _query_request(
        self, database_id: str, query: DatabaseQuery
    ) -> RequestDefinition:
        body = query.with_cursor(None).to_body()
        return RequestDefinition(
            method=HttpMethod.POST,
            url=self._url(
                NOTION_DATABASE_QUERY_ENDPOINT.format(database_id=database_id)
            ),
            headers=self._headers,
            body=body,
        )

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"
