import pytest

from notion_sync.constants.enums import SortDirection
from notion_sync.integrations.core.exceptions import NotionApiError, ResponseDecodeError
from notion_sync.integrations.core.types import AuthContext
from notion_sync.integrations.providers.notion.provider import NotionProvider
from notion_sync.models.query import DatabaseQuery, Filter, NumberCondition, Sort
from tests.helpers import (
    BASE_URL,
    ScriptedApiClient,
    json_response,
    notion_error,
    raw_block,
    raw_database,
    raw_page,
)

AUTH = AuthContext(access_token="tok")


async def test_list_databases_follows_every_page(provider, fake_api, api_client):
    fake_api.databases = [raw_database(f"db-{i}", f"DB {i}") for i in range(5)]

    databases = await provider.list_databases(AUTH)

    assert [db.id for db in databases] == ["db-0", "db-1", "db-2", "db-3", "db-4"]
    assert [db.name for db in databases][:2] == ["DB 0", "DB 1"]
    assert fake_api.paths == ["/search"] * 3
    first, second = api_client.requests[0], api_client.requests[1]
    assert first.body["filter"] == {"property": "object", "value": "database"}
    assert "start_cursor" not in first.body
    assert second.body["start_cursor"] == "cur-2"


async def test_search_pages_uses_page_filter(provider, fake_api, api_client):
    fake_api.pages = [raw_page("p1", "One"), raw_page("p2", "Two"), raw_page("p3", "Three")]

    pages = await provider.search_pages(AUTH)

    assert [p.title for p in pages] == ["One", "Two", "Three"]
    assert api_client.requests[0].body["filter"]["value"] == "page"


async def test_query_database_returns_one_page(provider, fake_api, api_client):
    fake_api.rows["db-1"] = [raw_page(f"r{i}", f"Row {i}", score=i) for i in range(3)]

    first = await provider.query_database("db-1", AUTH)
    assert [row.id for row in first.results] == ["r0", "r1"]
    assert first.has_more is True
    assert first.next_cursor == "cur-2"

    second = await provider.query_database(
        "db-1", AUTH, DatabaseQuery(start_cursor=first.next_cursor)
    )
    assert [row.id for row in second.results] == ["r2"]
    assert second.has_more is False
    assert second.next_cursor is None
    assert api_client.requests[1].body["start_cursor"] == "cur-2"


async def test_query_database_rows_drains_all_pages(provider, fake_api):
    fake_api.rows["db-1"] = [raw_page(f"r{i}", f"Row {i}", score=i) for i in range(5)]

    rows = await provider.query_database_rows("db-1", AUTH)

    assert [row.id for row in rows] == ["r0", "r1", "r2", "r3", "r4"]
    assert rows[4].properties["Score"].display_value() == "4"
    assert fake_api.paths == ["/databases/db-1/query"] * 3


async def test_query_sends_filter_and_sorts(provider, fake_api, api_client):
    fake_api.rows["db-1"] = []
    query = DatabaseQuery(
        filter=Filter(property="Score", number=NumberCondition(greater_than=3)),
        sorts=[Sort(property="Score", direction=SortDirection.DESCENDING)],
        page_size=25,
    )

    await provider.query_database("db-1", AUTH, query)

    body = api_client.requests[0].body
    assert body["filter"] == {"property": "Score", "number": {"greater_than": 3}}
    assert body["sorts"] == [{"property": "Score", "direction": "descending"}]
    assert body["page_size"] == 25


async def test_block_children_paginate_over_query_string(provider, fake_api, api_client):
    fake_api.children["page-1"] = [raw_block(f"b{i}", text=f"Line {i}") for i in range(3)]

    blocks = await provider.list_block_children("page-1", AUTH)

    assert [b.plain_text() for b in blocks] == ["Line 0", "Line 1", "Line 2"]
    assert api_client.requests[0].params == {"page_size": 2}
    assert api_client.requests[1].params == {"page_size": 2, "start_cursor": "cur-2"}
    assert api_client.requests[0].body is None


async def test_remote_error_propagates(provider, fake_api):
    fake_api.failures["/search"] = notion_error(401, "unauthorized", "API token is invalid.")
    with pytest.raises(NotionApiError) as exc_info:
        await provider.list_databases(AUTH)
    assert exc_info.value.error_code == "unauthorized"


async def test_malformed_item_fails_the_listing(provider, fake_api):
    bad = raw_block("b1")
    bad["paragraph"] = ["not", "an", "object"]
    fake_api.children["page-1"] = [bad]
    with pytest.raises(ResponseDecodeError):
        await provider.list_block_children("page-1", AUTH)


async def test_malformed_envelope(provider, fake_api):
    fake_api.failures["/blocks/page-1/children"] = json_response(200, {"object": "list"})
    with pytest.raises(ResponseDecodeError):
        await provider.list_block_children("page-1", AUTH)


async def test_version_header_sent_without_client_defaults(fake_api):
    fake_api.databases = [raw_database("db-1", "Tasks")]
    fake_api.children = {"page": [raw_block("b1", text="x")]}
    client = ScriptedApiClient(handler=fake_api)
    provider = NotionProvider(client, base_url=BASE_URL)

    await provider.list_databases(AUTH)
    await provider.query_database("db-1", AUTH)
    await provider.list_block_children("page", AUTH)

    assert len(client.sent_headers) == 3
    assert all(h["Notion-Version"] == "2022-06-28" for h in client.sent_headers)


async def test_version_header_is_configurable(fake_api):
    client = ScriptedApiClient(handler=fake_api)
    provider = NotionProvider(client, base_url=BASE_URL, notion_version="2025-09-03")

    await provider.search_pages(AUTH)
    assert client.sent_headers[0]["Notion-Version"] == "2025-09-03"


async def test_page_size_is_capped_at_the_api_maximum(fake_api):
    client = ScriptedApiClient(handler=fake_api)
    provider = NotionProvider(client, base_url=BASE_URL, page_size=500)

    await provider.list_block_children("page", AUTH)
    assert client.requests[0].params["page_size"] == 100
