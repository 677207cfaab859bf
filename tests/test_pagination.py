import pytest

from notion_sync.integrations.core.exceptions import NotionApiError, ResponseDecodeError
from notion_sync.integrations.core.pagination import CursorPagination, fetch_all, iter_pages
from notion_sync.integrations.core.types import HttpMethod, RequestDefinition
from notion_sync.models.pagination import PaginatedEnvelope


def scripted_pages(pages):
    """fetch_page stand-in serving ``pages`` keyed by the cursor asked for."""
    calls = []

    async def fetch_page(cursor):
        calls.append(cursor)
        result = pages[cursor]
        if isinstance(result, Exception):
            raise result
        return result

    return fetch_page, calls


def envelope(results, next_cursor=None, has_more=False):
    return PaginatedEnvelope(results=results, next_cursor=next_cursor, has_more=has_more)


class TestFetchAll:
    async def test_concatenates_pages_in_order(self):
        fetch_page, calls = scripted_pages(
            {
                None: envelope([1, 2, 3], "c1", True),
                "c1": envelope([4], "c2", True),
                "c2": envelope([5, 6]),
            }
        )
        assert await fetch_all(fetch_page) == [1, 2, 3, 4, 5, 6]
        assert calls == [None, "c1", "c2"]

    async def test_single_page(self):
        fetch_page, calls = scripted_pages({None: envelope(["a"])})
        assert await fetch_all(fetch_page) == ["a"]
        assert calls == [None]

    async def test_empty_short_pages_are_tolerated(self):
        fetch_page, _ = scripted_pages(
            {None: envelope([], "c1", True), "c1": envelope([], "c2", True), "c2": envelope(["x"])}
        )
        assert await fetch_all(fetch_page) == ["x"]

    async def test_starts_at_given_cursor(self):
        fetch_page, calls = scripted_pages({"c5": envelope([9])})
        assert await fetch_all(fetch_page, start_cursor="c5") == [9]
        assert calls == ["c5"]

    async def test_page_failure_aborts_with_that_error(self):
        error = NotionApiError(500, "internal_server_error", "boom")
        fetch_page, calls = scripted_pages({None: envelope([1], "c1", True), "c1": error})
        with pytest.raises(NotionApiError) as exc_info:
            await fetch_all(fetch_page)
        assert exc_info.value is error
        assert calls == [None, "c1"]

    async def test_more_without_cursor_is_a_decode_error(self):
        page = PaginatedEnvelope.model_construct(
            object="list", results=[1], next_cursor=None, has_more=True
        )
        fetch_page, _ = scripted_pages({None: page})
        with pytest.raises(ResponseDecodeError):
            await fetch_all(fetch_page)

    async def test_repeated_cursor_stops_the_loop(self):
        fetch_page, _ = scripted_pages(
            {None: envelope([1], "c1", True), "c1": envelope([2], "c1", True)}
        )
        with pytest.raises(ResponseDecodeError):
            await fetch_all(fetch_page)


async def test_iter_pages_allows_early_stop():
    fetch_page, calls = scripted_pages(
        {None: envelope([1], "c1", True), "c1": envelope([2], "c2", True)}
    )
    seen = []
    async for page in iter_pages(fetch_page):
        seen.extend(page.results)
        break
    assert seen == [1]
    assert calls == [None]


class TestEnvelope:
    def test_last_page_drops_cursor(self):
        page = PaginatedEnvelope.model_validate(
            {"object": "list", "results": [], "next_cursor": "stale", "has_more": False}
        )
        assert page.next_cursor is None

    def test_keeps_cursor_when_more(self):
        page = PaginatedEnvelope.model_validate(
            {"object": "list", "results": [1], "next_cursor": "c", "has_more": True}
        )
        assert page.next_cursor == "c"


class TestCursorPagination:
    def test_body_cursor_request(self):
        paginator = CursorPagination(cursor_in_body=True, default_page_size=50)
        request = RequestDefinition(
            method=HttpMethod.POST, url="https://x/search", body={"filter": {"value": "page"}}
        )
        first = paginator.page_request(request, None)
        assert first.body == {"page_size": 50, "filter": {"value": "page"}}

        second = paginator.page_request(request, "abc")
        assert second.body["start_cursor"] == "abc"
        assert request.body == {"filter": {"value": "page"}}

    def test_query_string_cursor_request(self):
        paginator = CursorPagination(cursor_in_body=False, default_page_size=100)
        request = RequestDefinition(method=HttpMethod.GET, url="https://x/blocks/b/children")
        page = paginator.page_request(request, "abc")
        assert page.params == {"page_size": 100, "start_cursor": "abc"}
        assert page.body is None

    def test_request_page_size_wins(self):
        paginator = CursorPagination(cursor_in_body=True, default_page_size=100)
        request = RequestDefinition(method=HttpMethod.POST, url="u", body={"page_size": 10})
        assert paginator.page_request(request, None).body == {"page_size": 10}

    def test_read_envelope_rejects_missing_results(self):
        paginator = CursorPagination(cursor_in_body=True)
        with pytest.raises(ResponseDecodeError):
            paginator.read_envelope({"object": "list", "has_more": False})

    def test_read_envelope_rejects_more_without_cursor(self):
        paginator = CursorPagination(cursor_in_body=True)
        with pytest.raises(ResponseDecodeError):
            paginator.read_envelope({"results": [], "has_more": True, "next_cursor": None})
