import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from notion_sync.integrations.core.client import ApiClient
from notion_sync.integrations.core.exceptions import (
    ApiRequestError,
    RateLimitExceededError,
    RequestTimeoutError,
    ResponseDecodeError,
)
from notion_sync.integrations.core.types import AuthContext, HttpMethod, RequestDefinition
from tests.helpers import instant_rate_limiter

AUTH = AuthContext(access_token="tok")
HITS = web.AppKey("hits", dict[str, int])


async def echo(request: web.Request) -> web.Response:
    body = await request.json() if request.can_read_body else None
    return web.json_response(
        {
            "method": request.method,
            "query": dict(request.query),
            "body": body,
            "authorization": request.headers.get("Authorization"),
            "version": request.headers.get("Notion-Version"),
        }
    )


async def bad_gateway(request: web.Request) -> web.Response:
    request.app[HITS]["bad_gateway"] += 1
    return web.Response(status=502, text="<html>Bad Gateway</html>", content_type="text/html")


async def empty(request: web.Request) -> web.Response:
    return web.Response(status=200)


async def limited_once(request: web.Request) -> web.Response:
    request.app[HITS]["limited"] += 1
    if request.app[HITS]["limited"] == 1:
        return web.json_response(
            {"object": "error", "status": 429, "code": "rate_limited", "message": "slow down"},
            status=429,
            headers={"Retry-After": "0"},
        )
    return web.json_response({"ok": True})


async def always_limited(request: web.Request) -> web.Response:
    return web.Response(status=429, text="", headers={"Retry-After": "7"})


async def slow(request: web.Request) -> web.Response:
    await asyncio.sleep(0.5)
    return web.json_response({})


@pytest.fixture
async def server():
    app = web.Application()
    app[HITS] = {"bad_gateway": 0, "limited": 0}
    app.router.add_route("*", "/echo", echo)
    app.router.add_get("/bad-gateway", bad_gateway)
    app.router.add_get("/empty", empty)
    app.router.add_get("/limited-once", limited_once)
    app.router.add_get("/always-limited", always_limited)
    app.router.add_get("/slow", slow)
    test_server = TestServer(app)
    await test_server.start_server()
    yield test_server
    await test_server.close()


def client(**kwargs) -> ApiClient:
    return ApiClient(rate_limiter=instant_rate_limiter(), timeout=5.0, **kwargs)


async def test_json_get_sends_query_params_and_headers(server):
    request = RequestDefinition(
        method=HttpMethod.GET,
        url=str(server.make_url("/echo")),
        params={"page_size": 5},
        headers={"Notion-Version": "2022-06-28"},
    )
    async with client() as api:
        data = await api.execute_json(request, AUTH)

    assert data["method"] == "GET"
    assert data["query"] == {"page_size": "5"}
    assert data["body"] is None
    assert data["authorization"] == "Bearer tok"
    assert data["version"] == "2022-06-28"


async def test_post_sends_json_body(server):
    request = RequestDefinition(
        method=HttpMethod.POST,
        url=str(server.make_url("/echo")),
        body={"filter": {"property": "object", "value": "page"}, "page_size": 10},
    )
    async with client() as api:
        data = await api.execute_json(request, AUTH)

    assert data["method"] == "POST"
    assert data["query"] == {}
    assert data["body"] == {"filter": {"property": "object", "value": "page"}, "page_size": 10}


async def test_html_bad_gateway_is_retried_then_a_status_error(server):
    request = RequestDefinition(method=HttpMethod.GET, url=str(server.make_url("/bad-gateway")))
    async with client(max_retries=3) as api:
        with pytest.raises(ApiRequestError) as exc_info:
            await api.execute_json(request, AUTH)

    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "HTTP Error 502"
    assert server.app[HITS]["bad_gateway"] == 3


async def test_empty_success_body_is_a_decode_error(server):
    request = RequestDefinition(method=HttpMethod.GET, url=str(server.make_url("/empty")))
    async with client() as api:
        response = await api.execute(request, AUTH)
        assert response.status_code == 200
        assert response.data is None

        with pytest.raises(ResponseDecodeError):
            await api.execute_json(request, AUTH)


async def test_rate_limit_reads_retry_after_from_response_headers(server):
    request = RequestDefinition(method=HttpMethod.GET, url=str(server.make_url("/limited-once")))
    async with client(max_retries=2) as api:
        assert await api.execute_json(request, AUTH) == {"ok": True}
    assert server.app[HITS]["limited"] == 2


async def test_persistent_rate_limit_reports_retry_after(server):
    request = RequestDefinition(method=HttpMethod.GET, url=str(server.make_url("/always-limited")))
    async with client(max_retries=1) as api:
        with pytest.raises(RateLimitExceededError) as exc_info:
            await api.execute_json(request, AUTH)
    assert "retry after 7 seconds" in exc_info.value.message


async def test_slow_server_times_out(server):
    request = RequestDefinition(method=HttpMethod.GET, url=str(server.make_url("/slow")))
    api = ApiClient(rate_limiter=instant_rate_limiter(), timeout=0.05, max_retries=1)
    try:
        with pytest.raises(RequestTimeoutError):
            await api.execute(request, AUTH)
    finally:
        await api.close()
