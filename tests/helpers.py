import json
from collections import deque
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import urlsplit

from notion_sync.integrations.core.client import ApiClient
from notion_sync.integrations.core.rate_limiter import (
    RateLimitConfig,
    TokenBucketRateLimiter,
)
from notion_sync.integrations.core.types import ApiResponse, RequestDefinition
from notion_sync.oauth.types import AccessGrant

BASE_URL = "https://api.notion.com/v1"

Outcome = ApiResponse | BaseException


def json_response(
    status: int, data: Any, headers: dict[str, str] | None = None
) -> ApiResponse:
    return ApiResponse(
        status_code=status,
        data=data,
        headers=headers or {},
        raw_body=json.dumps(data),
    )


def text_response(status: int, body: str) -> ApiResponse:
    return ApiResponse(status_code=status, data=None, raw_body=body)


def notion_error(status: int, code: str, message: str) -> ApiResponse:
    return json_response(
        status,
        {"object": "error", "status": status, "code": code, "message": message},
    )


def instant_rate_limiter() -> TokenBucketRateLimiter:
    return TokenBucketRateLimiter(
        RateLimitConfig(requests_per_second=1000.0, burst_size=1000, retry_after_default=0)
    )


class ScriptedApiClient(ApiClient):
    """ApiClient whose transport is replaced by scripted outcomes.

    Outcomes come from ``handler(request)`` when given, otherwise from the
    ``responses`` queue. Exceptions are raised from the transport layer so the
    retry and classification logic runs unchanged.
    """

    def __init__(
        self,
        responses: list[Outcome] | None = None,
        handler: Callable[[RequestDefinition], Outcome] | None = None,
        max_retries: int = 3,
        default_headers: dict[str, str] | None = None,
    ):
        super().__init__(
            rate_limiter=instant_rate_limiter(),
            timeout=5.0,
            max_retries=max_retries,
            default_headers=default_headers,
        )
        self._responses: deque[Outcome] = deque(responses or [])
        self._handler = handler
        self.requests: list[RequestDefinition] = []
        self.sent_headers: list[dict[str, str]] = []

    async def _make_request(
        self, request: RequestDefinition, headers: dict[str, str]
    ) -> ApiResponse:
        self.requests.append(request)
        self.sent_headers.append(headers)
        outcome = self._handler(request) if self._handler else self._responses.popleft()
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def make_grant(
    access_token: str = "secret-token",
    expires_at: datetime | None = None,
    workspace_name: str | None = "Acme",
) -> AccessGrant:
    return AccessGrant(
        access_token=access_token,
        bot_id="bot-1",
        workspace_id="ws-1",
        workspace_name=workspace_name,
        workspace_icon="🚀",
        expires_at=expires_at,
    )


def expired_grant() -> AccessGrant:
    return make_grant(expires_at=datetime.now(timezone.utc) - timedelta(minutes=5))


# Raw Notion payload builders


def raw_text(content: str, **annotations: Any) -> dict[str, Any]:
    return {
        "type": "text",
        "text": {"content": content, "link": None},
        "annotations": {
            "bold": False,
            "italic": False,
            "strikethrough": False,
            "underline": False,
            "code": False,
            "color": "default",
            **annotations,
        },
        "plain_text": content,
        "href": None,
    }


def raw_database(database_id: str, title: str) -> dict[str, Any]:
    return {
        "object": "database",
        "id": database_id,
        "title": [raw_text(title)],
        "url": f"https://www.notion.so/{database_id}",
        "created_time": "2024-01-01T00:00:00.000Z",
        "last_edited_time": "2024-01-02T00:00:00.000Z",
        "archived": False,
        "properties": {
            "Name": {"id": "title", "name": "Name", "type": "title", "title": {}},
            "Score": {
                "id": "sc",
                "name": "Score",
                "type": "number",
                "number": {"format": "number"},
            },
        },
    }


def raw_page(page_id: str, title: str, score: int | float | None = None) -> dict[str, Any]:
    properties: dict[str, Any] = {
        "Name": {"id": "title", "type": "title", "title": [raw_text(title)]},
    }
    if score is not None:
        properties["Score"] = {"id": "sc", "type": "number", "number": score}
    return {
        "object": "page",
        "id": page_id,
        "url": f"https://www.notion.so/{page_id}",
        "created_time": "2024-01-01T00:00:00.000Z",
        "last_edited_time": "2024-01-02T00:00:00.000Z",
        "archived": False,
        "properties": properties,
    }


def raw_block(
    block_id: str,
    block_type: str = "paragraph",
    text: str = "",
    has_children: bool = False,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"rich_text": [raw_text(text)] if text else [], "color": "default"}
    if block_type == "divider":
        payload = {}
    return {
        "object": "block",
        "id": block_id,
        "type": block_type,
        "created_time": "2024-01-01T00:00:00.000Z",
        "last_edited_time": "2024-01-02T00:00:00.000Z",
        "has_children": has_children,
        "archived": False,
        block_type: payload,
    }


class FakeNotionApi:
    """In-memory stand-in for the Notion endpoints the provider calls.

    Listings are served ``page_size`` items at a time with opaque cursors.
    ``failures`` maps a URL path to an outcome returned instead of data.
    """

    def __init__(self, page_size: int = 2):
        self.page_size = page_size
        self.databases: list[dict[str, Any]] = []
        self.pages: list[dict[str, Any]] = []
        self.rows: dict[str, list[dict[str, Any]]] = {}
        self.children: dict[str, list[dict[str, Any]]] = {}
        self.failures: dict[str, Outcome] = {}
        self.paths: list[str] = []

    def __call__(self, request: RequestDefinition) -> Outcome:
        path = urlsplit(request.url).path.removeprefix("/v1")
        self.paths.append(path)
        if path in self.failures:
            return self.failures[path]

        if path == "/search":
            kind = request.body["filter"]["value"]
            items = self.databases if kind == "database" else self.pages
            cursor = request.body.get("start_cursor")
        elif path.startswith("/databases/"):
            database_id = path.split("/")[2]
            items = self.rows.get(database_id, [])
            cursor = request.body.get("start_cursor")
        elif path.startswith("/blocks/"):
            block_id = path.split("/")[2]
            items = self.children.get(block_id, [])
            cursor = request.params.get("start_cursor")
        else:
            return notion_error(404, "object_not_found", f"No route for {path}")

        start = int(cursor.removeprefix("cur-")) if cursor else 0
        end = start + self.page_size
        has_more = end < len(items)
        return json_response(
            200,
            {
                "object": "list",
                "results": items[start:end],
                "next_cursor": f"cur-{end}" if has_more else None,
                "has_more": has_more,
            },
        )
