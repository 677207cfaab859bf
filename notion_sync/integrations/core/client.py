import asyncio
import json
import logging
from types import TracebackType
from typing import Any, Self

import aiohttp

from notion_sync.integrations.core.exceptions import (
    ApiRequestError,
    NotionApiError,
    RateLimitExceededError,
    RequestTimeoutError,
    ResponseDecodeError,
    TransportError,
)
from notion_sync.integrations.core.rate_limiter import TokenBucketRateLimiter
from notion_sync.integrations.core.types import (
    ApiResponse,
    AuthContext,
    HttpMethod,
    RequestDefinition,
)

logger = logging.getLogger(__name__)


class ApiClient:
    def __init__(
        self,
        rate_limiter: TokenBucketRateLimiter | None = None,
        timeout: float = 30.0,
        max_retries: int = 3,
        default_headers: dict[str, str] | None = None,
    ):
        self._timeout_seconds = timeout
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._client: aiohttp.ClientSession | None = None
        self._rate_limiter = rate_limiter
        self._max_retries = max(1, max_retries)
        self._default_headers = default_headers or {}
        logger.debug(
            "ApiClient initialized with timeout=%s, max_retries=%s",
            timeout,
            max_retries,
        )

    async def __aenter__(self) -> Self:
        logger.debug("ApiClient context entered, creating session")
        self._client = aiohttp.ClientSession(timeout=self._timeout)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
        logger.debug("ApiClient context exited, session closed")

    async def _get_client(self) -> aiohttp.ClientSession:
        if self._client is None or self._client.closed:
            logger.debug("Creating new aiohttp ClientSession")
            self._client = aiohttp.ClientSession(timeout=self._timeout)
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.closed:
            logger.debug("Closing aiohttp ClientSession")
            await self._client.close()
        self._client = None

    async def execute(
        self,
        request: RequestDefinition,
        auth_context: AuthContext,
    ) -> ApiResponse:
        """Send ``request`` and return the final response, whatever its status.

        Transport failures and 5xx answers are retried; a 429 waits for the
        advertised ``Retry-After`` and raises once retries run out.
        """
        if self._rate_limiter:
            await self._rate_limiter.acquire(request.cost)

        headers = self._build_headers(request, auth_context)
        return await self._execute_with_retry(request, headers)

    async def execute_json(
        self,
        request: RequestDefinition,
        auth_context: AuthContext,
    ) -> Any:
        """Send ``request`` and return its decoded JSON body.

        The status is checked before the body is trusted: a non-2xx answer
        raises ``NotionApiError`` when it carries a structured error and
        ``ApiRequestError`` otherwise.
        """
        response = await self.execute(request, auth_context)
        if not response.is_success:
            raise self._error_for(response)
        if response.data is None:
            raise ResponseDecodeError(
                f"Expected a JSON body from {request.method.value} {request.url}",
                response.raw_body,
            )
        return response.data

    def _error_for(self, response: ApiResponse) -> Exception:
        data = response.data
        if (
            isinstance(data, dict)
            and data.get("object") == "error"
            and isinstance(data.get("code"), str)
            and isinstance(data.get("message"), str)
        ):
            if response.is_rate_limited:
                return RateLimitExceededError(
                    self._parse_retry_after(response.headers), data["message"]
                )
            status = data.get("status")
            if not isinstance(status, int):
                status = response.status_code
            return NotionApiError(status, data["code"], data["message"])
        if response.is_rate_limited:
            return RateLimitExceededError(self._parse_retry_after(response.headers))
        return ApiRequestError(response.status_code)

    def _build_headers(
        self, request: RequestDefinition, auth_context: AuthContext
    ) -> dict[str, str]:
        headers = {
            "Authorization": auth_context.authorization_header,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        headers.update(self._default_headers)
        headers.update(request.headers)
        return headers

    async def _execute_with_retry(
        self, request: RequestDefinition, headers: dict[str, str]
    ) -> ApiResponse:
        for attempt in range(self._max_retries):
            is_last_attempt = attempt == self._max_retries - 1
            try:
                logger.debug(f"Attempt {attempt + 1} for request to {request.url}")
                response = await self._make_request(request, headers)
            except asyncio.TimeoutError as e:
                logger.warning(f"Request to {request.url} timed out, retry {attempt + 1}")
                if is_last_attempt:
                    raise RequestTimeoutError(request.url, self._timeout_seconds) from e
                continue
            except aiohttp.ClientError as e:
                logger.warning(f"Request error: {e}, retry {attempt + 1}")
                if is_last_attempt:
                    raise TransportError(f"Request to {request.url} failed: {e}") from e
                continue

            if response.is_rate_limited:
                retry_after = self._parse_retry_after(response.headers)
                if is_last_attempt:
                    raise self._error_for(response)
                logger.warning(
                    f"Rate limited, waiting {retry_after}s before retry {attempt + 1}"
                )
                if self._rate_limiter:
                    await self._rate_limiter.wait_for_retry(retry_after)
                else:
                    await asyncio.sleep(retry_after or 1)
                continue

            if response.is_server_error and not is_last_attempt:
                logger.warning(
                    f"Server error {response.status_code}, retry {attempt + 1}"
                )
                continue

            return response

        raise TransportError(f"Request to {request.url} was not attempted")

    async def _make_request(
        self, request: RequestDefinition, headers: dict[str, str]
    ) -> ApiResponse:
        http_method = request.method.value.lower()
        client = await self._get_client()

        kwargs: dict[str, Any] = {
            "headers": headers,
            "params": request.params or None,
        }

        if request.body is not None and request.method in (
            HttpMethod.POST,
            HttpMethod.PATCH,
        ):
            kwargs["json"] = request.body

        logger.debug(
            f"Making {request.method.value} request to {request.url} with params {request.params}"
        )
        async with client.request(http_method, request.url, **kwargs) as response:
            raw_body = await response.text()
            try:
                data = json.loads(raw_body) if raw_body.strip() else None
            except json.JSONDecodeError:
                data = None

            return ApiResponse(
                status_code=response.status,
                data=data,
                headers={k: v for k, v in response.headers.items()},
                raw_body=raw_body,
            )

    def _parse_retry_after(self, headers: dict[str, str]) -> int | None:
        retry_after = headers.get("Retry-After") or headers.get("retry-after")
        logger.debug(f"Parsing Retry-After header: {retry_after}")
        if retry_after:
            try:
                return int(retry_after)
            except ValueError:
                logger.debug(f"Ignoring non-integer Retry-After value: {retry_after}")
        return None
