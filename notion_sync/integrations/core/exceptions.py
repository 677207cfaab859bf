from notion_sync.core.exceptions import AppException

RAW_SUMMARY_LIMIT = 500


def summarize_raw(raw: object, limit: int = RAW_SUMMARY_LIMIT) -> str:
    text = raw if isinstance(raw, str) else repr(raw)
    if len(text) <= limit:
        return text
    return f"{text[:limit]}... ({len(text)} chars)"


class IntegrationException(AppException):
    def __init__(self, code: str, message: str, status_code: int = 400):
        super().__init__(code, message, status_code)


class TransportError(IntegrationException):
    """The request never produced an HTTP response."""

    def __init__(self, message: str):
        super().__init__(
            code="TRANSPORT_ERROR",
            message=message,
            status_code=502,
        )


class RequestTimeoutError(TransportError):
    def __init__(self, url: str, timeout: float | None = None):
        message = f"Request to {url} timed out"
        if timeout:
            message += f" after {timeout}s"
        super().__init__(message)
        self.code = "REQUEST_TIMEOUT"
        self.status_code = 504


class NotionApiError(IntegrationException):
    """Non-2xx response carrying Notion's structured error body."""

    def __init__(self, status: int, error_code: str, message: str):
        super().__init__(
            code="NOTION_API_ERROR",
            message=message,
            status_code=status,
        )
        self.status = status
        self.error_code = error_code

    def __str__(self) -> str:
        return f"{self.status} {self.error_code}: {self.message}"


class RateLimitExceededError(NotionApiError):
    def __init__(self, retry_after: int | None = None, message: str | None = None):
        text = message or "API rate limit exceeded"
        if retry_after:
            text += f", retry after {retry_after} seconds"
        super().__init__(429, "rate_limited", text)
        self.code = "RATE_LIMIT_EXCEEDED"
        self.retry_after = retry_after


class ApiRequestError(IntegrationException):
    """Non-2xx response without a decodable error body."""

    def __init__(self, status_code: int, message: str | None = None):
        super().__init__(
            code="API_REQUEST_FAILED",
            message=message or f"HTTP Error {status_code}",
            status_code=status_code,
        )


class ResponseDecodeError(IntegrationException):
    def __init__(self, message: str, raw: object = ""):
        self.raw_summary = summarize_raw(raw)
        super().__init__(
            code="RESPONSE_DECODE_ERROR",
            message=message,
            status_code=502,
        )

    def __str__(self) -> str:
        return f"{self.message} (raw: {self.raw_summary})"


class ConfigurationError(IntegrationException):
    def __init__(self, message: str):
        super().__init__(
            code="CONFIGURATION_ERROR",
            message=message,
            status_code=500,
        )
