from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PATCH = "PATCH"
    DELETE = "DELETE"


@dataclass
class AuthContext:
    access_token: str
    token_type: str = "Bearer"
    expires_at: datetime | None = None

    @property
    def authorization_header(self) -> str:
        return f"{self.token_type} {self.access_token}"


@dataclass
class RequestDefinition:
    method: HttpMethod
    url: str
    params: dict[str, Any] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    body: dict[str, Any] | None = None
    cost: int = 1


@dataclass
class ApiResponse:
    status_code: int
    data: Any
    headers: dict[str, str] = field(default_factory=dict)
    raw_body: str = ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429

    @property
    def is_server_error(self) -> bool:
        return self.status_code >= 500
