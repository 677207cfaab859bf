from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

T = TypeVar("T")


class PaginatedEnvelope(BaseModel, Generic[T]):
    """One page of a cursor-paginated list response.

    Results keep the server's order. When ``has_more`` is false the cursor is
    dropped, whatever the server sent.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    object: str = "list"
    results: list[T] = Field(default_factory=list)
    next_cursor: str | None = None
    has_more: bool = False

    @model_validator(mode="before")
    @classmethod
    def _drop_cursor_on_last_page(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("has_more"):
            return {**data, "next_cursor": None}
        return data
