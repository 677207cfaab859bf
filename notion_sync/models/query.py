"""Request models for ``POST /databases/{id}/query``."""

from typing import Any, Literal, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from notion_sync.constants.enums import SortDirection, SortTimestamp


class EmptyObject(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Condition(BaseModel):
    """Operator set for one property kind; exactly one operator must be given."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def _single_operator(self) -> Self:
        given = [name for name in type(self).model_fields if getattr(self, name) is not None]
        if len(given) != 1:
            raise ValueError(
                f"{type(self).__name__} needs exactly one operator, got {given or 'none'}"
            )
        return self


class TextCondition(Condition):
    equals: str | None = None
    does_not_equal: str | None = None
    contains: str | None = None
    does_not_contain: str | None = None
    starts_with: str | None = None
    ends_with: str | None = None
    is_empty: Literal[True] | None = None
    is_not_empty: Literal[True] | None = None


class NumberCondition(Condition):
    equals: int | float | None = None
    does_not_equal: int | float | None = None
    greater_than: int | float | None = None
    less_than: int | float | None = None
    greater_than_or_equal_to: int | float | None = None
    less_than_or_equal_to: int | float | None = None
    is_empty: Literal[True] | None = None
    is_not_empty: Literal[True] | None = None


class CheckboxCondition(Condition):
    equals: bool | None = None
    does_not_equal: bool | None = None


class SelectCondition(Condition):
    equals: str | None = None
    does_not_equal: str | None = None
    is_empty: Literal[True] | None = None
    is_not_empty: Literal[True] | None = None


class MultiSelectCondition(Condition):
    contains: str | None = None
    does_not_contain: str | None = None
    is_empty: Literal[True] | None = None
    is_not_empty: Literal[True] | None = None


class DateCondition(Condition):
    equals: str | None = None
    before: str | None = None
    after: str | None = None
    on_or_before: str | None = None
    on_or_after: str | None = None
    is_empty: Literal[True] | None = None
    is_not_empty: Literal[True] | None = None
    past_week: EmptyObject | None = None
    past_month: EmptyObject | None = None
    past_year: EmptyObject | None = None
    next_week: EmptyObject | None = None
    next_month: EmptyObject | None = None
    next_year: EmptyObject | None = None


LEAF_CONDITION_FIELDS = (
    "title",
    "rich_text",
    "number",
    "checkbox",
    "select",
    "status",
    "multi_select",
    "date",
)


class Filter(BaseModel):
    """Either a compound (``and`` / ``or``) of nested filters, or a property
    name with exactly one typed condition."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    and_: list["Filter"] | None = Field(default=None, alias="and")
    or_: list["Filter"] | None = Field(default=None, alias="or")

    property: str | None = None
    title: TextCondition | None = None
    rich_text: TextCondition | None = None
    number: NumberCondition | None = None
    checkbox: CheckboxCondition | None = None
    select: SelectCondition | None = None
    status: SelectCondition | None = None
    multi_select: MultiSelectCondition | None = None
    date: DateCondition | None = None

    @model_validator(mode="after")
    def _compound_or_leaf(self) -> Self:
        conditions = [name for name in LEAF_CONDITION_FIELDS if getattr(self, name) is not None]
        compounds = [name for name in ("and_", "or_") if getattr(self, name) is not None]

        if compounds:
            if len(compounds) > 1 or self.property is not None or conditions:
                raise ValueError("A compound filter takes exactly one of 'and' / 'or' and nothing else")
            return self

        if not self.property:
            raise ValueError("A property filter needs a property name")
        if len(conditions) != 1:
            raise ValueError(
                f"Property filter '{self.property}' needs exactly one condition, got {conditions or 'none'}"
            )
        return self

    @classmethod
    def all_of(cls, *filters: "Filter") -> "Filter":
        return cls(and_=list(filters))

    @classmethod
    def any_of(cls, *filters: "Filter") -> "Filter":
        return cls(or_=list(filters))


class Sort(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    property: str | None = None
    timestamp: SortTimestamp | None = None
    direction: SortDirection = SortDirection.ASCENDING

    @model_validator(mode="after")
    def _property_or_timestamp(self) -> Self:
        if (self.property is None) == (self.timestamp is None):
            raise ValueError("A sort targets either a property or a timestamp")
        return self


class DatabaseQuery(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    filter: Filter | None = None
    sorts: list[Sort] | None = None
    start_cursor: str | None = None
    page_size: int | None = Field(default=None, ge=1, le=100)

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def with_cursor(self, cursor: str | None) -> "DatabaseQuery":
        return self.model_copy(update={"start_cursor": cursor})
