"""Database property schema and per-row property values.

Both families are tagged by the Notion ``type`` discriminator. Each known tag
has its own model; anything else is kept as an ``Unsupported*`` model that
remembers the original tag and raw payload, so decoding never fails on kinds
Notion adds later.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from notion_sync.models.rich_text import RichTextRun, join_plain_text


def format_number(value: int | float | None) -> str:
    if value is None:
        return ""
    return str(value)


def format_checkbox(value: bool | None) -> str:
    return "Yes" if value is True else "No"


class SelectOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str | None = None
    name: str
    color: str | None = None


class DateRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: str
    end: str | None = None
    time_zone: str | None = None

    def display_value(self) -> str:
        if self.end:
            return f"{self.start} - {self.end}"
        return self.start


class UserRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    object: str = "user"
    id: str
    name: str | None = None
    avatar_url: str | None = None
    type: str | None = None


class RelationRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str


class FileLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    expiry_time: str | None = None


class FileRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str | None = None
    type: str = "external"
    file: FileLocation | None = None
    external: FileLocation | None = None

    @property
    def url(self) -> str | None:
        if self.type == "file" and self.file:
            return self.file.url
        if self.type == "external" and self.external:
            return self.external.url
        return None


class FormulaResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    string: str | None = None
    number: int | float | None = None
    boolean: bool | None = None
    date: DateRange | None = None

    def display_value(self) -> str:
        if self.type == "string":
            return self.string or ""
        if self.type == "number":
            return format_number(self.number)
        if self.type == "boolean":
            return format_checkbox(self.boolean)
        if self.type == "date":
            return self.date.display_value() if self.date else ""
        return ""


class RollupResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    function: str | None = None
    number: int | float | None = None
    date: DateRange | None = None
    array: list[dict[str, Any]] = Field(default_factory=list)


# Property values


class PropertyValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str | None = None
    type: str

    def display_value(self) -> str:
        return ""


class TitleValue(PropertyValue):
    type: Literal["title"] = "title"
    title: list[RichTextRun] = Field(default_factory=list)

    def display_value(self) -> str:
        return join_plain_text(self.title)


class RichTextValue(PropertyValue):
    type: Literal["rich_text"] = "rich_text"
    rich_text: list[RichTextRun] = Field(default_factory=list)

    def display_value(self) -> str:
        return join_plain_text(self.rich_text)


class NumberValue(PropertyValue):
    type: Literal["number"] = "number"
    number: int | float | None = None

    def display_value(self) -> str:
        return format_number(self.number)


class SelectValue(PropertyValue):
    type: Literal["select"] = "select"
    select: SelectOption | None = None

    def display_value(self) -> str:
        return self.select.name if self.select else ""


class StatusValue(PropertyValue):
    type: Literal["status"] = "status"
    status: SelectOption | None = None

    def display_value(self) -> str:
        return self.status.name if self.status else ""


class MultiSelectValue(PropertyValue):
    type: Literal["multi_select"] = "multi_select"
    multi_select: list[SelectOption] = Field(default_factory=list)

    def display_value(self) -> str:
        return ", ".join(option.name for option in self.multi_select)


class DateValue(PropertyValue):
    type: Literal["date"] = "date"
    date: DateRange | None = None

    def display_value(self) -> str:
        return self.date.display_value() if self.date else ""


class CheckboxValue(PropertyValue):
    type: Literal["checkbox"] = "checkbox"
    checkbox: bool = False

    def display_value(self) -> str:
        return format_checkbox(self.checkbox)


class UrlValue(PropertyValue):
    type: Literal["url"] = "url"
    url: str | None = None

    def display_value(self) -> str:
        return self.url or ""


class EmailValue(PropertyValue):
    type: Literal["email"] = "email"
    email: str | None = None

    def display_value(self) -> str:
        return self.email or ""


class PhoneNumberValue(PropertyValue):
    type: Literal["phone_number"] = "phone_number"
    phone_number: str | None = None

    def display_value(self) -> str:
        return self.phone_number or ""


class FormulaValue(PropertyValue):
    type: Literal["formula"] = "formula"
    formula: FormulaResult | None = None

    def display_value(self) -> str:
        return self.formula.display_value() if self.formula else ""


class RelationValue(PropertyValue):
    type: Literal["relation"] = "relation"
    relation: list[RelationRef] = Field(default_factory=list)
    has_more: bool = False


class RollupValue(PropertyValue):
    type: Literal["rollup"] = "rollup"
    rollup: RollupResult | None = None


class PeopleValue(PropertyValue):
    type: Literal["people"] = "people"
    people: list[UserRef] = Field(default_factory=list)


class FilesValue(PropertyValue):
    type: Literal["files"] = "files"
    files: list[FileRef] = Field(default_factory=list)


class CreatedTimeValue(PropertyValue):
    type: Literal["created_time"] = "created_time"
    created_time: str | None = None


class LastEditedTimeValue(PropertyValue):
    type: Literal["last_edited_time"] = "last_edited_time"
    last_edited_time: str | None = None


class CreatedByValue(PropertyValue):
    type: Literal["created_by"] = "created_by"
    created_by: UserRef | None = None


class LastEditedByValue(PropertyValue):
    type: Literal["last_edited_by"] = "last_edited_by"
    last_edited_by: UserRef | None = None


class UnsupportedPropertyValue(PropertyValue):
    raw: dict[str, Any] = Field(default_factory=dict)


PROPERTY_VALUE_TYPES: dict[str, type[PropertyValue]] = {
    model.model_fields["type"].default: model
    for model in (
        TitleValue,
        RichTextValue,
        NumberValue,
        SelectValue,
        StatusValue,
        MultiSelectValue,
        DateValue,
        CheckboxValue,
        UrlValue,
        EmailValue,
        PhoneNumberValue,
        FormulaValue,
        RelationValue,
        RollupValue,
        PeopleValue,
        FilesValue,
        CreatedTimeValue,
        LastEditedTimeValue,
        CreatedByValue,
        LastEditedByValue,
    )
}


# Property definitions (database schema)


class NumberConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    format: str | None = None


class OptionsConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    options: list[SelectOption] = Field(default_factory=list)


class StatusGroup(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str | None = None
    name: str
    color: str | None = None
    option_ids: list[str] = Field(default_factory=list)


class StatusConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    options: list[SelectOption] = Field(default_factory=list)
    groups: list[StatusGroup] = Field(default_factory=list)


class FormulaConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    expression: str = ""


class RelationConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    database_id: str
    synced_property_name: str | None = None
    synced_property_id: str | None = None


class RollupConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    relation_property_name: str | None = None
    relation_property_id: str | None = None
    rollup_property_name: str | None = None
    rollup_property_id: str | None = None
    function: str | None = None


class PropertyDefinition(BaseModel):
    """Schema entry for kinds that carry no configuration (title, date, ...)."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    name: str
    type: str


class NumberDefinition(PropertyDefinition):
    type: Literal["number"] = "number"
    number: NumberConfig = Field(default_factory=NumberConfig)


class SelectDefinition(PropertyDefinition):
    type: Literal["select"] = "select"
    select: OptionsConfig = Field(default_factory=OptionsConfig)


class MultiSelectDefinition(PropertyDefinition):
    type: Literal["multi_select"] = "multi_select"
    multi_select: OptionsConfig = Field(default_factory=OptionsConfig)


class StatusDefinition(PropertyDefinition):
    type: Literal["status"] = "status"
    status: StatusConfig = Field(default_factory=StatusConfig)


class FormulaDefinition(PropertyDefinition):
    type: Literal["formula"] = "formula"
    formula: FormulaConfig = Field(default_factory=FormulaConfig)


class RelationDefinition(PropertyDefinition):
    type: Literal["relation"] = "relation"
    relation: RelationConfig


class RollupDefinition(PropertyDefinition):
    type: Literal["rollup"] = "rollup"
    rollup: RollupConfig = Field(default_factory=RollupConfig)


class UnsupportedPropertyDefinition(PropertyDefinition):
    raw: dict[str, Any] = Field(default_factory=dict)


CONFIGURED_DEFINITION_TYPES: dict[str, type[PropertyDefinition]] = {
    model.model_fields["type"].default: model
    for model in (
        NumberDefinition,
        SelectDefinition,
        MultiSelectDefinition,
        StatusDefinition,
        FormulaDefinition,
        RelationDefinition,
        RollupDefinition,
    )
}

PLAIN_DEFINITION_TYPES: frozenset[str] = frozenset(
    {
        "title",
        "rich_text",
        "date",
        "checkbox",
        "url",
        "email",
        "phone_number",
        "people",
        "files",
        "created_time",
        "created_by",
        "last_edited_time",
        "last_edited_by",
    }
)
