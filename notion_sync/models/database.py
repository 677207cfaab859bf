from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny

from notion_sync.models.properties import PropertyDefinition, PropertyValue
from notion_sync.models.rich_text import RichTextRun, join_plain_text


class DatabaseSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: list[RichTextRun] = Field(default_factory=list)
    properties: dict[str, SerializeAsAny[PropertyDefinition]] = Field(
        default_factory=dict
    )
    url: str | None = None
    created_time: str | None = None
    last_edited_time: str | None = None
    archived: bool = False

    @property
    def name(self) -> str:
        return join_plain_text(self.title) or "Untitled Database"


class DatabaseRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    url: str = ""
    properties: dict[str, SerializeAsAny[PropertyValue]] = Field(default_factory=dict)
    created_time: str | None = None
    last_edited_time: str | None = None
    archived: bool = False

    def display_values(self) -> dict[str, str]:
        return {name: value.display_value() for name, value in self.properties.items()}
