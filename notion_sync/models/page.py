from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny

from notion_sync.models.blocks import Block
from notion_sync.models.properties import PropertyValue, TitleValue


class PageRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    url: str = ""
    properties: dict[str, SerializeAsAny[PropertyValue]] = Field(default_factory=dict)
    blocks: list[Block] = Field(default_factory=list)
    created_time: str | None = None
    last_edited_time: str | None = None
    archived: bool = False

    @property
    def title(self) -> str:
        for value in self.properties.values():
            if isinstance(value, TitleValue):
                return value.display_value()
        return ""

    def with_blocks(self, blocks: list[Block]) -> "PageRecord":
        return self.model_copy(update={"blocks": blocks})
