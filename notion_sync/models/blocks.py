from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny

from notion_sync.models.properties import FileLocation
from notion_sync.models.rich_text import RichTextRun, join_plain_text


class BlockPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    def plain_text(self) -> str:
        return ""


class RichTextPayload(BlockPayload):
    rich_text: list[RichTextRun] = Field(default_factory=list)
    color: str = "default"

    def plain_text(self) -> str:
        return join_plain_text(self.rich_text)


class ParagraphPayload(RichTextPayload):
    pass


class HeadingPayload(RichTextPayload):
    is_toggleable: bool = False


class ListItemPayload(RichTextPayload):
    pass


class ToDoPayload(RichTextPayload):
    checked: bool = False


class TogglePayload(RichTextPayload):
    pass


class QuotePayload(RichTextPayload):
    pass


class CodePayload(BlockPayload):
    rich_text: list[RichTextRun] = Field(default_factory=list)
    caption: list[RichTextRun] = Field(default_factory=list)
    language: str = "plain text"

    def plain_text(self) -> str:
        return join_plain_text(self.rich_text)


class Icon(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    emoji: str | None = None
    external: FileLocation | None = None
    file: FileLocation | None = None


class CalloutPayload(RichTextPayload):
    icon: Icon | None = None


class ImagePayload(BlockPayload):
    type: str = "external"
    file: FileLocation | None = None
    external: FileLocation | None = None
    caption: list[RichTextRun] = Field(default_factory=list)

    @property
    def url(self) -> str | None:
        if self.type == "file" and self.file:
            return self.file.url
        if self.type == "external" and self.external:
            return self.external.url
        return None


class DividerPayload(BlockPayload):
    pass


class TableOfContentsPayload(BlockPayload):
    color: str = "default"

    def plain_text(self) -> str:
        return "Table of Contents"


class UnsupportedBlockPayload(BlockPayload):
    type_name: str
    raw: dict[str, Any] = Field(default_factory=dict)

    def plain_text(self) -> str:
        return "Unsupported block type"


BLOCK_PAYLOAD_TYPES: dict[str, type[BlockPayload]] = {
    "paragraph": ParagraphPayload,
    "heading_1": HeadingPayload,
    "heading_2": HeadingPayload,
    "heading_3": HeadingPayload,
    "bulleted_list_item": ListItemPayload,
    "numbered_list_item": ListItemPayload,
    "to_do": ToDoPayload,
    "toggle": TogglePayload,
    "code": CodePayload,
    "image": ImagePayload,
    "divider": DividerPayload,
    "callout": CalloutPayload,
    "quote": QuotePayload,
    "table_of_contents": TableOfContentsPayload,
}


class Block(BaseModel):
    """One node of a page's content tree.

    ``children`` stays ``None`` until a consumer expands the block; an
    expanded block without children has an empty list.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    type: str
    has_children: bool = False
    created_time: str | None = None
    last_edited_time: str | None = None
    archived: bool = False
    payload: SerializeAsAny[BlockPayload]
    children: list["Block"] | None = None

    @property
    def is_supported(self) -> bool:
        return not isinstance(self.payload, UnsupportedBlockPayload)

    def plain_text(self) -> str:
        return self.payload.plain_text()

    def with_children(self, children: list["Block"]) -> "Block":
        return self.model_copy(update={"children": children})
