from notion_sync.models.blocks import (
    BLOCK_PAYLOAD_TYPES,
    Block,
    BlockPayload,
    CalloutPayload,
    CodePayload,
    DividerPayload,
    HeadingPayload,
    ImagePayload,
    ListItemPayload,
    ParagraphPayload,
    QuotePayload,
    TableOfContentsPayload,
    ToDoPayload,
    TogglePayload,
    UnsupportedBlockPayload,
)
from notion_sync.models.database import DatabaseRow, DatabaseSchema
from notion_sync.models.page import PageRecord
from notion_sync.models.pagination import PaginatedEnvelope
from notion_sync.models.properties import (
    CONFIGURED_DEFINITION_TYPES,
    PLAIN_DEFINITION_TYPES,
    PROPERTY_VALUE_TYPES,
    PropertyDefinition,
    PropertyValue,
    UnsupportedPropertyDefinition,
    UnsupportedPropertyValue,
)
from notion_sync.models.query import (
    CheckboxCondition,
    DatabaseQuery,
    DateCondition,
    Filter,
    MultiSelectCondition,
    NumberCondition,
    SelectCondition,
    Sort,
    TextCondition,
)
from notion_sync.models.rich_text import Annotations, RichTextRun, join_plain_text
from notion_sync.models.snapshot import (
    DatabaseSnapshot,
    WorkspaceInfo,
    WorkspaceSnapshot,
)

__all__ = [
    "Annotations",
    "BLOCK_PAYLOAD_TYPES",
    "Block",
    "BlockPayload",
    "CONFIGURED_DEFINITION_TYPES",
    "CalloutPayload",
    "CheckboxCondition",
    "CodePayload",
    "DatabaseQuery",
    "DatabaseRow",
    "DatabaseSchema",
    "DatabaseSnapshot",
    "DateCondition",
    "DividerPayload",
    "Filter",
    "HeadingPayload",
    "ImagePayload",
    "ListItemPayload",
    "MultiSelectCondition",
    "NumberCondition",
    "PLAIN_DEFINITION_TYPES",
    "PROPERTY_VALUE_TYPES",
    "PageRecord",
    "PaginatedEnvelope",
    "ParagraphPayload",
    "PropertyDefinition",
    "PropertyValue",
    "QuotePayload",
    "RichTextRun",
    "SelectCondition",
    "Sort",
    "TableOfContentsPayload",
    "TextCondition",
    "ToDoPayload",
    "TogglePayload",
    "UnsupportedBlockPayload",
    "UnsupportedPropertyDefinition",
    "UnsupportedPropertyValue",
    "WorkspaceInfo",
    "WorkspaceSnapshot",
    "join_plain_text",
]
