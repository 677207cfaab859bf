"""Decoding of raw Notion objects into the frozen domain models.

Every variant family is dispatched on its ``type`` tag. Unknown tags become
the family's ``Unsupported*`` variant; a known tag whose payload does not
validate raises ``ResponseDecodeError`` with a summary of the raw object.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from notion_sync.integrations.core.exceptions import ResponseDecodeError
from notion_sync.models.blocks import (
    BLOCK_PAYLOAD_TYPES,
    Block,
    BlockPayload,
    UnsupportedBlockPayload,
)
from notion_sync.models.database import DatabaseRow, DatabaseSchema
from notion_sync.models.page import PageRecord
from notion_sync.models.properties import (
    CONFIGURED_DEFINITION_TYPES,
    PLAIN_DEFINITION_TYPES,
    PROPERTY_VALUE_TYPES,
    PropertyDefinition,
    PropertyValue,
    UnsupportedPropertyDefinition,
    UnsupportedPropertyValue,
)
from notion_sync.models.rich_text import RichTextRun

M = TypeVar("M", bound=BaseModel)


def _validate(model: type[M], raw: Any, what: str) -> M:
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise ResponseDecodeError(f"Invalid {what}: {e.error_count()} validation error(s)", raw) from e


def _require_dict(raw: Any, what: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise ResponseDecodeError(f"Expected a JSON object for {what}", raw)
    return raw


def _type_tag(raw: dict[str, Any], what: str) -> str:
    tag = raw.get("type")
    if not isinstance(tag, str) or not tag:
        raise ResponseDecodeError(f"{what} has no 'type' discriminator", raw)
    return tag


def adapt_rich_text(raw_runs: Any) -> list[RichTextRun]:
    if raw_runs is None:
        return []
    if not isinstance(raw_runs, list):
        raise ResponseDecodeError("Expected a list of rich text runs", raw_runs)
    return [_validate(RichTextRun, run, "rich text run") for run in raw_runs]


def adapt_property_value(raw: Any) -> PropertyValue:
    raw = _require_dict(raw, "property value")
    tag = _type_tag(raw, "Property value")

    model = PROPERTY_VALUE_TYPES.get(tag)
    if model is None:
        return UnsupportedPropertyValue(id=raw.get("id"), type=tag, raw=raw)
    return _validate(model, raw, f"'{tag}' property value")


def adapt_property_definition(name: str, raw: Any) -> PropertyDefinition:
    raw = _require_dict(raw, f"property definition '{name}'")
    tag = _type_tag(raw, f"Property definition '{name}'")
    payload = {**raw, "name": raw.get("name") or name}

    model = CONFIGURED_DEFINITION_TYPES.get(tag)
    if model is not None:
        return _validate(model, payload, f"'{tag}' property definition")
    if tag in PLAIN_DEFINITION_TYPES:
        return _validate(PropertyDefinition, payload, f"'{tag}' property definition")
    return UnsupportedPropertyDefinition(
        id=raw.get("id"), name=payload["name"], type=tag, raw=raw
    )


def adapt_property_values(raw_properties: Any) -> dict[str, PropertyValue]:
    raw_properties = _require_dict(raw_properties or {}, "properties")
    return {name: adapt_property_value(raw) for name, raw in raw_properties.items()}


def adapt_block_payload(tag: str, raw: dict[str, Any]) -> BlockPayload:
    model = BLOCK_PAYLOAD_TYPES.get(tag)
    if model is None:
        return UnsupportedBlockPayload(type_name=tag, raw=raw)

    payload = raw.get(tag, {})
    if not isinstance(payload, dict):
        raise ResponseDecodeError(f"'{tag}' block payload is not an object", raw)
    return _validate(model, payload, f"'{tag}' block payload")


def adapt_block(raw: Any) -> Block:
    raw = _require_dict(raw, "block")
    tag = _type_tag(raw, "Block")
    payload = adapt_block_payload(tag, raw)

    try:
        return Block(
            id=raw.get("id"),
            type=tag,
            has_children=raw.get("has_children", False),
            created_time=raw.get("created_time"),
            last_edited_time=raw.get("last_edited_time"),
            archived=raw.get("archived", False),
            payload=payload,
        )
    except ValidationError as e:
        raise ResponseDecodeError("Invalid block", raw) from e


def adapt_database(raw: Any) -> DatabaseSchema:
    raw = _require_dict(raw, "database")
    raw_properties = _require_dict(raw.get("properties") or {}, "database properties")
    properties = {
        name: adapt_property_definition(name, definition)
        for name, definition in raw_properties.items()
    }

    try:
        return DatabaseSchema(
            id=raw.get("id"),
            title=adapt_rich_text(raw.get("title")),
            properties=properties,
            url=raw.get("url"),
            created_time=raw.get("created_time"),
            last_edited_time=raw.get("last_edited_time"),
            archived=raw.get("archived", False),
        )
    except ValidationError as e:
        raise ResponseDecodeError("Invalid database", raw) from e


def adapt_database_row(raw: Any) -> DatabaseRow:
    raw = _require_dict(raw, "database row")
    properties = adapt_property_values(raw.get("properties"))

    try:
        return DatabaseRow(
            id=raw.get("id"),
            url=raw.get("url") or "",
            properties=properties,
            created_time=raw.get("created_time"),
            last_edited_time=raw.get("last_edited_time"),
            archived=raw.get("archived", False),
        )
    except ValidationError as e:
        raise ResponseDecodeError("Invalid database row", raw) from e


def adapt_page(raw: Any) -> PageRecord:
    raw = _require_dict(raw, "page")
    properties = adapt_property_values(raw.get("properties"))

    try:
        return PageRecord(
            id=raw.get("id"),
            url=raw.get("url") or "",
            properties=properties,
            created_time=raw.get("created_time"),
            last_edited_time=raw.get("last_edited_time"),
            archived=raw.get("archived", False),
        )
    except ValidationError as e:
        raise ResponseDecodeError("Invalid page", raw) from e


def adapt_databases(raw_databases: list[Any]) -> list[DatabaseSchema]:
    return [adapt_database(d) for d in raw_databases]


def adapt_database_rows(raw_rows: list[Any]) -> list[DatabaseRow]:
    return [adapt_database_row(r) for r in raw_rows]


def adapt_pages(raw_pages: list[Any]) -> list[PageRecord]:
    return [adapt_page(p) for p in raw_pages]


def adapt_blocks(raw_blocks: list[Any]) -> list[Block]:
    return [adapt_block(b) for b in raw_blocks]
