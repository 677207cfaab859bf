from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Annotations(BaseModel):
    model_config = ConfigDict(frozen=True)

    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: str = "default"


class Link(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str


class TextContent(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: str
    link: Link | None = None


class RichTextRun(BaseModel):
    """A single styled run of text.

    ``type`` is the run kind reported by Notion (``text``, ``mention`` or
    ``equation``). Only ``text`` runs carry ``text``; the other kinds keep
    their payload in ``mention`` / ``equation`` untouched.
    """

    model_config = ConfigDict(frozen=True)

    plain_text: str = ""
    href: str | None = None
    annotations: Annotations = Field(default_factory=Annotations)
    type: str = "text"
    text: TextContent | None = None
    mention: dict[str, Any] | None = None
    equation: dict[str, Any] | None = None


def join_plain_text(runs: list[RichTextRun]) -> str:
    return "".join(run.plain_text for run in runs)
