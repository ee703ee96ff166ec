from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SectionItem(BaseModel):
    label: str = ""
    value: str = ""


class Section(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str = ""
    items: list[SectionItem] = Field(default_factory=list)


class CoreNumber(BaseModel):
    number: str = ""
    desc: str = ""


class BentoResult(BaseModel):
    """Normalized model output handed to the render layer.

    Field names follow the wire format (camelCase aliases); unknown keys the
    model returns are kept so the client can still see them.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    title: str | None = None
    subtitle: str | None = None
    core_numbers: list[CoreNumber] | None = Field(default=None, alias="coreNumbers")
    sections: list[Section] | None = None
    tags: list[str] | None = None
    cta: str | None = None
    author: str = ""
    content: str = ""
    raw_content: str = Field(default="", alias="rawContent")
    meta: dict[str, Any] = Field(default_factory=dict)
