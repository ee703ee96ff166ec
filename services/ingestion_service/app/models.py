from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ExtractedArticle(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    author: str = ""
    body_text: str = Field(default="", alias="bodyText")


class ExtractionRequest(BaseModel):
    url: str = Field(min_length=1)
