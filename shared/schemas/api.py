from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProcessRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str = ""
    is_url: bool = Field(default=False, alias="isUrl")


class SaveDataRequest(BaseModel):
    data: dict[str, Any] | None = None


class SaveDataResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    data_id: str = Field(alias="dataId")
    url: str


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None
    raw: str | None = None
