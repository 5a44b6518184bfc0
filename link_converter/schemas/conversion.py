from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


class ConvertTextRequest(BaseModel):
    text: str | None = None
    subIds: list[str] = Field(default_factory=list)

    @field_validator("subIds", mode="before")
    @classmethod
    def drop_null_sub_ids(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [item for item in value if item is not None]
        return value


class ConversionDetail(BaseModel):
    original: str
    resolved: str
    short: str | None = None


class TextConversion(BaseModel):
    success: bool = True
    newText: str
    totalLinks: int | None = None
    converted: int = 0
    details: list[ConversionDetail] | None = None
    message: str | None = None
