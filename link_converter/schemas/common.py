from __future__ import annotations

from typing import Any

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel


class ErrorBody(BaseModel):
    error: str
    code: str | None = None
    details: Any = None
    path: str | None = None


class HealthData(BaseModel):
    status: str = "ok"
    service: str = "shopee-link-converter"


def error_response(message: str, **fields: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {"error": message}
    for key, value in fields.items():
        if value is not None:
            payload[key] = jsonable_encoder(value)
    return payload
