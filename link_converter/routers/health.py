from __future__ import annotations

from fastapi import APIRouter

from link_converter.schemas.common import HealthData

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthData)
async def health() -> HealthData:
    return HealthData()
