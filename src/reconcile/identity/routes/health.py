from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from ..models import HealthStatus

router = APIRouter(tags=["system"])


@router.get("/health", response_model=HealthStatus)
async def health() -> HealthStatus:
    return HealthStatus(status="healthy", timestamp=datetime.now(timezone.utc).isoformat())


__all__ = ["router"]
