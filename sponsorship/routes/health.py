# sponsorship/routes/health.py
from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from sponsorship import __version__
from sponsorship.core.config import settings
from sponsorship.core.logging import get_structlog_logger
from sponsorship.db.session import health_check as database_health_check

logger = get_structlog_logger(__name__)

router = APIRouter(tags=["health"])

STARTED_AT = time.monotonic()


class HealthCheckResponse(BaseModel):
    status: str
    service: str
    environment: str
    version: str
    timestamp: str
    uptime: float
    checks: Dict[str, Dict[str, str]]


async def get_database_health() -> Dict[str, str]:
    result = await database_health_check()
    return {key: str(value) for key, value in result.items()}


@router.get("/health", response_model=HealthCheckResponse, status_code=status.HTTP_200_OK)
async def health(database: Dict[str, str] = Depends(get_database_health)) -> HealthCheckResponse:
    """Liveness plus a database round trip; always 200 so the body tells the story."""
    checks = {"database": database}
    overall = "healthy" if database.get("status") == "healthy" else "unhealthy"

    log = logger.info if overall == "healthy" else logger.warning
    log("health.check", status=overall, checks=checks)

    return HealthCheckResponse(
        status=overall,
        service="sponsorship_api",
        environment=settings.environment,
        version=__version__,
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime=round(time.monotonic() - STARTED_AT, 3),
        checks=checks,
    )
