"""
Health check endpoint for container probes and load balancers.

Reports uptime and database connectivity. Always answers 200 so a slow
database degrades the status instead of failing the probe.
"""

import time
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from traintrack.core.db import get_db
from traintrack.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])

# Set by the app lifespan
_app_start_time: datetime | None = None


def set_app_start_time(start_time: datetime) -> None:
    global _app_start_time
    _app_start_time = start_time


def get_uptime_seconds() -> int:
    """Seconds since app start, 0 before startup."""
    if _app_start_time is None:
        return 0
    return int((datetime.now() - _app_start_time).total_seconds())


async def check_database(db: AsyncSession) -> dict[str, Any]:
    """
    Run SELECT 1 and time it.

    Returns: {"status": "ok"|"down", "response_time_ms": N, "error": str (if down)}
    """
    start = time.monotonic()
    try:
        await db.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("health.database_down", error=type(e).__name__)
        return {
            "status": "down",
            "response_time_ms": int((time.monotonic() - start) * 1000),
            "error": type(e).__name__,
        }
    return {
        "status": "ok",
        "response_time_ms": int((time.monotonic() - start) * 1000),
    }


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def health_check(db: AsyncSession = Depends(get_db)) -> JSONResponse:
    """
    Example response (degraded):
        {
            "status": "degraded",
            "uptime_seconds": 3600,
            "checks": {
                "database": {"status": "down", "response_time_ms": 1000, "error": "OperationalError"}
            }
        }
    """
    db_check = await check_database(db)
    overall_status = "ok" if db_check["status"] == "ok" else "degraded"

    return JSONResponse(
        content={
            "status": overall_status,
            "uptime_seconds": get_uptime_seconds(),
            "checks": {"database": db_check},
        },
        status_code=status.HTTP_200_OK,
    )
