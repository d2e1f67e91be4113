"""
Health check endpoints.
"""

import time

from fastapi import APIRouter, Depends

from src.api.dependencies import get_app_settings, get_db_pool
from src.application.dto.responses import HealthResponse, ProviderHealthResponse
from src.config import Settings, get_logger
from src.infrastructure.storage.sqlite import ConnectionPool

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_app_settings),
) -> HealthResponse:
    """
    Basic health check.

    Returns service status and uptime.
    """
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        uptime_seconds=time.time() - _start_time,
    )


@router.get("/db", response_model=HealthResponse)
async def db_health(
    pool: ConnectionPool = Depends(get_db_pool),
    settings: Settings = Depends(get_app_settings),
) -> HealthResponse:
    """
    Database health check.

    Tests SQLite connectivity and response time.
    """
    try:
        start = time.time()
        available = await pool.ping()
        db_status = ProviderHealthResponse(
            name="sqlite",
            available=available,
            latency_ms=(time.time() - start) * 1000,
        )

    except Exception as e:
        logger.warning("db_health_check_failed", error=str(e))
        db_status = ProviderHealthResponse(
            name="sqlite",
            available=False,
            error=str(e),
        )

    return HealthResponse(
        status="healthy" if db_status.available else "unhealthy",
        version=settings.app_version,
        uptime_seconds=time.time() - _start_time,
        database=db_status,
    )
