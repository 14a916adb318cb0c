"""
Health check endpoints.

Besides liveness they report the board timezone and the "today" that
urgency is computed against, plus the schema state of the record store.
"""

import time

from fastapi import APIRouter, Depends

from scoutboard.api.dependencies import get_board_clock
from scoutboard.application.dto.responses import HealthResponse, ProviderHealthResponse
from scoutboard.config import get_logger, get_settings
from scoutboard.core.interfaces import IClock

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

_start_time = time.time()


def _health(status: str, clock: IClock, **extra) -> HealthResponse:
    settings = get_settings()
    return HealthResponse(
        status=status,
        version=settings.app_version,
        uptime_seconds=time.time() - _start_time,
        timezone=settings.board.timezone,
        today=clock.today(settings.board.tzinfo),
        **extra,
    )


@router.get("", response_model=HealthResponse)
async def health_check(clock: IClock = Depends(get_board_clock)) -> HealthResponse:
    """Service status, uptime and the board's current date."""
    return _health("healthy", clock)


@router.get("/db", response_model=HealthResponse)
async def db_health(clock: IClock = Depends(get_board_clock)) -> HealthResponse:
    """
    Record store health.

    ``degraded`` when the database answers but migrations are pending,
    ``unhealthy`` when it cannot be reached.
    """
    from scoutboard.infrastructure.storage.sqlite import get_pool
    from scoutboard.infrastructure.storage.sqlite.migrations import (
        discover_migrations,
        get_applied_migrations,
    )

    try:
        pool = await get_pool()
        start = time.time()
        async with pool.acquire() as conn:
            applied = await get_applied_migrations(conn)
        latency = (time.time() - start) * 1000
    except Exception as e:
        logger.warning("db_health_failed", error=str(e))
        return _health(
            "unhealthy",
            clock,
            database=ProviderHealthResponse(name="sqlite", available=False, error=str(e)),
        )

    pending = [m.version for m in discover_migrations() if m.version not in applied]
    database = ProviderHealthResponse(
        name="sqlite",
        available=True,
        latency_ms=latency,
        schema_version=max(applied) if applied else None,
        pending_migrations=pending,
    )
    return _health("degraded" if pending else "healthy", clock, database=database)
