"""Health check endpoint for the records API."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from starlette.concurrency import run_in_threadpool

from dxrecords.api.dependencies import StorageDep
from dxrecords.api.models.health import DatabaseHealth, HealthResponse
from dxrecords.domain.ports import StoragePort
from dxrecords.infrastructure.settings import APP_VERSION

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])


async def check_database_health(storage: StoragePort) -> DatabaseHealth:
    """Check database connection health.

    Parameters:
        storage: Storage adapter instance

    Returns:
        DatabaseHealth: Database health status

    Security Impact:
        - Only checks connectivity, no record data or error text exposed
    """
    result = await run_in_threadpool(storage.ping)
    if result.is_success():
        return DatabaseHealth(status="connected", type=storage.db_type, response_time_ms=result.value)

    logger.warning(f"Database ping failed: {result.error}")
    return DatabaseHealth(status="disconnected", type=storage.db_type, response_time_ms=None)


@router.get("/health", response_model=HealthResponse)
async def health_check(storage: StorageDep) -> HealthResponse:
    """Health check endpoint.

    Used by monitoring tools and load balancers. Answers 200 whether or not
    the database is reachable (schema setup is not needed for the ping); the
    body reports "unhealthy" when it is not. Only an invalid storage
    configuration, which prevents building the adapter at all, yields a 500.
    """
    db_health = await check_database_health(storage)

    return HealthResponse(
        status="healthy" if db_health.status == "connected" else "unhealthy",
        timestamp=datetime.now(timezone.utc),
        version=APP_VERSION,
        database=db_health
    )
