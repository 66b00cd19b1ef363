"""
Health Check Endpoints

Health and readiness checks for orchestration systems.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from ticket_analytics.analytics import AnalyticsService
from ticket_analytics.config import get_settings
from ticket_analytics.database.connection import check_database_health
from ticket_analytics.serving.api.dependencies import get_analytics_service
from ticket_analytics.serving.cache import get_redis, is_cache_ready

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    environment: str
    timestamp: datetime
    checks: Dict[str, Any]


@router.get("/health", response_model=HealthResponse)
async def health_check(
    service: AnalyticsService = Depends(get_analytics_service),
) -> HealthResponse:
    """
    Comprehensive health check endpoint.

    Checks:
    - Analytics engine (full rollup of yesterday)
    - Database connectivity (sql backend only)
    - Redis connectivity (when enabled)
    """
    settings = get_settings()
    checks: Dict[str, Any] = {}
    overall_status = "healthy"

    analytics_health = await service.health_check()
    checks["analytics"] = analytics_health.model_dump(by_alias=True, exclude_none=True)
    if analytics_health.status != "healthy":
        overall_status = "unhealthy"

    if settings.analytics.store_backend == "sql":
        db_health = await check_database_health()
        checks["database"] = db_health
        if db_health.get("status") != "healthy":
            overall_status = "unhealthy"

    if is_cache_ready():
        try:
            await get_redis().ping()
            checks["redis"] = {"status": "healthy"}
        except Exception as e:
            checks["redis"] = {"status": "unhealthy", "error": str(e)}
            if overall_status == "healthy":
                overall_status = "degraded"

    return HealthResponse(
        status=overall_status,
        version=settings.version,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
    )


@router.get("/health/live")
async def liveness_check() -> Dict[str, str]:
    """Liveness probe: 200 while the process is running."""
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_check(response: Response) -> Dict[str, str]:
    """Readiness probe: 503 until the document store is reachable."""
    if get_settings().analytics.store_backend != "sql":
        return {"status": "ready"}

    db_health = await check_database_health()
    if db_health.get("status") != "healthy":
        response.status_code = 503
        return {"status": "not_ready", "reason": "database_unavailable"}

    return {"status": "ready"}
