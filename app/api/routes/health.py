"""
Health check routes.
"""
from datetime import datetime, timezone
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
import redis.asyncio as redis

from app.core.capabilities import get_capabilities
from app.core.database import get_db
from app.core.config import settings
from app.schemas.base import BaseSchema

router = APIRouter(tags=["health"])


class HealthResponse(BaseSchema):
    """Health check response."""

    status: str
    timestamp: str
    checks: dict
    analysis_queue_depth: Optional[int] = None
    capabilities: dict = {}


@router.get("/health", response_model=HealthResponse)
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Health check endpoint for monitoring.

    Returns 200 if all systems are operational. Queue depth is the number of
    analyses waiting for a worker.
    """
    checks = {}
    queue_depth = None

    # Check database
    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "healthy"
    except Exception as e:
        checks["database"] = f"unhealthy: {str(e)}"

    # Check Redis (broker) and the analysis backlog
    try:
        r = redis.from_url(settings.redis_url)
        await r.ping()
        queue_depth = await r.llen(settings.analysis_queue)
        await r.aclose()
        checks["redis"] = "healthy"
    except Exception as e:
        checks["redis"] = f"unhealthy: {str(e)}"

    # Overall status
    all_healthy = all(v == "healthy" for v in checks.values())
    caps = get_capabilities()

    return HealthResponse(
        status="healthy" if all_healthy else "degraded",
        timestamp=datetime.now(timezone.utc).isoformat(),
        checks=checks,
        analysis_queue_depth=queue_depth,
        capabilities={
            "skill_match_cache": caps.skill_match_cache,
            "recommendation_cache": caps.recommendation_cache,
            "roadmap_cache": caps.roadmap_cache,
        },
    )
