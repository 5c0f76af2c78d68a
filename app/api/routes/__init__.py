"""
API Routes package.
"""
from fastapi import APIRouter

from app.api.routes.health import router as health_router
from app.api.routes.analysis import router as analysis_router
from app.api.routes.jobs import router as jobs_router
from app.api.routes.roadmap import router as roadmap_router

# Main API router
api_router = APIRouter()

# Include all routers
api_router.include_router(health_router)
api_router.include_router(analysis_router)
api_router.include_router(jobs_router)
api_router.include_router(roadmap_router)

__all__ = [
    "api_router",
    "health_router",
    "analysis_router",
    "jobs_router",
    "roadmap_router",
]
