"""
Roadmap routes - learning roadmap and the interested-job list that feeds it.
"""
from typing import Union
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from app.api.deps import get_db_scope
from app.core.database import DBScope
from app.core.rate_limit import limiter, RATE_AI
from app.schemas.roadmap import InterestedJobChange, NoRoadmapResult, RoadmapResponse
from app.services.interested_job_service import InterestedJobService
from app.services.roadmap_service import RoadmapService

router = APIRouter(prefix="/candidates/{candidate_id}", tags=["roadmap"])

roadmap_service = RoadmapService()
interested_job_service = InterestedJobService()


@router.get("/roadmap", response_model=Union[RoadmapResponse, NoRoadmapResult])
@limiter.limit(RATE_AI)
async def get_learning_roadmap(
    request: Request,
    candidate_id: UUID,
    force_refresh: bool = Query(False),
    scope: DBScope = Depends(get_db_scope),
):
    """Phased learning roadmap across every interested job, or why there is none."""
    return await roadmap_service.get_or_compute_roadmap(
        scope, candidate_id, force_refresh=force_refresh
    )


@router.put("/interested-jobs/{job_id}", response_model=InterestedJobChange)
async def add_interested_job(
    candidate_id: UUID,
    job_id: UUID,
    scope: DBScope = Depends(get_db_scope),
):
    return await interested_job_service.add_interested_job(scope, candidate_id, job_id)


@router.delete("/interested-jobs/{job_id}", response_model=InterestedJobChange)
async def remove_interested_job(
    candidate_id: UUID,
    job_id: UUID,
    scope: DBScope = Depends(get_db_scope),
):
    return await interested_job_service.remove_interested_job(scope, candidate_id, job_id)
