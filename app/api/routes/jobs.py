"""
Job routes - skill extraction and the job invalidation cascade.
"""
from uuid import UUID

from fastapi import APIRouter, Depends, Request

from app.api.deps import get_db_scope
from app.core.database import DBScope
from app.core.rate_limit import limiter, RATE_AI, RATE_INVALIDATE
from app.schemas.job import InvalidationResponse, JobSkillResponse, JobSkillsRefreshResponse
from app.services.invalidation_service import InvalidationService
from app.services.job_skill_service import JobSkillService

router = APIRouter(prefix="/jobs", tags=["jobs"])

job_skill_service = JobSkillService()
invalidation_service = InvalidationService()


@router.post("/{job_id}/skills/extract", response_model=JobSkillsRefreshResponse)
@limiter.limit(RATE_AI)
async def extract_job_skills(
    request: Request,
    job_id: UUID,
    scope: DBScope = Depends(get_db_scope),
):
    """Re-extract the job's skills from its text and invalidate dependent caches."""
    skills = await job_skill_service.refresh_job_skills(scope, job_id)
    return JobSkillsRefreshResponse(
        job_id=job_id,
        skills=[JobSkillResponse.model_validate(s) for s in skills],
    )


@router.post("/{job_id}/invalidate", response_model=InvalidationResponse)
@limiter.limit(RATE_INVALIDATE)
async def invalidate_job_caches(
    request: Request,
    job_id: UUID,
    scope: DBScope = Depends(get_db_scope),
):
    """Call after editing a job's requirements or skills."""
    result = await invalidation_service.invalidate_job(scope, job_id)
    return InvalidationResponse(
        skill_matches_deleted=result.skill_matches_deleted,
        recommendations_deleted=result.recommendations_deleted,
        roadmaps_deleted=result.roadmaps_deleted,
        failed_steps=result.failed_steps,
    )
