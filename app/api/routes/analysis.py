"""
Analysis routes - compatibility, skill match, recommendations and the
background triggers.
"""
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from app.api.deps import get_db_scope
from app.core.database import DBScope
from app.core.rate_limit import limiter, RATE_AI, RATE_INVALIDATE
from app.schemas.analysis import (
    CompatibilityResponse,
    ReanalyzeRequest,
    RecommendationResponse,
    ScheduleResponse,
    SkillMatchResponse,
)
from app.schemas.base import MessageResponse
from app.services.background_service import BackgroundAnalysisDispatcher
from app.services.compatibility_service import CompatibilityService
from app.services.invalidation_service import InvalidationService
from app.services.recommendation_service import RecommendationService
from app.services.skill_match_service import SkillMatchService

router = APIRouter(prefix="/analysis", tags=["analysis"])

compatibility_service = CompatibilityService()
skill_match_service = SkillMatchService()
recommendation_service = RecommendationService()
invalidation_service = InvalidationService()
dispatcher = BackgroundAnalysisDispatcher()


@router.get(
    "/jobs/{job_id}/candidates/{candidate_id}/compatibility",
    response_model=CompatibilityResponse,
)
@limiter.limit(RATE_AI)
async def get_compatibility(
    request: Request,
    job_id: UUID,
    candidate_id: UUID,
    force_refresh: bool = Query(False, description="Recompute even if the stored analysis is fresh"),
    scope: DBScope = Depends(get_db_scope),
):
    """Compatibility score of the candidate's application to the job."""
    return await compatibility_service.get_or_compute_compatibility(
        scope, job_id, candidate_id, force_refresh=force_refresh
    )


@router.get(
    "/jobs/{job_id}/candidates/{candidate_id}/skill-match",
    response_model=SkillMatchResponse,
)
@limiter.limit(RATE_AI)
async def get_skill_match(
    request: Request,
    job_id: UUID,
    candidate_id: UUID,
    scope: DBScope = Depends(get_db_scope),
):
    """Matched vs. missing skills for the pair."""
    return await skill_match_service.get_or_compute_skill_match(scope, job_id, candidate_id)


@router.get(
    "/jobs/{job_id}/candidates/{candidate_id}/recommendations",
    response_model=RecommendationResponse,
)
@limiter.limit(RATE_AI)
async def get_recommendations(
    request: Request,
    job_id: UUID,
    candidate_id: UUID,
    scope: DBScope = Depends(get_db_scope),
):
    """Learning recommendations for the skills the candidate is missing."""
    return await recommendation_service.get_or_compute_recommendations(
        scope, job_id, candidate_id
    )


@router.post("/reanalyze", response_model=MessageResponse)
@limiter.limit(RATE_INVALIDATE)
async def trigger_reanalysis(
    request: Request,
    body: ReanalyzeRequest,
    scope: DBScope = Depends(get_db_scope),
):
    """Drop the pair's skill match so the next read performs a fresh analysis."""
    await invalidation_service.invalidate_reanalysis(scope, body.job_id, body.candidate_id)
    return MessageResponse(message="Re-analysis triggered. The next read performs a fresh analysis.")


@router.post("/applications/{application_id}/schedule", response_model=ScheduleResponse)
async def schedule_application_analysis(application_id: UUID):
    """Queue compatibility analysis for a newly submitted application."""
    task_id = dispatcher.schedule_background_analysis(application_id)
    return ScheduleResponse(scheduled=task_id is not None, task_id=task_id)


@router.post("/candidates/{candidate_id}/profile-changed", response_model=ScheduleResponse)
async def schedule_profile_reanalysis(candidate_id: UUID):
    """Queue re-scoring of the candidate's pending and shortlisted applications."""
    task_id = dispatcher.schedule_profile_reanalysis(candidate_id)
    return ScheduleResponse(scheduled=task_id is not None, task_id=task_id)
