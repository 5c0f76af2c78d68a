"""
Compatibility service - 0-100 candidate/job fit scores with breakdown.

The analysis is embedded in the Application row and is valid while it is
newer than both the job's and the candidate's updated_at. Recomputes
overwrite the snapshot; there is no history.
"""
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import ai
from app.core.database import DBScope
from app.core.exceptions import (
    ApplicationNotFoundException,
    CandidateNotFoundException,
    JobNotFoundException,
    MissingIdentifierException,
)
from app.core.logging import get_logger
from app.models.application import Application
from app.models.base import utcnow
from app.models.candidate_profile import CandidateProfile
from app.models.job import Job
from app.repositories.application_repository import ApplicationRepository
from app.repositories.candidate_repository import CandidateRepository
from app.repositories.job_repository import JobRepository
from app.schemas.analysis import CompatibilityAnalysis, CompatibilityResponse
from app.services.staleness import is_fresh_against

logger = get_logger(__name__)


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def candidate_composite(candidate: CandidateProfile) -> Dict[str, Any]:
    """Everything about the candidate the scorer gets to see."""
    return {
        "headline": candidate.headline,
        "bio": candidate.bio,
        "current_job_title": candidate.current_job_title,
        "current_company": candidate.current_company,
        "years_of_experience": (
            float(candidate.years_of_experience)
            if candidate.years_of_experience is not None
            else None
        ),
        "skills": [
            {"skill_name": s.skill_name, "skill_level": s.skill_level}
            for s in candidate.skills
        ],
        "experience": [
            {
                "job_title": e.job_title,
                "company": e.company,
                "description": e.description,
                "start_date": _iso(e.start_date),
                "end_date": _iso(e.end_date),
                "is_current": e.is_current,
            }
            for e in candidate.experience
        ],
        "education": [
            {
                "institution": e.institution,
                "degree": e.degree,
                "field_of_study": e.field_of_study,
                "start_date": _iso(e.start_date),
                "end_date": _iso(e.end_date),
            }
            for e in candidate.education
        ],
        "certifications": [
            {
                "name": c.name,
                "issuing_organization": c.issuing_organization,
                "issue_date": _iso(c.issue_date),
            }
            for c in candidate.certifications
        ],
    }


def job_composite(job: Job) -> Dict[str, Any]:
    return {
        "title": job.title,
        "experience_level": job.experience_level,
        "description": job.description,
        "responsibilities": job.responsibilities,
        "qualifications": job.qualifications,
        "nice_to_have": job.nice_to_have,
        "minimum_experience_years": job.minimum_experience_years,
        "required_skills": [
            {
                "skill_name": s.skill_name,
                "importance": s.importance,
                "required_level": s.required_level,
            }
            for s in job.skills
        ],
    }


class CompatibilityService:
    """Retrieves or recomputes the compatibility analysis of an application."""

    def __init__(
        self,
        provider=None,
        application_repo: Optional[ApplicationRepository] = None,
        job_repo: Optional[JobRepository] = None,
        candidate_repo: Optional[CandidateRepository] = None,
    ):
        self.provider = provider or ai
        self.application_repo = application_repo or ApplicationRepository()
        self.job_repo = job_repo or JobRepository()
        self.candidate_repo = candidate_repo or CandidateRepository()

    async def get_or_compute_compatibility(
        self,
        scope: DBScope,
        job_id: Optional[UUID],
        candidate_id: Optional[UUID],
        force_refresh: bool = False,
    ) -> CompatibilityResponse:
        """
        Compatibility of the candidate's application to the job.

        Raises:
            MissingIdentifierException: job_id or candidate_id not given.
            ApplicationNotFoundException: the candidate never applied.
            AnalysisException: provider unreachable or malformed response.
        """
        if not job_id:
            raise MissingIdentifierException("job_id")
        if not candidate_id:
            raise MissingIdentifierException("candidate_id")

        application = await self.application_repo.find_by_job_and_candidate(
            scope.caller, job_id, candidate_id
        )
        if not application:
            raise ApplicationNotFoundException()
        return await self._get_or_compute(scope, application, force_refresh, reader=scope.caller)

    async def analyze_application(
        self,
        scope: DBScope,
        application_id: Optional[UUID],
        force_refresh: bool = False,
    ) -> CompatibilityResponse:
        """Entry point for background runs, which only know the application."""
        if not application_id:
            raise MissingIdentifierException("application_id")

        application = await self.application_repo.get_by_id(scope.elevated, application_id)
        if not application:
            raise ApplicationNotFoundException()
        return await self._get_or_compute(scope, application, force_refresh, reader=scope.elevated)

    async def _get_or_compute(
        self,
        scope: DBScope,
        application: Application,
        force_refresh: bool,
        reader: AsyncSession,
    ) -> CompatibilityResponse:
        job = await self.job_repo.get_with_skills(reader, application.job_id)
        if not job:
            raise JobNotFoundException()
        candidate = await self.candidate_repo.get_with_profile_details(
            reader, application.candidate_id
        )
        if not candidate:
            raise CandidateNotFoundException()

        if force_refresh:
            await self._clear(scope, application)
        else:
            cached = self._cached(application, job, candidate)
            if cached is not None:
                logger.debug("compatibility_cache_hit", application_id=str(application.id))
                return cached

        analysis = await self.provider.analyze_candidate_compatibility(
            candidate_composite(candidate),
            job_composite(job),
        )
        analyzed_at = utcnow()
        await self._persist(scope, application, analysis, analyzed_at)

        logger.info(
            "compatibility_analyzed",
            application_id=str(application.id),
            job_id=str(job.id),
            candidate_id=str(candidate.id),
            score=analysis.overall_score,
            fit_level=analysis.fit_level,
        )
        return CompatibilityResponse(
            application_id=application.id,
            job_id=job.id,
            candidate_id=candidate.id,
            analysis=analysis,
            analyzed_at=analyzed_at,
            cached=False,
        )

    def _cached(
        self,
        application: Application,
        job: Job,
        candidate: CandidateProfile,
    ) -> Optional[CompatibilityResponse]:
        if application.ai_analysis_data is None:
            return None
        if not is_fresh_against(application.ai_analyzed_at, job.updated_at, candidate.updated_at):
            return None
        try:
            analysis = CompatibilityAnalysis.model_validate(application.ai_analysis_data)
        except PydanticValidationError:
            logger.warning("compatibility_cache_unreadable", application_id=str(application.id))
            return None
        return CompatibilityResponse(
            application_id=application.id,
            job_id=job.id,
            candidate_id=candidate.id,
            analysis=analysis,
            analyzed_at=application.ai_analyzed_at,
            cached=True,
        )

    async def _clear(self, scope: DBScope, application: Application) -> None:
        try:
            await self.application_repo.clear_analysis(scope.elevated, application.id)
            await scope.elevated.commit()
        except SQLAlchemyError as exc:
            await scope.elevated.rollback()
            logger.error(
                "compatibility_clear_failed",
                application_id=str(application.id),
                error=str(exc),
            )

    async def _persist(
        self,
        scope: DBScope,
        application: Application,
        analysis: CompatibilityAnalysis,
        analyzed_at,
    ) -> None:
        """Store the snapshot. A failure here is logged; the result is still returned."""
        try:
            await self.application_repo.save_analysis(
                scope.elevated,
                application.id,
                score=analysis.overall_score,
                data=analysis.model_dump(mode="json"),
                analyzed_at=analyzed_at,
            )
            await scope.elevated.commit()
        except SQLAlchemyError as exc:
            await scope.elevated.rollback()
            logger.error(
                "compatibility_persist_failed",
                application_id=str(application.id),
                error=str(exc),
            )
