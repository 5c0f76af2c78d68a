"""
Skill match service - matched vs. missing skills for a (job, candidate) pair.

Cached in job_skill_analysis under the fixed-TTL policy. The percentage is
computed over required skills only; synonym handling is the provider's job.
"""
from typing import Optional
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.core import ai
from app.core.capabilities import Capabilities, get_capabilities
from app.core.database import DBScope
from app.core.exceptions import (
    CandidateNotFoundException,
    JobNotFoundException,
    MissingIdentifierException,
)
from app.core.logging import get_logger
from app.models.base import utcnow
from app.repositories.cache_repository import SkillMatchRepository
from app.repositories.candidate_repository import CandidateRepository
from app.repositories.job_repository import JobRepository
from app.schemas.analysis import SkillMatchResponse, SkillMatchResult
from app.services.staleness import is_within_ttl

logger = get_logger(__name__)


class SkillMatchService:
    def __init__(
        self,
        provider=None,
        job_repo: Optional[JobRepository] = None,
        candidate_repo: Optional[CandidateRepository] = None,
        skill_match_repo: Optional[SkillMatchRepository] = None,
        capabilities: Optional[Capabilities] = None,
    ):
        self.provider = provider or ai
        self.job_repo = job_repo or JobRepository()
        self.candidate_repo = candidate_repo or CandidateRepository()
        self.skill_match_repo = skill_match_repo or SkillMatchRepository()
        self._capabilities = capabilities

    @property
    def capabilities(self) -> Capabilities:
        return self._capabilities or get_capabilities()

    async def get_or_compute_skill_match(
        self,
        scope: DBScope,
        job_id: Optional[UUID],
        candidate_id: Optional[UUID],
    ) -> SkillMatchResponse:
        """
        Cached skill match if younger than the TTL, otherwise a fresh one.

        Raises:
            MissingIdentifierException: job_id or candidate_id not given.
            JobNotFoundException / CandidateNotFoundException
            AnalysisException: provider unreachable or malformed response.
        """
        if not job_id:
            raise MissingIdentifierException("job_id")
        if not candidate_id:
            raise MissingIdentifierException("candidate_id")

        job = await self.job_repo.get_with_skills(scope.caller, job_id)
        if not job:
            raise JobNotFoundException()
        candidate = await self.candidate_repo.get_with_skills(scope.caller, candidate_id)
        if not candidate:
            raise CandidateNotFoundException()

        if self.capabilities.skill_match_cache:
            cached = await self._cached(scope, job_id, candidate_id)
            if cached is not None:
                return cached

        result = await self.provider.analyze_skill_match(
            [
                {"skill_name": s.skill_name, "skill_level": s.skill_level}
                for s in candidate.skills
            ],
            [
                {"skill_name": s.skill_name, "importance": s.importance}
                for s in job.skills
            ],
        )
        analysis_date = utcnow()

        if self.capabilities.skill_match_cache:
            await self._persist(scope, job_id, candidate_id, result, analysis_date)

        logger.info(
            "skill_match_analyzed",
            job_id=str(job_id),
            candidate_id=str(candidate_id),
            match_percentage=result.match_percentage,
            missing=len(result.missing_skills),
        )
        return SkillMatchResponse(
            job_id=job_id,
            candidate_id=candidate_id,
            matching_skills=result.matching_skills,
            missing_skills=result.missing_skills,
            match_percentage=result.match_percentage,
            analysis_date=analysis_date,
            cached=False,
        )

    async def _cached(
        self,
        scope: DBScope,
        job_id: UUID,
        candidate_id: UUID,
    ) -> Optional[SkillMatchResponse]:
        row = await self.skill_match_repo.get_for_pair(scope.elevated, job_id, candidate_id)
        if row is None or not is_within_ttl(row.analysis_date):
            return None
        try:
            stored = SkillMatchResult.model_validate({
                "matching_skills": row.matching_skills,
                "missing_skills": row.missing_skills,
                "match_percentage": row.match_percentage,
            })
        except PydanticValidationError:
            logger.warning(
                "skill_match_cache_unreadable",
                job_id=str(job_id),
                candidate_id=str(candidate_id),
            )
            return None
        logger.debug("skill_match_cache_hit", job_id=str(job_id), candidate_id=str(candidate_id))
        return SkillMatchResponse(
            job_id=job_id,
            candidate_id=candidate_id,
            matching_skills=stored.matching_skills,
            missing_skills=stored.missing_skills,
            match_percentage=stored.match_percentage,
            analysis_date=row.analysis_date,
            cached=True,
        )

    async def _persist(
        self,
        scope: DBScope,
        job_id: UUID,
        candidate_id: UUID,
        result: SkillMatchResult,
        analysis_date,
    ) -> None:
        payload = result.model_dump(mode="json")
        try:
            await self.skill_match_repo.upsert_for_pair(
                scope.elevated,
                job_id=job_id,
                candidate_id=candidate_id,
                matching_skills=payload["matching_skills"],
                missing_skills=payload["missing_skills"],
                match_percentage=payload["match_percentage"],
                analysis_date=analysis_date,
            )
            await scope.elevated.commit()
        except SQLAlchemyError as exc:
            await scope.elevated.rollback()
            logger.error(
                "skill_match_persist_failed",
                job_id=str(job_id),
                candidate_id=str(candidate_id),
                error=str(exc),
            )
