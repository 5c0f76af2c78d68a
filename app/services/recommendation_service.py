"""
Recommendation service - how to learn each skill a candidate is missing for a job.

The missing-skill list comes from the pair's skill match (computed and cached
first when absent). No missing skills means no provider call and no cache row.
"""
from typing import List, Optional
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.core import ai
from app.core.capabilities import Capabilities, get_capabilities
from app.core.database import DBScope
from app.core.exceptions import MissingIdentifierException
from app.core.logging import get_logger
from app.models.base import utcnow
from app.repositories.cache_repository import RecommendationCacheRepository
from app.schemas.analysis import MissingSkill, RecommendationResponse, SkillRecommendation
from app.services.skill_match_service import SkillMatchService
from app.services.staleness import is_within_ttl

logger = get_logger(__name__)


class RecommendationService:
    def __init__(
        self,
        provider=None,
        skill_match_service: Optional[SkillMatchService] = None,
        recommendation_repo: Optional[RecommendationCacheRepository] = None,
        capabilities: Optional[Capabilities] = None,
    ):
        self.provider = provider or ai
        self.skill_match_service = skill_match_service or SkillMatchService(
            provider=self.provider,
            capabilities=capabilities,
        )
        self.recommendation_repo = recommendation_repo or RecommendationCacheRepository()
        self._capabilities = capabilities

    @property
    def capabilities(self) -> Capabilities:
        return self._capabilities or get_capabilities()

    async def get_recommendations_for(
        self,
        missing_skills: List[MissingSkill],
    ) -> List[SkillRecommendation]:
        """Provider call over a missing-skill list; empty input never reaches the provider."""
        if not missing_skills:
            return []
        return await self.provider.get_skill_recommendations(
            [s.model_dump(mode="json") for s in missing_skills]
        )

    async def get_or_compute_recommendations(
        self,
        scope: DBScope,
        job_id: Optional[UUID],
        candidate_id: Optional[UUID],
    ) -> RecommendationResponse:
        if not job_id:
            raise MissingIdentifierException("job_id")
        if not candidate_id:
            raise MissingIdentifierException("candidate_id")

        if self.capabilities.recommendation_cache:
            cached = await self._cached(scope, job_id, candidate_id)
            if cached is not None:
                return cached

        skill_match = await self.skill_match_service.get_or_compute_skill_match(
            scope, job_id, candidate_id
        )
        if not skill_match.missing_skills:
            logger.debug(
                "recommendations_not_needed",
                job_id=str(job_id),
                candidate_id=str(candidate_id),
            )
            return RecommendationResponse(
                job_id=job_id,
                candidate_id=candidate_id,
                recommendations=[],
                cached=False,
            )

        recommendations = await self.get_recommendations_for(skill_match.missing_skills)
        generated_date = utcnow()

        if self.capabilities.recommendation_cache:
            await self._persist(scope, job_id, candidate_id, recommendations, generated_date)

        logger.info(
            "recommendations_generated",
            job_id=str(job_id),
            candidate_id=str(candidate_id),
            count=len(recommendations),
        )
        return RecommendationResponse(
            job_id=job_id,
            candidate_id=candidate_id,
            recommendations=recommendations,
            generated_date=generated_date,
            cached=False,
        )

    async def _cached(
        self,
        scope: DBScope,
        job_id: UUID,
        candidate_id: UUID,
    ) -> Optional[RecommendationResponse]:
        row = await self.recommendation_repo.get_for_pair(scope.elevated, job_id, candidate_id)
        if row is None or not is_within_ttl(row.generated_date):
            return None
        try:
            recommendations = [SkillRecommendation.model_validate(r) for r in row.recommendations]
        except PydanticValidationError:
            logger.warning(
                "recommendation_cache_unreadable",
                job_id=str(job_id),
                candidate_id=str(candidate_id),
            )
            return None
        return RecommendationResponse(
            job_id=job_id,
            candidate_id=candidate_id,
            recommendations=recommendations,
            generated_date=row.generated_date,
            cached=True,
        )

    async def _persist(
        self,
        scope: DBScope,
        job_id: UUID,
        candidate_id: UUID,
        recommendations: List[SkillRecommendation],
        generated_date,
    ) -> None:
        try:
            await self.recommendation_repo.upsert_for_pair(
                scope.elevated,
                job_id=job_id,
                candidate_id=candidate_id,
                recommendations=[r.model_dump(mode="json") for r in recommendations],
                generated_date=generated_date,
            )
            await scope.elevated.commit()
        except SQLAlchemyError as exc:
            await scope.elevated.rollback()
            logger.error(
                "recommendation_persist_failed",
                job_id=str(job_id),
                candidate_id=str(candidate_id),
                error=str(exc),
            )
