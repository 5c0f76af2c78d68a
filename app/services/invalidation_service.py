"""
Invalidation cascade - evicts dependent cache rows after upstream changes.

  invalidate_job         job requirements or skills edited: every skill match
                         and recommendation for the job, plus the roadmap of
                         every candidate interested in it
  invalidate_reanalysis  force re-analyze of one pair: that pair's skill match
  invalidate_roadmap     interested-job set changed: that candidate's roadmap

Compatibility snapshots are never deleted here; they self-invalidate through
updated_at. Candidate-side edits trigger nothing; their skill-match,
recommendation and roadmap rows simply age out on TTL.

Each step commits on its own. A failed step is rolled back, logged and
reported in the result while the remaining steps still run.
"""
from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from app.core.capabilities import Capabilities, get_capabilities
from app.core.database import DBScope
from app.core.exceptions import MissingIdentifierException
from app.core.logging import get_logger
from app.repositories.cache_repository import (
    LearningRoadmapRepository,
    RecommendationCacheRepository,
    SkillMatchRepository,
)
from app.repositories.interested_job_repository import InterestedJobRepository

logger = get_logger(__name__)


@dataclass
class InvalidationResult:
    skill_matches_deleted: int = 0
    recommendations_deleted: int = 0
    roadmaps_deleted: int = 0
    failed_steps: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed_steps


class InvalidationService:
    def __init__(
        self,
        skill_match_repo: Optional[SkillMatchRepository] = None,
        recommendation_repo: Optional[RecommendationCacheRepository] = None,
        roadmap_repo: Optional[LearningRoadmapRepository] = None,
        interested_repo: Optional[InterestedJobRepository] = None,
        capabilities: Optional[Capabilities] = None,
    ):
        self.skill_match_repo = skill_match_repo or SkillMatchRepository()
        self.recommendation_repo = recommendation_repo or RecommendationCacheRepository()
        self.roadmap_repo = roadmap_repo or LearningRoadmapRepository()
        self.interested_repo = interested_repo or InterestedJobRepository()
        self._capabilities = capabilities

    @property
    def capabilities(self) -> Capabilities:
        return self._capabilities or get_capabilities()

    async def invalidate_job(
        self,
        scope: DBScope,
        job_id: Optional[UUID],
    ) -> InvalidationResult:
        if not job_id:
            raise MissingIdentifierException("job_id")

        result = InvalidationResult()
        caps = self.capabilities
        db = scope.elevated

        if caps.skill_match_cache:
            deleted = await self._step(
                scope, "skill_matches", self.skill_match_repo.delete_for_job(db, job_id), result
            )
            result.skill_matches_deleted = deleted

        if caps.recommendation_cache:
            deleted = await self._step(
                scope, "recommendations", self.recommendation_repo.delete_for_job(db, job_id), result
            )
            result.recommendations_deleted = deleted

        if caps.roadmap_cache:
            candidate_ids = await self.interested_repo.list_candidate_ids_for_job(db, job_id)
            if candidate_ids:
                deleted = await self._step(
                    scope,
                    "roadmaps",
                    self.roadmap_repo.delete_for_candidates(db, candidate_ids),
                    result,
                )
                result.roadmaps_deleted = deleted

        logger.info(
            "job_cache_invalidated",
            job_id=str(job_id),
            skill_matches=result.skill_matches_deleted,
            recommendations=result.recommendations_deleted,
            roadmaps=result.roadmaps_deleted,
            failed_steps=result.failed_steps,
        )
        return result

    async def invalidate_reanalysis(
        self,
        scope: DBScope,
        job_id: Optional[UUID],
        candidate_id: Optional[UUID],
    ) -> InvalidationResult:
        """Drop only this pair's skill match so the next read recomputes it."""
        if not job_id:
            raise MissingIdentifierException("job_id")
        if not candidate_id:
            raise MissingIdentifierException("candidate_id")

        result = InvalidationResult()
        if self.capabilities.skill_match_cache:
            result.skill_matches_deleted = await self._step(
                scope,
                "skill_matches",
                self.skill_match_repo.delete_for_pair(scope.elevated, job_id, candidate_id),
                result,
            )

        logger.info(
            "reanalysis_triggered",
            job_id=str(job_id),
            candidate_id=str(candidate_id),
            deleted=result.skill_matches_deleted,
        )
        return result

    async def invalidate_roadmap(
        self,
        scope: DBScope,
        candidate_id: Optional[UUID],
    ) -> InvalidationResult:
        if not candidate_id:
            raise MissingIdentifierException("candidate_id")

        result = InvalidationResult()
        if self.capabilities.roadmap_cache:
            result.roadmaps_deleted = await self._step(
                scope,
                "roadmaps",
                self.roadmap_repo.delete_for_candidates(scope.elevated, [candidate_id]),
                result,
            )
        logger.debug(
            "roadmap_invalidated",
            candidate_id=str(candidate_id),
            deleted=result.roadmaps_deleted,
        )
        return result

    async def _step(self, scope: DBScope, name: str, operation, result: InvalidationResult) -> int:
        try:
            deleted = await operation
            await scope.elevated.commit()
            return deleted
        except SQLAlchemyError as exc:
            await scope.elevated.rollback()
            result.failed_steps.append(name)
            logger.error("cache_invalidation_step_failed", step=name, error=str(exc))
            return 0
