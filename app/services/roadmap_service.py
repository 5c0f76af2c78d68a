"""
Roadmap service - a candidate's phased learning plan across every job on
their interested list.

Pipeline on a cache miss:
  1. Load the interested jobs (none -> no roadmap)
  2. If none of them has stored skills, extract skills on the fly
  3. Aggregate required skills and classify against the candidate's skills
     (nothing required -> no roadmap)
  4. Ask the provider for learning recommendations over the gap list
  5. Build phases, gap analysis and career paths; cache under the TTL policy
"""
from typing import Dict, List, Optional, Union
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.core import ai
from app.core.capabilities import Capabilities, get_capabilities
from app.core.database import DBScope
from app.core.exceptions import (
    AnalysisException,
    CandidateNotFoundException,
    MissingIdentifierException,
)
from app.core.logging import get_logger
from app.models.base import utcnow
from app.models.job import Job
from app.repositories.cache_repository import LearningRoadmapRepository
from app.repositories.candidate_repository import CandidateRepository
from app.repositories.interested_job_repository import InterestedJobRepository
from app.schemas.analysis import MissingSkill, SkillRecommendation
from app.schemas.roadmap import (
    NoRoadmapReason,
    NoRoadmapResult,
    RoadmapData,
    RoadmapResponse,
)
from app.schemas.skills import GapPriority, SkillImportance
from app.services.job_skill_service import JobSkillService
from app.services.roadmap_builder import build_roadmap
from app.services.skill_aggregator import (
    SkillAggregator,
    SkillClassification,
    normalize_skill_name,
)
from app.services.staleness import is_within_ttl

logger = get_logger(__name__)

RoadmapOutcome = Union[RoadmapResponse, NoRoadmapResult]


class RoadmapService:
    def __init__(
        self,
        provider=None,
        candidate_repo: Optional[CandidateRepository] = None,
        interested_repo: Optional[InterestedJobRepository] = None,
        roadmap_repo: Optional[LearningRoadmapRepository] = None,
        job_skill_service: Optional[JobSkillService] = None,
        capabilities: Optional[Capabilities] = None,
    ):
        self.provider = provider or ai
        self.candidate_repo = candidate_repo or CandidateRepository()
        self.interested_repo = interested_repo or InterestedJobRepository()
        self.roadmap_repo = roadmap_repo or LearningRoadmapRepository()
        self.job_skill_service = job_skill_service or JobSkillService(provider=self.provider)
        self.aggregator = SkillAggregator(provider=self.provider)
        self._capabilities = capabilities

    @property
    def capabilities(self) -> Capabilities:
        return self._capabilities or get_capabilities()

    async def get_or_compute_roadmap(
        self,
        scope: DBScope,
        candidate_id: Optional[UUID],
        force_refresh: bool = False,
    ) -> RoadmapOutcome:
        """
        Cached roadmap if younger than the TTL, otherwise a fresh one, or an
        explicit NoRoadmapResult.

        Raises:
            MissingIdentifierException: candidate_id not given.
            CandidateNotFoundException: candidate does not exist.
            AnalysisException: provider unreachable or malformed response.
        """
        if not candidate_id:
            raise MissingIdentifierException("candidate_id")

        candidate = await self.candidate_repo.get_with_skills(scope.caller, candidate_id)
        if not candidate:
            raise CandidateNotFoundException()

        if self.capabilities.roadmap_cache and not force_refresh:
            cached = await self._cached(scope, candidate_id)
            if cached is not None:
                return cached

        jobs = await self.interested_repo.list_jobs_for_candidate(scope.caller, candidate_id)
        if not jobs:
            return NoRoadmapResult(
                candidate_id=candidate_id,
                reason=NoRoadmapReason.NO_INTERESTED_JOBS,
                message="Add jobs to your interested list to get a learning roadmap.",
            )

        if not any(job.skills for job in jobs):
            jobs = await self._extract_on_the_fly(scope, candidate_id, jobs)

        classification = await self.aggregator.compare(jobs, candidate.skills)
        if not classification.requirements:
            return NoRoadmapResult(
                candidate_id=candidate_id,
                reason=NoRoadmapReason.NO_EXTRACTABLE_SKILLS,
                message="None of your interested jobs lists any required skills yet.",
            )

        recommendations = await self._recommendations(classification)
        roadmap = build_roadmap(classification, jobs, recommendations)
        source_job_ids = [str(job.id) for job in jobs]
        generated_date = utcnow()

        if self.capabilities.roadmap_cache:
            await self._persist(scope, candidate_id, roadmap, source_job_ids, generated_date)

        logger.info(
            "roadmap_generated",
            candidate_id=str(candidate_id),
            jobs=len(jobs),
            skills_needed=roadmap.total_skills_needed,
            phases=len(roadmap.learning_phases),
        )
        return RoadmapResponse(
            candidate_id=candidate_id,
            roadmap=roadmap,
            source_job_ids=source_job_ids,
            generated_date=generated_date,
            cached=False,
        )

    async def _extract_on_the_fly(
        self,
        scope: DBScope,
        candidate_id: UUID,
        jobs: List[Job],
    ) -> List[Job]:
        """Extract skills for every interested job; one failing job does not stop the rest."""
        for job in jobs:
            try:
                await self.job_skill_service.refresh_job_skills(scope, job.id)
            except (AnalysisException, SQLAlchemyError) as exc:
                logger.warning(
                    "roadmap_skill_extraction_failed",
                    candidate_id=str(candidate_id),
                    job_id=str(job.id),
                    error=str(exc),
                )
        return await self.interested_repo.list_jobs_for_candidate(scope.caller, candidate_id)

    async def _recommendations(
        self,
        classification: SkillClassification,
    ) -> Dict[str, SkillRecommendation]:
        if not classification.gaps:
            return {}
        missing = [
            MissingSkill(
                skill=s.requirement.name,
                job_requirement=SkillImportance.REQUIRED,
                importance=GapPriority.HIGH if s.current_level is None else GapPriority.MEDIUM,
            ).model_dump(mode="json")
            for s in classification.gaps
        ]
        recommendations = await self.provider.get_skill_recommendations(missing)
        return {normalize_skill_name(r.skill): r for r in recommendations}

    async def _cached(self, scope: DBScope, candidate_id: UUID) -> Optional[RoadmapResponse]:
        row = await self.roadmap_repo.get_for_candidate(scope.elevated, candidate_id)
        if row is None or not is_within_ttl(row.generated_date):
            return None
        try:
            roadmap = RoadmapData.model_validate(row.roadmap_data)
        except PydanticValidationError:
            logger.warning("roadmap_cache_unreadable", candidate_id=str(candidate_id))
            return None
        logger.debug("roadmap_cache_hit", candidate_id=str(candidate_id))
        return RoadmapResponse(
            candidate_id=candidate_id,
            roadmap=roadmap,
            source_job_ids=list(row.source_job_ids or []),
            generated_date=row.generated_date,
            cached=True,
        )

    async def _persist(
        self,
        scope: DBScope,
        candidate_id: UUID,
        roadmap: RoadmapData,
        source_job_ids: List[str],
        generated_date,
    ) -> None:
        try:
            await self.roadmap_repo.upsert_for_candidate(
                scope.elevated,
                candidate_id=candidate_id,
                roadmap_data=roadmap.model_dump(mode="json"),
                source_job_ids=source_job_ids,
                total_skills_needed=roadmap.total_skills_needed,
                total_time_estimate=roadmap.total_time_estimate,
                generated_date=generated_date,
            )
            await scope.elevated.commit()
        except SQLAlchemyError as exc:
            await scope.elevated.rollback()
            logger.error("roadmap_persist_failed", candidate_id=str(candidate_id), error=str(exc))
