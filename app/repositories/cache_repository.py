"""
Cache repositories - SkillMatchAnalysis, SkillRecommendationCache and
LearningRoadmap.

Reads never fail on a miss (they return None). Writes are whole-record
upserts keyed by the cache key. Deletes are by filter and return the number
of rows removed.
"""
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.learning_roadmap import LearningRoadmap
from app.models.skill_match_analysis import SkillMatchAnalysis
from app.models.skill_recommendation import SkillRecommendationCache
from app.repositories.base import BaseRepository


class SkillMatchRepository(BaseRepository[SkillMatchAnalysis]):
    def __init__(self):
        super().__init__(SkillMatchAnalysis)

    async def get_for_pair(
        self,
        db: AsyncSession,
        job_id: UUID,
        candidate_id: UUID,
    ) -> Optional[SkillMatchAnalysis]:
        result = await db.execute(
            select(SkillMatchAnalysis).where(
                SkillMatchAnalysis.job_id == job_id,
                SkillMatchAnalysis.candidate_id == candidate_id,
            )
        )
        return result.scalar_one_or_none()

    async def upsert_for_pair(self, db: AsyncSession, **values) -> None:
        await self.upsert(db, key_columns=("job_id", "candidate_id"), values=values)

    async def delete_for_job(self, db: AsyncSession, job_id: UUID) -> int:
        return await self.delete_where(db, SkillMatchAnalysis.job_id == job_id)

    async def delete_for_pair(
        self,
        db: AsyncSession,
        job_id: UUID,
        candidate_id: UUID,
    ) -> int:
        return await self.delete_where(
            db,
            SkillMatchAnalysis.job_id == job_id,
            SkillMatchAnalysis.candidate_id == candidate_id,
        )


class RecommendationCacheRepository(BaseRepository[SkillRecommendationCache]):
    def __init__(self):
        super().__init__(SkillRecommendationCache)

    async def get_for_pair(
        self,
        db: AsyncSession,
        job_id: UUID,
        candidate_id: UUID,
    ) -> Optional[SkillRecommendationCache]:
        result = await db.execute(
            select(SkillRecommendationCache).where(
                SkillRecommendationCache.job_id == job_id,
                SkillRecommendationCache.candidate_id == candidate_id,
            )
        )
        return result.scalar_one_or_none()

    async def upsert_for_pair(self, db: AsyncSession, **values) -> None:
        await self.upsert(db, key_columns=("job_id", "candidate_id"), values=values)

    async def delete_for_job(self, db: AsyncSession, job_id: UUID) -> int:
        return await self.delete_where(db, SkillRecommendationCache.job_id == job_id)


class LearningRoadmapRepository(BaseRepository[LearningRoadmap]):
    def __init__(self):
        super().__init__(LearningRoadmap)

    async def get_for_candidate(
        self,
        db: AsyncSession,
        candidate_id: UUID,
    ) -> Optional[LearningRoadmap]:
        result = await db.execute(
            select(LearningRoadmap).where(LearningRoadmap.candidate_id == candidate_id)
        )
        return result.scalar_one_or_none()

    async def upsert_for_candidate(self, db: AsyncSession, **values) -> None:
        await self.upsert(db, key_columns=("candidate_id",), values=values)

    async def delete_for_candidates(
        self,
        db: AsyncSession,
        candidate_ids: Iterable[UUID],
    ) -> int:
        ids = list(candidate_ids)
        if not ids:
            return 0
        return await self.delete_where(db, LearningRoadmap.candidate_id.in_(ids))
