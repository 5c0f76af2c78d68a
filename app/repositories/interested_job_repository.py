"""
Interested-job repository - a candidate's roadmap source job set.
"""
from typing import List
from uuid import UUID

from sqlalchemy import select, delete
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.interested_job import InterestedJob
from app.models.job import Job
from app.repositories.base import BaseRepository


class InterestedJobRepository(BaseRepository[InterestedJob]):
    def __init__(self):
        super().__init__(InterestedJob)

    async def list_jobs_for_candidate(
        self,
        db: AsyncSession,
        candidate_id: UUID,
    ) -> List[Job]:
        """
        Jobs on the candidate's interested list, with skills loaded.

        Existing identities are refreshed so skills extracted since the last
        load are visible in the same session.
        """
        result = await db.execute(
            select(Job)
            .join(InterestedJob, InterestedJob.job_id == Job.id)
            .options(selectinload(Job.skills))
            .where(InterestedJob.candidate_id == candidate_id)
            .order_by(InterestedJob.created_at)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().unique().all())

    async def list_candidate_ids_for_job(
        self,
        db: AsyncSession,
        job_id: UUID,
    ) -> List[UUID]:
        """Candidates who list the job as interested."""
        result = await db.execute(
            select(InterestedJob.candidate_id).where(InterestedJob.job_id == job_id)
        )
        return list(result.scalars().all())

    async def add(
        self,
        db: AsyncSession,
        candidate_id: UUID,
        job_id: UUID,
    ) -> bool:
        """Add a job to the list. Returns False if it was already there."""
        result = await db.execute(
            pg_insert(InterestedJob)
            .values(candidate_id=candidate_id, job_id=job_id)
            .on_conflict_do_nothing(constraint="uq_interested_job")
        )
        return (result.rowcount or 0) > 0

    async def remove(
        self,
        db: AsyncSession,
        candidate_id: UUID,
        job_id: UUID,
    ) -> bool:
        """Remove a job from the list. Returns False if it was not there."""
        result = await db.execute(
            delete(InterestedJob).where(
                InterestedJob.candidate_id == candidate_id,
                InterestedJob.job_id == job_id,
            )
        )
        return (result.rowcount or 0) > 0
