"""
Job repository - data access for Job and JobSkill.
"""
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.base import utcnow
from app.models.job import Job
from app.models.job_skill import JobSkill
from app.repositories.base import BaseRepository


class JobRepository(BaseRepository[Job]):
    def __init__(self):
        super().__init__(Job)

    async def get_with_skills(
        self,
        db: AsyncSession,
        job_id: UUID,
    ) -> Optional[Job]:
        """Get a job with its skill list eagerly loaded."""
        result = await db.execute(
            select(Job)
            .options(selectinload(Job.skills))
            .where(Job.id == job_id)
        )
        return result.scalar_one_or_none()

    async def replace_skills(
        self,
        db: AsyncSession,
        job_id: UUID,
        skills: List[Dict[str, Any]],
    ) -> List[JobSkill]:
        """
        Replace a job's whole skill list.

        Duplicate names (case-insensitive) keep the first occurrence so the
        (job_id, skill_name) constraint cannot trip.
        """
        await db.execute(delete(JobSkill).where(JobSkill.job_id == job_id))

        created: List[JobSkill] = []
        seen = set()
        for skill in skills:
            key = skill["skill_name"].strip().lower()
            if key in seen:
                continue
            seen.add(key)
            row = JobSkill(job_id=job_id, **skill)
            db.add(row)
            created.append(row)

        # Touch the job so its dependency timestamp moves forward
        job = await self.get_by_id(db, job_id)
        if job is not None:
            job.updated_at = utcnow()

        await db.flush()
        return created
