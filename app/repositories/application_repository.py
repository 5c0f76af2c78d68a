"""
Application repository - data access for Application and its embedded
compatibility analysis.
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.application import Application, ACTIVE_APPLICATION_STATUSES
from app.repositories.base import BaseRepository


class ApplicationRepository(BaseRepository[Application]):
    def __init__(self):
        super().__init__(Application)

    async def find_by_job_and_candidate(
        self,
        db: AsyncSession,
        job_id: UUID,
        candidate_id: UUID,
    ) -> Optional[Application]:
        """Find the application linking a job and a candidate, if any."""
        result = await db.execute(
            select(Application).where(
                Application.job_id == job_id,
                Application.candidate_id == candidate_id,
            )
        )
        return result.scalar_one_or_none()

    async def find_active_for_candidate(
        self,
        db: AsyncSession,
        candidate_id: UUID,
    ) -> List[Application]:
        """Applications still in a status worth re-scoring (pending/shortlisted)."""
        result = await db.execute(
            select(Application).where(
                Application.candidate_id == candidate_id,
                Application.status.in_(ACTIVE_APPLICATION_STATUSES),
            )
        )
        return list(result.scalars().all())

    async def save_analysis(
        self,
        db: AsyncSession,
        application_id: UUID,
        *,
        score: float,
        data: dict,
        analyzed_at: datetime,
    ) -> None:
        """Overwrite the embedded compatibility snapshot in one statement."""
        await db.execute(
            update(Application)
            .where(Application.id == application_id)
            .values(
                ai_analysis_score=score,
                ai_analysis_data=data,
                ai_analyzed_at=analyzed_at,
            )
        )

    async def clear_analysis(
        self,
        db: AsyncSession,
        application_id: UUID,
    ) -> None:
        """Drop the embedded snapshot (force re-analyze)."""
        await db.execute(
            update(Application)
            .where(Application.id == application_id)
            .values(
                ai_analysis_score=None,
                ai_analysis_data=None,
                ai_analyzed_at=None,
            )
        )
