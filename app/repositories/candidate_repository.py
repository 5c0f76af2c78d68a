"""
Candidate repository - data access for CandidateProfile and its skills.
"""
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.candidate_profile import CandidateProfile
from app.models.candidate_skill import CandidateSkill
from app.repositories.base import BaseRepository


class CandidateRepository(BaseRepository[CandidateProfile]):
    def __init__(self):
        super().__init__(CandidateProfile)

    async def get_with_profile_details(
        self,
        db: AsyncSession,
        candidate_id: UUID,
    ) -> Optional[CandidateProfile]:
        """Get a candidate with skills, experience, education and certifications."""
        result = await db.execute(
            select(CandidateProfile)
            .options(
                selectinload(CandidateProfile.skills),
                selectinload(CandidateProfile.experience),
                selectinload(CandidateProfile.education),
                selectinload(CandidateProfile.certifications),
            )
            .where(CandidateProfile.id == candidate_id)
        )
        return result.scalar_one_or_none()

    async def get_with_skills(
        self,
        db: AsyncSession,
        candidate_id: UUID,
    ) -> Optional[CandidateProfile]:
        """Get a candidate with only the skill list eagerly loaded."""
        result = await db.execute(
            select(CandidateProfile)
            .options(selectinload(CandidateProfile.skills))
            .where(CandidateProfile.id == candidate_id)
        )
        return result.scalar_one_or_none()

    async def get_skills(
        self,
        db: AsyncSession,
        candidate_id: UUID,
    ) -> List[CandidateSkill]:
        result = await db.execute(
            select(CandidateSkill)
            .where(CandidateSkill.candidate_id == candidate_id)
            .order_by(CandidateSkill.skill_name)
        )
        return list(result.scalars().all())
