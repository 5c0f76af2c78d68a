"""
CandidateSkill model - skills a candidate claims, with a proficiency level.
"""
import uuid
from typing import TYPE_CHECKING, Optional
from sqlalchemy import String, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.candidate_profile import CandidateProfile


class CandidateSkill(BaseModel):
    """Candidate skill entity."""

    __tablename__ = "candidate_skills"

    # Unique constraint: one row per skill per candidate
    __table_args__ = (
        UniqueConstraint("candidate_id", "skill_name", name="uq_candidate_skill"),
    )

    candidate_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("candidate_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    skill_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    skill_level: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
    )  # 'Beginner', 'Intermediate', 'Advanced', 'Expert'

    candidate: Mapped["CandidateProfile"] = relationship(
        "CandidateProfile", back_populates="skills"
    )

    def __repr__(self) -> str:
        return f"<CandidateSkill {self.skill_name} ({self.skill_level})>"
