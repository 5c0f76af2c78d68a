"""
JobSkill model - skills required by a job posting.
"""
import uuid
from typing import TYPE_CHECKING, Optional
from sqlalchemy import String, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.job import Job


class JobSkill(BaseModel):
    """
    Job skill requirement entity.

    Entered by the recruiter or extracted from the posting text by the
    inference provider. Only 'required' skills count towards match percentages.
    """

    __tablename__ = "job_skills"

    # Unique constraint: one skill per job
    __table_args__ = (
        UniqueConstraint("job_id", "skill_name", name="uq_job_skill"),
    )

    # Foreign Keys
    job_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("jobs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Skill info
    skill_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    skill_category: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )  # 'programming_language', 'framework', 'tool', 'soft_skill', 'other'

    # Requirements
    importance: Mapped[str] = mapped_column(
        String(20),
        default="required",
        nullable=False,
    )  # 'required', 'preferred', 'nice_to_have'
    required_level: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
    )  # 'Beginner' .. 'Expert'; derived from job experience level when null

    # Relationships
    job: Mapped["Job"] = relationship("Job", back_populates="skills")

    def __repr__(self) -> str:
        return f"<JobSkill {self.skill_name} for job_id={self.job_id}>"
