"""
SkillMatchAnalysis model — caches matched/missing skills for one
(job, candidate) pair under the fixed-TTL policy.

One row per key, upserted. Deleted by the job invalidation cascade and by an
explicit force re-analyze; otherwise left to expire by analysis_date.
"""
import uuid
from datetime import datetime

from sqlalchemy import Float, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel


class SkillMatchAnalysis(BaseModel):
    __tablename__ = "job_skill_analysis"

    job_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("jobs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    candidate_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("candidate_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    matching_skills: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    missing_skills: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    match_percentage: Mapped[float] = mapped_column(Float, nullable=False)

    analysis_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("job_id", "candidate_id", name="uq_skill_analysis_job_candidate"),
    )

    def __repr__(self) -> str:
        return f"<SkillMatchAnalysis job={self.job_id} candidate={self.candidate_id} match={self.match_percentage}>"
