"""
SkillRecommendationCache model — learning recommendations for the missing
skills of one (job, candidate) pair. Fixed-TTL policy, upserted.
"""
import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel


class SkillRecommendationCache(BaseModel):
    __tablename__ = "job_skill_recommendations"

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

    recommendations: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    generated_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("job_id", "candidate_id", name="uq_skill_recommendation_job_candidate"),
    )

    def __repr__(self) -> str:
        return f"<SkillRecommendationCache job={self.job_id} candidate={self.candidate_id}>"
