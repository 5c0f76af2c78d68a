"""
Application model - a candidate's application to a job, carrying the
embedded compatibility analysis snapshot.
"""
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional
from sqlalchemy import String, Float, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.job import Job
    from app.models.candidate_profile import CandidateProfile

# Application statuses
APPLICATION_STATUS_PENDING = "pending"
APPLICATION_STATUS_SHORTLISTED = "shortlisted"
APPLICATION_STATUS_REJECTED = "rejected"
APPLICATION_STATUS_HIRED = "hired"
APPLICATION_STATUS_WITHDRAWN = "withdrawn"

# Applications still worth re-scoring after a profile change
ACTIVE_APPLICATION_STATUSES = (
    APPLICATION_STATUS_PENDING,
    APPLICATION_STATUS_SHORTLISTED,
)


class Application(BaseModel):
    """
    Job application entity.

    ai_analysis_* hold at most one CompatibilityAnalysis per application;
    a recompute overwrites all three columns together.
    """

    __tablename__ = "job_applications"

    __table_args__ = (
        UniqueConstraint("job_id", "candidate_id", name="uq_application_job_candidate"),
    )

    job_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("jobs.id"),
        nullable=False,
        index=True,
    )
    candidate_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("candidate_profiles.id"),
        nullable=False,
        index=True,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        default=APPLICATION_STATUS_PENDING,
        nullable=False,
    )

    # Embedded compatibility analysis
    ai_analysis_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    ai_analysis_data: Mapped[Optional[dict]] = mapped_column(JSONB, nullable=True)
    ai_analyzed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    job: Mapped["Job"] = relationship("Job", back_populates="applications")
    candidate: Mapped["CandidateProfile"] = relationship(
        "CandidateProfile", back_populates="applications"
    )

    def __repr__(self) -> str:
        return f"<Application job={self.job_id} candidate={self.candidate_id} score={self.ai_analysis_score}>"
