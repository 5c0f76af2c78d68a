"""
InterestedJob model - jobs a candidate wants a learning roadmap towards.
"""
import uuid
from typing import TYPE_CHECKING
from sqlalchemy import ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.candidate_profile import CandidateProfile
    from app.models.job import Job


class InterestedJob(BaseModel):
    """
    Link between a candidate and a job on their interested list.

    The set of these rows per candidate is the roadmap's source job set;
    any add/remove deletes the candidate's cached roadmap.
    """

    __tablename__ = "interested_jobs"

    __table_args__ = (
        UniqueConstraint("candidate_id", "job_id", name="uq_interested_job"),
    )

    candidate_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("candidate_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    job_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("jobs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    candidate: Mapped["CandidateProfile"] = relationship(
        "CandidateProfile", back_populates="interested_jobs"
    )
    job: Mapped["Job"] = relationship("Job", back_populates="interested_candidates")

    def __repr__(self) -> str:
        return f"<InterestedJob candidate={self.candidate_id} job={self.job_id}>"
