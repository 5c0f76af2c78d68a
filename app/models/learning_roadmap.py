"""
LearningRoadmap model — one phased learning plan per candidate.

Fixed-TTL policy, but also deleted outright whenever the candidate's
interested-job set changes or one of those jobs has its skill list edited.
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel


class LearningRoadmap(BaseModel):
    __tablename__ = "candidate_learning_roadmaps"

    candidate_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("candidate_profiles.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    roadmap_data: Mapped[dict] = mapped_column(JSONB, nullable=False)
    # Interested job IDs (as strings) the roadmap was built from
    source_job_ids: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    total_skills_needed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_time_estimate: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    generated_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    def __repr__(self) -> str:
        return f"<LearningRoadmap candidate={self.candidate_id} skills={self.total_skills_needed}>"
