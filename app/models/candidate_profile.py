"""
CandidateProfile model - the candidate side of every analysis.
"""
import uuid
from typing import TYPE_CHECKING, Optional, List
from sqlalchemy import String, Text, Numeric
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.candidate_skill import CandidateSkill
    from app.models.candidate_background import (
        CandidateExperience,
        CandidateEducation,
        CandidateCertification,
    )
    from app.models.application import Application
    from app.models.interested_job import InterestedJob


class CandidateProfile(BaseModel):
    """
    Candidate profile entity.

    Profile edits bump updated_at, which invalidates cached compatibility
    scores on their next read. Skill-match, recommendation and roadmap caches
    are not cascaded from candidate edits; they expire on TTL.
    """

    __tablename__ = "candidate_profiles"

    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        nullable=True,
        unique=True,
    )

    full_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    headline: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    current_job_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    current_company: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    years_of_experience: Mapped[Optional[float]] = mapped_column(
        Numeric(4, 1),
        nullable=True,
    )

    # Relationships
    skills: Mapped[List["CandidateSkill"]] = relationship(
        "CandidateSkill",
        back_populates="candidate",
        cascade="all, delete-orphan",
    )
    experience: Mapped[List["CandidateExperience"]] = relationship(
        "CandidateExperience",
        back_populates="candidate",
        cascade="all, delete-orphan",
        order_by="CandidateExperience.start_date.desc()",
    )
    education: Mapped[List["CandidateEducation"]] = relationship(
        "CandidateEducation",
        back_populates="candidate",
        cascade="all, delete-orphan",
        order_by="CandidateEducation.start_date.desc()",
    )
    certifications: Mapped[List["CandidateCertification"]] = relationship(
        "CandidateCertification",
        back_populates="candidate",
        cascade="all, delete-orphan",
        order_by="CandidateCertification.issue_date.desc()",
    )
    applications: Mapped[List["Application"]] = relationship(
        "Application",
        back_populates="candidate",
    )
    interested_jobs: Mapped[List["InterestedJob"]] = relationship(
        "InterestedJob",
        back_populates="candidate",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<CandidateProfile {self.id}>"
