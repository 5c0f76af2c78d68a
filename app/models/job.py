"""
Job model - a posting whose requirements candidates are analyzed against.
"""
from typing import TYPE_CHECKING, Optional, List
from sqlalchemy import String, Boolean, Text, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.job_skill import JobSkill
    from app.models.application import Application
    from app.models.interested_job import InterestedJob


class Job(BaseModel):
    """
    Job posting entity.

    Only the requirement-bearing fields are modelled here; everything else about
    a posting (salary, location, recruiter ownership) belongs to plain CRUD.
    Editing any requirement field or the skill list must fire the job
    invalidation cascade.
    """

    __tablename__ = "jobs"

    # Core fields
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    department: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    experience_level: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )  # 'entry', 'junior', 'mid', 'senior', 'lead', 'principal'
    job_type: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )  # 'full_time', 'contract', 'internship'

    # Free-text requirement fields
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    responsibilities: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    qualifications: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    nice_to_have: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    minimum_experience_years: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Status
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    # Relationships
    skills: Mapped[List["JobSkill"]] = relationship(
        "JobSkill",
        back_populates="job",
        cascade="all, delete-orphan",
    )
    applications: Mapped[List["Application"]] = relationship(
        "Application",
        back_populates="job",
    )
    interested_candidates: Mapped[List["InterestedJob"]] = relationship(
        "InterestedJob",
        back_populates="job",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Job {self.title} id={self.id}>"
