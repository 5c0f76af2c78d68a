"""
Database models for the analysis subsystem.

All models use UUID primary keys and include created_at/updated_at timestamps.
"""
from app.models.base import BaseModel, TimestampMixin, UUIDMixin
from app.models.job import Job
from app.models.job_skill import JobSkill
from app.models.candidate_profile import CandidateProfile
from app.models.candidate_skill import CandidateSkill
from app.models.candidate_background import (
    CandidateExperience,
    CandidateEducation,
    CandidateCertification,
)
from app.models.interested_job import InterestedJob
from app.models.application import Application
from app.models.skill_match_analysis import SkillMatchAnalysis
from app.models.skill_recommendation import SkillRecommendationCache
from app.models.learning_roadmap import LearningRoadmap

__all__ = [
    "BaseModel",
    "TimestampMixin",
    "UUIDMixin",
    "Job",
    "JobSkill",
    "CandidateProfile",
    "CandidateSkill",
    "CandidateExperience",
    "CandidateEducation",
    "CandidateCertification",
    "InterestedJob",
    "Application",
    "SkillMatchAnalysis",
    "SkillRecommendationCache",
    "LearningRoadmap",
]
