"""
Repository layer - data access abstraction.

Repositories handle all database queries, keeping SQL/ORM logic
out of the service and route layers.
"""
from app.repositories.base import BaseRepository
from app.repositories.job_repository import JobRepository
from app.repositories.candidate_repository import CandidateRepository
from app.repositories.application_repository import ApplicationRepository
from app.repositories.interested_job_repository import InterestedJobRepository
from app.repositories.cache_repository import (
    SkillMatchRepository,
    RecommendationCacheRepository,
    LearningRoadmapRepository,
)

__all__ = [
    "BaseRepository",
    "JobRepository",
    "CandidateRepository",
    "ApplicationRepository",
    "InterestedJobRepository",
    "SkillMatchRepository",
    "RecommendationCacheRepository",
    "LearningRoadmapRepository",
]
