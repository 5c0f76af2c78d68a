"""
Service layer - business logic and orchestration.

Services contain the application's business logic, coordinate between
repositories, and handle cross-cutting concerns. Every public method takes
the DBScope it should run on.

RULE: Routes call services. Services call repositories. Never the reverse.
"""
from app.services.compatibility_service import CompatibilityService
from app.services.skill_match_service import SkillMatchService
from app.services.recommendation_service import RecommendationService
from app.services.roadmap_service import RoadmapService
from app.services.invalidation_service import InvalidationService
from app.services.job_skill_service import JobSkillService
from app.services.interested_job_service import InterestedJobService
from app.services.background_service import BackgroundAnalysisDispatcher

__all__ = [
    "CompatibilityService",
    "SkillMatchService",
    "RecommendationService",
    "RoadmapService",
    "InvalidationService",
    "JobSkillService",
    "InterestedJobService",
    "BackgroundAnalysisDispatcher",
]
