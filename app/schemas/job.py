"""
Job schemas.
"""
from typing import List, Optional
from uuid import UUID

from app.schemas.base import BaseSchema


class JobSkillResponse(BaseSchema):
    """Job skill response."""

    skill_name: str
    skill_category: Optional[str] = None
    importance: str
    required_level: Optional[str] = None


class JobSkillsRefreshResponse(BaseSchema):
    job_id: UUID
    skills: List[JobSkillResponse] = []


class InvalidationResponse(BaseSchema):
    """Rows evicted by a cascade; failed_steps lists deletions that did not commit."""

    skill_matches_deleted: int = 0
    recommendations_deleted: int = 0
    roadmaps_deleted: int = 0
    failed_steps: List[str] = []
