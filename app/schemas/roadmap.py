"""
Learning roadmap schemas.

A roadmap is either a RoadmapData (phases, gap analysis, career paths) or an
explicit NoRoadmapResult naming why nothing could be built.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from app.schemas.base import BaseSchema
from app.schemas.skills import Difficulty, SkillLevel


class SkillType(str, Enum):
    NEW = "new"
    UPGRADE = "upgrade"


class PhaseTier(str, Enum):
    FOUNDATION = "foundation"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class RoadmapSkill(BaseSchema):
    skill: str
    skill_type: SkillType
    current_level: Optional[SkillLevel] = None
    target_level: SkillLevel
    category: str = "other"
    difficulty: Difficulty = Difficulty.INTERMEDIATE
    time_estimate: str
    learning_path: str = ""
    resources: List[str] = []
    required_for_jobs: List[str] = []
    gap_addressed: str = ""


class RoadmapPhase(BaseSchema):
    phase: int
    tier: PhaseTier
    title: str
    description: str
    duration: str
    prerequisites: List[str] = []
    skills: List[RoadmapSkill] = []


class SkillUpgrade(BaseSchema):
    skill: str
    current_level: SkillLevel
    target_level: SkillLevel


class SkillGapAnalysis(BaseSchema):
    new_skills_needed: List[str] = []
    skills_to_upgrade: List[SkillUpgrade] = []
    skills_already_sufficient: List[str] = []


class CareerPath(BaseSchema):
    role: str
    target_job_ids: List[str] = []
    job_titles: List[str] = []
    required_phases: List[int] = []
    readiness_percentage: float = Field(..., ge=0, le=100)


class RoadmapData(BaseSchema):
    skill_gap_analysis: SkillGapAnalysis
    learning_phases: List[RoadmapPhase] = []
    career_paths: List[CareerPath] = []
    total_time_estimate: str
    total_skills_needed: int
    summary: str


class RoadmapResponse(BaseSchema):
    candidate_id: UUID
    roadmap: RoadmapData
    source_job_ids: List[str] = []
    generated_date: datetime
    cached: bool


class NoRoadmapReason(str, Enum):
    NO_INTERESTED_JOBS = "no_interested_jobs"
    NO_EXTRACTABLE_SKILLS = "no_extractable_skills"


class NoRoadmapResult(BaseSchema):
    candidate_id: UUID
    reason: NoRoadmapReason
    message: str


class InterestedJobChange(BaseSchema):
    candidate_id: UUID
    job_id: UUID
    changed: bool
    roadmap_invalidated: bool
