"""
Pydantic schemas for API validation and serialization.
"""
from app.schemas.base import (
    BaseSchema,
    MessageResponse,
)
from app.schemas.skills import (
    SkillLevel,
    SkillImportance,
    MatchQuality,
    GapPriority,
    Difficulty,
    SkillCategory,
)
from app.schemas.analysis import (
    ScoreBreakdown,
    CompatibilityAnalysis,
    CompatibilityResponse,
    MatchingSkill,
    MissingSkill,
    SkillMatchResult,
    SkillMatchResponse,
    SkillRecommendation,
    RecommendationResponse,
    ReanalyzeRequest,
    ScheduleResponse,
)
from app.schemas.job import (
    JobSkillResponse,
    JobSkillsRefreshResponse,
    InvalidationResponse,
)
from app.schemas.roadmap import (
    SkillType,
    PhaseTier,
    RoadmapSkill,
    RoadmapPhase,
    SkillUpgrade,
    SkillGapAnalysis,
    CareerPath,
    RoadmapData,
    RoadmapResponse,
    NoRoadmapReason,
    NoRoadmapResult,
    InterestedJobChange,
)

__all__ = [
    # Base
    "BaseSchema",
    "MessageResponse",
    # Skills
    "SkillLevel",
    "SkillImportance",
    "MatchQuality",
    "GapPriority",
    "Difficulty",
    "SkillCategory",
    # Analysis
    "ScoreBreakdown",
    "CompatibilityAnalysis",
    "CompatibilityResponse",
    "MatchingSkill",
    "MissingSkill",
    "SkillMatchResult",
    "SkillMatchResponse",
    "SkillRecommendation",
    "RecommendationResponse",
    "ReanalyzeRequest",
    "ScheduleResponse",
    # Job
    "JobSkillResponse",
    "JobSkillsRefreshResponse",
    "InvalidationResponse",
    # Roadmap
    "SkillType",
    "PhaseTier",
    "RoadmapSkill",
    "RoadmapPhase",
    "SkillUpgrade",
    "SkillGapAnalysis",
    "CareerPath",
    "RoadmapData",
    "RoadmapResponse",
    "NoRoadmapReason",
    "NoRoadmapResult",
    "InterestedJobChange",
]
