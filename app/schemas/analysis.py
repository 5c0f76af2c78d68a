"""
Analysis schemas.

CompatibilityAnalysis   — embedded snapshot on an Application
SkillMatchResult        — matched vs. missing skills for a (job, candidate) pair
SkillRecommendation     — how to learn one missing skill

The *Response models wrap a result with its cache provenance.
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from app.schemas.base import BaseSchema
from app.schemas.skills import (
    Difficulty,
    GapPriority,
    MatchQuality,
    SkillImportance,
    SkillLevel,
)


# ── Compatibility ────────────────────────────────────────────────────────────

class ScoreBreakdown(BaseSchema):
    skills_match: float = Field(..., ge=0, le=100)
    experience_match: float = Field(..., ge=0, le=100)
    education_match: float = Field(..., ge=0, le=100)
    overall_fit: float = Field(..., ge=0, le=100)


class CompatibilityAnalysis(BaseSchema):
    """Full compatibility result for one application."""

    overall_score: float = Field(..., ge=0, le=100)
    score_breakdown: ScoreBreakdown
    strengths: List[str] = []
    skill_gaps: List[str] = []
    experience_gaps: List[str] = []
    recommendations: List[str] = []
    fit_level: str
    summary: str = ""


class CompatibilityResponse(BaseSchema):
    application_id: UUID
    job_id: UUID
    candidate_id: UUID
    analysis: CompatibilityAnalysis
    analyzed_at: datetime
    cached: bool


# ── Skill match ──────────────────────────────────────────────────────────────

class MatchingSkill(BaseSchema):
    skill: str
    candidate_level: Optional[SkillLevel] = None
    job_requirement: SkillImportance
    match_quality: MatchQuality


class MissingSkill(BaseSchema):
    skill: str
    job_requirement: SkillImportance
    importance: GapPriority = GapPriority.MEDIUM


class SkillMatchResult(BaseSchema):
    matching_skills: List[MatchingSkill] = []
    missing_skills: List[MissingSkill] = []
    match_percentage: float = Field(..., ge=0, le=100)


class SkillMatchResponse(SkillMatchResult):
    job_id: UUID
    candidate_id: UUID
    analysis_date: datetime
    cached: bool


# ── Recommendations ──────────────────────────────────────────────────────────

class SkillRecommendation(BaseSchema):
    skill: str
    learning_path: str = ""
    resources: List[str] = []
    estimated_time: Optional[str] = None
    difficulty: Difficulty = Difficulty.INTERMEDIATE


class RecommendationResponse(BaseSchema):
    job_id: UUID
    candidate_id: UUID
    recommendations: List[SkillRecommendation] = []
    generated_date: Optional[datetime] = None
    cached: bool


# ── Triggers ─────────────────────────────────────────────────────────────────

class ReanalyzeRequest(BaseSchema):
    job_id: Optional[UUID] = None
    candidate_id: Optional[UUID] = None


class ScheduleResponse(BaseSchema):
    """Result of handing work to the background queue."""

    scheduled: bool
    task_id: Optional[str] = None
