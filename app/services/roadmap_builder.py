"""
Roadmap builder - turns a skill classification into a phased learning plan.

Pure: no I/O, no provider calls. The roadmap service feeds it the
classification and per-skill recommendations and persists the result.

Phase tiers, in order:
  foundation    new skills targeted at Beginner or Intermediate
  intermediate  new skills targeted at Advanced; upgrades to Intermediate/Advanced
  advanced      anything targeted at Expert

Empty tiers are skipped, so phase numbers are always 1..n with no holes.
"""
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Optional

from app.schemas.analysis import SkillRecommendation
from app.schemas.roadmap import (
    CareerPath,
    PhaseTier,
    RoadmapData,
    RoadmapPhase,
    RoadmapSkill,
    SkillGapAnalysis,
    SkillType,
    SkillUpgrade,
)
from app.schemas.skills import Difficulty, SkillImportance, SkillLevel
from app.services.skill_aggregator import (
    ClassifiedSkill,
    SkillClassification,
    normalize_skill_name,
)

WEEKS_PER_LEVEL = 4

_TIER_ORDER = (PhaseTier.FOUNDATION, PhaseTier.INTERMEDIATE, PhaseTier.ADVANCED)

_TIER_COPY = {
    PhaseTier.FOUNDATION: (
        "Foundation Skills",
        "Core skills missing from your profile that the target roles expect at working level.",
    ),
    PhaseTier.INTERMEDIATE: (
        "Intermediate Development",
        "Deepen skills you already use and pick up the more demanding requirements.",
    ),
    PhaseTier.ADVANCED: (
        "Advanced Mastery",
        "Expert-level requirements of the most senior target roles.",
    ),
}

_LEVEL_DIFFICULTY = {
    SkillLevel.BEGINNER: Difficulty.BEGINNER,
    SkillLevel.INTERMEDIATE: Difficulty.INTERMEDIATE,
    SkillLevel.ADVANCED: Difficulty.ADVANCED,
    SkillLevel.EXPERT: Difficulty.ADVANCED,
}


def tier_for(skill: ClassifiedSkill) -> PhaseTier:
    target = skill.requirement.target_level
    if target is SkillLevel.EXPERT:
        return PhaseTier.ADVANCED
    if skill.current_level is None:
        if target is SkillLevel.ADVANCED:
            return PhaseTier.INTERMEDIATE
        return PhaseTier.FOUNDATION
    return PhaseTier.INTERMEDIATE


def estimate_weeks(skill: ClassifiedSkill) -> int:
    """New skills cost a block per level up to target; upgrades only the difference."""
    target = skill.requirement.target_level
    if skill.current_level is None:
        return WEEKS_PER_LEVEL * (target.rank + 1)
    return WEEKS_PER_LEVEL * max(1, target.rank - skill.current_level.rank)


def format_duration(weeks: int) -> str:
    """Short spans in weeks, longer ones as a month range (24 weeks -> '6-9 months')."""
    if weeks < 8:
        return f"{weeks} weeks"
    low = weeks // WEEKS_PER_LEVEL
    high = low + max(1, low // 2)
    return f"{low}-{high} months"


def _roadmap_skill(
    skill: ClassifiedSkill,
    recommendation: Optional[SkillRecommendation],
) -> RoadmapSkill:
    requirement = skill.requirement
    weeks = estimate_weeks(skill)
    if skill.current_level is None:
        skill_type = SkillType.NEW
        gap = f"Not in profile; needed at {requirement.target_level.value} level"
    else:
        skill_type = SkillType.UPGRADE
        gap = f"Raise from {skill.current_level.value} to {requirement.target_level.value}"

    return RoadmapSkill(
        skill=requirement.name,
        skill_type=skill_type,
        current_level=skill.current_level,
        target_level=requirement.target_level,
        category=requirement.category or "other",
        difficulty=(
            recommendation.difficulty
            if recommendation
            else _LEVEL_DIFFICULTY[requirement.target_level]
        ),
        time_estimate=(
            recommendation.estimated_time
            if recommendation and recommendation.estimated_time
            else format_duration(weeks)
        ),
        learning_path=recommendation.learning_path if recommendation else "",
        resources=list(recommendation.resources) if recommendation else [],
        required_for_jobs=list(requirement.job_ids),
        gap_addressed=gap,
    )


def build_phases(
    classification: SkillClassification,
    recommendations: Optional[Dict[str, SkillRecommendation]] = None,
) -> List[RoadmapPhase]:
    recommendations = recommendations or {}
    tiers: Dict[PhaseTier, List[ClassifiedSkill]] = {tier: [] for tier in _TIER_ORDER}
    for skill in classification.gaps:
        tiers[tier_for(skill)].append(skill)

    phases: List[RoadmapPhase] = []
    earlier_skills: List[str] = []
    for tier in _TIER_ORDER:
        members = tiers[tier]
        if not members:
            continue
        title, description = _TIER_COPY[tier]
        weeks = sum(estimate_weeks(s) for s in members)
        phases.append(RoadmapPhase(
            phase=len(phases) + 1,
            tier=tier,
            title=title,
            description=description,
            duration=format_duration(weeks),
            prerequisites=list(earlier_skills),
            skills=[
                _roadmap_skill(s, recommendations.get(s.requirement.key))
                for s in members
            ],
        ))
        earlier_skills.extend(s.requirement.name for s in members)
    return phases


def build_career_paths(
    jobs: Iterable[Any],
    classification: SkillClassification,
    phases: List[RoadmapPhase],
) -> List[CareerPath]:
    """
    One entry per distinct job title. Readiness is the share of the role's
    required skills that are already sufficient or only need an upgrade.
    """
    status: Dict[str, str] = {}
    for s in classification.sufficient:
        status[s.requirement.key] = "sufficient"
    for s in classification.upgrade:
        status[s.requirement.key] = "upgrade"
    for s in classification.new:
        status[s.requirement.key] = "new"

    phase_of: Dict[str, int] = {}
    for phase in phases:
        for skill in phase.skills:
            phase_of[normalize_skill_name(skill.skill)] = phase.phase

    roles: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
    for job in jobs:
        role_key = normalize_skill_name(job.title)
        role = roles.setdefault(role_key, {
            "role": job.title.strip(),
            "job_ids": [],
            "titles": [],
            "skills": set(),
        })
        role["job_ids"].append(str(job.id))
        if job.title not in role["titles"]:
            role["titles"].append(job.title)
        for skill in job.skills or []:
            if (skill.importance or SkillImportance.REQUIRED.value) != SkillImportance.REQUIRED.value:
                continue
            key = normalize_skill_name(skill.skill_name)
            if key in status:
                role["skills"].add(key)

    paths: List[CareerPath] = []
    for role in roles.values():
        skills = role["skills"]
        if skills:
            ready = sum(1 for key in skills if status[key] in ("sufficient", "upgrade"))
            readiness = round(ready / len(skills) * 100, 1)
        else:
            readiness = 100.0
        paths.append(CareerPath(
            role=role["role"],
            target_job_ids=role["job_ids"],
            job_titles=role["titles"],
            required_phases=sorted({phase_of[key] for key in skills if key in phase_of}),
            readiness_percentage=readiness,
        ))
    return paths


def build_roadmap(
    classification: SkillClassification,
    jobs: List[Any],
    recommendations: Optional[Dict[str, SkillRecommendation]] = None,
) -> RoadmapData:
    phases = build_phases(classification, recommendations)
    career_paths = build_career_paths(jobs, classification, phases)
    total_weeks = sum(estimate_weeks(s) for s in classification.gaps)
    total_skills = len(classification.gaps)
    total_time = format_duration(total_weeks)

    if total_skills:
        summary = (
            f"{total_skills} skills to develop over {len(phases)} phases "
            f"(about {total_time}) towards {len(career_paths)} target roles."
        )
    else:
        summary = f"Your current skills already cover all {len(career_paths)} target roles."

    return RoadmapData(
        skill_gap_analysis=SkillGapAnalysis(
            new_skills_needed=[s.requirement.name for s in classification.new],
            skills_to_upgrade=[
                SkillUpgrade(
                    skill=s.requirement.name,
                    current_level=s.current_level,
                    target_level=s.requirement.target_level,
                )
                for s in classification.upgrade
            ],
            skills_already_sufficient=[s.requirement.name for s in classification.sufficient],
        ),
        learning_phases=phases,
        career_paths=career_paths,
        total_time_estimate=total_time,
        total_skills_needed=total_skills,
        summary=summary,
    )
