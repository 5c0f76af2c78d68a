"""
Skill aggregator - merges job requirements and candidate skills into one
comparison set.

aggregate_requirements  union of required skills across jobs, with the jobs
                        needing each and the highest level any of them demands
index_held_skills       candidate skills keyed by normalized name
classify                new / upgrade / sufficient split

Name comparison is case- and whitespace-insensitive. Anything beyond that
(synonyms such as "JS" vs "JavaScript") is delegated to the inference
provider through SkillAggregator.compare.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from app.core import ai
from app.core.logging import get_logger
from app.schemas.skills import (
    DEFAULT_TARGET_LEVEL,
    EXPERIENCE_TO_SKILL_LEVEL,
    SkillImportance,
    SkillLevel,
)

logger = get_logger(__name__)


def normalize_skill_name(name: str) -> str:
    return " ".join((name or "").lower().split())


@dataclass
class RequiredSkill:
    name: str
    target_level: SkillLevel
    job_ids: List[str] = field(default_factory=list)
    category: str = "other"

    @property
    def key(self) -> str:
        return normalize_skill_name(self.name)


@dataclass
class HeldSkill:
    name: str
    level: SkillLevel


@dataclass
class ClassifiedSkill:
    requirement: RequiredSkill
    current_level: Optional[SkillLevel] = None


@dataclass
class SkillClassification:
    requirements: List[RequiredSkill] = field(default_factory=list)
    new: List[ClassifiedSkill] = field(default_factory=list)
    upgrade: List[ClassifiedSkill] = field(default_factory=list)
    sufficient: List[ClassifiedSkill] = field(default_factory=list)

    @property
    def gaps(self) -> List[ClassifiedSkill]:
        return self.new + self.upgrade


def demanded_level(job: Any, skill: Any) -> SkillLevel:
    """Explicit required level, else derived from the job's experience level."""
    explicit = SkillLevel.parse(getattr(skill, "required_level", None))
    if explicit:
        return explicit
    experience = (getattr(job, "experience_level", None) or "").strip().lower()
    return EXPERIENCE_TO_SKILL_LEVEL.get(experience, DEFAULT_TARGET_LEVEL)


def aggregate_requirements(jobs: Iterable[Any]) -> List[RequiredSkill]:
    """
    Union the required skills of every job, preserving first-seen order.

    A skill needed by several jobs appears once, carries every job ID, and
    targets the highest level any of those jobs demands.
    """
    merged: Dict[str, RequiredSkill] = {}
    for job in jobs:
        job_id = str(job.id)
        for skill in job.skills or []:
            if (skill.importance or SkillImportance.REQUIRED.value) != SkillImportance.REQUIRED.value:
                continue
            key = normalize_skill_name(skill.skill_name)
            if not key:
                continue
            level = demanded_level(job, skill)
            existing = merged.get(key)
            if existing is None:
                merged[key] = RequiredSkill(
                    name=skill.skill_name.strip(),
                    target_level=level,
                    job_ids=[job_id],
                    category=skill.skill_category or "other",
                )
                continue
            existing.target_level = SkillLevel.highest(existing.target_level, level)
            if job_id not in existing.job_ids:
                existing.job_ids.append(job_id)
    return list(merged.values())


def index_held_skills(candidate_skills: Iterable[Any]) -> Dict[str, HeldSkill]:
    """Candidate skills keyed by normalized name. A missing level counts as Beginner."""
    held: Dict[str, HeldSkill] = {}
    for skill in candidate_skills:
        key = normalize_skill_name(skill.skill_name)
        if not key:
            continue
        level = SkillLevel.parse(skill.skill_level) or SkillLevel.BEGINNER
        current = held.get(key)
        if current is None or level.rank > current.level.rank:
            held[key] = HeldSkill(name=skill.skill_name.strip(), level=level)
    return held


def classify(
    requirements: List[RequiredSkill],
    held: Dict[str, HeldSkill],
    aliases: Optional[Dict[str, Optional[str]]] = None,
) -> SkillClassification:
    """
    Split requirements into new (not held), upgrade (held below target) and
    sufficient (held at or above target).

    `aliases` maps a requirement name onto the held name it is a synonym of.
    """
    aliases = aliases or {}
    result = SkillClassification(requirements=list(requirements))

    for requirement in requirements:
        match = held.get(requirement.key)
        if match is None:
            alias = aliases.get(requirement.name)
            if alias:
                match = held.get(normalize_skill_name(alias))

        if match is None:
            result.new.append(ClassifiedSkill(requirement=requirement))
        elif match.level.rank < requirement.target_level.rank:
            result.upgrade.append(ClassifiedSkill(requirement=requirement, current_level=match.level))
        else:
            result.sufficient.append(ClassifiedSkill(requirement=requirement, current_level=match.level))

    return result


class SkillAggregator:
    """Aggregates and classifies, asking the provider only about unresolved names."""

    def __init__(self, provider=None):
        self.provider = provider or ai

    async def compare(
        self,
        jobs: Iterable[Any],
        candidate_skills: Iterable[Any],
    ) -> SkillClassification:
        requirements = aggregate_requirements(jobs)
        held = index_held_skills(candidate_skills)

        required_keys = {r.key for r in requirements}
        unresolved = [r.name for r in requirements if r.key not in held]
        unmatched_held = [h.name for key, h in held.items() if key not in required_keys]

        aliases: Dict[str, Optional[str]] = {}
        if unresolved and unmatched_held:
            aliases = await self.provider.resolve_skill_aliases(unresolved, unmatched_held)
            logger.debug(
                "skill_aliases_resolved",
                requested=len(unresolved),
                resolved=sum(1 for v in aliases.values() if v),
            )

        return classify(requirements, held, aliases)
