"""
Skill vocabulary shared by the analyzers and the roadmap builder.
"""
from enum import Enum
from typing import Optional


class SkillLevel(str, Enum):
    """Proficiency ladder. Declaration order is the ordering."""

    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    EXPERT = "Expert"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self)

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["SkillLevel"]:
        """Case-insensitive lookup; None for empty or unknown values."""
        if not value:
            return None
        wanted = str(value).strip().lower()
        for level in cls:
            if level.value.lower() == wanted:
                return level
        return None

    @classmethod
    def highest(cls, *levels: "SkillLevel") -> "SkillLevel":
        return max(levels, key=lambda lvl: lvl.rank)


_LEVEL_ORDER = list(SkillLevel)


class SkillImportance(str, Enum):
    REQUIRED = "required"
    PREFERRED = "preferred"
    NICE_TO_HAVE = "nice_to_have"


class MatchQuality(str, Enum):
    EXACT = "exact"
    SIMILAR = "similar"
    PARTIAL = "partial"


class GapPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Difficulty(str, Enum):
    """How hard a skill is to learn, independent of the candidate's level."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class SkillCategory(str, Enum):
    PROGRAMMING_LANGUAGE = "programming_language"
    FRAMEWORK = "framework"
    TOOL = "tool"
    SOFT_SKILL = "soft_skill"
    OTHER = "other"


# Job experience level -> level demanded of skills without an explicit one
EXPERIENCE_TO_SKILL_LEVEL = {
    "entry": SkillLevel.INTERMEDIATE,
    "junior": SkillLevel.INTERMEDIATE,
    "mid": SkillLevel.INTERMEDIATE,
    "senior": SkillLevel.ADVANCED,
    "lead": SkillLevel.EXPERT,
    "principal": SkillLevel.EXPERT,
}

DEFAULT_TARGET_LEVEL = SkillLevel.INTERMEDIATE
