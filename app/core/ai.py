"""
OpenAI helpers for the analysis layer (the inference provider).

All OpenAI calls go through this module so we can:
  - Centralise API key management and model selection
  - Enforce input truncation (cost control)
  - Validate LLM JSON responses against the result schemas
  - Wrap provider and schema errors into AnalysisException

Unlike a best-effort helper, nothing here falls back to defaults: a response
missing a required field or carrying an out-of-schema value raises, so callers
never persist a partial record.

Functions:
  extract_job_skills              — job text → skill list
  analyze_skill_match             — candidate skills + job skills → match result
  resolve_skill_aliases           — required names → held names (synonyms)
  get_skill_recommendations       — missing skills → learning recommendations
  analyze_candidate_compatibility — candidate + job composites → scored analysis
"""
import json
import re
from typing import Any, Dict, List, Optional, Tuple

import openai
from openai import AsyncOpenAI
from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings
from app.core.exceptions import AnalysisException
from app.core.logging import get_logger
from app.schemas.analysis import (
    CompatibilityAnalysis,
    SkillMatchResult,
    SkillRecommendation,
)
from app.schemas.skills import SkillCategory, SkillImportance, SkillLevel

logger = get_logger(__name__)

# Hard cap on free-text sizes sent to the provider
_MAX_FIELD_CHARS = 6_000

_FENCE_RE = re.compile(r"^\s*```(?:json)?\s*|\s*```\s*$", re.IGNORECASE)

# Fit-level bands, highest first
_FIT_BANDS = (
    (90, "Excellent Match"),
    (75, "Good Match"),
    (60, "Moderate Match"),
)
_FIT_FLOOR = "Poor Match"


def _client() -> AsyncOpenAI:
    """Lazily create an OpenAI async client (lightweight, re-created per call)."""
    if not settings.openai_api_key:
        raise AnalysisException(
            "OPENAI_API_KEY is not configured",
            code="ANALYSIS_UNAVAILABLE",
        )
    return AsyncOpenAI(
        api_key=settings.openai_api_key,
        timeout=settings.openai_timeout_seconds,
    )


def _truncate(text: Optional[str], max_chars: int = _MAX_FIELD_CHARS) -> str:
    """Truncate text to max_chars, appending indicator if truncated."""
    text = (text or "").strip()
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "\n... [truncated]"


def parse_json_object(raw: Optional[str]) -> Dict[str, Any]:
    """Parse an LLM reply into a dict, tolerating markdown code fences."""
    cleaned = _FENCE_RE.sub("", raw or "").strip()
    try:
        parsed = json.loads(cleaned)
    except (json.JSONDecodeError, TypeError) as exc:
        logger.warning("llm_json_parse_error", error=str(exc), raw_head=cleaned[:200])
        raise AnalysisException("AI returned invalid JSON") from exc
    if not isinstance(parsed, dict):
        logger.warning("llm_json_not_dict", raw_type=type(parsed).__name__)
        raise AnalysisException("AI returned a non-object JSON value")
    return parsed


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def clamp_score(value: float) -> float:
    return max(0.0, min(100.0, float(value)))


def fit_level_for_score(score: float) -> str:
    """Map a clamped 0-100 score onto its fit-level band."""
    for floor, label in _FIT_BANDS:
        if score >= floor:
            return label
    return _FIT_FLOOR


async def _complete(
    endpoint: str,
    system_prompt: str,
    user_prompt: str,
    *,
    max_tokens: int,
    temperature: float = 0.1,
) -> Dict[str, Any]:
    """Run one JSON-mode chat completion and return the parsed object."""
    try:
        client = _client()
        response = await client.chat.completions.create(
            model=settings.openai_chat_model,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
    except openai.RateLimitError as exc:
        logger.error("openai_rate_limit", endpoint=endpoint)
        raise AnalysisException("AI provider rate limit reached") from exc
    except openai.APIError as exc:
        logger.error("openai_api_error", endpoint=endpoint, error=str(exc))
        raise AnalysisException("AI provider request failed") from exc

    raw = response.choices[0].message.content or ""
    return parse_json_object(raw)


def _schema_error(endpoint: str, exc: PydanticValidationError) -> AnalysisException:
    logger.warning("llm_schema_error", endpoint=endpoint, errors=exc.error_count())
    return AnalysisException(
        "AI returned an out-of-schema response",
        details={"endpoint": endpoint, "errors": exc.errors(include_url=False, include_input=False)},
    )


# ── Response validators ──────────────────────────────────────────────────────
# Pure functions so they can be exercised without a provider round-trip.


def validate_extracted_skills(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Normalize {"skills": [{skill_name, category, importance}]} into JobSkill
    column dicts. Blank names are dropped; unknown categories become 'other';
    unknown importance becomes 'required'.
    """
    skills = payload.get("skills")
    if not isinstance(skills, list):
        raise AnalysisException("AI response is missing the skills list")

    categories = {c.value for c in SkillCategory}
    importances = {i.value for i in SkillImportance}

    result: List[Dict[str, Any]] = []
    for entry in skills:
        if not isinstance(entry, dict):
            continue
        name = str(entry.get("skill_name") or entry.get("skill") or "").strip()
        if not name:
            continue
        category = str(entry.get("category") or "other").strip().lower()
        importance = str(entry.get("importance") or "required").strip().lower()
        level = SkillLevel.parse(entry.get("required_level"))
        result.append({
            "skill_name": name,
            "skill_category": category if category in categories else "other",
            "importance": importance if importance in importances else "required",
            "required_level": level.value if level else None,
        })
    return result


def _lower_fields(entry: Any, fields: Tuple[str, ...]) -> Any:
    """Enum values are lowercase; the model sometimes capitalises them."""
    if not isinstance(entry, dict):
        return entry
    lowered = {f: entry[f].strip().lower() for f in fields if isinstance(entry.get(f), str)}
    return {**entry, **lowered}


def validate_skill_match_payload(payload: Dict[str, Any]) -> SkillMatchResult:
    """Require both lists and a numeric percentage; clamp it to [0, 100]."""
    matching = payload.get("matching_skills")
    missing = payload.get("missing_skills")
    percentage = payload.get("match_percentage")
    if not isinstance(matching, list) or not isinstance(missing, list):
        raise AnalysisException("AI returned invalid skill match format")
    if not _is_number(percentage):
        raise AnalysisException("AI returned a non-numeric match percentage")

    normalized_matching = []
    for entry in matching:
        entry = _lower_fields(entry, ("job_requirement", "match_quality"))
        if isinstance(entry, dict) and entry.get("candidate_level") is not None:
            level = SkillLevel.parse(entry["candidate_level"])
            entry = {**entry, "candidate_level": level.value if level else entry["candidate_level"]}
        normalized_matching.append(entry)
    normalized_missing = [
        _lower_fields(entry, ("job_requirement", "importance")) for entry in missing
    ]

    try:
        return SkillMatchResult.model_validate({
            "matching_skills": normalized_matching,
            "missing_skills": normalized_missing,
            "match_percentage": clamp_score(percentage),
        })
    except PydanticValidationError as exc:
        raise _schema_error("skill_match", exc) from exc


def validate_recommendations_payload(payload: Dict[str, Any]) -> List[SkillRecommendation]:
    recommendations = payload.get("recommendations")
    if not isinstance(recommendations, list):
        raise AnalysisException("AI response is missing the recommendations list")

    normalized = []
    for entry in recommendations:
        if isinstance(entry, dict) and isinstance(entry.get("difficulty"), str):
            entry = {**entry, "difficulty": entry["difficulty"].strip().lower()}
        normalized.append(entry)

    try:
        return [SkillRecommendation.model_validate(entry) for entry in normalized]
    except PydanticValidationError as exc:
        raise _schema_error("recommendations", exc) from exc


def validate_alias_mapping(
    payload: Dict[str, Any],
    required_names: List[str],
    held_names: List[str],
) -> Dict[str, Optional[str]]:
    """
    Keep only mappings from a requested name onto a name the candidate
    actually holds; anything else maps to None.
    """
    matches = payload.get("matches")
    if not isinstance(matches, dict):
        raise AnalysisException("AI response is missing the matches object")

    held_lookup = {name.lower(): name for name in held_names}
    required_lookup = {name.lower(): name for name in required_names}

    resolved: Dict[str, Optional[str]] = {name: None for name in required_names}
    for key, value in matches.items():
        required = required_lookup.get(str(key).strip().lower())
        if required is None or not isinstance(value, str):
            continue
        resolved[required] = held_lookup.get(value.strip().lower())
    return resolved


def validate_compatibility_payload(payload: Dict[str, Any]) -> CompatibilityAnalysis:
    """
    Require a numeric overall score and a full numeric breakdown. Scores are
    clamped; a missing fit level is derived from the clamped score.
    """
    score = payload.get("overall_score")
    if not _is_number(score):
        raise AnalysisException("AI returned a non-numeric compatibility score")

    breakdown = payload.get("score_breakdown")
    if not isinstance(breakdown, dict):
        raise AnalysisException("AI response is missing the score breakdown")

    clamped_breakdown = {}
    for key in ("skills_match", "experience_match", "education_match", "overall_fit"):
        value = breakdown.get(key)
        if not _is_number(value):
            raise AnalysisException(
                "AI returned an incomplete score breakdown",
                details={"field": key},
            )
        clamped_breakdown[key] = clamp_score(value)

    overall = clamp_score(score)
    fit_level = payload.get("fit_level")
    if not isinstance(fit_level, str) or not fit_level.strip():
        fit_level = fit_level_for_score(overall)

    try:
        return CompatibilityAnalysis.model_validate({
            "overall_score": overall,
            "score_breakdown": clamped_breakdown,
            "strengths": payload.get("strengths") or [],
            "skill_gaps": payload.get("skill_gaps") or [],
            "experience_gaps": payload.get("experience_gaps") or [],
            "recommendations": payload.get("recommendations") or [],
            "fit_level": fit_level,
            "summary": payload.get("summary") or "",
        })
    except PydanticValidationError as exc:
        raise _schema_error("compatibility", exc) from exc


# ── Skill extraction ─────────────────────────────────────────────────────────


async def extract_job_skills(job: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Extract a job's skill list from its free-text fields.

    Manually specified skills are passed along and must survive in the output
    as 'required'.
    """
    manual = job.get("skills") or []
    user_prompt = (
        f"## Title\n{job.get('title') or ''}\n\n"
        f"## Experience Level\n{job.get('experience_level') or 'unspecified'}\n\n"
        f"## Description\n{_truncate(job.get('description'))}\n\n"
        f"## Responsibilities\n{_truncate(job.get('responsibilities'))}\n\n"
        f"## Qualifications\n{_truncate(job.get('qualifications'))}\n\n"
        f"## Nice To Have\n{_truncate(job.get('nice_to_have'))}\n\n"
        f"## Manually Specified Skills\n{json.dumps(manual)}"
    )
    payload = await _complete(
        "extract_job_skills",
        (
            "You are a technical recruiter extracting skills from a job posting. "
            "Return ONLY a JSON object with the key \"skills\": an array of objects with "
            '"skill_name" (string), "category" (programming_language|framework|tool|soft_skill|other) '
            'and "importance" (required|preferred|nice_to_have). '
            "Every manually specified skill must appear with importance \"required\"."
        ),
        user_prompt,
        max_tokens=settings.openai_max_tokens_extraction,
    )
    return validate_extracted_skills(payload)


# ── Skill matching ───────────────────────────────────────────────────────────


async def analyze_skill_match(
    candidate_skills: List[Dict[str, Any]],
    job_skills: List[Dict[str, Any]],
) -> SkillMatchResult:
    """
    Compare a candidate's skills with a job's, tolerating synonyms
    ("React" ~ "React.js"). The percentage covers required skills only.
    """
    payload = await _complete(
        "analyze_skill_match",
        (
            "You are an expert recruiter analyzing skill compatibility. "
            "Return ONLY a JSON object with keys:\n"
            '  "matching_skills": array of {"skill", "candidate_level" '
            '(Beginner|Intermediate|Advanced|Expert), "job_requirement" '
            '(required|preferred|nice_to_have), "match_quality" (exact|similar|partial)},\n'
            '  "missing_skills": array of {"skill", "job_requirement", '
            '"importance" (high|medium|low)},\n'
            '  "match_percentage": number 0-100 computed over required skills only.\n'
            "Treat common variations of a skill name as the same skill."
        ),
        (
            f"## Candidate Skills\n{json.dumps(candidate_skills)}\n\n"
            f"## Job Skills\n{json.dumps(job_skills)}"
        ),
        max_tokens=settings.openai_max_tokens_match,
    )
    return validate_skill_match_payload(payload)


async def resolve_skill_aliases(
    required_names: List[str],
    held_names: List[str],
) -> Dict[str, Optional[str]]:
    """Map each required skill name onto the candidate skill it is a synonym of, if any."""
    payload = await _complete(
        "resolve_skill_aliases",
        (
            "You match skill names that refer to the same technology or competency "
            "(for example \"JS\" and \"JavaScript\"). Return ONLY a JSON object with the key "
            "\"matches\": an object mapping every required skill name to the held skill name "
            "it is equivalent to, or null when none is equivalent."
        ),
        (
            f"## Required Skills\n{json.dumps(required_names)}\n\n"
            f"## Held Skills\n{json.dumps(held_names)}"
        ),
        max_tokens=settings.openai_max_tokens_match,
        temperature=0.0,
    )
    return validate_alias_mapping(payload, required_names, held_names)


# ── Recommendations ──────────────────────────────────────────────────────────


async def get_skill_recommendations(
    missing_skills: List[Dict[str, Any]],
) -> List[SkillRecommendation]:
    """Learning path, resources, time estimate and difficulty per missing skill."""
    payload = await _complete(
        "get_skill_recommendations",
        (
            "You are a career development expert. Return ONLY a JSON object with the key "
            "\"recommendations\": an array of {\"skill\", \"learning_path\", \"resources\" "
            "(array of strings), \"estimated_time\", \"difficulty\" "
            "(beginner|intermediate|advanced)}, one per requested skill. "
            "Difficulty describes how hard the skill is to learn."
        ),
        f"## Missing Skills\n{json.dumps(missing_skills)}",
        max_tokens=settings.openai_max_tokens_recommendations,
        temperature=0.3,
    )
    return validate_recommendations_payload(payload)


# ── Compatibility ────────────────────────────────────────────────────────────


async def analyze_candidate_compatibility(
    candidate: Dict[str, Any],
    job: Dict[str, Any],
) -> CompatibilityAnalysis:
    """
    Score a candidate against a job from 0 to 100 with a per-category
    breakdown, strengths and gaps.
    """
    payload = await _complete(
        "analyze_candidate_compatibility",
        (
            "You are an expert technical recruiter scoring candidate-job fit. "
            "Return ONLY a JSON object with keys:\n"
            '  "overall_score": number 0-100,\n'
            '  "score_breakdown": {"skills_match", "experience_match", '
            '"education_match", "overall_fit"} each a number 0-100,\n'
            '  "strengths", "skill_gaps", "experience_gaps", "recommendations": arrays of strings,\n'
            '  "fit_level": one of "Excellent Match" (90+), "Good Match" (75-89), '
            '"Moderate Match" (60-74), "Poor Match" (<60),\n'
            '  "summary": string.'
        ),
        (
            f"## Candidate\n{_truncate(json.dumps(candidate, default=str), 12_000)}\n\n"
            f"## Job\n{_truncate(json.dumps(job, default=str), 12_000)}"
        ),
        max_tokens=settings.openai_max_tokens_compatibility,
        temperature=0.2,
    )
    return validate_compatibility_payload(payload)
