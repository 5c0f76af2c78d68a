"""
tests/conftest.py — Shared fakes for the analysis services.

Everything here is in-memory: repositories keep rows in dicts, the inference
provider returns canned results and counts its calls, and sessions are
AsyncMocks so commit/rollback can be asserted on. No database, no network.
"""
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

import pytest

from app.core.capabilities import Capabilities
from app.core.database import DBScope
from app.schemas.analysis import (
    CompatibilityAnalysis,
    MissingSkill,
    SkillMatchResult,
    SkillRecommendation,
)


def utc(days_ago: float = 0) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=days_ago)


# ── Domain object factories ────────────────────────────────────────────────────

def make_skill(name, importance="required", level=None, category="framework"):
    return SimpleNamespace(
        skill_name=name,
        skill_category=category,
        importance=importance,
        required_level=level,
    )


def make_job(title="Backend Engineer", skills=(), experience_level="mid", updated_at=None):
    return SimpleNamespace(
        id=uuid.uuid4(),
        title=title,
        experience_level=experience_level,
        description=f"{title} role",
        responsibilities="Build things",
        qualifications="Know things",
        nice_to_have=None,
        minimum_experience_years=2,
        skills=list(skills),
        updated_at=updated_at or utc(days_ago=30),
    )


def make_candidate(skills=(), updated_at=None):
    return SimpleNamespace(
        id=uuid.uuid4(),
        headline="Engineer",
        bio="Builds software",
        current_job_title="Developer",
        current_company="Acme",
        years_of_experience=3,
        skills=[SimpleNamespace(skill_name=n, skill_level=lvl) for n, lvl in skills],
        experience=[],
        education=[],
        certifications=[],
        updated_at=updated_at or utc(days_ago=30),
    )


def make_application(job, candidate, analysis=None, analyzed_at=None):
    return SimpleNamespace(
        id=uuid.uuid4(),
        job_id=job.id,
        candidate_id=candidate.id,
        status="pending",
        ai_analysis_score=None,
        ai_analysis_data=analysis,
        ai_analyzed_at=analyzed_at,
    )


# ── Fake inference provider ────────────────────────────────────────────────────

def compatibility(score=80.0, fit_level="Good Match") -> CompatibilityAnalysis:
    return CompatibilityAnalysis(
        overall_score=score,
        score_breakdown={
            "skills_match": score,
            "experience_match": score,
            "education_match": score,
            "overall_fit": score,
        },
        strengths=["Python"],
        fit_level=fit_level,
        summary="Solid fit",
    )


class FakeProvider:
    """Stands in for app.core.ai. Call counts are tracked per function."""

    def __init__(
        self,
        skill_match: Optional[SkillMatchResult] = None,
        compatibility_result: Optional[CompatibilityAnalysis] = None,
        extracted: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        aliases: Optional[Dict[str, Optional[str]]] = None,
        error: Optional[Exception] = None,
    ):
        self.skill_match = skill_match or SkillMatchResult(
            matching_skills=[],
            missing_skills=[MissingSkill(skill="Docker", job_requirement="required", importance="high")],
            match_percentage=50,
        )
        self.compatibility_result = compatibility_result or compatibility()
        self.extracted = extracted or {}
        self.aliases = aliases or {}
        self.error = error
        self.calls: Dict[str, int] = {}
        self.recommendation_requests: List[List[Dict[str, Any]]] = []

    def _count(self, name: str) -> None:
        self.calls[name] = self.calls.get(name, 0) + 1
        if self.error is not None:
            raise self.error

    def count(self, name: str) -> int:
        return self.calls.get(name, 0)

    async def extract_job_skills(self, job):
        self._count("extract_job_skills")
        return list(self.extracted.get(job["title"], []))

    async def analyze_skill_match(self, candidate_skills, job_skills):
        self._count("analyze_skill_match")
        return self.skill_match

    async def resolve_skill_aliases(self, required_names, held_names):
        self._count("resolve_skill_aliases")
        return {name: self.aliases.get(name) for name in required_names}

    async def get_skill_recommendations(self, missing_skills):
        self._count("get_skill_recommendations")
        self.recommendation_requests.append(missing_skills)
        return [
            SkillRecommendation(
                skill=s["skill"],
                learning_path=f"Learn {s['skill']}",
                resources=["Official docs"],
                estimated_time="3 weeks",
                difficulty="intermediate",
            )
            for s in missing_skills
        ]

    async def analyze_candidate_compatibility(self, candidate, job):
        self._count("analyze_candidate_compatibility")
        return self.compatibility_result


# ── Fake repositories ──────────────────────────────────────────────────────────

class FakeJobRepository:
    def __init__(self, *jobs):
        self.jobs = {job.id: job for job in jobs}

    async def get_by_id(self, db, id):
        return self.jobs.get(id)

    async def get_with_skills(self, db, job_id):
        return self.jobs.get(job_id)

    async def replace_skills(self, db, job_id, skills):
        job = self.jobs[job_id]
        job.skills = [make_skill(
            s["skill_name"],
            importance=s.get("importance") or "required",
            level=s.get("required_level"),
            category=s.get("skill_category") or "other",
        ) for s in skills]
        job.updated_at = utc()
        return job.skills


class FakeCandidateRepository:
    def __init__(self, *candidates):
        self.candidates = {c.id: c for c in candidates}

    async def get_by_id(self, db, id):
        return self.candidates.get(id)

    async def get_with_skills(self, db, candidate_id):
        return self.candidates.get(candidate_id)

    async def get_with_profile_details(self, db, candidate_id):
        return self.candidates.get(candidate_id)


class FakeApplicationRepository:
    def __init__(self, *applications):
        self.applications = {a.id: a for a in applications}
        self.saved = 0
        self.cleared = 0

    async def get_by_id(self, db, id):
        return self.applications.get(id)

    async def find_by_job_and_candidate(self, db, job_id, candidate_id):
        for application in self.applications.values():
            if application.job_id == job_id and application.candidate_id == candidate_id:
                return application
        return None

    async def save_analysis(self, db, id, *, score, data, analyzed_at):
        application = self.applications[id]
        application.ai_analysis_score = score
        application.ai_analysis_data = data
        application.ai_analyzed_at = analyzed_at
        self.saved += 1

    async def clear_analysis(self, db, id):
        application = self.applications[id]
        application.ai_analysis_score = None
        application.ai_analysis_data = None
        application.ai_analyzed_at = None
        self.cleared += 1


class FakeInterestedJobRepository:
    def __init__(self, jobs_by_id=None):
        self.jobs_by_id = dict(jobs_by_id or {})
        self.pairs: List[tuple] = []

    def link(self, candidate_id, job):
        self.jobs_by_id[job.id] = job
        self.pairs.append((candidate_id, job.id))

    async def list_jobs_for_candidate(self, db, candidate_id):
        return [self.jobs_by_id[j] for c, j in self.pairs if c == candidate_id]

    async def list_candidate_ids_for_job(self, db, job_id):
        return [c for c, j in self.pairs if j == job_id]

    async def add(self, db, candidate_id, job_id):
        if (candidate_id, job_id) in self.pairs:
            return False
        self.pairs.append((candidate_id, job_id))
        return True

    async def remove(self, db, candidate_id, job_id):
        if (candidate_id, job_id) not in self.pairs:
            return False
        self.pairs.remove((candidate_id, job_id))
        return True


class _PairCache:
    def __init__(self):
        self.rows: Dict[tuple, SimpleNamespace] = {}

    async def get_for_pair(self, db, job_id, candidate_id):
        return self.rows.get((job_id, candidate_id))

    async def upsert_for_pair(self, db, **values):
        self.rows[(values["job_id"], values["candidate_id"])] = SimpleNamespace(**values)

    async def delete_for_job(self, db, job_id):
        doomed = [key for key in self.rows if key[0] == job_id]
        for key in doomed:
            del self.rows[key]
        return len(doomed)


class FakeSkillMatchRepository(_PairCache):
    async def delete_for_pair(self, db, job_id, candidate_id):
        return 1 if self.rows.pop((job_id, candidate_id), None) else 0


class FakeRecommendationRepository(_PairCache):
    pass


class FakeRoadmapRepository:
    def __init__(self):
        self.rows: Dict[Any, SimpleNamespace] = {}
        self.upserts = 0

    async def get_for_candidate(self, db, candidate_id):
        return self.rows.get(candidate_id)

    async def upsert_for_candidate(self, db, **values):
        self.rows[values["candidate_id"]] = SimpleNamespace(**values)
        self.upserts += 1

    async def delete_for_candidates(self, db, candidate_ids):
        deleted = 0
        for candidate_id in candidate_ids:
            if self.rows.pop(candidate_id, None) is not None:
                deleted += 1
        return deleted


# ── Fixtures ───────────────────────────────────────────────────────────────────

@pytest.fixture
def scope():
    return DBScope(caller=AsyncMock(), elevated=AsyncMock())


@pytest.fixture
def caps():
    return Capabilities()
