"""
tests/test_roadmap_service.py — Roadmap orchestration against in-memory fakes.

Covers the explicit no-roadmap outcomes, on-the-fly skill extraction, TTL
caching, and the job-edit cascade that forces the next fetch to recompute.
"""
from datetime import timedelta

import pytest

from app.core.capabilities import Capabilities
from app.core.exceptions import (
    AnalysisException,
    CandidateNotFoundException,
    MissingIdentifierException,
)
from app.schemas.roadmap import NoRoadmapReason, NoRoadmapResult, RoadmapResponse
from app.services.invalidation_service import InvalidationService
from app.services.job_skill_service import JobSkillService
from app.services.roadmap_service import RoadmapService
from tests.conftest import (
    FakeCandidateRepository,
    FakeInterestedJobRepository,
    FakeJobRepository,
    FakeProvider,
    FakeRecommendationRepository,
    FakeRoadmapRepository,
    FakeSkillMatchRepository,
    make_candidate,
    make_job,
    make_skill,
    utc,
)


class Harness:
    """Wires a RoadmapService and the job-skill cascade onto shared fakes."""

    def __init__(self, candidate, jobs=(), provider=None, caps=None):
        self.provider = provider or FakeProvider()
        self.candidate = candidate
        self.interested = FakeInterestedJobRepository()
        for job in jobs:
            self.interested.link(candidate.id, job)
        self.roadmaps = FakeRoadmapRepository()
        caps = caps or Capabilities()
        self.invalidation = InvalidationService(
            skill_match_repo=FakeSkillMatchRepository(),
            recommendation_repo=FakeRecommendationRepository(),
            roadmap_repo=self.roadmaps,
            interested_repo=self.interested,
            capabilities=caps,
        )
        self.job_skills = JobSkillService(
            provider=self.provider,
            job_repo=FakeJobRepository(*jobs),
            invalidation_service=self.invalidation,
        )
        self.service = RoadmapService(
            provider=self.provider,
            candidate_repo=FakeCandidateRepository(candidate),
            interested_repo=self.interested,
            roadmap_repo=self.roadmaps,
            job_skill_service=self.job_skills,
            capabilities=caps,
        )


class TestNoRoadmap:

    async def test_zero_interested_jobs(self, scope):
        candidate = make_candidate([("Python", "Advanced")])
        h = Harness(candidate)

        result = await h.service.get_or_compute_roadmap(scope, candidate.id)

        assert isinstance(result, NoRoadmapResult)
        assert result.reason is NoRoadmapReason.NO_INTERESTED_JOBS
        assert h.provider.calls == {}
        assert h.roadmaps.upserts == 0

    async def test_no_required_skills_after_extraction(self, scope):
        candidate = make_candidate()
        job = make_job("Mystery Role")
        h = Harness(candidate, [job])

        result = await h.service.get_or_compute_roadmap(scope, candidate.id)

        assert isinstance(result, NoRoadmapResult)
        assert result.reason is NoRoadmapReason.NO_EXTRACTABLE_SKILLS
        assert h.provider.count("extract_job_skills") == 1

    async def test_extraction_failure_is_skipped(self, scope):
        candidate = make_candidate()
        jobs = [make_job("A"), make_job("B")]
        h = Harness(candidate, jobs, provider=FakeProvider(error=AnalysisException()))

        result = await h.service.get_or_compute_roadmap(scope, candidate.id)

        assert result.reason is NoRoadmapReason.NO_EXTRACTABLE_SKILLS
        assert h.provider.count("extract_job_skills") == 2

    async def test_missing_candidate_id(self, scope):
        h = Harness(make_candidate())
        with pytest.raises(MissingIdentifierException):
            await h.service.get_or_compute_roadmap(scope, None)

    async def test_unknown_candidate(self, scope):
        h = Harness(make_candidate())
        with pytest.raises(CandidateNotFoundException):
            await h.service.get_or_compute_roadmap(scope, make_candidate().id)


class TestRoadmapGeneration:

    async def test_builds_and_caches(self, scope):
        candidate = make_candidate([("React", "Beginner")])
        job = make_job("Frontend Developer", [
            make_skill("React", level="Intermediate"),
            make_skill("TypeScript"),
        ])
        h = Harness(candidate, [job])

        result = await h.service.get_or_compute_roadmap(scope, candidate.id)

        assert isinstance(result, RoadmapResponse)
        assert result.cached is False
        assert result.source_job_ids == [str(job.id)]
        assert result.roadmap.total_skills_needed == 2
        assert h.roadmaps.upserts == 1
        scope.elevated.commit.assert_awaited()

        requested = [s["skill"] for s in h.provider.recommendation_requests[0]]
        assert requested == ["TypeScript", "React"]

    async def test_second_fetch_is_served_from_cache(self, scope):
        candidate = make_candidate()
        job = make_job("Dev", [make_skill("Docker")])
        h = Harness(candidate, [job])

        first = await h.service.get_or_compute_roadmap(scope, candidate.id)
        second = await h.service.get_or_compute_roadmap(scope, candidate.id)

        assert second.cached is True
        assert second.roadmap == first.roadmap
        assert h.provider.count("get_skill_recommendations") == 1

    async def test_expired_cache_recomputes(self, scope):
        candidate = make_candidate()
        job = make_job("Dev", [make_skill("Docker")])
        h = Harness(candidate, [job])

        await h.service.get_or_compute_roadmap(scope, candidate.id)
        h.roadmaps.rows[candidate.id].generated_date = utc(days_ago=7) - timedelta(seconds=1)
        again = await h.service.get_or_compute_roadmap(scope, candidate.id)

        assert again.cached is False
        assert h.provider.count("get_skill_recommendations") == 2

    async def test_force_refresh_bypasses_cache(self, scope):
        candidate = make_candidate()
        job = make_job("Dev", [make_skill("Docker")])
        h = Harness(candidate, [job])

        await h.service.get_or_compute_roadmap(scope, candidate.id)
        again = await h.service.get_or_compute_roadmap(scope, candidate.id, force_refresh=True)

        assert again.cached is False

    async def test_no_gaps_skips_recommendations(self, scope):
        candidate = make_candidate([("Go", "Expert")])
        job = make_job("Dev", [make_skill("Go", level="Advanced")])
        h = Harness(candidate, [job])

        result = await h.service.get_or_compute_roadmap(scope, candidate.id)

        assert result.roadmap.total_skills_needed == 0
        assert h.provider.count("get_skill_recommendations") == 0

    async def test_skills_extracted_on_the_fly(self, scope):
        candidate = make_candidate()
        job = make_job("Platform Engineer")
        provider = FakeProvider(extracted={
            "Platform Engineer": [{
                "skill_name": "Terraform",
                "skill_category": "tool",
                "importance": "required",
                "required_level": None,
            }],
        })
        h = Harness(candidate, [job], provider=provider)

        result = await h.service.get_or_compute_roadmap(scope, candidate.id)

        assert result.roadmap.skill_gap_analysis.new_skills_needed == ["Terraform"]
        assert [s.skill_name for s in job.skills] == ["Terraform"]

    async def test_roadmap_cache_disabled(self, scope):
        candidate = make_candidate()
        job = make_job("Dev", [make_skill("Docker")])
        caps = Capabilities(roadmap_cache=False)
        h = Harness(candidate, [job], caps=caps)

        await h.service.get_or_compute_roadmap(scope, candidate.id)
        again = await h.service.get_or_compute_roadmap(scope, candidate.id)

        assert again.cached is False
        assert h.roadmaps.upserts == 0


class TestJobEditCascade:

    async def test_job_skill_refresh_forces_recompute_for_interested_candidates(self, scope):
        alice = make_candidate()
        job = make_job("Dev", [make_skill("Docker")])
        provider = FakeProvider(extracted={
            "Dev": [{
                "skill_name": "Kubernetes",
                "skill_category": "tool",
                "importance": "required",
                "required_level": None,
            }],
        })
        h = Harness(alice, [job], provider=provider)

        await h.service.get_or_compute_roadmap(scope, alice.id)
        assert alice.id in h.roadmaps.rows

        await h.job_skills.refresh_job_skills(scope, job.id)
        assert alice.id not in h.roadmaps.rows

        after = await h.service.get_or_compute_roadmap(scope, alice.id)
        assert after.cached is False
        assert after.roadmap.skill_gap_analysis.new_skills_needed == ["Kubernetes"]
