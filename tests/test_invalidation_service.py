"""
tests/test_invalidation_service.py — Cascade deletes after upstream changes.

Covers:
- Job edits evict the job's pair caches and interested candidates' roadmaps
- Force re-analyze evicts exactly one pair's skill match
- A failing step is rolled back and reported while the rest still run
"""
from types import SimpleNamespace

from sqlalchemy.exc import SQLAlchemyError

from app.core.capabilities import Capabilities
from app.services.invalidation_service import InvalidationService
from app.services.skill_match_service import SkillMatchService
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


class BrokenSkillMatchRepository(FakeSkillMatchRepository):
    async def delete_for_job(self, db, job_id):
        raise SQLAlchemyError("deadlock detected")


def seeded(skill_match_repo=None, caps=None):
    job, other_job = make_job("Dev"), make_job("Ops")
    alice, bob = make_candidate(), make_candidate()

    skill_matches = skill_match_repo or FakeSkillMatchRepository()
    recommendations = FakeRecommendationRepository()
    roadmaps = FakeRoadmapRepository()
    interested = FakeInterestedJobRepository()
    interested.link(alice.id, job)
    interested.link(bob.id, other_job)

    for j in (job, other_job):
        for c in (alice, bob):
            skill_matches.rows[(j.id, c.id)] = SimpleNamespace(analysis_date=utc())
            recommendations.rows[(j.id, c.id)] = SimpleNamespace(generated_date=utc())
    for c in (alice, bob):
        roadmaps.rows[c.id] = SimpleNamespace(generated_date=utc())

    service = InvalidationService(
        skill_match_repo=skill_matches,
        recommendation_repo=recommendations,
        roadmap_repo=roadmaps,
        interested_repo=interested,
        capabilities=caps or Capabilities(),
    )
    return SimpleNamespace(
        service=service,
        job=job,
        other_job=other_job,
        alice=alice,
        bob=bob,
        skill_matches=skill_matches,
        recommendations=recommendations,
        roadmaps=roadmaps,
    )


class TestInvalidateJob:

    async def test_evicts_job_rows_and_interested_roadmaps(self, scope):
        w = seeded()

        result = await w.service.invalidate_job(scope, w.job.id)

        assert result.ok
        assert result.skill_matches_deleted == 2
        assert result.recommendations_deleted == 2
        assert result.roadmaps_deleted == 1
        assert all(key[0] == w.other_job.id for key in w.skill_matches.rows)
        assert all(key[0] == w.other_job.id for key in w.recommendations.rows)
        assert list(w.roadmaps.rows) == [w.bob.id]

    async def test_failed_step_does_not_stop_the_rest(self, scope):
        w = seeded(skill_match_repo=BrokenSkillMatchRepository())

        result = await w.service.invalidate_job(scope, w.job.id)

        assert not result.ok
        assert result.failed_steps == ["skill_matches"]
        assert result.recommendations_deleted == 2
        assert result.roadmaps_deleted == 1
        scope.elevated.rollback.assert_awaited_once()

    async def test_missing_tables_are_skipped(self, scope):
        caps = Capabilities(skill_match_cache=False, recommendation_cache=False, roadmap_cache=False)
        w = seeded(caps=caps)

        result = await w.service.invalidate_job(scope, w.job.id)

        assert result.ok
        assert len(w.skill_matches.rows) == 4
        assert len(w.roadmaps.rows) == 2
        scope.elevated.commit.assert_not_awaited()


class TestInvalidateReanalysis:

    async def test_only_the_pair_is_evicted(self, scope):
        w = seeded()

        result = await w.service.invalidate_reanalysis(scope, w.job.id, w.alice.id)

        assert result.skill_matches_deleted == 1
        assert (w.job.id, w.alice.id) not in w.skill_matches.rows
        assert len(w.skill_matches.rows) == 3
        assert len(w.recommendations.rows) == 4
        assert len(w.roadmaps.rows) == 2

    async def test_next_read_recomputes_despite_ttl(self, scope):
        job = make_job("Dev", [make_skill("Docker")])
        candidate = make_candidate()
        provider = FakeProvider()
        repo = FakeSkillMatchRepository()
        caps = Capabilities()
        skill_match = SkillMatchService(
            provider=provider,
            job_repo=FakeJobRepository(job),
            candidate_repo=FakeCandidateRepository(candidate),
            skill_match_repo=repo,
            capabilities=caps,
        )
        invalidation = InvalidationService(
            skill_match_repo=repo,
            recommendation_repo=FakeRecommendationRepository(),
            roadmap_repo=FakeRoadmapRepository(),
            interested_repo=FakeInterestedJobRepository(),
            capabilities=caps,
        )

        await skill_match.get_or_compute_skill_match(scope, job.id, candidate.id)
        await invalidation.invalidate_reanalysis(scope, job.id, candidate.id)
        again = await skill_match.get_or_compute_skill_match(scope, job.id, candidate.id)

        assert again.cached is False
        assert provider.count("analyze_skill_match") == 2


class TestInvalidateRoadmap:

    async def test_deletes_only_that_candidate(self, scope):
        w = seeded()

        result = await w.service.invalidate_roadmap(scope, w.alice.id)

        assert result.roadmaps_deleted == 1
        assert list(w.roadmaps.rows) == [w.bob.id]
