"""
tests/test_skill_aggregator.py — Requirement aggregation and gap classification.

Covers:
- Union of required skills across jobs (dedup, job tagging, highest target)
- Level defaults: explicit level, experience-derived level, null candidate level
- Synonym resolution only for names that exact matching could not settle
"""
from app.schemas.skills import SkillLevel
from app.services.skill_aggregator import (
    SkillAggregator,
    aggregate_requirements,
    classify,
    index_held_skills,
    normalize_skill_name,
)
from tests.conftest import FakeProvider, make_candidate, make_job, make_skill


class TestNormalizeSkillName:

    def test_case_and_whitespace_insensitive(self):
        assert normalize_skill_name("  Node   JS ") == "node js"
        assert normalize_skill_name("PYTHON") == normalize_skill_name("python")

    def test_none_is_empty(self):
        assert normalize_skill_name(None) == ""


class TestAggregateRequirements:

    def test_shared_skill_appears_once_with_both_jobs(self):
        a = make_job("API Developer", [make_skill("Docker")])
        b = make_job("Platform Engineer", [make_skill("docker")])
        reqs = aggregate_requirements([a, b])
        assert len(reqs) == 1
        assert reqs[0].job_ids == [str(a.id), str(b.id)]

    def test_highest_demanded_level_wins(self):
        a = make_job("A", [make_skill("Python", level="Intermediate")])
        b = make_job("B", [make_skill("Python", level="Expert")])
        c = make_job("C", [make_skill("Python", level="Beginner")])
        reqs = aggregate_requirements([a, b, c])
        assert reqs[0].target_level is SkillLevel.EXPERT

    def test_non_required_skills_are_ignored(self):
        job = make_job("A", [
            make_skill("Go", importance="preferred"),
            make_skill("Rust", importance="nice_to_have"),
            make_skill("SQL"),
        ])
        assert [r.name for r in aggregate_requirements([job])] == ["SQL"]

    def test_level_derived_from_experience_when_missing(self):
        senior = make_job("Senior", [make_skill("Kafka")], experience_level="senior")
        lead = make_job("Lead", [make_skill("Terraform")], experience_level="lead")
        unknown = make_job("Other", [make_skill("Git")], experience_level=None)
        levels = {r.name: r.target_level for r in aggregate_requirements([senior, lead, unknown])}
        assert levels == {
            "Kafka": SkillLevel.ADVANCED,
            "Terraform": SkillLevel.EXPERT,
            "Git": SkillLevel.INTERMEDIATE,
        }

    def test_first_seen_order_is_kept(self):
        job = make_job("A", [make_skill("Zig"), make_skill("Ada"), make_skill("Lua")])
        assert [r.name for r in aggregate_requirements([job])] == ["Zig", "Ada", "Lua"]

    def test_jobs_without_skills(self):
        assert aggregate_requirements([make_job("Empty")]) == []


class TestIndexHeldSkills:

    def test_null_level_counts_as_beginner(self):
        held = index_held_skills(make_candidate([("React", None)]).skills)
        assert held["react"].level is SkillLevel.BEGINNER

    def test_duplicate_names_keep_highest_level(self):
        held = index_held_skills(make_candidate([
            ("python", "Beginner"),
            ("Python", "Advanced"),
        ]).skills)
        assert held["python"].level is SkillLevel.ADVANCED


class TestClassify:

    def test_split_into_new_upgrade_sufficient(self):
        job = make_job("A", [
            make_skill("React", level="Intermediate"),
            make_skill("Docker", level="Intermediate"),
            make_skill("Python", level="Intermediate"),
        ])
        candidate = make_candidate([("React", "Beginner"), ("Python", "Expert")])
        result = classify(aggregate_requirements([job]), index_held_skills(candidate.skills))

        assert [s.requirement.name for s in result.new] == ["Docker"]
        assert [s.requirement.name for s in result.upgrade] == ["React"]
        assert result.upgrade[0].current_level is SkillLevel.BEGINNER
        assert [s.requirement.name for s in result.sufficient] == ["Python"]

    def test_alias_maps_onto_held_skill(self):
        job = make_job("A", [make_skill("JavaScript", level="Intermediate")])
        candidate = make_candidate([("JS", "Advanced")])
        result = classify(
            aggregate_requirements([job]),
            index_held_skills(candidate.skills),
            aliases={"JavaScript": "JS"},
        )
        assert result.new == []
        assert [s.requirement.name for s in result.sufficient] == ["JavaScript"]


class TestSkillAggregatorCompare:

    async def test_synonyms_resolved_through_provider(self):
        provider = FakeProvider(aliases={"JavaScript": "JS"})
        job = make_job("A", [make_skill("JavaScript", level="Intermediate")])
        candidate = make_candidate([("JS", "Intermediate")])

        result = await SkillAggregator(provider).compare([job], candidate.skills)

        assert provider.count("resolve_skill_aliases") == 1
        assert [s.requirement.name for s in result.sufficient] == ["JavaScript"]

    async def test_no_provider_call_when_everything_matches_exactly(self):
        provider = FakeProvider()
        job = make_job("A", [make_skill("Python")])
        candidate = make_candidate([("python", "Advanced")])

        await SkillAggregator(provider).compare([job], candidate.skills)

        assert provider.count("resolve_skill_aliases") == 0

    async def test_no_provider_call_when_candidate_has_nothing_left_to_match(self):
        provider = FakeProvider()
        job = make_job("A", [make_skill("Python"), make_skill("Docker")])
        candidate = make_candidate([("Python", "Advanced")])

        result = await SkillAggregator(provider).compare([job], candidate.skills)

        assert provider.count("resolve_skill_aliases") == 0
        assert [s.requirement.name for s in result.new] == ["Docker"]
