"""
tests/test_roadmap_builder.py — Phase layout, gap analysis and career paths.

The builder is pure, so these tests feed it classifications produced by the
aggregator helpers and inspect the resulting RoadmapData directly.
"""
from app.schemas.analysis import SkillRecommendation
from app.schemas.roadmap import PhaseTier, SkillType
from app.schemas.skills import SkillLevel
from app.services.roadmap_builder import (
    build_roadmap,
    estimate_weeks,
    format_duration,
    tier_for,
)
from app.services.skill_aggregator import (
    ClassifiedSkill,
    RequiredSkill,
    aggregate_requirements,
    classify,
    index_held_skills,
)
from tests.conftest import make_candidate, make_job, make_skill


def roadmap_for(jobs, candidate, recommendations=None):
    classification = classify(
        aggregate_requirements(jobs),
        index_held_skills(candidate.skills),
    )
    return build_roadmap(classification, jobs, recommendations)


def phase_skill_names(roadmap):
    return [s.skill for phase in roadmap.learning_phases for s in phase.skills]


class TestGapAnalysis:

    def test_single_upgrade(self):
        job = make_job("Frontend Developer", [make_skill("React", level="Intermediate")])
        candidate = make_candidate([("React", "Beginner")])

        gaps = roadmap_for([job], candidate).skill_gap_analysis

        assert [u.model_dump(mode="json") for u in gaps.skills_to_upgrade] == [
            {"skill": "React", "current_level": "Beginner", "target_level": "Intermediate"}
        ]
        assert gaps.new_skills_needed == []
        assert gaps.skills_already_sufficient == []

    def test_expert_skill_never_in_phases(self):
        job = make_job("Principal", [
            make_skill("Python", level="Expert"),
            make_skill("Kubernetes", level="Advanced"),
        ])
        candidate = make_candidate([("Python", "Expert")])

        roadmap = roadmap_for([job], candidate)

        assert "Python" not in phase_skill_names(roadmap)
        assert roadmap.skill_gap_analysis.skills_already_sufficient == ["Python"]

    def test_shared_missing_skill_listed_once_as_new(self):
        a = make_job("API Developer", [make_skill("Docker")])
        b = make_job("Platform Engineer", [make_skill("Docker")])
        candidate = make_candidate([("Python", "Advanced")])

        roadmap = roadmap_for([a, b], candidate)
        skills = [s for phase in roadmap.learning_phases for s in phase.skills]

        assert [s.skill for s in skills] == ["Docker"]
        assert skills[0].skill_type is SkillType.NEW
        assert skills[0].required_for_jobs == [str(a.id), str(b.id)]
        assert roadmap.total_skills_needed == 1

    def test_nothing_to_learn(self):
        job = make_job("Dev", [make_skill("Go", level="Intermediate")])
        candidate = make_candidate([("Go", "Advanced")])

        roadmap = roadmap_for([job], candidate)

        assert roadmap.learning_phases == []
        assert roadmap.total_skills_needed == 0
        assert roadmap.career_paths[0].readiness_percentage == 100.0


class TestPhases:

    def test_tiers_and_numbering(self):
        job = make_job("Staff Engineer", [
            make_skill("Git", level="Beginner"),
            make_skill("Kafka", level="Advanced"),
            make_skill("System Design", level="Expert"),
        ])
        candidate = make_candidate([])

        phases = roadmap_for([job], candidate).learning_phases

        assert [p.phase for p in phases] == [1, 2, 3]
        assert [p.tier for p in phases] == [
            PhaseTier.FOUNDATION,
            PhaseTier.INTERMEDIATE,
            PhaseTier.ADVANCED,
        ]
        assert phases[0].prerequisites == []
        assert phases[2].prerequisites == ["Git", "Kafka"]

    def test_empty_tiers_leave_no_holes(self):
        job = make_job("Staff", [make_skill("System Design", level="Expert")])
        phases = roadmap_for([job], make_candidate([])).learning_phases
        assert [(p.phase, p.tier) for p in phases] == [(1, PhaseTier.ADVANCED)]

    def test_recommendation_fills_in_learning_details(self):
        job = make_job("Dev", [make_skill("Docker")])
        recs = {
            "docker": SkillRecommendation(
                skill="Docker",
                learning_path="Containers first",
                resources=["docs.docker.com"],
                estimated_time="2 weeks",
                difficulty="beginner",
            )
        }
        skill = roadmap_for([job], make_candidate([]), recs).learning_phases[0].skills[0]
        assert skill.learning_path == "Containers first"
        assert skill.resources == ["docs.docker.com"]
        assert skill.time_estimate == "2 weeks"


class TestCareerPaths:

    def test_readiness_counts_sufficient_and_upgrade(self):
        job = make_job("Backend Engineer", [
            make_skill("Python", level="Intermediate"),
            make_skill("SQL", level="Advanced"),
            make_skill("Docker"),
            make_skill("AWS"),
        ])
        candidate = make_candidate([("Python", "Advanced"), ("SQL", "Beginner")])

        path = roadmap_for([job], candidate).career_paths[0]

        assert path.role == "Backend Engineer"
        assert path.readiness_percentage == 50.0

    def test_same_title_grouped(self):
        a = make_job("Data Engineer", [make_skill("Spark")])
        b = make_job("data engineer", [make_skill("Airflow")])

        paths = roadmap_for([a, b], make_candidate([])).career_paths

        assert len(paths) == 1
        assert paths[0].target_job_ids == [str(a.id), str(b.id)]
        assert paths[0].required_phases == [1]


class TestEstimates:

    def test_tier_for_upgrade_is_intermediate(self):
        skill = ClassifiedSkill(
            RequiredSkill("React", SkillLevel.ADVANCED),
            current_level=SkillLevel.BEGINNER,
        )
        assert tier_for(skill) is PhaseTier.INTERMEDIATE

    def test_upgrade_costs_only_the_difference(self):
        skill = ClassifiedSkill(
            RequiredSkill("React", SkillLevel.ADVANCED),
            current_level=SkillLevel.BEGINNER,
        )
        assert estimate_weeks(skill) == 8

    def test_new_skill_costs_every_level(self):
        skill = ClassifiedSkill(RequiredSkill("Go", SkillLevel.INTERMEDIATE))
        assert estimate_weeks(skill) == 8

    def test_format_duration(self):
        assert format_duration(4) == "4 weeks"
        assert format_duration(24) == "6-9 months"
        assert format_duration(8) == "2-3 months"
