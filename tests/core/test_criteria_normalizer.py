from __future__ import annotations

import pytest

from campusmatch.core import CriteriaNormalizer, NormalizerConfig
from campusmatch.core.criteria import (
    AcademicCriterion,
    EnglishCriterion,
    ModuleCriterion,
    ReadinessCriterion,
    SkillCriterion,
)
from campusmatch.schemas import JobPosting, SchoolModuleConfig

FULL_ELIGIBILITY = {
    "tenthGrade": {"required": True, "minPercentage": 60},
    "twelfthGrade": {"required": True, "minPercentage": 65},
    "higherEducation": {"required": True, "acceptedDegrees": ["B.Tech"]},
    "minCgpa": 6.5,
    "schools": ["School of Programming"],
    "campuses": ["C-PUNE"],
    "minModule": "Web",
    "femaleOnly": True,
    "minAttendance": 75,
    "minMonthsAtInstitution": 6,
    "certifications": ["AWS Cloud Practitioner"],
    "readinessRequirement": "in_progress",
    "shortlistDeadline": "2024-08-01T00:00:00Z",
    "englishSpeaking": "B2",
    "englishWriting": "B1",
}


def build_job(eligibility: dict | None = None, skills: list[dict] | None = None) -> JobPosting:
    return JobPosting.model_validate(
        {
            "_id": "J-100",
            "title": "Backend Intern",
            "eligibility": eligibility or {},
            "requiredSkills": skills or [],
        }
    )


def test_hard_criteria_follow_evaluation_order():
    job = build_job(FULL_ELIGIBILITY)

    criteria = CriteriaNormalizer().normalize(job)

    assert criteria.job_id == "J-100"
    assert criteria.hard_names == [
        "tenth_grade",
        "twelfth_grade",
        "higher_education",
        "min_cgpa",
        "school",
        "campus",
        "module",
        "gender",
        "attendance",
        "tenure",
        "certifications",
        "readiness",
        "profile_approval",
    ]
    assert criteria.hard[0] == AcademicCriterion("tenth_grade", "10th", 60.0)
    assert criteria.hard[6] == ModuleCriterion("School of Programming", "Web")
    assert criteria.hard[11] == ReadinessCriterion("in_progress", 30.0)


@pytest.mark.parametrize("gate_english", [False, True])
@pytest.mark.parametrize("gate_required_skills", [False, True])
@pytest.mark.parametrize(
    "eligibility",
    [
        {},
        {"englishSpeaking": "B2"},
        {"minModule": "Web"},
        {"minModule": "Web", "schools": ["School of Programming", "School of Business"]},
        {"tenthGrade": {"required": False, "minPercentage": 90}},
        {"readinessRequirement": "no", "minAttendance": 0},
        FULL_ELIGIBILITY,
    ],
)
def test_open_for_all_matches_empty_hard_criteria(eligibility, gate_english, gate_required_skills):
    job = build_job(
        eligibility,
        skills=[{"skillId": "S-PY", "skillName": "Python", "proficiencyLevel": 3, "required": True}],
    )
    normalizer = CriteriaNormalizer(
        config=NormalizerConfig(
            gate_english=gate_english,
            gate_required_skills=gate_required_skills,
        )
    )

    criteria = normalizer.normalize(job)
    restrictions = job.restrictions(
        gate_english=gate_english,
        gate_required_skills=gate_required_skills,
    )

    assert criteria.hard_names == restrictions
    assert criteria.open_for_all is (not restrictions)
    assert job.is_open_for_all(
        gate_english=gate_english,
        gate_required_skills=gate_required_skills,
    ) is criteria.open_for_all


def test_default_open_for_all_ignores_soft_english_and_skills():
    job = build_job(
        {"englishSpeaking": "C1"},
        skills=[{"skillId": "S-PY", "proficiencyLevel": 4, "required": True}],
    )

    assert job.open_for_all
    assert CriteriaNormalizer().normalize(job).open_for_all


def test_module_requirement_needs_exactly_one_school():
    job = build_job({"minModule": "Web", "schools": ["School of Programming", "School of Business"]})

    criteria = CriteriaNormalizer().normalize(job)

    assert "module" not in criteria.hard_names
    assert criteria.hard_names == ["school"]


def test_soft_criteria_carry_levels_and_weights():
    job = build_job(
        {"englishSpeaking": "b2", "englishWriting": " "},
        skills=[
            {"skillId": "S-PY", "skillName": "Python", "proficiencyLevel": 3, "required": True},
            {"skillId": "S-SQL", "skillName": "SQL", "proficiencyLevel": 2},
        ],
    )
    normalizer = CriteriaNormalizer(
        config=NormalizerConfig(required_skill_weight=2.0, skill_weight=1.0, english_weight=0.5)
    )

    criteria = normalizer.normalize(job)

    assert criteria.soft == (
        SkillCriterion("Python", "S-PY", 3, True, 2.0),
        SkillCriterion("SQL", "S-SQL", 2, False, 1.0),
        EnglishCriterion("english_speaking", "speaking", "B2", 4, 0.5),
    )


def test_gates_are_added_only_when_enabled():
    job = build_job(
        {"englishSpeaking": "B1"},
        skills=[
            {"skillId": "S-PY", "skillName": "Python", "proficiencyLevel": 3, "required": True},
            {"skillId": "S-SQL", "skillName": "SQL", "proficiencyLevel": 2},
        ],
    )
    normalizer = CriteriaNormalizer(
        config=NormalizerConfig(gate_english=True, gate_required_skills=True)
    )

    criteria = normalizer.normalize(job)

    assert criteria.hard_names == ["english_speaking_gate", "skill_gate:S-PY"]
    assert len(criteria.soft) == 3


def test_module_snapshot_is_bound_to_criteria():
    snapshot = SchoolModuleConfig.model_validate(
        {"schools": {"School of Programming": ["Foundations", "Web"]}, "version": "v7"}
    )

    criteria = CriteriaNormalizer().normalize(build_job(), snapshot)

    assert criteria.module_config is snapshot
    assert criteria.module_config.version == "v7"
