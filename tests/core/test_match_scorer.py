from __future__ import annotations

import pytest

from campusmatch.core import CriteriaNormalizer, MatchScorer, MatchScorerConfig, NormalizerConfig
from campusmatch.schemas import JobPosting, StudentProfile


def build_job(skills: list[dict], eligibility: dict | None = None) -> JobPosting:
    return JobPosting.model_validate(
        {"jobId": "J-1", "eligibility": eligibility or {}, "requiredSkills": skills}
    )


def score(job: JobPosting, student: StudentProfile, config: NormalizerConfig | None = None, scorer=None):
    criteria = CriteriaNormalizer(config=config).normalize(job)
    return (scorer or MatchScorer()).score(student, criteria.soft)


def test_partial_credit_is_capped():
    assert MatchScorer.partial_credit(2, 3) == pytest.approx(2 / 3)
    assert MatchScorer.partial_credit(4, 3) == 1.0
    assert MatchScorer.partial_credit(0, 0) == 1.0
    assert MatchScorer.partial_credit(0, 2) == 0.0


def test_single_skill_scores_two_thirds():
    job = build_job([{"skillId": "S-PY", "skillName": "Python", "proficiencyLevel": 3}])
    student = StudentProfile(
        student_id="S-1",
        technical_skills=[{"skill_id": "S-PY", "skill_name": "Python", "self_rating": 2}],
    )

    result = score(job, student)

    assert result.overall_percentage == 67
    detail = result.details[0]
    assert detail.credit == pytest.approx(2 / 3)
    assert detail.required_label == "Advanced"
    assert detail.student_label == "Intermediate"
    assert not detail.matched


def test_english_contributes_partial_credit():
    job = build_job([], eligibility={"englishSpeaking": "B2"})
    student = StudentProfile(student_id="S-1", english_proficiency={"speaking": "A2"})

    result = score(job, student)

    assert result.overall_percentage == 50
    assert result.details[0].credit == pytest.approx(0.5)
    assert "English speaking: A2 (job expects B2)" in result.summary


def test_half_up_rounding():
    job = build_job(
        [
            {"skillId": "S-PY", "proficiencyLevel": 4},
            {"skillId": "S-SQL", "proficiencyLevel": 4},
        ]
    )
    student = StudentProfile(
        student_id="S-1",
        technical_skills=[
            {"skill_id": "S-PY", "self_rating": 1},
            {"skill_id": "S-SQL", "self_rating": 4},
        ],
    )

    assert score(job, student).overall_percentage == 63


def test_no_required_levels_scores_full_marks():
    student = StudentProfile(student_id="S-1")

    assert score(build_job([]), student).overall_percentage == 100
    optional_only = build_job([{"skillId": "S-PY", "proficiencyLevel": 0}])
    result = score(optional_only, student)
    assert result.overall_percentage == 100
    assert result.details[0].matched


@pytest.mark.parametrize("student_level", [1, 2, 3, 4])
def test_raising_required_level_never_raises_score(student_level):
    student = StudentProfile(
        student_id="S-1",
        technical_skills=[
            {"skill_id": "S-PY", "self_rating": student_level},
            {"skill_id": "S-SQL", "self_rating": 2},
        ],
    )
    previous = 101
    for required in range(1, 5):
        job = build_job(
            [
                {"skillId": "S-PY", "proficiencyLevel": required},
                {"skillId": "S-SQL", "proficiencyLevel": 3},
            ]
        )
        current = score(job, student).overall_percentage
        assert current <= previous
        previous = current


def test_skill_found_by_name_across_categories():
    job = build_job([{"skillId": "S-XL", "skillName": "Excel", "proficiencyLevel": 3}])
    student = StudentProfile(
        student_id="S-1",
        technical_skills=[{"skill_name": "excel", "self_rating": 1}],
        office_skills=[{"skill_name": "Excel", "self_rating": 4}],
    )

    result = score(job, student)

    assert result.details[0].student_level == 4
    assert result.overall_percentage == 100


def test_required_skill_weight_shifts_the_mean():
    job = build_job(
        [
            {"skillId": "S-PY", "proficiencyLevel": 2, "required": True},
            {"skillId": "S-SQL", "proficiencyLevel": 2},
        ]
    )
    student = StudentProfile(
        student_id="S-1",
        technical_skills=[{"skill_id": "S-PY", "self_rating": 3}],
    )

    assert score(job, student).overall_percentage == 50
    weighted = score(job, student, NormalizerConfig(required_skill_weight=3.0))
    assert weighted.overall_percentage == 75
    assert weighted.details[0].required is True


def test_summary_lists_skill_gaps():
    job = build_job(
        [
            {"skillId": "S-PY", "skillName": "Python", "proficiencyLevel": 3},
            {"skillId": "S-JS", "skillName": "JavaScript", "proficiencyLevel": 2},
        ]
    )
    student = StudentProfile(
        student_id="S-1",
        technical_skills=[
            {"skill_id": "S-PY", "self_rating": 1},
            {"skill_id": "S-JS", "self_rating": 2},
        ],
    )

    result = score(job, student)

    assert result.overall_percentage == 67
    assert result.summary == (
        "Good match",
        "1 skill needs improvement: Python (need Advanced)",
    )


def test_summary_thresholds_are_configurable():
    job = build_job([{"skillId": "S-PY", "proficiencyLevel": 4}])
    student = StudentProfile(
        student_id="S-1",
        technical_skills=[{"skill_id": "S-PY", "self_rating": 4}],
    )

    default = score(job, student)
    strict = score(job, student, scorer=MatchScorer(config=MatchScorerConfig(excellent_threshold=101)))

    assert default.summary == ("Excellent match", "All 1 required skills matched")
    assert strict.summary[0] == "Good match"
