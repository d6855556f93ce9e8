from __future__ import annotations

import pytest
from pydantic import ValidationError

from campusmatch.schemas import ApplicationRecord, SchoolModules, StudentProfile


def test_student_profile_from_camel_case_document():
    profile = StudentProfile.model_validate(
        {
            "_id": 1001,
            "technicalSkills": [{"skillId": {"_id": "S-PY"}, "skillName": "Python", "selfRating": 3}],
            "softSkills": [{"skillName": "Communication", "selfRating": "2"}],
            "englishProficiency": {"speaking": "B1", "writing": None},
            "higherEducation": [{"degree": " B.Tech "}, {"degree": "  "}, {}],
            "currentSchool": None,
            "campus": {"_id": "C-1"},
            "profileStatus": "approved",
            "dateOfJoining": "2024-01-10T00:00:00Z",
        }
    )

    assert profile.student_id == "1001"
    assert profile.technical_skills[0].skill_id == "S-PY"
    assert [skill.skill_name for skill in profile.all_skills()] == ["Python", "Communication"]
    assert profile.english_proficiency.writing == ""
    assert profile.degrees() == ["B.Tech"]
    assert profile.current_school == ""
    assert profile.campus == "C-1"
    assert profile.date_of_joining.month == 1


def test_student_profile_requires_identifier():
    with pytest.raises(ValidationError):
        StudentProfile.model_validate({"name": "No Id"})


def test_unknown_profile_status_rejected():
    with pytest.raises(ValidationError):
        StudentProfile.model_validate({"studentId": "S-1", "profileStatus": "archived"})


def test_school_modules_accepts_bare_list():
    layout = SchoolModules.model_validate([" Foundations ", "Web", ""])

    assert layout.kind == "hierarchical"
    assert layout.modules == ("Foundations", "Web")
    assert layout.index_of(" Web") == 1
    assert layout.index_of("Backend") is None
    assert layout.index_of(None) is None


def test_school_modules_rejects_unknown_keys():
    with pytest.raises(ValidationError):
        SchoolModules.model_validate({"kind": "tracks", "modules": [], "order": "asc"})


def test_application_record_aliases():
    record = ApplicationRecord.model_validate({"student": {"_id": "S-1"}, "job": "J-1"})

    assert record.student_id == "S-1"
    assert record.job_id == "J-1"
    assert record.status == "applied"
