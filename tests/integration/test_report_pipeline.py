from __future__ import annotations

import json
from pathlib import Path

import pytest

from campusmatch.adapters import CurrentProfileAdapter, LegacyProfileAdapter
from campusmatch.container import create_container
from campusmatch.pipeline import (
    AdapterRegistry,
    ApplicationLoader,
    AuditLogger,
    JobLoader,
    StudentLoadError,
    StudentLoader,
)

JOB = {
    "_id": "J-1",
    "title": "Junior Developer",
    "eligibility": {
        "tenthGrade": {"required": True, "minPercentage": 60},
        "schools": ["School of Programming"],
        "minModule": "Web",
        "shortlistDeadline": "2024-08-01T00:00:00Z",
    },
    "requiredSkills": [{"skillId": "S-PY", "skillName": "Python", "proficiencyLevel": 3}],
}


def write_jsonl(path: Path, records: list[object]) -> None:
    path.write_text(
        "\n".join(json.dumps(item, ensure_ascii=False) for item in records),
        encoding="utf-8",
    )


def current_student(student_id: str, **overrides) -> dict:
    document = {
        "studentId": student_id,
        "currentSchool": "School of Programming",
        "currentModule": "Backend",
        "profileStatus": "approved",
        "tenthGrade": {"percentage": 72},
        "technicalSkills": [{"skillId": "S-PY", "selfRating": 3}],
    }
    document.update(overrides)
    return document


def test_student_loader_raises_on_invalid_json(tmp_path: Path):
    loader = StudentLoader(AdapterRegistry([CurrentProfileAdapter()]))
    path = tmp_path / "students.jsonl"
    path.write_text('{"studentId": "S-1"}\n{invalid', encoding="utf-8")

    with pytest.raises(StudentLoadError) as exc:
        loader.load(path)
    assert "invalid JSON" in str(exc.value)
    assert [student.student_id for student in exc.value.partial] == ["S-1"]


def test_student_loader_reports_unsupported_schema_and_invalid_records(tmp_path: Path):
    loader = StudentLoader(AdapterRegistry([CurrentProfileAdapter(), LegacyProfileAdapter()]))
    path = tmp_path / "students.jsonl"
    write_jsonl(
        path,
        [
            {"schema": "legacy", "payload": {"_id": "U-1", "studentProfile": {}}},
            {"schema": "v0", "payload": {"studentId": "S-2"}},
            {"schema": "current", "payload": {"name": "Missing Id"}},
            ["not", "an", "object"],
        ],
    )

    with pytest.raises(StudentLoadError) as exc:
        loader.load(path)
    error = exc.value
    assert "unsupported schema" in error.errors[0]
    assert error.errors[1].startswith("line 3:")
    assert "expected a JSON object" in error.errors[2]
    assert len(error.partial) == 1


def test_job_loader_invalid_json(tmp_path: Path):
    path = tmp_path / "job.json"
    path.write_text("{invalid", encoding="utf-8")

    with pytest.raises(ValueError):
        JobLoader().load(path)


def test_application_loader_rejects_incomplete_records(tmp_path: Path):
    path = tmp_path / "applications.jsonl"
    write_jsonl(path, [{"studentId": "S-1", "jobId": "J-1"}, {"studentId": "S-2"}])

    with pytest.raises(ValueError) as exc:
        ApplicationLoader().load(path)
    assert "line 2" in str(exc.value)


def test_pipeline_writes_report_and_audit_log(tmp_path: Path):
    students_path = tmp_path / "students.jsonl"
    job_path = tmp_path / "job.json"
    applications_path = tmp_path / "applications.jsonl"
    output_path = tmp_path / "out" / "report.json"
    audit_path = tmp_path / "audit" / "audit.jsonl"

    write_jsonl(
        students_path,
        [
            current_student("S-1"),
            current_student("S-2", tenthGrade={"percentage": 50}),
            current_student("S-3", currentModule="Foundations"),
            {
                "schema": "legacy",
                "payload": {
                    "_id": "U-4",
                    "studentProfile": {
                        "currentSchool": "School of Programming",
                        "currentModule": "Web",
                        "profileStatus": "approved",
                        "tenthGrade": {"percentage": 90},
                        "skills": [{"skill": {"_id": "S-PY", "name": "Python"}, "status": "approved"}],
                    },
                },
            },
            {"schema": "unknown", "payload": {}},
        ],
    )
    job_path.write_text(json.dumps(JOB), encoding="utf-8")
    write_jsonl(applications_path, [{"studentId": "S-1", "jobId": "J-1"}])

    container = create_container(
        settings={
            "school_modules": {
                "schools": {"School of Programming": ["Foundations", "Web", "Backend"]},
                "version": "2024-07",
            }
        }
    )
    pipeline = container.pipeline()

    report = pipeline.run(
        students_path=students_path,
        job_path=job_path,
        output_path=output_path,
        applications_path=applications_path,
        as_of="2024-07-20",
        audit_logger=AuditLogger(audit_path),
    )

    assert output_path.exists()
    rendered = json.loads(output_path.read_text(encoding="utf-8"))
    assert rendered == report

    metadata = report["metadata"]
    assert metadata["job_id"] == "J-1"
    assert metadata["student_count"] == 4
    assert metadata["settings_version"] == "2024-07"
    assert metadata["open_for_all"] is False
    assert len(metadata["errors"]) == 1

    assert report["summary"] == {
        "total": 4,
        "eligible": 2,
        "applied": 1,
        "not_applied": 1,
        "applied_ineligible": 0,
    }
    by_id = {record["student_id"]: record for record in report["students"]}
    assert by_id["S-1"]["match_percentage"] == 100
    assert by_id["S-1"]["has_applied"] is True
    assert by_id["U-4"]["match_percentage"] == 33
    assert by_id["S-2"]["failed_criterion"] == "tenth_grade"
    assert by_id["S-3"]["failed_criterion"] == "module"
    assert by_id["S-3"]["match_percentage"] is None

    audit_lines = audit_path.read_text(encoding="utf-8").strip().splitlines()
    assert len(audit_lines) == 4
    assert json.loads(audit_lines[0])["student_id"] == "S-1"


def test_pipeline_estimate_counts_eligible_students(tmp_path: Path):
    students_path = tmp_path / "students.jsonl"
    job_path = tmp_path / "job.json"
    write_jsonl(
        students_path,
        [current_student("S-1"), current_student("S-2", tenthGrade={"percentage": 40})],
    )
    job_path.write_text(json.dumps(JOB), encoding="utf-8")

    pipeline = create_container().pipeline()

    assert pipeline.estimate(students_path=students_path, job_path=job_path, as_of="2024-07-20") == 1


def test_report_open_for_all_follows_gating_policy(tmp_path: Path):
    students_path = tmp_path / "students.jsonl"
    job_path = tmp_path / "job.json"
    write_jsonl(students_path, [{"studentId": "S-1", "englishProficiency": {"speaking": "A2"}}])
    job_path.write_text(
        json.dumps({"_id": "J-2", "eligibility": {"englishSpeaking": "B2"}}), encoding="utf-8"
    )

    default = create_container().pipeline().run(
        students_path=students_path,
        job_path=job_path,
        output_path=tmp_path / "default.json",
    )
    gated = create_container(settings={"normalizer": {"gate_english": True}}).pipeline().run(
        students_path=students_path,
        job_path=job_path,
        output_path=tmp_path / "gated.json",
    )

    assert default["metadata"]["open_for_all"] is True
    assert default["summary"]["eligible"] == 1
    assert gated["metadata"]["open_for_all"] is False
    assert gated["summary"]["eligible"] == 0


def test_pipeline_load_students_keeps_valid_records(tmp_path: Path):
    path = tmp_path / "students.jsonl"
    path.write_text('{"studentId": "S-1"}\n{bad', encoding="utf-8")

    students, errors = create_container().pipeline().load_students(path)

    assert [student.student_id for student in students] == ["S-1"]
    assert len(errors) == 1
