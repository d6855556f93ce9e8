"""Eligibility report assembly and execution."""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, List

import pendulum
import structlog
from pydantic import ValidationError

from . import __version__
from .adapters import ProfileAdapter
from .core import AggregateResult, EligibilityEngine, StudentEvaluation
from .schemas import ApplicationRecord, JobPosting, SchoolModuleConfig, StudentProfile


class AdapterRegistry:
    """Registry mapping document schemas to profile adapters."""

    def __init__(self, adapters: Iterable[ProfileAdapter]):
        self._adapters = {adapter.schema: adapter for adapter in adapters}

    def get(self, schema: str) -> ProfileAdapter:
        try:
            return self._adapters[schema]
        except KeyError as exc:
            raise KeyError(f"Unsupported student schema: {schema!r}") from exc

    def schemas(self) -> List[str]:
        return list(self._adapters.keys())


class StudentLoadError(ValueError):
    """Raised when student loading encounters invalid records."""

    def __init__(self, errors: list[str], partial: list[StudentProfile]):
        super().__init__("Student loading failed")
        self.errors = errors
        self.partial = partial

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Student loading failed: {self.errors}"


class StudentLoader:
    """Load student profiles from JSON lines through adapters.

    Each line is either a bare profile (``current`` schema) or an envelope
    ``{"schema": ..., "payload": {...}}``.
    """

    default_schema = "current"

    def __init__(self, registry: AdapterRegistry):
        self._registry = registry

    def load(self, path: Path) -> list[StudentProfile]:
        students: list[StudentProfile] = []
        errors: list[str] = []
        with path.open("r", encoding="utf-8") as handle:
            for idx, line in enumerate(handle, start=1):
                raw = line.strip()
                if not raw:
                    continue
                try:
                    record = json.loads(raw)
                except json.JSONDecodeError as exc:
                    errors.append(f"line {idx}: invalid JSON ({exc})")
                    continue
                if not isinstance(record, dict):
                    errors.append(f"line {idx}: expected a JSON object")
                    continue
                schema = record.get("schema", self.default_schema)
                try:
                    adapter = self._registry.get(schema)
                except KeyError:
                    errors.append(f"line {idx}: unsupported schema '{schema}'")
                    continue
                payload = record.get("payload", record)
                try:
                    student = StudentProfile.model_validate(adapter.parse_student(payload))
                except ValidationError as exc:
                    errors.append(f"line {idx}: {exc}")
                    continue
                students.append(student)
        if errors:
            raise StudentLoadError(errors, students)
        return students


class JobLoader:
    """Load a job document."""

    def load(self, path: Path) -> JobPosting:
        with path.open("r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid job JSON: {exc}") from exc
        return JobPosting.model_validate(data)


class ApplicationLoader:
    """Load application records from JSON lines."""

    def load(self, path: Path) -> list[ApplicationRecord]:
        records: list[ApplicationRecord] = []
        with path.open("r", encoding="utf-8") as handle:
            for idx, line in enumerate(handle, start=1):
                raw = line.strip()
                if not raw:
                    continue
                try:
                    records.append(ApplicationRecord.model_validate_json(raw))
                except ValidationError as exc:
                    raise ValueError(f"Invalid application record on line {idx}: {exc}") from exc
        return records


class OutputWriter:
    """Persist eligibility reports."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2, default=_json_default),
            encoding="utf-8",
        )


class EligibilityReportPipeline:
    """Load inputs from files, run the engine, write the report."""

    def __init__(
        self,
        *,
        engine: EligibilityEngine,
        registry: AdapterRegistry,
        student_loader: StudentLoader | None = None,
        job_loader: JobLoader | None = None,
        application_loader: ApplicationLoader | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        self._engine = engine
        self._registry = registry
        self._students = student_loader or StudentLoader(registry)
        self._jobs = job_loader or JobLoader()
        self._applications = application_loader or ApplicationLoader()
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    def run(
        self,
        *,
        students_path: Path,
        job_path: Path,
        output_path: Path,
        applications_path: Path | None = None,
        module_config: SchoolModuleConfig | None = None,
        as_of: str | None = None,
        audit_logger: "AuditLogger | None" = None,
    ) -> dict[str, Any]:
        job = self._jobs.load(job_path)
        with structlog.contextvars.bound_contextvars(job_id=job.job_id):
            students, load_errors = self.load_students(students_path)
            applications = (
                self._applications.load(applications_path) if applications_path else []
            )

            result = self._engine.list_eligible_students(
                job,
                students,
                module_config,
                applications=applications,
                as_of=as_of,
            )
            if audit_logger:
                for record in result.per_student:
                    audit_logger.append(
                        {
                            "job_id": job.job_id,
                            "student_id": record.student_id,
                            "eligible": record.eligible,
                            "failed_criterion": record.failed_criterion,
                            "match_percentage": record.match_percentage,
                            "has_applied": record.has_applied,
                        }
                    )

            criteria = self._engine.criteria_for(job, module_config)
            report = {
                "metadata": {
                    "job_id": job.job_id,
                    "student_count": len(students),
                    "open_for_all": criteria.open_for_all,
                    "settings_version": criteria.module_config.version,
                    "errors": load_errors,
                    "timestamp": pendulum.now().to_iso8601_string(),
                    "app_version": __version__,
                },
                "summary": summarize(result),
                "students": [serialize_evaluation(record) for record in result.per_student],
            }
            self._logger.info("eligibility.report", **report["summary"])
        self._writer.write(output_path, report)
        return report

    def estimate(
        self,
        *,
        students_path: Path,
        job_path: Path,
        module_config: SchoolModuleConfig | None = None,
        as_of: str | None = None,
    ) -> int:
        job = self._jobs.load(job_path)
        students, _ = self.load_students(students_path)
        return self._engine.estimate_eligible_count(job, students, module_config, as_of=as_of)

    def load_students(self, path: Path) -> tuple[list[StudentProfile], list[str]]:
        """Load students, keeping the valid ones when some lines fail."""
        try:
            return self._students.load(path), []
        except StudentLoadError as exc:
            self._logger.warning("students.partial_load", errors=exc.errors)
            return exc.partial, list(exc.errors)


def summarize(result: AggregateResult) -> dict[str, int]:
    return {
        "total": result.total,
        "eligible": result.eligible,
        "applied": result.applied,
        "not_applied": result.not_applied,
        "applied_ineligible": result.applied_ineligible,
    }


def serialize_evaluation(record: StudentEvaluation) -> dict[str, Any]:
    payload = asdict(record)
    payload["failed_criterion"] = record.failed_criterion
    return json.loads(json.dumps(payload, default=_json_default, ensure_ascii=False))


def _json_default(value):  # type: ignore[override]
    if isinstance(value, pendulum.DateTime):
        return value.to_iso8601_string()
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class AuditLogger:
    """Append-only audit logger writing JSON lines."""

    def __init__(self, path: Path):
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, record: dict) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=False))
            handle.write("\n")
