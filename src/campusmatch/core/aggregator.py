"""Batch evaluation over a student population."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

import pendulum
import structlog

from ..schemas import ApplicationRecord, StudentProfile
from .criteria import CriteriaSet, HardCriterion
from .evaluators.eligibility import EligibilityEvaluator
from .evaluators.match import MatchDetail, MatchScorer


@dataclass(frozen=True, slots=True)
class StudentEvaluation:
    """Current eligibility and, for eligible students only, the match score."""

    student_id: str
    eligible: bool
    failed_reason: HardCriterion | None = None
    message: str | None = None
    match_percentage: int | None = None
    details: tuple[MatchDetail, ...] | None = None
    summary: tuple[str, ...] = ()
    has_applied: bool = False
    application_status: str | None = None

    @property
    def failed_criterion(self) -> str | None:
        return self.failed_reason.name if self.failed_reason is not None else None


@dataclass(frozen=True, slots=True)
class AggregateResult:
    job_id: str | None
    total: int
    eligible: int
    applied: int
    not_applied: int
    applied_ineligible: int
    per_student: tuple[StudentEvaluation, ...] = field(default_factory=tuple)

    def eligible_students(self) -> list[StudentEvaluation]:
        return [record for record in self.per_student if record.eligible]


@dataclass
class AggregatorConfig:
    """Thread fan-out for large populations; 1 keeps evaluation in-line."""

    workers: int = 1


class BatchAggregator:
    """Run eligibility and scoring for every student of a population."""

    def __init__(
        self,
        *,
        evaluator: EligibilityEvaluator,
        scorer: MatchScorer,
        config: AggregatorConfig | None = None,
    ) -> None:
        self._evaluator = evaluator
        self._scorer = scorer
        self._config = config or AggregatorConfig()
        self._logger = structlog.get_logger(__name__)

    def evaluate_student(
        self,
        criteria: CriteriaSet,
        student: StudentProfile,
        *,
        as_of: pendulum.DateTime,
        application_status: str | None = None,
    ) -> StudentEvaluation:
        verdict = self._evaluator.evaluate(student, criteria, as_of=as_of)
        has_applied = application_status is not None
        if not verdict.eligible:
            self._logger.debug(
                "eligibility.rejected",
                job_id=criteria.job_id,
                student_id=student.student_id,
                criterion=verdict.failed_criterion,
            )
            return StudentEvaluation(
                student_id=student.student_id,
                eligible=False,
                failed_reason=verdict.failed_reason,
                message=verdict.message,
                has_applied=has_applied,
                application_status=application_status,
            )

        match = self._scorer.score(student, criteria.soft)
        return StudentEvaluation(
            student_id=student.student_id,
            eligible=True,
            match_percentage=match.overall_percentage,
            details=match.details,
            summary=match.summary,
            has_applied=has_applied,
            application_status=application_status,
        )

    def aggregate(
        self,
        criteria: CriteriaSet,
        students: Sequence[StudentProfile],
        *,
        applications: Iterable[ApplicationRecord] = (),
        as_of: Any = None,
    ) -> AggregateResult:
        reference = self._evaluator.resolve_as_of(as_of)
        statuses = self._application_index(criteria.job_id, applications)

        def run(student: StudentProfile) -> StudentEvaluation:
            return self.evaluate_student(
                criteria,
                student,
                as_of=reference,
                application_status=statuses.get(student.student_id),
            )

        if self._config.workers > 1 and len(students) > 1:
            with ThreadPoolExecutor(max_workers=self._config.workers) as pool:
                records = tuple(pool.map(run, students))
        else:
            records = tuple(run(student) for student in students)

        eligible = sum(1 for record in records if record.eligible)
        applied = sum(1 for record in records if record.eligible and record.has_applied)
        applied_ineligible = sum(
            1 for record in records if not record.eligible and record.has_applied
        )
        result = AggregateResult(
            job_id=criteria.job_id,
            total=len(records),
            eligible=eligible,
            applied=applied,
            not_applied=eligible - applied,
            applied_ineligible=applied_ineligible,
            per_student=records,
        )
        self._logger.info(
            "eligibility.batch",
            job_id=criteria.job_id,
            total=result.total,
            eligible=result.eligible,
            applied=result.applied,
            not_applied=result.not_applied,
            applied_ineligible=result.applied_ineligible,
            settings_version=criteria.module_config.version,
        )
        return result

    @staticmethod
    def _application_index(
        job_id: str | None,
        applications: Iterable[ApplicationRecord],
    ) -> dict[str, str]:
        if job_id is None:
            return {}
        return {
            record.student_id: record.status
            for record in applications
            if record.job_id == job_id
        }
