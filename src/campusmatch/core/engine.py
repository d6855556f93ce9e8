"""Eligibility engine facade shared by every call site."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from ..schemas import ApplicationRecord, JobPosting, SchoolModuleConfig, StudentProfile
from .aggregator import AggregateResult, BatchAggregator, StudentEvaluation
from .criteria import CriteriaNormalizer, CriteriaSet


class EligibilityEngine:
    """Single entry point for job authoring, the apply gate and the POC view.

    All three operations normalize the job once and go through the same
    :class:`BatchAggregator`, so a student judged eligible in one place is
    judged eligible everywhere for the same settings snapshot.
    """

    def __init__(
        self,
        *,
        normalizer: CriteriaNormalizer,
        aggregator: BatchAggregator,
        module_config: SchoolModuleConfig | None = None,
    ) -> None:
        self._normalizer = normalizer
        self._aggregator = aggregator
        self._module_config = module_config or SchoolModuleConfig()

    def criteria_for(
        self,
        job: JobPosting,
        config: SchoolModuleConfig | None = None,
    ) -> CriteriaSet:
        return self._normalizer.normalize(job, config or self._module_config)

    def estimate_eligible_count(
        self,
        job: JobPosting,
        students: Iterable[StudentProfile],
        config: SchoolModuleConfig | None = None,
        *,
        as_of: Any = None,
    ) -> int:
        """Live eligible count while a coordinator edits a draft job."""
        result = self._aggregator.aggregate(
            self.criteria_for(job, config),
            list(students),
            as_of=as_of,
        )
        return result.eligible

    def evaluate_for_student(
        self,
        job: JobPosting,
        student: StudentProfile,
        config: SchoolModuleConfig | None = None,
        *,
        applications: Iterable[ApplicationRecord] = (),
        as_of: Any = None,
    ) -> StudentEvaluation:
        """Application-submission gate for a single student."""
        result = self._aggregator.aggregate(
            self.criteria_for(job, config),
            [student],
            applications=applications,
            as_of=as_of,
        )
        return result.per_student[0]

    def list_eligible_students(
        self,
        job: JobPosting,
        students: Sequence[StudentProfile],
        config: SchoolModuleConfig | None = None,
        *,
        applications: Iterable[ApplicationRecord] = (),
        as_of: Any = None,
    ) -> AggregateResult:
        """POC dashboard view: counts plus per-student match breakdown."""
        return self._aggregator.aggregate(
            self.criteria_for(job, config),
            list(students),
            applications=applications,
            as_of=as_of,
        )
