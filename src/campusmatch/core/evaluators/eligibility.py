"""Hard-criterion eligibility evaluation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

import pendulum

from ...schemas import StudentProfile
from ..criteria import (
    AcademicCriterion,
    AttendanceCriterion,
    CampusCriterion,
    CertificationCriterion,
    CgpaCriterion,
    CriteriaSet,
    EnglishGateCriterion,
    GenderCriterion,
    HardCriterion,
    HigherEducationCriterion,
    ModuleCriterion,
    ProfileApprovalCriterion,
    ReadinessCriterion,
    SchoolCriterion,
    SkillGateCriterion,
    TenureCriterion,
)
from ..modules import resolve_module_requirement
from ..proficiency import SkillLevelIndex, label_for, meets, to_ordinal

ANY_GRADUATE = "any graduate"


@dataclass(frozen=True, slots=True)
class CriterionCheck:
    """Result of one hard criterion for one student."""

    criterion: HardCriterion
    passed: bool
    student_value: Any
    message: str


@dataclass(frozen=True, slots=True)
class EvaluationContext:
    """Per-student inputs shared by every check of one evaluation."""

    criteria: CriteriaSet
    as_of: pendulum.DateTime
    skills: SkillLevelIndex


@dataclass(frozen=True, slots=True)
class EligibilityVerdict:
    """Eligibility outcome; ``failed_reason`` is the first failing criterion."""

    eligible: bool
    failed_reason: HardCriterion | None = None
    message: str | None = None
    checks: tuple[CriterionCheck, ...] = ()

    @property
    def failed_criterion(self) -> str | None:
        return self.failed_reason.name if self.failed_reason is not None else None


class EligibilityEvaluator:
    """Evaluate hard criteria in order and stop at the first failure."""

    method = "eligibility"

    def __init__(self, *, now_provider: Callable[[], pendulum.DateTime] | None = None) -> None:
        self._now_provider = now_provider or pendulum.now
        self._handlers: dict[type, Callable[..., CriterionCheck]] = {
            AcademicCriterion: self._check_academic,
            HigherEducationCriterion: self._check_higher_education,
            CgpaCriterion: self._check_cgpa,
            SchoolCriterion: self._check_school,
            CampusCriterion: self._check_campus,
            ModuleCriterion: self._check_module,
            GenderCriterion: self._check_gender,
            AttendanceCriterion: self._check_attendance,
            TenureCriterion: self._check_tenure,
            CertificationCriterion: self._check_certifications,
            ReadinessCriterion: self._check_readiness,
            ProfileApprovalCriterion: self._check_profile_approval,
            EnglishGateCriterion: self._check_english_gate,
            SkillGateCriterion: self._check_skill_gate,
        }

    def resolve_as_of(self, as_of: Any = None) -> pendulum.DateTime:
        """Normalize a reference instant; defaults to now."""
        if as_of is None:
            return self._now_provider()
        if isinstance(as_of, pendulum.DateTime):
            return as_of
        if isinstance(as_of, datetime):
            return pendulum.instance(as_of)
        try:
            parsed = pendulum.parse(str(as_of))
        except ValueError:
            return self._now_provider()
        if isinstance(parsed, pendulum.DateTime):
            return parsed
        return self._now_provider()

    def evaluate(
        self,
        student: StudentProfile,
        criteria: CriteriaSet,
        *,
        as_of: Any = None,
    ) -> EligibilityVerdict:
        context = EvaluationContext(
            criteria=criteria,
            as_of=self.resolve_as_of(as_of),
            skills=SkillLevelIndex(student.all_skills()),
        )
        checks: list[CriterionCheck] = []
        for criterion in criteria.hard:
            check = self._handlers[type(criterion)](criterion, student, context)
            checks.append(check)
            if not check.passed:
                return EligibilityVerdict(
                    eligible=False,
                    failed_reason=criterion,
                    message=check.message,
                    checks=tuple(checks),
                )
        return EligibilityVerdict(eligible=True, checks=tuple(checks))

    @staticmethod
    def _check_academic(
        criterion: AcademicCriterion,
        student: StudentProfile,
        context: EvaluationContext,
    ) -> CriterionCheck:
        record = getattr(student, criterion.name)
        percentage = record.percentage or 0.0
        minimum = criterion.min_percentage
        passed = percentage >= minimum
        if passed:
            message = f"{criterion.label}: {percentage:g}% (meets {minimum:g}% requirement)"
        else:
            message = f"{criterion.label}: {percentage:g}% (requires {minimum:g}%)"
        return CriterionCheck(criterion, passed, percentage, message)

    @staticmethod
    def _check_higher_education(
        criterion: HigherEducationCriterion,
        student: StudentProfile,
        context: EvaluationContext,
    ) -> CriterionCheck:
        degrees = student.degrees()
        accepted = criterion.accepted_degrees
        if not accepted:
            passed = bool(degrees)
        elif any(degree.casefold() == ANY_GRADUATE for degree in accepted) and degrees:
            passed = True
        else:
            passed = any(
                wanted.casefold() in degree.casefold()
                for wanted in accepted
                for degree in degrees
            )
        if passed:
            message = "Education: matches requirement"
        elif accepted:
            message = f"Education: requires {'/'.join(accepted)}"
        else:
            message = "Education: requires a higher education degree"
        return CriterionCheck(criterion, passed, ", ".join(degrees) or None, message)

    @staticmethod
    def _check_cgpa(
        criterion: CgpaCriterion,
        student: StudentProfile,
        context: EvaluationContext,
    ) -> CriterionCheck:
        tenth = student.tenth_grade.percentage or 0.0
        twelfth = student.twelfth_grade.percentage or 0.0
        average = (tenth + twelfth) / 2
        estimated = average / 10
        passed = estimated >= criterion.min_cgpa
        message = (
            "CGPA: meets requirement"
            if passed
            else f"CGPA: {estimated:.1f} (requires {criterion.min_cgpa:g})"
        )
        return CriterionCheck(criterion, passed, round(estimated, 1), message)

    @staticmethod
    def _check_school(
        criterion: SchoolCriterion,
        student: StudentProfile,
        context: EvaluationContext,
    ) -> CriterionCheck:
        school = student.current_school.strip()
        passed = school.casefold() in {name.casefold() for name in criterion.schools}
        message = (
            f"School: {school} (eligible)"
            if passed
            else f"School: requires {'/'.join(criterion.schools)}"
        )
        return CriterionCheck(criterion, passed, school or None, message)

    @staticmethod
    def _check_campus(
        criterion: CampusCriterion,
        student: StudentProfile,
        context: EvaluationContext,
    ) -> CriterionCheck:
        passed = student.campus is not None and student.campus in criterion.campuses
        message = "Campus: eligible" if passed else "Campus: not in eligible list"
        return CriterionCheck(criterion, passed, student.campus, message)

    @staticmethod
    def _check_module(
        criterion: ModuleCriterion,
        student: StudentProfile,
        context: EvaluationContext,
    ) -> CriterionCheck:
        resolution = resolve_module_requirement(
            criterion.school,
            criterion.required_module,
            student.current_module,
            context.criteria.module_config,
        )
        module = student.current_module.strip() or None
        if resolution.type == "inapplicable":
            message = "Module: no module requirement configured for this school"
        elif resolution.satisfied:
            message = f"Module: {module} (meets {criterion.required_module} requirement)"
        elif resolution.type == "track":
            message = f"Module: requires the {criterion.required_module} track"
        else:
            message = f"Module: requires {criterion.required_module} or higher"
        return CriterionCheck(criterion, resolution.satisfied, module, message)

    @staticmethod
    def _check_gender(
        criterion: GenderCriterion,
        student: StudentProfile,
        context: EvaluationContext,
    ) -> CriterionCheck:
        gender = student.gender.strip().lower()
        passed = gender == criterion.required_gender
        message = (
            "Gender: eligible (female-only job)"
            if passed
            else "Gender: this job is for female candidates only"
        )
        return CriterionCheck(criterion, passed, gender or None, message)

    @staticmethod
    def _check_attendance(
        criterion: AttendanceCriterion,
        student: StudentProfile,
        context: EvaluationContext,
    ) -> CriterionCheck:
        attendance = student.attendance_percentage or 0.0
        passed = attendance >= criterion.min_attendance
        if passed:
            message = f"Attendance: {attendance:g}% (meets {criterion.min_attendance:g}% requirement)"
        else:
            message = f"Attendance: {attendance:g}% (requires {criterion.min_attendance:g}%)"
        return CriterionCheck(criterion, passed, attendance, message)

    def _check_tenure(
        self,
        criterion: TenureCriterion,
        student: StudentProfile,
        context: EvaluationContext,
    ) -> CriterionCheck:
        months = self._months_at_institution(student, context.as_of)
        passed = months >= criterion.min_months
        if passed:
            message = f"Tenure: {months:g} months (meets {criterion.min_months:g} months requirement)"
        else:
            message = f"Tenure: {months:g} months (requires {criterion.min_months:g} months)"
        return CriterionCheck(criterion, passed, months, message)

    @staticmethod
    def _check_certifications(
        criterion: CertificationCriterion,
        student: StudentProfile,
        context: EvaluationContext,
    ) -> CriterionCheck:
        held = {name.strip() for name in student.certifications if name}
        missing = [name for name in criterion.certifications if name not in held]
        passed = not missing
        message = (
            "Certifications: all required certifications held"
            if passed
            else f"Certifications: missing {', '.join(missing)}"
        )
        return CriterionCheck(criterion, passed, sorted(held), message)

    @staticmethod
    def _check_readiness(
        criterion: ReadinessCriterion,
        student: StudentProfile,
        context: EvaluationContext,
    ) -> CriterionCheck:
        readiness = student.readiness_percentage or 0.0
        passed = readiness >= criterion.min_percentage
        message = (
            f"Job readiness: {readiness:g}%"
            if passed
            else f"Job readiness: {readiness:g}% (requires {criterion.min_percentage:g}%)"
        )
        return CriterionCheck(criterion, passed, readiness, message)

    @staticmethod
    def _check_profile_approval(
        criterion: ProfileApprovalCriterion,
        student: StudentProfile,
        context: EvaluationContext,
    ) -> CriterionCheck:
        deadline = pendulum.instance(criterion.deadline)
        approved_at = (
            pendulum.instance(student.profile_approved_at)
            if student.profile_approved_at is not None
            else None
        )
        passed = student.profile_status == "approved" and (
            approved_at is None or approved_at <= deadline
        )
        if passed:
            message = "Profile: approved before the shortlist deadline"
        elif student.profile_status != "approved":
            message = f"Profile: status is {student.profile_status}, approval required"
        else:
            message = f"Profile: approved after the shortlist deadline ({deadline.to_date_string()})"
        return CriterionCheck(criterion, passed, student.profile_status, message)

    @staticmethod
    def _check_english_gate(
        criterion: EnglishGateCriterion,
        student: StudentProfile,
        context: EvaluationContext,
    ) -> CriterionCheck:
        code = getattr(student.english_proficiency, criterion.skill)
        level = to_ordinal(code, "cefr")
        passed = meets(level, criterion.required_level)
        label = f"English {criterion.skill}"
        message = (
            f"{label}: {label_for(level, 'cefr')} (meets {criterion.required_code})"
            if passed
            else f"{label}: {label_for(level, 'cefr')} (requires {criterion.required_code})"
        )
        return CriterionCheck(criterion, passed, code or None, message)

    @staticmethod
    def _check_skill_gate(
        criterion: SkillGateCriterion,
        student: StudentProfile,
        context: EvaluationContext,
    ) -> CriterionCheck:
        level = context.skills.level_for(criterion.skill_id, criterion.skill_name)
        passed = meets(level, criterion.required_level)
        message = (
            f"{criterion.skill_name}: {label_for(level, 'rating')}"
            if passed
            else f"{criterion.skill_name}: requires {label_for(criterion.required_level, 'rating')}"
        )
        return CriterionCheck(criterion, passed, level, message)

    @staticmethod
    def _months_at_institution(student: StudentProfile, as_of: pendulum.DateTime) -> float:
        if student.months_at_institution is not None:
            return float(student.months_at_institution)
        if student.date_of_joining is None:
            return 0.0
        joined = pendulum.instance(student.date_of_joining)
        if joined > as_of:
            return 0.0
        return float(as_of.diff(joined).in_months())
