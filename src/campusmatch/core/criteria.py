"""Criteria normalization.

A job's eligibility block and required-skill list are flattened into an
ordered set of atomic criteria. Each criterion type is a frozen dataclass so
that downstream components dispatch on type instead of re-inspecting raw job
fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Union

from ..schemas import JobPosting, SchoolModuleConfig
from .proficiency import to_ordinal

READINESS_THRESHOLDS: dict[str, float] = {"yes": 100.0, "in_progress": 30.0}


@dataclass(frozen=True, slots=True)
class AcademicCriterion:
    name: Literal["tenth_grade", "twelfth_grade"]
    label: str
    min_percentage: float


@dataclass(frozen=True, slots=True)
class HigherEducationCriterion:
    accepted_degrees: tuple[str, ...]
    name: str = "higher_education"


@dataclass(frozen=True, slots=True)
class CgpaCriterion:
    min_cgpa: float
    name: str = "min_cgpa"


@dataclass(frozen=True, slots=True)
class SchoolCriterion:
    schools: tuple[str, ...]
    name: str = "school"


@dataclass(frozen=True, slots=True)
class CampusCriterion:
    campuses: tuple[str, ...]
    name: str = "campus"


@dataclass(frozen=True, slots=True)
class ModuleCriterion:
    school: str
    required_module: str
    name: str = "module"


@dataclass(frozen=True, slots=True)
class GenderCriterion:
    required_gender: str = "female"
    name: str = "gender"


@dataclass(frozen=True, slots=True)
class AttendanceCriterion:
    min_attendance: float
    name: str = "attendance"


@dataclass(frozen=True, slots=True)
class TenureCriterion:
    min_months: float
    name: str = "tenure"


@dataclass(frozen=True, slots=True)
class CertificationCriterion:
    certifications: tuple[str, ...]
    name: str = "certifications"


@dataclass(frozen=True, slots=True)
class ReadinessCriterion:
    requirement: str
    min_percentage: float
    name: str = "readiness"


@dataclass(frozen=True, slots=True)
class ProfileApprovalCriterion:
    deadline: datetime
    name: str = "profile_approval"


@dataclass(frozen=True, slots=True)
class EnglishGateCriterion:
    name: str
    skill: Literal["speaking", "writing"]
    required_code: str
    required_level: int


@dataclass(frozen=True, slots=True)
class SkillGateCriterion:
    name: str
    skill_id: str | None
    skill_name: str
    required_level: int


@dataclass(frozen=True, slots=True)
class SkillCriterion:
    name: str
    skill_id: str | None
    required_level: int
    required: bool
    weight: float = 1.0


@dataclass(frozen=True, slots=True)
class EnglishCriterion:
    name: str
    skill: Literal["speaking", "writing"]
    required_code: str
    required_level: int
    weight: float = 1.0


HardCriterion = Union[
    AcademicCriterion,
    HigherEducationCriterion,
    CgpaCriterion,
    SchoolCriterion,
    CampusCriterion,
    ModuleCriterion,
    GenderCriterion,
    AttendanceCriterion,
    TenureCriterion,
    CertificationCriterion,
    ReadinessCriterion,
    ProfileApprovalCriterion,
    EnglishGateCriterion,
    SkillGateCriterion,
]
SoftCriterion = Union[SkillCriterion, EnglishCriterion]


@dataclass(frozen=True, slots=True)
class CriteriaSet:
    """Ordered criteria for one job, bound to one settings snapshot."""

    job_id: str | None
    hard: tuple[HardCriterion, ...]
    soft: tuple[SoftCriterion, ...]
    module_config: SchoolModuleConfig = field(default_factory=SchoolModuleConfig)

    @property
    def open_for_all(self) -> bool:
        return not self.hard

    @property
    def hard_names(self) -> list[str]:
        return [criterion.name for criterion in self.hard]


@dataclass
class NormalizerConfig:
    """Gating and weighting policy applied while building criteria."""

    gate_english: bool = False
    gate_required_skills: bool = False
    skill_weight: float = 1.0
    required_skill_weight: float = 1.0
    english_weight: float = 1.0


class CriteriaNormalizer:
    """Flatten job eligibility and required skills into ordered criteria."""

    def __init__(self, *, config: NormalizerConfig | None = None) -> None:
        self._config = config or NormalizerConfig()

    @property
    def config(self) -> NormalizerConfig:
        return self._config

    def normalize(
        self,
        job: JobPosting,
        module_config: SchoolModuleConfig | None = None,
    ) -> CriteriaSet:
        return CriteriaSet(
            job_id=job.job_id,
            hard=tuple(self._hard_criteria(job)),
            soft=tuple(self._soft_criteria(job)),
            module_config=module_config or SchoolModuleConfig(),
        )

    def _hard_criteria(self, job: JobPosting) -> list[HardCriterion]:
        rules = job.eligibility
        criteria: list[HardCriterion] = []

        if rules.tenth_grade.required:
            criteria.append(
                AcademicCriterion("tenth_grade", "10th", rules.tenth_grade.min_percentage or 0.0)
            )
        if rules.twelfth_grade.required:
            criteria.append(
                AcademicCriterion("twelfth_grade", "12th", rules.twelfth_grade.min_percentage or 0.0)
            )
        if rules.higher_education.required:
            criteria.append(
                HigherEducationCriterion(
                    tuple(deg.strip() for deg in rules.higher_education.accepted_degrees if deg.strip())
                )
            )
        if rules.min_cgpa:
            criteria.append(CgpaCriterion(rules.min_cgpa))
        if rules.schools:
            criteria.append(SchoolCriterion(tuple(rules.schools)))
        if rules.campuses:
            criteria.append(CampusCriterion(tuple(rules.campuses)))
        if rules.module_requirement_active:
            criteria.append(ModuleCriterion(rules.schools[0], rules.min_module.strip()))
        if rules.female_only:
            criteria.append(GenderCriterion())
        if rules.min_attendance and rules.min_attendance > 0:
            criteria.append(AttendanceCriterion(rules.min_attendance))
        if rules.min_months_at_institution and rules.min_months_at_institution > 0:
            criteria.append(TenureCriterion(rules.min_months_at_institution))
        if rules.certifications:
            criteria.append(CertificationCriterion(tuple(rules.certifications)))
        if rules.readiness_requirement != "no":
            criteria.append(
                ReadinessCriterion(
                    rules.readiness_requirement,
                    READINESS_THRESHOLDS[rules.readiness_requirement],
                )
            )
        if rules.shortlist_deadline is not None:
            criteria.append(ProfileApprovalCriterion(rules.shortlist_deadline))

        if self._config.gate_english:
            for skill, code in (
                ("speaking", rules.english_speaking),
                ("writing", rules.english_writing),
            ):
                if code.strip():
                    criteria.append(
                        EnglishGateCriterion(
                            name=f"english_{skill}_gate",
                            skill=skill,
                            required_code=code.strip().upper(),
                            required_level=to_ordinal(code, "cefr"),
                        )
                    )

        if self._config.gate_required_skills:
            for skill in job.gated_skills():
                criteria.append(
                    SkillGateCriterion(
                        name=f"skill_gate:{skill.skill_id or skill.display_name}",
                        skill_id=skill.skill_id,
                        skill_name=skill.display_name,
                        required_level=skill.proficiency_level,
                    )
                )

        return criteria

    def _soft_criteria(self, job: JobPosting) -> list[SoftCriterion]:
        criteria: list[SoftCriterion] = [
            SkillCriterion(
                name=skill.display_name,
                skill_id=skill.skill_id,
                required_level=skill.proficiency_level,
                required=skill.required,
                weight=(
                    self._config.required_skill_weight
                    if skill.required
                    else self._config.skill_weight
                ),
            )
            for skill in job.required_skills
        ]
        rules = job.eligibility
        for skill, code in (
            ("speaking", rules.english_speaking),
            ("writing", rules.english_writing),
        ):
            if code.strip():
                criteria.append(
                    EnglishCriterion(
                        name=f"english_{skill}",
                        skill=skill,
                        required_code=code.strip().upper(),
                        required_level=to_ordinal(code, "cefr"),
                        weight=self._config.english_weight,
                    )
                )
        return criteria
