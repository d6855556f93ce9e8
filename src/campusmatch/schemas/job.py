from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    computed_field,
    field_validator,
    model_validator,
)

from .common import DOCUMENT_CONFIG, BlankStr, OptionalId, optional_id

ReadinessRequirement = Literal["no", "in_progress", "yes"]


class GradeRequirement(BaseModel):
    """Minimum percentage for a school-leaving grade."""

    required: bool = False
    min_percentage: float | None = None

    model_config = DOCUMENT_CONFIG


class HigherEducationRequirement(BaseModel):
    """Degree requirement; ``Any Graduate`` accepts every recorded degree."""

    required: bool = False
    accepted_degrees: list[str] = Field(default_factory=list)

    model_config = DOCUMENT_CONFIG


class JobEligibility(BaseModel):
    """Hard eligibility constraints attached to a job posting."""

    tenth_grade: GradeRequirement = Field(default_factory=GradeRequirement)
    twelfth_grade: GradeRequirement = Field(default_factory=GradeRequirement)
    higher_education: HigherEducationRequirement = Field(
        default_factory=HigherEducationRequirement
    )
    schools: list[str] = Field(default_factory=list)
    campuses: list[str] = Field(default_factory=list)
    min_module: str | None = None
    certifications: list[str] = Field(default_factory=list)
    english_writing: BlankStr = ""
    english_speaking: BlankStr = ""
    female_only: bool = False
    min_attendance: float | None = None
    min_months_at_institution: float | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "min_months_at_institution",
            "minMonthsAtInstitution",
            "minMonthsAtNavgurukul",
        ),
    )
    shortlist_deadline: datetime | None = None
    min_cgpa: float | None = None
    readiness_requirement: ReadinessRequirement = "no"

    model_config = DOCUMENT_CONFIG

    @field_validator("schools", "certifications", mode="before")
    @classmethod
    def _drop_blank_names(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [item.strip() for item in value if isinstance(item, str) and item.strip()]
        return value

    @field_validator("campuses", mode="before")
    @classmethod
    def _campus_ids(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [cid for cid in (optional_id(item) for item in value) if cid]
        return value

    @field_validator("readiness_requirement", mode="before")
    @classmethod
    def _readiness_default(cls, value: Any) -> Any:
        return value or "no"

    @property
    def module_requirement_active(self) -> bool:
        """Module filtering only applies when exactly one school is selected."""
        return bool(self.min_module and self.min_module.strip()) and len(self.schools) == 1

    def restrictions(self, *, gate_english: bool = False) -> list[str]:
        """Names of the constraints that currently restrict who may apply.

        The order matches the evaluation order of the hard criteria built by
        :class:`campusmatch.core.criteria.CriteriaNormalizer`.
        """
        active: list[str] = []
        if self.tenth_grade.required:
            active.append("tenth_grade")
        if self.twelfth_grade.required:
            active.append("twelfth_grade")
        if self.higher_education.required:
            active.append("higher_education")
        if self.min_cgpa:
            active.append("min_cgpa")
        if self.schools:
            active.append("school")
        if self.campuses:
            active.append("campus")
        if self.module_requirement_active:
            active.append("module")
        if self.female_only:
            active.append("gender")
        if self.min_attendance and self.min_attendance > 0:
            active.append("attendance")
        if self.min_months_at_institution and self.min_months_at_institution > 0:
            active.append("tenure")
        if self.certifications:
            active.append("certifications")
        if self.readiness_requirement != "no":
            active.append("readiness")
        if self.shortlist_deadline is not None:
            active.append("profile_approval")
        if gate_english:
            if self.english_speaking.strip():
                active.append("english_speaking_gate")
            if self.english_writing.strip():
                active.append("english_writing_gate")
        return active

    @computed_field  # type: ignore[prop-decorator]
    @property
    def open_for_all(self) -> bool:
        """Derived flag: no constraint restricts applicants under the default policy."""
        return not self.restrictions()


class RequiredSkill(BaseModel):
    """Skill level expected by a job; ``required`` entries may also gate."""

    skill_id: OptionalId = Field(
        default=None,
        validation_alias=AliasChoices("skill_id", "skillId", "skill"),
    )
    skill_name: str | None = None
    proficiency_level: int = Field(default=0, ge=0, le=4)
    required: bool = False

    model_config = DOCUMENT_CONFIG

    @model_validator(mode="before")
    @classmethod
    def _unpack_populated_skill(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("skill"), dict):
            data = dict(data)
            skill = data.pop("skill")
            data.setdefault("skillId", skill.get("_id", skill.get("id")))
            if not data.get("skillName") and not data.get("skill_name"):
                data["skillName"] = skill.get("name")
        return data

    @property
    def display_name(self) -> str:
        return self.skill_name or self.skill_id or "Unknown"


class JobPosting(BaseModel):
    """Eligibility-relevant view of a job document."""

    job_id: OptionalId = Field(
        default=None,
        validation_alias=AliasChoices("job_id", "jobId", "_id", "id"),
    )
    title: str | None = None
    eligibility: JobEligibility = Field(default_factory=JobEligibility)
    required_skills: list[RequiredSkill] = Field(default_factory=list)

    model_config = DOCUMENT_CONFIG

    def gated_skills(self) -> list[RequiredSkill]:
        return [skill for skill in self.required_skills if skill.required]

    def restrictions(
        self,
        *,
        gate_english: bool = False,
        gate_required_skills: bool = False,
    ) -> list[str]:
        active = self.eligibility.restrictions(gate_english=gate_english)
        if gate_required_skills:
            active.extend(
                f"skill_gate:{skill.skill_id or skill.display_name}"
                for skill in self.gated_skills()
            )
        return active

    def is_open_for_all(
        self,
        *,
        gate_english: bool = False,
        gate_required_skills: bool = False,
    ) -> bool:
        return not self.restrictions(
            gate_english=gate_english,
            gate_required_skills=gate_required_skills,
        )

    @property
    def open_for_all(self) -> bool:
        return self.eligibility.open_for_all
