from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field

from .common import DOCUMENT_CONFIG, BlankStr, Identifier, OptionalId

ProfileStatus = Literal["draft", "pending_approval", "approved", "needs_revision"]


class SkillRating(BaseModel):
    """Self-assessed skill entry (0 = not claimed, 4 = expert)."""

    skill_id: OptionalId = None
    skill_name: str | None = None
    # Malformed ratings resolve to ordinal 0 in the scale resolver.
    self_rating: int | float | str | None = 0

    model_config = DOCUMENT_CONFIG


class EnglishProficiency(BaseModel):
    """CEFR codes for spoken and written English."""

    speaking: BlankStr = ""
    writing: BlankStr = ""

    model_config = DOCUMENT_CONFIG


class GradeRecord(BaseModel):
    percentage: float | None = None
    board: str | None = None
    passing_year: int | None = None

    model_config = DOCUMENT_CONFIG


class HigherEducationEntry(BaseModel):
    degree: str | None = None
    institution: str | None = None
    specialization: str | None = None
    percentage: float | None = None
    is_completed: bool = False

    model_config = DOCUMENT_CONFIG


class StudentProfile(BaseModel):
    """Read-only student document consumed by the engine."""

    student_id: Identifier = Field(
        validation_alias=AliasChoices("student_id", "studentId", "_id", "id")
    )
    name: str | None = None
    technical_skills: list[SkillRating] = Field(default_factory=list)
    soft_skills: list[SkillRating] = Field(default_factory=list)
    office_skills: list[SkillRating] = Field(default_factory=list)
    english_proficiency: EnglishProficiency = Field(default_factory=EnglishProficiency)
    tenth_grade: GradeRecord = Field(default_factory=GradeRecord)
    twelfth_grade: GradeRecord = Field(default_factory=GradeRecord)
    higher_education: list[HigherEducationEntry] = Field(default_factory=list)
    current_school: BlankStr = ""
    current_module: BlankStr = ""
    campus: OptionalId = None
    gender: BlankStr = ""
    attendance_percentage: float | None = None
    months_at_institution: float | None = None
    date_of_joining: datetime | None = None
    profile_status: ProfileStatus = "draft"
    profile_approved_at: datetime | None = None
    certifications: list[str] = Field(default_factory=list)
    readiness_percentage: float | None = None

    model_config = DOCUMENT_CONFIG

    def all_skills(self) -> list[SkillRating]:
        return [*self.technical_skills, *self.soft_skills, *self.office_skills]

    def degrees(self) -> list[str]:
        return [
            entry.degree.strip()
            for entry in self.higher_education
            if entry.degree and entry.degree.strip()
        ]
