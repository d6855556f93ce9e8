"""Pydantic schema definitions for jobs, students and settings snapshots."""

from __future__ import annotations

from .job import (
    GradeRequirement,
    HigherEducationRequirement,
    JobEligibility,
    JobPosting,
    RequiredSkill,
)
from .settings import ApplicationRecord, SchoolModuleConfig, SchoolModules
from .student import (
    EnglishProficiency,
    GradeRecord,
    HigherEducationEntry,
    SkillRating,
    StudentProfile,
)

__all__ = [
    "ApplicationRecord",
    "EnglishProficiency",
    "GradeRecord",
    "GradeRequirement",
    "HigherEducationEntry",
    "HigherEducationRequirement",
    "JobEligibility",
    "JobPosting",
    "RequiredSkill",
    "SchoolModuleConfig",
    "SchoolModules",
    "SkillRating",
    "StudentProfile",
]
