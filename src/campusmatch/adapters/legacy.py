"""Adapter for raw user documents of the placement application."""

from __future__ import annotations

from typing import Any

from ..schemas import StudentProfile
from ..schemas.common import optional_id


class LegacyProfileAdapter:
    """Flatten nested ``user.studentProfile`` documents into a StudentProfile.

    Handles the older document generations: soft skills stored as a
    ``{name: rating}`` mapping, POC-approved ``skills`` entries without a
    self-rating, English levels held only in the ``languages`` list, and the
    ``joiningDate`` / ``dateOfJoining`` split.
    """

    schema = "legacy"

    def parse_student(self, document: dict[str, Any]) -> dict[str, Any]:
        profile = document.get("studentProfile") or {}

        technical = [self._skill_entry(item) for item in profile.get("technicalSkills") or []]
        technical.extend(self._approved_legacy_skills(profile.get("skills") or [], technical))

        name = " ".join(
            part for part in (document.get("firstName"), document.get("lastName")) if part
        )

        student = StudentProfile(
            student_id=optional_id(document.get("_id", document.get("id"))) or "",
            name=name or None,
            technical_skills=technical,
            soft_skills=self._soft_skills(profile.get("softSkills")),
            office_skills=[self._skill_entry(item) for item in profile.get("officeSkills") or []],
            english_proficiency=self._english(profile),
            tenth_grade=profile.get("tenthGrade") or {},
            twelfth_grade=profile.get("twelfthGrade") or {},
            higher_education=profile.get("higherEducation") or [],
            current_school=profile.get("currentSchool"),
            current_module=profile.get("currentModule"),
            campus=document.get("campus"),
            gender=document.get("gender"),
            attendance_percentage=profile.get("attendancePercentage", profile.get("attendance")),
            months_at_institution=profile.get("monthsAtInstitution"),
            date_of_joining=profile.get("dateOfJoining") or profile.get("joiningDate"),
            profile_status=profile.get("profileStatus") or "draft",
            profile_approved_at=profile.get("approvedAt"),
            certifications=profile.get("certifications") or [],
            readiness_percentage=self._readiness(document, profile),
        )
        return student.model_dump(mode="python")

    @staticmethod
    def _skill_entry(item: dict[str, Any]) -> dict[str, Any]:
        return {
            "skill_id": optional_id(item.get("skillId")),
            "skill_name": item.get("skillName"),
            "self_rating": item.get("selfRating", 0),
        }

    def _soft_skills(self, raw: Any) -> list[dict[str, Any]]:
        if isinstance(raw, dict):
            return [
                {"skill_name": key, "self_rating": level}
                for key, level in raw.items()
                if key and isinstance(level, (int, float))
            ]
        return [self._skill_entry(item) for item in raw or [] if isinstance(item, dict)]

    @staticmethod
    def _approved_legacy_skills(
        entries: list[dict[str, Any]],
        rated: list[dict[str, Any]],
    ) -> list[dict[str, Any]]:
        known_ids = {entry["skill_id"] for entry in rated if entry.get("skill_id")}
        known_names = {
            (entry.get("skill_name") or "").casefold() for entry in rated if entry.get("skill_name")
        }
        approved: list[dict[str, Any]] = []
        for entry in entries:
            if entry.get("status") != "approved" or not entry.get("skill"):
                continue
            skill = entry["skill"]
            skill_id = optional_id(skill)
            skill_name = skill.get("name") if isinstance(skill, dict) else None
            if skill_id in known_ids or (skill_name and skill_name.casefold() in known_names):
                continue
            # An approved skill without a self-rating counts as beginner.
            rating = entry.get("selfRating") or 1
            approved.append({"skill_id": skill_id, "skill_name": skill_name, "self_rating": rating})
        return approved

    @staticmethod
    def _english(profile: dict[str, Any]) -> dict[str, str]:
        english = dict(profile.get("englishProficiency") or {})
        if english.get("speaking") and english.get("writing"):
            return english
        for entry in profile.get("languages") or []:
            if str(entry.get("language", "")).strip().casefold() == "english":
                if not english.get("speaking"):
                    english["speaking"] = entry.get("speaking") or ""
                if not english.get("writing"):
                    english["writing"] = entry.get("writing") or ""
                break
        return english

    @staticmethod
    def _readiness(document: dict[str, Any], profile: dict[str, Any]) -> float | None:
        readiness = document.get("jobReadiness") or profile.get("jobReadiness") or {}
        return document.get("readinessPercentage", readiness.get("readinessPercentage"))
