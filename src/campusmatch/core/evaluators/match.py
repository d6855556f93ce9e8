"""Soft-criterion match scoring for eligible students."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable

from ...schemas import StudentProfile
from ..criteria import EnglishCriterion, SkillCriterion, SoftCriterion
from ..proficiency import SkillLevelIndex, label_for, meets, to_ordinal


@dataclass(frozen=True, slots=True)
class MatchDetail:
    """Per-criterion breakdown row."""

    criterion_name: str
    kind: str
    required_level: int
    student_level: int
    required_label: str
    student_label: str
    matched: bool
    credit: float
    weight: float
    required: bool = False


@dataclass(frozen=True, slots=True)
class MatchResult:
    overall_percentage: int
    details: tuple[MatchDetail, ...]
    summary: tuple[str, ...] = field(default_factory=tuple)


@dataclass
class MatchScorerConfig:
    """Summary thresholds for the match scorer."""

    excellent_threshold: int = 80
    good_threshold: int = 60
    max_listed_gaps: int = 3


class MatchScorer:
    """Weighted mean of partial credits over criteria the job actually requires.

    A criterion with required level 0 earns full credit and is left out of the
    denominator; with no such criteria the overall percentage is 100.
    """

    method = "match"

    def __init__(self, *, config: MatchScorerConfig | None = None) -> None:
        self._config = config or MatchScorerConfig()

    def score(self, student: StudentProfile, criteria: Iterable[SoftCriterion]) -> MatchResult:
        index = SkillLevelIndex(student.all_skills())
        details = tuple(self._detail(criterion, student, index) for criterion in criteria)
        overall = self.overall_percentage(details)
        return MatchResult(
            overall_percentage=overall,
            details=details,
            summary=tuple(self._summary(details, overall)),
        )

    @staticmethod
    def partial_credit(student_level: int, required_level: int) -> float:
        if required_level <= 0:
            return 1.0
        return min(student_level / required_level, 1.0)

    @staticmethod
    def overall_percentage(details: Iterable[MatchDetail]) -> int:
        scored = [detail for detail in details if detail.required_level > 0]
        total_weight = sum(detail.weight for detail in scored)
        if not scored or total_weight <= 0:
            return 100
        mean = sum(detail.credit * detail.weight for detail in scored) / total_weight
        # Half-up rounding.
        return int(math.floor(100 * mean + 0.5))

    def _detail(
        self,
        criterion: SoftCriterion,
        student: StudentProfile,
        index: SkillLevelIndex,
    ) -> MatchDetail:
        if isinstance(criterion, EnglishCriterion):
            student_level = to_ordinal(getattr(student.english_proficiency, criterion.skill), "cefr")
            scale = "cefr"
            kind = "english"
            required = False
        else:
            student_level = index.level_for(criterion.skill_id, criterion.name)
            scale = "rating"
            kind = "skill"
            required = criterion.required
        return MatchDetail(
            criterion_name=criterion.name,
            kind=kind,
            required_level=criterion.required_level,
            student_level=student_level,
            required_label=label_for(criterion.required_level, scale),
            student_label=label_for(student_level, scale),
            matched=meets(student_level, criterion.required_level),
            credit=self.partial_credit(student_level, criterion.required_level),
            weight=criterion.weight,
            required=required,
        )

    def _summary(self, details: tuple[MatchDetail, ...], overall: int) -> list[str]:
        messages: list[str] = []
        if overall >= self._config.excellent_threshold:
            messages.append("Excellent match")
        elif overall >= self._config.good_threshold:
            messages.append("Good match")
        else:
            messages.append("Some requirements not met")

        skills = [detail for detail in details if detail.kind == "skill" and detail.required_level > 0]
        gaps = [detail for detail in skills if not detail.matched]
        if skills and not gaps:
            messages.append(f"All {len(skills)} required skills matched")
        elif gaps:
            listed = ", ".join(
                f"{detail.criterion_name} (need {detail.required_label})"
                for detail in gaps[: self._config.max_listed_gaps]
            )
            suffix = "..." if len(gaps) > self._config.max_listed_gaps else ""
            noun = "skill needs" if len(gaps) == 1 else "skills need"
            messages.append(f"{len(gaps)} {noun} improvement: {listed}{suffix}")

        for detail in details:
            if detail.kind == "english" and not detail.matched:
                messages.append(
                    f"{detail.criterion_name.replace('_', ' ').capitalize()}: "
                    f"{detail.student_label} (job expects {detail.required_label})"
                )
        return messages
