"""Proficiency scale resolution.

Self-ratings (0-4) and CEFR language codes (A1-C2) are mapped onto plain
integer ordinals so that every comparison in the engine is ``int >= int``.
Ordinal 0 means "nothing claimed" on the student side and "no requirement"
on the job side. Unrecognised input always resolves to 0.
"""

from __future__ import annotations

from typing import Any, Iterable, Literal

Scale = Literal["rating", "cefr"]

MAX_RATING = 4

CEFR_LEVELS: dict[str, int] = {
    "A1": 1,
    "A2": 2,
    "B1": 3,
    "B2": 4,
    "C1": 5,
    "C2": 6,
}

RATING_LABELS: tuple[str, ...] = ("None", "Beginner", "Intermediate", "Advanced", "Expert")

_CEFR_CODES = {ordinal: code for code, ordinal in CEFR_LEVELS.items()}


def to_ordinal(value: Any, scale: Scale) -> int:
    if scale == "cefr":
        return _cefr_ordinal(value)
    if scale == "rating":
        return _rating_ordinal(value)
    return 0


def meets(student_ordinal: int, required_ordinal: int) -> bool:
    return required_ordinal == 0 or student_ordinal >= required_ordinal


def label_for(ordinal: int, scale: Scale) -> str:
    if scale == "cefr":
        return _CEFR_CODES.get(ordinal, "None")
    if 0 <= ordinal < len(RATING_LABELS):
        return RATING_LABELS[ordinal]
    return RATING_LABELS[0]


def _cefr_ordinal(value: Any) -> int:
    if not isinstance(value, str):
        return 0
    return CEFR_LEVELS.get(value.strip().upper(), 0)


def _rating_ordinal(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, str):
        text = value.strip()
        if not text.isdigit():
            return 0
        value = int(text)
    if isinstance(value, float):
        if not value.is_integer():
            return 0
        value = int(value)
    if not isinstance(value, int):
        return 0
    if 0 <= value <= MAX_RATING:
        return value
    return 0


class SkillLevelIndex:
    """Student skill ratings keyed by skill id and by lower-cased name.

    Technical, soft and office skills share one index; when a skill appears
    more than once the highest rating wins.
    """

    def __init__(self, skills: Iterable[Any]) -> None:
        self._by_id: dict[str, int] = {}
        self._by_name: dict[str, int] = {}
        for skill in skills:
            level = to_ordinal(getattr(skill, "self_rating", None), "rating")
            skill_id = getattr(skill, "skill_id", None)
            skill_name = (getattr(skill, "skill_name", None) or "").strip().casefold()
            if skill_id:
                self._by_id[skill_id] = max(level, self._by_id.get(skill_id, 0))
            if skill_name:
                self._by_name[skill_name] = max(level, self._by_name.get(skill_name, 0))

    def level_for(self, skill_id: str | None, skill_name: str | None = None) -> int:
        level = self._by_id.get(skill_id, 0) if skill_id else 0
        if level == 0 and skill_name:
            level = self._by_name.get(skill_name.strip().casefold(), 0)
        return level
