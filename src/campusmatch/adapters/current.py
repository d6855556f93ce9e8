"""Adapter for student documents already in the engine's flat shape."""

from __future__ import annotations

from typing import Any

from ..schemas import StudentProfile


class CurrentProfileAdapter:
    """Validate flat (snake_case or camelCase) student documents."""

    schema = "current"

    def parse_student(self, document: dict[str, Any]) -> dict[str, Any]:
        profile = StudentProfile.model_validate(document)
        return profile.model_dump(mode="python")
