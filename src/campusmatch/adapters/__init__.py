"""Student document adapters."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from .current import CurrentProfileAdapter
from .legacy import LegacyProfileAdapter


@runtime_checkable
class ProfileAdapter(Protocol):
    """Student document adapter contract.

    Implementations transform a raw student document of one schema generation
    into a dictionary that validates as :class:`campusmatch.schemas.StudentProfile`.
    """

    schema: str

    def parse_student(self, document: dict[str, Any]) -> dict[str, Any]:
        """Return a StudentProfile-compatible dictionary."""


__all__ = ["ProfileAdapter", "CurrentProfileAdapter", "LegacyProfileAdapter"]
