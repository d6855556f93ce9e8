"""School module requirement resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from ..schemas import SchoolModuleConfig

ModuleRequirementType = Literal["hierarchical", "track", "inapplicable"]


@dataclass(frozen=True, slots=True)
class ModuleResolution:
    """Outcome of checking a student's module against a job requirement."""

    type: ModuleRequirementType
    satisfied: bool
    student_position: int | None = None
    required_position: int | None = None


_INAPPLICABLE = ModuleResolution(type="inapplicable", satisfied=True)


def resolve_module_requirement(
    school: str | None,
    required_module: str | None,
    student_module: str | None,
    config: SchoolModuleConfig,
) -> ModuleResolution:
    """Decide whether ``student_module`` satisfies ``required_module`` at ``school``.

    Schools without configured modules, and requirements naming a module the
    school does not define, are inapplicable and therefore satisfied. For
    hierarchical schools a student whose module is unknown (or empty) fails.
    Track schools require an exact match.
    """
    if not required_module or not required_module.strip():
        return _INAPPLICABLE

    layout = config.lookup(school)
    if layout is None or not layout.modules:
        return _INAPPLICABLE

    required_position = layout.index_of(required_module)
    if required_position is None:
        return _INAPPLICABLE

    student_position = layout.index_of(student_module)

    if layout.kind == "tracks":
        return ModuleResolution(
            type="track",
            satisfied=student_position == required_position,
            student_position=student_position,
            required_position=required_position,
        )

    return ModuleResolution(
        type="hierarchical",
        satisfied=student_position is not None and student_position >= required_position,
        student_position=student_position,
        required_position=required_position,
    )
