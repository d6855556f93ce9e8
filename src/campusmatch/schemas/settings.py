from __future__ import annotations

from typing import Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from .common import DOCUMENT_CONFIG, Identifier

ModuleKind = Literal["hierarchical", "tracks"]


class SchoolModules(BaseModel):
    """Module layout of one school.

    ``hierarchical`` modules form a linear progression (completing module *k*
    implies 0..k-1); ``tracks`` are mutually exclusive programs. An empty
    module list means the school has no predefined modules.
    """

    kind: ModuleKind = "hierarchical"
    modules: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def _accept_plain_list(cls, data: Any) -> Any:
        # A bare list is an ordered curriculum.
        if isinstance(data, (list, tuple)):
            return {"kind": "hierarchical", "modules": data}
        if isinstance(data, dict) and data.get("kind") == "track":
            return {**data, "kind": "tracks"}
        return data

    @field_validator("modules", mode="after")
    @classmethod
    def _strip_names(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(name.strip() for name in value if name and name.strip())

    def index_of(self, module: str | None) -> int | None:
        if not module:
            return None
        try:
            return self.modules.index(module.strip())
        except ValueError:
            return None


class SchoolModuleConfig(BaseModel):
    """Immutable settings snapshot mapping school names to module layouts."""

    schools: dict[str, SchoolModules] = Field(default_factory=dict)
    version: str | None = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    def lookup(self, school: str | None) -> SchoolModules | None:
        """Return the module layout for ``school`` (trimmed, case-insensitive)."""
        if not school:
            return None
        key = school.strip().casefold()
        for name, modules in self.schools.items():
            if name.strip().casefold() == key:
                return modules
        return None


class ApplicationRecord(BaseModel):
    """Existing application of a student to a job."""

    student_id: Identifier = Field(
        validation_alias=AliasChoices("student_id", "studentId", "student")
    )
    job_id: Identifier = Field(validation_alias=AliasChoices("job_id", "jobId", "job"))
    status: str = "applied"

    model_config = DOCUMENT_CONFIG
