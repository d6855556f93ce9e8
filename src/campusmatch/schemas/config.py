"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError

from .settings import SchoolModuleConfig, SchoolModules


class EngineConfig(BaseModel):
    gate_english: bool | None = None
    gate_required_skills: bool | None = None
    workers: int | None = Field(default=None, ge=1)


class ScoringConfig(BaseModel):
    skill_weight: float | None = Field(default=None, gt=0)
    required_skill_weight: float | None = Field(default=None, gt=0)
    english_weight: float | None = Field(default=None, gt=0)


class AppConfig(BaseModel):
    engine: EngineConfig = Field(default_factory=EngineConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    school_modules: dict[str, SchoolModules] = Field(default_factory=dict)
    settings_version: str | None = None

    def module_config(self) -> SchoolModuleConfig:
        return SchoolModuleConfig(schools=self.school_modules, version=self.settings_version)

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        engine = self.engine.model_dump(exclude_none=True)
        workers = engine.pop("workers", None)
        normalizer = {**engine, **self.scoring.model_dump(exclude_none=True)}
        if normalizer:
            settings["normalizer"] = normalizer
        if workers is not None:
            settings["aggregator"] = {"workers": workers}
        if self.school_modules or self.settings_version:
            settings["school_modules"] = self.module_config()
        return settings


def load_config(raw: Any) -> AppConfig:
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)
