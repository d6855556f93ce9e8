"""Shared pydantic configuration for documents coming from the placement app."""

from __future__ import annotations

from typing import Annotated, Any, Optional

from pydantic import BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

# Documents arrive camelCased from the CRUD layer; tests and YAML use snake_case.
DOCUMENT_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
)


def blank_if_none(value: Any) -> Any:
    """Coerce a missing string field to the empty string."""
    if value is None:
        return ""
    return value


def optional_id(value: Any) -> Any:
    """Stringify identifier-like values (ObjectIds, ints) while keeping None."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, dict):
        inner = value.get("_id", value.get("id"))
        return None if inner is None else str(inner)
    return str(value)


BlankStr = Annotated[str, BeforeValidator(blank_if_none)]
OptionalId = Annotated[Optional[str], BeforeValidator(optional_id)]
Identifier = Annotated[str, BeforeValidator(optional_id)]
