"""Mapper generation options."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class MapperOptions(BaseModel):
    """Options applied while deriving a row mapper.

    Attributes:
        strict_types: Check column values against declared field types
            without coercion. When False, pydantic's lax conversions apply
            (e.g. ``"42"`` becomes ``42`` for an ``int`` field).
        strict_directives: Raise on unrecognized field directives instead of
            falling back to a plain mapped field.
    """

    model_config = ConfigDict(frozen=True)

    strict_types: bool = True
    strict_directives: bool = False


DEFAULT_OPTIONS = MapperOptions()
