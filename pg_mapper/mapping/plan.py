"""Row mapping plan data classes.

Frozen dataclasses representing a compiled mapping plan. Built once per
record class by the builder and read by the generated converter.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from pg_mapper.core.enums import Classification

# (row, prefix) -> field value
Accessor = Callable[[Any, str], Any]


@dataclass(frozen=True)
class FieldPlan:
    """Mapping plan for one mapped or flattened field."""

    name: str
    classification: Classification
    access: Accessor


@dataclass(frozen=True)
class MappingPlan:
    """Compiled row mapping plan for a record class."""

    target_class: type
    table_name: str
    fields: tuple[FieldPlan, ...]
    qualified_columns: str
    bare_columns: str
    has_excluded: bool = False
    defaults: tuple[tuple[str, Callable[[], Any]], ...] = field(default_factory=tuple)

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

PLAN_ATTRIBUTE = "__row_mapper__"


def own_plan(cls: Any) -> MappingPlan | None:
    """Return the plan derived for ``cls`` itself, never one inherited from a base."""
    if not isinstance(cls, type):
        return None
    return cls.__dict__.get(PLAN_ATTRIBUTE)
