"""Split a record's fields into mapped and excluded sets."""

from __future__ import annotations

from dataclasses import dataclass

from pg_mapper.core.exceptions import MissingDefaultError
from pg_mapper.mapping.schema import FieldSchema, RecordSchema


@dataclass(frozen=True)
class Partition:
    """Mapped and excluded fields, each in declaration order."""

    mapped: tuple[FieldSchema, ...]
    excluded: tuple[FieldSchema, ...]
    field_count: int

    @property
    def has_excluded(self) -> bool:
        return self.field_count != len(self.mapped)


def partition(schema: RecordSchema) -> Partition:
    """Partition ``schema.fields`` by classification.

    Mapped and flattened fields are mapped; ignored and collection fields
    are excluded and must be default-filled at construction time.

    Raises:
        MissingDefaultError: If an excluded field declares no default.
    """
    mapped = tuple(f for f in schema.fields if f.classification.is_mapped)
    excluded = tuple(f for f in schema.fields if not f.classification.is_mapped)

    missing = [f.name for f in excluded if not f.has_default]
    if missing:
        raise MissingDefaultError(schema.name, missing)
    return Partition(mapped=mapped, excluded=excluded, field_count=len(schema.fields))
