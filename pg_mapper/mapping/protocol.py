"""Mapper protocols.

``FromRow`` is what ``@postgres_mapper`` attaches to a record class, and what
a flattened field's type must provide. ``Mapper`` is the object interface
query engines call with ``map_one`` / ``map_many``.
"""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

from pg_mapper.mapping.plan import PLAN_ATTRIBUTE, own_plan

T = TypeVar("T")


@runtime_checkable
class FromRow(Protocol):
    """Row conversion entry points and SQL metadata of a derived record."""

    @classmethod
    def from_row(cls, row: Any) -> Any:
        """Convert a row, taking it by value."""
        ...

    @classmethod
    def from_row_ref(cls, row: Any) -> Any:
        """Convert a row read in place."""
        ...

    @classmethod
    def from_row_ref_prefixed(cls, row: Any, prefix: str) -> Any:
        """Convert a row whose column names carry ``prefix``."""
        ...

    @classmethod
    def sql_table(cls) -> str:
        """Table name."""
        ...

    @classmethod
    def sql_table_fields(cls) -> str:
        """Comma-joined ``table.column`` list."""
        ...

    @classmethod
    def sql_fields(cls) -> str:
        """Comma-joined column list."""
        ...


class Mapper(Protocol[T]):
    """Base mapper protocol."""

    def map_one(self, row: Any) -> T:
        """Map a single row to a target object."""
        ...

    def map_many(self, rows: list[Any]) -> list[T]:
        """Map multiple rows to a list of target objects."""
        ...


def provides_from_row(cls: Any) -> bool:
    """Whether ``cls`` itself provides the ``FromRow`` entry points.

    A subclass that only inherits a derived record's entry points does not:
    they belong to the base class and refuse to run for the subclass.
    """
    if not isinstance(cls, type) or not isinstance(cls, FromRow):
        return False
    return own_plan(cls) is not None or getattr(cls, PLAN_ATTRIBUTE, None) is None
