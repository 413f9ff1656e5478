"""Row-to-record mapper for query engines.

Wraps a ``@postgres_mapper`` record in the ``map_one`` / ``map_many``
interface, optionally renaming columns first.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pg_mapper.core.exceptions import UnsupportedRecordError
from pg_mapper.mapping.protocol import provides_from_row

T = TypeVar("T")


class ModelMapper(Generic[T]):
    """Row-to-record mapper over a derived record class.

    Args:
        target_class: A class decorated with ``@postgres_mapper``.
        prefix: Column prefix passed to ``from_row_ref_prefixed``.
        aliases: Optional column-name to field-name mapping.

    Raises:
        UnsupportedRecordError: If ``target_class`` has no row mapper.
    """

    def __init__(
        self,
        target_class: type[T],
        prefix: str = "",
        aliases: dict[str, str] | None = None,
    ) -> None:
        if not provides_from_row(target_class):
            raise UnsupportedRecordError(
                getattr(target_class, "__name__", repr(target_class)),
                "not decorated with @postgres_mapper",
            )
        self._target_class = target_class
        self._prefix = prefix
        self._aliases = aliases

    def _apply_aliases(self, row: Any) -> Any:
        """Apply column aliases to the row."""
        if not self._aliases:
            return row
        result = {}
        for key in row.keys():
            mapped_key = self._aliases.get(key, key)
            result[mapped_key] = row[key]
        return result

    def map_one(self, row: Any) -> T:
        """Map a single row to a target_class instance."""
        row = self._apply_aliases(row)
        target: Any = self._target_class
        return target.from_row_ref_prefixed(row, self._prefix)  # type: ignore[no-any-return]

    def map_many(self, rows: list[Any]) -> list[T]:
        """Map all rows via map_one."""
        return [self.map_one(row) for row in rows]
