"""pg_mapper annotation parsing.

Field annotations are carried as ``typing.Annotated`` metadata::

    secret: Annotated[str, PgMapper("ignore")] = ""

Record annotations are the arguments of the ``@postgres_mapper`` decorator.
Only ``PgMapper`` markers are read; any other metadata is left alone.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, NamedTuple

from pg_mapper.core.exceptions import (
    InvalidAttributeError,
    MissingTableError,
    UnknownContainerAttributeError,
)

TABLE_KEYWORD = "table"


class PgMapper:
    """Annotation marker holding pg_mapper arguments.

    Positional strings are bare keywords (``PgMapper("ignore")``), keyword
    arguments are key/value pairs (``PgMapper(table="users")``).
    """

    __slots__ = ("args", "kwargs")

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self.args = args
        self.kwargs = tuple(kwargs.items())

    def __repr__(self) -> str:
        parts = [repr(arg) for arg in self.args]
        parts.extend(f"{key}={value!r}" for key, value in self.kwargs)
        return f"PgMapper({', '.join(parts)})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PgMapper):
            return NotImplemented
        return self.args == other.args and self.kwargs == other.kwargs

    def __hash__(self) -> int:
        return hash((PgMapper, self.args, tuple(key for key, _ in self.kwargs)))


Ignore = PgMapper("ignore")
Flatten = PgMapper("flatten")
Collection = PgMapper("collection")


class Directive(NamedTuple):
    """One parsed pg_mapper argument.

    ``keyword`` is None for a bare literal such as ``PgMapper(1)``.
    """

    keyword: str | None
    value: Any = None

    def describe(self) -> str:
        if self.keyword is None:
            return repr(self.value)
        if self.value is None:
            return f"'{self.keyword}'"
        return f"'{self.keyword}={self.value!r}'"


def _mapper_attrs(annotations: Iterable[object]) -> list[PgMapper]:
    """Select pg_mapper markers from an annotation list."""
    attrs: list[PgMapper] = []
    for annotation in annotations:
        if annotation is PgMapper:
            raise InvalidAttributeError(
                'PgMapper must be called with arguments: declare table name: '
                '@postgres_mapper(table="foo") or PgMapper("ignore")'
            )
        if isinstance(annotation, PgMapper):
            attrs.append(annotation)
    return attrs


def _directives(attr: PgMapper) -> list[Directive]:
    directives = [
        Directive(arg) if isinstance(arg, str) else Directive(None, arg) for arg in attr.args
    ]
    directives.extend(Directive(key, value) for key, value in attr.kwargs)
    return directives


def parse_field_attrs(annotations: Iterable[object]) -> tuple[Directive, ...]:
    """Collect the directives of every pg_mapper marker on a field."""
    return tuple(
        directive for attr in _mapper_attrs(annotations) for directive in _directives(attr)
    )


def parse_table_attr(annotations: Iterable[object], record: str) -> str:
    """Parse the record-level ``table="..."`` declaration.

    Args:
        annotations: Record-level annotations.
        record: Record name used in diagnostics.

    Returns:
        The declared table name. When several markers declare one, the last
        wins.

    Raises:
        MissingTableError: If no table is declared.
        InvalidAttributeError: If the table is not a string, or a bare
            literal is given.
        UnknownContainerAttributeError: For any other keyword.
    """
    table_name: str | None = None

    for directive in parse_field_attrs(annotations):
        if directive.keyword == TABLE_KEYWORD:
            if not isinstance(directive.value, str):
                raise InvalidAttributeError(
                    f"expected pg_mapper {TABLE_KEYWORD!r} attribute to be a string "
                    f"on {record}, got {directive.value!r}"
                )
            table_name = directive.value
        elif directive.keyword is not None:
            raise UnknownContainerAttributeError(record, directive.keyword)
        else:
            raise InvalidAttributeError(
                f"unexpected literal {directive.value!r} in pg_mapper container "
                f"attribute on {record}"
            )

    if table_name is None:
        raise MissingTableError(record)
    return table_name
