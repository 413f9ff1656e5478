"""The ``@postgres_mapper`` class decorator.

Usage::

    @postgres_mapper(table="users")
    @dataclass
    class User:
        id: int
        name: str
        secret: Annotated[str, Ignore] = ""

    User.from_row({"id": 1, "name": "a"})  # User(id=1, name='a', secret='')
    User.sql_fields()                       # ' id ,  name '

The class is reflected once, when the decorator runs. Any definition error
is raised there and the class is left unmodified.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from typing import Any, TypeVar

from pg_mapper.core.exceptions import UnsupportedRecordError
from pg_mapper.core.options import DEFAULT_OPTIONS, MapperOptions
from pg_mapper.mapping.attributes import PgMapper
from pg_mapper.mapping.builder import build_converter, compile_plan
from pg_mapper.mapping.plan import PLAN_ATTRIBUTE, MappingPlan, own_plan
from pg_mapper.mapping.schema import inspect_record

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=type)


def _owned(row: Any) -> Any:
    """Snapshot a keyed row (e.g. ``sqlite3.Row``) into a dict."""
    if isinstance(row, dict):
        return row
    return dict(row)


def _caller_namespace(depth: int) -> dict[str, Any] | None:
    """Locals of the scope that defines the record, for local type names."""
    frame = sys._getframe(depth + 1)
    if frame.f_code.co_name == "<module>":
        return None
    return dict(frame.f_locals)


def derive(
    cls: T,
    annotations: Iterable[object],
    *,
    options: MapperOptions | None = None,
    localns: dict[str, Any] | None = None,
) -> T:
    """Derive row conversion and SQL metadata for ``cls``.

    Args:
        cls: Record class (dataclass, Pydantic model, or plain class).
        annotations: Record-level annotations; one must declare the table.
        options: Generation options; defaults apply when omitted.
        localns: Extra names for resolving string annotations, e.g. the
            locals of a function that defines several related records.
            ``@postgres_mapper`` passes its caller's locals.

    Returns:
        ``cls`` itself, with ``from_row``, ``from_row_ref``,
        ``from_row_ref_prefixed``, ``sql_table``, ``sql_table_fields`` and
        ``sql_fields`` attached as classmethods. They are bound to ``cls``:
        a subclass must be decorated itself before they can be called on it.

    Raises:
        MapperDefinitionError: On any invalid declaration.
    """
    options = options or DEFAULT_OPTIONS
    schema = inspect_record(cls, annotations, options, localns=localns)
    plan = compile_plan(schema, options)
    convert = build_converter(plan, schema.kind)

    def check(klass: type) -> None:
        if klass is not cls:
            raise UnsupportedRecordError(
                klass.__name__,
                f"not decorated with @postgres_mapper (inherits the mapper of {cls.__name__})",
            )

    def from_row(klass: type, row: Any) -> Any:
        check(klass)
        return convert(_owned(row), "")

    def from_row_ref(klass: type, row: Any) -> Any:
        check(klass)
        return convert(row, "")

    def from_row_ref_prefixed(klass: type, row: Any, prefix: str) -> Any:
        check(klass)
        return convert(row, prefix)

    def sql_table(klass: type) -> str:
        check(klass)
        return plan.table_name

    def sql_table_fields(klass: type) -> str:
        check(klass)
        return plan.qualified_columns

    def sql_fields(klass: type) -> str:
        check(klass)
        return plan.bare_columns

    for fn in (
        from_row,
        from_row_ref,
        from_row_ref_prefixed,
        sql_table,
        sql_table_fields,
        sql_fields,
    ):
        fn.__qualname__ = f"{cls.__qualname__}.{fn.__name__}"
        setattr(cls, fn.__name__, classmethod(fn))
    setattr(cls, PLAN_ATTRIBUTE, plan)

    logger.debug(
        "Derived row mapper for %s: table=%s mapped=%d excluded=%d",
        schema.name,
        plan.table_name,
        len(plan.fields),
        len(schema.fields) - len(plan.fields),
    )
    return cls


def postgres_mapper(*args: Any, options: MapperOptions | None = None, **kwargs: Any) -> Any:
    """Class decorator form of :func:`derive`.

    Positional and keyword arguments form the record's pg_mapper annotation,
    e.g. ``@postgres_mapper(table="users")``.
    """
    attr = PgMapper(*args, **kwargs)

    def decorate(cls: T) -> T:
        return derive(cls, [attr], options=options, localns=_caller_namespace(1))

    return decorate


def mapping_plan(cls: type) -> MappingPlan:
    """Return the compiled plan of a derived record class.

    Raises:
        UnsupportedRecordError: If ``cls`` was not derived.
    """
    plan = own_plan(cls)
    if plan is None:
        raise UnsupportedRecordError(cls.__name__, "not decorated with @postgres_mapper")
    return plan
