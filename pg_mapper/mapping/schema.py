"""Record schema reflection.

Builds a RecordSchema from a record class: dataclasses, Pydantic models and
plain classes whose ``__init__`` parameters name the fields.
"""

from __future__ import annotations

import dataclasses
import inspect
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, get_args, get_origin, get_type_hints

from pydantic import BaseModel

from pg_mapper.core.enums import Classification, RecordKind
from pg_mapper.core.exceptions import UnsupportedRecordError
from pg_mapper.core.options import DEFAULT_OPTIONS, MapperOptions
from pg_mapper.mapping.attributes import Directive, parse_field_attrs, parse_table_attr
from pg_mapper.mapping.classifier import classify


@dataclass(frozen=True)
class FieldSchema:
    """One record field with its resolved classification."""

    name: str
    type: Any
    directives: tuple[Directive, ...]
    classification: Classification
    default_factory: Callable[[], Any] | None = None

    @property
    def has_default(self) -> bool:
        return self.default_factory is not None


@dataclass(frozen=True)
class RecordSchema:
    """A record class under mapping."""

    name: str
    table_name: str
    kind: RecordKind
    target_class: type
    fields: tuple[FieldSchema, ...]


def _constant(value: Any) -> Callable[[], Any]:
    return lambda: value


def record_kind(cls: Any) -> RecordKind:
    """Detect the record flavour of ``cls``.

    Raises:
        UnsupportedRecordError: For enums, unions and anything that is not a
            class.
    """
    name = getattr(cls, "__name__", repr(cls))
    if not isinstance(cls, type) or issubclass(cls, Enum):
        raise UnsupportedRecordError(name, "Enums or Unions can not be mapped")
    if issubclass(cls, BaseModel):
        return RecordKind.PYDANTIC
    if dataclasses.is_dataclass(cls):
        return RecordKind.DATACLASS
    return RecordKind.PLAIN


def _split_annotated(annotation: Any) -> tuple[Any, tuple[object, ...]]:
    """Split ``Annotated[T, *meta]`` into ``(T, meta)``."""
    if get_origin(annotation) is Annotated:
        base, *metadata = get_args(annotation)
        return base, tuple(metadata)
    return annotation, ()


def _type_hints(obj: Any, cls: type, localns: dict[str, Any] | None) -> dict[str, Any]:
    # Class body names first, then the defining scope, then module globals.
    names = {**(localns or {}), **vars(cls), cls.__name__: cls}
    try:
        return get_type_hints(obj, localns=names, include_extras=True)
    except (NameError, TypeError) as e:
        raise UnsupportedRecordError(cls.__name__, f"cannot resolve type hints: {e}") from e


def _pydantic_fields(
    cls: type[BaseModel],
    localns: dict[str, Any] | None,
) -> Iterable[tuple[str, Any, tuple[object, ...], Callable[[], Any] | None]]:
    # Pydantic resolves its own annotations when the model class is built.
    for name, info in cls.model_fields.items():
        factory = None
        if not info.is_required():
            factory = _pydantic_default(info)
        base, extras = _split_annotated(info.annotation)
        yield name, base, (*extras, *info.metadata), factory


def _pydantic_default(info: Any) -> Callable[[], Any]:
    return lambda: info.get_default(call_default_factory=True)


def _dataclass_fields(
    cls: type,
    localns: dict[str, Any] | None,
) -> Iterable[tuple[str, Any, tuple[object, ...], Callable[[], Any] | None]]:
    hints = _type_hints(cls, cls, localns)
    _reject_required_init_vars(cls, hints)
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        factory: Callable[[], Any] | None = None
        if f.default is not dataclasses.MISSING:
            factory = _constant(f.default)
        elif f.default_factory is not dataclasses.MISSING:
            factory = f.default_factory
        base, extras = _split_annotated(hints.get(f.name, Any))
        yield f.name, base, extras, factory


def _reject_required_init_vars(cls: type, hints: dict[str, Any]) -> None:
    """InitVars are ``__init__`` parameters but not fields, so no row can supply them."""
    params = inspect.signature(cls).parameters
    for name, hint in hints.items():
        base, _ = _split_annotated(hint)
        if not isinstance(base, dataclasses.InitVar) and base is not dataclasses.InitVar:
            continue
        param = params.get(name)
        if param is not None and param.default is inspect.Parameter.empty:
            raise UnsupportedRecordError(
                cls.__name__, f"InitVar '{name}' has no default and cannot be read from a row"
            )


def _plain_fields(
    cls: type,
    localns: dict[str, Any] | None,
) -> Iterable[tuple[str, Any, tuple[object, ...], Callable[[], Any] | None]]:
    if cls.__init__ is object.__init__:
        return
    try:
        sig = inspect.signature(cls.__init__)
    except (ValueError, TypeError) as e:
        raise UnsupportedRecordError(cls.__name__, f"cannot inspect __init__: {e}") from e
    hints = _type_hints(cls.__init__, cls, localns)
    for name, param in list(sig.parameters.items())[1:]:
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        if param.kind is inspect.Parameter.POSITIONAL_ONLY:
            raise UnsupportedRecordError(
                cls.__name__, f"positional-only parameter '{name}' cannot be set by name"
            )
        factory = None
        if param.default is not inspect.Parameter.empty:
            factory = _constant(param.default)
        base, extras = _split_annotated(hints.get(name, Any))
        yield name, base, extras, factory


_FIELD_READERS = {
    RecordKind.PYDANTIC: _pydantic_fields,
    RecordKind.DATACLASS: _dataclass_fields,
    RecordKind.PLAIN: _plain_fields,
}


def inspect_record(
    cls: Any,
    annotations: Iterable[object],
    options: MapperOptions = DEFAULT_OPTIONS,
    *,
    localns: dict[str, Any] | None = None,
) -> RecordSchema:
    """Reflect over ``cls`` and classify every field.

    Args:
        cls: The record class.
        annotations: Record-level annotations carrying the table declaration.
        options: Generation options.
        localns: Names of the scope defining ``cls``, used for string
            annotations that refer to other local classes.

    Returns:
        The record schema with fields in declaration order.
    """
    name = getattr(cls, "__name__", repr(cls))
    table_name = parse_table_attr(annotations, name)
    kind = record_kind(cls)

    fields = []
    for field_name, field_type, extras, factory in _FIELD_READERS[kind](cls, localns):
        directives = parse_field_attrs(extras)
        classification = classify(
            directives,
            strict=options.strict_directives,
            field=f"{name}.{field_name}",
        )
        fields.append(
            FieldSchema(
                name=field_name,
                type=field_type,
                directives=directives,
                classification=classification,
                default_factory=factory,
            )
        )

    return RecordSchema(
        name=name,
        table_name=table_name,
        kind=kind,
        target_class=cls,
        fields=tuple(fields),
    )
