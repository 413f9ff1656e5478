"""Row mapping generator.

Compiles a RecordSchema into a MappingPlan (one accessor per mapped field
plus the SQL column strings) and builds the converter shared by the
``from_row*`` entry points.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from pydantic import AliasChoices, ConfigDict, TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError

from pg_mapper.core.enums import Classification, RecordKind
from pg_mapper.core.exceptions import (
    ColumnNotFoundError,
    ColumnTypeError,
    FlattenTargetError,
    RecordConstructionError,
    UnsupportedRecordError,
)
from pg_mapper.core.options import DEFAULT_OPTIONS, MapperOptions
from pg_mapper.mapping.partition import partition
from pg_mapper.mapping.plan import Accessor, FieldPlan, MappingPlan
from pg_mapper.mapping.protocol import provides_from_row
from pg_mapper.mapping.schema import FieldSchema, RecordSchema

Converter = Callable[[Any, str], Any]


def qualified_columns(table_name: str, names: Sequence[str]) -> str:
    """Render ``" table.name "`` per field, comma-joined."""
    return ", ".join(f" {table_name}.{name} " for name in names)


def bare_columns(names: Sequence[str]) -> str:
    """Render ``" name "`` per field, comma-joined."""
    return ", ".join(f" {name} " for name in names)


def _type_adapter(field_type: Any) -> TypeAdapter[Any] | None:
    """Build a validator for a column's declared type, None for ``Any``."""
    if field_type is Any:
        return None
    try:
        return TypeAdapter(field_type)
    except PydanticSchemaGenerationError:
        # Unknown classes fall back to an isinstance check
        return TypeAdapter(field_type, config=ConfigDict(arbitrary_types_allowed=True))


def _error_detail(error: ValidationError) -> str:
    errors = error.errors()
    if not errors:
        return str(error)
    return str(errors[0]["msg"])


def _column_accessor(name: str, field_type: Any, target: str, strict: bool) -> Accessor:
    adapter = _type_adapter(field_type)

    def access(row: Any, prefix: str) -> Any:
        column = prefix + name
        try:
            value = row[column]
        except (KeyError, IndexError):
            raise ColumnNotFoundError(column, target) from None
        if adapter is None:
            return value
        try:
            return adapter.validate_python(value, strict=strict)
        except ValidationError as e:
            raise ColumnTypeError(column, target, _error_detail(e)) from e

    return access


def _flatten_accessor(field: FieldSchema, record: str) -> Accessor:
    nested = field.type
    if not provides_from_row(nested):
        raise FlattenTargetError(
            f"{record}.{field.name}", getattr(nested, "__name__", repr(nested))
        )

    def access(row: Any, prefix: str) -> Any:
        return nested.from_row_ref_prefixed(row, prefix)

    return access


def compile_plan(schema: RecordSchema, options: MapperOptions = DEFAULT_OPTIONS) -> MappingPlan:
    """Compile a record schema into a mapping plan.

    Raises:
        MissingDefaultError: If excluded fields cannot be default-filled.
        FlattenTargetError: If a flattened field's type is not derived.
    """
    parts = partition(schema)

    field_plans = []
    for f in parts.mapped:
        if f.classification is Classification.FLATTENED:
            access = _flatten_accessor(f, schema.name)
        else:
            access = _column_accessor(f.name, f.type, schema.name, options.strict_types)
        field_plans.append(FieldPlan(name=f.name, classification=f.classification, access=access))

    names = [f.name for f in parts.mapped]
    defaults = tuple(
        (f.name, f.default_factory) for f in parts.excluded if f.default_factory is not None
    )

    return MappingPlan(
        target_class=schema.target_class,
        table_name=schema.table_name,
        fields=tuple(field_plans),
        qualified_columns=qualified_columns(schema.table_name, names),
        bare_columns=bare_columns(names),
        has_excluded=parts.has_excluded,
        defaults=defaults,
    )


def _validation_key(model: type, name: str, info: Any) -> str:
    """The input key pydantic validates ``name`` from: its alias when it has one."""
    alias = info.validation_alias if info.validation_alias is not None else info.alias
    if alias is None or isinstance(alias, str):
        return alias or name
    choices = alias.choices if isinstance(alias, AliasChoices) else [alias]
    for choice in choices:
        if isinstance(choice, str):
            return choice
        path = choice.convert_to_aliases()
        if len(path) == 1 and isinstance(path[0], str):
            return path[0]
    raise UnsupportedRecordError(
        model.__name__, f"validation alias of '{name}' is a nested path, not a column key"
    )


def _constructor(target_class: type, kind: RecordKind) -> Callable[[dict[str, Any]], Any]:
    name = target_class.__name__

    if kind is RecordKind.PYDANTIC:
        fields = target_class.model_fields  # type: ignore[attr-defined]
        keys = {f: _validation_key(target_class, f, info) for f, info in fields.items()}

        def construct(values: dict[str, Any]) -> Any:
            try:
                return target_class.model_validate(  # type: ignore[attr-defined]
                    {keys[field]: value for field, value in values.items()}
                )
            except ValidationError as e:
                raise RecordConstructionError(name, _error_detail(e)) from e

        return construct

    def construct_kwargs(values: dict[str, Any]) -> Any:
        try:
            return target_class(**values)
        except TypeError as e:
            raise RecordConstructionError(name, str(e)) from e

    return construct_kwargs


def build_converter(plan: MappingPlan, kind: RecordKind) -> Converter:
    """Build the ``(row, prefix) -> record`` converter for a plan.

    Without excluded fields every field is set from the row. Otherwise the
    mapped fields are read first and the excluded ones are default-filled.
    """
    fields = plan.fields
    construct = _constructor(plan.target_class, kind)

    if not plan.has_excluded:

        def convert(row: Any, prefix: str) -> Any:
            return construct({f.name: f.access(row, prefix) for f in fields})

        return convert

    defaults = plan.defaults

    def convert_with_defaults(row: Any, prefix: str) -> Any:
        values = {f.name: f.access(row, prefix) for f in fields}
        for name, factory in defaults:
            values[name] = factory()
        return construct(values)

    return convert_with_defaults
