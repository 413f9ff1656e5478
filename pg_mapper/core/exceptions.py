"""pg-mapper exception hierarchy.

Definition errors are raised while a record class is being derived and leave
the class untouched. Mapping errors are raised by the generated converters at
row-conversion time and always reach the caller.
"""

from __future__ import annotations


class PgMapperError(Exception):
    """Base exception for all pg-mapper errors."""


# --- Definition ---


class MapperDefinitionError(PgMapperError):
    """Base for errors detected while deriving a row mapper."""


class MissingTableError(MapperDefinitionError):
    """Raised when a record carries no table declaration."""

    def __init__(self, record: str) -> None:
        self.record = record
        super().__init__(f'declare table name: @postgres_mapper(table="foo") on {record}')


class InvalidAttributeError(MapperDefinitionError):
    """Raised when a pg_mapper annotation has the wrong shape."""


class UnknownContainerAttributeError(MapperDefinitionError):
    """Raised for a record-level pg_mapper keyword other than ``table``."""

    def __init__(self, record: str, attribute: str) -> None:
        self.record = record
        self.attribute = attribute
        super().__init__(f"unknown pg_mapper container attribute '{attribute}' on {record}")


class UnknownFieldAttributeError(MapperDefinitionError):
    """Raised in strict mode for an unrecognized field directive."""

    def __init__(self, field: str, directive: str) -> None:
        self.field = field
        self.directive = directive
        super().__init__(f"unknown pg_mapper field attribute {directive} on {field}")


class UnsupportedRecordError(MapperDefinitionError):
    """Raised when the target is not a record type that can be mapped."""

    def __init__(self, target: str, detail: str) -> None:
        self.target = target
        super().__init__(f"Cannot map {target}: {detail}")


class FlattenTargetError(MapperDefinitionError):
    """Raised when a flattened field's type has no row mapper of its own."""

    def __init__(self, field: str, target: str) -> None:
        self.field = field
        self.target = target
        super().__init__(
            f"Field {field} is marked flatten but {target} does not implement "
            f"from_row_ref_prefixed; decorate it with @postgres_mapper"
        )


class MissingDefaultError(MapperDefinitionError):
    """Raised when excluded fields cannot be default-filled."""

    def __init__(self, record: str, fields: list[str]) -> None:
        self.record = record
        self.fields = fields
        super().__init__(
            f"Cannot default-fill excluded fields of {record}: no default for {fields}"
        )


# --- Mapping ---


class MappingError(PgMapperError):
    """Base for row conversion errors."""


class ColumnNotFoundError(MappingError):
    """Raised when a mapped column is absent from the row."""

    def __init__(self, column: str, target_class: str) -> None:
        self.column = column
        self.target_class = target_class
        super().__init__(f"Cannot map to {target_class}: column '{column}' not found")


class ColumnTypeError(MappingError):
    """Raised when a column value does not match the field's declared type."""

    def __init__(self, column: str, target_class: str, detail: str) -> None:
        self.column = column
        self.target_class = target_class
        self.detail = detail
        super().__init__(f"Cannot map column '{column}' to {target_class}: {detail}")


class RecordConstructionError(MappingError):
    """Raised when the record constructor rejects the mapped values."""

    def __init__(self, target_class: str, detail: str) -> None:
        self.target_class = target_class
        self.detail = detail
        super().__init__(f"Cannot construct {target_class}: {detail}")
