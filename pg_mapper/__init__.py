"""pg-mapper - derive row-to-record conversion and SQL column metadata."""

from __future__ import annotations

from pg_mapper.core.enums import Classification, RecordKind
from pg_mapper.core.exceptions import (
    ColumnNotFoundError,
    ColumnTypeError,
    FlattenTargetError,
    InvalidAttributeError,
    MapperDefinitionError,
    MappingError,
    MissingDefaultError,
    MissingTableError,
    PgMapperError,
    RecordConstructionError,
    UnknownContainerAttributeError,
    UnknownFieldAttributeError,
    UnsupportedRecordError,
)
from pg_mapper.core.options import MapperOptions
from pg_mapper.mapping.attributes import Collection, Flatten, Ignore, PgMapper
from pg_mapper.mapping.derive import derive, mapping_plan, postgres_mapper
from pg_mapper.mapping.model import ModelMapper
from pg_mapper.mapping.protocol import FromRow, Mapper

__all__ = [
    # Derive
    "postgres_mapper",
    "derive",
    "mapping_plan",
    # Annotations
    "PgMapper",
    "Ignore",
    "Flatten",
    "Collection",
    # Mapping
    "ModelMapper",
    "FromRow",
    "Mapper",
    # Options
    "MapperOptions",
    # Enums
    "Classification",
    "RecordKind",
    # Exceptions
    "PgMapperError",
    "MapperDefinitionError",
    "MissingTableError",
    "InvalidAttributeError",
    "UnknownContainerAttributeError",
    "UnknownFieldAttributeError",
    "UnsupportedRecordError",
    "FlattenTargetError",
    "MissingDefaultError",
    "MappingError",
    "ColumnNotFoundError",
    "ColumnTypeError",
    "RecordConstructionError",
]
