"""Mapping layer - classify record fields and convert rows into records."""

from __future__ import annotations

from pg_mapper.mapping.attributes import (
    Collection,
    Directive,
    Flatten,
    Ignore,
    PgMapper,
    parse_field_attrs,
    parse_table_attr,
)
from pg_mapper.mapping.builder import build_converter, compile_plan
from pg_mapper.mapping.classifier import classify
from pg_mapper.mapping.derive import derive, mapping_plan, postgres_mapper
from pg_mapper.mapping.model import ModelMapper
from pg_mapper.mapping.partition import Partition, partition
from pg_mapper.mapping.plan import FieldPlan, MappingPlan
from pg_mapper.mapping.protocol import FromRow, Mapper
from pg_mapper.mapping.schema import FieldSchema, RecordSchema, inspect_record

__all__ = [
    "postgres_mapper",
    "derive",
    "mapping_plan",
    "ModelMapper",
    "PgMapper",
    "Ignore",
    "Flatten",
    "Collection",
    "Directive",
    "parse_field_attrs",
    "parse_table_attr",
    "classify",
    "inspect_record",
    "FieldSchema",
    "RecordSchema",
    "partition",
    "Partition",
    "compile_plan",
    "build_converter",
    "MappingPlan",
    "FieldPlan",
    "FromRow",
    "Mapper",
]
