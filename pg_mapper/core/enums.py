"""Field classification and record kind enumerations."""

from __future__ import annotations

from enum import Enum


class Classification(Enum):
    """How a field is populated from a row.

    ``UNDEFINED`` is the classifier's starting state; an undefined field is
    mapped directly from its column.
    """

    MAPPED = "mapped"
    UNDEFINED = "mapped"
    IGNORED = "ignored"
    FLATTENED = "flattened"
    COLLECTION = "collection"

    @property
    def is_mapped(self) -> bool:
        return self in (Classification.MAPPED, Classification.FLATTENED)


class RecordKind(Enum):
    """Supported record class flavours."""

    DATACLASS = "dataclass"
    PYDANTIC = "pydantic"
    PLAIN = "plain"
