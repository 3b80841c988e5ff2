"""Core type definitions for schemagate."""

import datetime
import decimal
from collections.abc import Mapping
from enum import Enum
from typing import Any, TypeAlias

TableName: TypeAlias = str
ColumnName: TypeAlias = str
ConstraintName: TypeAlias = str
Record: TypeAlias = Mapping[str, Any]

__all__ = [
    "TableName",
    "ColumnName",
    "ConstraintName",
    "Record",
    "OperationKind",
    "ValueKind",
    "kind_of",
]


class OperationKind(Enum):
    """Storage operation a record is being validated for.

    Both kinds currently evaluate identically.
    """

    INSERT = "insert"
    UPDATE = "update"


class ValueKind(Enum):
    """Closed set of run-time kinds a record value can have."""

    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    TEMPORAL = "temporal"
    SEQUENCE = "sequence"
    STRUCTURED = "structured"
    OTHER = "other"


def kind_of(value: Any) -> ValueKind:
    """Classify a record value into its ValueKind.

    bool is checked before int since bool subclasses int. Decimal counts
    as FLOAT. Lists and tuples are sequences; dicts are structured.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, (float, decimal.Decimal)):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (datetime.date, datetime.time)):
        return ValueKind.TEMPORAL
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, Mapping):
        return ValueKind.STRUCTURED
    return ValueKind.OTHER
