"""Type compatibility between record values and declared column types."""

import json
import math
import re
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Optional

from schemagate.types import ValueKind, kind_of

__all__ = ["TypeFamily", "type_family", "is_compatible"]

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
_TYPE_PARAMS_PATTERN = re.compile(r"\s*\([^()]*\)\s*$")


class TypeFamily:
    """Declared type families understood by the checker."""

    IDENTIFIER = "identifier"
    TEXT = "text"
    INTEGER = "integer"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    TEMPORAL = "temporal"
    STRUCTURED = "structured"
    ARRAY = "array"

    NAMES: dict[str, str] = {
        "uuid": IDENTIFIER,
        "text": TEXT,
        "varchar": TEXT,
        "char": TEXT,
        "character varying": TEXT,
        "character": TEXT,
        "string": TEXT,
        "integer": INTEGER,
        "int": INTEGER,
        "smallint": INTEGER,
        "bigint": INTEGER,
        "tinyint": INTEGER,
        "numeric": DECIMAL,
        "decimal": DECIMAL,
        "real": DECIMAL,
        "double precision": DECIMAL,
        "double": DECIMAL,
        "float": DECIMAL,
        "boolean": BOOLEAN,
        "bool": BOOLEAN,
        "date": TEMPORAL,
        "timestamp": TEMPORAL,
        "timestamp with time zone": TEMPORAL,
        "timestamp without time zone": TEMPORAL,
        "timestamp_ntz": TEMPORAL,
        "json": STRUCTURED,
        "jsonb": STRUCTURED,
        "array": ARRAY,
    }


def type_family(declared_type: str) -> Optional[str]:
    """Return the TypeFamily for a declared type, or None if unsupported.

    Matching is case-insensitive and ignores a trailing parameter list,
    so VARCHAR(255) and DECIMAL(10,2) resolve like varchar and decimal.
    """
    name = " ".join(declared_type.strip().lower().split())
    if name.endswith("[]") or (name.startswith("array<") and name.endswith(">")):
        return TypeFamily.ARRAY
    name = _TYPE_PARAMS_PATTERN.sub("", name)
    return TypeFamily.NAMES.get(name)


def _is_identifier(value: Any, kind: ValueKind) -> bool:
    return kind is ValueKind.STRING and UUID_PATTERN.fullmatch(value) is not None


def _is_text(value: Any, kind: ValueKind) -> bool:
    return kind is ValueKind.STRING


def _is_integer(value: Any, kind: ValueKind) -> bool:
    if kind is ValueKind.INTEGER:
        return True
    if kind is ValueKind.FLOAT:
        if isinstance(value, Decimal):
            return value.is_finite() and value == value.to_integral_value()
        return math.isfinite(value) and value == int(value)
    return False


def _is_decimal(value: Any, kind: ValueKind) -> bool:
    return kind in (ValueKind.INTEGER, ValueKind.FLOAT)


def _is_boolean(value: Any, kind: ValueKind) -> bool:
    return kind is ValueKind.BOOLEAN


def _is_temporal(value: Any, kind: ValueKind) -> bool:
    if kind is ValueKind.TEMPORAL:
        return True
    if kind is not ValueKind.STRING:
        return False
    try:
        datetime.fromisoformat(value.strip())
    except ValueError:
        return False
    return True


def _is_structured(value: Any, kind: ValueKind) -> bool:
    if kind in (ValueKind.STRUCTURED, ValueKind.SEQUENCE):
        return True
    if kind is not ValueKind.STRING:
        return False
    try:
        json.loads(value)
    except ValueError:
        return False
    return True


def _is_array(value: Any, kind: ValueKind) -> bool:
    return kind is ValueKind.SEQUENCE


_PREDICATES: dict[str, Callable[[Any, ValueKind], bool]] = {
    TypeFamily.IDENTIFIER: _is_identifier,
    TypeFamily.TEXT: _is_text,
    TypeFamily.INTEGER: _is_integer,
    TypeFamily.DECIMAL: _is_decimal,
    TypeFamily.BOOLEAN: _is_boolean,
    TypeFamily.TEMPORAL: _is_temporal,
    TypeFamily.STRUCTURED: _is_structured,
    TypeFamily.ARRAY: _is_array,
}


def is_compatible(value: Any, declared_type: str) -> bool:
    """Check whether value can be stored in a column of declared_type.

    None is always compatible; nullability is the validator's concern.
    Unsupported declared types are treated as compatible (fail open).
    """
    kind = kind_of(value)
    if kind is ValueKind.NULL:
        return True
    family = type_family(declared_type)
    if family is None:
        return True
    return _PREDICATES[family](value, kind)
