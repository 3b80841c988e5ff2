"""Translate database constraint errors into structured error info.

Covers the errors storage raises for constraints the record validator
does not (or cannot) evaluate up front: uniqueness, foreign keys, and
CHECK constraints outside the range subset.
"""

import re
from dataclasses import dataclass
from typing import Any, Optional

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
CHECK_VIOLATION = "23514"
NOT_NULL_VIOLATION = "23502"

_UNIQUE_CONSTRAINT = re.compile(r'unique constraint "(.+?)"', re.IGNORECASE)
_UNIQUE_FIELD = re.compile(r"(?:idx|key)_(.+?)_", re.IGNORECASE)
_FK_CONSTRAINT = re.compile(r'foreign key constraint "(.+?)"', re.IGNORECASE)
_FK_FIELD = re.compile(r"fk_(.+?)_", re.IGNORECASE)
_CHECK_CONSTRAINT = re.compile(r'check constraint "(.+?)"', re.IGNORECASE)
_CHECK_FIELD = re.compile(r"ck_(.+?)_", re.IGNORECASE)
_NOT_NULL_COLUMN = re.compile(r'column "(.+?)"', re.IGNORECASE)


@dataclass
class StorageErrorInfo:
    """Structured description of a storage-layer error."""

    type: str
    message: str
    field: Optional[str] = None
    details: Optional[Any] = None


def _field_from_constraint(
    message: str, constraint_pattern: re.Pattern, field_pattern: re.Pattern
) -> Optional[str]:
    constraint = constraint_pattern.search(message)
    if constraint is None:
        return None
    field_match = field_pattern.search(constraint.group(1))
    return field_match.group(1) if field_match else None


def describe_storage_error(
    code: Optional[str],
    message: Optional[str] = None,
    details: Optional[Any] = None,
) -> StorageErrorInfo:
    """Map a SQLSTATE code and error message to a StorageErrorInfo.

    Field names are recovered from the constraint naming conventions
    idx_/key_ (unique), fk_ (foreign key) and ck_ (check), or from the
    quoted column name of a not-null error.
    """
    message = message or "Database operation failed"

    if not code:
        return StorageErrorInfo(type="unknown", message=message, details=details)

    if code == UNIQUE_VIOLATION:
        field = _field_from_constraint(message, _UNIQUE_CONSTRAINT, _UNIQUE_FIELD)
        return StorageErrorInfo(
            type="unique_constraint",
            field=field,
            message=(
                f"Duplicate value for {field}"
                if field
                else "A record with this value already exists"
            ),
            details=details,
        )

    if code == FOREIGN_KEY_VIOLATION:
        field = _field_from_constraint(message, _FK_CONSTRAINT, _FK_FIELD)
        return StorageErrorInfo(
            type="foreign_key",
            field=field,
            message=(
                f"Invalid reference in {field}"
                if field
                else "Referenced record does not exist"
            ),
            details=details,
        )

    if code == CHECK_VIOLATION:
        field = _field_from_constraint(message, _CHECK_CONSTRAINT, _CHECK_FIELD)
        return StorageErrorInfo(
            type="check_constraint",
            field=field,
            message=(
                f"Invalid value for {field}" if field else "Value does not meet constraints"
            ),
            details=details,
        )

    if code == NOT_NULL_VIOLATION:
        column = _NOT_NULL_COLUMN.search(message)
        field = column.group(1) if column else None
        return StorageErrorInfo(
            type="not_null",
            field=field,
            message=f"{field} cannot be null" if field else "Required field cannot be null",
            details=details,
        )

    return StorageErrorInfo(type="database", message=message, details=details)
