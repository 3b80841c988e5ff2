"""Record validation: check candidate records against the constraint catalog."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal, Optional, Union

from schemagate.exceptions import RecordValidationError
from schemagate.schema.cache import ConstraintCache
from schemagate.schema.checks import RangeCheck, parse_check
from schemagate.schema.compat import is_compatible
from schemagate.types import OperationKind

logger = logging.getLogger(__name__)

ViolationKind = Literal["required", "type_mismatch", "check", "invalid_record"]


@dataclass
class Violation:
    """A single reason a record failed validation."""

    message: str
    kind: ViolationKind
    field: Optional[str] = None
    constraint_name: Optional[str] = None

    def to_dict(self) -> dict[str, str]:
        """Render for an error response, omitting empty fields."""
        data: dict[str, str] = {}
        if self.field is not None:
            data["field"] = self.field
        if self.constraint_name is not None:
            data["constraint"] = self.constraint_name
        data["message"] = self.message
        return data


@dataclass
class ValidationResult:
    """Result of record validation.

    valid is True iff violations is empty.
    """

    valid: bool
    violations: list[Violation] = field(default_factory=list)

    def to_error_body(self) -> dict[str, Any]:
        """Structured body for a 400-style response."""
        return {
            "error": "Schema validation failed",
            "details": [v.to_dict() for v in self.violations],
        }


class RecordValidator:
    """Validate records against the cached constraint catalog.

    Tables missing from the catalog are not validated, columns with
    unsupported types accept any value, and CHECK constraints outside the
    numeric range shape are skipped. The database remains authoritative.
    """

    def __init__(self, cache: ConstraintCache) -> None:
        self._cache = cache

    @property
    def cache(self) -> ConstraintCache:
        return self._cache

    def validate(
        self,
        table: str,
        record: Any,
        operation: Union[OperationKind, str] = OperationKind.INSERT,
    ) -> ValidationResult:
        """Validate a record destined for table.

        Args:
            table: Target table name
            record: Mapping of column name to value
            operation: "insert" or "update"; both currently evaluate the same

        Returns:
            ValidationResult with valid=True if no violations were found

        Raises:
            ValueError: If operation is not a known OperationKind
            SchemaUnavailableError: If the catalog could not be refreshed
        """
        OperationKind(operation)

        if not isinstance(record, Mapping):
            return ValidationResult(
                valid=False,
                violations=[
                    Violation(message="Record must be an object", kind="invalid_record")
                ],
            )

        catalog = self._cache.get()
        table_constraints = catalog.get_table(table)
        if table_constraints is None:
            logger.debug(f"No constraints known for table '{table}'; skipping validation")
            return ValidationResult(valid=True, violations=[])

        violations: list[Violation] = []

        for column_name, column in table_constraints.columns.items():
            value = record.get(column_name)

            if value is None:
                if column.is_required:
                    violations.append(
                        Violation(
                            field=column_name,
                            kind="required",
                            message=f"{column_name} is required and cannot be null",
                        )
                    )
                continue

            if not is_compatible(value, column.declared_type):
                violations.append(
                    Violation(
                        field=column_name,
                        kind="type_mismatch",
                        message=(
                            f"{column_name} has invalid type. "
                            f"Expected {column.declared_type}."
                        ),
                    )
                )

        for check in table_constraints.checks:
            parsed = parse_check(check.raw_definition)
            if isinstance(parsed, RangeCheck) and parsed.field not in table_constraints.columns:
                continue
            if not parsed.evaluate(record):
                violations.append(
                    Violation(
                        constraint_name=check.constraint_name,
                        kind="check",
                        message=f"Check constraint violation: {check.raw_definition}",
                    )
                )

        return ValidationResult(valid=len(violations) == 0, violations=violations)

    def validate_or_raise(
        self,
        table: str,
        record: Any,
        operation: Union[OperationKind, str] = OperationKind.INSERT,
    ) -> ValidationResult:
        """Validate a record and raise RecordValidationError if it is invalid."""
        result = self.validate(table, record, operation)
        if not result.valid:
            raise RecordValidationError(table, result.violations)
        return result
