"""Exception classes for schemagate."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from schemagate.schema.validator import Violation

__all__ = [
    "SchemagateError",
    "SchemaUnavailableError",
    "SchemaLoadError",
    "MalformedCatalogInputError",
    "RecordValidationError",
    "ConfigError",
]


class SchemagateError(Exception):
    """Base exception for schemagate."""


class SchemaUnavailableError(SchemagateError):
    """Schema source failed while refreshing the constraint catalog.

    Means validation infrastructure is unavailable, not that the record
    is invalid.
    """


class SchemaLoadError(SchemaUnavailableError):
    """Error loading schema definition files."""


class MalformedCatalogInputError(SchemagateError):
    """A descriptor handed to the catalog builder is missing required data."""


class RecordValidationError(SchemagateError):
    """Record failed validation against the constraint catalog."""

    def __init__(self, table: str, violations: list["Violation"]):
        self.table = table
        self.violations = violations
        super().__init__(f"Validation failed for {table} record")


class ConfigError(SchemagateError):
    """Error in configuration."""
