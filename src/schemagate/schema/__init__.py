"""Constraint catalog, cache and record validation modules."""

from schemagate.schema.cache import CacheEntry, ConstraintCache
from schemagate.schema.catalog import build_catalog
from schemagate.schema.checks import RangeCheck, Unrecognized, evaluate_check, parse_check
from schemagate.schema.compat import is_compatible
from schemagate.schema.models import (
    CheckDescriptor,
    ColumnDescriptor,
    ConstraintCatalog,
    TableConstraints,
    UniqueDescriptor,
)
from schemagate.schema.source import InMemorySchemaSource, SchemaSource
from schemagate.schema.storage_errors import StorageErrorInfo, describe_storage_error
from schemagate.schema.validator import (
    RecordValidator,
    ValidationResult,
    Violation,
)

__all__ = [
    "CacheEntry",
    "CheckDescriptor",
    "ColumnDescriptor",
    "ConstraintCache",
    "ConstraintCatalog",
    "InMemorySchemaSource",
    "RangeCheck",
    "RecordValidator",
    "SchemaSource",
    "StorageErrorInfo",
    "TableConstraints",
    "UniqueDescriptor",
    "Unrecognized",
    "ValidationResult",
    "Violation",
    "build_catalog",
    "describe_storage_error",
    "evaluate_check",
    "is_compatible",
    "parse_check",
]
