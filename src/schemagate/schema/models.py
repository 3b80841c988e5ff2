"""Constraint catalog representation classes."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class ColumnDescriptor:
    """Column definition as discovered from the backing schema."""

    table_name: str
    column_name: str
    declared_type: str
    nullable: bool = True
    has_default: bool = False
    default_value: Optional[str] = None

    @property
    def is_required(self) -> bool:
        """True when a record must supply a non-null value for this column."""
        return not self.nullable and not self.has_default


@dataclass(frozen=True)
class CheckDescriptor:
    """
    CHECK constraint definition.

    raw_definition is opaque text; only the numeric range shape understood by
    schemagate.schema.checks is evaluated, the database enforces the rest.
    """

    table_name: str
    constraint_name: str
    raw_definition: str


@dataclass(frozen=True)
class UniqueDescriptor:
    """
    UNIQUE (or PRIMARY KEY) constraint definition.

    Carried for completeness; uniqueness is enforced by storage only.
    """

    table_name: str
    constraint_name: str
    columns: tuple[str, ...]


@dataclass
class TableConstraints:
    """All constraints known for one table."""

    columns: dict[str, ColumnDescriptor] = field(default_factory=dict)
    checks: list[CheckDescriptor] = field(default_factory=list)
    uniques: list[UniqueDescriptor] = field(default_factory=list)

    def get_column(self, name: str) -> Optional[ColumnDescriptor]:
        """Get a column by name."""
        return self.columns.get(name)


@dataclass
class ConstraintCatalog:
    """Complete set of per-table constraints.

    Never updated in place once built: a refresh builds a new catalog.
    """

    tables: dict[str, TableConstraints] = field(default_factory=dict)

    def get_table(self, name: str) -> Optional[TableConstraints]:
        """Get a table's constraints by name."""
        return self.tables.get(name)

    def table_names(self) -> set[str]:
        """Get all table names."""
        return set(self.tables.keys())

    def __contains__(self, name: object) -> bool:
        return name in self.tables

    def __len__(self) -> int:
        return len(self.tables)
