"""Schema source protocol and an in-memory implementation."""

from typing import Any, Iterable, Protocol, runtime_checkable


@runtime_checkable
class SchemaSource(Protocol):
    """
    Supplies flat descriptor rows for every table in the backing schema.

    Semantics:
    - Each call returns rows for all tables; there is no per-table filter.
    - Rows use information_schema field names (see build_catalog).
    - Implementations may block on I/O and may raise on failure; the
      constraint cache converts failures into SchemaUnavailableError.
    """

    def fetch_column_constraints(self) -> list[Any]:
        """Return one row per (table, column)."""
        ...

    def fetch_check_constraints(self) -> list[Any]:
        """Return one row per CHECK constraint."""
        ...

    def fetch_unique_constraints(self) -> list[Any]:
        """Return one row per UNIQUE / PRIMARY KEY constraint."""
        ...


class InMemorySchemaSource:
    """Serves fixed descriptor rows. Counts refresh round-trips in fetch_count."""

    def __init__(
        self,
        columns: Iterable[Any] = (),
        checks: Iterable[Any] = (),
        uniques: Iterable[Any] = (),
    ) -> None:
        self._columns = list(columns)
        self._checks = list(checks)
        self._uniques = list(uniques)
        self.fetch_count = 0

    def fetch_column_constraints(self) -> list[Any]:
        self.fetch_count += 1
        return list(self._columns)

    def fetch_check_constraints(self) -> list[Any]:
        return list(self._checks)

    def fetch_unique_constraints(self) -> list[Any]:
        return list(self._uniques)
