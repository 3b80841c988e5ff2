"""Build a ConstraintCatalog from flat descriptor rows."""

from typing import Any, Iterable

from schemagate.exceptions import MalformedCatalogInputError
from schemagate.schema.models import (
    CheckDescriptor,
    ColumnDescriptor,
    ConstraintCatalog,
    TableConstraints,
    UniqueDescriptor,
)

__all__ = ["build_catalog", "row_get", "split_column_names"]


def row_get(row: Any, key: str, default: Any = None) -> Any:
    """Safely get a value from a row, supporting dict-like and pyspark Row."""
    if hasattr(row, "get"):
        return row.get(key, default)
    if hasattr(row, "asDict"):
        return row.asDict().get(key, default)
    try:
        return row[key]
    except (KeyError, IndexError, TypeError):
        return default


def split_column_names(value: Any) -> tuple[str, ...]:
    """Split a comma-delimited column list into trimmed, ordered names."""
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(str(c).strip() for c in value if str(c).strip())
    return tuple(c.strip() for c in str(value).split(",") if c.strip())


def _parse_nullable(value: Any, index: int) -> bool:
    """Only an explicit YES (or True) makes a column nullable."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    flag = str(value).strip().upper()
    if flag == "YES":
        return True
    if flag == "NO":
        return False
    raise MalformedCatalogInputError(
        f"column descriptor #{index} has unrecognized is_nullable: {value!r}"
    )


def _require_table_name(row: Any, kind: str, index: int) -> str:
    table_name = row_get(row, "table_name")
    if table_name is None or not str(table_name).strip():
        raise MalformedCatalogInputError(
            f"{kind} descriptor #{index} is missing table_name: {row!r}"
        )
    return str(table_name)


def _require_field(row: Any, key: str, kind: str, index: int) -> Any:
    value = row_get(row, key)
    if value is None:
        raise MalformedCatalogInputError(
            f"{kind} descriptor #{index} is missing {key}: {row!r}"
        )
    return value


def build_catalog(
    columns: Iterable[Any],
    checks: Iterable[Any],
    uniques: Iterable[Any],
) -> ConstraintCatalog:
    """Group flat column, check and unique rows into a ConstraintCatalog.

    Args:
        columns: Rows with table_name, column_name, data_type, is_nullable
            ('YES'/'NO' or bool; missing means NOT NULL) and column_default
        checks: Rows with table_name, constraint_name and definition
            (or check_clause)
        uniques: Rows with table_name, constraint_name and column_names
            (comma-delimited string or list)

    Returns:
        A new ConstraintCatalog. Inputs are not modified.

    Raises:
        MalformedCatalogInputError: If any row lacks a table name (or a
            column name/type, or has an unrecognized
            is_nullable). The whole build is aborted.
    """
    tables: dict[str, TableConstraints] = {}

    def table_for(name: str) -> TableConstraints:
        if name not in tables:
            tables[name] = TableConstraints()
        return tables[name]

    for i, row in enumerate(columns):
        table_name = _require_table_name(row, "column", i)
        column_name = str(_require_field(row, "column_name", "column", i))
        default = row_get(row, "column_default")
        table_for(table_name).columns[column_name] = ColumnDescriptor(
            table_name=table_name,
            column_name=column_name,
            declared_type=str(_require_field(row, "data_type", "column", i)),
            nullable=_parse_nullable(row_get(row, "is_nullable"), i),
            has_default=default is not None,
            default_value=None if default is None else str(default),
        )

    for i, row in enumerate(checks):
        table_name = _require_table_name(row, "check", i)
        definition = row_get(row, "definition")
        if definition is None:
            definition = row_get(row, "check_clause", "")
        table_for(table_name).checks.append(
            CheckDescriptor(
                table_name=table_name,
                constraint_name=str(row_get(row, "constraint_name") or ""),
                raw_definition=str(definition),
            )
        )

    for i, row in enumerate(uniques):
        table_name = _require_table_name(row, "unique", i)
        table_for(table_name).uniques.append(
            UniqueDescriptor(
                table_name=table_name,
                constraint_name=str(row_get(row, "constraint_name") or ""),
                columns=split_column_names(row_get(row, "column_names")),
            )
        )

    return ConstraintCatalog(tables=tables)
