"""Schema source backed by YAML table definition files."""

from pathlib import Path
from typing import Any, Optional

import yaml

from schemagate.exceptions import SchemaLoadError

VALID_TABLE_FIELDS = {
    "table",
    "description",
    "columns",
    "check_constraints",
    "unique_constraints",
    "comment",
}

VALID_COLUMN_FIELDS = {
    "name",
    "type",
    "nullable",
    "default",
    "comment",
}

DescriptorRows = tuple[list[dict[str, Any]], list[dict[str, Any]], list[dict[str, Any]]]


def load_descriptors(schema_path: Path) -> DescriptorRows:
    """Load flat (columns, checks, uniques) rows from a YAML file or directory.

    Raises:
        SchemaLoadError: If the path is missing or a definition is invalid.
    """
    if schema_path.is_file():
        tables = _load_single_file(schema_path)
    elif schema_path.is_dir():
        tables = _load_directory(schema_path)
    else:
        raise SchemaLoadError(f"Schema path does not exist: {schema_path}")

    columns: list[dict[str, Any]] = []
    checks: list[dict[str, Any]] = []
    uniques: list[dict[str, Any]] = []
    for table in tables:
        columns.extend(table["columns"])
        checks.extend(table["checks"])
        uniques.extend(table["uniques"])
    return columns, checks, uniques


def _read_yaml(file_path: Path) -> Any:
    try:
        with open(file_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SchemaLoadError(f"Invalid YAML in {file_path}: {e}") from e
    if data is None:
        raise SchemaLoadError(f"Empty YAML file: {file_path}")
    if not isinstance(data, dict):
        raise SchemaLoadError(f"Expected a mapping at top level of {file_path}")
    return data


def _load_directory(directory: Path) -> list[dict[str, Any]]:
    tables: list[dict[str, Any]] = []
    seen: set[str] = set()
    for yaml_file in sorted(directory.glob("*.yaml")):
        table = _parse_table_dict(_read_yaml(yaml_file))
        if table["name"] in seen:
            raise SchemaLoadError(
                f"Duplicate table name '{table['name']}' found in directory"
            )
        seen.add(table["name"])
        tables.append(table)
    return tables


def _load_single_file(file_path: Path) -> list[dict[str, Any]]:
    data = _read_yaml(file_path)
    if "tables" not in data:
        return [_parse_table_dict(data)]

    tables: list[dict[str, Any]] = []
    seen: set[str] = set()
    for table_data in data.get("tables") or []:
        table = _parse_table_dict(table_data)
        if table["name"] in seen:
            raise SchemaLoadError(f"Duplicate table name '{table['name']}' in file")
        seen.add(table["name"])
        tables.append(table)
    return tables


def _parse_table_dict(data: dict) -> dict[str, Any]:
    """Flatten one table definition into descriptor rows."""
    unknown_fields = set(data.keys()) - VALID_TABLE_FIELDS
    if unknown_fields:
        raise SchemaLoadError(
            f"Unknown field(s) in table definition: {', '.join(sorted(unknown_fields))}"
        )

    name = data.get("table")
    if not name:
        raise SchemaLoadError("Table definition missing 'table' field")

    columns = [_parse_column(name, col) for col in data.get("columns") or []]
    seen = set()
    for col in columns:
        if col["column_name"] in seen:
            raise SchemaLoadError(
                f"Duplicate column name '{col['column_name']}' in table '{name}'"
            )
        seen.add(col["column_name"])

    checks = []
    for cc_data in data.get("check_constraints") or []:
        if not cc_data.get("expression"):
            raise SchemaLoadError(f"Check constraint in table '{name}' missing 'expression'")
        checks.append(
            {
                "table_name": name,
                "constraint_name": cc_data.get("name", ""),
                "definition": cc_data["expression"],
            }
        )

    uniques = []
    for uc_data in data.get("unique_constraints") or []:
        uc_columns = uc_data.get("columns") or []
        if not uc_columns:
            raise SchemaLoadError(f"Unique constraint in table '{name}' has no columns")
        uniques.append(
            {
                "table_name": name,
                "constraint_name": uc_data.get("name", ""),
                "column_names": ",".join(str(c) for c in uc_columns),
            }
        )

    return {"name": name, "columns": columns, "checks": checks, "uniques": uniques}


def _parse_column(table_name: str, data: dict) -> dict[str, Any]:
    """Convert a column definition into an information_schema-style row."""
    unknown_fields = set(data.keys()) - VALID_COLUMN_FIELDS
    if unknown_fields:
        raise SchemaLoadError(
            f"Unknown field(s) in column definition: {', '.join(sorted(unknown_fields))}"
        )

    name = data.get("name")
    if not name:
        raise SchemaLoadError(f"Column definition in table '{table_name}' missing 'name' field")

    col_type = data.get("type")
    if not col_type:
        raise SchemaLoadError(f"Column '{name}' missing 'type' field")

    default = data.get("default")
    return {
        "table_name": table_name,
        "column_name": name,
        "data_type": str(col_type),
        "is_nullable": "YES" if data.get("nullable", True) else "NO",
        "column_default": None if default is None else str(default),
    }


class YamlSchemaSource:
    """Serve descriptor rows from YAML definitions, re-read on every refresh.

    The files are read once per refresh, when column descriptors are
    fetched. Check and unique descriptors come from that same read so a
    catalog never mixes two versions of the files.
    """

    def __init__(self, schema_path: Path) -> None:
        self._schema_path = Path(schema_path)
        self._loaded: Optional[DescriptorRows] = None

    @property
    def schema_path(self) -> Path:
        return self._schema_path

    def _current(self) -> DescriptorRows:
        if self._loaded is None:
            self._loaded = load_descriptors(self._schema_path)
        return self._loaded

    def fetch_column_constraints(self) -> list[dict[str, Any]]:
        self._loaded = load_descriptors(self._schema_path)
        return self._loaded[0]

    def fetch_check_constraints(self) -> list[dict[str, Any]]:
        return self._current()[1]

    def fetch_unique_constraints(self) -> list[dict[str, Any]]:
        return self._current()[2]
