"""Export constraint catalogs to YAML in the format YamlSchemaSource reads."""

from pathlib import Path
from typing import Any

import yaml

from schemagate.schema.models import ColumnDescriptor, ConstraintCatalog, TableConstraints


def table_to_dict(table_name: str, table: TableConstraints) -> dict[str, Any]:
    """Convert a table's constraints to a dictionary suitable for YAML export."""
    data: dict[str, Any] = {"table": table_name}
    data["columns"] = [_column_to_dict(col) for col in table.columns.values()]

    if table.checks:
        data["check_constraints"] = [
            {"name": cc.constraint_name, "expression": cc.raw_definition}
            for cc in table.checks
        ]

    if table.uniques:
        data["unique_constraints"] = [
            {"name": uc.constraint_name, "columns": list(uc.columns)}
            for uc in table.uniques
        ]

    return data


def _column_to_dict(col: ColumnDescriptor) -> dict[str, Any]:
    data: dict[str, Any] = {"name": col.column_name, "type": col.declared_type}

    if not col.nullable:
        data["nullable"] = False

    if col.default_value is not None:
        data["default"] = col.default_value

    return data


def catalog_to_dict(catalog: ConstraintCatalog) -> dict[str, Any]:
    """Convert a whole catalog to a single-file {"tables": [...]} dictionary."""
    return {
        "tables": [
            table_to_dict(name, catalog.tables[name])
            for name in sorted(catalog.table_names())
        ]
    }


def export_catalog_yaml(catalog: ConstraintCatalog) -> str:
    """Export a catalog to a YAML string."""
    return yaml.dump(
        catalog_to_dict(catalog),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )


def export_catalog_to_directory(catalog: ConstraintCatalog, output_dir: Path) -> list[Path]:
    """Export every table in a catalog to its own YAML file.

    Returns list of created file paths.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    created_files = []

    for table_name in sorted(catalog.table_names()):
        file_path = output_dir / f"{table_name}.yaml"
        data = table_to_dict(table_name, catalog.tables[table_name])
        file_path.write_text(
            yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
        )
        created_files.append(file_path)

    return created_files
