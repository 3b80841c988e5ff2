"""Command-line interface for schemagate."""

import argparse
import json
import logging
import sys
from pathlib import Path

from schemagate.config import Config
from schemagate.databricks.utils import (
    build_offline_source,
    build_online_source,
    build_validator,
)
from schemagate.exceptions import ConfigError, SchemaUnavailableError
from schemagate.schema.exporter import export_catalog_yaml
from schemagate.schema.models import ConstraintCatalog
from schemagate.types import OperationKind

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_CONFIG_ERROR = 2
EXIT_SCHEMA_UNAVAILABLE = 3


def main() -> int:
    """Main entry point."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    parser = argparse.ArgumentParser(
        prog="schemagate",
        description="Validate records against runtime-discovered schema constraints",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check", help="Validate a JSON record")
    check_parser.add_argument("table", help="Target table name")
    check_parser.add_argument("record", help="Path to a JSON record, or - for stdin")
    check_parser.add_argument(
        "--operation",
        choices=[kind.value for kind in OperationKind],
        default=OperationKind.INSERT.value,
    )
    _add_source_arguments(check_parser)

    catalog_parser = subparsers.add_parser(
        "catalog", help="Show the discovered constraint catalog as YAML"
    )
    catalog_parser.add_argument("--table", help="Only show this table")
    _add_source_arguments(catalog_parser)

    args = parser.parse_args()

    if args.command == "check":
        return cmd_check(args)
    elif args.command == "catalog":
        return cmd_catalog(args)
    else:
        print(f"Command '{args.command}' not yet implemented", file=sys.stderr)
        return EXIT_INVALID


def _add_source_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--schema-path",
        type=Path,
        help="YAML schema file or directory (default: SCHEMAGATE_SCHEMA_PATH)",
    )
    subparser.add_argument(
        "--online",
        action="store_true",
        help="Introspect the live database instead of YAML files",
    )
    subparser.add_argument("--catalog", help="Catalog name (online mode)")
    subparser.add_argument("--schema", help="Schema name (online mode)")
    subparser.add_argument("--profile", help="Databricks config profile (online mode)")


def _build_validator(args: argparse.Namespace):
    config = Config.from_env(
        schema_path=str(args.schema_path) if args.schema_path else None,
        catalog=getattr(args, "catalog", None),
        schema=getattr(args, "schema", None),
        databricks_profile=getattr(args, "profile", None),
    )
    if args.online:
        source = build_online_source(config)
    else:
        source = build_offline_source(config)
    return build_validator(config, source)


def _read_record(location: str) -> object:
    if location == "-":
        return json.load(sys.stdin)
    with open(location) as f:
        return json.load(f)


def cmd_check(args: argparse.Namespace) -> int:
    """Validate one record and print its violations."""
    try:
        record = _read_record(args.record)
        validator = _build_validator(args)
        result = validator.validate(args.table, record, args.operation)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except SchemaUnavailableError as e:
        print(f"Validation unavailable: {e}", file=sys.stderr)
        return EXIT_SCHEMA_UNAVAILABLE
    except Exception as e:
        print(f"Check error: {e}", file=sys.stderr)
        return EXIT_INVALID

    if result.valid:
        print(f"Record is valid for {args.table}")
        return EXIT_OK

    print(json.dumps(result.to_error_body(), indent=2))
    return EXIT_INVALID


def cmd_catalog(args: argparse.Namespace) -> int:
    """Print the discovered catalog, optionally for one table."""
    try:
        validator = _build_validator(args)
        catalog = validator.cache.get()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except SchemaUnavailableError as e:
        print(f"Schema unavailable: {e}", file=sys.stderr)
        return EXIT_SCHEMA_UNAVAILABLE
    except Exception as e:
        print(f"Catalog error: {e}", file=sys.stderr)
        return EXIT_INVALID

    if args.table:
        table = catalog.get_table(args.table)
        if table is None:
            print(f"Table '{args.table}' not found in catalog", file=sys.stderr)
            return EXIT_INVALID
        catalog = ConstraintCatalog(tables={args.table: table})

    if len(catalog) == 0:
        print("No tables found")
        return EXIT_OK

    print(export_catalog_yaml(catalog), end="")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
