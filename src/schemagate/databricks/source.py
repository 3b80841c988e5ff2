"""Schema source reading Unity Catalog information_schema views."""

import re
from typing import Any, Protocol

from schemagate.exceptions import ConfigError

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _validate_identifier(value: str, kind: str) -> str:
    if not value or not _IDENTIFIER_RE.match(value):
        raise ConfigError(f"Invalid {kind} identifier: {value!r}")
    return value


class SQLClient(Protocol):
    """Protocol for SQL client used by the schema source."""

    def fetchall(self, sql: str) -> list: ...


class DatabricksSchemaSource:
    """Fetch column, check and unique descriptor rows for every table in a schema.

    Each fetch issues one query covering all tables. Row field names match
    what build_catalog expects.
    """

    def __init__(self, client: SQLClient, catalog: str, schema: str) -> None:
        self._client = client
        self._catalog = _validate_identifier(catalog, "catalog")
        self._schema = _validate_identifier(schema, "schema")

    def fetch_column_constraints(self) -> list[Any]:
        sql = f"""
            SELECT table_name, column_name, data_type, is_nullable, column_default
            FROM {self._catalog}.information_schema.columns
            WHERE table_schema = '{self._schema}'
            ORDER BY table_name, ordinal_position
        """
        return self._client.fetchall(sql)

    def fetch_check_constraints(self) -> list[Any]:
        sql = f"""
            SELECT tc.table_name, tc.constraint_name, cc.check_clause AS definition
            FROM {self._catalog}.information_schema.table_constraints tc
            JOIN {self._catalog}.information_schema.check_constraints cc
              ON tc.constraint_schema = cc.constraint_schema
             AND tc.constraint_name = cc.constraint_name
            WHERE tc.table_schema = '{self._schema}'
              AND tc.constraint_type = 'CHECK'
            ORDER BY tc.table_name, tc.constraint_name
        """
        return self._client.fetchall(sql)

    def fetch_unique_constraints(self) -> list[Any]:
        sql = f"""
            SELECT tc.table_name, tc.constraint_name,
                   array_join(
                       transform(
                           array_sort(collect_list(struct(kcu.ordinal_position, kcu.column_name))),
                           x -> x.column_name
                       ),
                       ','
                   ) AS column_names
            FROM {self._catalog}.information_schema.table_constraints tc
            JOIN {self._catalog}.information_schema.key_column_usage kcu
              ON tc.constraint_schema = kcu.constraint_schema
             AND tc.constraint_name = kcu.constraint_name
            WHERE tc.table_schema = '{self._schema}'
              AND tc.constraint_type IN ('PRIMARY KEY', 'UNIQUE')
            GROUP BY tc.table_name, tc.constraint_name
            ORDER BY tc.table_name, tc.constraint_name
        """
        return self._client.fetchall(sql)
