"""Wiring helpers for hosts: build schema sources and validators from Config.

Extracts common setup from the CLI for reuse and testability.
"""

from pathlib import Path
from typing import Optional

from schemagate.config import Config
from schemagate.schema.cache import ConstraintCache
from schemagate.schema.loader import YamlSchemaSource
from schemagate.schema.source import SchemaSource
from schemagate.schema.validator import RecordValidator


def build_config_and_validate(
    *,
    catalog: Optional[str] = None,
    schema: Optional[str] = None,
    profile: Optional[str] = None,
) -> Config:
    """Load config from env and validate it for live introspection.

    Raises:
        ConfigError: If required configuration is missing.
    """
    config = Config.from_env(catalog=catalog, schema=schema, databricks_profile=profile)
    config.validate_for_db_ops()
    return config


def build_online_source(config: Config) -> SchemaSource:
    """Connect to Databricks and return an information_schema source.

    The returned source keeps its client connection open for the process
    lifetime so refreshes reuse it.

    Raises:
        ConfigError: If DB config is invalid.
    """
    from schemagate.databricks.client import DatabricksClient
    from schemagate.databricks.source import DatabricksSchemaSource

    config.validate_for_db_ops()

    client = DatabricksClient(
        host=config.databricks_host,
        token=config.databricks_token,
        profile=config.databricks_profile,
    )
    client.connect()
    return DatabricksSchemaSource(client, config.catalog, config.schema)


def build_offline_source(config: Config) -> SchemaSource:
    """Return a YAML-backed source for config.schema_path.

    Raises:
        ConfigError: If no schema path is configured.
    """
    config.validate_for_offline()
    return YamlSchemaSource(Path(config.schema_path))


def build_validator(config: Config, source: SchemaSource) -> RecordValidator:
    """Build a RecordValidator with its own cache.

    Hosts create one per process and share it across requests.
    """
    cache = ConstraintCache(source, ttl_ms=config.cache_ttl_ms)
    return RecordValidator(cache)
