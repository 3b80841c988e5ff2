"""Configuration management for schemagate."""

import os
from dataclasses import dataclass
from typing import Optional

from schemagate.exceptions import ConfigError
from schemagate.schema.cache import DEFAULT_TTL_MS


def parse_ttl_ms(value: object) -> int:
    """Parse a cache TTL in milliseconds.

    Raises:
        ConfigError: If the value is not a positive integer.
    """
    try:
        ttl = int(str(value).strip())
    except ValueError:
        raise ConfigError(
            f"Cache TTL must be an integer number of milliseconds, got {value!r}"
        ) from None
    if ttl <= 0:
        raise ConfigError(f"Cache TTL must be positive, got {ttl}")
    return ttl


@dataclass
class Config:
    """Configuration for schemagate."""

    cache_ttl_ms: int = DEFAULT_TTL_MS
    schema_path: Optional[str] = None
    catalog: Optional[str] = None
    schema: Optional[str] = None
    databricks_host: Optional[str] = None
    databricks_token: Optional[str] = None
    databricks_profile: Optional[str] = None

    @classmethod
    def from_env(
        cls,
        *,
        cache_ttl_ms: Optional[int] = None,
        schema_path: Optional[str] = None,
        catalog: Optional[str] = None,
        schema: Optional[str] = None,
        databricks_host: Optional[str] = None,
        databricks_token: Optional[str] = None,
        databricks_profile: Optional[str] = None,
    ) -> "Config":
        """Load configuration from env vars, with explicit overrides.

        Priority (highest to lowest):
        1. Explicit parameters (CLI args)
        2. Environment variables
        3. Defaults
        """

        def resolve(explicit, env_key):
            if explicit is not None:
                return explicit
            return os.environ.get(env_key)

        ttl = resolve(cache_ttl_ms, "SCHEMAGATE_CACHE_TTL_MS")

        host = resolve(databricks_host, "DATABRICKS_HOST")
        if host:
            host = host.strip()
            if host.startswith("https://"):
                host = host[8:]
            host = host.rstrip("/")

        return cls(
            cache_ttl_ms=DEFAULT_TTL_MS if ttl is None else parse_ttl_ms(ttl),
            schema_path=resolve(schema_path, "SCHEMAGATE_SCHEMA_PATH"),
            catalog=resolve(catalog, "SCHEMAGATE_CATALOG"),
            schema=resolve(schema, "SCHEMAGATE_SCHEMA"),
            databricks_host=host,
            databricks_token=resolve(databricks_token, "DATABRICKS_TOKEN"),
            databricks_profile=resolve(databricks_profile, "DATABRICKS_CONFIG_PROFILE"),
        )

    def validate_for_db_ops(self) -> None:
        """Validate that all required fields for live introspection are present.

        Host and token may come from a Databricks profile instead, so only
        catalog and schema are mandatory.

        Raises:
            ConfigError: If catalog or schema is missing.
        """
        missing = []
        if not self.catalog:
            missing.append("catalog (use --catalog or SCHEMAGATE_CATALOG)")
        if not self.schema:
            missing.append("schema (use --schema or SCHEMAGATE_SCHEMA)")

        if missing:
            raise ConfigError(
                "Missing required configuration:\n  - " + "\n  - ".join(missing)
            )

    def validate_for_offline(self) -> None:
        """Validate that a YAML schema path is configured.

        Raises:
            ConfigError: If schema_path is missing.
        """
        if not self.schema_path:
            raise ConfigError(
                "Missing required configuration:\n"
                "  - schema_path (use --schema-path or SCHEMAGATE_SCHEMA_PATH)"
            )
