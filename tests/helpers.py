"""Shared test helpers for schemagate tests."""

from schemagate.schema.cache import ConstraintCache
from schemagate.schema.source import InMemorySchemaSource
from schemagate.schema.validator import RecordValidator

READINESS_CHECK = "((readiness_score >= 1) AND (readiness_score <= 10))"


class FakeRow:
    """Mock row from DatabricksClient.fetchall().

    Supports dict-like access via __getitem__, .get(), and .asDict().
    """

    def __init__(self, data: dict):
        self._data = data

    def __getitem__(self, key):
        return self._data[key]

    def get(self, key, default=None):
        return self._data.get(key, default)

    def asDict(self):
        return self._data


class FakeClock:
    """Manually advanced monotonic clock, in seconds."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000


def column_row(
    table: str,
    column: str,
    data_type: str = "text",
    nullable: bool = True,
    default: str | None = None,
) -> dict:
    """Build an information_schema.columns-style row."""
    return {
        "table_name": table,
        "column_name": column,
        "data_type": data_type,
        "is_nullable": "YES" if nullable else "NO",
        "column_default": default,
    }


def check_row(table: str, name: str, definition: str) -> dict:
    return {"table_name": table, "constraint_name": name, "definition": definition}


def unique_row(table: str, name: str, column_names: str) -> dict:
    return {"table_name": table, "constraint_name": name, "column_names": column_names}


def make_lead_source() -> InMemorySchemaSource:
    """Source describing a small slice of the lead-management schema."""
    return InMemorySchemaSource(
        columns=[
            column_row("lead_extensions", "readiness_score", "integer", nullable=False),
            column_row("persons", "id", "uuid", nullable=False, default="gen_random_uuid()"),
            column_row("persons", "first_name", "text", nullable=False),
            column_row("persons", "email", "character varying"),
            column_row("persons", "tags", "text[]"),
            column_row("persons", "metadata", "jsonb", default="'{}'::jsonb"),
            column_row("persons", "is_active", "boolean", nullable=False, default="true"),
            column_row("persons", "created_at", "timestamp with time zone"),
            column_row("persons", "lead_score", "numeric"),
        ],
        checks=[
            check_row("lead_extensions", "lead_extensions_readiness_score_check", READINESS_CHECK),
        ],
        uniques=[
            unique_row("persons", "persons_email_key", "email"),
            unique_row("relationships", "relationships_pair_key", "person_a_id, person_b_id"),
        ],
    )


def make_validator(
    source: InMemorySchemaSource | None = None,
    ttl_ms: int = 60_000,
    clock: FakeClock | None = None,
) -> RecordValidator:
    """Create a RecordValidator over an isolated cache."""
    cache = ConstraintCache(
        source or make_lead_source(),
        ttl_ms=ttl_ms,
        clock=clock or FakeClock(),
    )
    return RecordValidator(cache)
