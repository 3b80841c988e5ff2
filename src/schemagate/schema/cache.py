"""Time-to-live cache around the constraint catalog."""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from schemagate.exceptions import SchemaUnavailableError
from schemagate.schema.catalog import build_catalog
from schemagate.schema.models import ConstraintCatalog
from schemagate.schema.source import SchemaSource

logger = logging.getLogger(__name__)

__all__ = ["DEFAULT_TTL_MS", "CacheEntry", "ConstraintCache"]

DEFAULT_TTL_MS = 60 * 60 * 1000


@dataclass(frozen=True)
class CacheEntry:
    """A built catalog and the clock reading (seconds) it was built at."""

    catalog: ConstraintCatalog
    built_at: float


class ConstraintCache:
    """Holds one ConstraintCatalog and rebuilds it from a SchemaSource on expiry.

    Reads of a fresh entry take no lock. The check-refresh-install sequence
    runs under a lock, so concurrent callers hitting an expired entry trigger
    a single refresh and then share its result. Entries are replaced with a
    single assignment and never mutated.

    A failed refresh raises SchemaUnavailableError and leaves the previous
    entry in place, but the stale catalog is never served: the next get()
    retries the refresh.
    """

    def __init__(
        self,
        source: SchemaSource,
        ttl_ms: int = DEFAULT_TTL_MS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_ms <= 0:
            raise ValueError(f"ttl_ms must be positive, got {ttl_ms}")
        self._source = source
        self._ttl_ms = ttl_ms
        self._clock = clock
        self._entry: Optional[CacheEntry] = None
        self._lock = threading.Lock()

    @property
    def ttl_ms(self) -> int:
        return self._ttl_ms

    @property
    def entry(self) -> Optional[CacheEntry]:
        """The current entry, or None before the first refresh."""
        return self._entry

    def _is_fresh(self, entry: Optional[CacheEntry]) -> bool:
        if entry is None:
            return False
        return (self._clock() - entry.built_at) * 1000 < self._ttl_ms

    def get(self) -> ConstraintCatalog:
        """Return the cached catalog, refreshing it first if expired or missing.

        Raises:
            SchemaUnavailableError: If a needed refresh fails.
            MalformedCatalogInputError: If the source returns malformed rows.
        """
        entry = self._entry
        if self._is_fresh(entry):
            return entry.catalog

        with self._lock:
            entry = self._entry
            if self._is_fresh(entry):
                return entry.catalog
            return self._refresh_locked()

    def refresh(self) -> ConstraintCatalog:
        """Rebuild the catalog from the schema source unconditionally."""
        with self._lock:
            return self._refresh_locked()

    def invalidate(self) -> None:
        """Drop the current entry so the next get() refreshes."""
        with self._lock:
            self._entry = None

    def _refresh_locked(self) -> ConstraintCatalog:
        started = self._clock()
        try:
            columns = self._source.fetch_column_constraints()
            checks = self._source.fetch_check_constraints()
            uniques = self._source.fetch_unique_constraints()
        except SchemaUnavailableError:
            logger.error("Error loading schema constraints", exc_info=True)
            raise
        except Exception as e:
            logger.error(f"Error loading schema constraints: {e}")
            raise SchemaUnavailableError(
                f"Schema source failed during refresh: {e}"
            ) from e

        catalog = build_catalog(columns, checks, uniques)
        built_at = self._clock()
        self._entry = CacheEntry(catalog=catalog, built_at=built_at)
        logger.info(
            f"Loaded schema constraints for {len(catalog)} tables "
            f"in {(built_at - started) * 1000:.0f} ms"
        )
        return catalog
