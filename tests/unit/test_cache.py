"""Tests for ConstraintCache."""

import threading
import time
from unittest.mock import MagicMock

import pytest

from schemagate.exceptions import MalformedCatalogInputError, SchemaUnavailableError
from schemagate.schema.cache import DEFAULT_TTL_MS, ConstraintCache
from schemagate.schema.source import InMemorySchemaSource, SchemaSource
from tests.helpers import FakeClock, column_row, make_lead_source


class TestCacheHits:
    """Reads within the TTL do not touch the schema source."""

    def test_default_ttl_is_one_hour(self):
        assert DEFAULT_TTL_MS == 3_600_000
        assert ConstraintCache(make_lead_source()).ttl_ms == 3_600_000

    def test_first_get_refreshes(self):
        source = make_lead_source()
        cache = ConstraintCache(source, clock=FakeClock())

        catalog = cache.get()

        assert source.fetch_count == 1
        assert "lead_extensions" in catalog
        assert cache.entry.catalog is catalog

    def test_reads_within_ttl_fetch_once(self):
        source = make_lead_source()
        clock = FakeClock()
        cache = ConstraintCache(source, ttl_ms=1000, clock=clock)

        first = cache.get()
        for _ in range(10):
            clock.advance_ms(99)
            assert cache.get() is first

        assert source.fetch_count == 1

    def test_get_after_expiry_refreshes_once(self):
        source = make_lead_source()
        clock = FakeClock()
        cache = ConstraintCache(source, ttl_ms=1000, clock=clock)

        first = cache.get()
        clock.advance_ms(1000)
        second = cache.get()
        third = cache.get()

        assert source.fetch_count == 2
        assert second is not first
        assert third is second

    def test_invalidate_forces_refresh(self):
        source = make_lead_source()
        cache = ConstraintCache(source, clock=FakeClock())
        cache.get()

        cache.invalidate()
        assert cache.entry is None
        cache.get()

        assert source.fetch_count == 2

    def test_refresh_is_unconditional(self):
        source = make_lead_source()
        cache = ConstraintCache(source, clock=FakeClock())
        cache.get()
        cache.refresh()
        assert source.fetch_count == 2

    def test_rejects_non_positive_ttl(self):
        with pytest.raises(ValueError):
            ConstraintCache(make_lead_source(), ttl_ms=0)


class TestCacheFailures:
    def test_source_error_becomes_schema_unavailable(self):
        source = MagicMock(spec=SchemaSource)
        source.fetch_column_constraints.side_effect = ConnectionError("timeout")
        cache = ConstraintCache(source, clock=FakeClock())

        with pytest.raises(SchemaUnavailableError, match="timeout") as exc_info:
            cache.get()

        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_failed_refresh_does_not_serve_stale_catalog(self):
        source = MagicMock(spec=SchemaSource)
        source.fetch_column_constraints.return_value = [column_row("persons", "id", "uuid")]
        source.fetch_check_constraints.return_value = []
        source.fetch_unique_constraints.return_value = []
        clock = FakeClock()
        cache = ConstraintCache(source, ttl_ms=1000, clock=clock)
        cache.get()
        old_entry = cache.entry

        clock.advance_ms(1500)
        source.fetch_check_constraints.side_effect = RuntimeError("down")

        with pytest.raises(SchemaUnavailableError):
            cache.get()
        assert cache.entry is old_entry
        with pytest.raises(SchemaUnavailableError):
            cache.get()

    def test_malformed_rows_propagate_unwrapped(self):
        source = InMemorySchemaSource(columns=[{"column_name": "id", "data_type": "uuid"}])
        cache = ConstraintCache(source, clock=FakeClock())

        with pytest.raises(MalformedCatalogInputError):
            cache.get()
        assert cache.entry is None


class SlowSource(InMemorySchemaSource):
    """Source whose refresh blocks long enough for callers to pile up."""

    def __init__(self, *args, delay: float = 0.05, **kwargs):
        super().__init__(*args, **kwargs)
        self._delay = delay
        self._count_lock = threading.Lock()

    def fetch_column_constraints(self):
        with self._count_lock:
            self.fetch_count += 1
        time.sleep(self._delay)
        return list(self._columns)


class TestCacheConcurrency:
    """Concurrent callers on a cold or expired cache trigger one refresh."""

    def _hammer(self, cache: ConstraintCache, workers: int = 16) -> list:
        barrier = threading.Barrier(workers)
        results = []
        results_lock = threading.Lock()

        def worker():
            barrier.wait()
            catalog = cache.get()
            with results_lock:
                results.append(catalog)

        threads = [threading.Thread(target=worker) for _ in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        return results

    def test_cold_cache_single_refresh(self):
        source = SlowSource(columns=[column_row("persons", "id", "uuid")])
        cache = ConstraintCache(source, ttl_ms=60_000)

        results = self._hammer(cache)

        assert source.fetch_count == 1
        assert len(results) == 16
        assert all(r is results[0] for r in results)

    def test_expired_cache_single_refresh(self):
        source = SlowSource(columns=[column_row("persons", "id", "uuid")])
        clock = FakeClock()
        cache = ConstraintCache(source, ttl_ms=1000, clock=clock)
        first = cache.get()

        clock.advance_ms(5000)
        results = self._hammer(cache)

        assert source.fetch_count == 2
        assert all(r is results[0] for r in results)
        assert results[0] is not first
