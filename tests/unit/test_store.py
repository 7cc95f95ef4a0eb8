"""Tests for SampleStore and Chunk."""

from __future__ import annotations

import logging
import math

import numpy as np
import pytest

from latprobe.metrics.store import Chunk, SampleStore


def _filled_store(samples: list[int], chunk_size: int = 4, max_chunks: int = 8) -> SampleStore:
    store = SampleStore(chunk_size=chunk_size, max_chunks=max_chunks)
    for sample in samples:
        store.record(sample)
    return store


class TestChunk:
    def test_empty_chunk(self):
        chunk = Chunk(3)
        assert chunk.capacity == 3
        assert len(chunk) == 0
        assert not chunk.is_full
        assert chunk.samples().tolist() == []

    def test_fills_up(self):
        chunk = Chunk(2)
        chunk.append(5)
        assert not chunk.is_full
        chunk.append(-7)
        assert chunk.is_full
        assert chunk.samples().tolist() == [5, -7]

    def test_samples_view_is_read_only(self):
        chunk = Chunk(2)
        chunk.append(1)
        view = chunk.samples()
        with pytest.raises(ValueError):
            view[0] = 99


class TestSampleStore:
    def test_empty_store(self):
        store = SampleStore()
        assert store.total_count() == 0
        assert len(store) == 0
        assert store.chunk_count == 0
        assert store.dropped_count == 0
        assert list(store.chunks()) == []

    def test_invalid_sizes_raise(self):
        with pytest.raises(ValueError, match="chunk_size"):
            SampleStore(chunk_size=0)
        with pytest.raises(ValueError, match="max_chunks"):
            SampleStore(max_chunks=-1)

    def test_total_count_matches_record_calls(self):
        store = _filled_store(list(range(10)))
        assert store.total_count() == 10
        assert store.total_count() == sum(len(c) for c in store.chunks())

    def test_chunks_allocated_lazily(self):
        store = SampleStore(chunk_size=4, max_chunks=8)
        assert store.chunk_count == 0
        store.record(1)
        assert store.chunk_count == 1
        for i in range(3):
            store.record(i)
        # Last chunk is exactly full; the next one waits for the next sample
        assert store.chunk_count == 1
        store.record(42)
        assert store.chunk_count == 2

    def test_statistics_does_not_allocate(self):
        store = _filled_store([1, 2, 3, 4])
        store.statistics()
        assert store.chunk_count == 1

    def test_preserves_arrival_order_across_chunks(self):
        samples = [7, -3, 1000, 0, 12, 5, -1, 9, 44]
        store = _filled_store(samples, chunk_size=4)
        flattened = np.concatenate([c.samples() for c in store.chunks()])
        assert flattened.tolist() == samples

    def test_full_chunks_are_not_mutated(self):
        store = _filled_store([1, 2, 3, 4, 5, 6], chunk_size=4)
        first = next(store.chunks())
        before = first.samples().copy()
        for i in range(10):
            store.record(100 + i)
        assert first.samples().tolist() == before.tolist()
        assert len(first) == 4

    def test_ceiling_plateaus(self):
        store = SampleStore(chunk_size=3, max_chunks=2)
        assert store.capacity == 6
        for i in range(20):
            store.record(i)
        assert store.total_count() == 6
        assert store.chunk_count == 2
        assert store.dropped_count == 14

    def test_samples_after_ceiling_do_not_change_statistics(self):
        store = _filled_store([10, 20, 30, 40], chunk_size=2, max_chunks=2)
        before = store.statistics()
        store.record(1_000_000)
        store.record(-1_000_000)
        assert store.statistics() == before
        assert store.total_count() == 4

    def test_zero_chunk_ceiling_drops_everything(self):
        store = SampleStore(chunk_size=4, max_chunks=0)
        store.record(1)
        assert store.total_count() == 0
        assert store.dropped_count == 1
        assert math.isnan(store.statistics().mean)

    def test_stores_negative_and_large_values_unchanged(self):
        store = _filled_store([-5_000_000, 3_600_000_000_000])
        assert next(store.chunks()).samples().tolist() == [-5_000_000, 3_600_000_000_000]

    def test_statistics_delegates_over_all_chunks(self):
        store = _filled_store([0, 100], chunk_size=1)
        stats = store.statistics()
        assert stats.n == 2
        assert stats.mean == 50.0
        assert stats.rho == pytest.approx(-1.0)

    def test_ceiling_drops_are_not_logged(self):
        records: list[logging.LogRecord] = []
        handler = logging.Handler(logging.DEBUG)
        handler.emit = records.append  # type: ignore[method-assign]
        root = logging.getLogger("latprobe")
        old_level = root.level
        root.addHandler(handler)
        root.setLevel(logging.DEBUG)
        try:
            store = _filled_store(list(range(10)), chunk_size=2, max_chunks=2)
        finally:
            root.removeHandler(handler)
            root.setLevel(old_level)

        assert store.dropped_count == 6
        assert records == []
