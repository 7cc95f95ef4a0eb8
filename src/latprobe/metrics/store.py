"""Chunked, append-only in-memory storage for latency samples.

Samples live in fixed-capacity numpy buffers allocated one at a time as the
previous buffer fills. The number of buffers is capped, which puts a hard
bound on memory: once the last permitted chunk is full, further samples are
dropped without error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from latprobe._internal.config import DEFAULT_CHUNK_SIZE, DEFAULT_MAX_CHUNKS
from latprobe.metrics.stats import compute_statistics

if TYPE_CHECKING:
    from collections.abc import Iterator

    from latprobe.metrics.models import LatencyStats

# float64 holds every integer up to 2**53 exactly (about 285 years in
# microseconds) and accepts garbage timestamps without overflowing.
SAMPLE_DTYPE = np.float64


class Chunk:
    """A fixed-capacity block of samples plus its fill count.

    Only the store appends to a chunk, and only while it is the newest
    chunk and not yet full.
    """

    __slots__ = ("_buffer", "count")

    def __init__(self, capacity: int) -> None:
        self._buffer = np.empty(capacity, dtype=SAMPLE_DTYPE)
        self.count = 0

    @property
    def capacity(self) -> int:
        """Return the number of samples the chunk can hold."""
        return len(self._buffer)

    @property
    def is_full(self) -> bool:
        """Return True once every slot is used."""
        return self.count >= len(self._buffer)

    def append(self, sample: int) -> None:
        """Write ``sample`` into the next free slot."""
        self._buffer[self.count] = sample
        self.count += 1

    def samples(self) -> np.ndarray:
        """Return a read-only view of the filled part of the chunk."""
        view = self._buffer[: self.count]
        view.flags.writeable = False
        return view

    def __len__(self) -> int:
        """Return the number of samples held."""
        return self.count


class SampleStore:
    """Append-only store of latency samples in microseconds.

    Not thread-safe: the receive loop records samples and the reporter
    reads them from the same thread. An embedding that records and reports
    from different threads must serialise ``record`` against
    ``statistics`` and ``total_count`` itself.

    Attributes:
        chunk_size: Samples per chunk.
        max_chunks: Maximum number of chunks ever allocated.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_chunks: int = DEFAULT_MAX_CHUNKS,
    ) -> None:
        """Initialize an empty store.

        Args:
            chunk_size: Samples per chunk. Must be at least 1.
            max_chunks: Chunk ceiling. Zero makes a store that drops
                everything.

        Raises:
            ValueError: If ``chunk_size`` < 1 or ``max_chunks`` < 0.
        """
        if chunk_size < 1:
            msg = f"chunk_size must be >= 1, got {chunk_size}"
            raise ValueError(msg)
        if max_chunks < 0:
            msg = f"max_chunks must be >= 0, got {max_chunks}"
            raise ValueError(msg)

        self.chunk_size = chunk_size
        self.max_chunks = max_chunks
        self._chunks: list[Chunk] = []
        self._total = 0
        self._dropped = 0

    @property
    def capacity(self) -> int:
        """Return the most samples the store will ever hold."""
        return self.chunk_size * self.max_chunks

    @property
    def chunk_count(self) -> int:
        """Return the number of chunks allocated so far."""
        return len(self._chunks)

    @property
    def dropped_count(self) -> int:
        """Return the number of samples discarded at the ceiling."""
        return self._dropped

    def record(self, sample: int) -> None:
        """Append a sample, allocating a new chunk when the last one is full.

        At the chunk ceiling the sample is discarded. A failed chunk
        allocation raises ``MemoryError``, which is not handled here.

        Args:
            sample: Latency in microseconds. May be negative.
        """
        if not self._chunks or self._chunks[-1].is_full:
            if len(self._chunks) >= self.max_chunks:
                self._dropped += 1
                return
            self._chunks.append(Chunk(self.chunk_size))

        self._chunks[-1].append(sample)
        self._total += 1

    def total_count(self) -> int:
        """Return the number of samples held.

        Kept as a running total that always equals the sum of the chunk
        counts.
        """
        return self._total

    def chunks(self) -> Iterator[Chunk]:
        """Iterate over the allocated chunks, oldest first."""
        return iter(self._chunks)

    def statistics(self) -> LatencyStats:
        """Compute mean, standard deviation and lag-1 autocorrelation.

        Returns:
            LatencyStats over every stored sample in arrival order.
        """
        return compute_statistics(chunk.samples() for chunk in self._chunks)

    def __len__(self) -> int:
        """Return the number of samples held."""
        return self._total
