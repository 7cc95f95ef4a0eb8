"""Latency sample storage and statistics.

:class:`SampleStore` keeps every sample in capped, lazily allocated
chunks; :func:`compute_statistics` summarises them as :class:`LatencyStats`.
"""

from __future__ import annotations

from latprobe.metrics.models import LatencyStats
from latprobe.metrics.stats import compute_statistics
from latprobe.metrics.store import Chunk, SampleStore

__all__ = [
    "Chunk",
    "LatencyStats",
    "SampleStore",
    "compute_statistics",
]
