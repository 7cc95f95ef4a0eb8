"""Result dataclasses for latency statistics."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class LatencyStats:
    """Aggregate statistics over every sample in a store.

    Degenerate inputs produce NaN rather than raising: ``stddev`` is NaN
    for fewer than two samples, ``rho`` is NaN when its denominator is zero
    (no samples, one sample, or all samples equal), and ``mean`` is NaN for
    an empty store.

    Attributes:
        mean: Arithmetic mean latency in microseconds.
        stddev: Sample standard deviation (n - 1 denominator) in microseconds.
        rho: Lag-1 autocorrelation, seeded with the mean as the value
            preceding the first sample.
        n: Number of samples the statistics cover.
    """

    mean: float
    stddev: float
    rho: float
    n: int

    @classmethod
    def empty(cls) -> LatencyStats:
        """Statistics for a store holding no samples."""
        return cls(mean=math.nan, stddev=math.nan, rho=math.nan, n=0)
