"""Streaming statistics over chunked latency samples."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from latprobe.metrics.models import LatencyStats

if TYPE_CHECKING:
    from collections.abc import Iterable


def compute_statistics(segments: Iterable[np.ndarray]) -> LatencyStats:
    """Compute mean, stddev and lag-1 autocorrelation over sample segments.

    The segments are treated as one series in iteration order. The
    standard deviation uses the sum-of-squares form
    ``sqrt((sum(x**2) - n * mean**2) / (n - 1))``. The autocorrelation is
    ``sum((x[i] - mean) * (x[i-1] - mean)) / sum((x[i-1] - mean) ** 2)``
    over every sample, where the value preceding the first sample is the
    mean itself.

    Args:
        segments: Arrays of samples in arrival order. Each is walked once
            for the sums and once for the lag products.

    Returns:
        LatencyStats. See its docstring for the NaN cases.
    """
    parts = [seg for seg in segments if len(seg)]
    n = sum(len(seg) for seg in parts)
    if n == 0:
        return LatencyStats.empty()

    total = 0.0
    sum_squares = 0.0
    for seg in parts:
        total += float(np.sum(seg))
        sum_squares += float(np.dot(seg, seg))

    mean = total / n
    if n > 1:
        # Cancellation can leave a tiny negative residue for constant series.
        variance = (sum_squares - n * mean * mean) / (n - 1)
        stddev = math.sqrt(max(variance, 0.0))
    else:
        stddev = math.nan

    top = 0.0
    bottom = 0.0
    prev = mean
    for seg in parts:
        lagged = np.empty_like(seg)
        lagged[0] = prev
        lagged[1:] = seg[:-1]
        deviation = seg - mean
        lag_deviation = lagged - mean
        top += float(np.dot(deviation, lag_deviation))
        bottom += float(np.dot(lag_deviation, lag_deviation))
        prev = float(seg[-1])

    rho = top / bottom if bottom != 0.0 else math.nan
    return LatencyStats(mean=mean, stddev=stddev, rho=rho, n=n)
