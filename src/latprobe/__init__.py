"""latprobe — passive one-way UDP latency probe."""

from __future__ import annotations

from latprobe.metrics.models import LatencyStats
from latprobe.metrics.store import SampleStore
from latprobe.probe.receiver import ReceiverLoop, open_socket
from latprobe.probe.reporter import StatisticsReporter
from latprobe.probe.sender import TimestampSender

__version__ = "0.1.0"

__all__ = [
    "LatencyStats",
    "ReceiverLoop",
    "SampleStore",
    "StatisticsReporter",
    "TimestampSender",
    "open_socket",
]
