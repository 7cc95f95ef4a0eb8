"""Console reporting of latency statistics."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

from latprobe._internal.logging import get_logger

if TYPE_CHECKING:
    from latprobe.metrics.models import LatencyStats
    from latprobe.metrics.store import SampleStore

logger = get_logger("probe.reporter")


def format_report(received_count: int, stats: LatencyStats) -> str:
    """Render one report line (without the trailing newline).

    Floats use six-wide, four-decimal fixed point; NaN renders as ``nan``.
    """
    return (
        f"{received_count} packets, {stats.n} entries: "
        f"mu {stats.mean:6.4f} sigma {stats.stddev:6.4f} rho {stats.rho:6.4f}"
    )


class StatisticsReporter:
    """Prints store statistics as a single flushed line per report."""

    def __init__(self, store: SampleStore, stream: TextIO | None = None) -> None:
        """Initialize the reporter.

        Args:
            store: Store whose statistics are reported.
            stream: Output stream. Defaults to ``sys.stdout`` looked up at
                report time, so redirection and test capture both work.
        """
        self._store = store
        self._stream = stream

    def report(self, received_count: int) -> None:
        """Compute statistics over the whole store and print them.

        Args:
            received_count: Datagrams received so far, including any the
                store dropped at its ceiling.
        """
        stats = self._store.statistics()
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(format_report(received_count, stats) + "\n")
        stream.flush()
        logger.debug(
            "Reported %d packets",
            received_count,
            extra={"packets": received_count, "entries": stats.n},
        )
