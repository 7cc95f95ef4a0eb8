"""Single-threaded receive loop multiplexing datagrams against a report timer.

The loop blocks in one place: a selector wait on the UDP socket with a
timeout of ``interval`` seconds. Every wake rearms the timer, so a report
is due only after ``interval`` seconds of silence, and it is skipped when
no datagram arrived since the previous report.
"""

from __future__ import annotations

import selectors
import socket
import threading
from typing import TYPE_CHECKING

from latprobe._internal.config import DEFAULT_REPORT_INTERVAL
from latprobe._internal.errors import ReceiveError, SocketSetupError, WireFormatError
from latprobe._internal.logging import get_logger
from latprobe.probe import wire

if TYPE_CHECKING:
    from latprobe._internal.types import Clock
    from latprobe.metrics.store import SampleStore
    from latprobe.probe.reporter import StatisticsReporter

logger = get_logger("probe.receiver")

# Large enough for any UDP payload, so no platform truncates the read.
_RECV_BUFSIZE = 65535


def open_socket(host: str, port: int) -> socket.socket:
    """Create a UDP socket bound to ``(host, port)``.

    One attempt, no retries.

    Raises:
        SocketSetupError: If the socket cannot be created or bound.
    """
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    except OSError as exc:
        msg = f"opening datagram socket: {exc}"
        raise SocketSetupError(msg) from exc

    try:
        sock.bind((host, port))
    except OSError as exc:
        sock.close()
        msg = f"binding datagram socket to {host}:{port}: {exc}"
        raise SocketSetupError(msg) from exc

    return sock


class ReceiverLoop:
    """Receives timestamped datagrams, records their latency and reports.

    Attributes:
        interval: Reporting interval in seconds.
    """

    def __init__(
        self,
        sock: socket.socket,
        store: SampleStore,
        reporter: StatisticsReporter,
        *,
        interval: float = DEFAULT_REPORT_INTERVAL,
        clock: Clock = wire.now,
    ) -> None:
        """Initialize the loop.

        Args:
            sock: Bound UDP socket. The loop does not close it.
            store: Store that receives one sample per datagram.
            reporter: Reporter invoked when a quiet interval elapses.
            interval: Seconds of socket silence before reporting.
            clock: Source of receive timestamps.

        Raises:
            ValueError: If ``interval`` is not positive.
        """
        if interval <= 0:
            msg = f"interval must be positive, got {interval}"
            raise ValueError(msg)

        self._sock = sock
        self._store = store
        self._reporter = reporter
        self._clock = clock
        self.interval = interval

        self._stop_event = threading.Event()
        self._received = 0
        self._last_reported = 0
        self._short = 0

    @property
    def received_count(self) -> int:
        """Return the number of datagrams recorded so far."""
        return self._received

    @property
    def last_reported(self) -> int:
        """Return the received count at the time of the last report."""
        return self._last_reported

    @property
    def short_count(self) -> int:
        """Return the number of datagrams too short to carry a timestamp.

        These are neither recorded nor counted in ``received_count``, unlike
        the C probe this replaces, which counted them and recorded a sample
        computed from whatever the short read left in its timestamp buffer.
        """
        return self._short

    def stop(self) -> None:
        """Ask the loop to exit after its current wait returns."""
        self._stop_event.set()

    def run(self) -> int:
        """Receive and report until stopped or the socket fails.

        Returns:
            The received count when the loop was stopped.

        Raises:
            ReceiveError: If a read fails or returns an empty datagram.
        """
        self._sock.setblocking(False)
        selector = selectors.DefaultSelector()
        selector.register(self._sock, selectors.EVENT_READ)
        logger.info("Listening on %s:%d", *self._sock.getsockname()[:2])

        try:
            while not self._stop_event.is_set():
                try:
                    events = selector.select(timeout=self.interval)
                except OSError as exc:
                    logger.warning("select failed, retrying: %s", exc)
                    continue

                if self._stop_event.is_set():
                    break
                if events:
                    self._on_readable()
                else:
                    self._on_timeout()
        finally:
            selector.close()

        return self._received

    def _on_readable(self) -> None:
        """Read one datagram and record its latency."""
        try:
            payload, peer = self._sock.recvfrom(_RECV_BUFSIZE)
        except (BlockingIOError, InterruptedError):
            # Spurious wake, e.g. a datagram dropped on checksum failure.
            return
        except OSError as exc:
            msg = f"receiving datagram packet: {exc}"
            raise ReceiveError(msg) from exc

        if not payload:
            msg = "receiving datagram packet: empty datagram"
            raise ReceiveError(msg)

        received = wire.Timestamp(*self._clock())
        try:
            sent = wire.decode_timestamp(payload)
        except WireFormatError as exc:
            self._short += 1
            logger.debug("Ignoring datagram from %s: %s", peer, exc, extra={"peer": peer})
            return

        self._store.record(wire.delay_us(sent, received))
        self._received += 1

    def _on_timeout(self) -> None:
        """Report if anything arrived since the last report."""
        if self._received == self._last_reported:
            return
        self._reporter.report(self._received)
        self._last_reported = self._received
