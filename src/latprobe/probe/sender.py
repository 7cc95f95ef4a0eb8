"""Test-traffic generator emitting timestamped probe datagrams."""

from __future__ import annotations

import socket
import time
from typing import TYPE_CHECKING

from latprobe._internal.logging import get_logger
from latprobe.probe import wire

if TYPE_CHECKING:
    from latprobe._internal.types import Clock

logger = get_logger("probe.sender")

DEFAULT_PAYLOAD_SIZE = 72


class TimestampSender:
    """Sends UDP datagrams stamped with the current wall-clock time.

    Each payload starts with the native ``@ll`` timestamp and is
    zero-padded to ``size`` bytes.

    Attributes:
        host: Destination host.
        port: Destination UDP port.
        size: Payload size in bytes.
        rate: Datagrams per second, or None to send as fast as possible.
    """

    def __init__(
        self,
        host: str,
        port: int,
        *,
        size: int = DEFAULT_PAYLOAD_SIZE,
        rate: float | None = None,
        clock: Clock = wire.now,
    ) -> None:
        """Initialize the sender.

        Raises:
            ValueError: If ``size`` cannot hold a timestamp or ``rate`` is
                not positive.
        """
        if size < wire.TIMESTAMP_SIZE:
            msg = f"size must be >= {wire.TIMESTAMP_SIZE}, got {size}"
            raise ValueError(msg)
        if rate is not None and rate <= 0:
            msg = f"rate must be positive, got {rate}"
            raise ValueError(msg)

        self.host = host
        self.port = port
        self.size = size
        self.rate = rate
        self._clock = clock

    def send(self, count: int) -> int:
        """Send ``count`` datagrams, pacing them when a rate is set.

        Returns:
            Number of datagrams sent.
        """
        interval = 1.0 / self.rate if self.rate else 0.0
        sent = 0
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            next_send = time.monotonic()
            for _ in range(count):
                if interval:
                    delay = next_send - time.monotonic()
                    if delay > 0:
                        time.sleep(delay)
                    next_send += interval
                payload = wire.encode_timestamp(wire.Timestamp(*self._clock()), self.size)
                sock.sendto(payload, (self.host, self.port))
                sent += 1

        logger.info("Sent %d datagrams to %s:%d", sent, self.host, self.port)
        return sent
