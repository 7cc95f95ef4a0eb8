"""Timestamp codec for probe datagrams.

A probe datagram starts with the sender's wall-clock time as two C
``long`` fields, whole seconds then microseconds, in the host's native
width and byte order (the layout of ``struct timeval`` on common
platforms). Sender and receiver must share word size and endianness.
Anything after the timestamp is padding and is ignored.
"""

from __future__ import annotations

import struct
import time
from typing import NamedTuple

from latprobe._internal.errors import WireFormatError

TIMESTAMP_FORMAT = "@ll"
TIMESTAMP_SIZE = struct.calcsize(TIMESTAMP_FORMAT)

_codec = struct.Struct(TIMESTAMP_FORMAT)


class Timestamp(NamedTuple):
    """Wall-clock time split into whole seconds and microseconds."""

    seconds: int
    microseconds: int


def now() -> Timestamp:
    """Return the current wall-clock time with microsecond resolution."""
    seconds, micros = divmod(time.time_ns() // 1000, 1_000_000)
    return Timestamp(seconds, micros)


def decode_timestamp(payload: bytes) -> Timestamp:
    """Read the timestamp at the start of a datagram payload.

    Args:
        payload: Datagram bytes. Only the first ``TIMESTAMP_SIZE`` are read.

    Returns:
        The embedded send time.

    Raises:
        WireFormatError: If the payload is shorter than a timestamp.
    """
    if len(payload) < TIMESTAMP_SIZE:
        msg = f"payload of {len(payload)} bytes is shorter than a {TIMESTAMP_SIZE}-byte timestamp"
        raise WireFormatError(msg)
    return Timestamp(*_codec.unpack_from(payload))


def encode_timestamp(ts: Timestamp, size: int = TIMESTAMP_SIZE) -> bytes:
    """Build a datagram payload carrying ``ts``, zero-padded to ``size`` bytes.

    Raises:
        ValueError: If ``size`` cannot hold the timestamp.
    """
    if size < TIMESTAMP_SIZE:
        msg = f"size must be >= {TIMESTAMP_SIZE}, got {size}"
        raise ValueError(msg)
    return _codec.pack(ts.seconds, ts.microseconds).ljust(size, b"\0")


def delay_us(sent: Timestamp, received: Timestamp) -> int:
    """Return ``received - sent`` in microseconds. Negative under clock skew."""
    return (received.seconds - sent.seconds) * 1_000_000 + received.microseconds - sent.microseconds
