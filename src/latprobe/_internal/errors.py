"""Custom exception hierarchy for latprobe."""

from __future__ import annotations


class LatprobeError(Exception):
    """Base exception for all latprobe errors.

    All custom exceptions in latprobe inherit from this class, making it
    easy to catch any probe-specific error with a single except clause.
    """


class ConfigError(LatprobeError):
    """Raised when configuration is invalid or missing.

    Examples:
        - An environment variable has a non-numeric value.
        - A port number is outside 0..65535.
    """


class WireFormatError(LatprobeError):
    """Raised when a datagram payload cannot hold a timestamp.

    Examples:
        - The payload is shorter than the two native ``long`` fields.
    """


class ReceiveError(LatprobeError):
    """Raised when the receiving socket fails and the loop must stop.

    Examples:
        - ``recvfrom`` returned a zero-length datagram.
        - ``recvfrom`` raised ``OSError``.
    """


class SocketSetupError(LatprobeError):
    """Raised when the listening socket cannot be created or bound.

    Examples:
        - The port is already in use.
        - Binding a privileged port without permission.
    """
