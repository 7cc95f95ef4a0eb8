"""Configuration loading for latprobe."""

from __future__ import annotations

import os
from dataclasses import dataclass

from latprobe._internal.errors import ConfigError

DEFAULT_PORT = 5000
DEFAULT_HOST = "0.0.0.0"
DEFAULT_REPORT_INTERVAL = 10.0

# 8191 samples per chunk, 4097 chunks: a bit over 32M samples in total.
DEFAULT_CHUNK_SIZE = 8191
DEFAULT_MAX_CHUNKS = 4097


@dataclass(frozen=True)
class ProbeConfig:
    """Global latprobe configuration.

    Attributes:
        host: Local address the UDP socket binds to.
        port: Local UDP port to listen on.
        report_interval: Seconds of socket silence before a report is due.
        chunk_size: Samples held by one store chunk.
        max_chunks: Hard ceiling on the number of chunks in the store.
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    report_interval: float = DEFAULT_REPORT_INTERVAL
    chunk_size: int = DEFAULT_CHUNK_SIZE
    max_chunks: int = DEFAULT_MAX_CHUNKS


def _int_from_env(name: str, default: int, minimum: int) -> int:
    """Read integer ``name`` from the environment, enforcing ``minimum``."""
    raw = os.environ.get(name, str(default))
    try:
        value = int(raw)
    except ValueError:
        msg = f"{name} must be an integer, got: {raw!r}"
        raise ConfigError(msg) from None

    if value < minimum:
        msg = f"{name} must be >= {minimum}, got: {value}"
        raise ConfigError(msg)
    return value


def load_config() -> ProbeConfig:
    """Load configuration from environment variables with defaults.

    Environment variables:
        LATPROBE_HOST: Bind address (default: 0.0.0.0).
        LATPROBE_PORT: UDP port (default: 5000).
        LATPROBE_INTERVAL: Reporting interval in seconds (default: 10.0).
        LATPROBE_CHUNK_SIZE: Samples per store chunk (default: 8191).
        LATPROBE_MAX_CHUNKS: Maximum store chunks (default: 4097).

    Returns:
        Populated ProbeConfig instance.

    Raises:
        ConfigError: If an environment variable has an invalid value.
    """
    port = _int_from_env("LATPROBE_PORT", DEFAULT_PORT, 0)
    if port > 65535:
        msg = f"LATPROBE_PORT must be <= 65535, got: {port}"
        raise ConfigError(msg)

    interval_str = os.environ.get("LATPROBE_INTERVAL", str(DEFAULT_REPORT_INTERVAL))
    try:
        interval = float(interval_str)
    except ValueError:
        msg = f"LATPROBE_INTERVAL must be a number, got: {interval_str!r}"
        raise ConfigError(msg) from None

    if interval <= 0:
        msg = f"LATPROBE_INTERVAL must be positive, got: {interval}"
        raise ConfigError(msg)

    return ProbeConfig(
        host=os.environ.get("LATPROBE_HOST", DEFAULT_HOST),
        port=port,
        report_interval=interval,
        chunk_size=_int_from_env("LATPROBE_CHUNK_SIZE", DEFAULT_CHUNK_SIZE, 1),
        max_chunks=_int_from_env("LATPROBE_MAX_CHUNKS", DEFAULT_MAX_CHUNKS, 0),
    )
