"""Shared type aliases for latprobe."""

from __future__ import annotations

from collections.abc import Callable

# Wall-clock source returning (seconds, microseconds) since the epoch.
Clock = Callable[[], tuple[int, int]]
