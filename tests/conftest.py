"""Shared test fixtures for the latprobe test suite."""

from __future__ import annotations

import io
import socket
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

import pytest

from latprobe.metrics.store import SampleStore
from latprobe.probe.receiver import ReceiverLoop
from latprobe.probe.reporter import StatisticsReporter

if TYPE_CHECKING:
    from collections.abc import Iterator


# =============================================================================
# Pytest configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-apply markers based on test directory structure."""
    for item in items:
        test_path = str(item.fspath)
        if "/unit/" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/e2e/" in test_path:
            item.add_marker(pytest.mark.e2e)


# =============================================================================
# Network utilities
# =============================================================================


def get_free_udp_port() -> int:
    """Find an available UDP port on localhost."""
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def free_udp_port() -> int:
    """A UDP port that was free a moment ago."""
    return get_free_udp_port()


# =============================================================================
# Running probe
# =============================================================================


@dataclass
class RunningProbe:
    """A receiver loop running in a background thread on localhost."""

    address: tuple[str, int]
    store: SampleStore
    loop: ReceiverLoop
    output: io.StringIO
    errors: list[BaseException]

    def report_lines(self) -> list[str]:
        return [line for line in self.output.getvalue().splitlines() if line]


@pytest.fixture
def running_probe() -> Iterator[RunningProbe]:
    """Receiver loop with a 0.3s reporting interval on an ephemeral port.

    Report lines are captured in ``output``; any exception raised by
    ``run()`` is collected in ``errors``.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    store = SampleStore(chunk_size=16, max_chunks=8)
    output = io.StringIO()
    loop = ReceiverLoop(sock, store, StatisticsReporter(store, output), interval=0.3)
    errors: list[BaseException] = []

    def _target() -> None:
        try:
            loop.run()
        except Exception as exc:  # noqa: BLE001
            errors.append(exc)

    thread = threading.Thread(target=_target, daemon=True)
    thread.start()

    yield RunningProbe(sock.getsockname(), store, loop, output, errors)

    loop.stop()
    thread.join(timeout=5.0)
    sock.close()
