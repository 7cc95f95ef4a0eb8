"""``latprobe listen`` — run the probe until the socket fails or Ctrl-C."""

from __future__ import annotations

import logging
from dataclasses import replace

import typer
from rich.console import Console

from latprobe._internal.config import load_config
from latprobe._internal.errors import LatprobeError, ReceiveError
from latprobe._internal.logging import setup_logging
from latprobe.metrics.store import SampleStore
from latprobe.probe.receiver import ReceiverLoop, open_socket
from latprobe.probe.reporter import StatisticsReporter

console = Console(stderr=True)


def listen_cmd(
    port: int | None = typer.Argument(
        None,
        help="UDP port to listen on (default: $LATPROBE_PORT or 5000).",
        min=0,
        max=65535,
        show_default=False,
    ),
    interval: float | None = typer.Option(
        None,
        "--interval",
        "-i",
        help="Seconds of silence before a report is printed (default: 10).",
        min=0.001,
    ),
    chunk_size: int | None = typer.Option(
        None,
        "--chunk-size",
        help="Samples per store chunk (default: 8191).",
        min=1,
    ),
    max_chunks: int | None = typer.Option(
        None,
        "--max-chunks",
        help="Maximum store chunks; samples beyond the ceiling are dropped (default: 4097).",
        min=0,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Emit diagnostics as JSON lines on stderr.",
    ),
) -> None:
    """Receive timestamped datagrams and periodically print latency statistics."""
    setup_logging(logging.DEBUG if verbose else logging.WARNING, json_format=json_logs)

    try:
        config = load_config()
    except LatprobeError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    # Command-line values win over the environment
    overrides = {
        "port": port,
        "report_interval": interval,
        "chunk_size": chunk_size,
        "max_chunks": max_chunks,
    }
    config = replace(config, **{k: v for k, v in overrides.items() if v is not None})

    store = SampleStore(chunk_size=config.chunk_size, max_chunks=config.max_chunks)
    reporter = StatisticsReporter(store)

    try:
        sock = open_socket(config.host, config.port)
    except LatprobeError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    with sock:
        loop = ReceiverLoop(sock, store, reporter, interval=config.report_interval)
        try:
            loop.run()
        except ReceiveError as exc:
            console.print(f"[red]Error:[/red] {exc}")
            raise typer.Exit(code=1) from exc
        except KeyboardInterrupt:
            console.print(
                f"[yellow]Interrupted[/yellow] after {loop.received_count} packets, "
                f"{store.total_count()} entries."
            )
