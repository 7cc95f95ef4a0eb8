"""``latprobe send`` — generate timestamped test traffic."""

from __future__ import annotations

import logging

import typer
from rich.console import Console

from latprobe._internal.config import DEFAULT_PORT
from latprobe._internal.logging import setup_logging
from latprobe.probe.sender import DEFAULT_PAYLOAD_SIZE, TimestampSender
from latprobe.probe.wire import TIMESTAMP_SIZE

console = Console(stderr=True)


def send_cmd(
    host: str = typer.Argument(..., help="Destination host running ``latprobe listen``."),
    port: int = typer.Option(
        DEFAULT_PORT,
        "--port",
        "-p",
        help="Destination UDP port.",
        min=1,
        max=65535,
    ),
    count: int = typer.Option(
        1000,
        "--count",
        "-n",
        help="Number of datagrams to send.",
        min=0,
    ),
    size: int = typer.Option(
        DEFAULT_PAYLOAD_SIZE,
        "--size",
        "-s",
        help=f"Payload size in bytes (at least {TIMESTAMP_SIZE}).",
        min=TIMESTAMP_SIZE,
        max=65507,
    ),
    rate: float | None = typer.Option(
        None,
        "--rate",
        "-r",
        help="Datagrams per second (default: as fast as possible).",
        min=0.001,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) logging.",
    ),
) -> None:
    """Send COUNT timestamped datagrams to HOST."""
    setup_logging(logging.DEBUG if verbose else logging.WARNING)

    sender = TimestampSender(host, port, size=size, rate=rate)
    try:
        sent = sender.send(count)
    except OSError as exc:
        console.print(f"[red]Error:[/red] sending to {host}:{port}: {exc}")
        raise typer.Exit(code=1) from exc

    console.print(f"[green]Sent {sent} datagrams[/green] to {host}:{port}.")
