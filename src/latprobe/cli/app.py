"""Main Typer application — entry point for the ``latprobe`` CLI."""

from __future__ import annotations

import typer

from latprobe import __version__
from latprobe.cli.listen import listen_cmd
from latprobe.cli.send import send_cmd

app = typer.Typer(
    name="latprobe",
    help="Passive one-way UDP latency probe.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command("listen", help="Receive timestamped datagrams and report latency.")(listen_cmd)
app.command("send", help="Send timestamped test datagrams to a probe.")(send_cmd)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"latprobe {__version__}")
        raise typer.Exit


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """latprobe — passive one-way UDP latency probe."""
