# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from termbridge.config import AbortMode, SessionConfig, TransportKind
from termbridge.console.output import ConsoleOutput
from termbridge.console.reader import default_key_source
from termbridge.constants import DEFAULT_BAUD_RATE, DEFAULT_CONNECT_TIMEOUT_MS, DEFAULT_ENCODING
from termbridge.core.session import SessionController, SessionOutcome
from termbridge.logging import TranscriptLogger, configure_logging
from termbridge.settings import Settings
from termbridge.transport import create_transport, list_serial_ports


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
def cli() -> None:
    """termbridge command line interface."""


def build_config(**options: object) -> SessionConfig:
    """Validate CLI options into a SessionConfig, reporting errors as usage errors."""
    try:
        return SessionConfig(**options)
    except ValidationError as e:
        problems = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())
        raise click.UsageError(problems) from e


@cli.command("connect")
@click.argument("endpoint")
@click.option("--baud", "-b", type=int, default=DEFAULT_BAUD_RATE, show_default=True, help="Serial line speed.")
@click.option("--pipe", "-p", is_flag=True, help="Connect to a named pipe instead of a serial line.")
@click.option(
    "--abort",
    "abort_mode",
    type=click.Choice([m.value for m in AbortMode]),
    default=AbortMode.TILDE_DOT.value,
    show_default=True,
    help="Key sequence that ends the session.",
)
@click.option(
    "--timeout",
    "-t",
    type=int,
    default=DEFAULT_CONNECT_TIMEOUT_MS,
    show_default=True,
    help="Pipe connect timeout in milliseconds (0 waits without bound).",
)
@click.option("--retry", "-r", is_flag=True, help="Reconnect forever after failures and disconnects.")
@click.option("--encoding", "-e", default=DEFAULT_ENCODING, show_default=True, help="Text encoding of the endpoint.")
@click.option("--log", "log_path", type=click.Path(dir_okay=False, path_type=Path), help="Write a JSONL transcript.")
@click.option("--verbose", "-v", is_flag=True, help="Show diagnostics and every connect failure.")
def connect(
    endpoint: str,
    baud: int,
    pipe: bool,
    abort_mode: str,
    timeout: int,
    retry: bool,
    encoding: str,
    log_path: Path | None,
    verbose: bool,
) -> None:
    """Bridge this console to a serial line or named pipe.

    Examples:
        termbridge connect /dev/ttyUSB0 -b 115200
        termbridge connect COM3 --abort ctrlb
        termbridge connect --pipe /tmp/vm-console.sock --retry
    """
    config = build_config(
        endpoint=endpoint,
        transport=TransportKind.CHANNEL if pipe else TransportKind.LINE,
        baud_rate=baud,
        connect_timeout_ms=timeout,
        abort_mode=abort_mode,
        retry_forever=retry,
        encoding=encoding,
        verbose=verbose,
        transcript_path=log_path,
    )
    configure_logging(Settings(), verbose=config.verbose)

    controller = SessionController(
        config,
        create_transport(config),
        default_key_source(),
        ConsoleOutput(),
        TranscriptLogger(config.transcript_path) if config.transcript_path else None,
    )

    try:
        outcome = asyncio.run(controller.run())
    except KeyboardInterrupt:
        sys.exit(130)

    if outcome is SessionOutcome.CONNECT_FAILED:
        sys.exit(1)


@cli.command("ports")
def ports() -> None:
    """List serial ports available on this machine."""
    ConsoleOutput().ports(list_serial_ports())


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
