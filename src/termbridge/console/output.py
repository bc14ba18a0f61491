# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Console output: remote text pass-through and status messages."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

from rich.console import Console
from rich.markup import escape

from termbridge.config import AbortMode

if TYPE_CHECKING:
    from collections.abc import Iterable

CONNECTED_MESSAGE = "Connected to {endpoint}."
CLOSED_MESSAGE = "Connection to {endpoint} closed."
CONNECT_FAILED_MESSAGE = "Unable to connect to {endpoint}: {reason}"
PORTS_HEADER = "Available serial ports:"
NO_PORTS_MESSAGE = "No serial ports found."
USER_ABORT_MESSAGE = "Session ended by user."
CONNECTION_LOST_MESSAGE = "Connection to {endpoint} lost."
RETRY_MESSAGE = "Retrying in {delay:g}s..."

ABORT_HINTS = {
    AbortMode.CTRL_C: "Press Ctrl+C to end your session.",
    AbortMode.CTRL_B: "Press Ctrl+B to end your session.",
    AbortMode.TILDE_DOT: "Type ~. (tilde, period) to end your session.",
}


class ConsoleOutput:
    """Writes the remote stream verbatim and status lines through rich.

    Remote text bypasses rich entirely: rich strips control characters and
    would interpret markup in the data.
    """

    def __init__(self, stream: TextIO | None = None, console: Console | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._console = console if console is not None else Console(file=self._stream, highlight=False)

    @property
    def console(self) -> Console:
        return self._console

    def write(self, text: str) -> None:
        self._stream.write(text)
        self._stream.flush()

    def connected(self, endpoint: str) -> None:
        self._console.print(f"[green]{escape(CONNECTED_MESSAGE.format(endpoint=endpoint))}[/green]")

    def closed(self, endpoint: str) -> None:
        self._console.print(f"[green]{escape(CLOSED_MESSAGE.format(endpoint=endpoint))}[/green]")

    def connection_lost(self, endpoint: str) -> None:
        self._console.print(f"[yellow]{escape(CONNECTION_LOST_MESSAGE.format(endpoint=endpoint))}[/yellow]")

    def abort_hint(self, mode: AbortMode) -> None:
        self._console.print(f"[cyan]{escape(ABORT_HINTS[mode])}[/cyan]")

    def connect_failed(self, endpoint: str, reason: str, ports: Iterable[str]) -> None:
        message = CONNECT_FAILED_MESSAGE.format(endpoint=endpoint, reason=reason)
        self._console.print(f"[bold red]{escape(message)}[/bold red]")
        self.ports(ports)

    def ports(self, ports: Iterable[str]) -> None:
        names = list(ports)
        if not names:
            self._console.print(NO_PORTS_MESSAGE)
            return
        self._console.print(PORTS_HEADER)
        for name in names:
            self._console.print(f"  {escape(name)}")

    def retrying(self, delay_s: float) -> None:
        self._console.print(f"[dim]{escape(RETRY_MESSAGE.format(delay=delay_s))}[/dim]")

    def user_abort(self) -> None:
        # Leave the remote's partial line before printing.
        self.write("\r\n")
        self._console.print(f"[bold yellow]{escape(USER_ABORT_MESSAGE)}[/bold yellow]")
