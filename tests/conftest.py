# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pytest configuration and fixtures."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

import pytest
from rich.console import Console

from termbridge.config import SessionConfig, TransportKind
from termbridge.console.keys import Key, KeyEvent
from termbridge.console.output import ConsoleOutput

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def output_stream() -> io.StringIO:
    """Captures both remote text and status messages."""
    return io.StringIO()


@pytest.fixture
def console_output(output_stream: io.StringIO) -> ConsoleOutput:
    """ConsoleOutput writing plain text to the captured stream."""
    console = Console(file=output_stream, color_system=None, force_terminal=False, width=200, highlight=False)
    return ConsoleOutput(stream=output_stream, console=console)


@pytest.fixture
def line_config() -> SessionConfig:
    """Serial loopback session configuration."""
    return SessionConfig(endpoint="loop://")


@pytest.fixture
def socket_path(tmp_path: Path) -> Path:
    """Short socket path inside the test's temporary directory."""
    return tmp_path / "con.sock"


@pytest.fixture
def channel_config(socket_path: Path) -> SessionConfig:
    """Pipe session configuration with a bounded connect timeout."""
    return SessionConfig(endpoint=str(socket_path), transport=TransportKind.CHANNEL, connect_timeout_ms=1000)


@pytest.fixture
def tilde_dot() -> list[KeyEvent]:
    """Default abort sequence as key events."""
    return [KeyEvent(Key.TILDE, "~", shift=True), KeyEvent(Key.PERIOD, ".")]
