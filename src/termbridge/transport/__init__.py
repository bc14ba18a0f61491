# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport layer for console sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from termbridge.config import TransportKind
from termbridge.transport.base import Transport
from termbridge.transport.channel import PipeChannelTransport
from termbridge.transport.line import SerialLineTransport, list_serial_ports

if TYPE_CHECKING:
    from termbridge.config import SessionConfig

__all__ = [
    "PipeChannelTransport",
    "SerialLineTransport",
    "Transport",
    "create_transport",
    "list_serial_ports",
]


def create_transport(config: SessionConfig) -> Transport:
    """Build the transport variant selected by the configuration."""
    if config.transport is TransportKind.CHANNEL:
        return PipeChannelTransport(config)
    return SerialLineTransport(config)
