# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Capability interface shared by session transports."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Transport(Protocol):
    """A text session over a byte-oriented endpoint (serial line, named pipe)."""

    last_error: str

    def describe(self) -> str:
        """Return a human-readable name for the endpoint."""
        ...

    async def connect(self) -> bool:
        """Open the endpoint.

        Returns:
            True on success. On failure returns False and leaves a
            description of the problem in ``last_error``; endpoint failures
            never raise.
        """
        ...

    def is_connected(self) -> bool:
        """Report real-time liveness of the handle. Cheap and side-effect free."""
        ...

    async def read(self) -> str:
        """Return decoded text that is available now.

        Waits at most a short window (about 200 ms) for data and returns an
        empty string if none arrived. Never returns a partial character.
        """
        ...

    async def write(self, char: str) -> None:
        """Send one translated key to the endpoint and wait until it is sent.

        Raises:
            NotConnectedError: If there is no live handle
            TransportError: If the send fails (the handle is dropped)
        """
        ...

    async def disconnect(self) -> None:
        """Release the handle. Idempotent."""
        ...
