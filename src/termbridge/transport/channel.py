# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Named-pipe channel transport with manual text reassembly."""

from __future__ import annotations

import asyncio
import sys
from typing import TYPE_CHECKING

from termbridge.constants import CHANNEL_CONNECT_POLL_S, CHANNEL_READ_SIZE, READ_WAIT_S, WINDOWS_PIPE_PREFIX
from termbridge.decoding import DecodeBuffer
from termbridge.errors import NotConnectedError, TransportError
from termbridge.logging import get_logger

if TYPE_CHECKING:
    from asyncio import StreamReader, StreamWriter

    from termbridge.config import SessionConfig

logger = get_logger(__name__)

# Windows reports a pipe whose instances are all in use as ERROR_PIPE_BUSY.
ERROR_PIPE_BUSY = 231


def _endpoint_not_ready(exc: OSError) -> bool:
    if isinstance(exc, (FileNotFoundError, ConnectionRefusedError)):
        return True
    return getattr(exc, "winerror", None) == ERROR_PIPE_BUSY


class PipeChannelTransport:
    """Console channel over a local named pipe.

    On Windows the endpoint names a pipe under ``\\\\.\\pipe\\``; elsewhere
    it is the path of a Unix domain socket. The channel only carries bytes,
    so reads go through a DecodeBuffer before reaching the console.
    """

    def __init__(
        self,
        config: SessionConfig,
        *,
        read_wait_s: float = READ_WAIT_S,
        poll_interval_s: float = CHANNEL_CONNECT_POLL_S,
        read_size: int = CHANNEL_READ_SIZE,
    ) -> None:
        """Initialize pipe transport.

        Args:
            config: Session configuration (endpoint, timeout, encoding)
            read_wait_s: Longest time a read waits for data
            poll_interval_s: Delay between attempts while the pipe is absent or busy
            read_size: Maximum bytes pulled per read
        """
        self._config = config
        self._read_wait_s = read_wait_s
        self._poll_interval_s = poll_interval_s
        self._read_size = read_size
        self._reader: StreamReader | None = None
        self._writer: StreamWriter | None = None
        self._buffer = DecodeBuffer(config.encoding)
        self.last_error = ""

    @property
    def address(self) -> str:
        endpoint = self._config.endpoint
        if sys.platform == "win32" and not endpoint.startswith("\\\\"):
            return WINDOWS_PIPE_PREFIX + endpoint
        return endpoint

    @property
    def decode_buffer(self) -> DecodeBuffer:
        return self._buffer

    def describe(self) -> str:
        return f"pipe {self.address}"

    async def connect(self) -> bool:
        """Connect to the pipe, waiting for it up to the configured timeout.

        Returns:
            True if connected, False on timeout or error (see ``last_error``)
        """
        if self._writer:
            await self.disconnect()

        timeout_s = self._config.connect_timeout_s
        try:
            self._reader, self._writer = await asyncio.wait_for(self._open_when_ready(), timeout=timeout_s)
        except TimeoutError:
            self.last_error = f"timed out after {self._config.connect_timeout_ms} ms"
            logger.info("pipe_connect_timeout", address=self.address, timeout_ms=self._config.connect_timeout_ms)
            return False
        except OSError as e:
            self.last_error = str(e) or type(e).__name__
            logger.info("pipe_connect_failed", address=self.address, error=self.last_error)
            return False

        self._buffer.reset()
        self.last_error = ""
        logger.info("pipe_connected", address=self.address)
        return True

    def is_connected(self) -> bool:
        return (
            self._writer is not None
            and not self._writer.is_closing()
            and self._reader is not None
            and not self._reader.at_eof()
        )

    async def read(self) -> str:
        """Read up to one chunk and return the characters it completes.

        Returns:
            Decoded text (may be empty on timeout, partial character, or drop)
        """
        reader = self._reader
        if reader is None or not self.is_connected():
            return ""

        try:
            chunk = await asyncio.wait_for(reader.read(self._read_size), timeout=self._read_wait_s)
        except TimeoutError:
            return ""
        except OSError as e:
            # TimeoutError is an OSError too; it is handled above.
            logger.warning("pipe_read_failed", address=self.address, error=str(e))
            self._drop()
            return ""

        if not chunk:
            logger.info("pipe_closed_by_remote", address=self.address)
            self._drop()
            return ""

        return self._buffer.feed(chunk)

    async def write(self, char: str) -> None:
        """Send one key and wait for the pipe to accept it.

        Args:
            char: Translated key text

        Raises:
            NotConnectedError: If not connected
            TransportError: If the send fails
        """
        writer = self._writer
        if writer is None or writer.is_closing():
            raise NotConnectedError("Not connected")

        try:
            writer.write(char.encode(self._config.encoding, errors="replace"))
            await writer.drain()
        except OSError as e:
            logger.warning("pipe_write_failed", address=self.address, error=str(e))
            self._drop()
            raise TransportError("Send failed") from e

    async def disconnect(self) -> None:
        """Close the pipe and clear reassembly state."""
        if not self._writer:
            return

        try:
            self._writer.close()
            await self._writer.wait_closed()
        except (OSError, RuntimeError):
            pass
        finally:
            self._writer = None
            self._reader = None
            self._buffer.reset()

        logger.info("pipe_disconnected", address=self.address)

    async def _open_when_ready(self) -> tuple[StreamReader, StreamWriter]:
        while True:
            try:
                return await self._open()
            except OSError as e:
                if not _endpoint_not_ready(e):
                    raise
                logger.debug("pipe_not_ready", address=self.address, error=str(e))
            await asyncio.sleep(self._poll_interval_s)

    async def _open(self) -> tuple[StreamReader, StreamWriter]:
        if sys.platform != "win32":
            return await asyncio.open_unix_connection(self.address)

        loop = asyncio.get_running_loop()
        reader = asyncio.StreamReader(loop=loop)
        protocol = asyncio.StreamReaderProtocol(reader, loop=loop)
        transport, _ = await loop.create_pipe_connection(lambda: protocol, self.address)
        writer = asyncio.StreamWriter(transport, protocol, reader, loop)
        return reader, writer

    def _drop(self) -> None:
        if self._writer is not None and not self._writer.is_closing():
            self._writer.close()
