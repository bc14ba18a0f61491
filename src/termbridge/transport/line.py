# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Serial line transport built on pyserial."""

from __future__ import annotations

import asyncio
import codecs
from typing import TYPE_CHECKING

import serial
from serial.tools import list_ports

from termbridge.constants import READ_WAIT_S
from termbridge.errors import NotConnectedError, TransportError
from termbridge.logging import get_logger

if TYPE_CHECKING:
    from termbridge.config import SessionConfig

logger = get_logger(__name__)


def list_serial_ports() -> list[str]:
    """Return ``device - description`` for every serial port on this machine."""
    ports = sorted(list_ports.comports(), key=lambda p: p.device)
    return [f"{p.device} - {p.description}" if p.description else p.device for p in ports]


class SerialLineTransport:
    """Serial line transport.

    The endpoint is anything ``serial.serial_for_url`` accepts: a device
    such as ``/dev/ttyUSB0`` or ``COM3``, or a URL like ``loop://``.
    Incoming bytes go through the codec's own incremental decoder, which
    holds back partial characters between reads.
    """

    def __init__(self, config: SessionConfig, *, read_wait_s: float = READ_WAIT_S) -> None:
        """Initialize serial transport.

        Args:
            config: Session configuration (endpoint, baud rate, encoding)
            read_wait_s: Longest time a read waits for the first byte
        """
        self._config = config
        self._read_wait_s = read_wait_s
        self._port: serial.SerialBase | None = None
        self._decoder: codecs.IncrementalDecoder | None = None
        self.last_error = ""

    def describe(self) -> str:
        return f"{self._config.endpoint} ({self._config.baud_rate} baud)"

    async def connect(self) -> bool:
        """Open the serial port.

        Returns:
            True if the port opened, False otherwise (see ``last_error``)
        """
        if self._port is not None:
            await self.disconnect()

        endpoint = self._config.endpoint
        try:
            port = await asyncio.to_thread(
                serial.serial_for_url,
                endpoint,
                baudrate=self._config.baud_rate,
                timeout=self._read_wait_s,
            )
        except (serial.SerialException, OSError, ValueError) as e:
            self.last_error = str(e) or type(e).__name__
            logger.info("serial_connect_failed", endpoint=endpoint, error=self.last_error)
            return False

        self._port = port
        self._decoder = codecs.getincrementaldecoder(self._config.encoding)(errors="replace")
        self.last_error = ""
        logger.info("serial_connected", endpoint=endpoint, baud=self._config.baud_rate)
        return True

    def is_connected(self) -> bool:
        return self._port is not None and self._port.is_open

    async def read(self) -> str:
        """Read whatever text is available, waiting at most the read window.

        Returns:
            Decoded text (may be empty on timeout or after a dropped port)
        """
        port = self._port
        if port is None or not port.is_open or self._decoder is None:
            return ""

        try:
            data = await asyncio.to_thread(self._read_available, port)
        except (serial.SerialException, OSError) as e:
            logger.warning("serial_read_failed", endpoint=self._config.endpoint, error=str(e))
            self._drop(port)
            return ""

        if not data:
            return ""
        return self._decoder.decode(data)

    async def write(self, char: str) -> None:
        """Send one key to the serial port.

        Args:
            char: Translated key text

        Raises:
            NotConnectedError: If the port is not open
            TransportError: If the write fails
        """
        port = self._port
        if port is None or not port.is_open:
            raise NotConnectedError("Not connected")

        payload = char.encode(self._config.encoding, errors="replace")
        try:
            await asyncio.to_thread(port.write, payload)
        except (serial.SerialException, OSError) as e:
            self._drop(port)
            raise TransportError("Send failed") from e

    async def disconnect(self) -> None:
        """Close the port. Safe to call when already closed."""
        port = self._port
        if port is None:
            return

        self._port = None
        self._decoder = None
        try:
            port.close()
        except (serial.SerialException, OSError):
            pass

        logger.info("serial_disconnected", endpoint=self._config.endpoint)

    @staticmethod
    def _read_available(port: serial.SerialBase) -> bytes:
        # Blocks up to the port timeout for the first byte only.
        data = port.read(port.in_waiting or 1)
        if data and port.in_waiting:
            data += port.read(port.in_waiting)
        return data

    def _drop(self, port: serial.SerialBase) -> None:
        try:
            port.close()
        except (serial.SerialException, OSError):
            pass
