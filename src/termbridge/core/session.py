# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Session controller: connect, bridge, disconnect, retry."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from enum import Enum
from typing import TYPE_CHECKING

from termbridge.constants import IDLE_BACKOFF_S, KEY_POLL_INTERVAL_S, RETRY_DELAY_S
from termbridge.core.abort import AbortDetector, translate_key
from termbridge.errors import TransportError
from termbridge.logging import get_logger
from termbridge.transport.line import list_serial_ports

if TYPE_CHECKING:
    from termbridge.config import SessionConfig
    from termbridge.console.output import ConsoleOutput
    from termbridge.console.reader import KeySource
    from termbridge.logging.transcript import TranscriptLogger
    from termbridge.transport.base import Transport

logger = get_logger(__name__)


class SessionOutcome(str, Enum):
    ABORTED = "aborted"
    CONNECT_FAILED = "connect_failed"
    CONNECTION_LOST = "connection_lost"
    STOPPED = "stopped"


class SessionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    READING = "reading"
    DISCONNECTING = "disconnecting"
    RETRY_WAIT = "retry_wait"


class SessionController:
    """Drive session attempts over one transport until abort or failure.

    Each attempt runs two activities on the event loop: the read loop in
    the caller's coroutine and a key-reader task. They share only the
    interrupted event (set by the key task, read by the loop); writes to
    the transport come only from the key task and reads only from the loop.
    """

    def __init__(
        self,
        config: SessionConfig,
        transport: Transport,
        key_source: KeySource,
        output: ConsoleOutput,
        transcript: TranscriptLogger | None = None,
        *,
        retry_delay_s: float = RETRY_DELAY_S,
        idle_backoff_s: float = IDLE_BACKOFF_S,
        key_poll_interval_s: float = KEY_POLL_INTERVAL_S,
        port_lister: Callable[[], Iterable[str]] = list_serial_ports,
    ) -> None:
        self._config = config
        self._transport = transport
        self._keys = key_source
        self._output = output
        self._transcript = transcript
        self._retry_delay_s = retry_delay_s
        self._idle_backoff_s = idle_backoff_s
        self._key_poll_interval_s = key_poll_interval_s
        self._port_lister = port_lister
        self._stop_requested = asyncio.Event()
        self._state = SessionState.DISCONNECTED
        self.connect_attempts = 0

    @property
    def state(self) -> SessionState:
        return self._state

    def stop(self) -> None:
        """Ask the controller to end after the current wait or attempt."""
        self._stop_requested.set()

    async def run(self) -> SessionOutcome:
        """Run attempts until abort, stop, or a failure with retry disabled."""
        while True:
            outcome = await self.run_attempt()
            if outcome is SessionOutcome.ABORTED or not self._config.retry_forever:
                return outcome
            if self._stop_requested.is_set():
                return SessionOutcome.STOPPED

            self._state = SessionState.RETRY_WAIT
            logger.debug("session_retry_wait", outcome=outcome.value, delay_s=self._retry_delay_s)
            if not self._config.quiet_failures:
                self._output.retrying(self._retry_delay_s)
            if await self._wait_stop(self._retry_delay_s):
                self._state = SessionState.DISCONNECTED
                return SessionOutcome.STOPPED

    async def run_attempt(self) -> SessionOutcome:
        """Run one connect, bridge, disconnect cycle."""
        if self._stop_requested.is_set():
            return SessionOutcome.STOPPED

        self._state = SessionState.CONNECTING
        self.connect_attempts += 1
        if not await self._transport.connect():
            self._state = SessionState.DISCONNECTED
            self._report_connect_failure()
            return SessionOutcome.CONNECT_FAILED

        self._state = SessionState.CONNECTED
        endpoint = self._transport.describe()
        self._output.connected(endpoint)
        self._output.abort_hint(self._config.abort_mode)
        if self._transcript:
            self._transcript.start(self.connect_attempts, endpoint)

        interrupted = asyncio.Event()
        try:
            self._keys.open()
            key_task = asyncio.create_task(self._pump_keys(interrupted))
            try:
                self._state = SessionState.READING
                outcome = await self._read_loop(interrupted, key_task)
            finally:
                self._state = SessionState.DISCONNECTING
                try:
                    await self._stop_key_task(key_task)
                finally:
                    self._keys.close()
        finally:
            await self._transport.disconnect()
            self._state = SessionState.DISCONNECTED

        if outcome is SessionOutcome.ABORTED:
            self._output.user_abort()
        elif outcome is SessionOutcome.CONNECTION_LOST:
            self._output.connection_lost(endpoint)
        self._output.closed(endpoint)
        if self._transcript:
            if outcome is not SessionOutcome.STOPPED:
                self._transcript.log_event(outcome.value, {"endpoint": endpoint})
            self._transcript.stop(outcome.value)
        return outcome

    async def _read_loop(self, interrupted: asyncio.Event, key_task: asyncio.Task[None]) -> SessionOutcome:
        while True:
            if interrupted.is_set():
                return SessionOutcome.ABORTED
            if self._stop_requested.is_set():
                return SessionOutcome.STOPPED
            if not self._transport.is_connected():
                logger.info("session_connection_lost", endpoint=self._transport.describe())
                return SessionOutcome.CONNECTION_LOST
            if key_task.done():
                # Keys can no longer reach the endpoint.
                logger.warning("session_key_reader_stopped", endpoint=self._transport.describe())
                return SessionOutcome.CONNECTION_LOST

            text = await self._transport.read()
            if interrupted.is_set():
                return SessionOutcome.ABORTED
            if not text:
                await asyncio.sleep(self._idle_backoff_s)
                continue

            self._output.write(text)
            if self._transcript:
                self._transcript.log_read(text)

    async def _pump_keys(self, interrupted: asyncio.Event) -> None:
        detector = AbortDetector(self._config.abort_mode)
        while True:
            event = self._keys.read_key()
            if event is None:
                await asyncio.sleep(self._key_poll_interval_s)
                continue

            if detector.feed(event):
                logger.info("session_user_abort", mode=self._config.abort_mode.value)
                interrupted.set()
                return

            char = translate_key(event)
            if not char:
                continue
            try:
                await self._transport.write(char)
            except TransportError as e:
                logger.warning("session_write_failed", error=str(e))
                return
            if self._transcript:
                self._transcript.log_send(char)

    async def _stop_key_task(self, task: asyncio.Task[None]) -> None:
        if not task.done():
            task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("session_key_reader_failed", error=str(e) or type(e).__name__, exc_info=True)

    async def _wait_stop(self, delay_s: float) -> bool:
        try:
            await asyncio.wait_for(self._stop_requested.wait(), timeout=delay_s)
        except TimeoutError:
            return False
        return True

    def _report_connect_failure(self) -> None:
        reason = self._transport.last_error or "unknown error"
        logger.info("session_connect_failed", endpoint=self._config.endpoint, error=reason)
        if self._config.quiet_failures:
            return
        self._output.connect_failed(self._config.endpoint, reason, self._port_lister())
