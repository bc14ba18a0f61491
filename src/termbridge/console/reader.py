# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Non-blocking console key sources.

A key source answers "next key event, or none yet available" without ever
blocking the event loop. ``open()`` switches the console into raw mode for
the duration of a session attempt and ``close()`` restores it.
"""

from __future__ import annotations

import os
import sys
from collections import deque
from typing import Protocol, runtime_checkable

from termbridge.console.keys import KeyEvent, KeyParser, windows_key_event
from termbridge.logging import get_logger

logger = get_logger(__name__)

READ_SIZE = 64


@runtime_checkable
class KeySource(Protocol):
    def open(self) -> None: ...

    def close(self) -> None: ...

    def read_key(self) -> KeyEvent | None: ...


class PosixKeySource:
    """Read keys from a POSIX tty in raw mode using select()."""

    def __init__(self, fd: int | None = None, encoding: str = "utf-8") -> None:
        self._fd = sys.stdin.fileno() if fd is None else fd
        self._parser = KeyParser(encoding)
        self._queue: deque[KeyEvent] = deque()
        self._saved_tty_state: list | None = None

    def open(self) -> None:
        import termios
        import tty

        if self._saved_tty_state is not None or not os.isatty(self._fd):
            return
        self._saved_tty_state = termios.tcgetattr(self._fd)
        tty.setraw(self._fd, termios.TCSAFLUSH)
        logger.debug("console_raw_mode", fd=self._fd)

    def close(self) -> None:
        import termios

        if self._saved_tty_state is None:
            return
        termios.tcsetattr(self._fd, termios.TCSAFLUSH, self._saved_tty_state)
        self._saved_tty_state = None
        self._queue.clear()
        logger.debug("console_restored", fd=self._fd)

    def read_key(self) -> KeyEvent | None:
        import select

        if not self._queue:
            ready, _, _ = select.select([self._fd], [], [], 0)
            if ready:
                data = os.read(self._fd, READ_SIZE)
                self._queue.extend(self._parser.feed(data))
        if self._queue:
            return self._queue.popleft()
        return None


class WindowsKeySource:
    """Read keys from the Windows console through msvcrt."""

    def __init__(self) -> None:
        import msvcrt

        self._msvcrt = msvcrt

    def open(self) -> None:
        pass

    def close(self) -> None:
        pass

    def read_key(self) -> KeyEvent | None:
        if not self._msvcrt.kbhit():
            return None
        first = self._msvcrt.getwch()
        second = ""
        if first in ("\x00", "\xe0"):
            second = self._msvcrt.getwch()
        return windows_key_event(first, second)


def default_key_source() -> KeySource:
    """Return the key source for the current platform's console."""
    if sys.platform == "win32":
        return WindowsKeySource()
    return PosixKeySource(encoding=sys.stdin.encoding or "utf-8")
