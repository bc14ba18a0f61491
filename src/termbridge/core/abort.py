# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Abort-sequence detection and key to byte translation."""

from __future__ import annotations

from enum import Enum

from termbridge.config import AbortMode
from termbridge.console.keys import Key, KeyEvent
from termbridge.constants import NAV_DOWN, NAV_LEFT, NAV_RIGHT, NAV_UP

_NAVIGATION = {
    Key.UP: NAV_UP,
    Key.DOWN: NAV_DOWN,
    Key.LEFT: NAV_LEFT,
    Key.RIGHT: NAV_RIGHT,
}


class AbortState(str, Enum):
    IDLE = "idle"
    TILDE_SEEN = "tilde_seen"


def translate_key(event: KeyEvent) -> str:
    """Return the text to send for a key.

    Arrow keys become the control codes line editors expect (Ctrl+P, Ctrl+N,
    Ctrl+B, Ctrl+F); every other key sends its own character, which may be
    empty for keys that produce nothing.
    """
    nav = _NAVIGATION.get(event.key)
    if nav is not None:
        return nav
    return event.char


class AbortDetector:
    """Recognize the configured abort sequence in a stream of key events.

    ``tildedot`` is two-step: a shifted tilde arms the detector and a period
    right after it aborts. Any other key disarms it, and the tilde that armed
    it is consumed rather than looked at again.
    """

    def __init__(self, mode: AbortMode) -> None:
        self._mode = mode
        self._state = AbortState.IDLE

    @property
    def mode(self) -> AbortMode:
        return self._mode

    @property
    def state(self) -> AbortState:
        return self._state

    def reset(self) -> None:
        self._state = AbortState.IDLE

    def feed(self, event: KeyEvent) -> bool:
        """Advance on one key event.

        Returns:
            True if this event completes the abort sequence
        """
        if self._mode is AbortMode.CTRL_C:
            return event.ctrl and event.key == "C"
        if self._mode is AbortMode.CTRL_B:
            return event.ctrl and event.key == "B"

        if self._state is AbortState.TILDE_SEEN:
            self._state = AbortState.IDLE
            return event.key == Key.PERIOD
        if event.key == Key.TILDE and event.shift:
            self._state = AbortState.TILDE_SEEN
        return False
