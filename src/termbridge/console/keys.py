# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Normalized console key events.

Raw console input is translated into KeyEvent values so the abort detector
and the key translator never look at terminal escape sequences.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass
from enum import Enum

ESC = "\x1b"


class Key(str, Enum):
    """Named keys. Letter keys use their upper-case letter instead."""

    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    HOME = "HOME"
    END = "END"
    INSERT = "INSERT"
    DELETE = "DELETE"
    PAGE_UP = "PAGE_UP"
    PAGE_DOWN = "PAGE_DOWN"
    ENTER = "ENTER"
    TAB = "TAB"
    BACKSPACE = "BACKSPACE"
    ESCAPE = "ESCAPE"
    SPACE = "SPACE"
    TILDE = "TILDE"  # the tilde/backtick key
    PERIOD = "PERIOD"


@dataclass(frozen=True)
class KeyEvent:
    key: str
    char: str = ""
    ctrl: bool = False
    shift: bool = False
    alt: bool = False


_CSI_FINALS = {
    "A": Key.UP,
    "B": Key.DOWN,
    "C": Key.RIGHT,
    "D": Key.LEFT,
    "H": Key.HOME,
    "F": Key.END,
}

_CSI_TILDE_CODES = {
    "1": Key.HOME,
    "2": Key.INSERT,
    "3": Key.DELETE,
    "4": Key.END,
    "5": Key.PAGE_UP,
    "6": Key.PAGE_DOWN,
    "7": Key.HOME,
    "8": Key.END,
}

# Second code after a 0x00/0xE0 prefix from msvcrt.getwch().
_WINDOWS_SCAN_CODES = {
    "H": Key.UP,
    "P": Key.DOWN,
    "K": Key.LEFT,
    "M": Key.RIGHT,
    "G": Key.HOME,
    "O": Key.END,
    "R": Key.INSERT,
    "S": Key.DELETE,
    "I": Key.PAGE_UP,
    "Q": Key.PAGE_DOWN,
}


def char_event(ch: str, *, alt: bool = False) -> KeyEvent:
    """Build the event for a single typed character."""
    code = ord(ch)
    char = ESC + ch if alt else ch
    if ch in ("\r", "\n"):
        return KeyEvent(Key.ENTER, char, alt=alt)
    if ch == "\t":
        return KeyEvent(Key.TAB, char, alt=alt)
    if ch in ("\x08", "\x7f"):
        return KeyEvent(Key.BACKSPACE, char, alt=alt)
    if ch == ESC:
        return KeyEvent(Key.ESCAPE, char, alt=alt)
    if 1 <= code <= 26:
        return KeyEvent(chr(code + 64), char, ctrl=True, alt=alt)
    if ch == "~":
        return KeyEvent(Key.TILDE, char, shift=True, alt=alt)
    if ch == "`":
        return KeyEvent(Key.TILDE, char, alt=alt)
    if ch == ".":
        return KeyEvent(Key.PERIOD, char, alt=alt)
    if ch == " ":
        return KeyEvent(Key.SPACE, char, alt=alt)
    if ch.isascii() and ch.isalpha():
        return KeyEvent(ch.upper(), char, shift=ch.isupper(), alt=alt)
    return KeyEvent(ch, char, alt=alt)


def _modifiers(param: str) -> dict[str, bool]:
    # xterm modifier parameter: 1 + (shift=1 | alt=2 | ctrl=4)
    try:
        bits = int(param) - 1
    except ValueError:
        bits = 0
    return {"shift": bool(bits & 1), "alt": bool(bits & 2), "ctrl": bool(bits & 4)}


def _parse_escape(text: str, i: int) -> tuple[KeyEvent, int]:
    """Parse an escape sequence starting at text[i] (an ESC)."""
    if i + 1 >= len(text):
        return KeyEvent(Key.ESCAPE, ESC), i + 1

    intro = text[i + 1]
    if intro == "O" and i + 2 < len(text) and text[i + 2] in _CSI_FINALS:
        return KeyEvent(_CSI_FINALS[text[i + 2]], text[i : i + 3]), i + 3
    if intro != "[":
        if intro == ESC:
            return KeyEvent(Key.ESCAPE, ESC), i + 1
        event = char_event(intro, alt=True)
        return event, i + 2

    j = i + 2
    while j < len(text) and (text[j].isdigit() or text[j] == ";"):
        j += 1
    if j >= len(text):
        return KeyEvent(Key.ESCAPE, ESC), i + 1

    params = text[i + 2 : j].split(";")
    final = text[j]
    raw = text[i : j + 1]
    mods = _modifiers(params[1]) if len(params) > 1 else {}
    if final in _CSI_FINALS:
        return KeyEvent(_CSI_FINALS[final], raw, **mods), j + 1
    if final == "~" and params[0] in _CSI_TILDE_CODES:
        return KeyEvent(_CSI_TILDE_CODES[params[0]], raw, **mods), j + 1
    # Unknown sequence, forward it untouched.
    return KeyEvent(Key.ESCAPE, raw), j + 1


class KeyParser:
    """Turn raw console input bytes into key events.

    Terminals write an escape sequence in one burst, so a sequence is
    expected to arrive within a single chunk. Multi-byte characters may
    still span chunks and are reassembled by the incremental decoder.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")

    def feed(self, data: bytes) -> list[KeyEvent]:
        text = self._decoder.decode(data)
        events: list[KeyEvent] = []
        i = 0
        while i < len(text):
            if text[i] == ESC:
                event, i = _parse_escape(text, i)
            else:
                event = char_event(text[i])
                i += 1
            events.append(event)
        return events


def windows_key_event(first: str, second: str = "") -> KeyEvent:
    """Build an event from msvcrt.getwch() output.

    Args:
        first: First character returned by getwch()
        second: Follow-up character when first is a 0x00/0xE0 prefix
    """
    if first in ("\x00", "\xe0"):
        key = _WINDOWS_SCAN_CODES.get(second)
        if key is None:
            return KeyEvent(Key.ESCAPE, "")
        return KeyEvent(key, "")
    return char_event(first)
