# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Local console: key input and session output."""

from __future__ import annotations

from termbridge.console.keys import Key, KeyEvent, KeyParser
from termbridge.console.output import ConsoleOutput
from termbridge.console.reader import KeySource, PosixKeySource, WindowsKeySource, default_key_source

__all__ = [
    "ConsoleOutput",
    "Key",
    "KeyEvent",
    "KeyParser",
    "KeySource",
    "PosixKeySource",
    "WindowsKeySource",
    "default_key_source",
]
