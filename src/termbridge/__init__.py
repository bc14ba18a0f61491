# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Interactive console bridge to serial lines and named-pipe consoles."""

from __future__ import annotations

from termbridge.config import AbortMode, SessionConfig, TransportKind
from termbridge.core.session import SessionController, SessionOutcome
from termbridge.decoding import DecodeBuffer

__version__ = "0.1.0"

__all__ = [
    "AbortMode",
    "DecodeBuffer",
    "SessionConfig",
    "SessionController",
    "SessionOutcome",
    "TransportKind",
    "__version__",
]
