# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Core session engine."""

from __future__ import annotations

from termbridge.core.abort import AbortDetector, AbortState, translate_key
from termbridge.core.session import SessionController, SessionOutcome, SessionState

__all__ = [
    "AbortDetector",
    "AbortState",
    "SessionController",
    "SessionOutcome",
    "SessionState",
    "translate_key",
]
