# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging layer for termbridge sessions."""

from __future__ import annotations

from termbridge.logging.config import configure_logging, get_logger
from termbridge.logging.transcript import TranscriptLogger

__all__ = ["TranscriptLogger", "configure_logging", "get_logger"]
