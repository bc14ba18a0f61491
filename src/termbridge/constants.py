# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Shared constants for termbridge."""

from __future__ import annotations

# Session defaults
DEFAULT_BAUD_RATE = 38400
DEFAULT_ENCODING = "utf-8"
DEFAULT_CONNECT_TIMEOUT_MS = 0

# Read loop cadence
READ_WAIT_S = 0.2
IDLE_BACKOFF_S = 0.2
KEY_POLL_INTERVAL_S = 0.001
RETRY_DELAY_S = 1.0

# Channel transport
CHANNEL_READ_SIZE = 1024
CHANNEL_CONNECT_POLL_S = 0.1
WINDOWS_PIPE_PREFIX = "\\\\.\\pipe\\"

# Decode buffer
DECODE_BUFFER_CAPACITY = 4096

# Key codes sent for navigation keys
NAV_UP = "\x10"
NAV_DOWN = "\x0e"
NAV_LEFT = "\x02"
NAV_RIGHT = "\x06"
