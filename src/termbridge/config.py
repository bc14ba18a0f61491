# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Immutable session configuration.

Built once at startup (normally by the CLI) and handed to every component
that needs it. Nothing reads configuration from module globals.
"""

from __future__ import annotations

import codecs
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from termbridge.constants import DEFAULT_BAUD_RATE, DEFAULT_CONNECT_TIMEOUT_MS, DEFAULT_ENCODING


class TransportKind(str, Enum):
    """Which transport variant carries the session."""

    LINE = "line"
    CHANNEL = "channel"


class AbortMode(str, Enum):
    """Key sequence that ends a session."""

    CTRL_C = "ctrlc"
    CTRL_B = "ctrlb"
    TILDE_DOT = "tildedot"


class SessionConfig(BaseModel):
    """Settings for one bridge run, shared read-only by all components."""

    endpoint: str = Field(min_length=1)
    transport: TransportKind = TransportKind.LINE
    baud_rate: int = Field(default=DEFAULT_BAUD_RATE, gt=0)
    connect_timeout_ms: int = Field(default=DEFAULT_CONNECT_TIMEOUT_MS, ge=0)
    abort_mode: AbortMode = AbortMode.TILDE_DOT
    retry_forever: bool = False
    encoding: str = DEFAULT_ENCODING
    verbose: bool = False
    transcript_path: Path | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, value: str) -> str:
        try:
            return codecs.lookup(value).name
        except LookupError as e:
            raise ValueError(f"unknown encoding: {value}") from e

    @property
    def connect_timeout_s(self) -> float | None:
        """Channel connect bound in seconds, or None when unbounded."""
        if self.connect_timeout_ms <= 0:
            return None
        return self.connect_timeout_ms / 1000

    @property
    def quiet_failures(self) -> bool:
        """Suppress repeated connect-failure output while retrying silently."""
        return self.retry_forever and not self.verbose
