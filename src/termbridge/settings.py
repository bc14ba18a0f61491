# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Application settings."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="TERMBRIDGE_",
        extra="ignore",
    )
