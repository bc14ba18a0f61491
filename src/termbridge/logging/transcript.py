# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""JSONL session transcript."""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from io import TextIOWrapper


class TranscriptLogger:
    """Append-only JSONL record of what a session sent and received.

    Every writer runs on the event loop thread, so no locking is needed.
    """

    def __init__(self, log_path: str | Path) -> None:
        """Initialize transcript logger.

        Args:
            log_path: Path to JSONL transcript file
        """
        self._log_path = Path(log_path)
        self._file: TextIOWrapper | None = None
        self._attempt: int | None = None

    @property
    def path(self) -> Path:
        return self._log_path

    @property
    def active(self) -> bool:
        return self._file is not None

    def start(self, attempt: int, endpoint: str) -> None:
        """Open transcript file and write header.

        Args:
            attempt: Session attempt number, stamped on every record
            endpoint: Endpoint the session is connected to
        """
        if self._file:
            self.stop()
        self._log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self._log_path.open("a", encoding="utf-8")
        self._attempt = attempt
        self._write_event("log_start", {"path": str(self._log_path), "endpoint": endpoint})

    def stop(self, reason: str = "") -> None:
        """Write trailer and close the file. Safe to call when not started."""
        if not self._file:
            return
        self._write_event("log_stop", {"reason": reason})
        self._file.close()
        self._file = None

    def log_read(self, text: str) -> None:
        """Record text received from the endpoint."""
        self._write_event("read", {"text": text})

    def log_send(self, char: str) -> None:
        """Record a character sent to the endpoint."""
        self._write_event("send", {"text": char})

    def log_event(self, event: str, data: dict[str, Any]) -> None:
        self._write_event(event, data)

    def _write_event(self, event: str, data: dict[str, Any]) -> None:
        if not self._file:
            return

        record: dict[str, Any] = {"ts": time.time(), "event": event, "data": data}
        if self._attempt is not None:
            record["attempt"] = self._attempt

        self._file.write(json.dumps(record, ensure_ascii=True) + "\n")
        self._file.flush()
