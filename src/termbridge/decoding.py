# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Incremental byte to text decoding for raw-byte transports.

Reads from a pipe arrive in arbitrary chunks, so a multi-byte character may
be split across two reads. DecodeBuffer keeps the incomplete tail of each
chunk and emits only fully decoded characters.
"""

from __future__ import annotations

import codecs

from termbridge.constants import DECODE_BUFFER_CAPACITY
from termbridge.logging import get_logger

logger = get_logger(__name__)


class DecodeBuffer:
    """Reassemble text from chunked bytes of a single encoding.

    One strict incremental decoder lives as long as the connection, so codec
    state such as a UTF-16 byte order mark or an ISO-2022 shift carries
    across chunks. The decoder holds back a truncated trailing character and
    raises on bytes that can never decode; those chunks are decoded again in
    ``replace`` mode so text after a bad byte is not delayed.

    Pending bytes only ever hold a trailing, possibly incomplete character.
    When they would grow past ``capacity`` the whole run is decoded lossily
    and the buffer resets, so a misbehaving producer cannot stall output.
    """

    def __init__(self, encoding: str, capacity: int = DECODE_BUFFER_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._encoding = codecs.lookup(encoding).name
        self._capacity = capacity
        self._decoder = codecs.getincrementaldecoder(self._encoding)(errors="strict")
        self.overflows = 0
        self.malformed = 0

    @property
    def encoding(self) -> str:
        return self._encoding

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def pending(self) -> bytes:
        """Bytes held back until the character they start is complete."""
        return bytes(self._decoder.getstate()[0])

    def reset(self) -> None:
        """Forget pending bytes and codec state, as for a new connection."""
        self._decoder.reset()

    def feed(self, chunk: bytes) -> str:
        """Add a chunk and return every character that is now complete.

        Args:
            chunk: Bytes as read from the transport (may be empty)

        Returns:
            Decoded text, possibly empty when only a partial character is held
        """
        pending = len(self.pending)
        if pending + len(chunk) > self._capacity:
            return self._flush_overflow(chunk, pending)

        state = self._decoder.getstate()
        try:
            return self._decoder.decode(chunk)
        except UnicodeDecodeError as e:
            self._decoder.setstate(state)
            self.malformed += 1
            logger.debug("decode_buffer_malformed", encoding=self._encoding, reason=e.reason, size=len(chunk))
            return self._decode_replacing(chunk)

    def _decode_replacing(self, chunk: bytes, final: bool = False) -> str:
        self._decoder.errors = "replace"
        try:
            return self._decoder.decode(chunk, final)
        finally:
            self._decoder.errors = "strict"

    def _flush_overflow(self, chunk: bytes, pending: int) -> str:
        self.overflows += 1
        logger.warning(
            "decode_buffer_overflow",
            encoding=self._encoding,
            size=pending + len(chunk),
            capacity=self._capacity,
        )
        return self._decode_replacing(chunk, final=True)
