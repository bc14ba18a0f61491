# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Tests for incremental decoding of chunked byte reads."""

from __future__ import annotations

import codecs

import pytest

from termbridge.decoding import DecodeBuffer

# name: (encoding, encoded bytes, expected text)
SAMPLES = {
    "utf-8": ("utf-8", "héllo wörld €5 𝄞 日本".encode(), "héllo wörld €5 𝄞 日本"),
    "utf-16-le": ("utf-16-le", "naïve €5 𝄞 ok".encode("utf-16-le"), "naïve €5 𝄞 ok"),
    "utf-16-bom-be": ("utf-16", codecs.BOM_UTF16_BE + "abcdef €".encode("utf-16-be"), "abcdef €"),
    "shift_jis": ("shift_jis", "日本語 ｱｲｳ abc テスト".encode("shift_jis"), "日本語 ｱｲｳ abc テスト"),
    "iso2022_jp": ("iso2022_jp", "日本語abc日本".encode("iso2022_jp"), "日本語abc日本"),
    "cp437": ("cp437", "┌─┐ ░▒▓ ok".encode("cp437"), "┌─┐ ░▒▓ ok"),
}


def _feed_all(buffer: DecodeBuffer, chunks: list[bytes]) -> list[str]:
    return [buffer.feed(chunk) for chunk in chunks]


@pytest.mark.parametrize("sample", sorted(SAMPLES))
def test_every_two_way_split_reassembles(sample: str) -> None:
    """Splitting anywhere, including inside a character, loses nothing."""
    encoding, data, text = SAMPLES[sample]

    for cut in range(len(data) + 1):
        buffer = DecodeBuffer(encoding)
        fragments = _feed_all(buffer, [data[:cut], data[cut:]])
        assert "".join(fragments) == text, f"split at {cut}"
        assert buffer.malformed == 0
        assert buffer.pending == b""


@pytest.mark.parametrize("sample", sorted(SAMPLES))
def test_three_way_splits_reassemble(sample: str) -> None:
    encoding, data, text = SAMPLES[sample]

    for first in range(0, len(data), 3):
        for second in range(first, len(data) + 1, 2):
            buffer = DecodeBuffer(encoding)
            fragments = _feed_all(buffer, [data[:first], data[first:second], data[second:]])
            assert "".join(fragments) == text


def test_byte_at_a_time_never_emits_partial_characters() -> None:
    _, data, text = SAMPLES["utf-8"]
    buffer = DecodeBuffer("utf-8")

    fragments = [buffer.feed(bytes([b])) for b in data]

    emitted = [f for f in fragments if f]
    assert "".join(emitted) == text
    # Each emitted fragment is exactly one whole character here.
    assert all(len(f) == 1 for f in emitted)


def test_byte_order_mark_carries_across_reads() -> None:
    buffer = DecodeBuffer("utf-16")

    assert buffer.feed(codecs.BOM_UTF16_BE + "ab".encode("utf-16-be")) == "ab"
    assert buffer.feed("cd".encode("utf-16-be")) == "cd"


def test_incomplete_character_is_held_until_complete() -> None:
    buffer = DecodeBuffer("utf-8")

    assert buffer.feed(b"ab\xf0\x9d") == "ab"
    assert buffer.pending == b"\xf0\x9d"
    assert buffer.feed(b"\x84") == ""
    assert buffer.pending == b"\xf0\x9d\x84"
    assert buffer.feed(b"\x9ez") == "𝄞z"
    assert buffer.pending == b""


def test_empty_chunk_is_harmless() -> None:
    buffer = DecodeBuffer("utf-8")

    assert buffer.feed(b"") == ""
    assert buffer.feed(b"\xc3") == ""
    assert buffer.feed(b"") == ""
    assert buffer.feed(b"\xa9") == "é"


def test_overflow_flushes_lossily_and_resets() -> None:
    buffer = DecodeBuffer("utf-8", capacity=8)

    text = buffer.feed(b"x" * 8 + b"\xe2\x82")

    assert text.startswith("xxxxxxxx")
    assert text.endswith("\ufffd")
    assert buffer.pending == b""
    assert buffer.overflows == 1


def test_overflow_includes_pending_bytes() -> None:
    buffer = DecodeBuffer("utf-8", capacity=8)

    assert buffer.feed(b"abc\xe2") == "abc"
    assert buffer.feed(b"\x82\xacdefghij") == "€defghij"
    assert buffer.pending == b""
    assert buffer.overflows == 1


def test_chunk_at_capacity_is_not_an_overflow() -> None:
    buffer = DecodeBuffer("utf-8", capacity=4)

    assert buffer.feed("€".encode()[:2]) == ""
    assert buffer.feed("€".encode()[2:] + b"a") == "€a"
    assert buffer.overflows == 0


def test_invalid_byte_does_not_delay_following_text() -> None:
    buffer = DecodeBuffer("utf-8")

    assert buffer.feed(b"ok\xff$ ") == "ok\ufffd$ "
    assert buffer.pending == b""
    assert buffer.malformed == 1


def test_invalid_continuation_is_replaced_at_once() -> None:
    buffer = DecodeBuffer("utf-8")

    assert buffer.feed(b"ab\xe2(cd") == "ab\ufffd(cd"
    assert buffer.feed(b"ef") == "ef"


def test_malformed_bytes_keep_incomplete_tail() -> None:
    buffer = DecodeBuffer("utf-8")

    assert buffer.feed(b"\xffabcd\xe2\x82") == "\ufffdabcd"
    assert buffer.pending == b"\xe2\x82"
    assert buffer.feed(b"\xac") == "€"
    assert buffer.malformed == 1


def test_reset_discards_pending() -> None:
    buffer = DecodeBuffer("utf-8")
    buffer.feed(b"\xe2\x82")

    buffer.reset()

    assert buffer.pending == b""
    assert buffer.feed(b"ok") == "ok"


def test_encoding_name_is_normalized() -> None:
    assert DecodeBuffer("UTF8").encoding == "utf-8"


def test_invalid_capacity_rejected() -> None:
    with pytest.raises(ValueError):
        DecodeBuffer("utf-8", capacity=0)
