"""Tests for console key parsing."""

from __future__ import annotations

from termbridge.console.keys import Key, KeyEvent, KeyParser, char_event, windows_key_event


def test_plain_characters() -> None:
    events = KeyParser().feed(b"aZ1")

    assert events == [
        KeyEvent("A", "a"),
        KeyEvent("Z", "Z", shift=True),
        KeyEvent("1", "1"),
    ]


def test_control_characters() -> None:
    events = KeyParser().feed(b"\x03\x02\r\t\x7f")

    assert events[0] == KeyEvent("C", "\x03", ctrl=True)
    assert events[1] == KeyEvent("B", "\x02", ctrl=True)
    assert [e.key for e in events[2:]] == [Key.ENTER, Key.TAB, Key.BACKSPACE]


def test_tilde_and_period() -> None:
    tilde, period = KeyParser().feed(b"~.")

    assert tilde.key == Key.TILDE
    assert tilde.shift is True
    assert period.key == Key.PERIOD
    assert char_event("`") == KeyEvent(Key.TILDE, "`")


def test_arrow_sequences() -> None:
    events = KeyParser().feed(b"\x1b[A\x1b[B\x1bOC\x1b[D")

    assert [e.key for e in events] == [Key.UP, Key.DOWN, Key.RIGHT, Key.LEFT]
    assert events[0].char == "\x1b[A"


def test_modified_arrow() -> None:
    (event,) = KeyParser().feed(b"\x1b[1;5C")

    assert event.key == Key.RIGHT
    assert event.ctrl is True
    assert event.shift is False


def test_tilde_coded_keys() -> None:
    events = KeyParser().feed(b"\x1b[3~\x1b[5~")

    assert [e.key for e in events] == [Key.DELETE, Key.PAGE_UP]
    assert events[0].char == "\x1b[3~"


def test_lone_escape_and_alt_key() -> None:
    assert KeyParser().feed(b"\x1b") == [KeyEvent(Key.ESCAPE, "\x1b")]

    (alt_x,) = KeyParser().feed(b"\x1bx")
    assert alt_x == KeyEvent("X", "\x1bx", alt=True)


def test_unknown_sequence_is_forwarded() -> None:
    (event,) = KeyParser().feed(b"\x1b[99z")

    assert event.char == "\x1b[99z"


def test_multibyte_character_across_reads() -> None:
    parser = KeyParser()

    assert parser.feed(b"\xc3") == []
    assert parser.feed(b"\xa9") == [KeyEvent("é", "é")]


def test_windows_scan_codes() -> None:
    assert windows_key_event("\xe0", "H").key == Key.UP
    assert windows_key_event("\x00", "P").key == Key.DOWN
    assert windows_key_event("\xe0", "K").key == Key.LEFT
    assert windows_key_event("\xe0", "M").key == Key.RIGHT
    assert windows_key_event("\x03") == KeyEvent("C", "\x03", ctrl=True)
    assert windows_key_event("~").shift is True
