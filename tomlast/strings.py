"""Parsers for the four kinds of TOML strings.

Each parser takes the document and the offset of the opening delimiter and
returns the raw range of the token, the decoded value as UTF-8 bytes, and the
offset just past the token.
"""

from __future__ import annotations

from tomlast.ast import Range
from tomlast.errors import ParserError
from tomlast.scanner import (
    scan_basic_string,
    scan_literal_string,
    scan_multiline_basic_string,
    scan_multiline_literal_string,
    utf8_valid_next,
)

_MAX_RUNE = 0x10FFFF

_SIMPLE_ESCAPES = {
    ord('"'): b'"',
    ord("\\"): b"\\",
    ord("b"): b"\b",
    ord("f"): b"\f",
    ord("n"): b"\n",
    ord("r"): b"\r",
    ord("t"): b"\t",
    ord("e"): b"\x1b",
}

_LINE_SPACE = frozenset(b" \t")
_TRIMMED_AFTER_ESCAPE = frozenset(b" \t\r\n")

_BACKSLASH = 0x5C
_NEWLINE = 0x0A
_CARRIAGE_RETURN = 0x0D


def _describe(c: int) -> str:
    """Describe a code point as ``U+XXXX 'c'`` when printable."""
    text = f"U+{c:04X}"
    ch = chr(c)
    if ch.isprintable():
        text += f" '{ch}'"
    return text


def _hex_value(c: int) -> int | None:
    if 0x30 <= c <= 0x39:
        return c - 0x30
    if 0x61 <= c <= 0x66:
        return c - 0x61 + 10
    if 0x41 <= c <= 0x46:
        return c - 0x41 + 10
    return None


def hex_to_rune(data: bytes, start: int, end: int, length: int) -> int:
    """Decode ``length`` hex digits found in ``data[start:end]`` to a code point."""
    available = end - start
    if available < length:
        raise ParserError(
            Range(start, max(available, 0)),
            f"unicode point needs {length} character, not {available}",
        )

    value = 0
    for offset, c in enumerate(data[start : start + length]):
        digit = _hex_value(c)
        if digit is None:
            raise ParserError(Range(start + offset, 1), "non-hex character")
        value = value * 16 + digit

    if value > _MAX_RUNE or 0xD800 <= value < 0xE000:
        raise ParserError(Range(start, length), "escape sequence is invalid Unicode code point")

    return value


def _validate(data: bytes, start: int, stop: int) -> None:
    """Check that ``data[start:stop]`` holds only characters valid in TOML."""
    i = start
    while i < stop:
        size = utf8_valid_next(data, i)
        if size == 0:
            raise ParserError(Range(i, 1), "invalid UTF-8")
        i += size


def _skip_initial_newline(data: bytes, i: int) -> int:
    if data[i] == _NEWLINE:
        return i + 1
    if data[i] == _CARRIAGE_RETURN and data[i + 1] == _NEWLINE:
        return i + 2
    return i


def _decode_escape(data: bytes, i: int, unicode_end: int, out: bytearray) -> int:
    """Decode the escape whose letter sits at ``i``; return the offset of its last byte."""
    c = data[i]
    simple = _SIMPLE_ESCAPES.get(c)
    if simple is not None:
        out += simple
        return i
    if c == ord("u"):
        out += chr(hex_to_rune(data, i + 1, unicode_end(i, 4), 4)).encode("utf-8")
        return i + 4
    if c == ord("U"):
        out += chr(hex_to_rune(data, i + 1, unicode_end(i, 8), 8)).encode("utf-8")
        return i + 8
    raise ParserError(Range(i, 1), f"invalid escaped character {_describe(c)}")


def _copy_char(data: bytes, i: int, out: bytearray) -> int:
    size = utf8_valid_next(data, i)
    if size == 0:
        raise ParserError(Range(i, 1), f"invalid character {_describe(data[i])}")
    out += data[i : i + size]
    return i + size


def parse_literal_string(data: bytes, pos: int) -> tuple[Range, bytes, int]:
    """Parse a single-quoted string starting at ``pos``."""
    end = scan_literal_string(data, pos)
    return Range(pos, end - pos), data[pos + 1 : end - 1], end


def parse_multiline_literal_string(data: bytes, pos: int) -> tuple[Range, bytes, int]:
    """Parse a triple-single-quoted string starting at ``pos``."""
    end = scan_multiline_literal_string(data, pos)
    start = _skip_initial_newline(data, pos + 3)
    return Range(pos, end - pos), data[start : end - 3], end


def parse_basic_string(data: bytes, pos: int) -> tuple[Range, bytes, int]:
    """Parse a double-quoted string starting at ``pos``, decoding escapes."""
    end, escaped = scan_basic_string(data, pos)
    raw = Range(pos, end - pos)
    start = pos + 1
    stop = end - 1

    if not escaped:
        _validate(data, start, stop)
        return raw, data[start:stop], end

    out = bytearray()
    i = start
    while i < stop:
        if data[i] == _BACKSLASH:
            i = _decode_escape(data, i + 1, lambda at, _n: stop, out) + 1
        else:
            i = _copy_char(data, i, out)

    return raw, bytes(out), end


def parse_multiline_basic_string(data: bytes, pos: int) -> tuple[Range, bytes, int]:
    """Parse a triple-double-quoted string starting at ``pos``.

    A backslash ending a line trims it together with all following
    whitespace and newlines.
    """
    end, escaped = scan_multiline_basic_string(data, pos)
    raw = Range(pos, end - pos)
    start = _skip_initial_newline(data, pos + 3)
    stop = end - 3

    if not escaped:
        _validate(data, start, stop)
        return raw, data[start:stop], end

    def unicode_end(at: int, length: int) -> int:
        return min(at + 1 + length, end)

    out = bytearray()
    i = start
    while i < stop:
        if data[i] != _BACKSLASH:
            i = _copy_char(data, i, out)
            continue

        line_ending = False
        j = 1
        while j < stop - i:
            c = data[i + j]
            if c in _LINE_SPACE:
                j += 1
                continue
            if c == _CARRIAGE_RETURN and data[i + j + 1] == _NEWLINE:
                j += 1
                continue
            if c == _NEWLINE:
                line_ending = True
            break

        if line_ending:
            i += j
            while i < stop and data[i] in _TRIMMED_AFTER_ESCAPE:
                i += 1
            continue

        i = _decode_escape(data, i + 1, unicode_end, out) + 1

    return raw, bytes(out), end