"""Low level scanners over TOML input bytes.

Every scanner takes the document and a start offset, and returns the offset
just past the scanned token. Errors are raised as ParserError.
"""

from __future__ import annotations

import re

from tomlast.ast import Range
from tomlast.errors import ParserError

_WHITESPACE = re.compile(rb"[ \t]*")
_UNQUOTED_KEY = re.compile(rb"[A-Za-z0-9_-]*")

_INVALID_ASCII = frozenset([*range(0x00, 0x09), 0x0B, 0x0C, *range(0x0E, 0x20), 0x7F])

_QUOTE = 0x22
_APOSTROPHE = 0x27
_BACKSLASH = 0x5C
_NEWLINE = 0x0A
_CARRIAGE_RETURN = 0x0D


def scan_follows(data: bytes, pos: int, pattern: bytes) -> bool:
    """Tell whether ``pattern`` appears in ``data`` at ``pos``."""
    return data.startswith(pattern, pos)


def is_unquoted_key_char(c: int) -> bool:
    return (
        0x41 <= c <= 0x5A  # A-Z
        or 0x61 <= c <= 0x7A  # a-z
        or 0x30 <= c <= 0x39  # 0-9
        or c in (0x2D, 0x5F)  # - _
    )


def utf8_valid_next(data: bytes, pos: int) -> int:
    """Return the size of the valid character at ``pos``, or 0 if invalid.

    ASCII control characters other than tab, newline and carriage return are
    invalid, as are malformed UTF-8 sequences.
    """
    c = data[pos]
    if c < 0x80:
        return 0 if c in _INVALID_ASCII else 1
    if 0xC2 <= c <= 0xDF:
        size = 2
    elif 0xE0 <= c <= 0xEF:
        size = 3
    elif 0xF0 <= c <= 0xF4:
        size = 4
    else:
        return 0
    if pos + size > len(data):
        return 0
    try:
        data[pos : pos + size].decode("utf-8")
    except UnicodeDecodeError:
        return 0
    return size


def scan_unquoted_key(data: bytes, pos: int) -> int:
    return _UNQUOTED_KEY.match(data, pos).end()


def scan_whitespace(data: bytes, pos: int) -> int:
    return _WHITESPACE.match(data, pos).end()


def scan_literal_string(data: bytes, pos: int) -> int:
    """Scan a single-quoted string; the token includes the quotes."""
    end = len(data)
    i = pos + 1
    while i < end:
        c = data[i]
        if c == _APOSTROPHE:
            return i + 1
        if c in (_NEWLINE, _CARRIAGE_RETURN):
            raise ParserError(Range(i, 1), "literal strings cannot have new lines")
        size = utf8_valid_next(data, i)
        if size == 0:
            raise ParserError(Range(i, 1), "invalid character")
        i += size
    raise ParserError(Range(end, 0), "unterminated literal string")


def scan_multiline_literal_string(data: bytes, pos: int) -> int:
    """Scan a triple-single-quoted string; the token includes the quotes."""
    end = len(data)
    i = pos + 3
    while i < end:
        c = data[i]
        if c == _APOSTROPHE and scan_follows(data, i, b"'''"):
            i += 3
            # Up to two extra apostrophes belong to the content.
            if i >= end or data[i] != _APOSTROPHE:
                return i
            i += 1
            if i >= end or data[i] != _APOSTROPHE:
                return i
            i += 1
            if i < end and data[i] == _APOSTROPHE:
                raise ParserError(Range(i - 3, 4), "''' not allowed in multiline literal string")
            return i
        if c == _CARRIAGE_RETURN:
            if end < i + 2:
                raise ParserError(Range(end, 0), r"need a \n after \r")
            if data[i + 1] != _NEWLINE:
                raise ParserError(Range(i, 2), r"need a \n after \r")
            i += 2
            continue
        size = utf8_valid_next(data, i)
        if size == 0:
            raise ParserError(Range(i, 1), "invalid character")
        i += size
    raise ParserError(Range(end, 0), "multiline literal string not terminated by '''")


def scan_windows_newline(data: bytes, pos: int) -> int:
    end = len(data)
    if end - pos < 2:
        raise ParserError(Range(pos, end - pos), "windows new line expected")
    if data[pos + 1] != _NEWLINE:
        raise ParserError(Range(pos, end - pos), r"windows new line should be \r\n")
    return pos + 2


def scan_comment(data: bytes, pos: int) -> int:
    """Scan a comment starting with '#', up to but excluding the newline."""
    end = len(data)
    i = pos + 1
    while i < end:
        c = data[i]
        if c == _NEWLINE:
            return i
        if c == _CARRIAGE_RETURN:
            if i + 1 < end and data[i + 1] == _NEWLINE:
                return i + 1
            raise ParserError(Range(i, 1), "invalid character in comment")
        size = utf8_valid_next(data, i)
        if size == 0:
            raise ParserError(Range(i, 1), "invalid character in comment")
        i += size
    return end


def scan_basic_string(data: bytes, pos: int) -> tuple[int, bool]:
    """Scan a double-quoted string.

    Returns the end offset and whether the string holds escape sequences.
    """
    end = len(data)
    escaped = False
    i = pos + 1
    while i < end:
        c = data[i]
        if c == _QUOTE:
            return i + 1, escaped
        if c in (_NEWLINE, _CARRIAGE_RETURN):
            raise ParserError(Range(i, 1), "basic strings cannot have new lines")
        if c == _BACKSLASH:
            if end < i + 2:
                raise ParserError(Range(i, 1), "need a character after \\")
            escaped = True
            i += 1
        i += 1
    raise ParserError(Range(end, 0), 'basic string not terminated by "')


def scan_multiline_basic_string(data: bytes, pos: int) -> tuple[int, bool]:
    """Scan a triple-double-quoted string.

    Returns the end offset and whether the string holds escape sequences.
    """
    end = len(data)
    escaped = False
    i = pos + 3
    while i < end:
        c = data[i]
        if c == _QUOTE and scan_follows(data, i, b'"""'):
            i += 3
            # Up to two extra quotes belong to the content.
            if i >= end or data[i] != _QUOTE:
                return i, escaped
            i += 1
            if i >= end or data[i] != _QUOTE:
                return i, escaped
            i += 1
            if i < end and data[i] == _QUOTE:
                raise ParserError(Range(i - 3, 4), '""" not allowed in multiline basic string')
            return i, escaped
        if c == _BACKSLASH:
            if end < i + 2:
                raise ParserError(Range(end, 0), "need a character after \\")
            escaped = True
            i += 1
        elif c == _CARRIAGE_RETURN:
            if end < i + 2:
                raise ParserError(Range(end, 0), r"need a \n after \r")
            if data[i + 1] != _NEWLINE:
                raise ParserError(Range(i, 2), r"need a \n after \r")
            i += 1
        i += 1
    raise ParserError(Range(end, 0), 'multiline basic string not terminated by """')