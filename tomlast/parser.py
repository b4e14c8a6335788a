"""Iterative TOML parser producing one tree per top-level expression."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol, runtime_checkable

from tomlast.ast import Node, Position, Range, Shape
from tomlast.errors import ParserError
from tomlast.kind import Kind
from tomlast.scanner import (
    is_unquoted_key_char,
    scan_comment,
    scan_follows,
    scan_unquoted_key,
    scan_whitespace,
    scan_windows_newline,
)
from tomlast.strings import (
    parse_basic_string,
    parse_literal_string,
    parse_multiline_basic_string,
    parse_multiline_literal_string,
)

_NEWLINE = 0x0A
_CARRIAGE_RETURN = 0x0D
_HASH = ord("#")
_LBRACKET = ord("[")
_RBRACKET = ord("]")
_LBRACE = ord("{")
_RBRACE = ord("}")
_COMMA = ord(",")
_DOT = ord(".")
_QUOTE = ord('"')
_APOSTROPHE = ord("'")
_SPACE = ord(" ")

_MIN_OFFSET_OF_TZ = 8


def _is_digit(c: int) -> bool:
    return 0x30 <= c <= 0x39


def _is_hex(c: int) -> bool:
    return _is_digit(c) or 0x61 <= c <= 0x66 or 0x41 <= c <= 0x46 or c == 0x5F


def _is_octal(c: int) -> bool:
    return 0x30 <= c <= 0x37 or c == 0x5F


def _is_binary(c: int) -> bool:
    return c in (0x30, 0x31, 0x5F)


_PREFIXED_INTEGERS = {ord("x"): _is_hex, ord("o"): _is_octal, ord("b"): _is_binary}


def _describe(c: int) -> str:
    text = f"U+{c:04X}"
    ch = chr(c)
    if ch.isprintable():
        text += f" '{ch}'"
    return text


@runtime_checkable
class Unmarshaler(Protocol):
    """Implemented by types that decode themselves from a TOML value node."""

    def unmarshal_toml(self, value: Node) -> None:
        """Populate the object from ``value``; raise an exception to reject it."""


class Parser:
    """Scans a TOML document and yields the tree of each top-level expression.

    Call :meth:`reset` with a document, then iterate :meth:`expressions`.
    Parsing errors are raised as :class:`ParserError` during iteration.
    """

    def __init__(self, keep_comments: bool = False) -> None:
        self.keep_comments = keep_comments
        self._data = b""
        self._pos = 0
        self._first = True

    @property
    def data(self) -> bytes:
        """The document given to the last call to :meth:`reset`."""
        return self._data

    def reset(self, data: bytes | str) -> None:
        """Prepare the parser for a new document."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._data = bytes(data)
        self._pos = 0
        self._first = True

    def expressions(self) -> Iterator[Node]:
        """Yield every top-level expression of the document in order."""
        end = len(self._data)
        while self._pos < end:
            try:
                if not self._first:
                    self._pos = self._parse_newline(self._pos)
                    if self._pos >= end:
                        return
                node, self._pos = self._parse_expression(self._pos)
            except ParserError:
                self._pos = end
                raise
            self._first = False
            if node is not None:
                yield node

    def raw(self, raw: Range) -> bytes:
        """Return the bytes of the document covered by ``raw``."""
        return self._data[raw.as_slice()]

    def shape(self, raw: Range) -> Shape:
        """Return line and column positions of the start and end of ``raw``."""
        return Shape(self._position(raw.offset), self._position(raw.end))

    def _position(self, offset: int) -> Position:
        lead = self._data[:offset]
        return Position(
            offset=offset,
            line=lead.count(b"\n") + 1,
            column=len(lead) - lead.rfind(b"\n"),
        )

    # Helpers

    def _atmost(self, pos: int, n: int) -> Range:
        return Range(pos, min(n, len(self._data) - pos))

    def _whitespace(self, pos: int) -> int:
        return scan_whitespace(self._data, pos)

    def _expect(self, char: str, pos: int) -> int:
        data = self._data
        if pos >= len(data):
            raise ParserError(Range(pos, 0), f"expected character {char} but the document ended here")
        if data[pos] != ord(char):
            raise ParserError(Range(pos, 1), f"expected character {char}")
        return pos + 1

    # Grammar

    def _parse_newline(self, pos: int) -> int:
        c = self._data[pos]
        if c == _NEWLINE:
            return pos + 1
        if c == _CARRIAGE_RETURN:
            return scan_windows_newline(self._data, pos)
        raise ParserError(Range(pos, 1), f"expected newline but got {_describe(c)}")

    def _parse_comment(self, pos: int) -> tuple[Node | None, int]:
        end = scan_comment(self._data, pos)
        node = None
        if self.keep_comments:
            node = Node(Kind.COMMENT, Range(pos, end - pos), self._data[pos:end])
        return node, end

    def _parse_expression(self, pos: int) -> tuple[Node | None, int]:
        data = self._data
        pos = self._whitespace(pos)
        if pos >= len(data):
            return None, pos
        c = data[pos]
        if c == _HASH:
            return self._parse_comment(pos)
        if c in (_NEWLINE, _CARRIAGE_RETURN):
            return None, pos

        if c == _LBRACKET:
            node, pos = self._parse_table(pos)
        else:
            node, pos = self._parse_keyval(pos)

        pos = self._whitespace(pos)
        if pos < len(data) and data[pos] == _HASH:
            comment, pos = self._parse_comment(pos)
            if comment is not None:
                node.chain(comment)
        return node, pos

    def _parse_table(self, pos: int) -> tuple[Node, int]:
        data = self._data
        if pos + 1 < len(data) and data[pos + 1] == _LBRACKET:
            return self._parse_array_table(pos)
        return self._parse_std_table(pos)

    def _parse_array_table(self, pos: int) -> tuple[Node, int]:
        node = Node(Kind.ARRAY_TABLE)
        pos = self._whitespace(pos + 2)
        key, pos = self._parse_key(pos)
        node.attach_child(key)
        pos = self._whitespace(pos)
        pos = self._expect("]", pos)
        return node, self._expect("]", pos)

    def _parse_std_table(self, pos: int) -> tuple[Node, int]:
        node = Node(Kind.TABLE)
        pos = self._whitespace(pos + 1)
        key, pos = self._parse_key(pos)
        node.attach_child(key)
        pos = self._whitespace(pos)
        return node, self._expect("]", pos)

    def _parse_keyval(self, pos: int) -> tuple[Node, int]:
        node = Node(Kind.KEY_VALUE)
        key, pos = self._parse_key(pos)
        pos = self._whitespace(pos)
        if pos >= len(self._data):
            raise ParserError(Range(pos, 0), "expected = after a key, but the document ends there")
        pos = self._expect("=", pos)
        pos = self._whitespace(pos)
        value, pos = self._parse_val(pos)
        value.chain(key)
        node.attach_child(value)
        return node, pos

    def _parse_key(self, pos: int) -> tuple[Node, int]:
        data = self._data
        raw, key, pos = self._parse_simple_key(pos)
        first = Node(Kind.KEY, raw, key)
        last = first
        while True:
            pos = self._whitespace(pos)
            if pos < len(data) and data[pos] == _DOT:
                pos = self._whitespace(pos + 1)
                raw, key, pos = self._parse_simple_key(pos)
                part = Node(Kind.KEY, raw, key)
                last.chain(part)
                last = part
            else:
                return first, pos

    def _parse_simple_key(self, pos: int) -> tuple[Range, bytes, int]:
        data = self._data
        if pos >= len(data):
            raise ParserError(Range(pos, 0), "expected key but found none")
        c = data[pos]
        if c == _APOSTROPHE:
            return parse_literal_string(data, pos)
        if c == _QUOTE:
            return parse_basic_string(data, pos)
        if is_unquoted_key_char(c):
            end = scan_unquoted_key(data, pos)
            return Range(pos, end - pos), data[pos:end], end
        raise ParserError(Range(pos, 1), f"invalid character at start of key: {chr(c)}")

    def _parse_val(self, pos: int) -> tuple[Node, int]:
        data = self._data
        if pos >= len(data):
            raise ParserError(Range(pos, 0), "expected value, not eof")

        c = data[pos]
        if c == _QUOTE:
            if scan_follows(data, pos, b'"""'):
                raw, value, end = parse_multiline_basic_string(data, pos)
            else:
                raw, value, end = parse_basic_string(data, pos)
            return Node(Kind.STRING, raw, value), end
        if c == _APOSTROPHE:
            if scan_follows(data, pos, b"'''"):
                raw, value, end = parse_multiline_literal_string(data, pos)
            else:
                raw, value, end = parse_literal_string(data, pos)
            return Node(Kind.STRING, raw, value), end
        if c == ord("t"):
            if not scan_follows(data, pos, b"true"):
                raise ParserError(self._atmost(pos, 4), "expected 'true'")
            return Node(Kind.BOOL, data=data[pos : pos + 4]), pos + 4
        if c == ord("f"):
            if not scan_follows(data, pos, b"false"):
                raise ParserError(self._atmost(pos, 5), "expected 'false'")
            return Node(Kind.BOOL, data=data[pos : pos + 5]), pos + 5
        if c == _LBRACKET:
            return self._parse_val_array(pos)
        if c == _LBRACE:
            return self._parse_inline_table(pos)
        return self._parse_int_or_float_or_date_time(pos)

    def _parse_inline_table(self, pos: int) -> tuple[Node, int]:
        data = self._data
        parent = Node(Kind.INLINE_TABLE, Range(pos, 1))
        last: Node | None = None
        pos += 1

        while pos < len(data):
            previous = pos
            pos = self._whitespace(pos)
            if pos >= len(data):
                raise ParserError(Range(previous, 1), "inline table is incomplete")
            if data[pos] == _RBRACE:
                break
            if last is not None:
                pos = self._expect(",", pos)
                pos = self._whitespace(pos)

            kv, pos = self._parse_keyval(pos)
            if last is None:
                parent.attach_child(kv)
            else:
                last.chain(kv)
            last = kv

        return parent, self._expect("}", pos)

    def _parse_val_array(self, pos: int) -> tuple[Node, int]:
        data = self._data
        array_start = pos
        pos += 1
        parent = Node(Kind.ARRAY)
        first = True
        last: Node | None = None

        def add_child(node: Node) -> None:
            nonlocal last
            if last is None:
                parent.attach_child(node)
            else:
                last.chain(node)
            last = node

        while pos < len(data):
            comment, pos = self._parse_optional_whitespace_comment_newline(pos)
            if comment is not None:
                add_child(comment)

            if pos >= len(data):
                raise ParserError(Range(array_start, 1), "array is incomplete")
            if data[pos] == _RBRACKET:
                break

            if data[pos] == _COMMA:
                if first:
                    raise ParserError(Range(pos, 1), "array cannot start with comma")
                comment, pos = self._parse_optional_whitespace_comment_newline(pos + 1)
                if comment is not None:
                    add_child(comment)
            elif not first:
                raise ParserError(Range(pos, 1), "array elements must be separated by commas")

            # Trailing commas are allowed.
            if pos < len(data) and data[pos] == _RBRACKET:
                break

            value, pos = self._parse_val(pos)
            add_child(value)

            comment, pos = self._parse_optional_whitespace_comment_newline(pos)
            if comment is not None:
                add_child(comment)

            first = False

        return parent, self._expect("]", pos)

    def _parse_optional_whitespace_comment_newline(self, pos: int) -> tuple[Node | None, int]:
        data = self._data
        root: Node | None = None
        latest: Node | None = None

        while pos < len(data):
            pos = self._whitespace(pos)
            if pos < len(data) and data[pos] == _HASH:
                comment, pos = self._parse_comment(pos)
                if comment is not None:
                    if root is None:
                        root = comment
                    elif latest is None:
                        root.attach_child(comment)
                        latest = comment
                    else:
                        latest.chain(comment)
                        latest = comment

            if pos >= len(data):
                break
            if data[pos] in (_NEWLINE, _CARRIAGE_RETURN):
                pos = self._parse_newline(pos)
            else:
                break

        return root, pos

    def _parse_int_or_float_or_date_time(self, pos: int) -> tuple[Node, int]:
        data = self._data
        c = data[pos]
        if c == ord("i"):
            if not scan_follows(data, pos, b"inf"):
                raise ParserError(self._atmost(pos, 3), "expected 'inf'")
            return Node(Kind.FLOAT, Range(pos, 3), data[pos : pos + 3]), pos + 3
        if c == ord("n"):
            if not scan_follows(data, pos, b"nan"):
                raise ParserError(self._atmost(pos, 3), "expected 'nan'")
            return Node(Kind.FLOAT, Range(pos, 3), data[pos : pos + 3]), pos + 3
        if c in (ord("+"), ord("-")):
            return self._scan_int_or_float(pos)

        remaining = len(data) - pos
        if remaining < 3:
            return self._scan_int_or_float(pos)

        for idx, ch in enumerate(data[pos : pos + min(5, remaining)]):
            if _is_digit(ch):
                continue
            if (idx == 2 and ch == ord(":")) or (idx == 4 and ch == ord("-")):
                return self._scan_date_time(pos)
            break

        return self._scan_int_or_float(pos)

    def _scan_date_time(self, pos: int) -> tuple[Node, int]:
        """Scan characters in [0-9Tt:Zz.+-] and at most one space followed by a digit."""
        data = self._data
        n = len(data) - pos
        has_date = has_time = has_tz = seen_space = False

        i = 0
        while i < n:
            c = data[pos + i]
            if _is_digit(c):
                pass
            elif c == ord("-"):
                has_date = True
                if i >= _MIN_OFFSET_OF_TZ:
                    has_tz = True
            elif c in b"Tt:.":
                has_time = True
            elif c in b"+Zz":
                has_tz = True
            elif c == _SPACE:
                if not seen_space and i + 1 < n and _is_digit(data[pos + i + 1]):
                    i += 2
                    # Do not reach past the end of a malformed document.
                    if i >= n:
                        i -= 1
                    seen_space = True
                    has_time = True
                else:
                    break
            else:
                break
            i += 1

        if has_time:
            if has_date:
                kind = Kind.DATE_TIME if has_tz else Kind.LOCAL_DATE_TIME
            else:
                kind = Kind.LOCAL_TIME
        else:
            kind = Kind.LOCAL_DATE

        return Node(kind, data=data[pos : pos + i]), pos + i

    def _scan_int_or_float(self, pos: int) -> tuple[Node, int]:
        data = self._data
        end = len(data)

        if end - pos > 2 and data[pos] == ord("0") and data[pos + 1] not in b".eE":
            is_valid = _PREFIXED_INTEGERS.get(data[pos + 1])
            if is_valid is None:
                i = pos + 1
            else:
                i = pos + 2
                while i < end and is_valid(data[i]):
                    i += 1
            return Node(Kind.INTEGER, Range(pos, i - pos), data[pos:i]), i

        is_float = False
        i = pos
        while i < end:
            c = data[i]
            if _is_digit(c) or c in b"+-_":
                i += 1
                continue
            if c in b".eE":
                is_float = True
                i += 1
                continue
            if c == ord("i"):
                if scan_follows(data, i, b"inf"):
                    return Node(Kind.FLOAT, Range(pos, i + 3 - pos), data[pos : i + 3]), i + 3
                raise ParserError(Range(i, 1), "unexpected character 'i' while scanning for a number")
            if c == ord("n"):
                if scan_follows(data, i, b"nan"):
                    return Node(Kind.FLOAT, Range(pos, i + 3 - pos), data[pos : i + 3]), i + 3
                raise ParserError(Range(i, 1), "unexpected character 'n' while scanning for a number")
            break

        if i == pos:
            raise ParserError(Range(pos, end - pos), "incomplete number")

        kind = Kind.FLOAT if is_float else Kind.INTEGER
        return Node(kind, Range(pos, i - pos), data[pos:i]), i


def parse(data: bytes | str, keep_comments: bool = False) -> list[Node]:
    """Parse a whole document and return its top-level expressions."""
    parser = Parser(keep_comments)
    parser.reset(data)
    return list(parser.expressions())