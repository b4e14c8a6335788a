import pytest

from tomlast.ast import Range
from tomlast.errors import ParserError
from tomlast.scanner import (
    is_unquoted_key_char,
    scan_basic_string,
    scan_comment,
    scan_follows,
    scan_literal_string,
    scan_multiline_basic_string,
    scan_multiline_literal_string,
    scan_unquoted_key,
    scan_whitespace,
    scan_windows_newline,
    utf8_valid_next,
)

VALID_10_ASCII = b"1234567890"
VALID_10_UTF8 = "日本語a".encode()
VALID_1K_UTF8 = "0123456789日本語日本語日本語日abcdefghijklmnopqrstuvwx".encode() * 16
VALID_1K_ASCII = b"012345678998jhjklasDJKLAAdjdfjsdklfjdslkabcdefghijklmnopqrstuvwx" * 16

BENCH_INPUTS = [VALID_10_ASCII, VALID_10_UTF8, VALID_1K_UTF8, VALID_1K_ASCII]

INVALID_CHARACTERS = [0x7F, *range(0x00, 0x09), 0x0B, 0x0C, *range(0x0E, 0x20)]


@pytest.mark.parametrize("body", BENCH_INPUTS)
def test_scan_comment_bench_inputs(body):
    data = b"# " + body + b"\n"
    assert scan_comment(data, 0) == len(data) - 1


@pytest.mark.parametrize("body", BENCH_INPUTS)
def test_scan_literal_string_bench_inputs(body):
    data = b"'" + body + b"'"
    assert scan_literal_string(data, 0) == len(data)


def test_scan_follows():
    assert scan_follows(b"a = true", 4, b"true")
    assert not scan_follows(b"a = tru", 4, b"true")


def test_is_unquoted_key_char():
    assert all(is_unquoted_key_char(c) for c in b"azAZ09-_")
    assert not any(is_unquoted_key_char(c) for c in b". =\"'#")


@pytest.mark.parametrize("c", INVALID_CHARACTERS)
def test_utf8_valid_next_rejects_control_characters(c):
    assert utf8_valid_next(bytes([c]), 0) == 0


@pytest.mark.parametrize("text", ["\t", "\n", "\r", "a", "é", "日", "🙂"])
def test_utf8_valid_next_accepts_valid(text):
    encoded = text.encode()
    assert utf8_valid_next(encoded + b"x", 0) == len(encoded)


@pytest.mark.parametrize(
    "data",
    [b"\x80", b"\xc0\x80", b"\xed\xa0\x80", b"\xe2\x82", b"\xe2\x80\x00", b"\xf2\x81\x81\x00", b"\xef", b"\xc2"],
)
def test_utf8_valid_next_rejects_malformed(data):
    assert utf8_valid_next(data, 0) == 0


def test_scan_unquoted_key():
    data = b"abc-_1.x"
    assert data[: scan_unquoted_key(data, 0)] == b"abc-_1"
    assert scan_unquoted_key(b"=x", 0) == 0


def test_scan_whitespace():
    data = b"  \t x"
    assert data[scan_whitespace(data, 0):] == b"x"
    assert scan_whitespace(b"x", 0) == 0


def test_scan_literal_string_stops_at_quote():
    data = b"x = 'foo' # c"
    assert data[4 : scan_literal_string(data, 4)] == b"'foo'"


def test_scan_literal_string_newline():
    data = b"'hello\nworld'"
    with pytest.raises(ParserError) as info:
        scan_literal_string(data, 0)
    assert str(info.value) == "literal strings cannot have new lines"
    assert info.value.highlight == Range(data.index(b"\n"), 1)


def test_scan_literal_string_unterminated():
    data = b"'hello"
    with pytest.raises(ParserError) as info:
        scan_literal_string(data, 0)
    assert str(info.value) == "unterminated literal string"
    assert info.value.highlight == Range(len(data), 0)


@pytest.mark.parametrize("c", INVALID_CHARACTERS)
def test_scan_literal_string_control_character(c):
    with pytest.raises(ParserError):
        scan_literal_string(b"'" + bytes([c]) + b"'", 0)


@pytest.mark.parametrize("c", INVALID_CHARACTERS)
def test_scan_multiline_literal_string_control_character(c):
    with pytest.raises(ParserError):
        scan_multiline_literal_string(b"'''" + bytes([c]) + b"'''", 0)


def test_scan_multiline_literal_string_extra_quotes():
    token = b"'''a'''''"
    assert scan_multiline_literal_string(token + b" x", 0) == len(token)


def test_scan_multiline_literal_string_too_many_quotes():
    with pytest.raises(ParserError) as info:
        scan_multiline_literal_string(b"'''a''''''", 0)
    assert str(info.value) == "''' not allowed in multiline literal string"


def test_scan_multiline_literal_string_crlf():
    data = b"'''\r\nTest'''"
    assert scan_multiline_literal_string(data, 0) == len(data)


@pytest.mark.parametrize("data", [b"'''\r'''", b"'''\r"])
def test_scan_multiline_literal_string_bad_cr(data):
    with pytest.raises(ParserError) as info:
        scan_multiline_literal_string(data, 0)
    assert str(info.value) == r"need a \n after \r"


def test_scan_multiline_literal_string_unterminated():
    with pytest.raises(ParserError) as info:
        scan_multiline_literal_string(b"'''hello", 0)
    assert str(info.value) == "multiline literal string not terminated by '''"


def test_scan_windows_newline():
    assert scan_windows_newline(b"\r\nx", 0) == 2


def test_scan_windows_newline_dangling():
    with pytest.raises(ParserError) as info:
        scan_windows_newline(b"A = 1\r", 5)
    assert str(info.value) == "windows new line expected"


def test_scan_windows_newline_missing_lf():
    with pytest.raises(ParserError) as info:
        scan_windows_newline(b"\rB = 2", 0)
    assert str(info.value) == r"windows new line should be \r\n"


def test_scan_comment_crlf():
    data = b"# foo\r\na=2"
    assert scan_comment(data, 0) == data.index(b"\n")


def test_scan_comment_to_end():
    data = b"a=19#9-"
    assert scan_comment(data, 4) == len(data)


@pytest.mark.parametrize("data", [b"# this is a test\ra=1", b"# this is a test\ba=1", b"#\x00\n"])
def test_scan_comment_invalid(data):
    with pytest.raises(ParserError) as info:
        scan_comment(data, 0)
    assert str(info.value) == "invalid character in comment"


def test_scan_basic_string_plain():
    token = b'"hello"'
    assert scan_basic_string(token + b" # c", 0) == (len(token), False)


def test_scan_basic_string_escaped():
    token = b'"a\\"b"'
    assert scan_basic_string(token + b"x", 0) == (len(token), True)


def test_scan_basic_string_newline():
    with pytest.raises(ParserError) as info:
        scan_basic_string(b'"hello\n"', 0)
    assert str(info.value) == "basic strings cannot have new lines"


def test_scan_basic_string_unfinished_escape():
    with pytest.raises(ParserError) as info:
        scan_basic_string(b'"hello \\', 0)
    assert str(info.value) == "need a character after \\"


def test_scan_basic_string_unterminated():
    data = b'"\\t'
    with pytest.raises(ParserError) as info:
        scan_basic_string(data, 0)
    assert str(info.value) == 'basic string not terminated by "'
    assert info.value.highlight == Range(len(data), 0)


def test_scan_multiline_basic_string_plain():
    token = b'"""a"""'
    assert scan_multiline_basic_string(token, 0) == (len(token), False)


def test_scan_multiline_basic_string_extra_quotes():
    token = b'"""a"""""'
    assert scan_multiline_basic_string(token + b" x", 0) == (len(token), False)


def test_scan_multiline_basic_string_too_many_quotes():
    with pytest.raises(ParserError) as info:
        scan_multiline_basic_string(b'"""a""""""', 0)
    assert str(info.value) == '""" not allowed in multiline basic string'


def test_scan_multiline_basic_string_escaped_crlf():
    token = b'"""\\\r\n"""'
    assert scan_multiline_basic_string(token, 0) == (len(token), True)


def test_scan_multiline_basic_string_unfinished_escape():
    with pytest.raises(ParserError) as info:
        scan_multiline_basic_string(b'"""hello \\', 0)
    assert str(info.value) == "need a character after \\"


@pytest.mark.parametrize("data", [b'"""\r"""', b'"""\r'])
def test_scan_multiline_basic_string_bad_cr(data):
    with pytest.raises(ParserError) as info:
        scan_multiline_basic_string(data, 0)
    assert str(info.value) == r"need a \n after \r"


def test_scan_multiline_basic_string_unterminated():
    with pytest.raises(ParserError) as info:
        scan_multiline_basic_string(b'"""hello', 0)
    assert str(info.value) == 'multiline basic string not terminated by """'