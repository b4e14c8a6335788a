import pytest

from tomlast.ast import Range
from tomlast.errors import ParserError


def test_str_is_message():
    err = ParserError(Range(4, 1), "expected character =")
    assert str(err) == "expected character ="
    assert err.message == "expected character ="


def test_highlight_kept():
    highlight = Range(7, 3)
    err = ParserError(highlight, "oops")
    assert err.highlight == highlight


def test_key_defaults_to_empty():
    err = ParserError(Range(0, 0), "oops")
    assert err.key == []


def test_key_is_copied():
    key = ["a", "b"]
    err = ParserError(Range(0, 0), "oops", key)
    key.append("c")
    assert err.key == ["a", "b"]


def test_can_be_raised_and_caught():
    with pytest.raises(ParserError) as info:
        raise ParserError(Range(1, 2), "invalid character")
    assert info.value.highlight == Range(1, 2)
    assert str(info.value) == "invalid character"