import pytest

from tomlast.kind import Kind


@pytest.mark.parametrize(
    "kind, text",
    [
        (Kind.INVALID, "Invalid"),
        (Kind.COMMENT, "Comment"),
        (Kind.KEY, "Key"),
        (Kind.TABLE, "Table"),
        (Kind.ARRAY_TABLE, "ArrayTable"),
        (Kind.KEY_VALUE, "KeyValue"),
        (Kind.ARRAY, "Array"),
        (Kind.INLINE_TABLE, "InlineTable"),
        (Kind.STRING, "String"),
        (Kind.BOOL, "Bool"),
        (Kind.FLOAT, "Float"),
        (Kind.INTEGER, "Integer"),
        (Kind.LOCAL_DATE, "LocalDate"),
        (Kind.LOCAL_TIME, "LocalTime"),
        (Kind.LOCAL_DATE_TIME, "LocalDateTime"),
        (Kind.DATE_TIME, "DateTime"),
    ],
)
def test_str(kind, text):
    assert str(kind) == text


def test_format_uses_name():
    assert f"{Kind(5)}" == "KeyValue"
    assert format(Kind(12), "") == "LocalDate"


def test_values_are_sequential_from_zero():
    assert [Kind(i) for i in range(16)] == list(Kind)
    assert Kind(0) is Kind.INVALID
    assert Kind(15) is Kind.DATE_TIME


def test_unknown_value_rejected():
    with pytest.raises(ValueError):
        Kind(16)