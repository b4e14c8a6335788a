import pytest

from tomlast.ast import Node, Position, Range, Shape
from tomlast.kind import Kind


def _key_value(value, *parts):
    kv = Node(Kind.KEY_VALUE)
    value_node = Node(Kind.STRING, data=value)
    kv.attach_child(value_node)
    previous = value_node
    for part in parts:
        node = Node(Kind.KEY, data=part)
        previous.chain(node)
        previous = node
    return kv


def test_range_end_and_slice():
    r = Range(3, 4)
    assert r.end - r.offset == r.length
    data = b"abcdefghij"
    assert data[r.as_slice()] == b"defg"


def test_range_defaults_empty():
    assert Range() == Range(0, 0)
    assert Node(Kind.TABLE).raw == Range(0, 0)


def test_shape_holds_positions():
    start = Position(0, 1, 1)
    end = Position(5, 1, 6)
    shape = Shape(start, end)
    assert shape.start == start
    assert shape.end == end


def test_key_value_key_and_value():
    kv = _key_value(b"yellow", b"fruit", b"color")
    assert kv.value().data == b"yellow"
    assert [n.data for n in kv.key()] == [b"fruit", b"color"]
    assert all(n.kind is Kind.KEY for n in kv.key())


def test_table_key():
    table = Node(Kind.TABLE)
    first = Node(Kind.KEY, data=b"a")
    second = Node(Kind.KEY, data=b"b")
    table.attach_child(first)
    first.chain(second)
    assert [n.data for n in table.key()] == [b"a", b"b"]


def test_array_table_key():
    table = Node(Kind.ARRAY_TABLE)
    table.attach_child(Node(Kind.KEY, data=b"products"))
    assert [n.data for n in table.key()] == [b"products"]


def test_key_on_unsupported_kind():
    with pytest.raises(ValueError):
        Node(Kind.STRING, data=b"x").key()


def test_key_value_without_children():
    with pytest.raises(ValueError):
        Node(Kind.KEY_VALUE).key()


def test_value_without_child():
    with pytest.raises(ValueError):
        Node(Kind.KEY_VALUE).value()


def test_children_order():
    array = Node(Kind.ARRAY)
    elements = [Node(Kind.INTEGER, data=d) for d in (b"1", b"2", b"3")]
    array.attach_child(elements[0])
    elements[0].chain(elements[1])
    elements[1].chain(elements[2])
    assert list(array.children()) == elements


def test_no_children():
    assert list(Node(Kind.ARRAY).children()) == []


def test_siblings_include_self():
    first = Node(Kind.KEY, data=b"a")
    second = Node(Kind.KEY, data=b"b")
    first.chain(second)
    assert list(first.siblings()) == [first, second]
    assert list(second.siblings()) == [second]


def test_repr_mentions_kind():
    assert "KeyValue" in repr(Node(Kind.KEY_VALUE))