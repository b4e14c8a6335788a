"""Nodes of a TOML expression tree, and positions in the input."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from tomlast.kind import Kind


@dataclass(frozen=True)
class Range:
    """Range of bytes in the document."""

    offset: int = 0
    length: int = 0

    @property
    def end(self) -> int:
        return self.offset + self.length

    def as_slice(self) -> slice:
        return slice(self.offset, self.end)


@dataclass(frozen=True)
class Position:
    """A position in the input; line and column start at 1."""

    offset: int
    line: int
    column: int


@dataclass(frozen=True)
class Shape:
    """Start and end positions of a range in the input."""

    start: Position
    end: Position


@dataclass(eq=False)
class Node:
    """A node of a TOML expression.

    Children are read according to the kind: an array has one child per
    element, an inline table one key-value per entry, a key-value has its
    value first followed by the parts of its (possibly dotted) key, and
    tables have only the key parts.
    """

    kind: Kind
    raw: Range = field(default_factory=Range)
    data: bytes = b""
    child: Node | None = None
    next: Node | None = None

    def __repr__(self) -> str:
        return f"Node(kind={self.kind}, data={self.data!r})"

    def siblings(self) -> Iterator[Node]:
        """Iterate over this node and the nodes chained after it."""
        node: Node | None = self
        while node is not None:
            yield node
            node = node.next

    def children(self) -> Iterator[Node]:
        """Iterate over the children of this node."""
        if self.child is not None:
            yield from self.child.siblings()

    def key(self) -> list[Node]:
        """Return the key parts of a key-value, table or array table."""
        if self.kind is Kind.KEY_VALUE:
            value = self.child
            if value is None:
                raise ValueError("KeyValue should have at least two children")
            return list(value.next.siblings()) if value.next is not None else []
        if self.kind in (Kind.TABLE, Kind.ARRAY_TABLE):
            return list(self.children())
        raise ValueError(f"Key() is not supported on a {self.kind}")

    def value(self) -> Node:
        """Return the value node of a key-value."""
        if self.child is None:
            raise ValueError(f"{self.kind} node has no value")
        return self.child

    def attach_child(self, child: Node) -> None:
        self.child = child

    def chain(self, other: Node) -> None:
        self.next = other