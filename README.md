# tomlast

`tomlast` reads a TOML document one top-level expression at a time and hands
back a small syntax tree for each one. Every node records what kind of TOML
construct it is and its decoded bytes. Many nodes also record where they sit
in the input. This makes the package a base for linters, formatters and
custom decoders that need more than a plain dictionary.

Python 3.10 or later is required. The package has no runtime dependencies.

## Parsing a document

```python
from tomlast.parser import parse

doc = b'''
hello = "world"
value = 42
'''

for expr in parse(doc):
    key = b".".join(part.data for part in expr.key())
    value = expr.value()
    print(expr.kind, key, value.kind, value.data)
```

This prints:

```
KeyValue b'hello' String b'world'
KeyValue b'value' Integer b'42'
```

`parse(data, keep_comments=False)` accepts `bytes` or `str`. It returns a
list of all top-level expressions. For finer control, use the `Parser` class
directly:

```python
from tomlast.parser import Parser

parser = Parser(keep_comments=True)
parser.reset("[table] # next to table\nkey = 'value'\n")
for expr in parser.expressions():
    print(expr.kind)
    for part in expr.key() if expr.kind.name != "COMMENT" else []:
        shape = parser.shape(part.raw)
        print("  key", part.data, "at line", shape.start.line, "column", shape.start.column)
```

`Parser.expressions()` is a generator. Each expression should be processed
before you take the next one. `Parser.data` holds the document passed to the
last `reset`.

With `keep_comments=True`, comments are kept in the tree:

- A comment standing on its own line is yielded as a top-level `Comment`
  expression.
- A comment after an expression on the same line is chained as that
  expression's next sibling.
- Comments inside arrays become children of the array.

## The tree

Each `Node` (from `tomlast.ast`) has these members:

- `kind`: a `Kind` from `tomlast.kind`, such as `Kind.KEY_VALUE`. Its `str()`
  is the camel-case name, for example `KeyValue`.
- `data`: the node's bytes.
- `raw`: a `Range` (`offset`, `length`) into the input.
- `child`: the first child, or `None`.
- `next`: the following sibling, or `None`.

`node.children()` iterates over the children of a node. `node.siblings()`
iterates over the node itself and the nodes chained after it.

The children are arranged by kind:

- `KeyValue`: `node.value()` returns the value node. `node.key()` returns the
  list of key parts of a possibly dotted key.
- `Table` and `ArrayTable`: `node.key()` returns the list of header key parts.
- `Array`: one child per element, plus any kept `Comment` nodes.
- `InlineTable`: one `KeyValue` child per entry.

`key()` raises `ValueError` on other kinds. `value()` raises `ValueError` on a
node without children.

Scalar values (`String`, `Integer`, `Float`, `Bool`, `LocalDate`,
`LocalTime`, `LocalDateTime`, `DateTime`) carry their text in `data`. Strings
arrive with escapes resolved and line-ending backslashes trimmed, as UTF-8
bytes. Numbers, booleans and dates are left exactly as written.

`raw` is filled in for the following nodes:

- keys
- strings
- integers and floats
- comments
- the opening brace of inline tables

Table, array-table, key-value, array, boolean and date/time nodes keep an
empty `Range()`.

`Parser.raw(range)` returns the input bytes covered by a range.
`Parser.shape(range)` returns a `Shape` with `start` and `end` `Position`s.
Each position has a byte `offset`, a `line` and a `column`, both counted
from 1.

## Errors

Malformed input raises `tomlast.errors.ParserError` while the expressions are
being iterated. After an error, the parser yields nothing more. The error has
these members:

- `message`: also its `str()`.
- `highlight`: a `Range` of the offending input. Use `parser.raw(err.highlight)`
  to get the bytes.
- `key`: a list, empty by default.

Errors are raised for, among other things:

- unterminated strings
- invalid escapes or Unicode code points
- control characters and invalid UTF-8 in strings and comments
- a lone carriage return
- a missing newline between expressions
- an array that starts with a comma or lacks separators
- an incomplete inline table

## Lower-level helpers

`tomlast.scanner` holds byte-level scanners. Examples are `scan_comment`,
`scan_basic_string`, `scan_whitespace` and `utf8_valid_next`. Each takes the
document and a start offset and returns the offset just past the token.

`tomlast.strings` holds `parse_basic_string`, `parse_multiline_basic_string`,
`parse_literal_string`, `parse_multiline_literal_string` and `hex_to_rune`.
The string parsers return the raw range, the decoded bytes and the end offset.

## Custom decoding

`tomlast.parser.Unmarshaler` is a runtime-checkable protocol. It describes
objects that can populate themselves from a value node through
`unmarshal_toml(value)`. The package itself does not call it. It is there
for decoders built on top of the parser.

## What this package does not do

`tomlast` only builds the syntax tree. It does not:

- turn a document into dictionaries or objects
- convert integers, floats or dates into Python values
- check number and date formats beyond what the scanners need to split
  tokens
- detect duplicate keys or table redefinitions
- write TOML back out