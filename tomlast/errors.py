"""Errors raised while scanning and parsing TOML documents."""

from __future__ import annotations

from tomlast.ast import Range


class ParserError(Exception):
    """An error tied to a range of bytes of the parsed document."""

    def __init__(self, highlight: Range, message: str, key: list[str] | None = None) -> None:
        super().__init__(message)
        self.highlight = highlight
        self.message = message
        self.key = list(key) if key else []

    def __str__(self) -> str:
        return self.message