"""Exceptions raised by the parser layer."""

from __future__ import annotations


class ParseError(Exception):
    """Hard parse failure for a block of SQL text.

    ``line`` and ``column`` are 1-based; ``near`` is the source text starting
    at the offending token (truncated).
    """

    def __init__(self, message: str, *, line: int = 0, column: int = 0, near: str = "") -> None:
        self.message = message
        self.line = line
        self.column = column
        self.near = near
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if not self.line:
            return self.message
        return f'line {self.line} column {self.column} near "{self.near}": {self.message}'

    @classmethod
    def at(cls, sql: str, pos: int, message: str) -> "ParseError":
        """Build an error located at character offset *pos* of *sql*."""
        pos = max(0, min(pos, len(sql)))
        line = sql.count("\n", 0, pos) + 1
        column = pos - (sql.rfind("\n", 0, pos) + 1) + 1
        near = sql[pos:pos + 40].split("\n", 1)[0]
        return cls(message, line=line, column=column, near=near)


class SQLTypeError(ValueError):
    """A statement does not belong to the ticket type being submitted."""


class UnsupportedStatementError(ValueError):
    """The statement kind is not one a helper knows how to route."""
