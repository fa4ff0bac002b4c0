"""Token stream over sqlglot's MySQL tokenizer.

Whitespace and comments never reach the stream.  Quoted literals come out
as ``STRING`` tokens with MySQL escapes already resolved, backtick names as
``IDENTIFIER`` tokens without their quotes.  Each token keeps its 1-based
``line`` and the inclusive ``start``/``end`` offsets into the source text.

A statement that opens with one of the tokenizer's command verbs
(``REPLACE``, ``RENAME``, ``LOCK TABLES`` ...) is kept as the verb plus a
single ``STRING`` token holding the rest of the statement; callers that
need the inner tokens re-tokenize that tail with :func:`tail_tokens`.
"""

from __future__ import annotations

import re

from sqlglot.dialects.dialect import Dialect
from sqlglot.errors import TokenError
from sqlglot.tokens import Token, TokenType

from .errors import ParseError

DIALECT = Dialect.get_or_raise("mysql")
COMMANDS = frozenset(DIALECT.tokenizer_class.COMMANDS)

_NOT_NEWLINE_RE = re.compile(r"[^\n]")


def tokens(sql: str) -> list[Token]:
    """Tokenize *sql*; an unterminated quote or comment raises :class:`ParseError`."""
    try:
        return DIALECT.tokenize(sql)
    except TokenError as exc:
        raise ParseError(str(exc)) from exc


def blank_prefix(sql: str, pos: int) -> str:
    """``sql[:pos]`` with every character except newlines replaced by a space.

    Prepending it to a fragment keeps token lines and offsets aligned with
    the original text.
    """
    return _NOT_NEWLINE_RE.sub(" ", sql[:pos])


def tail_tokens(sql: str, verb: Token, end: int) -> list[Token]:
    """Tokens of ``sql[verb.end + 1:end]``, positioned as in *sql*."""
    return tokens(blank_prefix(sql, verb.end + 1) + sql[verb.end + 1:end])


def is_command(tok: Token) -> bool:
    return tok.token_type in COMMANDS


def is_word(tok: Token, *words: str) -> bool:
    """Case-insensitive match on the token text."""
    return tok.token_type not in (TokenType.STRING, TokenType.IDENTIFIER) and tok.text.upper() in words
