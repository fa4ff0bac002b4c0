"""Statement fingerprints.

A fingerprint is the canonical form of a statement with comments removed,
keywords and identifiers lower-cased, whitespace collapsed and literal
values replaced by ``?``.  ``IN (...)`` lists and multi-row ``VALUES`` lists
collapse to ``(?+)`` so statements that differ only in literals share an ID.
"""

from __future__ import annotations

import hashlib

from sqlglot.tokens import Token, TokenType

from .errors import ParseError
from .lexer import is_command, tail_tokens, tokens

_LITERALS = frozenset({
    TokenType.STRING,
    TokenType.NUMBER,
    TokenType.HEX_STRING,
    TokenType.BIT_STRING,
    TokenType.NATIONAL_STRING,
    TokenType.PLACEHOLDER,
})
_VALUE_LIST = _LITERALS | {TokenType.NULL, TokenType.COMMA, TokenType.DASH, TokenType.PLUS}
_SIGN_AFTER = frozenset({TokenType.R_PAREN, TokenType.IDENTIFIER, TokenType.VAR}) | _LITERALS

_NO_SPACE_BEFORE = frozenset({",", ")", ".", "(", ";"})
_NO_SPACE_AFTER = frozenset({"(", "."})


def _flat(sql: str) -> list[Token]:
    """Tokens of *sql* with command tails (``REPLACE INTO ...``) expanded."""
    toks = tokens(sql)
    out: list[Token] = []
    for i, tok in enumerate(toks):
        if i and is_command(toks[i - 1]) and tok.token_type == TokenType.STRING:
            end = toks[i + 1].start if i + 1 < len(toks) else len(sql)
            out.extend(tail_tokens(sql, toks[i - 1], end))
        else:
            out.append(tok)
    return out


def _group_end(toks: list[Token], i: int) -> int:
    """Index just past the parenthesized group starting at ``toks[i]``."""
    depth = 0
    for j in range(i, len(toks)):
        if toks[j].token_type == TokenType.L_PAREN:
            depth += 1
        elif toks[j].token_type == TokenType.R_PAREN:
            depth -= 1
            if depth == 0:
                return j + 1
    return len(toks)


def _words(sql: str) -> list[str]:
    try:
        toks = _flat(sql)
    except ParseError:
        # unterminated quote: fall back to the collapsed raw text
        return sql.lower().split()
    out: list[str] = []
    i = 0
    while i < len(toks):
        t = toks[i]
        tt = t.token_type
        prev = toks[i - 1] if i else None
        if tt in (TokenType.DASH, TokenType.PLUS) and i + 1 < len(toks) \
                and toks[i + 1].token_type == TokenType.NUMBER \
                and (prev is None or prev.token_type not in _SIGN_AFTER):
            i += 1
            continue
        if tt == TokenType.L_PAREN and prev is not None and prev.token_type == TokenType.IN:
            end = _group_end(toks, i)
            inner = toks[i + 1:end - 1]
            if inner and all(x.token_type in _VALUE_LIST for x in inner):
                out.append("(?+)")
                i = end
                continue
        if tt == TokenType.L_PAREN and prev is not None and prev.token_type == TokenType.VALUES:
            end = _group_end(toks, i)
            while end + 1 < len(toks) and toks[end].token_type == TokenType.COMMA \
                    and toks[end + 1].token_type == TokenType.L_PAREN:
                end = _group_end(toks, end + 1)
            out.append("(?+)")
            i = end
            continue
        out.append("?" if tt in _LITERALS else t.text.lower())
        i += 1
    return out


def fingerprint(sql: str) -> str:
    """Return the canonical form of *sql*."""
    parts = _words(sql)
    buf: list[str] = []
    for i, word in enumerate(parts):
        if i and word not in _NO_SPACE_BEFORE and parts[i - 1] not in _NO_SPACE_AFTER \
                and not word.startswith("(?+"):
            buf.append(" ")
        buf.append(word)
    return "".join(buf).rstrip(";").strip()


def fingerprint_id(fp: str) -> str:
    """Short, stable ID for a fingerprint: upper-case MD5 hex, last 16 chars."""
    return hashlib.md5(fp.encode("utf-8")).hexdigest().upper()[16:32]


def request_id(sql: str) -> str:
    """Cache key for one review request over the full input text."""
    return "inspect_" + fingerprint_id(fingerprint(sql))
