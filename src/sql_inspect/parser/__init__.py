"""SQL parsing: tokenizer, typed AST, fingerprints and classification."""

from sql_inspect.parser.errors import ParseError, SQLTypeError, UnsupportedStatementError
from sql_inspect.parser.fingerprint import fingerprint, fingerprint_id, request_id
from sql_inspect.parser.parser import Audit, parse

__all__ = [
    "Audit",
    "ParseError",
    "SQLTypeError",
    "UnsupportedStatementError",
    "fingerprint",
    "fingerprint_id",
    "parse",
    "request_id",
]
