"""Database handle and metadata introspection."""

from sql_inspect.dao.db import DB
from sql_inspect.dao.errors import (
    DatabaseNotFoundError,
    DBUnavailableError,
    DeadlineExceededError,
    IntrospectionError,
    NotFoundError,
    QueryError,
    TableNotFoundError,
)

__all__ = [
    "DB",
    "DBUnavailableError",
    "DatabaseNotFoundError",
    "DeadlineExceededError",
    "IntrospectionError",
    "NotFoundError",
    "QueryError",
    "TableNotFoundError",
]
