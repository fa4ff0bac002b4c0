"""Exceptions raised by the database introspection layer.

Two families matter to callers:

* :class:`IntrospectionError`: the server could not be asked or did not
  answer (offline handle, connection refused, deadline passed).  Rules treat
  this as "assume acceptable" and add nothing to the report.
* :class:`NotFoundError`: the server answered authoritatively that the
  object is absent.  ``message`` is the user-facing text.
"""

from __future__ import annotations

from typing import Optional


class IntrospectionError(Exception):
    """The answer could not be determined."""


class DBUnavailableError(IntrospectionError):
    """No usable database handle (offline mode or connect failure)."""


class DeadlineExceededError(IntrospectionError):
    """The request deadline expired before the call was issued."""


class QueryError(IntrospectionError):
    """A statement failed on the server; ``errno`` is the MySQL error code."""

    def __init__(self, message: str, errno: Optional[int] = None) -> None:
        super().__init__(message)
        self.errno = errno

    @classmethod
    def from_exception(cls, exc: BaseException) -> "QueryError":
        orig = getattr(exc, "orig", None) or exc
        errno = None
        args = getattr(orig, "args", ())
        if args and isinstance(args[0], int):
            errno = args[0]
        return cls(str(orig), errno=errno)


class NotFoundError(Exception):
    """The server answered: the object does not exist."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TableNotFoundError(NotFoundError):
    pass


class DatabaseNotFoundError(NotFoundError):
    pass
