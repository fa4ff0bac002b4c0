"""Short-lived MySQL connections for metadata lookups.

Each call opens its own SQLAlchemy engine over PyMySQL with a single pooled
connection, runs one statement, and disposes the engine.  A handle without a
host is *offline*: every call raises :class:`DBUnavailableError` without
touching the network.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any, Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from .errors import DBUnavailableError, DeadlineExceededError, QueryError

logger = logging.getLogger(__name__)

IO_TIMEOUT = 3          # seconds, connect/read/write
MAX_LIFETIME = 5        # seconds a pooled connection may live
NULL_TEXT = "NULL"


@dataclass(frozen=True)
class DB:
    """Connection parameters for the instance under review.

    ``deadline`` is a :func:`time.monotonic` timestamp; once passed, calls
    raise :class:`DeadlineExceededError` before any I/O.
    """

    host: str = ""
    port: int = 3306
    user: str = ""
    password: str = ""
    database: str = ""
    deadline: Optional[float] = None

    @property
    def offline(self) -> bool:
        return not self.host

    @property
    def dsn(self) -> str:
        return (
            f"{self.user}:{self.password}@tcp({self.host}:{self.port})/{self.database}"
            f"?charset=utf8mb4&parseTime=True&loc=Local"
            f"&timeout={IO_TIMEOUT}s&readTimeout={IO_TIMEOUT}s&writeTimeout={IO_TIMEOUT}s"
        )

    def with_deadline(self, deadline: Optional[float]) -> "DB":
        return replace(self, deadline=deadline)

    # ── connections ─────────────────────────────────────────────────

    def _timeout(self) -> float:
        if self.deadline is None:
            return IO_TIMEOUT
        remaining = self.deadline - time.monotonic()
        if remaining <= 0:
            raise DeadlineExceededError(f"deadline exceeded before querying {self.host}:{self.port}")
        return min(IO_TIMEOUT, remaining)

    def _engine(self) -> Engine:
        if self.offline:
            raise DBUnavailableError("no database host configured")
        timeout = self._timeout()
        url = URL.create(
            "mysql+pymysql",
            username=self.user or None,
            password=self.password or None,
            host=self.host,
            port=self.port,
            database=self.database or None,
            query={"charset": "utf8mb4"},
        )
        return create_engine(
            url,
            pool_size=1,
            max_overflow=0,
            pool_recycle=MAX_LIFETIME,
            connect_args={
                "connect_timeout": timeout,
                "read_timeout": timeout,
                "write_timeout": timeout,
            },
        )

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        """Yield a connection; driver errors surface as :class:`QueryError`."""
        engine = self._engine()
        try:
            with engine.connect() as conn:
                yield conn.execution_options(no_parameters=True)
        except SQLAlchemyError as exc:
            raise QueryError.from_exception(exc) from exc
        finally:
            engine.dispose()

    # ── statements ──────────────────────────────────────────────────

    def query(self, sql: str) -> list[dict[str, str]]:
        """Run *sql* and return rows as ``{column: text}`` (NULL as ``"NULL"``)."""
        logger.debug("query %s:%s: %s", self.host, self.port, sql)
        with self.connect() as conn:
            result = conn.exec_driver_sql(sql)
            if not result.returns_rows:
                return []
            return [{k: _to_text(v) for k, v in row.items()} for row in result.mappings()]

    def execute(self, sql: str) -> None:
        with self.connect() as conn:
            conn.exec_driver_sql(sql)

    def ping(self) -> None:
        """Open and close one connection; raises on failure."""
        with self.connect():
            pass


def _to_text(value: Any) -> str:
    if value is None:
        return NULL_TEXT
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)
