"""Shared fixtures: an in-memory stand-in for the instance under review."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

import pytest

from sql_inspect.core.checker import Checker
from sql_inspect.core.config import InspectParams
from sql_inspect.dao.db import DB
from sql_inspect.dao.errors import QueryError

_IDENT_RE = re.compile(r"`((?:``|[^`])*)`")
_LITERAL_RE = re.compile(r"'((?:''|[^'])*)'")

USER_DDL = (
    "CREATE TABLE `t_user` (\n"
    "  `id` bigint unsigned NOT NULL AUTO_INCREMENT COMMENT '主键',\n"
    "  `name` varchar(64) NOT NULL DEFAULT '' COMMENT '名称',\n"
    "  `age` int NOT NULL DEFAULT 0 COMMENT '年龄',\n"
    "  PRIMARY KEY (`id`),\n"
    "  UNIQUE KEY `uniq_name` (`name`)\n"
    ") ENGINE=InnoDB AUTO_INCREMENT=10 DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_general_ci COMMENT='用户表'"
)


@dataclass(frozen=True)
class FakeDB(DB):
    """Answers the metadata queries the engine issues, without a server.

    ``tables`` maps table name to its ``SHOW CREATE TABLE`` text; ``explain``
    holds the rows returned for any ``EXPLAIN``.  Every query is appended to
    ``log``.
    """

    host: str = "fake"
    database: str = "app"
    version: str = "8.0.32"
    tables: dict = field(default_factory=lambda: {"t_user": USER_DDL})
    databases: tuple = ("app",)
    explain: tuple = ()
    log: list = field(default_factory=list)

    def query(self, sql: str) -> list[dict[str, str]]:
        self._timeout()
        self.log.append(sql)
        if sql.startswith("SHOW VARIABLES"):
            return [
                {"Variable_name": "version", "Value": self.version},
                {"Variable_name": "character_set_database", "Value": "utf8mb4"},
                {"Variable_name": "innodb_large_prefix", "Value": "ON"},
                {"Variable_name": "innodb_default_row_format", "Value": "dynamic"},
            ]
        if sql.startswith("DESC "):
            name = _IDENT_RE.findall(sql)[-1]
            if name not in self.tables:
                raise QueryError(f"Table '{self.database}.{name}' doesn't exist", errno=1146)
            return [{"Field": "id", "Type": "bigint"}]
        if "information_schema.schemata" in sql:
            name = _LITERAL_RE.search(sql).group(1)
            return [{"count": "1" if name in self.databases else "0"}]
        if "information_schema.tables" in sql:
            name = _LITERAL_RE.search(sql).group(1)
            return [{"count": "1" if name in self.tables else "0"}]
        if sql.startswith("SHOW CREATE TABLE"):
            name = _IDENT_RE.findall(sql)[-1]
            if name not in self.tables:
                raise QueryError(f"Table '{self.database}.{name}' doesn't exist", errno=1146)
            return [{"Table": name, "Create Table": self.tables[name]}]
        if sql.startswith("EXPLAIN "):
            return [dict(row) for row in self.explain]
        raise QueryError(f"unexpected query: {sql}")

    def execute(self, sql: str) -> None:
        self.query(sql)

    def ping(self) -> None:
        self._timeout()
        if self.database and self.database not in self.databases:
            raise QueryError(f"Unknown database '{self.database}'", errno=1049)


@pytest.fixture
def fake_db() -> FakeDB:
    return FakeDB()


@pytest.fixture
def review():
    """``review(sql, db=None, **params)`` -> list of AuditResult.

    Without *db* the checker runs offline.
    """

    def _review(sql: str, db: DB | None = None, **params):
        checker = Checker(params=InspectParams.from_dict(params))
        if db is not None:
            checker.db = db
        return checker.check(sql)

    return _review


@pytest.fixture
def messages(review):
    """``messages(sql, db=None, **params)`` -> messages of the single result."""

    def _messages(sql: str, db: DB | None = None, **params) -> list[str]:
        results = review(sql, db, **params)
        assert len(results) == 1
        return list(results[0].messages)

    return _messages
