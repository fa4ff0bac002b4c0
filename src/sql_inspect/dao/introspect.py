"""Metadata lookups against the instance under review.

Every function either answers, raises :class:`NotFoundError` when the server
says the object is absent, or raises :class:`IntrospectionError` when the
answer could not be determined.
"""

from __future__ import annotations

import logging
from typing import Any

from sql_inspect.core.kv import KVCache
from sql_inspect.parser import Audit, ParseError, parse

from .db import DB, NULL_TEXT
from .errors import (
    DatabaseNotFoundError,
    IntrospectionError,
    QueryError,
    TableNotFoundError,
)

logger = logging.getLogger(__name__)

ER_BAD_DB = 1049
ER_NO_SUCH_TABLE = 1146

SHOW_VARIABLES = (
    "SHOW VARIABLES WHERE Variable_name IN "
    "('innodb_large_prefix','version','character_set_database','innodb_default_row_format')"
)

DEFAULT_DB_VARS = {
    "dbVersion": "",
    "dbCharset": "utf8",
    "largePrefix": "OFF",
    "innodbDefaultRowFormat": "dynamic",
}


def quote_ident(name: str) -> str:
    return "`" + name.replace("`", "``") + "`"


def quote_literal(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "''") + "'"


# ── server variables ─────────────────────────────────────────────────


def get_db_vars(db: DB) -> dict[str, str]:
    """Version, default charset and InnoDB prefix/row-format settings."""
    rows = db.query(SHOW_VARIABLES)
    data = dict(DEFAULT_DB_VARS)
    for row in rows:
        name = row.get("Variable_name")
        value = row.get("Value")
        if not isinstance(name, str) or not isinstance(value, str):
            raise IntrospectionError(f"unexpected SHOW VARIABLES row: {row!r}")
        if name == "version":
            data["dbVersion"] = value
        elif name == "character_set_database":
            data["dbCharset"] = value
        elif name == "innodb_large_prefix":
            data["largePrefix"] = {"0": "OFF", "1": "ON"}.get(value, value.upper())
        elif name == "innodb_default_row_format":
            data["innodbDefaultRowFormat"] = value
    return data


# ── existence checks ─────────────────────────────────────────────────


def check_if_table_exists(table: str, db: DB, schema: str = "") -> str:
    """Return ``表或视图`X`已存在`` if *table* exists.

    Raises :class:`DatabaseNotFoundError` when the handle's schema is unknown
    and :class:`TableNotFoundError` when ``DESC`` reports the table missing.
    """
    try:
        db.ping()
    except QueryError as exc:
        if exc.errno == ER_BAD_DB or "Unknown database" in str(exc):
            raise DatabaseNotFoundError(f"数据库`{db.database}`不存在") from exc
        raise

    target = quote_ident(table) if not schema else f"{quote_ident(schema)}.{quote_ident(table)}"
    try:
        db.query(f"DESC {target}")
    except QueryError as exc:
        if exc.errno == ER_NO_SUCH_TABLE or "doesn't exist" in str(exc):
            raise TableNotFoundError(f"表或视图`{table}`不存在") from exc
        raise
    return f"表或视图`{table}`已存在"


def _count(db: DB, sql: str) -> int:
    rows = db.query(sql)
    if not rows:
        return 0
    try:
        return int(rows[0].get("count", 0))
    except (TypeError, ValueError) as exc:
        raise IntrospectionError(f"unexpected count row: {rows[0]!r}") from exc


def check_if_database_exists(name: str, db: DB) -> str:
    """Return ``数据库`X`已存在`` or raise :class:`DatabaseNotFoundError`."""
    sql = (
        "SELECT COUNT(*) AS count FROM information_schema.schemata "
        f"WHERE schema_name={quote_literal(name)}"
    )
    if _count(db, sql) == 0:
        raise DatabaseNotFoundError(f"数据库`{name}`不存在")
    return f"数据库`{name}`已存在"


def check_if_table_exists_cross_db(table: str, db: DB) -> str:
    """Like :func:`check_if_table_exists` but across every schema."""
    sql = (
        "SELECT COUNT(*) AS count FROM information_schema.tables "
        f"WHERE table_name={quote_literal(table)}"
    )
    if _count(db, sql) == 0:
        raise TableNotFoundError(f"表或视图`{table}`不存在")
    return f"表或视图`{table}`已存在"


# ── table definitions ────────────────────────────────────────────────


def show_create_table(table: str, db: DB, kv: KVCache) -> Audit:
    """Parsed ``SHOW CREATE TABLE`` of *table*, cached in *kv* by bare name."""
    cached = kv.get(table)
    if isinstance(cached, Audit):
        return cached

    create_statement = ""
    for row in db.query(f"SHOW CREATE TABLE {quote_ident(table)}"):
        if "Create Table" in row:
            create_statement = row["Create Table"]
        if "Create View" in row:
            create_statement = row["Create View"]
    if not create_statement:
        raise IntrospectionError(f"SHOW CREATE TABLE returned no definition for `{table}`")

    try:
        audit, warnings = parse(create_statement)
    except ParseError as exc:
        raise IntrospectionError(f"SQL语法解析错误: {exc}") from exc
    if warnings:
        raise IntrospectionError("解析警告: " + "; ".join(warnings))
    kv.put(table, audit)
    return audit


# ── EXPLAIN ──────────────────────────────────────────────────────────


def _row_estimate(value: Any) -> int:
    if value is None or value == NULL_TEXT or value == "":
        return 0
    try:
        return int(float(value))
    except (TypeError, ValueError) as exc:
        raise IntrospectionError(f"unexpected EXPLAIN row estimate {value!r}") from exc


def explain_rows(query: str, db: DB, rule: str = "first", tidb: bool = False) -> int:
    """Estimated rows touched by *query*.

    Reads ``rows`` (MySQL) or ``estRows`` (TiDB).  ``rule="first"`` returns
    the first plan row's estimate, ``rule="max"`` the largest one.
    """
    column = "estRows" if tidb else "rows"
    rows = db.query(f"EXPLAIN {query}")
    estimates = [_row_estimate(row.get(column)) for row in rows]
    if not estimates:
        return 0
    if rule == "max":
        return max(estimates)
    return estimates[0]
