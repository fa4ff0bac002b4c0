"""Statement classification helpers used for ticket routing.

These sit beside the review engine: callers use them to gate a ticket's SQL
by type (DDL / DML / EXPORT) before review, to split a batch for execution,
and to route single statements to an executor.
"""

from __future__ import annotations

from typing import Optional

from . import nodes as n
from .errors import ParseError, SQLTypeError, UnsupportedStatementError
from .parser import parse

DDL = "DDL"
DML = "DML"
EXPORT = "EXPORT"

_CATEGORY_BY_KIND = {
    n.SelectStmt.kind: EXPORT,
    n.SetOprStmt.kind: EXPORT,
    n.DeleteStmt.kind: DML,
    n.InsertStmt.kind: DML,
    n.UpdateStmt.kind: DML,
    n.AlterTableStmt.kind: DDL,
    n.CreateDatabaseStmt.kind: DDL,
    n.CreateIndexStmt.kind: DDL,
    n.CreateTableStmt.kind: DDL,
    n.CreateViewStmt.kind: DDL,
    n.DropDatabaseStmt.kind: DDL,
    n.DropIndexStmt.kind: DDL,
    n.DropTableStmt.kind: DDL,
    n.RenameTableStmt.kind: DDL,
    n.TruncateTableStmt.kind: DDL,
}

# statement kinds an executor knows how to run, by routing tag
_EXECUTABLE = (
    n.AlterTableStmt,
    n.CreateDatabaseStmt,
    n.CreateIndexStmt,
    n.CreateTableStmt,
    n.CreateViewStmt,
    n.DropIndexStmt,
    n.DropTableStmt,
    n.RenameTableStmt,
    n.TruncateTableStmt,
    n.DropDatabaseStmt,
)


def statement_category(stmt: n.StmtNode) -> Optional[str]:
    """Return ``"DDL"``, ``"DML"``, ``"EXPORT"`` or ``None`` for other kinds."""
    if isinstance(stmt, n.UnsupportedStmt):
        return stmt.category or None
    return _CATEGORY_BY_KIND.get(stmt.kind)


def check_sql_type(sqltext: str, wanted: str) -> None:
    """Raise :class:`SQLTypeError` if any statement is not of type *wanted*.

    Statements of unclassified kinds (SHOW, SET, ...) are skipped.
    """
    audit, _ = parse(sqltext)
    for stmt in audit.stmts:
        actual = statement_category(stmt)
        if actual is None:
            continue
        if actual != wanted:
            raise SQLTypeError(f"{wanted}模式下，不允许提交{actual}语句")


def split_sql_text(sqltext: str) -> list[str]:
    """Split a batch into statement texts (no trailing semicolons)."""
    audit, _ = parse(sqltext)
    return [stmt.text for stmt in audit.stmts]


def _parse_one(sqltext: str) -> n.StmtNode:
    try:
        audit, _ = parse(sqltext)
    except ParseError as exc:
        raise ParseError(f"SQL解析错误:{exc}") from exc
    if len(audit.stmts) != 1:
        raise ParseError(f"SQL解析错误:expected exactly one statement, got {len(audit.stmts)}")
    return audit.stmts[0]


def get_sql_statement(sqltext: str) -> str:
    """Routing tag for a single statement, e.g. ``"CreateTable"``."""
    stmt = _parse_one(sqltext)
    if isinstance(stmt, _EXECUTABLE):
        return stmt.kind
    raise UnsupportedStatementError("当前SQL未匹配到规则，执行失败")


def get_table_name_from_alter_statement(sqltext: str) -> str:
    """``"schema.table"`` (or ``"table"``) targeted by an ALTER TABLE."""
    stmt = _parse_one(sqltext)
    if isinstance(stmt, n.AlterTableStmt):
        return stmt.table.qualified
    raise UnsupportedStatementError("未提取到表名，当前SQL不是ALTER TABLE语句")
