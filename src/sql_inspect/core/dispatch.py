"""Per-statement dispatch: pick the rule table for a node kind and run it."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from sql_inspect.core.config import InspectParams
from sql_inspect.core.kv import KVCache
from sql_inspect.dao.db import DB
from sql_inspect.hint import RuleHint
from sql_inspect.model import AuditLevel, StatementType
from sql_inspect.model.audit_result import ReturnData
from sql_inspect.parser import nodes as n
from sql_inspect.rules import (
    Rule,
    alter_table_rules,
    analyze_table_rules,
    create_database_rules,
    create_table_rules,
    create_view_rules,
    dml_rules,
    drop_table_rules,
    rename_table_rules,
)

SELECT_MESSAGE = "发现SELECT语句，请删除SELECT语句后重新审核"
UNKNOWN_MESSAGE = "未识别或禁止的审核语句，请联系数据库管理员"

RuleTable = tuple[StatementType, Callable[[], list[Rule]]]

# node kind -> (result type, rule table)
RULE_TABLES: dict[str, RuleTable] = {
    n.CreateTableStmt.kind: (StatementType.CREATE_TABLE, create_table_rules),
    n.CreateViewStmt.kind: (StatementType.CREATE_VIEW, create_view_rules),
    n.CreateDatabaseStmt.kind: (StatementType.CREATE_DATABASE, create_database_rules),
    n.AlterTableStmt.kind: (StatementType.ALTER_TABLE, alter_table_rules),
    n.DropTableStmt.kind: (StatementType.DROP_TABLE, drop_table_rules),
    n.TruncateTableStmt.kind: (StatementType.DROP_TABLE, drop_table_rules),
    n.InsertStmt.kind: (StatementType.DML, dml_rules),
    n.UpdateStmt.kind: (StatementType.DML, dml_rules),
    n.DeleteStmt.kind: (StatementType.DML, dml_rules),
    n.RenameTableStmt.kind: (StatementType.RENAME_TABLE, rename_table_rules),
    n.AnalyzeTableStmt.kind: (StatementType.ANALYZE_TABLE, analyze_table_rules),
}

SELECT_KINDS = frozenset({n.SelectStmt.kind, n.SetOprStmt.kind})


@dataclass
class Dispatcher:
    """Runs one statement through its rule table.

    ``tables`` defaults to :data:`RULE_TABLES`; tests substitute their own.
    """

    db: DB
    kv: KVCache
    params: InspectParams
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("sql_inspect.rules"))
    tables: dict[str, RuleTable] = field(default_factory=lambda: dict(RULE_TABLES))

    def dispatch(self, stmt: n.StmtNode, finger_id: str) -> tuple[ReturnData, str]:
        """Return the statement's result and its ALTER merge target ("" if none)."""
        query = stmt.text
        if stmt.kind in SELECT_KINDS:
            data = ReturnData(finger_id=finger_id, query=query, type=StatementType.DML.value)
            data.extend([SELECT_MESSAGE])
            return data, ""

        entry = self.tables.get(stmt.kind)
        if entry is None:
            data = ReturnData(finger_id=finger_id, query=query, type=StatementType.UNKNOWN.value)
            data.extend([UNKNOWN_MESSAGE])
            return data, ""

        tp, rules = entry
        data = ReturnData(finger_id=finger_id, query=query, type=tp.value, level=AuditLevel.INFO.value)
        merge_alter = self.merge_target(stmt)
        for rule in rules():
            r = RuleHint(db=self.db, kv=self.kv, query=query, params=self.params, logger=self.logger)
            rule.check(r, stmt)
            if r.merge_alter and not merge_alter:
                merge_alter = r.merge_alter
            if tp == StatementType.DML and r.affected_rows:
                data.affected_rows = r.affected_rows
            data.extend(r.summary)
            if r.is_skip_next_step:
                break
        return data, merge_alter

    def merge_target(self, stmt: n.StmtNode) -> str:
        """``schema.table`` an ALTER applies to, falling back to the handle's schema."""
        if not isinstance(stmt, n.AlterTableStmt):
            return ""
        table = stmt.table
        if table.schema:
            return f"{table.schema}.{table.name}"
        if self.db.database:
            return f"{self.db.database}.{table.name}"
        return table.name
