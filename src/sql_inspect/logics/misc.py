"""Logics for views, RENAME, ANALYZE, DROP/TRUNCATE and restricted tables."""

from __future__ import annotations

from sql_inspect.hint import RuleHint
from sql_inspect.traverses import (
    TraverseAnalyzeTable,
    TraverseCreateViewIsExist,
    TraverseDDLTables,
    TraverseDropTable,
    TraverseRenameTable,
)

from .common import db_version, in_table_list, probe_table


def logic_ddl_disable_tables(v: TraverseDDLTables, r: RuleHint) -> None:
    for table in v.tables:
        if in_table_list(table, r.params.DISABLE_AUDIT_DDL_TABLES):
            r.add(f"表`{table}`禁止提交DDL语句")
            r.is_skip_next_step = True


def logic_create_view_is_exist(v: TraverseCreateViewIsExist, r: RuleHint) -> None:
    if not r.params.ENABLE_CREATE_VIEW:
        r.add(f"禁止创建视图`{v.view}`")
        r.is_skip_next_step = True
        return
    if v.or_replace:
        return
    exists, msg = probe_table(r, v.view)
    if exists:
        r.add(msg)
        r.is_skip_next_step = True


def logic_rename_table(v: TraverseRenameTable, r: RuleHint) -> None:
    if not v.is_match:
        return
    if not r.params.ENABLE_RENAME_TABLE_NAME:
        for old, new in v.pairs:
            r.add(f"禁止使用RENAME TABLE修改表名[`{old}`→`{new}`]")
        return
    for old, new in v.pairs:
        exists, msg = probe_table(r, old)
        if exists is False:
            r.add(msg)
        exists, msg = probe_table(r, new)
        if exists:
            r.add(msg)


def logic_analyze_table(v: TraverseAnalyzeTable, r: RuleHint) -> None:
    if not v.is_match:
        return
    if not db_version(r).is_tidb():
        r.add("仅允许TiDB提交Analyze table语法")
        return
    for table in v.tables:
        exists, msg = probe_table(r, table)
        if exists is False:
            r.add(msg)


def logic_drop_table(v: TraverseDropTable, r: RuleHint) -> None:
    if not v.is_match:
        return
    p = r.params
    names = ",".join(f"`{t}`" for t in v.tables)
    if v.is_truncate:
        if not p.ENABLE_TRUNCATE_TABLE:
            r.add(f"禁止执行TRUNCATE TABLE操作[{names}]")
            return
    elif not p.ENABLE_DROP_TABLE:
        verb = "DROP VIEW" if v.is_view else "DROP TABLE"
        r.add(f"禁止执行{verb}操作[{names}]")
        return
    for table in v.tables:
        exists, msg = probe_table(r, table)
        if exists is False:
            r.add(msg)
