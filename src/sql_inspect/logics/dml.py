"""INSERT / REPLACE / UPDATE / DELETE rule logics."""

from __future__ import annotations

from sql_inspect.dao.errors import IntrospectionError
from sql_inspect.dao.introspect import explain_rows
from sql_inspect.hint import RuleHint
from sql_inspect.traverses import (
    TraverseDMLExplain,
    TraverseDMLInsert,
    TraverseDMLJoin,
    TraverseDMLLimitOrderBy,
    TraverseDMLSubquery,
    TraverseDMLTables,
    TraverseDMLWhere,
)

from .common import db_version, in_table_list, probe_table


def logic_dml_insert_into_select(v: TraverseDMLInsert, r: RuleHint) -> None:
    if v.is_match and v.has_select and r.params.DISABLE_INSERT_INTO_SELECT:
        r.add("禁止使用INSERT INTO SELECT语法")


def logic_dml_insert_with_columns(v: TraverseDMLInsert, r: RuleHint) -> None:
    if v.is_match and not v.has_columns:
        r.add(f"{'REPLACE' if v.is_replace else 'INSERT'}语句必须指定列名")


def logic_dml_replace(v: TraverseDMLInsert, r: RuleHint) -> None:
    if v.is_match and v.is_replace and r.params.DISABLE_REPLACE:
        r.add("禁止使用REPLACE INTO语法")


def logic_dml_on_duplicate(v: TraverseDMLInsert, r: RuleHint) -> None:
    if v.is_match and v.has_on_duplicate and r.params.DISABLE_ON_DUPLICATE:
        r.add("禁止使用ON DUPLICATE KEY UPDATE语法")


def logic_dml_max_insert_rows(v: TraverseDMLInsert, r: RuleHint) -> None:
    limit = r.params.MAX_INSERT_ROWS
    if v.is_match and v.row_count > limit:
        r.add(f"单条INSERT语句的行数{v.row_count}超过了{limit}行，请拆分为多条语句")


def logic_dml_must_have_where(v: TraverseDMLWhere, r: RuleHint) -> None:
    if v.is_match and not v.has_where and r.params.DML_MUST_HAVE_WHERE:
        r.add(f"{v.verb}语句必须包含WHERE条件")


def logic_dml_join_with_on(v: TraverseDMLJoin, r: RuleHint) -> None:
    if not v.is_match or not r.params.CHECK_DML_JOIN_WITH_ON:
        return
    for table in v.joins:
        r.add(f"JOIN语句必须指定ON条件[`{table}`]")


def logic_dml_limit_order_by(v: TraverseDMLLimitOrderBy, r: RuleHint) -> None:
    if not v.is_match:
        return
    if v.has_limit and r.params.DML_DISABLE_LIMIT:
        r.add("UPDATE/DELETE语句禁止使用LIMIT子句")
    if v.has_order_by and r.params.DML_DISABLE_ORDERBY:
        r.add("UPDATE/DELETE语句禁止使用ORDER BY子句")


def logic_dml_subquery(v: TraverseDMLSubquery, r: RuleHint) -> None:
    if v.is_match and v.has_subquery and r.params.DML_DISABLE_SUBQUERY:
        r.add("UPDATE/DELETE语句禁止使用子查询")


def logic_dml_disable_tables(v: TraverseDMLTables, r: RuleHint) -> None:
    if not v.is_match:
        return
    for table in v.tables:
        if in_table_list(table, r.params.DISABLE_AUDIT_DML_TABLES):
            r.add(f"表`{table}`禁止提交DML语句")
            r.is_skip_next_step = True


def logic_dml_tables_exist(v: TraverseDMLTables, r: RuleHint) -> None:
    if not v.is_match:
        return
    for table in v.tables:
        exists, msg = probe_table(r, table)
        if exists is False:
            r.add(msg)


def logic_dml_affected_rows(v: TraverseDMLExplain, r: RuleHint) -> None:
    """Estimate affected rows: VALUES row count, else ``EXPLAIN``."""
    if not v.is_match:
        return
    if v.insert_rows is not None:
        rows = v.insert_rows
    else:
        try:
            rows = explain_rows(
                r.query, r.db, rule=r.params.EXPLAIN_RULE, tidb=db_version(r).is_tidb(),
            )
        except IntrospectionError as exc:
            r.logger.debug("EXPLAIN skipped: %s", exc)
            return
    r.affected_rows = rows
    if rows > r.params.MAX_AFFECTED_ROWS:
        r.add(f"预计影响行数{rows}超过了{r.params.MAX_AFFECTED_ROWS}行")
