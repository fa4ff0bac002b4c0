from __future__ import annotations

from sql_inspect import logics as lg
from sql_inspect import traverses as tv

from .rule import Rule, probe


def dml_rules() -> list[Rule]:
    return [
        probe("DML#检查表是否被禁止审核", tv.TraverseDMLTables, lg.logic_dml_disable_tables),
        probe("DML#检查INSERT INTO SELECT语法", tv.TraverseDMLInsert, lg.logic_dml_insert_into_select),
        probe("DML#检查INSERT是否指定列名", tv.TraverseDMLInsert, lg.logic_dml_insert_with_columns),
        probe("DML#检查REPLACE语法", tv.TraverseDMLInsert, lg.logic_dml_replace),
        probe("DML#检查ON DUPLICATE KEY UPDATE语法", tv.TraverseDMLInsert, lg.logic_dml_on_duplicate),
        probe("DML#检查INSERT行数", tv.TraverseDMLInsert, lg.logic_dml_max_insert_rows),
        probe("DML#检查WHERE条件", tv.TraverseDMLWhere, lg.logic_dml_must_have_where),
        probe("DML#检查JOIN的ON条件", tv.TraverseDMLJoin, lg.logic_dml_join_with_on),
        probe("DML#检查LIMIT和ORDER BY", tv.TraverseDMLLimitOrderBy, lg.logic_dml_limit_order_by),
        probe("DML#检查子查询", tv.TraverseDMLSubquery, lg.logic_dml_subquery),
        probe("DML#检查表是否存在", tv.TraverseDMLTables, lg.logic_dml_tables_exist),
        probe("DML#检查影响行数", tv.TraverseDMLExplain, lg.logic_dml_affected_rows),
    ]
