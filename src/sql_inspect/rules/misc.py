"""Rule tables for the single-purpose DDL statements."""

from __future__ import annotations

from sql_inspect import logics as lg
from sql_inspect import traverses as tv

from .rule import Rule, probe


def create_view_rules() -> list[Rule]:
    return [
        probe("CreateView#检查视图是否被禁止审核", tv.TraverseDDLTables, lg.logic_ddl_disable_tables),
        probe("CreateView#检查视图是否存在", tv.TraverseCreateViewIsExist, lg.logic_create_view_is_exist),
    ]


def create_database_rules() -> list[Rule]:
    return [
        probe("CreateDatabase#检查DB是否存在", tv.TraverseCreateDatabaseIsExist, lg.logic_create_database_is_exist),
        probe("CreateDatabase#检查字符集", tv.TraverseCreateDatabaseOptions, lg.logic_create_database_options),
    ]


def rename_table_rules() -> list[Rule]:
    return [
        probe("RenameTable#检查表是否被禁止审核", tv.TraverseDDLTables, lg.logic_ddl_disable_tables),
        probe("RenameTable#检查", tv.TraverseRenameTable, lg.logic_rename_table),
    ]


def analyze_table_rules() -> list[Rule]:
    return [
        probe("AnalyzeTable#检查表是否被禁止审核", tv.TraverseDDLTables, lg.logic_ddl_disable_tables),
        probe("AnalyzeTable#检查", tv.TraverseAnalyzeTable, lg.logic_analyze_table),
    ]


def drop_table_rules() -> list[Rule]:
    return [
        probe("DropTable#检查表是否被禁止审核", tv.TraverseDDLTables, lg.logic_ddl_disable_tables),
        probe("DropTable#检查DROP/TRUNCATE操作", tv.TraverseDropTable, lg.logic_drop_table),
    ]
