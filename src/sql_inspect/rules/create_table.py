from __future__ import annotations

from sql_inspect import logics as lg
from sql_inspect import traverses as tv

from .rule import Rule, probe


def create_table_rules() -> list[Rule]:
    return [
        probe("CreateTable#检查表是否被禁止审核", tv.TraverseDDLTables, lg.logic_ddl_disable_tables),
        probe("CreateTable#检查表是否存在", tv.TraverseCreateTableIsExist, lg.logic_create_table_is_exist),
        probe("CreateTable#检查CREATE TABLE AS语法", tv.TraverseCreateTableAs, lg.logic_create_table_as),
        probe("CreateTable#检查CREATE TABLE LIKE语法", tv.TraverseCreateTableLike, lg.logic_create_table_like),
        probe("CreateTable#检查表名", tv.TraverseCreateTableOptions, lg.logic_create_table_name),
        probe("CreateTable#检查表选项", tv.TraverseCreateTableOptions, lg.logic_create_table_options),
        probe("CreateTable#检查主键", tv.TraverseCreateTablePrimaryKey, lg.logic_create_table_primary_key),
        probe("CreateTable#检查约束", tv.TraverseCreateTableConstraint, lg.logic_create_table_constraint),
        probe("CreateTable#检查审计字段", tv.TraverseCreateTableAuditCols, lg.logic_create_table_audit_cols),
        probe("CreateTable#检查列属性", tv.TraverseCreateTableColsOptions, lg.logic_create_table_cols_options),
        probe("CreateTable#检查列重复定义", tv.TraverseCreateTableColsRepeatDefine, lg.logic_create_table_cols_repeat_define),
        probe("CreateTable#检查索引", tv.TraverseCreateTableIndexes, lg.logic_create_table_indexes),
    ]
