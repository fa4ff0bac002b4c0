from __future__ import annotations

from sql_inspect import logics as lg
from sql_inspect import traverses as tv

from .rule import Rule, probe


def alter_table_rules() -> list[Rule]:
    return [
        probe("AlterTable#检查表是否被禁止审核", tv.TraverseDDLTables, lg.logic_ddl_disable_tables),
        probe("AlterTable#检查ADD CONSTRAINT语法", tv.TraverseAlterTableAddConstraint, lg.logic_alter_table_add_constraint),
        probe("AlterTable#检查表是否存在", tv.TraverseAlterTableIsExist, lg.logic_alter_table_is_exist),
        probe("AlterTable#检查表选项", tv.TraverseAlterTableOptions, lg.logic_alter_table_options),
        probe("AlterTable#检查TiDB多操作ALTER", tv.TraverseAlterTableSpecs, lg.logic_alter_table_tidb_merge),
        probe("AlterTable#检查DROP列", tv.TraverseAlterTableDropCols, lg.logic_alter_table_drop_cols),
        probe("AlterTable#检查DROP索引", tv.TraverseAlterTableDropIndex, lg.logic_alter_table_drop_index),
        probe("AlterTable#检查DROP主键", tv.TraverseAlterTableDropPrimaryKey, lg.logic_alter_table_drop_primary_key),
        probe("AlterTable#检查RENAME操作", tv.TraverseAlterTableRename, lg.logic_alter_table_rename),
        probe("AlterTable#检查新增列", tv.TraverseAlterTableAddColsOptions, lg.logic_alter_table_add_cols_options),
        probe("AlterTable#检查MODIFY列", tv.TraverseAlterTableModifyColsOptions, lg.logic_alter_table_modify_cols_options),
        probe("AlterTable#检查CHANGE列", tv.TraverseAlterTableChangeCols, lg.logic_alter_table_change_cols),
        probe("AlterTable#检查新增索引", tv.TraverseAlterTableAddIndexes, lg.logic_alter_table_add_indexes),
    ]
