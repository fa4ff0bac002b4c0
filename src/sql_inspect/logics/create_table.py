"""CREATE TABLE rule logics."""

from __future__ import annotations

from sql_inspect.hint import RuleHint
from sql_inspect.parser import nodes as n
from sql_inspect.traverses import (
    TraverseCreateTableAs,
    TraverseCreateTableAuditCols,
    TraverseCreateTableColsOptions,
    TraverseCreateTableColsRepeatDefine,
    TraverseCreateTableConstraint,
    TraverseCreateTableIndexes,
    TraverseCreateTableIsExist,
    TraverseCreateTableLike,
    TraverseCreateTableOptions,
    TraverseCreateTablePrimaryKey,
)

from .columns import TIME_TYPES, check_columns
from .common import check_table_options, is_identifier, probe_table
from .indexes import (
    check_duplicate_names,
    check_index_columns,
    check_index_counts,
    check_index_names,
    check_key_length,
    check_redundant,
)


def logic_create_table_is_exist(v: TraverseCreateTableIsExist, r: RuleHint) -> None:
    exists, msg = probe_table(r, v.table, v.schema)
    if exists:
        r.add(msg)
        r.is_skip_next_step = True


def logic_create_table_as(v: TraverseCreateTableAs, r: RuleHint) -> None:
    if v.is_create_table_as and not r.params.ENABLE_CREATE_TABLE_AS:
        r.add("禁止使用CREATE TABLE AS语法")
        r.is_skip_next_step = True


def logic_create_table_like(v: TraverseCreateTableLike, r: RuleHint) -> None:
    if not v.is_create_table_like:
        return
    if not r.params.ENABLE_CREATE_TABLE_LIKE:
        r.add("禁止使用CREATE TABLE LIKE语法")
        r.is_skip_next_step = True
        return
    exists, msg = probe_table(r, v.refer_table)
    if exists is False:
        r.add(msg)


def logic_create_table_name(v: TraverseCreateTableOptions, r: RuleHint) -> None:
    if not v.is_match:
        return
    p = r.params
    if not is_identifier(v.table, r):
        r.add(f"表名`{v.table}`不符合命名规范，仅允许小写字母、数字和下划线且不能以数字开头")
    if len(v.table) > p.MAX_TABLE_NAME_LENGTH:
        r.add(f"表名`{v.table}`长度超出限制，最大允许{p.MAX_TABLE_NAME_LENGTH}个字符")
    if p.TABLE_AT_LEAST_ONE_COLUMN and v.column_count == 0:
        r.add(f"表`{v.table}`至少需要定义一个列")


def logic_create_table_options(v: TraverseCreateTableOptions, r: RuleHint) -> None:
    if not v.is_match:
        return
    check_table_options(v.table, v.options, r, creating=True)
    if v.is_partition and not r.params.ENABLE_PARTITION_TABLE:
        r.add(f"表`{v.table}`禁止使用分区表")


def logic_create_table_primary_key(v: TraverseCreateTablePrimaryKey, r: RuleHint) -> None:
    if not v.is_match or not v.column_defs:
        return
    p = r.params
    if not v.has_primary_key:
        if p.CHECK_TABLE_PRIMARY_KEY:
            r.add(f"表`{v.table}`必须定义主键")
        return
    for name in v.columns:
        col = v.column_defs.get(name.lower())
        if col is None:
            continue
        if p.CHECK_PRIMARYKEY_USE_BIGINT and col.tp.tp != "BIGINT":
            r.add(f"主键列`{name}`必须使用BIGINT类型")
        if p.CHECK_PRIMARYKEY_USE_UNSIGNED and not col.tp.unsigned:
            r.add(f"主键列`{name}`必须定义为UNSIGNED")
        if (
            p.CHECK_PRIMARYKEY_USE_AUTO_INCREMENT
            and len(v.columns) == 1
            and not col.has_option(n.COLUMN_OPTION_AUTO_INCREMENT)
        ):
            r.add(f"主键列`{name}`必须定义为AUTO_INCREMENT")


def logic_create_table_constraint(v: TraverseCreateTableConstraint, r: RuleHint) -> None:
    if v.foreign_keys and not r.params.ENABLE_FOREIGN_KEY:
        r.add(f"表`{v.table}`禁止使用外键[{','.join(v.foreign_keys)}]")


def logic_create_table_audit_cols(v: TraverseCreateTableAuditCols, r: RuleHint) -> None:
    if not v.is_match or not r.params.CHECK_TABLE_AUDIT_TYPE_COLUMNS:
        return
    for name in r.params.TABLE_AUDIT_COLUMNS:
        if v.column_types.get(str(name).lower()) not in TIME_TYPES:
            r.add(f"表`{v.table}`必须包含审计字段`{name}`，且类型为DATETIME或TIMESTAMP")


def logic_create_table_cols_options(v: TraverseCreateTableColsOptions, r: RuleHint) -> None:
    if v.is_match:
        check_columns(v.cols, r)


def logic_create_table_cols_repeat_define(v: TraverseCreateTableColsRepeatDefine, r: RuleHint) -> None:
    for name in v.repeated:
        r.add(f"列`{name}`重复定义")


def logic_create_table_indexes(v: TraverseCreateTableIndexes, r: RuleHint) -> None:
    if not v.is_match:
        return
    check_index_names(v.indexes, r)
    check_duplicate_names(v.indexes, r)
    check_index_counts(v.table, v.indexes, r)
    check_index_columns(v.indexes, v.column_defs, r)
    check_redundant(v.indexes, r)
    check_key_length(v.indexes, v.column_defs, r, v.table_charset)
