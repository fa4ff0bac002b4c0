"""ALTER TABLE rule logics.

Column and index checks compare the statement against the live definition
from ``SHOW CREATE TABLE`` when it can be fetched, and skip the comparison
otherwise.
"""

from __future__ import annotations

from typing import Optional

from sql_inspect.hint import RuleHint
from sql_inspect.parser import nodes as n
from sql_inspect.traverses import (
    TraverseAlterTableAddColsOptions,
    TraverseAlterTableAddConstraint,
    TraverseAlterTableAddIndexes,
    TraverseAlterTableChangeCols,
    TraverseAlterTableDropCols,
    TraverseAlterTableDropIndex,
    TraverseAlterTableDropPrimaryKey,
    TraverseAlterTableIsExist,
    TraverseAlterTableModifyColsOptions,
    TraverseAlterTableOptions,
    TraverseAlterTableRename,
    TraverseAlterTableSpecs,
    TraverseCreateTableIndexes,
)

from .columns import check_columns, check_type_change
from .common import check_table_options, db_version, existing_table, probe_table
from .indexes import (
    check_duplicate_names,
    check_index_columns,
    check_index_counts,
    check_index_names,
    check_key_length,
    check_redundant,
    display_name,
)

# TiDB gained multi-schema change in v6.2
TIDB_MULTI_SPEC_RELEASE = (6, 2, 0)


def _current_indexes(r: RuleHint, table: str) -> Optional[TraverseCreateTableIndexes]:
    stmt = existing_table(r, table)
    if stmt is None:
        return None
    v = TraverseCreateTableIndexes()
    stmt.accept(v)
    return v


def logic_alter_table_add_constraint(v: TraverseAlterTableAddConstraint, r: RuleHint) -> None:
    if v.is_match:
        r.add("禁止使用ALTER TABLE...ADD CONSTRAINT...语法")
        r.is_skip_next_step = True


def logic_alter_table_is_exist(v: TraverseAlterTableIsExist, r: RuleHint) -> None:
    if not v.is_match:
        return
    if v.schema:
        r.merge_alter = f"{v.schema}.{v.table}"
    elif r.db.database:
        r.merge_alter = f"{r.db.database}.{v.table}"
    else:
        r.merge_alter = v.table
    exists, msg = probe_table(r, v.table, v.schema)
    if exists is False:
        r.add(msg)
        r.is_skip_next_step = True


def logic_alter_table_options(v: TraverseAlterTableOptions, r: RuleHint) -> None:
    if v.is_match:
        check_table_options(v.table, v.options, r, creating=False)


def logic_alter_table_tidb_merge(v: TraverseAlterTableSpecs, r: RuleHint) -> None:
    version = db_version(r)
    if not version.is_tidb() or len(v.spec_types) < 2:
        return
    if version.release() is not None and not version.at_least(*TIDB_MULTI_SPEC_RELEASE):
        r.add(f"表`{v.table}`的ALTER语句包含多个操作，当前TiDB版本不支持，请拆分为多条ALTER语句")


def logic_alter_table_drop_cols(v: TraverseAlterTableDropCols, r: RuleHint) -> None:
    if not v.is_match:
        return
    if not r.params.ENABLE_DROP_COLS:
        for col in v.cols:
            r.add(f"禁止DROP列`{col}`")
        return
    current = existing_table(r, v.table)
    if current is None:
        return
    for col in v.cols:
        if current.column(col) is None:
            r.add(f"列`{col}`不存在")


def logic_alter_table_drop_index(v: TraverseAlterTableDropIndex, r: RuleHint) -> None:
    if not v.is_match:
        return
    if not r.params.ENABLE_DROP_INDEXES:
        for name in v.indexes:
            r.add(f"禁止DROP索引`{name}`")
        return
    current = _current_indexes(r, v.table)
    if current is None:
        return
    names = {display_name(i).lower() for i in current.indexes}
    for name in v.indexes:
        if name.lower() not in names:
            r.add(f"索引`{name}`不存在")


def logic_alter_table_drop_primary_key(v: TraverseAlterTableDropPrimaryKey, r: RuleHint) -> None:
    if v.is_match and not r.params.ENABLE_DROP_PRIMARYKEY:
        r.add("禁止DROP主键")


def logic_alter_table_rename(v: TraverseAlterTableRename, r: RuleHint) -> None:
    if not v.is_match:
        return
    p = r.params
    if not p.ENABLE_RENAME_TABLE_NAME:
        for new in v.new_tables:
            r.add(f"禁止使用RENAME修改表名[`{v.table}`→`{new}`]")
    if not p.ENABLE_INDEX_RENAME:
        for old, new in v.indexes:
            r.add(f"禁止使用RENAME INDEX修改索引名[`{old}`→`{new}`]")
    if not p.ENABLE_COLUMN_CHANGE_COLUMN_NAME:
        for old, new in v.columns:
            r.add(f"禁止使用RENAME COLUMN修改列名[`{old}`→`{new}`]")


def logic_alter_table_add_cols_options(v: TraverseAlterTableAddColsOptions, r: RuleHint) -> None:
    if not v.is_match:
        return
    check_columns(v.cols, r)
    current = existing_table(r, v.table)
    if current is None:
        return
    for col in v.cols:
        if current.column(col.name.name) is not None:
            r.add(f"列`{col.name.name}`已存在")


def logic_alter_table_modify_cols_options(v: TraverseAlterTableModifyColsOptions, r: RuleHint) -> None:
    if not v.is_match:
        return
    check_columns(v.cols, r)
    current = existing_table(r, v.table)
    if current is None:
        return
    for col in v.cols:
        old = current.column(col.name.name)
        if old is None:
            r.add(f"列`{col.name.name}`不存在")
        else:
            check_type_change(col.name.name, old.tp, col.tp, r)


def logic_alter_table_change_cols(v: TraverseAlterTableChangeCols, r: RuleHint) -> None:
    if not v.is_match:
        return
    for old_name, col in v.changes:
        if old_name.lower() != col.name.name.lower() and not r.params.ENABLE_COLUMN_CHANGE_COLUMN_NAME:
            r.add(f"禁止使用CHANGE修改列名[`{old_name}`→`{col.name.name}`]，请使用MODIFY")
    check_columns([col for _, col in v.changes], r)
    current = existing_table(r, v.table)
    if current is None:
        return
    for old_name, col in v.changes:
        old = current.column(old_name)
        if old is None:
            r.add(f"列`{old_name}`不存在")
        else:
            check_type_change(old_name, old.tp, col.tp, r)


def logic_alter_table_add_indexes(v: TraverseAlterTableAddIndexes, r: RuleHint) -> None:
    if not v.is_match:
        return
    check_index_names(v.indexes, r)
    current = _current_indexes(r, v.table)
    if current is None:
        check_duplicate_names(v.indexes, r)
        check_index_counts(v.table, v.indexes, r)
        check_redundant(v.indexes, r)
        return

    existing = [i for i in current.indexes if i.tp != n.CONSTRAINT_PRIMARY_KEY]
    check_duplicate_names(v.indexes, r, current.indexes)
    check_index_counts(v.table, v.indexes, r, existing=len(existing))
    columns = dict(current.column_defs)
    columns.update(v.new_columns)
    check_index_columns(v.indexes, columns, r)
    added = {display_name(i).lower() for i in v.indexes if display_name(i)}
    check_redundant(current.indexes + v.indexes, r, only=added)
    check_key_length(v.indexes, columns, r, current.table_charset)
