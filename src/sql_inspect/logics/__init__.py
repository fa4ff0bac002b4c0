"""Rule logics: turn traverser facts into review messages.

Every logic has the shape ``logic_*(v, r) -> None``: it reads the facts a
traverser collected into ``v`` and appends messages to ``r`` (a
:class:`~sql_inspect.hint.RuleHint`), optionally consulting the database
through ``r.db`` and the request cache ``r.kv``.
"""

from sql_inspect.logics.alter_table import (
    logic_alter_table_add_cols_options,
    logic_alter_table_add_constraint,
    logic_alter_table_add_indexes,
    logic_alter_table_change_cols,
    logic_alter_table_drop_cols,
    logic_alter_table_drop_index,
    logic_alter_table_drop_primary_key,
    logic_alter_table_is_exist,
    logic_alter_table_modify_cols_options,
    logic_alter_table_options,
    logic_alter_table_rename,
    logic_alter_table_tidb_merge,
)
from sql_inspect.logics.create_table import (
    logic_create_table_as,
    logic_create_table_audit_cols,
    logic_create_table_cols_options,
    logic_create_table_cols_repeat_define,
    logic_create_table_constraint,
    logic_create_table_indexes,
    logic_create_table_is_exist,
    logic_create_table_like,
    logic_create_table_name,
    logic_create_table_options,
    logic_create_table_primary_key,
)
from sql_inspect.logics.database import logic_create_database_is_exist, logic_create_database_options
from sql_inspect.logics.dml import (
    logic_dml_affected_rows,
    logic_dml_disable_tables,
    logic_dml_insert_into_select,
    logic_dml_insert_with_columns,
    logic_dml_join_with_on,
    logic_dml_limit_order_by,
    logic_dml_max_insert_rows,
    logic_dml_must_have_where,
    logic_dml_on_duplicate,
    logic_dml_replace,
    logic_dml_subquery,
    logic_dml_tables_exist,
)
from sql_inspect.logics.misc import (
    logic_analyze_table,
    logic_create_view_is_exist,
    logic_ddl_disable_tables,
    logic_drop_table,
    logic_rename_table,
)
from sql_inspect.logics.process import DbVersion

__all__ = [
    "DbVersion",
    "logic_alter_table_add_cols_options",
    "logic_alter_table_add_constraint",
    "logic_alter_table_add_indexes",
    "logic_alter_table_change_cols",
    "logic_alter_table_drop_cols",
    "logic_alter_table_drop_index",
    "logic_alter_table_drop_primary_key",
    "logic_alter_table_is_exist",
    "logic_alter_table_modify_cols_options",
    "logic_alter_table_options",
    "logic_alter_table_rename",
    "logic_alter_table_tidb_merge",
    "logic_analyze_table",
    "logic_create_database_is_exist",
    "logic_create_database_options",
    "logic_create_table_as",
    "logic_create_table_audit_cols",
    "logic_create_table_cols_options",
    "logic_create_table_cols_repeat_define",
    "logic_create_table_constraint",
    "logic_create_table_indexes",
    "logic_create_table_is_exist",
    "logic_create_table_like",
    "logic_create_table_name",
    "logic_create_table_options",
    "logic_create_table_primary_key",
    "logic_create_view_is_exist",
    "logic_ddl_disable_tables",
    "logic_dml_affected_rows",
    "logic_dml_disable_tables",
    "logic_dml_insert_into_select",
    "logic_dml_insert_with_columns",
    "logic_dml_join_with_on",
    "logic_dml_limit_order_by",
    "logic_dml_max_insert_rows",
    "logic_dml_must_have_where",
    "logic_dml_on_duplicate",
    "logic_dml_replace",
    "logic_dml_subquery",
    "logic_dml_tables_exist",
    "logic_drop_table",
    "logic_rename_table",
]
