"""Ordered rule tables, one per statement kind.

Order matters: a rule that sets ``is_skip_next_step`` stops the rest of
its table for the current statement.
"""

from sql_inspect.rules.alter_table import alter_table_rules
from sql_inspect.rules.create_table import create_table_rules
from sql_inspect.rules.dml import dml_rules
from sql_inspect.rules.misc import (
    analyze_table_rules,
    create_database_rules,
    create_view_rules,
    drop_table_rules,
    rename_table_rules,
)
from sql_inspect.rules.rule import Rule, probe

__all__ = [
    "Rule",
    "alter_table_rules",
    "analyze_table_rules",
    "create_database_rules",
    "create_table_rules",
    "create_view_rules",
    "dml_rules",
    "drop_table_rules",
    "probe",
    "rename_table_rules",
]
