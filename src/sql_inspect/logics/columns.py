"""Column definition checks shared by CREATE TABLE and ALTER TABLE."""

from __future__ import annotations

from typing import Iterable, Optional

from sql_inspect.hint import RuleHint
from sql_inspect.parser import nodes as n

from .common import check_charset, is_identifier

INT_TYPES = ("TINYINT", "SMALLINT", "MEDIUMINT", "INT", "BIGINT")
TEXT_TYPES = ("TINYTEXT", "TEXT", "MEDIUMTEXT", "LONGTEXT")
BLOB_TYPES = ("TINYBLOB", "BLOB", "MEDIUMBLOB", "LONGBLOB")
LOB_TYPES = frozenset(TEXT_TYPES + BLOB_TYPES)
STRING_TYPES = ("CHAR", "VARCHAR")
TIME_TYPES = frozenset({"DATETIME", "TIMESTAMP"})


def collation_of(col: n.ColumnDef) -> str:
    opt = col.option(n.COLUMN_OPTION_COLLATE)
    return opt.value if opt is not None else col.tp.collate


def is_not_null(col: n.ColumnDef) -> bool:
    return col.has_option(n.COLUMN_OPTION_NOT_NULL) or col.has_option(n.COLUMN_OPTION_PRIMARY_KEY)


def default_expr(col: n.ColumnDef) -> Optional[n.Expr]:
    opt = col.option(n.COLUMN_OPTION_DEFAULT)
    return opt.expr if opt is not None else None


def check_columns(cols: Iterable[n.ColumnDef], r: RuleHint) -> None:
    """Naming, comment, charset, type and NULL/DEFAULT rules for each column."""
    p = r.params
    for col in cols:
        name = col.name.name
        tp = col.tp.tp
        label = f"列`{name}`"

        if p.CHECK_COLUMN_COMMENT and not col.comment:
            r.add(f"{label}必须要有注释")
        check_charset(label, col.tp.charset, collation_of(col), r)
        if not is_identifier(name, r):
            r.add(f"列名`{name}`不符合命名规范，仅允许小写字母、数字和下划线且不能以数字开头")
        if len(name) > p.MAX_COLUMN_NAME_LENGTH:
            r.add(f"列名`{name}`长度超出限制，最大允许{p.MAX_COLUMN_NAME_LENGTH}个字符")

        if tp == "VARCHAR" and col.tp.length is not None and col.tp.length > p.MAX_VARCHAR_LENGTH:
            r.add(f"{label}的VARCHAR长度{col.tp.length}超过了{p.MAX_VARCHAR_LENGTH}，请使用TEXT类型")
        if tp in LOB_TYPES and not p.ENABLE_COLUMN_BLOB_TYPE:
            r.add(f"{label}禁止使用{tp}类型")
        if tp == "JSON" and not p.ENABLE_COLUMN_JSON_TYPE:
            r.add(f"{label}禁止使用JSON类型")
        if tp == "BIT" and not p.ENABLE_COLUMN_BIT_TYPE:
            r.add(f"{label}禁止使用BIT类型")
        if tp == "TIMESTAMP" and not p.ENABLE_COLUMN_TIMESTAMP_TYPE:
            r.add(f"{label}禁止使用TIMESTAMP类型，请使用DATETIME")
        if tp in ("FLOAT", "DOUBLE") and p.CHECK_COLUMN_FLOAT_DOUBLE:
            r.add(f"{label}的类型为{tp}，请使用DECIMAL类型")

        default = default_expr(col)
        if tp in LOB_TYPES or tp == "JSON":
            if default is not None and not default.is_null:
                r.add(f"{label}为{tp}类型，不能设置非NULL的默认值")
            continue
        if p.ENABLE_COLUMN_NOT_NULL and not is_not_null(col):
            r.add(f"{label}必须定义为NOT NULL")
        if (
            p.CHECK_COLUMN_DEFAULT_VALUE
            and is_not_null(col)
            and default is None
            and not col.has_option(n.COLUMN_OPTION_AUTO_INCREMENT)
            and not col.has_option(n.COLUMN_OPTION_PRIMARY_KEY)
            and not col.has_option(n.COLUMN_OPTION_GENERATED)
        ):
            r.add(f"{label}为NOT NULL时必须指定DEFAULT值")


# ── type changes ─────────────────────────────────────────────────────


def _rank(tp: str, family: tuple) -> int:
    return family.index(tp) if tp in family else -1


def is_compatible_change(old: n.FieldType, new: n.FieldType) -> bool:
    """True when *new* can hold every value of *old* without truncation."""
    if old.tp in INT_TYPES and new.tp in INT_TYPES:
        grow = _rank(new.tp, INT_TYPES) - _rank(old.tp, INT_TYPES)
        if old.unsigned == new.unsigned:
            return grow >= 0
        # unsigned fits a wider signed type; signed never fits unsigned
        return old.unsigned and grow > 0
    if old.tp in STRING_TYPES and new.tp in STRING_TYPES:
        if old.tp == "VARCHAR" and new.tp == "CHAR":
            return False
        return (new.length or 1) >= (old.length or 1)
    if old.tp in STRING_TYPES and new.tp in TEXT_TYPES:
        return True
    for family in (TEXT_TYPES, BLOB_TYPES):
        if old.tp in family and new.tp in family:
            return _rank(new.tp, family) >= _rank(old.tp, family)
    if old.tp == new.tp == "DECIMAL":
        old_int = (old.length or 10) - (old.decimal or 0)
        new_int = (new.length or 10) - (new.decimal or 0)
        return new_int >= old_int and (new.decimal or 0) >= (old.decimal or 0)
    if old.tp == new.tp and old.tp in ("ENUM", "SET"):
        return new.elems[:len(old.elems)] == old.elems
    if old.tp == new.tp:
        return (new.length or 0) >= (old.length or 0)
    return False


def check_type_change(name: str, old: n.FieldType, new: n.FieldType, r: RuleHint) -> None:
    """Type change policy for MODIFY/CHANGE of an existing column."""
    if str(old) == str(new):
        return
    if not r.params.ENABLE_COLUMN_TYPE_CHANGE:
        r.add(f"列`{name}`禁止修改数据类型[{old}→{new}]")
    elif r.params.ENABLE_COLUMN_TYPE_CHANGE_COMPATIBLE and not is_compatible_change(old, new):
        r.add(f"列`{name}`的类型变更[{old}→{new}]不兼容，可能导致数据截断")
