"""Index definition checks shared by CREATE TABLE and ALTER TABLE."""

from __future__ import annotations

from typing import Optional

from sql_inspect.hint import RuleHint
from sql_inspect.parser import nodes as n
from sql_inspect.traverses import IndexInfo

from .columns import BLOB_TYPES, LOB_TYPES
from .common import db_version

SMALL_KEY_LIMIT = 767
LARGE_KEY_LIMIT = 3072

CHARSET_MAXLEN = {
    "utf8mb4": 4, "utf8": 3, "utf8mb3": 3, "gb18030": 4, "gbk": 2, "gb2312": 2,
    "big5": 2, "ucs2": 2, "utf16": 4, "utf32": 4, "latin1": 1, "ascii": 1, "binary": 1,
}
FIXED_BYTES = {
    "TINYINT": 1, "SMALLINT": 2, "MEDIUMINT": 3, "INT": 4, "BIGINT": 8,
    "FLOAT": 4, "DOUBLE": 8, "DATE": 3, "TIME": 3, "DATETIME": 8, "TIMESTAMP": 4,
    "YEAR": 1, "ENUM": 2, "SET": 8,
}
_KEYS = (n.CONSTRAINT_PRIMARY_KEY, n.CONSTRAINT_UNIQUE)
_TEXT_SEARCH = (n.CONSTRAINT_FULLTEXT, n.CONSTRAINT_SPATIAL)


def display_name(idx: IndexInfo) -> str:
    return "PRIMARY" if idx.tp == n.CONSTRAINT_PRIMARY_KEY else idx.name


# ── naming ───────────────────────────────────────────────────────────


def check_index_names(indexes: list[IndexInfo], r: RuleHint) -> None:
    p = r.params
    prefixes = {
        n.CONSTRAINT_UNIQUE: (p.CHECK_UNIQ_INDEX_PREFIX, p.UNIQ_INDEX_PREFIX, "唯一索引"),
        n.CONSTRAINT_INDEX: (p.CHECK_SECONDARY_INDEX_PREFIX, p.SECONDARY_INDEX_PREFIX, "普通索引"),
        n.CONSTRAINT_FULLTEXT: (p.CHECK_FULLTEXT_INDEX_PREFIX, p.FULLTEXT_INDEX_PREFIX, "全文索引"),
    }
    for idx in indexes:
        if idx.implicit or idx.tp not in prefixes:
            continue
        enabled, prefix, label = prefixes[idx.tp]
        if not enabled:
            continue
        if not idx.name:
            r.add(f"{label}必须显式命名，且以`{prefix}`开头")
        elif not idx.name.lower().startswith(prefix.lower()):
            r.add(f"{label}`{idx.name}`必须以`{prefix}`开头")


def check_duplicate_names(indexes: list[IndexInfo], r: RuleHint, existing: Optional[list[IndexInfo]] = None) -> None:
    seen = {display_name(i).lower() for i in existing or [] if display_name(i)}
    for idx in indexes:
        name = display_name(idx)
        if not name:
            continue
        if name.lower() in seen:
            r.add(f"索引名`{name}`重复定义")
        seen.add(name.lower())


# ── shape ────────────────────────────────────────────────────────────


def check_index_counts(table: str, indexes: list[IndexInfo], r: RuleHint, existing: int = 0) -> None:
    p = r.params
    secondary = [i for i in indexes if i.tp != n.CONSTRAINT_PRIMARY_KEY]
    total = existing + len(secondary)
    if total > p.MAX_INDEX_KEYS:
        r.add(f"表`{table}`的索引数量{total}超过了{p.MAX_INDEX_KEYS}")
    for idx in secondary:
        if len(idx.columns) > p.SECONDARY_INDEX_MAX_KEYS:
            r.add(f"索引`{display_name(idx)}`的列数{len(idx.columns)}超过了{p.SECONDARY_INDEX_MAX_KEYS}")


def check_index_columns(indexes: list[IndexInfo], columns: dict[str, n.ColumnDef], r: RuleHint) -> None:
    """Indexed columns must exist; BLOB/TEXT columns need a prefix length."""
    for idx in indexes:
        for name, length in zip(idx.columns, idx.lengths):
            col = columns.get(name.lower())
            if col is None:
                r.add(f"索引`{display_name(idx)}`引用的列`{name}`不存在")
                continue
            if col.tp.tp in LOB_TYPES and length is None and idx.tp not in _TEXT_SEARCH:
                r.add(f"索引`{display_name(idx)}`的列`{name}`为{col.tp.tp}类型，必须指定前缀长度")


def redundant_pairs(indexes: list[IndexInfo]) -> list[tuple[str, str]]:
    """``(redundant, covering)`` name pairs.

    An index is redundant when its columns are a leading prefix of another
    index; unique and primary keys are only redundant when duplicated
    exactly by another unique key.
    """
    out: list[tuple[str, str]] = []
    for i, a in enumerate(indexes):
        if a.tp in _TEXT_SEARCH or not a.columns:
            continue
        ca = [c.lower() for c in a.columns]
        for j, b in enumerate(indexes):
            if i == j or b.tp in _TEXT_SEARCH:
                continue
            cb = [c.lower() for c in b.columns]
            if len(ca) > len(cb) or cb[:len(ca)] != ca:
                continue
            a_key, b_key = a.tp in _KEYS, b.tp in _KEYS
            if len(ca) == len(cb):
                if a_key and not b_key:
                    continue
                if a_key == b_key and i < j:
                    continue
            elif a_key:
                continue
            out.append((display_name(a), display_name(b)))
            break
    return out


def check_redundant(indexes: list[IndexInfo], r: RuleHint, only: Optional[set[str]] = None) -> None:
    if r.params.ENABLE_REDUNDANT_INDEX:
        return
    for redundant, covering in redundant_pairs(indexes):
        if only is not None and redundant.lower() not in only and covering.lower() not in only:
            continue
        r.add(f"索引`{redundant}`与索引`{covering}`存在冗余")


# ── key length ───────────────────────────────────────────────────────


def key_limit(r: RuleHint, row_format: str = "") -> int:
    version = db_version(r)
    if version.is_tidb():
        return LARGE_KEY_LIMIT
    fmt = (row_format or r.kv.get("innodbDefaultRowFormat") or "").lower()
    if fmt in ("compact", "redundant"):
        return SMALL_KEY_LIMIT
    if r.kv.get("largePrefix") == "ON":
        return LARGE_KEY_LIMIT
    # innodb_large_prefix defaults ON from 5.7.7 and is gone in 8.0
    if version.release() is None or version.at_least(5, 7, 7):
        return LARGE_KEY_LIMIT
    return SMALL_KEY_LIMIT


def column_key_bytes(col: n.ColumnDef, length: Optional[int], table_charset: str, r: RuleHint) -> int:
    ft = col.tp
    charset = (ft.charset or table_charset or r.kv.get("dbCharset") or "utf8mb4").lower()
    maxlen = 1 if ft.binary else CHARSET_MAXLEN.get(charset, 4)
    if ft.tp in ("CHAR", "VARCHAR"):
        return (length or ft.length or 1) * maxlen
    if ft.tp in ("BINARY", "VARBINARY"):
        return length or ft.length or 1
    if ft.tp in LOB_TYPES:
        return (length or 0) * (1 if ft.tp in BLOB_TYPES else maxlen)
    if ft.tp == "DECIMAL":
        return (ft.length or 10) // 2 + 1
    if ft.tp == "BIT":
        return ((ft.length or 1) + 7) // 8
    return FIXED_BYTES.get(ft.tp, 0)


def check_key_length(
    indexes: list[IndexInfo],
    columns: dict[str, n.ColumnDef],
    r: RuleHint,
    table_charset: str = "",
    row_format: str = "",
) -> None:
    limit = key_limit(r, row_format)
    for idx in indexes:
        if idx.tp in _TEXT_SEARCH:
            continue
        total = 0
        for name, length in zip(idx.columns, idx.lengths):
            col = columns.get(name.lower())
            if col is not None:
                total += column_key_bytes(col, length, table_charset, r)
        if total > limit:
            r.add(f"索引`{display_name(idx)}`的长度{total}字节超过了{limit}字节的限制")
