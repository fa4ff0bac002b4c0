"""Helpers shared by the rule logics: guarded DB probes and naming checks."""

from __future__ import annotations

import re
from typing import Optional

from sql_inspect.dao.errors import IntrospectionError, NotFoundError
from sql_inspect.dao.introspect import check_if_table_exists, show_create_table
from sql_inspect.hint import RuleHint
from sql_inspect.parser import nodes as n

from .process import DbVersion


def db_version(r: RuleHint) -> DbVersion:
    return DbVersion(r.db_version)


def probe_table(r: RuleHint, table: str, schema: str = "") -> tuple[Optional[bool], str]:
    """``(exists, message)``; ``exists`` is ``None`` when undetermined."""
    try:
        return True, check_if_table_exists(table, r.db, schema)
    except NotFoundError as exc:
        return False, exc.message
    except IntrospectionError as exc:
        r.logger.debug("table probe for %s skipped: %s", table, exc)
        return None, ""


def existing_table(r: RuleHint, table: str) -> Optional[n.CreateTableStmt]:
    """Current definition of *table* from ``SHOW CREATE TABLE``, if obtainable."""
    try:
        audit = show_create_table(table, r.db, r.kv)
    except IntrospectionError as exc:
        r.logger.debug("SHOW CREATE TABLE %s skipped: %s", table, exc)
        return None
    for stmt in audit.stmts:
        if isinstance(stmt, n.CreateTableStmt):
            return stmt
    return None


def is_identifier(name: str, r: RuleHint) -> bool:
    if not r.params.CHECK_IDENTIFIER:
        return True
    return re.match(r.params.IDENTIFIER_PATTERN, name) is not None


def in_table_list(table: str, tables: list) -> bool:
    """Match *table* against configured names, bare or ``schema.table``."""
    name = table.lower()
    for item in tables:
        item = str(item).lower()
        if item == name or item.rsplit(".", 1)[-1] == name:
            return True
    return False


def charset_of_collation(collation: str) -> str:
    return collation.split("_", 1)[0].lower()


def check_charset(label: str, charset: str, collate: str, r: RuleHint) -> None:
    """Charset/collation of *label* must belong to the supported set."""
    supported = r.params.supported_charsets
    if charset and charset.lower() not in supported:
        r.add(f"{label}的字符集`{charset}`不被允许，允许的字符集为{','.join(supported)}")
    if not collate:
        return
    target = charset.lower() if charset else charset_of_collation(collate)
    if charset_of_collation(collate) != target or target not in supported:
        recommend = r.params.recommended_collation(target) if target in supported else ""
        hint = f"，推荐使用{recommend}" if recommend else f"，允许的字符集为{','.join(supported)}"
        r.add(f"{label}的排序规则`{collate}`不被允许{hint}")


def check_table_options(table: str, options: dict[str, str], r: RuleHint, *, creating: bool) -> None:
    """Engine, charset, collation, comment and AUTO_INCREMENT clauses."""
    p = r.params
    engines = [e.lower() for e in p.TABLE_SUPPORT_ENGINE]
    engine = options.get("ENGINE")
    if p.CHECK_TABLE_ENGINE:
        if engine is None and creating:
            r.add(f"表`{table}`必须指定存储引擎，允许的存储引擎为{','.join(p.TABLE_SUPPORT_ENGINE)}")
        elif engine is not None and engine.lower() not in engines:
            r.add(f"表`{table}`的存储引擎`{engine}`不被允许，允许的存储引擎为{','.join(p.TABLE_SUPPORT_ENGINE)}")

    if p.CHECK_TABLE_CHARSET:
        check_charset(f"表`{table}`", options.get("CHARSET", ""), options.get("COLLATE", ""), r)

    comment = options.get("COMMENT")
    if p.CHECK_TABLE_COMMENT:
        if creating and not comment:
            r.add(f"表`{table}`必须要有注释")
        elif comment is not None and not creating and not comment:
            r.add(f"表`{table}`的注释不能为空")
    if comment and len(comment) > p.TABLE_COMMENT_LENGTH:
        r.add(f"表`{table}`的注释长度超过了{p.TABLE_COMMENT_LENGTH}个字符")

    auto_increment = options.get("AUTO_INCREMENT")
    if p.CHECK_TABLE_AUTOINCREMENT_INIT_VALUE and auto_increment is not None and creating:
        if auto_increment.strip() != "1":
            r.add(f"表`{table}`的AUTO_INCREMENT初始值必须为1")
