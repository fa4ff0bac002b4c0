"""CREATE DATABASE rule logics."""

from __future__ import annotations

from sql_inspect.dao.errors import IntrospectionError, NotFoundError
from sql_inspect.dao.introspect import check_if_database_exists
from sql_inspect.hint import RuleHint
from sql_inspect.traverses import TraverseCreateDatabaseIsExist, TraverseCreateDatabaseOptions

from .common import check_charset


def logic_create_database_is_exist(v: TraverseCreateDatabaseIsExist, r: RuleHint) -> None:
    try:
        msg = check_if_database_exists(v.name, r.db)
    except NotFoundError:
        return
    except IntrospectionError as exc:
        r.logger.debug("database probe for %s skipped: %s", v.name, exc)
        return
    r.add(msg)
    r.is_skip_next_step = True


def logic_create_database_options(v: TraverseCreateDatabaseOptions, r: RuleHint) -> None:
    check_charset(f"数据库`{v.name}`", v.charset, v.collate, r)
