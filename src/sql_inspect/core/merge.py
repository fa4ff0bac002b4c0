"""Batch pass over the ALTER TABLE targets of one request."""

from __future__ import annotations

from typing import Iterable, Optional

from sql_inspect.core.config import InspectParams
from sql_inspect.core.kv import KVCache
from sql_inspect.logics.process import DbVersion
from sql_inspect.model import AuditLevel
from sql_inspect.model.audit_result import ReturnData


def is_repeat(items: Iterable[str]) -> list[str]:
    """Values occurring more than once, each reported once in first-seen order."""
    seen: set[str] = set()
    repeated: list[str] = []
    for item in items:
        if item in seen and item not in repeated:
            repeated.append(item)
        seen.add(item)
    return repeated


def merge_alters(kv: KVCache, params: InspectParams, targets: list[str]) -> Optional[ReturnData]:
    """Synthesized entry asking to fold repeated ALTERs into one statement.

    Returns ``None`` when there is nothing to report.  The dialect comes from
    the cached ``dbVersion``; without one the check is skipped.
    """
    version = kv.get("dbVersion")
    if version is None or len(targets) < 2:
        return None
    if DbVersion(version).is_tidb():
        enabled, label = params.ENABLE_TIDB_MERGE_ALTER_TABLE, "TiDB"
    else:
        enabled, label = params.ENABLE_MYSQL_MERGE_ALTER_TABLE, "MySQL"
    if not enabled:
        return None

    data = ReturnData(finger_id="", query="", type="", level=AuditLevel.INFO.value)
    data.extend(f"[{label}数据库]表`{table}`的多条ALTER操作，请合并为一条ALTER语句" for table in is_repeat(targets))
    return data if data.summary else None
