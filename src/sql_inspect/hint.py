"""Per-(statement, rule) context handed to every rule check."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from sql_inspect.core.config import InspectParams
from sql_inspect.core.kv import KVCache
from sql_inspect.dao.db import DB

_null_logger = logging.getLogger("sql_inspect.rules")


@dataclass
class RuleHint:
    """Collaborators plus output buffers for one rule run.

    The dispatcher allocates a fresh instance for each rule so that
    ``is_skip_next_step`` and ``merge_alter`` never leak between rules.
    """

    db: DB
    kv: KVCache
    query: str
    params: InspectParams
    summary: list[str] = field(default_factory=list)
    affected_rows: int = 0
    is_skip_next_step: bool = False
    merge_alter: str = ""
    logger: logging.Logger = field(default=_null_logger, repr=False)

    def add(self, message: str) -> None:
        self.summary.append(message)

    @property
    def db_version(self) -> str:
        value: Optional[str] = self.kv.get("dbVersion")
        return value or ""
