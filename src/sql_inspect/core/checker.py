"""Checker: the review engine entry point.

Parses a batch of SQL, dispatches every statement through its rule table,
appends the ALTER merge diagnostic and maps everything to
:class:`~sql_inspect.model.audit_result.AuditResult`.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from sql_inspect.core.config import InspectParams, default_inspect_params
from sql_inspect.core.dispatch import Dispatcher
from sql_inspect.core.kv import request_cache
from sql_inspect.core.merge import merge_alters
from sql_inspect.dao.db import DB
from sql_inspect.dao.errors import IntrospectionError
from sql_inspect.dao.introspect import get_db_vars
from sql_inspect.model.audit_result import AuditResult, ReturnData
from sql_inspect.parser import fingerprint, fingerprint_id, parse, request_id

_logger = logging.getLogger(__name__)

# Used when the server variables cannot be read.
FALLBACK_DB_VARS = {
    "dbVersion": "",
    "dbCharset": "utf8mb4",
    "largePrefix": "OFF",
    "innodbDefaultRowFormat": "dynamic",
}


class Checker:
    """Review engine bound to one set of parameters and one target instance.

    Without :meth:`set_db_info` the checker runs offline: rules that need
    the live schema stay silent and everything else is reported as usual.
    """

    def __init__(
        self,
        params: Optional[InspectParams] = None,
        db_type: str = "MySQL",
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.params = params if params is not None else default_inspect_params()
        self.db_type = db_type
        self.logger = logger or _logger
        self.db = DB()

    def set_db_info(self, host: str, port: int, user: str, password: str, schema: str) -> None:
        self.db = DB(host=host, port=int(port), user=user, password=password, database=schema)

    def check(self, sql_text: str, timeout: Optional[float] = None) -> list[AuditResult]:
        """Review *sql_text*; raises :class:`~sql_inspect.parser.ParseError`
        when the batch does not parse.

        *timeout* (seconds) bounds the whole request; database lookups issued
        after it expires count as undetermined.
        """
        deadline = time.monotonic() + timeout if timeout is not None else None
        db = self.db.with_deadline(deadline)

        with request_cache(request_id(sql_text)) as kv:
            # ── 1. server variables ─────────────────────────────────
            try:
                db_vars = get_db_vars(db)
            except IntrospectionError as exc:
                self.logger.warning(
                    "failed to read server variables, using defaults: %s (host=%s port=%s)",
                    exc, db.host, db.port,
                )
                db_vars = dict(FALLBACK_DB_VARS)
            for key, value in db_vars.items():
                kv.put(key, value)
            charset = db_vars.get("dbCharset") or "utf8mb4"

            # ── 2. parse ────────────────────────────────────────────
            audit, warnings = parse(sql_text, charset, "")
            for warning in warnings:
                self.logger.debug("parse warning: %s", warning)

            # ── 3. per-statement rules ──────────────────────────────
            dispatcher = Dispatcher(db=db, kv=kv, params=self.params, logger=self.logger)
            results: list[ReturnData] = []
            targets: list[str] = []
            for stmt in audit.stmts:
                finger_id = fingerprint_id(fingerprint(stmt.text.rstrip(";")))
                kv.put(finger_id, True)
                data, target = dispatcher.dispatch(stmt, finger_id)
                if target:
                    targets.append(target)
                results.append(data)

            # ── 4. batch merge ──────────────────────────────────────
            merged = merge_alters(kv, self.params, targets)
            if merged is not None:
                results.append(merged)

        return [data.to_audit_result() for data in results]
