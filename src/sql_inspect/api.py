"""
sql_inspect.api
===============

Programmatic entrypoint for using sql_inspect as a backend engine.

Goals:
  - No argparse / web framework dependencies
  - Stable, JSON-friendly outputs that match ``audit_result.schema.json``

Non-goals:
  - Owning parameter storage: callers pass :class:`InspectParams`
  - Owning connection credentials: callers pass a :class:`DB` handle

Usage::

    from sql_inspect.api import inspect_sql

    resp = inspect_sql("UPDATE t SET a = 1", sql_type="DML")
    resp.status            # 1: at least one statement has diagnostics
    resp.to_dict()["data"] # list of AuditResult dicts
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from sql_inspect.contracts.load import validate_instance
from sql_inspect.core.checker import Checker
from sql_inspect.core.config import InspectParams, default_inspect_params
from sql_inspect.dao.db import DB
from sql_inspect.model import AuditLevel, StatementType
from sql_inspect.model.audit_result import AuditResult
from sql_inspect.parser import ParseError, SQLTypeError
from sql_inspect.parser.classify import EXPORT, check_sql_type

_logger = logging.getLogger(__name__)

AUDIT_RESULT_SCHEMA = "audit_result.schema.json"

# Dialects the engine does not review.
UNREVIEWED_DB_TYPES = frozenset({"ClickHouse"})


@dataclass
class InspectResponse:
    """Outcome of one review request.

    ``code`` is 0 when the request was processed and 1 when it was rejected
    (ticket-type mismatch or unparseable SQL; see ``message``).  ``status``
    is 0 when every statement passed review and 1 otherwise.
    """

    code: int = 0
    message: str = ""
    status: int = 0
    results: list[AuditResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "status": self.status,
            "data": [r.to_dict() for r in self.results],
        }


def review_status(results: list[AuditResult]) -> int:
    """0 when every result is at ``INFO``, else 1."""
    return 0 if all(r.level == AuditLevel.INFO.value for r in results) else 1


def inspect_sql(
    content: str,
    *,
    sql_type: str = "",
    db_type: str = "MySQL",
    params: Optional[InspectParams] = None,
    db: Optional[DB] = None,
    timeout: Optional[float] = None,
    logger: Optional[logging.Logger] = None,
) -> InspectResponse:
    """Gate *content* by ticket type, then run the review engine.

    Parameters
    ----------
    content:
        One or more SQL statements.
    sql_type:
        Ticket type (``DDL``, ``DML`` or ``EXPORT``); empty skips the gate.
        EXPORT tickets are not reviewed.
    params:
        Review parameters; defaults when omitted.
    db:
        Instance under review; offline when omitted.
    timeout:
        Seconds allowed for database lookups across the whole request.
    """
    if sql_type and sql_type != EXPORT:
        try:
            check_sql_type(content, sql_type)
        except SQLTypeError as exc:
            return InspectResponse(code=1, message=str(exc), status=1)
        except ParseError as exc:
            return _parse_failure(content, exc)
    if sql_type == EXPORT or db_type in UNREVIEWED_DB_TYPES:
        return InspectResponse()

    checker = Checker(params=params, db_type=db_type, logger=logger)
    if db is not None:
        checker.set_db_info(db.host, db.port, db.user, db.password, db.database)
    else:
        _logger.debug("no database handle, reviewing offline")

    try:
        results = checker.check(content, timeout=timeout)
    except ParseError as exc:
        return _parse_failure(content, exc)

    return InspectResponse(status=review_status(results), results=results)


def _parse_failure(content: str, exc: ParseError) -> InspectResponse:
    """Single ``ERROR`` result carrying the parser message."""
    error = AuditResult(
        query=content,
        type=StatementType.ERROR.value,
        level=AuditLevel.ERROR.value,
        affected_rows=0,
        messages=(str(exc),),
        summary=(),
    )
    return InspectResponse(code=1, message=f"SQL语法错误: {exc}", status=1, results=[error])


def default_params() -> dict[str, Any]:
    """Default review parameters as a wire-format mapping."""
    return default_inspect_params().to_dict()


def validate_results(results: list[AuditResult]) -> None:
    """Validate *results* against ``audit_result.schema.json``.

    Raises ``jsonschema.ValidationError`` on failure.
    """
    validate_instance([r.to_dict() for r in results], AUDIT_RESULT_SCHEMA)


__all__ = [
    "InspectResponse",
    "default_params",
    "inspect_sql",
    "review_status",
    "validate_instance",
    "validate_results",
]
