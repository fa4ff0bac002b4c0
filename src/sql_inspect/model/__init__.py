"""Enums shared across the engine and the report layer."""

from __future__ import annotations

from enum import Enum


class AuditLevel(str, Enum):
    """Report severity.

    The engine itself only produces ``INFO`` and ``WARN``; the remaining
    values are part of the wire contract and pass through unchanged.
    """

    PASS = "PASS"
    INFO = "INFO"
    NOTICE = "NOTICE"
    WARNING = "WARNING"
    ERROR = "ERROR"
    WARN = "WARN"


class StatementType(str, Enum):
    """Statement-kind tag carried on each result."""

    CREATE_TABLE = "CreateTable"
    CREATE_VIEW = "CreateView"
    CREATE_DATABASE = "CreateDatabase"
    ALTER_TABLE = "AlterTable"
    RENAME_TABLE = "RenameTable"
    ANALYZE_TABLE = "AnalyzeTable"
    DROP_TABLE = "DropTable"
    DML = "DML"
    ERROR = "ERROR"
    UNKNOWN = ""
