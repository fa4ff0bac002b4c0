"""ReturnData and AuditResult: per-statement engine output and its wire form."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from . import AuditLevel

PASS_MESSAGE = "审核通过"


@dataclass(frozen=True, slots=True)
class AuditResult:
    """Stable wire-format result for one statement.

    Corresponds to ``audit_result.schema.json``.
    """

    query: str
    type: str
    level: str
    affected_rows: int
    messages: tuple
    summary: tuple
    fix_suggestion: str = ""

    @property
    def passed(self) -> bool:
        return not self.summary

    # ── serialisation ───────────────────────────────────────────────

    def to_dict(self) -> dict:
        return {
            "query": self.query,
            "type": self.type,
            "level": self.level,
            "affected_rows": self.affected_rows,
            "messages": list(self.messages),
            "summary": list(self.summary),
            "fix_suggestion": self.fix_suggestion,
        }


@dataclass(slots=True)
class ReturnData:
    """Mutable per-statement accumulator filled by the dispatcher."""

    finger_id: str
    query: str
    type: str
    level: str = AuditLevel.INFO.value
    summary: list[str] = field(default_factory=list)
    affected_rows: int = 0

    def extend(self, messages: Iterable[str]) -> None:
        """Append diagnostics; any message promotes the level to ``WARN``."""
        messages = list(messages)
        if messages:
            self.level = AuditLevel.WARN.value
            self.summary.extend(messages)

    def to_audit_result(self) -> AuditResult:
        summary = tuple(self.summary)
        return AuditResult(
            query=self.query,
            type=self.type,
            level=self.level,
            affected_rows=self.affected_rows,
            messages=summary if summary else (PASS_MESSAGE,),
            summary=summary,
        )
