"""Rule record and the traverser→logic adapter every table is built from."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, TypeVar

from sql_inspect.hint import RuleHint
from sql_inspect.parser import nodes as n

V = TypeVar("V", bound=n.Visitor)

CheckFunc = Callable[[RuleHint, n.StmtNode], None]


@dataclass(frozen=True)
class Rule:
    """One entry of a rule table.

    ``hint`` is the human-readable label (``"CreateTable#检查表是否存在"``);
    ``check`` runs against a fresh :class:`RuleHint` and writes its
    findings there.
    """

    hint: str
    check: CheckFunc


def probe(hint: str, traverser: Callable[[], V], logic: Callable[[V, RuleHint], None]) -> Rule:
    """Build a rule that walks the statement with a new *traverser* and
    hands the collected facts to *logic*."""

    def check(r: RuleHint, stmt: n.StmtNode) -> None:
        v = traverser()
        stmt.accept(v)
        logic(v, r)

    return Rule(hint=hint, check=check)
