"""Fact extractors for INSERT / REPLACE / UPDATE / DELETE."""

from __future__ import annotations

from typing import Optional

from sql_inspect.parser import nodes as n


class TraverseDMLInsert(n.Visitor):
    def __init__(self) -> None:
        self.is_match = False
        self.table = ""
        self.is_replace = False
        self.has_columns = False
        self.has_select = False
        self.has_on_duplicate = False
        self.row_count = 0

    def visit_InsertStmt(self, stmt: n.InsertStmt) -> None:
        self.is_match = True
        self.table = stmt.table.name
        self.is_replace = stmt.is_replace
        self.has_columns = bool(stmt.columns)
        self.has_select = stmt.select is not None
        self.has_on_duplicate = bool(stmt.on_duplicate)
        self.row_count = len(stmt.lists)


class TraverseDMLWhere(n.Visitor):
    def __init__(self) -> None:
        self.is_match = False
        self.verb = ""
        self.has_where = False

    def visit_UpdateStmt(self, stmt: n.UpdateStmt) -> None:
        self.is_match = True
        self.verb = "UPDATE"
        self.has_where = stmt.where is not None

    def visit_DeleteStmt(self, stmt: n.DeleteStmt) -> None:
        self.is_match = True
        self.verb = "DELETE"
        self.has_where = stmt.where is not None


class TraverseDMLJoin(n.Visitor):
    """Explicit JOINs in UPDATE/DELETE/INSERT...SELECT lacking ON or USING.

    Comma joins and NATURAL joins carry their condition elsewhere and are
    not reported.
    """

    def __init__(self) -> None:
        self.is_match = False
        self.joins: list[str] = []

    def visit_UpdateStmt(self, stmt: n.UpdateStmt) -> None:
        self.is_match = True
        self._walk(stmt.table_refs)

    visit_DeleteStmt = visit_UpdateStmt

    def visit_InsertStmt(self, stmt: n.InsertStmt) -> None:
        self.is_match = True
        if isinstance(stmt.select, n.SelectStmt):
            self._walk(stmt.select.from_)

    def _walk(self, node: Optional[n.Node]) -> None:
        if not isinstance(node, n.Join):
            return
        self._walk(node.left)
        self._walk(node.right)
        if node.explicit and not node.natural and node.on is None and not node.using:
            self.joins.append(_describe(node.right))


def _describe(node: Optional[n.Node]) -> str:
    if isinstance(node, n.TableSource):
        if isinstance(node.source, n.TableName):
            return node.alias or node.source.name
        return node.alias or "(subquery)"
    return "(...)"


class TraverseDMLLimitOrderBy(n.Visitor):
    def __init__(self) -> None:
        self.is_match = False
        self.has_limit = False
        self.has_order_by = False

    def visit_UpdateStmt(self, stmt: n.UpdateStmt) -> None:
        self.is_match = True
        self.has_limit = stmt.limit is not None
        self.has_order_by = bool(stmt.order_by)

    visit_DeleteStmt = visit_UpdateStmt


class TraverseDMLSubquery(n.Visitor):
    def __init__(self) -> None:
        self.is_match = False
        self.has_subquery = False

    def visit_UpdateStmt(self, stmt: n.UpdateStmt) -> None:
        self.is_match = True
        exprs = [stmt.where] + [a.expr for a in stmt.assignments]
        self.has_subquery = _has_subquery(stmt.table_refs, exprs)

    def visit_DeleteStmt(self, stmt: n.DeleteStmt) -> None:
        self.is_match = True
        self.has_subquery = _has_subquery(stmt.table_refs, [stmt.where])


def _has_subquery(refs: Optional[n.Node], exprs: list) -> bool:
    if any(expr is not None and expr.subqueries for expr in exprs):
        return True
    for ts in n.table_sources(refs):
        if not isinstance(ts.source, n.TableName):
            return True
    return _join_condition_has_subquery(refs)


def _join_condition_has_subquery(node: Optional[n.Node]) -> bool:
    if not isinstance(node, n.Join):
        return False
    if node.on is not None and node.on.subqueries:
        return True
    return _join_condition_has_subquery(node.left) or _join_condition_has_subquery(node.right)


class TraverseDMLTables(n.Visitor):
    """Base tables a DML statement reads or writes, CTE names excluded."""

    def __init__(self) -> None:
        self.is_match = False
        self.tables: list[str] = []
        self._ctes: set[str] = set()

    def visit_InsertStmt(self, stmt: n.InsertStmt) -> None:
        self.is_match = True
        self._add(stmt.table)
        self.generic_visit(stmt)

    def visit_UpdateStmt(self, stmt: n.UpdateStmt) -> None:
        self.is_match = True
        self.generic_visit(stmt)

    visit_DeleteStmt = visit_UpdateStmt

    def visit_CommonTableExpr(self, cte: n.CommonTableExpr) -> None:
        self._ctes.add(cte.name.lower())
        self.generic_visit(cte)

    def visit_TableSource(self, ts: n.TableSource) -> None:
        if isinstance(ts.source, n.TableName):
            self._add(ts.source)
        else:
            self.visit(ts.source)

    def visit_TableName(self, table: n.TableName) -> None:
        # reached only through DELETE targets, which name aliases
        pass

    def _add(self, table: n.TableName) -> None:
        if table.schema == "" and table.name.lower() in self._ctes:
            return
        if table.name not in self.tables:
            self.tables.append(table.name)


class TraverseDMLExplain(n.Visitor):
    """What the affected-rows estimate is based on."""

    def __init__(self) -> None:
        self.is_match = False
        self.insert_rows: Optional[int] = None

    def visit_InsertStmt(self, stmt: n.InsertStmt) -> None:
        self.is_match = True
        if stmt.lists:
            self.insert_rows = len(stmt.lists)

    def visit_UpdateStmt(self, stmt: n.UpdateStmt) -> None:
        self.is_match = True

    visit_DeleteStmt = visit_UpdateStmt
