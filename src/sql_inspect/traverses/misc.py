"""Fact extractors for the smaller DDL statement kinds."""

from __future__ import annotations

from sql_inspect.parser import nodes as n


class TraverseCreateDatabaseIsExist(n.Visitor):
    def __init__(self) -> None:
        self.name = ""

    def visit_CreateDatabaseStmt(self, stmt: n.CreateDatabaseStmt) -> None:
        self.name = stmt.name


class TraverseCreateDatabaseOptions(n.Visitor):
    def __init__(self) -> None:
        self.name = ""
        self.charset = ""
        self.collate = ""

    def visit_CreateDatabaseStmt(self, stmt: n.CreateDatabaseStmt) -> None:
        self.name = stmt.name
        for opt in stmt.options:
            if opt.tp == "CHARSET":
                self.charset = opt.value
            elif opt.tp == "COLLATE":
                self.collate = opt.value


class TraverseCreateViewIsExist(n.Visitor):
    def __init__(self) -> None:
        self.view = ""
        self.or_replace = False

    def visit_CreateViewStmt(self, stmt: n.CreateViewStmt) -> None:
        self.view = stmt.view.name
        self.or_replace = stmt.or_replace


class TraverseRenameTable(n.Visitor):
    def __init__(self) -> None:
        self.is_match = False
        self.pairs: list[tuple[str, str]] = []

    def visit_RenameTableStmt(self, stmt: n.RenameTableStmt) -> None:
        self.is_match = True
        self.pairs = [(p.old.name, p.new.name) for p in stmt.pairs]


class TraverseAnalyzeTable(n.Visitor):
    def __init__(self) -> None:
        self.is_match = False
        self.tables: list[str] = []

    def visit_AnalyzeTableStmt(self, stmt: n.AnalyzeTableStmt) -> None:
        self.is_match = True
        self.tables = [t.name for t in stmt.tables]


class TraverseDropTable(n.Visitor):
    """DROP TABLE / DROP VIEW / TRUNCATE TABLE targets."""

    def __init__(self) -> None:
        self.is_match = False
        self.is_truncate = False
        self.is_view = False
        self.tables: list[str] = []

    def visit_DropTableStmt(self, stmt: n.DropTableStmt) -> None:
        self.is_match = True
        self.is_view = stmt.is_view
        self.tables = [t.name for t in stmt.tables]

    def visit_TruncateTableStmt(self, stmt: n.TruncateTableStmt) -> None:
        self.is_match = True
        self.is_truncate = True
        self.tables = [stmt.table.name]


class TraverseDDLTables(n.Visitor):
    """Every table a DDL statement creates, changes or removes."""

    def __init__(self) -> None:
        self.tables: list[str] = []

    def _add(self, table: n.TableName) -> None:
        if table.name and table.name not in self.tables:
            self.tables.append(table.name)

    def visit_CreateTableStmt(self, stmt: n.CreateTableStmt) -> None:
        self._add(stmt.table)

    def visit_AlterTableStmt(self, stmt: n.AlterTableStmt) -> None:
        self._add(stmt.table)

    def visit_TruncateTableStmt(self, stmt: n.TruncateTableStmt) -> None:
        self._add(stmt.table)

    def visit_CreateViewStmt(self, stmt: n.CreateViewStmt) -> None:
        self._add(stmt.view)

    def visit_DropTableStmt(self, stmt: n.DropTableStmt) -> None:
        for table in stmt.tables:
            self._add(table)

    visit_AnalyzeTableStmt = visit_DropTableStmt

    def visit_RenameTableStmt(self, stmt: n.RenameTableStmt) -> None:
        for pair in stmt.pairs:
            self._add(pair.old)
