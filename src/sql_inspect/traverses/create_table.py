"""Fact extractors for CREATE TABLE."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from sql_inspect.parser import nodes as n


@dataclass
class IndexInfo:
    """A key definition reduced to what the index rules look at."""

    name: str
    tp: str
    columns: list[str] = field(default_factory=list)
    lengths: list[Optional[int]] = field(default_factory=list)
    implicit: bool = False

    @classmethod
    def from_constraint(cls, c: n.Constraint) -> "IndexInfo":
        info = cls(name=c.name, tp=c.tp)
        for part in c.keys:
            if part.column is not None:
                info.columns.append(part.column.name)
                info.lengths.append(part.length)
        return info


INDEX_TYPES = (
    n.CONSTRAINT_PRIMARY_KEY,
    n.CONSTRAINT_UNIQUE,
    n.CONSTRAINT_INDEX,
    n.CONSTRAINT_FULLTEXT,
    n.CONSTRAINT_SPATIAL,
)


def table_options(options: list) -> dict[str, str]:
    """Last value per option name, e.g. ``{"ENGINE": "InnoDB"}``."""
    return {opt.tp: opt.value for opt in options}


class TraverseCreateTableIsExist(n.Visitor):
    def __init__(self) -> None:
        self.table = ""
        self.schema = ""
        self.if_not_exists = False

    def visit_CreateTableStmt(self, stmt: n.CreateTableStmt) -> None:
        self.table = stmt.table.name
        self.schema = stmt.table.schema
        self.if_not_exists = stmt.if_not_exists


class TraverseCreateTableAs(n.Visitor):
    def __init__(self) -> None:
        self.is_create_table_as = False

    def visit_CreateTableStmt(self, stmt: n.CreateTableStmt) -> None:
        self.is_create_table_as = stmt.select is not None


class TraverseCreateTableLike(n.Visitor):
    def __init__(self) -> None:
        self.is_create_table_like = False
        self.refer_table = ""

    def visit_CreateTableStmt(self, stmt: n.CreateTableStmt) -> None:
        if stmt.refer_table is not None:
            self.is_create_table_like = True
            self.refer_table = stmt.refer_table.name


class _CreateTableVisitor(n.Visitor):
    """Base for extractors that only apply to column-defining CREATE TABLE."""

    def __init__(self) -> None:
        self.is_match = False
        self.table = ""

    def visit_CreateTableStmt(self, stmt: n.CreateTableStmt) -> None:
        if stmt.refer_table is not None:
            return
        self.is_match = True
        self.table = stmt.table.name
        self.extract(stmt)

    def extract(self, stmt: n.CreateTableStmt) -> None:
        raise NotImplementedError


class TraverseCreateTableOptions(_CreateTableVisitor):
    def __init__(self) -> None:
        super().__init__()
        self.options: dict[str, str] = {}
        self.column_count = 0
        self.is_partition = False

    def extract(self, stmt: n.CreateTableStmt) -> None:
        self.options = table_options(stmt.options)
        self.column_count = len(stmt.cols)
        self.is_partition = stmt.partition is not None


class TraverseCreateTablePrimaryKey(_CreateTableVisitor):
    """Primary key columns, from either a column option or a table key."""

    def __init__(self) -> None:
        super().__init__()
        self.has_primary_key = False
        self.columns: list[str] = []
        self.column_defs: dict[str, n.ColumnDef] = {}

    def extract(self, stmt: n.CreateTableStmt) -> None:
        self.column_defs = {col.name.name.lower(): col for col in stmt.cols}
        for col in stmt.cols:
            if col.has_option(n.COLUMN_OPTION_PRIMARY_KEY):
                self.has_primary_key = True
                self.columns.append(col.name.name)
        for c in stmt.constraints:
            if c.tp == n.CONSTRAINT_PRIMARY_KEY:
                self.has_primary_key = True
                self.columns.extend(IndexInfo.from_constraint(c).columns)


class TraverseCreateTableConstraint(_CreateTableVisitor):
    def __init__(self) -> None:
        super().__init__()
        self.foreign_keys: list[str] = []

    def extract(self, stmt: n.CreateTableStmt) -> None:
        for c in stmt.constraints:
            if c.tp == n.CONSTRAINT_FOREIGN_KEY:
                self.foreign_keys.append(c.name or ",".join(IndexInfo.from_constraint(c).columns))
        for col in stmt.cols:
            if col.has_option(n.COLUMN_OPTION_REFERENCES):
                self.foreign_keys.append(col.name.name)


class TraverseCreateTableAuditCols(_CreateTableVisitor):
    def __init__(self) -> None:
        super().__init__()
        self.column_types: dict[str, str] = {}

    def extract(self, stmt: n.CreateTableStmt) -> None:
        self.column_types = {col.name.name.lower(): col.tp.tp for col in stmt.cols}


class TraverseCreateTableColsOptions(_CreateTableVisitor):
    def __init__(self) -> None:
        super().__init__()
        self.cols: list[n.ColumnDef] = []
        self.table_charset = ""

    def extract(self, stmt: n.CreateTableStmt) -> None:
        self.cols = list(stmt.cols)
        self.table_charset = table_options(stmt.options).get("CHARSET", "")


class TraverseCreateTableColsRepeatDefine(_CreateTableVisitor):
    def __init__(self) -> None:
        super().__init__()
        self.repeated: list[str] = []

    def extract(self, stmt: n.CreateTableStmt) -> None:
        seen: set[str] = set()
        for col in stmt.cols:
            key = col.name.name.lower()
            if key in seen and col.name.name not in self.repeated:
                self.repeated.append(col.name.name)
            seen.add(key)


class TraverseCreateTableIndexes(_CreateTableVisitor):
    """Secondary and primary keys plus the column types they reference."""

    def __init__(self) -> None:
        super().__init__()
        self.indexes: list[IndexInfo] = []
        self.column_defs: dict[str, n.ColumnDef] = {}
        self.table_charset = ""

    def extract(self, stmt: n.CreateTableStmt) -> None:
        self.column_defs = {col.name.name.lower(): col for col in stmt.cols}
        self.table_charset = table_options(stmt.options).get("CHARSET", "")
        for c in stmt.constraints:
            if c.tp in INDEX_TYPES:
                self.indexes.append(IndexInfo.from_constraint(c))
        for col in stmt.cols:
            if col.has_option(n.COLUMN_OPTION_PRIMARY_KEY):
                self.indexes.append(IndexInfo(
                    name="PRIMARY", tp=n.CONSTRAINT_PRIMARY_KEY,
                    columns=[col.name.name], lengths=[None], implicit=True,
                ))
            if col.has_option(n.COLUMN_OPTION_UNIQUE_KEY):
                # MySQL names a column-level UNIQUE key after the column
                self.indexes.append(IndexInfo(
                    name=col.name.name, tp=n.CONSTRAINT_UNIQUE,
                    columns=[col.name.name], lengths=[None], implicit=True,
                ))
