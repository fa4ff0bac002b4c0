"""Typed AST for the MySQL statements the review engine understands.

Every node is a dataclass.  Statement nodes carry a ``kind`` tag used by the
dispatcher and the statement ``text`` (without the trailing semicolon).

Traversal follows :class:`ast.NodeVisitor`: :meth:`Visitor.visit` calls
``visit_<ClassName>`` when defined, else :meth:`Visitor.generic_visit`,
which walks every child node found in the dataclass fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Optional


class Node:
    """Base for all AST nodes."""

    def accept(self, visitor: "Visitor") -> Any:
        return visitor.visit(self)

    def iter_children(self):
        for f in fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if isinstance(value, Node):
                yield value
            elif isinstance(value, (list, tuple)):
                for item in value:
                    if isinstance(item, Node):
                        yield item


class Visitor:
    """Base visitor; subclasses fill their own fields while visiting."""

    def visit(self, node: Node) -> Any:
        method = getattr(self, "visit_" + type(node).__name__, None)
        if method is None:
            return self.generic_visit(node)
        return method(node)

    def generic_visit(self, node: Node) -> None:
        for child in node.iter_children():
            self.visit(child)


# ── names and expressions ────────────────────────────────────────────


@dataclass
class TableName(Node):
    name: str = ""
    schema: str = ""

    @property
    def qualified(self) -> str:
        return f"{self.schema}.{self.name}" if self.schema else self.name


@dataclass
class ColumnName(Node):
    name: str = ""
    table: str = ""
    schema: str = ""


@dataclass
class Expr(Node):
    """An expression kept as source text plus the subqueries inside it.

    ``literal`` holds the value of a bare literal (``None`` for the SQL NULL
    literal, or when the expression is not a single literal); check
    ``is_literal`` to tell them apart.
    """

    text: str = ""
    subqueries: list = field(default_factory=list)
    is_literal: bool = False
    literal: Optional[str] = None

    @property
    def is_null(self) -> bool:
        return self.is_literal and self.literal is None


@dataclass
class Assignment(Node):
    column: ColumnName = field(default_factory=ColumnName)
    expr: Expr = field(default_factory=Expr)


@dataclass
class ByItem(Node):
    expr: Expr = field(default_factory=Expr)
    desc: bool = False


@dataclass
class Limit(Node):
    count: Expr = field(default_factory=Expr)
    offset: Optional[Expr] = None


# ── column and index definitions ─────────────────────────────────────


@dataclass
class FieldType(Node):
    """Column data type; ``tp`` is the canonical upper-case type name."""

    tp: str = ""
    length: Optional[int] = None
    decimal: Optional[int] = None
    unsigned: bool = False
    zerofill: bool = False
    binary: bool = False
    charset: str = ""
    collate: str = ""
    elems: list = field(default_factory=list)

    def __str__(self) -> str:
        s = self.tp.lower()
        if self.elems:
            s += "(" + ",".join("'" + e.replace("'", "''") + "'" for e in self.elems) + ")"
        elif self.length is not None and self.decimal is not None:
            s += f"({self.length},{self.decimal})"
        elif self.length is not None:
            s += f"({self.length})"
        if self.unsigned:
            s += " unsigned"
        if self.zerofill:
            s += " zerofill"
        return s


@dataclass
class ColumnOption(Node):
    """One column attribute; ``tp`` is one of the ``COLUMN_OPTION_*`` tags."""

    tp: str = ""
    expr: Optional[Expr] = None
    value: str = ""


COLUMN_OPTION_NOT_NULL = "NOT NULL"
COLUMN_OPTION_NULL = "NULL"
COLUMN_OPTION_DEFAULT = "DEFAULT"
COLUMN_OPTION_AUTO_INCREMENT = "AUTO_INCREMENT"
COLUMN_OPTION_PRIMARY_KEY = "PRIMARY KEY"
COLUMN_OPTION_UNIQUE_KEY = "UNIQUE KEY"
COLUMN_OPTION_COMMENT = "COMMENT"
COLUMN_OPTION_ON_UPDATE = "ON UPDATE"
COLUMN_OPTION_COLLATE = "COLLATE"
COLUMN_OPTION_GENERATED = "GENERATED"
COLUMN_OPTION_CHECK = "CHECK"
COLUMN_OPTION_REFERENCES = "REFERENCES"
COLUMN_OPTION_OTHER = "OTHER"


@dataclass
class ColumnDef(Node):
    name: ColumnName = field(default_factory=ColumnName)
    tp: FieldType = field(default_factory=FieldType)
    options: list = field(default_factory=list)

    def option(self, tp: str) -> Optional[ColumnOption]:
        for opt in self.options:
            if opt.tp == tp:
                return opt
        return None

    def has_option(self, tp: str) -> bool:
        return self.option(tp) is not None

    @property
    def comment(self) -> Optional[str]:
        opt = self.option(COLUMN_OPTION_COMMENT)
        return opt.value if opt is not None else None


@dataclass
class IndexPartSpec(Node):
    column: Optional[ColumnName] = None
    length: Optional[int] = None
    expr: Optional[Expr] = None
    desc: bool = False


@dataclass
class ReferenceDef(Node):
    table: TableName = field(default_factory=TableName)
    columns: list = field(default_factory=list)


CONSTRAINT_PRIMARY_KEY = "PRIMARY KEY"
CONSTRAINT_UNIQUE = "UNIQUE"
CONSTRAINT_INDEX = "INDEX"
CONSTRAINT_FULLTEXT = "FULLTEXT"
CONSTRAINT_SPATIAL = "SPATIAL"
CONSTRAINT_FOREIGN_KEY = "FOREIGN KEY"
CONSTRAINT_CHECK = "CHECK"


@dataclass
class Constraint(Node):
    """Table-level key or constraint definition.

    ``symbol_given`` records an explicit ``CONSTRAINT [symbol]`` prefix.
    """

    tp: str = ""
    name: str = ""
    keys: list = field(default_factory=list)
    refer: Optional[ReferenceDef] = None
    expr: Optional[Expr] = None
    comment: str = ""
    symbol_given: bool = False


@dataclass
class TableOption(Node):
    """``tp`` is the canonical upper-case option name (``CHARSET`` etc.)."""

    tp: str = ""
    value: str = ""

    @property
    def uint_value(self) -> Optional[int]:
        try:
            return int(self.value)
        except ValueError:
            return None


# ── statements ───────────────────────────────────────────────────────


@dataclass
class StmtNode(Node):
    kind: ClassVar[str] = ""
    text: str = field(default="", compare=False)


@dataclass
class TableSource(Node):
    """Table factor in a FROM/UPDATE list; ``source`` is a TableName or a query."""

    source: Node = field(default_factory=TableName)
    alias: str = ""


@dataclass
class Join(Node):
    """Binary join; a comma join has ``tp == ","`` and ``explicit`` False."""

    left: Optional[Node] = None
    right: Optional[Node] = None
    tp: str = ""
    on: Optional[Expr] = None
    using: list = field(default_factory=list)
    natural: bool = False
    explicit: bool = False


@dataclass
class CommonTableExpr(Node):
    name: str = ""
    query: Optional[Node] = None


@dataclass
class SelectStmt(StmtNode):
    kind: ClassVar[str] = "Select"
    ctes: list = field(default_factory=list)
    distinct: bool = False
    fields: list = field(default_factory=list)
    from_: Optional[Node] = None
    where: Optional[Expr] = None
    group_by: list = field(default_factory=list)
    having: Optional[Expr] = None
    order_by: list = field(default_factory=list)
    limit: Optional[Limit] = None
    lock: str = ""


@dataclass
class SetOprStmt(StmtNode):
    kind: ClassVar[str] = "SetOpr"
    ctes: list = field(default_factory=list)
    selects: list = field(default_factory=list)
    operators: list = field(default_factory=list)
    order_by: list = field(default_factory=list)
    limit: Optional[Limit] = None


@dataclass
class PartitionOptions(Node):
    text: str = ""


@dataclass
class CreateTableStmt(StmtNode):
    kind: ClassVar[str] = "CreateTable"
    table: TableName = field(default_factory=TableName)
    if_not_exists: bool = False
    temporary: bool = False
    cols: list = field(default_factory=list)
    constraints: list = field(default_factory=list)
    options: list = field(default_factory=list)
    partition: Optional[PartitionOptions] = None
    select: Optional[Node] = None
    refer_table: Optional[TableName] = None

    def column(self, name: str) -> Optional[ColumnDef]:
        for col in self.cols:
            if col.name.name.lower() == name.lower():
                return col
        return None


@dataclass
class CreateViewStmt(StmtNode):
    kind: ClassVar[str] = "CreateView"
    view: TableName = field(default_factory=TableName)
    or_replace: bool = False
    cols: list = field(default_factory=list)
    select: Optional[Node] = None


@dataclass
class DatabaseOption(Node):
    tp: str = ""
    value: str = ""


@dataclass
class CreateDatabaseStmt(StmtNode):
    kind: ClassVar[str] = "CreateDatabase"
    name: str = ""
    if_not_exists: bool = False
    options: list = field(default_factory=list)


@dataclass
class DropDatabaseStmt(StmtNode):
    kind: ClassVar[str] = "DropDatabase"
    name: str = ""
    if_exists: bool = False


@dataclass
class CreateIndexStmt(StmtNode):
    kind: ClassVar[str] = "CreateIndex"
    index_name: str = ""
    table: TableName = field(default_factory=TableName)
    tp: str = CONSTRAINT_INDEX
    keys: list = field(default_factory=list)
    if_not_exists: bool = False


@dataclass
class DropIndexStmt(StmtNode):
    kind: ClassVar[str] = "DropIndex"
    index_name: str = ""
    table: TableName = field(default_factory=TableName)
    if_exists: bool = False


ALTER_ADD_COLUMNS = "ADD COLUMN"
ALTER_ADD_CONSTRAINT = "ADD CONSTRAINT"
ALTER_DROP_COLUMN = "DROP COLUMN"
ALTER_DROP_INDEX = "DROP INDEX"
ALTER_DROP_PRIMARY_KEY = "DROP PRIMARY KEY"
ALTER_DROP_FOREIGN_KEY = "DROP FOREIGN KEY"
ALTER_DROP_CHECK = "DROP CHECK"
ALTER_MODIFY_COLUMN = "MODIFY COLUMN"
ALTER_CHANGE_COLUMN = "CHANGE COLUMN"
ALTER_RENAME_COLUMN = "RENAME COLUMN"
ALTER_RENAME_TABLE = "RENAME TABLE"
ALTER_RENAME_INDEX = "RENAME INDEX"
ALTER_ALTER_COLUMN = "ALTER COLUMN"
ALTER_ALTER_INDEX = "ALTER INDEX"
ALTER_OPTION = "OPTION"
ALTER_PARTITION = "PARTITION"
ALTER_OTHER = "OTHER"


@dataclass
class AlterTableSpec(Node):
    """One comma-separated clause of ``ALTER TABLE``."""

    tp: str = ""
    new_columns: list = field(default_factory=list)
    new_constraint: Optional[Constraint] = None
    old_column_name: Optional[ColumnName] = None
    new_column_name: Optional[ColumnName] = None
    index_name: str = ""
    new_index_name: str = ""
    new_table: Optional[TableName] = None
    options: list = field(default_factory=list)
    if_exists: bool = False
    text: str = ""


@dataclass
class AlterTableStmt(StmtNode):
    kind: ClassVar[str] = "AlterTable"
    table: TableName = field(default_factory=TableName)
    specs: list = field(default_factory=list)


@dataclass
class DropTableStmt(StmtNode):
    kind: ClassVar[str] = "DropTable"
    tables: list = field(default_factory=list)
    if_exists: bool = False
    is_view: bool = False
    temporary: bool = False


@dataclass
class TruncateTableStmt(StmtNode):
    kind: ClassVar[str] = "TruncateTable"
    table: TableName = field(default_factory=TableName)


@dataclass
class TableToTable(Node):
    old: TableName = field(default_factory=TableName)
    new: TableName = field(default_factory=TableName)


@dataclass
class RenameTableStmt(StmtNode):
    kind: ClassVar[str] = "RenameTable"
    pairs: list = field(default_factory=list)


@dataclass
class AnalyzeTableStmt(StmtNode):
    kind: ClassVar[str] = "AnalyzeTable"
    tables: list = field(default_factory=list)


@dataclass
class InsertStmt(StmtNode):
    kind: ClassVar[str] = "Insert"
    table: TableName = field(default_factory=TableName)
    columns: list = field(default_factory=list)
    lists: list = field(default_factory=list)
    select: Optional[Node] = None
    on_duplicate: list = field(default_factory=list)
    is_replace: bool = False
    ignore: bool = False


@dataclass
class UpdateStmt(StmtNode):
    kind: ClassVar[str] = "Update"
    ctes: list = field(default_factory=list)
    table_refs: Optional[Node] = None
    assignments: list = field(default_factory=list)
    where: Optional[Expr] = None
    order_by: list = field(default_factory=list)
    limit: Optional[Limit] = None


@dataclass
class DeleteStmt(StmtNode):
    kind: ClassVar[str] = "Delete"
    ctes: list = field(default_factory=list)
    table_refs: Optional[Node] = None
    targets: list = field(default_factory=list)
    multiple: bool = False
    where: Optional[Expr] = None
    order_by: list = field(default_factory=list)
    limit: Optional[Limit] = None


@dataclass
class UnsupportedStmt(StmtNode):
    """A recognized statement the engine does not model in detail.

    ``verb`` is e.g. ``"SHOW"`` or ``"CREATE PROCEDURE"``; ``category`` is the
    ticket category (``"DDL"``, ``"DML"``, ``"EXPORT"``) or empty.
    """

    kind: ClassVar[str] = "Unsupported"
    verb: str = ""
    category: str = ""


def table_sources(node: Optional[Node]) -> list[TableSource]:
    """Flatten a FROM/UPDATE table reference tree into its table factors."""
    out: list[TableSource] = []
    if node is None:
        return out
    if isinstance(node, TableSource):
        out.append(node)
    elif isinstance(node, Join):
        out.extend(table_sources(node.left))
        out.extend(table_sources(node.right))
    return out
