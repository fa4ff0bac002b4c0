"""Fact extractors for ALTER TABLE."""

from __future__ import annotations

from sql_inspect.parser import nodes as n

from .create_table import INDEX_TYPES, IndexInfo, table_options


class _AlterTableVisitor(n.Visitor):
    def __init__(self) -> None:
        self.is_match = False
        self.table = ""
        self.schema = ""

    def visit_AlterTableStmt(self, stmt: n.AlterTableStmt) -> None:
        self.table = stmt.table.name
        self.schema = stmt.table.schema
        for spec in stmt.specs:
            self.visit_spec(spec)

    def visit_spec(self, spec: n.AlterTableSpec) -> None:
        pass


class TraverseAlterTableIsExist(_AlterTableVisitor):
    def visit_AlterTableStmt(self, stmt: n.AlterTableStmt) -> None:
        super().visit_AlterTableStmt(stmt)
        self.is_match = True


class TraverseAlterTableAddConstraint(_AlterTableVisitor):
    """``ADD CONSTRAINT [symbol] ...`` clauses (explicit CONSTRAINT keyword)."""

    def __init__(self) -> None:
        super().__init__()
        self.constraints: list[str] = []

    def visit_spec(self, spec: n.AlterTableSpec) -> None:
        c = spec.new_constraint
        if spec.tp == n.ALTER_ADD_CONSTRAINT and c is not None and c.symbol_given:
            self.is_match = True
            self.constraints.append(c.name)


class TraverseAlterTableOptions(_AlterTableVisitor):
    def __init__(self) -> None:
        super().__init__()
        self.options: dict[str, str] = {}

    def visit_spec(self, spec: n.AlterTableSpec) -> None:
        if spec.tp == n.ALTER_OPTION:
            self.is_match = True
            self.options.update(table_options(spec.options))


class TraverseAlterTableSpecs(_AlterTableVisitor):
    def __init__(self) -> None:
        super().__init__()
        self.spec_types: list[str] = []

    def visit_spec(self, spec: n.AlterTableSpec) -> None:
        self.is_match = True
        self.spec_types.append(spec.tp)


class TraverseAlterTableDropCols(_AlterTableVisitor):
    def __init__(self) -> None:
        super().__init__()
        self.cols: list[str] = []

    def visit_spec(self, spec: n.AlterTableSpec) -> None:
        if spec.tp == n.ALTER_DROP_COLUMN and spec.old_column_name is not None:
            self.is_match = True
            self.cols.append(spec.old_column_name.name)


class TraverseAlterTableDropIndex(_AlterTableVisitor):
    def __init__(self) -> None:
        super().__init__()
        self.indexes: list[str] = []

    def visit_spec(self, spec: n.AlterTableSpec) -> None:
        if spec.tp == n.ALTER_DROP_INDEX:
            self.is_match = True
            self.indexes.append(spec.index_name)


class TraverseAlterTableDropPrimaryKey(_AlterTableVisitor):
    def visit_spec(self, spec: n.AlterTableSpec) -> None:
        if spec.tp == n.ALTER_DROP_PRIMARY_KEY:
            self.is_match = True


class TraverseAlterTableRename(_AlterTableVisitor):
    def __init__(self) -> None:
        super().__init__()
        self.new_tables: list[str] = []
        self.indexes: list[tuple[str, str]] = []
        self.columns: list[tuple[str, str]] = []

    def visit_spec(self, spec: n.AlterTableSpec) -> None:
        if spec.tp == n.ALTER_RENAME_TABLE and spec.new_table is not None:
            self.is_match = True
            self.new_tables.append(spec.new_table.qualified)
        elif spec.tp == n.ALTER_RENAME_INDEX:
            self.is_match = True
            self.indexes.append((spec.index_name, spec.new_index_name))
        elif spec.tp == n.ALTER_RENAME_COLUMN and spec.old_column_name and spec.new_column_name:
            self.is_match = True
            self.columns.append((spec.old_column_name.name, spec.new_column_name.name))


class TraverseAlterTableAddColsOptions(_AlterTableVisitor):
    def __init__(self) -> None:
        super().__init__()
        self.cols: list[n.ColumnDef] = []

    def visit_spec(self, spec: n.AlterTableSpec) -> None:
        if spec.tp == n.ALTER_ADD_COLUMNS:
            self.is_match = True
            self.cols.extend(spec.new_columns)


class TraverseAlterTableModifyColsOptions(_AlterTableVisitor):
    def __init__(self) -> None:
        super().__init__()
        self.cols: list[n.ColumnDef] = []

    def visit_spec(self, spec: n.AlterTableSpec) -> None:
        if spec.tp == n.ALTER_MODIFY_COLUMN:
            self.is_match = True
            self.cols.extend(spec.new_columns)


class TraverseAlterTableChangeCols(_AlterTableVisitor):
    """``CHANGE old new <type>`` clauses as ``(old name, new definition)``."""

    def __init__(self) -> None:
        super().__init__()
        self.changes: list[tuple[str, n.ColumnDef]] = []

    def visit_spec(self, spec: n.AlterTableSpec) -> None:
        if spec.tp == n.ALTER_CHANGE_COLUMN and spec.old_column_name is not None:
            self.is_match = True
            for col in spec.new_columns:
                self.changes.append((spec.old_column_name.name, col))


class TraverseAlterTableAddIndexes(_AlterTableVisitor):
    def __init__(self) -> None:
        super().__init__()
        self.indexes: list[IndexInfo] = []
        self.new_columns: dict[str, n.ColumnDef] = {}

    def visit_spec(self, spec: n.AlterTableSpec) -> None:
        if spec.tp == n.ALTER_ADD_COLUMNS:
            for col in spec.new_columns:
                self.new_columns[col.name.name.lower()] = col
        c = spec.new_constraint
        if spec.tp == n.ALTER_ADD_CONSTRAINT and c is not None and c.tp in INDEX_TYPES:
            self.is_match = True
            self.indexes.append(IndexInfo.from_constraint(c))
