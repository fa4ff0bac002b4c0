"""MySQL/TiDB statements parsed with sqlglot and converted to the review AST.

sqlglot's MySQL dialect does the parsing; this module splits a batch into
statements, hands each one to sqlglot and converts the resulting expression
tree into the :mod:`nodes` dataclasses the traversers walk.  Expressions are
kept as generated MySQL text plus any subqueries inside them.

Statements the engine does not audit are still recognized by their verb so
that classification and the "unrecognized statement" path work.  TiDB table
clauses sqlglot has no grammar for (``SET TIFLASH REPLICA``, ``CACHE``,
``COMPACT``) are recognized up front and take the same path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlglot import exp
from sqlglot.errors import ErrorLevel, ParseError as SqlglotParseError
from sqlglot.tokens import Token, TokenType

from . import nodes as n
from .errors import ParseError
from .lexer import DIALECT, blank_prefix, is_command, is_word, tail_tokens, tokens

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Audit:
    """Parse result: the original text plus its statements in order."""

    query: str
    stmts: tuple
    charset: str = ""
    collation: str = ""


# ── vocabulary ───────────────────────────────────────────────────────

# leading verbs of statements the engine never models; they skip sqlglot
_OTHER_VERBS = frozenset({
    "SHOW", "SET", "USE", "GRANT", "REVOKE", "FLUSH", "KILL", "LOCK", "UNLOCK",
    "BEGIN", "START", "COMMIT", "ROLLBACK", "EXPLAIN", "DESC", "DESCRIBE",
    "CALL", "DO", "HANDLER", "LOAD", "OPTIMIZE", "CHECK", "REPAIR", "CHECKSUM",
    "PREPARE", "EXECUTE", "DEALLOCATE", "SAVEPOINT", "RELEASE", "INSTALL",
    "UNINSTALL", "RESET", "PURGE", "CHANGE", "STOP", "XA", "HELP", "SPLIT",
    "ADMIN", "BACKUP", "RESTORE", "IMPORT", "TABLE", "VALUES", "TRACE",
    "FLASHBACK", "RECOVER", "BATCH", "FETCH",
})
# CREATE/ALTER/DROP targets that count as DDL tickets even when not modelled
_DDL_OBJECTS = frozenset({"SEQUENCE", "PLACEMENT", "TABLE", "INDEX", "VIEW", "DATABASE", "SCHEMA"})
# TiDB-only ALTER TABLE clauses
_TIDB_TABLE_CLAUSES = frozenset({"CACHE", "NOCACHE", "COMPACT"})

_KNOWN_TYPES = frozenset({
    "TINYINT", "SMALLINT", "MEDIUMINT", "INT", "BIGINT", "BIT", "FLOAT", "DOUBLE",
    "DECIMAL", "DATE", "TIME", "DATETIME", "TIMESTAMP", "YEAR", "CHAR", "VARCHAR",
    "BINARY", "VARBINARY", "TINYBLOB", "BLOB", "MEDIUMBLOB", "LONGBLOB",
    "TINYTEXT", "TEXT", "MEDIUMTEXT", "LONGTEXT", "ENUM", "SET", "JSON",
    "GEOMETRY", "POINT", "LINESTRING", "POLYGON", "MULTIPOINT",
    "MULTILINESTRING", "MULTIPOLYGON", "GEOMETRYCOLLECTION", "VECTOR",
})
_TYPE_ALIASES = {"TIMESTAMPTZ": "TIMESTAMP", "NCHAR": "CHAR", "NVARCHAR": "VARCHAR"}
_UNSIGNED_TYPES = {
    "UTINYINT": "TINYINT", "USMALLINT": "SMALLINT", "UMEDIUMINT": "MEDIUMINT",
    "UINT": "INT", "UBIGINT": "BIGINT", "UDECIMAL": "DECIMAL", "UDOUBLE": "DOUBLE",
}

_TABLE_OPTIONS = frozenset({
    "ENGINE", "AUTO_INCREMENT", "AVG_ROW_LENGTH", "CHECKSUM", "TABLE_CHECKSUM",
    "COMMENT", "COMPRESSION", "CONNECTION", "DELAY_KEY_WRITE", "ENCRYPTION",
    "INSERT_METHOD", "KEY_BLOCK_SIZE", "MAX_ROWS", "MIN_ROWS", "PACK_KEYS",
    "PASSWORD", "ROW_FORMAT", "STATS_AUTO_RECALC", "STATS_PERSISTENT",
    "STATS_SAMPLE_PAGES", "TABLESPACE", "UNION", "SHARD_ROW_ID_BITS",
    "PRE_SPLIT_REGIONS", "AUTO_ID_CACHE", "AUTO_RANDOM_BASE", "SECONDARY_ENGINE",
    "ENGINE_ATTRIBUTE", "SECONDARY_ENGINE_ATTRIBUTE", "AUTOEXTEND_SIZE",
    "TTL", "TTL_ENABLE", "TTL_JOB_INTERVAL", "STORAGE", "CHARSET", "COLLATE",
    "DATA DIRECTORY", "INDEX DIRECTORY", "PLACEMENT POLICY",
})
_OPTION_ALIASES = {"CHARACTER SET": "CHARSET", "CHARACTER_SET": "CHARSET", "DEFAULT CHARSET": "CHARSET"}

_NAMED_OPTIONS = (
    (exp.EngineProperty, "ENGINE"),
    (exp.CharacterSetProperty, "CHARSET"),
    (exp.CollateProperty, "COLLATE"),
    (exp.SchemaCommentProperty, "COMMENT"),
    (exp.AutoIncrementProperty, "AUTO_INCREMENT"),
    (exp.RowFormatProperty, "ROW_FORMAT"),
    (exp.LockProperty, "LOCK"),
    (exp.AlgorithmProperty, "ALGORITHM"),
)
# ALTER TABLE options that change how the statement runs, not the table
_EXECUTION_OPTIONS = frozenset({"LOCK", "ALGORITHM"})

_PARTITION_PROPERTIES = (exp.PartitionedByProperty, exp.PartitionByRangeProperty, exp.PartitionByListProperty)
_SET_OPERATORS = ((exp.Union, "UNION"), (exp.Except, "EXCEPT"), (exp.Intersect, "INTERSECT"))
# tokens between a join introducer and the first positioned token of its table factor
_FACTOR_PREFIX = frozenset({TokenType.L_PAREN, TokenType.SELECT, TokenType.DISTINCT})


# ── helpers over sqlglot nodes ───────────────────────────────────────


def _text(e: Optional[exp.Expr]) -> str:
    """Plain value of a name or literal node, generated SQL for anything else."""
    if e is None:
        return ""
    if isinstance(e, str):
        return e
    if isinstance(e, exp.Literal):
        return e.this
    if isinstance(e, (exp.Identifier, exp.Var, exp.Column, exp.Table)):
        return e.name
    return e.sql(dialect=DIALECT)


def _table_name(e: Optional[exp.Expr]) -> n.TableName:
    if isinstance(e, exp.Schema):
        e = e.this
    if isinstance(e, exp.Table):
        return n.TableName(name=e.name, schema=e.db)
    return n.TableName(name=_text(e))


def _column_name(e: exp.Expr) -> n.ColumnName:
    if isinstance(e, exp.Column):
        return n.ColumnName(name=e.name, table=e.table, schema=e.db)
    return n.ColumnName(name=_text(e))


def _sqlglot_error(exc: SqlglotParseError) -> ParseError:
    if not exc.errors:
        return ParseError(str(exc))
    err = exc.errors[0]
    near = ((err.get("highlight") or "") + (err.get("end_context") or "")).split("\n", 1)[0][:40]
    return ParseError(err.get("description") or str(exc), line=err.get("line") or 0,
                      column=err.get("col") or 0, near=near)


def _token_error(sql: str, tok: Token, message: str) -> ParseError:
    return ParseError.at(sql, tok.start, message)


# ── statement conversion ─────────────────────────────────────────────


class Converter:
    """Converts one statement's sqlglot tree into review nodes.

    ``toks`` are the statement's tokens; joins look at them to tell a comma
    join from an explicit ``JOIN`` without a condition, which sqlglot
    represents the same way.
    """

    def __init__(self, sql: str, toks: list[Token], warnings: list[str]) -> None:
        self.sql = sql
        self.toks = toks
        self.warnings = warnings
        self._by_start = {t.start: i for i, t in enumerate(toks)}

    def statement(self, e: exp.Expr) -> n.StmtNode:
        if isinstance(e, (exp.Select, exp.SetOperation, exp.Subquery)):
            return self.query(e)
        if isinstance(e, exp.Insert):
            return self.insert(e)
        if isinstance(e, exp.Update):
            return self.update(e)
        if isinstance(e, exp.Delete):
            return self.delete(e)
        if isinstance(e, exp.Create):
            return self.create(e)
        if isinstance(e, exp.Alter):
            return self.alter(e)
        if isinstance(e, exp.Drop):
            return self.drop(e)
        if isinstance(e, exp.TruncateTable):
            return n.TruncateTableStmt(table=_table_name(e.expressions[0]))
        if isinstance(e, exp.Analyze):
            return self.analyze(e)
        if isinstance(e, exp.Command):
            return self.command(e)
        first = self.toks[0]
        if first.token_type in DIALECT.parser_class.STATEMENT_PARSERS:
            return n.UnsupportedStmt(verb=first.text.upper().split()[0])
        raise _token_error(self.sql, first, "syntax error")

    # ── expressions ──────────────────────────────────────────────────

    def expr(self, e: exp.Expr) -> n.Expr:
        node = n.Expr(text=e.sql(dialect=DIALECT))
        if isinstance(e, exp.Query):
            node.subqueries.append(self.query(e))
        else:
            for q in e.walk(prune=lambda x: isinstance(x, exp.Query)):
                if isinstance(q, exp.Query):
                    node.subqueries.append(self.query(q))
        value = e
        sign = ""
        if isinstance(value, exp.Neg) and isinstance(value.this, exp.Literal):
            value, sign = value.this, "-"
        if isinstance(value, exp.Introducer):
            value = value.expression
        if isinstance(value, exp.Literal):
            node.is_literal, node.literal = True, sign + value.this
        elif isinstance(value, (exp.HexString, exp.BitString)):
            node.is_literal, node.literal = True, value.this
        elif isinstance(value, exp.Null):
            node.is_literal, node.literal = True, None
        elif isinstance(value, exp.Boolean):
            node.is_literal, node.literal = True, "1" if value.this else "0"
        return node

    def _opt_expr(self, e: Optional[exp.Expr]) -> Optional[n.Expr]:
        return self.expr(e) if e is not None else None

    def by_items(self, order: Optional[exp.Order]) -> list[n.ByItem]:
        items = []
        for o in order.expressions if order is not None else []:
            if isinstance(o, exp.Ordered):
                items.append(n.ByItem(expr=self.expr(o.this), desc=bool(o.args.get("desc"))))
            else:
                items.append(n.ByItem(expr=self.expr(o)))
        return items

    def limit(self, limit: Optional[exp.Expr], offset: Optional[exp.Expr] = None) -> Optional[n.Limit]:
        if not isinstance(limit, exp.Limit):
            return None
        node = n.Limit(count=self.expr(limit.expression))
        off = limit.args.get("offset") or (offset.expression if isinstance(offset, exp.Offset) else None)
        if off is not None:
            node.offset = self.expr(off)
        return node

    def assignment(self, eq: exp.Expr) -> n.Assignment:
        if isinstance(eq, (exp.EQ, exp.PropertyEQ)):
            return n.Assignment(column=_column_name(eq.this), expr=self.expr(eq.expression))
        raise ParseError(f"expected assignment, got {eq.sql(dialect=DIALECT)}")

    # ── queries and table references ─────────────────────────────────

    def ctes(self, e: exp.Expr) -> list[n.CommonTableExpr]:
        with_ = e.args.get("with_")
        if with_ is None:
            return []
        return [n.CommonTableExpr(name=cte.alias, query=self.query(cte.this)) for cte in with_.expressions]

    def query(self, e: exp.Expr) -> n.StmtNode:
        while isinstance(e, (exp.Subquery, exp.Paren)):
            e = e.this
        if isinstance(e, exp.SetOperation):
            return self.set_operation(e)
        if not isinstance(e, exp.Select):
            # VALUES / TABLE forms
            return n.SelectStmt()
        stmt = n.SelectStmt(ctes=self.ctes(e), distinct=bool(e.args.get("distinct")))
        stmt.fields = [self.expr(p) for p in e.expressions]
        from_ = e.args.get("from_")
        if from_ is not None:
            stmt.from_ = self.table_refs([from_.this], e.args.get("joins"))
        where = e.args.get("where")
        stmt.where = self.expr(where.this) if where is not None else None
        group = e.args.get("group")
        stmt.group_by = [n.ByItem(expr=self.expr(g)) for g in group.expressions] if group is not None else []
        having = e.args.get("having")
        stmt.having = self.expr(having.this) if having is not None else None
        stmt.order_by = self.by_items(e.args.get("order"))
        stmt.limit = self.limit(e.args.get("limit"), e.args.get("offset"))
        locks = e.args.get("locks") or []
        if locks:
            stmt.lock = "FOR UPDATE" if locks[0].args.get("update") else "FOR SHARE"
        return stmt

    def set_operation(self, e: exp.SetOperation) -> n.SetOprStmt:
        stmt = n.SetOprStmt(ctes=self.ctes(e))
        stmt.order_by = self.by_items(e.args.get("order"))
        stmt.limit = self.limit(e.args.get("limit"), e.args.get("offset"))
        parts: list[exp.Expr] = []
        ops: list[str] = []
        node: exp.Expr = e
        while isinstance(node, exp.SetOperation) and (node is e or not node.args.get("with_")):
            word = next(w for cls, w in _SET_OPERATORS if isinstance(node, cls))
            ops.append(word if node.args.get("distinct") else f"{word} ALL")
            parts.append(node.expression)
            node = node.this
        parts.append(node)
        stmt.selects = [self.query(p) for p in reversed(parts)]
        stmt.operators = list(reversed(ops))
        return stmt

    def table_refs(self, factors: list[exp.Expr], joins: Optional[list] = None) -> Optional[n.Node]:
        """Left-deep join tree over comma-separated *factors* and trailing *joins*."""
        node: Optional[n.Node] = None
        for factor in factors:
            right = self.table_factor(factor)
            node = right if node is None else n.Join(left=node, right=right, tp=",")
            for j in factor.args.get("joins") or []:
                node = self.join(node, j)
        for j in joins or []:
            node = self.join(node, j)
        return node

    def table_factor(self, e: exp.Expr) -> n.TableSource:
        if isinstance(e, exp.Table):
            return n.TableSource(source=n.TableName(name=e.name, schema=e.db), alias=e.alias)
        if isinstance(e, exp.Subquery):
            return n.TableSource(source=self.query(e.this), alias=e.alias)
        return n.TableSource(source=n.TableName(name=e.alias_or_name), alias=e.alias)

    def join(self, left: Optional[n.Node], j: exp.Join) -> n.Join:
        on = j.args.get("on")
        using = [_text(u) for u in j.args.get("using") or []]
        natural = j.method == "NATURAL"
        words = [w for w in (j.side, j.kind) if w]
        explicit = bool(words or natural or on is not None or using) or not self._after_comma(j.this)
        if not explicit:
            tp = ","
        elif j.kind == "STRAIGHT_JOIN":
            tp = "STRAIGHT_JOIN"
        else:
            tp = " ".join(words + ["JOIN"])
        node = n.Join(left=left, right=self.table_factor(j.this), tp=tp, natural=natural, explicit=explicit)
        node.on = self._opt_expr(on)
        node.using = using
        for inner in j.this.args.get("joins") or []:
            node = self.join(node, inner)
        return node

    def _after_comma(self, factor: exp.Expr) -> bool:
        starts = [x.meta["start"] for x in factor.walk() if "start" in x.meta]
        i = self._by_start.get(min(starts)) if starts else None
        if i is None:
            return True
        i -= 1
        while i >= 0 and self.toks[i].token_type in _FACTOR_PREFIX:
            i -= 1
        return i >= 0 and self.toks[i].token_type == TokenType.COMMA

    # ── DML ──────────────────────────────────────────────────────────

    def insert(self, e: exp.Insert) -> n.InsertStmt:
        target = e.this
        stmt = n.InsertStmt(table=_table_name(target), ignore=bool(e.args.get("ignore")))
        if isinstance(target, exp.Schema):
            stmt.columns = [_column_name(c) for c in target.expressions]
        source = e.expression
        if isinstance(source, exp.Values):
            for row in source.expressions:
                values = row.expressions if isinstance(row, exp.Tuple) else [row]
                stmt.lists.append([self.expr(v) for v in values])
        elif source is not None:
            stmt.select = self.query(source)
        conflict = e.args.get("conflict")
        if conflict is not None and conflict.args.get("duplicate"):
            stmt.on_duplicate = [self.assignment(a) for a in conflict.expressions]
        return stmt

    def update(self, e: exp.Update) -> n.UpdateStmt:
        if e.this is None:
            raise _token_error(self.sql, self.toks[0], "expected table reference")
        stmt = n.UpdateStmt(ctes=self.ctes(e), table_refs=self.table_refs([e.this]))
        stmt.assignments = [self.assignment(a) for a in e.expressions]
        self._dml_tail(stmt, e)
        return stmt

    def delete(self, e: exp.Delete) -> n.DeleteStmt:
        stmt = n.DeleteStmt(ctes=self.ctes(e))
        targets = e.args.get("tables")
        using = e.args.get("using")
        if targets:
            stmt.targets = [_table_name(t) for t in targets]
            stmt.multiple = True
            stmt.table_refs = self.table_refs([e.this])
        elif using:
            refs = self.table_refs([e.this])
            stmt.targets = [ts.source for ts in n.table_sources(refs)]
            stmt.multiple = True
            stmt.table_refs = self.table_refs(using)
        elif e.this is not None:
            stmt.table_refs = self.table_refs([e.this])
        else:
            raise _token_error(self.sql, self.toks[0], "expected table reference")
        self._dml_tail(stmt, e)
        return stmt

    def _dml_tail(self, stmt, e: exp.Expr) -> None:
        where = e.args.get("where")
        stmt.where = self.expr(where.this) if where is not None else None
        stmt.order_by = self.by_items(e.args.get("order"))
        stmt.limit = self.limit(e.args.get("limit"))

    # ── CREATE ───────────────────────────────────────────────────────

    def create(self, e: exp.Create) -> n.StmtNode:
        kind = (e.args.get("kind") or "").upper()
        if kind == "TABLE":
            return self.create_table(e)
        if kind == "VIEW":
            target = e.this
            stmt = n.CreateViewStmt(view=_table_name(target), or_replace=bool(e.args.get("replace")))
            if isinstance(target, exp.Schema):
                stmt.cols = [_text(c) for c in target.expressions]
            stmt.select = self.query(e.expression) if e.expression is not None else None
            return stmt
        if kind in ("DATABASE", "SCHEMA"):
            return self.create_database(e)
        if kind == "INDEX":
            return self.create_index(e)
        return n.UnsupportedStmt(verb=f"CREATE {kind}", category="DDL" if kind in _DDL_OBJECTS else "")

    def create_table(self, e: exp.Create) -> n.CreateTableStmt:
        target = e.this
        stmt = n.CreateTableStmt(table=_table_name(target), if_not_exists=bool(e.args.get("exists")))
        elements = target.expressions if isinstance(target, exp.Schema) else []
        for el in elements:
            if isinstance(el, exp.ColumnDef):
                stmt.cols.append(self.column_def(el))
            elif isinstance(el, exp.LikeProperty):
                stmt.refer_table = _table_name(el.this)
            else:
                c = self.constraint(el)
                if c is not None:
                    stmt.constraints.append(c)
        props = e.args.get("properties")
        for prop in props.expressions if props is not None else []:
            if isinstance(prop, exp.TemporaryProperty):
                stmt.temporary = True
            elif isinstance(prop, exp.LikeProperty):
                stmt.refer_table = _table_name(prop.this)
            elif isinstance(prop, _PARTITION_PROPERTIES):
                stmt.partition = n.PartitionOptions(text=prop.sql(dialect=DIALECT))
            else:
                opt = self.table_option(prop)
                if opt is not None:
                    stmt.options.append(opt)
        if isinstance(e.expression, exp.Query):
            stmt.select = self.query(e.expression)
        return stmt

    def create_database(self, e: exp.Create) -> n.CreateDatabaseStmt:
        target = e.this
        name = target.db or target.name if isinstance(target, exp.Table) else _text(target)
        stmt = n.CreateDatabaseStmt(name=name, if_not_exists=bool(e.args.get("exists")))
        props = e.args.get("properties")
        for prop in props.expressions if props is not None else []:
            opt = self.table_option(prop)
            if opt is not None:
                stmt.options.append(n.DatabaseOption(tp=opt.tp, value=opt.value))
        return stmt

    def create_index(self, e: exp.Create) -> n.CreateIndexStmt:
        index = e.this
        stmt = n.CreateIndexStmt(
            index_name=_text(index.this),
            table=_table_name(index.args.get("table")),
            tp=n.CONSTRAINT_UNIQUE if e.args.get("unique") or index.args.get("unique") else n.CONSTRAINT_INDEX,
            if_not_exists=bool(e.args.get("exists")),
        )
        params = index.args.get("params")
        columns = params.args.get("columns") if params is not None else None
        stmt.keys = [self.key_part(p) for p in columns or []]
        return stmt

    # ── column and key definitions ───────────────────────────────────

    def field_type(self, dt: Optional[exp.Expr], column: str) -> n.FieldType:
        if not isinstance(dt, exp.DataType):
            raise ParseError(f"missing column type for {column}")
        name = dt.this.value if isinstance(dt.this, exp.DType) else str(dt.this)
        ft = n.FieldType()
        if name in _UNSIGNED_TYPES:
            name, ft.unsigned = _UNSIGNED_TYPES[name], True
        if name == "BOOLEAN":
            name, ft.length = "TINYINT", 1
        elif name == "SERIAL":
            name, ft.unsigned = "BIGINT", True
        name = _TYPE_ALIASES.get(name, name)
        if name not in _KNOWN_TYPES:
            raise ParseError(f"unknown column type {dt.sql(dialect=DIALECT)}")
        ft.tp = name
        sizes: list[int] = []
        for param in dt.expressions:
            value = param.this if isinstance(param, exp.DataTypeParam) else param
            if isinstance(value, exp.Literal) and value.is_string:
                ft.elems.append(value.this)
            elif isinstance(value, exp.Literal):
                sizes.append(int(value.this))
        if sizes:
            ft.length = sizes[0]
            if len(sizes) > 1:
                ft.decimal = sizes[1]
        return ft

    def column_def(self, col: exp.ColumnDef) -> n.ColumnDef:
        name = _column_name(col.this)
        ft = self.field_type(col.args.get("kind"), name.name)
        node = n.ColumnDef(name=name, tp=ft)
        for cc in col.args.get("constraints") or []:
            kind = cc.args.get("kind") if isinstance(cc, exp.ColumnConstraint) else cc
            opt = self.column_option(kind, ft)
            if opt is not None:
                node.options.append(opt)
        return node

    def column_option(self, kind: exp.Expr, ft: n.FieldType) -> Optional[n.ColumnOption]:
        if isinstance(kind, exp.NotNullColumnConstraint):
            return n.ColumnOption(tp=n.COLUMN_OPTION_NULL if kind.args.get("allow_null") else n.COLUMN_OPTION_NOT_NULL)
        if isinstance(kind, exp.DefaultColumnConstraint):
            return n.ColumnOption(tp=n.COLUMN_OPTION_DEFAULT, expr=self.expr(kind.this))
        if isinstance(kind, (exp.AutoIncrementColumnConstraint, exp.GeneratedAsIdentityColumnConstraint)):
            return n.ColumnOption(tp=n.COLUMN_OPTION_AUTO_INCREMENT)
        if isinstance(kind, exp.PrimaryKeyColumnConstraint):
            return n.ColumnOption(tp=n.COLUMN_OPTION_PRIMARY_KEY)
        if isinstance(kind, exp.UniqueColumnConstraint):
            return n.ColumnOption(tp=n.COLUMN_OPTION_UNIQUE_KEY)
        if isinstance(kind, exp.CommentColumnConstraint):
            return n.ColumnOption(tp=n.COLUMN_OPTION_COMMENT, value=_text(kind.this))
        if isinstance(kind, exp.OnUpdateColumnConstraint):
            return n.ColumnOption(tp=n.COLUMN_OPTION_ON_UPDATE, expr=self.expr(kind.this))
        if isinstance(kind, exp.CollateColumnConstraint):
            return n.ColumnOption(tp=n.COLUMN_OPTION_COLLATE, value=_text(kind.this))
        if isinstance(kind, exp.ComputedColumnConstraint):
            return n.ColumnOption(tp=n.COLUMN_OPTION_GENERATED, expr=self.expr(kind.this))
        if isinstance(kind, exp.CheckColumnConstraint):
            return n.ColumnOption(tp=n.COLUMN_OPTION_CHECK, expr=self.expr(kind.this))
        if isinstance(kind, exp.Reference):
            return n.ColumnOption(tp=n.COLUMN_OPTION_REFERENCES, value=_table_name(kind.this).qualified)
        if isinstance(kind, exp.CharacterSetColumnConstraint):
            ft.charset = _text(kind.this)
        elif isinstance(kind, exp.ZeroFillColumnConstraint):
            ft.zerofill = True
        elif isinstance(kind, exp.BinaryColumnConstraint):
            ft.binary = True
        elif isinstance(kind, exp.InvisibleColumnConstraint):
            return n.ColumnOption(tp=n.COLUMN_OPTION_OTHER, value="INVISIBLE")
        elif kind is not None:
            return n.ColumnOption(tp=n.COLUMN_OPTION_OTHER, value=kind.sql(dialect=DIALECT))
        return None

    def key_part(self, e: exp.Expr) -> n.IndexPartSpec:
        if isinstance(e, exp.Ordered):
            part = self.key_part(e.this)
            part.desc = bool(e.args.get("desc"))
            return part
        if isinstance(e, exp.ColumnPrefix):
            return n.IndexPartSpec(column=_column_name(e.this), length=int(_text(e.expression)))
        if isinstance(e, (exp.Identifier, exp.Column)):
            return n.IndexPartSpec(column=_column_name(e))
        # CREATE INDEX reads ``name(10)`` as a call
        if isinstance(e, exp.Anonymous) and len(e.expressions) == 1 \
                and isinstance(e.expressions[0], exp.Literal) and not e.expressions[0].is_string:
            return n.IndexPartSpec(column=n.ColumnName(name=e.name), length=int(e.expressions[0].this))
        while isinstance(e, exp.Paren):
            e = e.this
        return n.IndexPartSpec(expr=self.expr(e))

    def _key_parts(self, parts) -> list[n.IndexPartSpec]:
        return [self.key_part(p) for p in parts or []]

    def constraint(self, e: exp.Expr) -> Optional[n.Constraint]:
        """Table-level key or constraint; ``None`` for elements with no counterpart."""
        if isinstance(e, exp.Constraint):
            inner = e.expressions[0] if e.expressions else None
            c = self.constraint(inner) if inner is not None else None
            if c is None:
                return None
            c.symbol_given = True
            c.name = c.name or _text(e.this)
            return c
        if isinstance(e, exp.ColumnConstraint):
            return self.constraint(e.args.get("kind"))
        if isinstance(e, (exp.PrimaryKey, exp.PrimaryKeyColumnConstraint)):
            return n.Constraint(tp=n.CONSTRAINT_PRIMARY_KEY, keys=self._key_parts(e.expressions))
        if isinstance(e, exp.UniqueColumnConstraint):
            schema = e.this
            if isinstance(schema, exp.Schema):
                return n.Constraint(tp=n.CONSTRAINT_UNIQUE, name=_text(schema.this),
                                    keys=self._key_parts(schema.expressions))
            return n.Constraint(tp=n.CONSTRAINT_UNIQUE, name=_text(schema))
        if isinstance(e, exp.IndexColumnConstraint):
            tp = {"FULLTEXT": n.CONSTRAINT_FULLTEXT, "SPATIAL": n.CONSTRAINT_SPATIAL}.get(
                (e.args.get("kind") or "").upper(), n.CONSTRAINT_INDEX)
            c = n.Constraint(tp=tp, name=_text(e.this), keys=self._key_parts(e.expressions))
            for opt in e.args.get("options") or []:
                if opt.args.get("comment") is not None:
                    c.comment = _text(opt.args["comment"])
            return c
        if isinstance(e, exp.ForeignKey):
            c = n.Constraint(tp=n.CONSTRAINT_FOREIGN_KEY, keys=self._key_parts(e.expressions))
            ref = e.args.get("reference")
            if ref is not None:
                target = ref.this
                c.refer = n.ReferenceDef(table=_table_name(target))
                if isinstance(target, exp.Schema):
                    c.refer.columns = [_text(x) for x in target.expressions]
            return c
        if isinstance(e, exp.CheckColumnConstraint):
            return n.Constraint(tp=n.CONSTRAINT_CHECK, expr=self.expr(e.this))
        self.warnings.append(f"unrecognized table element {e.sql(dialect=DIALECT)}")
        return None

    def table_option(self, prop: exp.Expr) -> Optional[n.TableOption]:
        for cls, name in _NAMED_OPTIONS:
            if isinstance(prop, cls):
                return n.TableOption(tp=name, value=_text(prop.this))
        if type(prop) is exp.Property:
            raw = _text(prop.this)
            key = _OPTION_ALIASES.get(raw.upper(), raw.upper())
            if key not in _TABLE_OPTIONS:
                self.warnings.append(f"unknown table option {raw}")
            return n.TableOption(tp=key, value=_text(prop.args.get("value")))
        self.warnings.append(f"unknown table option {prop.sql(dialect=DIALECT)}")
        return None

    # ── ALTER / DROP / ANALYZE ───────────────────────────────────────

    def alter(self, e: exp.Alter) -> n.StmtNode:
        kind = (e.args.get("kind") or "").upper()
        if kind != "TABLE":
            return n.UnsupportedStmt(verb=f"ALTER {kind}", category="DDL" if kind in _DDL_OBJECTS else "")
        stmt = n.AlterTableStmt(table=_table_name(e.this))
        for action in e.args.get("actions") or []:
            stmt.specs.extend(self.alter_specs(action))
        options: list[n.TableOption] = []
        for prop in e.args.get("options") or []:
            if isinstance(prop, _PARTITION_PROPERTIES):
                stmt.specs.append(n.AlterTableSpec(tp=n.ALTER_PARTITION, text=prop.sql(dialect=DIALECT)))
                continue
            opt = self.table_option(prop)
            if opt is None:
                continue
            if opt.tp in _EXECUTION_OPTIONS:
                stmt.specs.append(n.AlterTableSpec(tp=n.ALTER_OTHER, text=prop.sql(dialect=DIALECT)))
            else:
                options.append(opt)
        if options:
            stmt.specs.append(n.AlterTableSpec(tp=n.ALTER_OPTION, options=options))
        return stmt

    def alter_specs(self, a: exp.Expr) -> list[n.AlterTableSpec]:
        text = a.sql(dialect=DIALECT)
        if isinstance(a, exp.ColumnDef):
            return [n.AlterTableSpec(tp=n.ALTER_ADD_COLUMNS, new_columns=[self.column_def(a)],
                                     if_exists=bool(a.args.get("exists")), text=text)]
        if isinstance(a, exp.Schema):
            cols = [self.column_def(c) for c in a.expressions if isinstance(c, exp.ColumnDef)]
            return [n.AlterTableSpec(tp=n.ALTER_ADD_COLUMNS, new_columns=cols, text=text)]
        if isinstance(a, exp.AddConstraint):
            specs = []
            for c in a.expressions:
                node = self.constraint(c)
                if node is not None:
                    specs.append(n.AlterTableSpec(tp=n.ALTER_ADD_CONSTRAINT, new_constraint=node, text=text))
            return specs
        if isinstance(a, exp.ModifyColumn):
            old = a.args.get("rename_from")
            return [n.AlterTableSpec(
                tp=n.ALTER_CHANGE_COLUMN if old is not None else n.ALTER_MODIFY_COLUMN,
                new_columns=[self.column_def(a.this)],
                old_column_name=_column_name(old) if old is not None else None,
                text=text,
            )]
        if isinstance(a, exp.DropPrimaryKey):
            return [n.AlterTableSpec(tp=n.ALTER_DROP_PRIMARY_KEY, text=text)]
        if isinstance(a, exp.Drop):
            return self._alter_drop(a, text)
        if isinstance(a, exp.RenameColumn):
            return [n.AlterTableSpec(tp=n.ALTER_RENAME_COLUMN, old_column_name=_column_name(a.this),
                                     new_column_name=_column_name(a.args["to"]), text=text)]
        if isinstance(a, exp.RenameIndex):
            return [n.AlterTableSpec(tp=n.ALTER_RENAME_INDEX, index_name=_text(a.this),
                                     new_index_name=_text(a.args.get("to")), text=text)]
        if isinstance(a, exp.AlterRename):
            return [n.AlterTableSpec(tp=n.ALTER_RENAME_TABLE, new_table=_table_name(a.this), text=text)]
        if isinstance(a, exp.AlterIndex):
            return [n.AlterTableSpec(tp=n.ALTER_ALTER_INDEX, index_name=_text(a.this), text=text)]
        if isinstance(a, exp.AlterColumn):
            return [n.AlterTableSpec(tp=n.ALTER_ALTER_COLUMN, old_column_name=_column_name(a.this), text=text)]
        if isinstance(a, (exp.AddPartition, exp.DropPartition)):
            return [n.AlterTableSpec(tp=n.ALTER_PARTITION, text=text)]
        return [n.AlterTableSpec(tp=n.ALTER_OTHER, text=text)]

    def _alter_drop(self, a: exp.Drop, text: str) -> list[n.AlterTableSpec]:
        kind = " ".join((a.args.get("kind") or "").upper().split())
        exists = bool(a.args.get("exists"))
        targets = a.args.get("tables") or []
        if kind == "COLUMN":
            return [n.AlterTableSpec(tp=n.ALTER_DROP_COLUMN, old_column_name=_column_name(t),
                                     if_exists=exists, text=text) for t in targets]
        tp = {
            "INDEX": n.ALTER_DROP_INDEX,
            "KEY": n.ALTER_DROP_INDEX,
            "FOREIGN KEY": n.ALTER_DROP_FOREIGN_KEY,
            "CHECK": n.ALTER_DROP_CHECK,
            "CONSTRAINT": n.ALTER_DROP_CHECK,
        }.get(kind, n.ALTER_OTHER)
        name = _text(targets[0]) if targets else ""
        return [n.AlterTableSpec(tp=tp, index_name=name, if_exists=exists, text=text)]

    def drop(self, e: exp.Drop) -> n.StmtNode:
        kind = (e.args.get("kind") or "").upper()
        tables = e.args.get("tables") or []
        exists = bool(e.args.get("exists"))
        if kind in ("TABLE", "VIEW"):
            return n.DropTableStmt(tables=[_table_name(t) for t in tables], if_exists=exists,
                                   is_view=kind == "VIEW", temporary=bool(e.args.get("temporary")))
        if kind in ("DATABASE", "SCHEMA"):
            target = tables[0] if tables else None
            name = (target.db or target.name) if isinstance(target, exp.Table) else _text(target)
            return n.DropDatabaseStmt(name=name, if_exists=exists)
        if kind == "INDEX":
            on = e.args.get("cluster")
            table = _table_name(on.this) if on is not None else n.TableName()
            return n.DropIndexStmt(index_name=_text(tables[0]) if tables else "", table=table, if_exists=exists)
        return n.UnsupportedStmt(verb=f"DROP {kind}", category="DDL" if kind in _DDL_OBJECTS else "")

    def analyze(self, e: exp.Analyze) -> n.StmtNode:
        if (e.args.get("kind") or "").upper() != "TABLE":
            return n.UnsupportedStmt(verb="ANALYZE")
        return n.AnalyzeTableStmt(tables=[_table_name(t) for t in e.args.get("tables") or []])

    def command(self, e: exp.Command) -> n.UnsupportedStmt:
        """Statements sqlglot kept as raw text after the verb."""
        verb = _text(e.this).upper()
        rest = (e.args.get("expression") or "").split()
        obj = rest[0].upper() if rest else ""
        if obj in _DDL_OBJECTS:
            self.warnings.append(f"unsupported clause in {verb} {obj}")
        return n.UnsupportedStmt(verb=f"{verb} {obj}".strip(), category="DDL" if obj in _DDL_OBJECTS else "")


# ── token-level forms ────────────────────────────────────────────────


def _name_at(toks: list[Token], i: int) -> tuple[Optional[n.TableName], int]:
    """Parse ``name`` or ``schema.name`` at ``toks[i]``; returns the index after it."""
    if i >= len(toks) or toks[i].token_type in (TokenType.COMMA, TokenType.DOT, TokenType.L_PAREN):
        return None, i
    first = toks[i].text
    if i + 2 < len(toks) and toks[i + 1].token_type == TokenType.DOT:
        return n.TableName(name=toks[i + 2].text, schema=first), i + 3
    return n.TableName(name=first), i + 1


def _rename_table(sql: str, toks: list[Token], end: int) -> n.StmtNode:
    """``RENAME TABLE a TO b [, c TO d]`` from the command's tail tokens."""
    tail = tail_tokens(sql, toks[0], end)
    if not tail or not is_word(tail[0], "TABLE", "TABLES"):
        obj = tail[0].text.upper() if tail else ""
        return n.UnsupportedStmt(verb=f"RENAME {obj}".strip())
    stmt = n.RenameTableStmt()
    i = 1
    while True:
        old, i = _name_at(tail, i)
        if old is None or i >= len(tail) or not is_word(tail[i], "TO"):
            raise _token_error(sql, tail[min(i, len(tail) - 1)], "expected TABLE a TO b")
        new, i = _name_at(tail, i + 1)
        if new is None:
            raise _token_error(sql, tail[-1], "expected table name")
        stmt.pairs.append(n.TableToTable(old=old, new=new))
        if i >= len(tail):
            return stmt
        if tail[i].token_type != TokenType.COMMA:
            raise _token_error(sql, tail[i], "syntax error")
        i += 1


def _alter_table_target(toks: list[Token]) -> tuple[Optional[n.TableName], int]:
    if len(toks) < 3 or not is_word(toks[0], "ALTER") or toks[1].token_type != TokenType.TABLE:
        return None, 0
    return _name_at(toks, 2)


def _tidb_alter(toks: list[Token], warnings: list[str]) -> Optional[n.StmtNode]:
    """TiDB-only ``ALTER TABLE`` clauses, routed to the unrecognized-statement path."""
    table, i = _alter_table_target(toks)
    if table is None or i >= len(toks):
        return None
    clause = toks[i].text.upper()
    tiflash = clause == "SET" and i + 1 < len(toks) and is_word(toks[i + 1], "TIFLASH")
    if clause not in _TIDB_TABLE_CLAUSES and not tiflash:
        return None
    warnings.append(f"unsupported ALTER TABLE clause {'SET TIFLASH' if tiflash else clause}")
    return n.UnsupportedStmt(verb="ALTER TABLE", category="DDL")


def _convert_charset(toks: list[Token]) -> Optional[n.AlterTableStmt]:
    """``ALTER TABLE t CONVERT TO CHARACTER SET x [COLLATE y]``, which sqlglot keeps as raw text."""
    table, i = _alter_table_target(toks)
    if table is None or i + 1 >= len(toks) or not is_word(toks[i], "CONVERT") or not is_word(toks[i + 1], "TO"):
        return None
    words = toks[i + 2:]
    options: list[n.TableOption] = []
    j = 0
    while j < len(words):
        word = " ".join(words[j].text.upper().split())
        if word == "CHARACTER" and j + 1 < len(words) and is_word(words[j + 1], "SET"):
            word, j = "CHARACTER SET", j + 1
        key = _OPTION_ALIASES.get(word, word)
        if key not in ("CHARSET", "COLLATE"):
            return None
        j += 1
        if j < len(words) and words[j].token_type == TokenType.EQ:
            j += 1
        if j >= len(words):
            return None
        options.append(n.TableOption(tp=key, value=words[j].text))
        j += 1
    if not options or options[0].tp != "CHARSET":
        return None
    return n.AlterTableStmt(table=table, specs=[n.AlterTableSpec(tp=n.ALTER_OPTION, options=options)])


# ── batch ────────────────────────────────────────────────────────────


def _chunks(toks: list[Token]):
    """Statement token runs, each with the offset just past its text."""
    run: list[Token] = []
    for tok in toks:
        if tok.token_type == TokenType.SEMICOLON:
            if run:
                yield run, tok.start
            run = []
        else:
            run.append(tok)
    if run:
        yield run, None


def _parse_tokens(sql: str, toks: list[Token]) -> exp.Expr:
    try:
        parsed = DIALECT.parser(error_level=ErrorLevel.IMMEDIATE).parse(toks, sql)
    except SqlglotParseError as exc:
        raise _sqlglot_error(exc) from exc
    if not parsed or parsed[0] is None:
        raise _token_error(sql, toks[0], "syntax error")
    return parsed[0]


def _replace_as_insert(sql: str, toks: list[Token], end: int) -> tuple[str, list[Token]]:
    """``REPLACE ...`` rewritten as ``INSERT ...`` at the same offsets."""
    verb = toks[0]
    text = blank_prefix(sql, verb.start) + "INSERT".ljust(verb.end + 1 - verb.start) + sql[verb.end + 1:end]
    return text, tokens(text)


def _statement(sql: str, toks: list[Token], end: int, warnings: list[str]) -> n.StmtNode:
    first = toks[0]
    verb = first.text.upper().split()[0] if first.token_type != TokenType.STRING else ""
    if is_command(first):
        if verb == "REPLACE":
            text, replaced = _replace_as_insert(sql, toks, end)
            stmt = Converter(text, replaced, warnings).statement(_parse_tokens(text, replaced))
            if not isinstance(stmt, n.InsertStmt):
                raise _token_error(sql, first, "syntax error")
            stmt.is_replace = True
            return stmt
        if verb == "RENAME":
            return _rename_table(sql, toks, end)
        return n.UnsupportedStmt(verb=verb)
    if verb in _OTHER_VERBS:
        return n.UnsupportedStmt(verb=verb)
    special = _tidb_alter(toks, warnings) or _convert_charset(toks)
    if special is not None:
        return special
    return Converter(sql, toks, warnings).statement(_parse_tokens(sql, toks))


def parse(sql: str, charset: str = "", collation: str = "") -> tuple[Audit, list[str]]:
    """Parse a block of SQL into an :class:`Audit` plus non-fatal warnings.

    Raises :class:`ParseError` when any statement fails to parse.
    """
    warnings: list[str] = []
    stmts: list[n.StmtNode] = []
    for toks, stop in _chunks(tokens(sql)):
        end = len(sql) if stop is None else stop
        stmt = _statement(sql, toks, end, warnings)
        if is_command(toks[0]):
            stmt.text = sql[toks[0].start:end].strip()
        else:
            stmt.text = sql[toks[0].start:toks[-1].end + 1].strip()
        stmts.append(stmt)
    if warnings:
        logger.debug("parse warnings: %s", warnings)
    return Audit(query=sql, stmts=tuple(stmts), charset=charset, collation=collation), warnings
