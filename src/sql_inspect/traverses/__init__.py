"""AST visitors that each extract one narrow fact from a statement.

Traversers only read the tree; they never touch the database or the
request cache.
"""

from sql_inspect.traverses.alter_table import (
    TraverseAlterTableAddColsOptions,
    TraverseAlterTableAddConstraint,
    TraverseAlterTableAddIndexes,
    TraverseAlterTableChangeCols,
    TraverseAlterTableDropCols,
    TraverseAlterTableDropIndex,
    TraverseAlterTableDropPrimaryKey,
    TraverseAlterTableIsExist,
    TraverseAlterTableModifyColsOptions,
    TraverseAlterTableOptions,
    TraverseAlterTableRename,
    TraverseAlterTableSpecs,
)
from sql_inspect.traverses.create_table import (
    IndexInfo,
    TraverseCreateTableAs,
    TraverseCreateTableAuditCols,
    TraverseCreateTableColsOptions,
    TraverseCreateTableColsRepeatDefine,
    TraverseCreateTableConstraint,
    TraverseCreateTableIndexes,
    TraverseCreateTableIsExist,
    TraverseCreateTableLike,
    TraverseCreateTableOptions,
    TraverseCreateTablePrimaryKey,
)
from sql_inspect.traverses.dml import (
    TraverseDMLExplain,
    TraverseDMLInsert,
    TraverseDMLJoin,
    TraverseDMLLimitOrderBy,
    TraverseDMLSubquery,
    TraverseDMLTables,
    TraverseDMLWhere,
)
from sql_inspect.traverses.misc import (
    TraverseAnalyzeTable,
    TraverseCreateDatabaseIsExist,
    TraverseCreateDatabaseOptions,
    TraverseCreateViewIsExist,
    TraverseDDLTables,
    TraverseDropTable,
    TraverseRenameTable,
)

__all__ = [
    "IndexInfo",
    "TraverseAlterTableAddColsOptions",
    "TraverseAlterTableAddConstraint",
    "TraverseAlterTableAddIndexes",
    "TraverseAlterTableChangeCols",
    "TraverseAlterTableDropCols",
    "TraverseAlterTableDropIndex",
    "TraverseAlterTableDropPrimaryKey",
    "TraverseAlterTableIsExist",
    "TraverseAlterTableModifyColsOptions",
    "TraverseAlterTableOptions",
    "TraverseAlterTableRename",
    "TraverseAlterTableSpecs",
    "TraverseAnalyzeTable",
    "TraverseCreateDatabaseIsExist",
    "TraverseCreateDatabaseOptions",
    "TraverseCreateTableAs",
    "TraverseCreateTableAuditCols",
    "TraverseCreateTableColsOptions",
    "TraverseCreateTableColsRepeatDefine",
    "TraverseCreateTableConstraint",
    "TraverseCreateTableIndexes",
    "TraverseCreateTableIsExist",
    "TraverseCreateTableLike",
    "TraverseCreateTableOptions",
    "TraverseCreateTablePrimaryKey",
    "TraverseCreateViewIsExist",
    "TraverseDDLTables",
    "TraverseDMLExplain",
    "TraverseDMLInsert",
    "TraverseDMLJoin",
    "TraverseDMLLimitOrderBy",
    "TraverseDMLSubquery",
    "TraverseDMLTables",
    "TraverseDMLWhere",
    "TraverseDropTable",
    "TraverseRenameTable",
]
