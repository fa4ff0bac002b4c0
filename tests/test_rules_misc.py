"""DROP/TRUNCATE, RENAME, ANALYZE, views, databases and unreviewed statements."""

from __future__ import annotations

import pytest

from sql_inspect.core.dispatch import SELECT_MESSAGE, UNKNOWN_MESSAGE
from sql_inspect.model.audit_result import PASS_MESSAGE

from conftest import USER_DDL, FakeDB


class TestDropTruncate:
    def test_drop_table(self, review) -> None:
        (result,) = review("DROP TABLE t1")
        assert result.type == "DropTable"
        assert result.level == "WARN"
        assert result.messages == ("禁止执行DROP TABLE操作[`t1`]",)

    def test_drop_several(self, messages) -> None:
        assert messages("DROP TABLE IF EXISTS t1, t2") == ["禁止执行DROP TABLE操作[`t1`,`t2`]"]

    def test_truncate(self, review) -> None:
        (result,) = review("TRUNCATE TABLE t1")
        assert result.type == "DropTable"
        assert result.messages == ("禁止执行TRUNCATE TABLE操作[`t1`]",)

    def test_drop_view(self, messages) -> None:
        assert messages("DROP VIEW v1") == ["禁止执行DROP VIEW操作[`v1`]"]

    def test_allowed_drop_checks_existence(self, messages, fake_db: FakeDB) -> None:
        assert messages("DROP TABLE t_missing", fake_db, ENABLE_DROP_TABLE=True) == ["表或视图`t_missing`不存在"]
        assert messages("DROP TABLE t_user", fake_db, ENABLE_DROP_TABLE=True) == [PASS_MESSAGE]

    def test_allowed_truncate(self, messages, fake_db: FakeDB) -> None:
        assert messages("TRUNCATE TABLE t_user", fake_db, ENABLE_TRUNCATE_TABLE=True) == [PASS_MESSAGE]

    def test_restricted_table(self, messages) -> None:
        assert messages("DROP TABLE t_user", DISABLE_AUDIT_DDL_TABLES=["t_user"]) == ["表`t_user`禁止提交DDL语句"]


class TestRename:
    def test_disabled(self, review) -> None:
        (result,) = review("RENAME TABLE a TO b")
        assert result.type == "RenameTable"
        assert result.messages == ("禁止使用RENAME TABLE修改表名[`a`→`b`]",)

    def test_allowed(self, messages, fake_db: FakeDB) -> None:
        assert messages("RENAME TABLE t_user TO t_user_bak", fake_db, ENABLE_RENAME_TABLE_NAME=True) == [
            PASS_MESSAGE
        ]

    def test_allowed_checks_both_sides(self, messages, fake_db: FakeDB) -> None:
        msgs = messages("RENAME TABLE t_x TO t_user", fake_db, ENABLE_RENAME_TABLE_NAME=True)
        assert msgs == ["表或视图`t_x`不存在", "表或视图`t_user`已存在"]


class TestAnalyze:
    def test_mysql(self, review) -> None:
        (result,) = review("ANALYZE TABLE t_user")
        assert result.type == "AnalyzeTable"
        assert result.messages == ("仅允许TiDB提交Analyze table语法",)

    def test_tidb(self, messages) -> None:
        db = FakeDB(version="5.7.25-TiDB-v7.1.0")
        assert messages("ANALYZE TABLE t_user", db) == [PASS_MESSAGE]
        assert messages("ANALYZE TABLE t_nope", db) == ["表或视图`t_nope`不存在"]


class TestViews:
    def test_disabled(self, messages) -> None:
        sql = "CREATE VIEW v1 AS SELECT id FROM t_user"
        assert messages(sql, ENABLE_CREATE_VIEW=False) == ["禁止创建视图`v1`"]

    def test_existing(self, messages) -> None:
        db = FakeDB(tables={"t_user": USER_DDL, "v_user": USER_DDL})
        assert messages("CREATE VIEW v_user AS SELECT id FROM t_user", db) == ["表或视图`v_user`已存在"]

    def test_or_replace_skips_existence(self, messages) -> None:
        db = FakeDB(tables={"t_user": USER_DDL, "v_user": USER_DDL})
        assert messages("CREATE OR REPLACE VIEW v_user AS SELECT id FROM t_user", db) == [PASS_MESSAGE]


class TestCreateDatabase:
    def test_charset(self, review) -> None:
        (result,) = review("CREATE DATABASE db1 DEFAULT CHARACTER SET latin1")
        assert result.type == "CreateDatabase"
        assert result.messages == ("数据库`db1`的字符集`latin1`不被允许，允许的字符集为utf8mb4",)

    def test_collation(self, messages) -> None:
        assert messages("CREATE DATABASE db1 DEFAULT CHARSET utf8mb4 COLLATE latin1_swedish_ci") == [
            "数据库`db1`的排序规则`latin1_swedish_ci`不被允许，推荐使用utf8mb4_general_ci"
        ]

    def test_existing(self, messages, fake_db: FakeDB) -> None:
        assert messages("CREATE DATABASE app", fake_db) == ["数据库`app`已存在"]

    def test_new(self, messages, fake_db: FakeDB) -> None:
        assert messages("CREATE DATABASE app2 DEFAULT CHARSET utf8mb4", fake_db) == [PASS_MESSAGE]


class TestUnreviewed:
    @pytest.mark.parametrize("sql", ["SELECT * FROM t_user", "SELECT a FROM t1 UNION SELECT a FROM t2"])
    def test_select(self, review, sql: str) -> None:
        (result,) = review(sql)
        assert result.type == "DML"
        assert result.level == "WARN"
        assert result.messages == (SELECT_MESSAGE,)

    @pytest.mark.parametrize(
        "sql",
        [
            "SHOW TABLES",
            "CREATE INDEX idx_a ON t1 (a)",
            "DROP INDEX idx_a ON t1",
            "DROP DATABASE db1",
            "ALTER USER 'u'@'%' IDENTIFIED BY 'p'",
        ],
    )
    def test_unknown(self, review, sql: str) -> None:
        (result,) = review(sql)
        assert result.type == ""
        assert result.level == "WARN"
        assert result.messages == (UNKNOWN_MESSAGE,)
