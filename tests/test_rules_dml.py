"""INSERT / REPLACE / UPDATE / DELETE rules."""

from __future__ import annotations

import pytest

from sql_inspect.model.audit_result import PASS_MESSAGE

from conftest import FakeDB


class TestWhereLimitSubquery:
    @pytest.mark.parametrize(
        "sql,verb",
        [("UPDATE t_user SET age = 1", "UPDATE"), ("DELETE FROM t_user", "DELETE")],
    )
    def test_where_required(self, messages, sql: str, verb: str) -> None:
        assert messages(sql) == [f"{verb}语句必须包含WHERE条件"]

    def test_where_optional(self, messages) -> None:
        assert messages("DELETE FROM t_user", DML_MUST_HAVE_WHERE=False) == [PASS_MESSAGE]

    def test_limit(self, messages) -> None:
        assert messages("UPDATE t_user SET age = 1 WHERE id = 1 LIMIT 1") == ["UPDATE/DELETE语句禁止使用LIMIT子句"]

    def test_order_by(self, messages) -> None:
        assert messages("DELETE FROM t_user WHERE age > 1 ORDER BY id") == ["UPDATE/DELETE语句禁止使用ORDER BY子句"]

    def test_subquery_in_where(self, messages) -> None:
        assert messages("DELETE FROM t_user WHERE id IN (SELECT uid FROM t_order)") == [
            "UPDATE/DELETE语句禁止使用子查询"
        ]

    def test_subquery_in_set(self, messages) -> None:
        assert messages("UPDATE t_user SET age = (SELECT MAX(age) FROM t_order) WHERE id = 1") == [
            "UPDATE/DELETE语句禁止使用子查询"
        ]

    def test_clean_update(self, review) -> None:
        (result,) = review("UPDATE t_user SET age = age + 1 WHERE id = 10")
        assert result.type == "DML"
        assert result.level == "INFO"
        assert result.messages == (PASS_MESSAGE,)


class TestInsert:
    def test_columns_required(self, messages) -> None:
        assert messages("INSERT INTO t_user VALUES (1, 'a', 2)") == ["INSERT语句必须指定列名"]

    def test_set_form_names_columns(self, messages) -> None:
        assert messages("INSERT INTO t_user SET name = 'a', age = 2") == [PASS_MESSAGE]

    def test_replace(self, messages) -> None:
        assert messages("REPLACE INTO t_user (id, age) VALUES (1, 2)") == ["禁止使用REPLACE INTO语法"]

    def test_insert_select(self, messages) -> None:
        assert messages("INSERT INTO t_user (id) SELECT uid FROM t_order") == ["禁止使用INSERT INTO SELECT语法"]

    def test_on_duplicate(self, messages) -> None:
        sql = "INSERT INTO t_user (id, age) VALUES (1, 2) ON DUPLICATE KEY UPDATE age = 3"
        assert messages(sql) == ["禁止使用ON DUPLICATE KEY UPDATE语法"]

    def test_row_count(self, review) -> None:
        (result,) = review("INSERT INTO t_user (age) VALUES (1), (2), (3)", MAX_INSERT_ROWS=2)
        assert result.messages == ("单条INSERT语句的行数3超过了2行，请拆分为多条语句",)
        assert result.affected_rows == 3


class TestJoins:
    def test_join_without_on(self, messages) -> None:
        sql = "UPDATE t_user JOIN t_order SET t_user.age = 1 WHERE t_user.id = t_order.uid"
        assert messages(sql) == ["JOIN语句必须指定ON条件[`t_order`]"]

    def test_join_reports_alias(self, messages) -> None:
        sql = "DELETE a FROM t_user a LEFT JOIN t_order b WHERE a.id = b.uid"
        assert messages(sql) == ["JOIN语句必须指定ON条件[`b`]"]

    def test_join_with_on(self, messages) -> None:
        sql = "UPDATE t_user a JOIN t_order b ON a.id = b.uid SET a.age = 1 WHERE b.id = 3"
        assert messages(sql) == [PASS_MESSAGE]

    def test_comma_join_is_exempt(self, messages) -> None:
        sql = "UPDATE t_user a, t_order b SET a.age = 1 WHERE a.id = b.uid"
        assert messages(sql) == [PASS_MESSAGE]


class TestTables:
    def test_restricted_table(self, messages) -> None:
        msgs = messages("UPDATE t_user SET age = 1", DISABLE_AUDIT_DML_TABLES=["t_user"])
        assert msgs == ["表`t_user`禁止提交DML语句"]

    def test_missing_table(self, messages, fake_db: FakeDB) -> None:
        assert messages("UPDATE t_missing SET a = 1 WHERE id = 1", fake_db) == ["表或视图`t_missing`不存在"]

    def test_cte_names_are_not_tables(self, messages, fake_db: FakeDB) -> None:
        sql = "WITH x AS (SELECT id FROM t_user) UPDATE t_user SET age = 1 WHERE id IN (SELECT id FROM x)"
        assert messages(sql, fake_db) == ["UPDATE/DELETE语句禁止使用子查询"]


class TestAffectedRows:
    def test_explain_estimate_over_limit(self, review) -> None:
        db = FakeDB(explain=({"rows": "500"},))
        (result,) = review("UPDATE t_user SET age = 1 WHERE age > 0", db)
        assert result.messages == ("预计影响行数500超过了100行",)
        assert result.affected_rows == 500
        assert result.level == "WARN"

    def test_explain_estimate_under_limit(self, review) -> None:
        db = FakeDB(explain=({"rows": "7"},))
        (result,) = review("DELETE FROM t_user WHERE age > 90", db)
        assert result.messages == (PASS_MESSAGE,)
        assert result.affected_rows == 7

    def test_explain_max_rule(self, review) -> None:
        db = FakeDB(explain=({"rows": "1"}, {"rows": "300"}))
        (result,) = review("DELETE FROM t_user WHERE age > 90", db, EXPLAIN_RULE="max")
        assert result.affected_rows == 300

    def test_offline_has_no_estimate(self, review) -> None:
        (result,) = review("DELETE FROM t_user WHERE age > 90")
        assert result.affected_rows == 0
