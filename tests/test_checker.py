"""End-to-end engine behavior: ordering, fallbacks, deadlines and the ALTER merge pass."""

from __future__ import annotations

import logging
import re

import pytest

from sql_inspect.core.checker import Checker
from sql_inspect.core.config import InspectParams
from sql_inspect.core.dispatch import UNKNOWN_MESSAGE, Dispatcher
from sql_inspect.core.kv import KVCache
from sql_inspect.core.merge import is_repeat, merge_alters
from sql_inspect.dao.db import DB
from sql_inspect.hint import RuleHint
from sql_inspect.logics.process import DbVersion
from sql_inspect.model import StatementType
from sql_inspect.model.audit_result import PASS_MESSAGE
from sql_inspect.parser import ParseError, parse
from sql_inspect.parser import nodes as n
from sql_inspect.rules import Rule

from conftest import FakeDB

CREATE = (
    "CREATE TABLE t_order (id BIGINT UNSIGNED NOT NULL AUTO_INCREMENT COMMENT 'id', PRIMARY KEY (id))"
    " ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COMMENT='订单'"
)
TWO_ALTERS = (
    "ALTER TABLE t_user ADD COLUMN a INT COMMENT 'a';"
    "ALTER TABLE t_user ADD COLUMN b INT COMMENT 'b'"
)
# messages that need the live instance to be produced
LOOKUP_MESSAGE_RE = re.compile(
    r"^(表或视图`[^`]+`(已存在|不存在)|列`[^`]+`(已存在|不存在)|索引`[^`]*`(引用的列`[^`]+`)?不存在)$"
)


# ── batches ─────────────────────────────────────────────────────────


class TestBatch:
    def test_results_follow_input_order(self, review) -> None:
        results = review(f"{CREATE}; UPDATE t_user SET age = 1; DROP TABLE t1")
        assert [r.type for r in results] == ["CreateTable", "DML", "DropTable"]
        assert [r.query for r in results] == [CREATE, "UPDATE t_user SET age = 1", "DROP TABLE t1"]

    def test_repeated_runs_are_identical(self, review, fake_db: FakeDB) -> None:
        sql = f"{CREATE}; {TWO_ALTERS}; DELETE FROM t_user WHERE id = 1"
        first = [r.to_dict() for r in review(sql, fake_db)]
        second = [r.to_dict() for r in review(sql, fake_db)]
        assert first == second

    def test_parse_error_propagates(self) -> None:
        with pytest.raises(ParseError):
            Checker().check("UPDATE")

    def test_empty_batch(self, review) -> None:
        assert review("-- nothing\n") == []

    def test_offline_matches_live_except_lookups(self, review, fake_db: FakeDB) -> None:
        sql = f"{CREATE}; UPDATE t_user SET age = 1; DROP TABLE t_user; {TWO_ALTERS}"
        live = review(sql, fake_db)
        offline = review(sql)
        assert [r.type for r in live] == [r.type for r in offline]
        assert [r.query for r in live] == [r.query for r in offline]
        assert [r.level for r in live] == [r.level for r in offline]
        for a, b in zip(live, offline):
            differing = (set(a.messages) ^ set(b.messages)) - {PASS_MESSAGE}
            assert all(LOOKUP_MESSAGE_RE.match(m) for m in differing), differing

    def test_tidb_table_clause_is_unknown_not_fatal(self, review) -> None:
        results = review("ALTER TABLE t ADD COLUMN a INT COMMENT 'a'; ALTER TABLE t SET TIFLASH REPLICA 1")
        assert len(results) == 2
        assert results[0].type == "AlterTable"
        assert results[1].query == "ALTER TABLE t SET TIFLASH REPLICA 1"
        assert results[1].messages == (UNKNOWN_MESSAGE,)


class TestServerVariables:
    def test_offline_logs_and_falls_back(self, review, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="sql_inspect.core.checker"):
            (result,) = review(CREATE)
        assert result.messages == (PASS_MESSAGE,)
        assert "failed to read server variables" in caplog.text

    def test_expired_deadline_silences_lookups(self, fake_db: FakeDB) -> None:
        checker = Checker()
        checker.db = fake_db
        (result,) = checker.check("ALTER TABLE t_missing ADD COLUMN a INT COMMENT 'a'", timeout=0)
        assert result.messages == (PASS_MESSAGE,)
        assert fake_db.log == []

    def test_set_db_info(self) -> None:
        checker = Checker()
        checker.set_db_info("db.internal", "4000", "u", "p", "app")
        assert checker.db == DB(host="db.internal", port=4000, user="u", password="p", database="app")


# ── ALTER merge ─────────────────────────────────────────────────────


class TestMergeAlters:
    def test_offline_mysql(self, review) -> None:
        sql = "ALTER TABLE t1 ADD COLUMN a INT COMMENT 'a'; ALTER TABLE t1 ADD COLUMN b INT COMMENT 'b'"
        results = review(sql)
        assert len(results) == 3
        merged = results[-1]
        assert merged.to_dict() == {
            "query": "",
            "type": "",
            "level": "WARN",
            "affected_rows": 0,
            "messages": ["[MySQL数据库]表`t1`的多条ALTER操作，请合并为一条ALTER语句"],
            "summary": ["[MySQL数据库]表`t1`的多条ALTER操作，请合并为一条ALTER语句"],
            "fix_suggestion": "",
        }

    def test_schema_qualified_targets_match(self, review, fake_db: FakeDB) -> None:
        sql = "ALTER TABLE app.t_user ADD COLUMN a INT COMMENT 'a'; ALTER TABLE t_user ADD COLUMN b INT COMMENT 'b'"
        results = review(sql, fake_db)
        assert results[-1].messages == ("[MySQL数据库]表`app.t_user`的多条ALTER操作，请合并为一条ALTER语句",)

    def test_different_tables(self, review) -> None:
        sql = "ALTER TABLE t1 ADD COLUMN a INT COMMENT 'a'; ALTER TABLE t2 ADD COLUMN b INT COMMENT 'b'"
        assert len(review(sql)) == 2

    def test_mysql_toggle(self, review, fake_db: FakeDB) -> None:
        assert len(review(TWO_ALTERS, fake_db, ENABLE_MYSQL_MERGE_ALTER_TABLE=False)) == 2

    def test_tidb_disabled_by_default(self, review) -> None:
        db = FakeDB(version="5.7.25-TiDB-v7.1.0")
        assert len(review(TWO_ALTERS, db)) == 2

    def test_tidb_enabled(self, review) -> None:
        db = FakeDB(version="5.7.25-TiDB-v7.1.0")
        results = review(TWO_ALTERS, db, ENABLE_TIDB_MERGE_ALTER_TABLE=True)
        assert results[-1].messages == ("[TiDB数据库]表`app.t_user`的多条ALTER操作，请合并为一条ALTER语句",)

    def test_rejected_add_constraint_still_counts(self, review) -> None:
        sql = (
            "ALTER TABLE t1 ADD CONSTRAINT fk_a FOREIGN KEY (a) REFERENCES t2 (id);"
            "ALTER TABLE t1 ADD COLUMN b INT COMMENT 'b'"
        )
        assert len(review(sql)) == 3

    def test_without_version_is_skipped(self) -> None:
        assert merge_alters(KVCache("r"), InspectParams(), ["t1", "t1"]) is None

    def test_is_repeat(self) -> None:
        assert is_repeat(["a", "b", "a", "c", "b", "a"]) == ["a", "b"]
        assert is_repeat([]) == []


# ── dispatcher ──────────────────────────────────────────────────────


def _stop(r: RuleHint, stmt: n.StmtNode) -> None:
    r.add("first")
    r.is_skip_next_step = True


def _second(r: RuleHint, stmt: n.StmtNode) -> None:
    r.add("second")


class TestDispatcher:
    def _dispatcher(self, *rules: Rule) -> Dispatcher:
        return Dispatcher(
            db=DB(),
            kv=KVCache("r"),
            params=InspectParams(),
            tables={n.UpdateStmt.kind: (StatementType.DML, lambda: list(rules))},
        )

    def _stmt(self, sql: str) -> n.StmtNode:
        audit, _ = parse(sql)
        return audit.stmts[0]

    def test_skip_next_step_stops_the_table(self) -> None:
        d = self._dispatcher(Rule("stop", _stop), Rule("second", _second))
        data, target = d.dispatch(self._stmt("UPDATE t SET a = 1"), "ABC")
        assert data.summary == ["first"]
        assert data.level == "WARN"
        assert data.finger_id == "ABC"
        assert target == ""

    def test_rules_accumulate(self) -> None:
        d = self._dispatcher(Rule("second", _second), Rule("second", _second))
        data, _ = d.dispatch(self._stmt("UPDATE t SET a = 1"), "ABC")
        assert data.summary == ["second", "second"]

    def test_kind_without_table_is_unknown(self) -> None:
        d = self._dispatcher()
        data, _ = d.dispatch(self._stmt("DELETE FROM t WHERE id = 1"), "ABC")
        assert data.type == ""
        assert data.level == "WARN"

    def test_merge_target_uses_handle_schema(self) -> None:
        d = Dispatcher(db=DB(database="app"), kv=KVCache("r"), params=InspectParams())
        assert d.merge_target(self._stmt("ALTER TABLE t1 ADD COLUMN a INT")) == "app.t1"
        assert d.merge_target(self._stmt("ALTER TABLE s.t1 ADD COLUMN a INT")) == "s.t1"
        assert d.merge_target(self._stmt("DROP TABLE t1")) == ""


class TestDbVersion:
    def test_mysql(self) -> None:
        v = DbVersion("8.0.32-log")
        assert not v.is_tidb()
        assert v.release() == (8, 0, 32)
        assert v.at_least(5, 7, 7)

    def test_tidb(self) -> None:
        v = DbVersion("5.7.25-TiDB-v6.5.0")
        assert v.is_tidb()
        assert v.release() == (6, 5, 0)
        assert v.at_least(6, 2)
        assert not v.at_least(7)

    def test_unknown(self) -> None:
        v = DbVersion("")
        assert v.release() is None
        assert not v.at_least(1)
