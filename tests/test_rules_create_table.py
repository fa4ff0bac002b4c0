"""CREATE TABLE rules, offline and against a fake instance."""

from __future__ import annotations

import pytest

from sql_inspect.model.audit_result import PASS_MESSAGE

from conftest import FakeDB

CLEAN = (
    "CREATE TABLE t_order ("
    "  id BIGINT UNSIGNED NOT NULL AUTO_INCREMENT COMMENT '主键',"
    "  user_id BIGINT UNSIGNED NOT NULL DEFAULT 0 COMMENT '用户',"
    "  amount DECIMAL(10,2) NOT NULL DEFAULT 0 COMMENT '金额',"
    "  PRIMARY KEY (id),"
    "  KEY idx_user_id (user_id)"
    ") ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COMMENT='订单表'"
)


class OldServer(FakeDB):
    """MySQL 5.6 with innodb_large_prefix off."""

    def query(self, sql: str) -> list[dict[str, str]]:
        if sql.startswith("SHOW VARIABLES"):
            return [
                {"Variable_name": "version", "Value": "5.6.40"},
                {"Variable_name": "innodb_large_prefix", "Value": "OFF"},
            ]
        return super().query(sql)


def _table(body: str) -> str:
    return (
        "CREATE TABLE t_order (id BIGINT UNSIGNED NOT NULL AUTO_INCREMENT COMMENT 'id', "
        f"{body}, PRIMARY KEY (id)) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COMMENT='t'"
    )


# ── passing tables ──────────────────────────────────────────────────


class TestClean:
    def test_offline(self, review) -> None:
        (result,) = review(CLEAN)
        assert result.type == "CreateTable"
        assert result.level == "INFO"
        assert result.messages == (PASS_MESSAGE,)
        assert result.summary == ()

    def test_new_table_on_instance(self, review, fake_db: FakeDB) -> None:
        (result,) = review(CLEAN, fake_db)
        assert result.messages == (PASS_MESSAGE,)


# ── table level ─────────────────────────────────────────────────────


class TestTable:
    def test_existing_table_stops_review(self, messages, fake_db: FakeDB) -> None:
        assert messages(CLEAN.replace("t_order", "t_user"), fake_db) == ["表或视图`t_user`已存在"]

    def test_naming(self, messages) -> None:
        assert "表名`TOrder`不符合命名规范，仅允许小写字母、数字和下划线且不能以数字开头" in messages(
            CLEAN.replace("t_order", "TOrder")
        )

    def test_name_length(self, messages) -> None:
        msgs = messages(CLEAN.replace("t_order", "t_order_x"), MAX_TABLE_NAME_LENGTH=8)
        assert msgs == ["表名`t_order_x`长度超出限制，最大允许8个字符"]

    def test_engine_required(self, messages) -> None:
        assert messages(CLEAN.replace("ENGINE=InnoDB ", "")) == [
            "表`t_order`必须指定存储引擎，允许的存储引擎为InnoDB"
        ]

    def test_engine_not_allowed(self, messages) -> None:
        assert messages(CLEAN.replace("ENGINE=InnoDB", "ENGINE=MyISAM")) == [
            "表`t_order`的存储引擎`MyISAM`不被允许，允许的存储引擎为InnoDB"
        ]

    def test_comment_required(self, messages) -> None:
        assert messages(CLEAN.replace(" COMMENT='订单表'", "")) == ["表`t_order`必须要有注释"]

    def test_charset_not_allowed(self, messages) -> None:
        assert messages(CLEAN.replace("CHARSET=utf8mb4", "CHARSET=latin1")) == [
            "表`t_order`的字符集`latin1`不被允许，允许的字符集为utf8mb4"
        ]

    def test_auto_increment_initial_value(self, messages) -> None:
        assert messages(CLEAN.replace("ENGINE=InnoDB", "ENGINE=InnoDB AUTO_INCREMENT=100")) == [
            "表`t_order`的AUTO_INCREMENT初始值必须为1"
        ]

    def test_create_table_like_disabled(self, messages) -> None:
        assert messages("CREATE TABLE t2 LIKE t_user") == ["禁止使用CREATE TABLE LIKE语法"]

    def test_create_table_as_disabled(self, messages) -> None:
        assert messages("CREATE TABLE t2 AS SELECT * FROM t_user") == ["禁止使用CREATE TABLE AS语法"]

    def test_partition_disabled(self, messages) -> None:
        msgs = messages(CLEAN + " PARTITION BY HASH(id) PARTITIONS 4")
        assert msgs == ["表`t_order`禁止使用分区表"]


# ── primary key / constraints ───────────────────────────────────────


class TestPrimaryKey:
    def test_missing(self, messages) -> None:
        sql = "CREATE TABLE t_log (msg VARCHAR(255) COMMENT 'm') ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COMMENT='日志'"
        assert messages(sql) == ["表`t_log`必须定义主键"]

    def test_shape(self, messages) -> None:
        sql = "CREATE TABLE t_log (id INT NOT NULL COMMENT 'id', PRIMARY KEY (id)) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COMMENT='日志'"
        assert messages(sql) == [
            "主键列`id`必须使用BIGINT类型",
            "主键列`id`必须定义为UNSIGNED",
            "主键列`id`必须定义为AUTO_INCREMENT",
        ]

    def test_column_level_primary_key(self, messages) -> None:
        sql = (
            "CREATE TABLE t_log (id BIGINT UNSIGNED AUTO_INCREMENT PRIMARY KEY COMMENT 'id')"
            " ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COMMENT='日志'"
        )
        assert messages(sql) == [PASS_MESSAGE]

    def test_foreign_key(self, messages) -> None:
        sql = _table(
            "user_id BIGINT UNSIGNED COMMENT 'u', KEY idx_user_id (user_id),"
            " CONSTRAINT fk_user FOREIGN KEY (user_id) REFERENCES t_user (id)"
        )
        assert messages(sql) == ["表`t_order`禁止使用外键[fk_user]"]

    def test_foreign_key_allowed(self, messages) -> None:
        sql = _table(
            "user_id BIGINT UNSIGNED COMMENT 'u', KEY idx_user_id (user_id),"
            " CONSTRAINT fk_user FOREIGN KEY (user_id) REFERENCES t_user (id)"
        )
        assert messages(sql, ENABLE_FOREIGN_KEY=True) == [PASS_MESSAGE]


# ── columns ─────────────────────────────────────────────────────────


class TestColumns:
    def test_comment_required(self, messages) -> None:
        assert messages(_table("note VARCHAR(32)")) == ["列`note`必须要有注释"]

    @pytest.mark.parametrize("tp", ["FLOAT", "DOUBLE"])
    def test_float_double(self, messages, tp: str) -> None:
        assert messages(_table(f"price {tp} COMMENT 'p'")) == [f"列`price`的类型为{tp}，请使用DECIMAL类型"]

    def test_float_allowed(self, messages) -> None:
        assert messages(_table("price FLOAT COMMENT 'p'"), CHECK_COLUMN_FLOAT_DOUBLE=False) == [PASS_MESSAGE]

    def test_repeated_definition(self, messages) -> None:
        assert messages(_table("a INT COMMENT 'a', a INT COMMENT 'a'")) == ["列`a`重复定义"]

    def test_not_null_required(self, messages) -> None:
        assert messages(_table("a INT COMMENT 'a'"), ENABLE_COLUMN_NOT_NULL=True) == ["列`a`必须定义为NOT NULL"]

    def test_varchar_length(self, messages) -> None:
        assert messages(_table("a VARCHAR(300) COMMENT 'a'"), MAX_VARCHAR_LENGTH=255) == [
            "列`a`的VARCHAR长度300超过了255，请使用TEXT类型"
        ]

    def test_text_default(self, messages) -> None:
        assert messages(_table("body TEXT DEFAULT 'x' COMMENT 'b'")) == ["列`body`为TEXT类型，不能设置非NULL的默认值"]

    def test_column_charset(self, messages) -> None:
        assert messages(_table("a VARCHAR(8) CHARACTER SET latin1 COMMENT 'a'")) == [
            "列`a`的字符集`latin1`不被允许，允许的字符集为utf8mb4"
        ]

    def test_audit_columns(self, messages) -> None:
        msgs = messages(
            _table("create_time DATETIME COMMENT 'c', update_time INT COMMENT 'u'"),
            CHECK_TABLE_AUDIT_TYPE_COLUMNS=True,
        )
        assert msgs == ["表`t_order`必须包含审计字段`update_time`，且类型为DATETIME或TIMESTAMP"]


# ── indexes ─────────────────────────────────────────────────────────


class TestIndexes:
    def test_secondary_prefix(self, messages) -> None:
        assert messages(_table("a INT COMMENT 'a', KEY a_key (a)")) == ["普通索引`a_key`必须以`idx_`开头"]

    def test_unique_prefix(self, messages) -> None:
        assert messages(_table("a INT COMMENT 'a', UNIQUE KEY a_key (a)")) == ["唯一索引`a_key`必须以`uniq_`开头"]

    def test_column_level_unique_is_exempt(self, messages) -> None:
        assert messages(_table("a INT UNIQUE COMMENT 'a'")) == [PASS_MESSAGE]

    def test_duplicate_name(self, messages) -> None:
        msgs = messages(_table("a INT COMMENT 'a', b INT COMMENT 'b', KEY idx_a (a), KEY idx_a (b)"))
        assert msgs == ["索引名`idx_a`重复定义"]

    def test_redundant(self, messages) -> None:
        msgs = messages(_table("a INT COMMENT 'a', b INT COMMENT 'b', KEY idx_a (a), KEY idx_ab (a, b)"))
        assert msgs == ["索引`idx_a`与索引`idx_ab`存在冗余"]

    def test_redundant_allowed(self, messages) -> None:
        sql = _table("a INT COMMENT 'a', b INT COMMENT 'b', KEY idx_a (a), KEY idx_ab (a, b)")
        assert messages(sql, ENABLE_REDUNDANT_INDEX=True) == [PASS_MESSAGE]

    def test_unknown_column(self, messages) -> None:
        assert messages(_table("a INT COMMENT 'a', KEY idx_b (b)")) == ["索引`idx_b`引用的列`b`不存在"]

    def test_key_length(self, messages) -> None:
        msgs = messages(_table("name VARCHAR(1000) COMMENT 'n', KEY idx_name (name)"))
        assert msgs == ["索引`idx_name`的长度4000字节超过了3072字节的限制"]

    def test_key_length_with_prefix(self, messages) -> None:
        assert messages(_table("name VARCHAR(1000) COMMENT 'n', KEY idx_name (name(100))")) == [PASS_MESSAGE]

    def test_key_length_small_prefix_server(self, messages) -> None:
        msgs = messages(_table("name VARCHAR(200) COMMENT 'n', KEY idx_name (name)"), OldServer())
        assert msgs == ["索引`idx_name`的长度800字节超过了767字节的限制"]

    def test_text_needs_prefix(self, messages) -> None:
        assert messages(_table("body TEXT COMMENT 'b', KEY idx_body (body)")) == [
            "索引`idx_body`的列`body`为TEXT类型，必须指定前缀长度"
        ]

    def test_too_many_columns(self, messages) -> None:
        cols = ", ".join(f"c{i} INT COMMENT 'c'" for i in range(3))
        msgs = messages(_table(f"{cols}, KEY idx_c (c0, c1, c2)"), SECONDARY_INDEX_MAX_KEYS=2)
        assert msgs == ["索引`idx_c`的列数3超过了2"]
