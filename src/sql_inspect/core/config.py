"""Review parameters.

:class:`InspectParams` is the flat bag of toggles and thresholds every rule
reads.  Field names are the upper-case wire names used by stored parameter
JSON and by ``.sql-inspect.yaml`` files, so a loaded mapping can be applied
field-for-field.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = (".sql-inspect.yaml", ".sql-inspect.yml", "sql-inspect.yaml")

DEFAULT_MAX_VARCHAR_LENGTH = 16383
FALLBACK_SUPPORT_CHARSET = [
    {"charset": "utf8", "recommend": "utf8_general_ci"},
    {"charset": "utf8mb4", "recommend": "utf8mb4_general_ci"},
]


@dataclass
class InspectParams:
    """Toggles and thresholds for the rule set."""

    # ── table ───────────────────────────────────────────────────────
    MAX_TABLE_NAME_LENGTH: int = 32
    CHECK_IDENTIFIER: bool = True
    IDENTIFIER_PATTERN: str = r"^[a-z_][a-z0-9_]*$"
    CHECK_TABLE_COMMENT: bool = True
    TABLE_COMMENT_LENGTH: int = 64
    CHECK_TABLE_CHARSET: bool = True
    TABLE_SUPPORT_CHARSET: list = field(default_factory=lambda: [
        {"charset": "utf8mb4", "recommend": "utf8mb4_general_ci"},
    ])
    CHECK_TABLE_ENGINE: bool = True
    TABLE_SUPPORT_ENGINE: list = field(default_factory=lambda: ["InnoDB"])
    ENABLE_PARTITION_TABLE: bool = False
    CHECK_TABLE_PRIMARY_KEY: bool = True
    TABLE_AT_LEAST_ONE_COLUMN: bool = True
    CHECK_TABLE_AUDIT_TYPE_COLUMNS: bool = False
    TABLE_AUDIT_COLUMNS: list = field(default_factory=lambda: ["create_time", "update_time"])
    ENABLE_CREATE_TABLE_AS: bool = False
    ENABLE_CREATE_TABLE_LIKE: bool = False
    ENABLE_CREATE_VIEW: bool = True
    ENABLE_FOREIGN_KEY: bool = False
    CHECK_TABLE_AUTOINCREMENT_INIT_VALUE: bool = True
    DISABLE_AUDIT_DDL_TABLES: list = field(default_factory=list)

    # ── primary key ─────────────────────────────────────────────────
    CHECK_PRIMARYKEY_USE_BIGINT: bool = True
    CHECK_PRIMARYKEY_USE_UNSIGNED: bool = True
    CHECK_PRIMARYKEY_USE_AUTO_INCREMENT: bool = True

    # ── columns ─────────────────────────────────────────────────────
    CHECK_COLUMN_COMMENT: bool = True
    MAX_COLUMN_NAME_LENGTH: int = 64
    MAX_VARCHAR_LENGTH: int = DEFAULT_MAX_VARCHAR_LENGTH
    ENABLE_COLUMN_BLOB_TYPE: bool = True
    ENABLE_COLUMN_JSON_TYPE: bool = True
    ENABLE_COLUMN_BIT_TYPE: bool = True
    ENABLE_COLUMN_TIMESTAMP_TYPE: bool = True
    CHECK_COLUMN_FLOAT_DOUBLE: bool = True
    ENABLE_COLUMN_NOT_NULL: bool = False
    CHECK_COLUMN_DEFAULT_VALUE: bool = False
    ENABLE_COLUMN_TYPE_CHANGE: bool = True
    ENABLE_COLUMN_TYPE_CHANGE_COMPATIBLE: bool = True
    ENABLE_COLUMN_CHANGE_COLUMN_NAME: bool = False

    # ── indexes ─────────────────────────────────────────────────────
    CHECK_UNIQ_INDEX_PREFIX: bool = True
    UNIQ_INDEX_PREFIX: str = "uniq_"
    CHECK_SECONDARY_INDEX_PREFIX: bool = True
    SECONDARY_INDEX_PREFIX: str = "idx_"
    CHECK_FULLTEXT_INDEX_PREFIX: bool = True
    FULLTEXT_INDEX_PREFIX: str = "full_"
    MAX_INDEX_KEYS: int = 12
    SECONDARY_INDEX_MAX_KEYS: int = 8
    ENABLE_INDEX_RENAME: bool = False
    ENABLE_REDUNDANT_INDEX: bool = False

    # ── ALTER / DROP ────────────────────────────────────────────────
    ENABLE_DROP_COLS: bool = False
    ENABLE_DROP_INDEXES: bool = True
    ENABLE_DROP_PRIMARYKEY: bool = False
    ENABLE_DROP_TABLE: bool = False
    ENABLE_TRUNCATE_TABLE: bool = False
    ENABLE_RENAME_TABLE_NAME: bool = False
    ENABLE_MYSQL_MERGE_ALTER_TABLE: bool = True
    ENABLE_TIDB_MERGE_ALTER_TABLE: bool = False

    # ── DML ─────────────────────────────────────────────────────────
    DML_MUST_HAVE_WHERE: bool = True
    DML_DISABLE_LIMIT: bool = True
    DML_DISABLE_ORDERBY: bool = True
    DML_DISABLE_SUBQUERY: bool = True
    CHECK_DML_JOIN_WITH_ON: bool = True
    EXPLAIN_RULE: str = "first"          # first | max
    MAX_AFFECTED_ROWS: int = 100
    MAX_INSERT_ROWS: int = 100
    DISABLE_REPLACE: bool = True
    DISABLE_INSERT_INTO_SELECT: bool = True
    DISABLE_ON_DUPLICATE: bool = True
    DISABLE_AUDIT_DML_TABLES: list = field(default_factory=list)

    # ── construction ────────────────────────────────────────────────

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]], base: Optional["InspectParams"] = None) -> "InspectParams":
        """Overlay *data* on *base* (defaults when omitted).

        Unknown keys are ignored with a warning; values are coerced to the
        type of the field they replace.
        """
        params = copy.deepcopy(base) if base is not None else cls()
        if not data:
            return params
        known = {f.name: f for f in fields(cls)}
        updates: dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                logger.warning("ignoring unknown review parameter %s", key)
                continue
            updates[key] = _coerce(getattr(params, key), value, key)
        return replace(params, **updates)

    @classmethod
    def load(cls, path: Path | str) -> "InspectParams":
        """Load parameters from a YAML mapping file."""
        path = Path(path)
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a mapping of review parameters")
        return cls.from_dict(data)

    @classmethod
    def discover(cls, root: Path | str) -> "InspectParams":
        """Load the first config file found in *root*, else defaults."""
        root = Path(root)
        for name in CONFIG_FILENAMES:
            candidate = root / name
            if candidate.is_file():
                return cls.load(candidate)
        return cls()

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    # ── validation ──────────────────────────────────────────────────

    def normalize(self, instance_id: str = "") -> "InspectParams":
        """Repair values that would disable checks by accident.

        A zero ``MAX_VARCHAR_LENGTH`` or an empty ``TABLE_SUPPORT_CHARSET``
        (typically from partially stored parameters) fall back to defaults.
        """
        if self.MAX_VARCHAR_LENGTH == 0:
            logger.warning(
                "MAX_VARCHAR_LENGTH is 0, using default %d (instance_id=%s)",
                DEFAULT_MAX_VARCHAR_LENGTH, instance_id,
            )
            self.MAX_VARCHAR_LENGTH = DEFAULT_MAX_VARCHAR_LENGTH
        if not self.TABLE_SUPPORT_CHARSET:
            logger.warning("TABLE_SUPPORT_CHARSET is empty, using defaults (instance_id=%s)", instance_id)
            self.TABLE_SUPPORT_CHARSET = copy.deepcopy(FALLBACK_SUPPORT_CHARSET)
        return self

    # ── helpers used by rule logics ─────────────────────────────────

    @property
    def supported_charsets(self) -> list[str]:
        return [str(item.get("charset", "")).lower() for item in self.TABLE_SUPPORT_CHARSET]

    def recommended_collation(self, charset: str) -> str:
        for item in self.TABLE_SUPPORT_CHARSET:
            if str(item.get("charset", "")).lower() == charset.lower():
                return str(item.get("recommend", ""))
        return ""


def _coerce(current: Any, value: Any, key: str) -> Any:
    if isinstance(current, bool):
        if isinstance(value, str):
            return value.strip().lower() in ("true", "1", "yes", "on")
        return bool(value)
    if isinstance(current, int):
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"review parameter {key} expects an integer, got {value!r}") from exc
    if isinstance(current, list):
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError(f"review parameter {key} expects a list, got {value!r}")
        return value
    if isinstance(current, str):
        return "" if value is None else str(value)
    return value


def default_inspect_params() -> InspectParams:
    """Fresh default parameters."""
    return InspectParams()
