"""
Web API Endpoint Tests
======================
Integration tests for the review API endpoints.

Usage:
    pip install -e ".[test]"
    pytest tests/web_api/test_endpoints.py -v
"""
import pytest
from pathlib import Path


# Skip entire module if FastAPI not installed
pytest.importorskip("fastapi")


from fastapi.testclient import TestClient
from sql_inspect.web_api.config import settings
from sql_inspect.web_api.main import app


CLEAN = (
    "CREATE TABLE t_order (id BIGINT UNSIGNED NOT NULL AUTO_INCREMENT COMMENT 'id', PRIMARY KEY (id))"
    " ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COMMENT='订单'"
)


@pytest.fixture
def client():
    """Create test client for FastAPI app."""
    return TestClient(app)


# ============================================================================
# HEALTH ENDPOINTS
# ============================================================================

class TestHealthEndpoint:
    """Tests for GET /health and GET /ready"""

    def test_health_returns_ok_status(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "version" in data

    def test_ready(self, client):
        response = client.get("/ready")
        assert response.status_code == 200
        assert response.json() == {"status": "ready"}

    def test_root_lists_api_name(self, client):
        data = client.get("/").json()
        assert data["name"] == "SQL Inspect API"
        assert data["docs"] == "disabled"


# ============================================================================
# REVIEW ENDPOINT
# ============================================================================

class TestInspectEndpoint:
    """Tests for POST /inspect/sql"""

    def test_clean_statement_passes(self, client):
        response = client.post("/inspect/sql", json={"content": CLEAN})
        assert response.status_code == 200
        data = response.json()
        assert data["code"] == 0
        assert data["status"] == 0
        assert data["data"][0]["type"] == "CreateTable"
        assert data["data"][0]["messages"] == ["审核通过"]

    def test_violation_sets_status(self, client):
        data = client.post("/inspect/sql", json={"content": "DROP TABLE t1"}).json()
        assert data["status"] == 1
        assert data["data"][0]["level"] == "WARN"
        assert data["data"][0]["messages"] == ["禁止执行DROP TABLE操作[`t1`]"]

    def test_params_override(self, client):
        body = {"content": "DROP TABLE t1", "params": {"ENABLE_DROP_TABLE": True}}
        assert client.post("/inspect/sql", json=body).json()["status"] == 0

    def test_bad_params_rejected(self, client):
        body = {"content": CLEAN, "params": {"MAX_AFFECTED_ROWS": "lots"}}
        assert client.post("/inspect/sql", json=body).status_code == 422

    def test_schema_alias_accepted(self, client):
        body = {"content": CLEAN, "schema": "app", "sql_type": "DDL"}
        assert client.post("/inspect/sql", json=body).json()["code"] == 0

    def test_ticket_type_mismatch(self, client):
        body = {"content": "DROP TABLE t1", "sql_type": "DML"}
        data = client.post("/inspect/sql", json=body).json()
        assert data["code"] == 1
        assert data["message"] == "DML模式下，不允许提交DDL语句"
        assert data["data"] == []

    def test_syntax_error(self, client):
        data = client.post("/inspect/sql", json={"content": "UPDATE"}).json()
        assert data["code"] == 1
        assert data["message"].startswith("SQL语法错误: ")
        assert data["data"][0]["type"] == "ERROR"

    def test_server_params_file(self, client, tmp_path: Path, monkeypatch):
        path = tmp_path / "params.yaml"
        path.write_text("ENABLE_DROP_TABLE: true\n", encoding="utf-8")
        monkeypatch.setattr(settings, "INSPECT_PARAMS_FILE", str(path))
        data = client.post("/inspect/sql", json={"content": "DROP TABLE t1"}).json()
        assert data["status"] == 0

    def test_missing_content(self, client):
        assert client.post("/inspect/sql", json={}).status_code == 422


# ============================================================================
# TICKET TYPE ENDPOINT
# ============================================================================

class TestSQLTypeEndpoint:
    """Tests for POST /inspect/sql-type"""

    def test_match(self, client):
        body = {"content": "UPDATE t SET a = 1 WHERE id = 1", "sql_type": "DML"}
        assert client.post("/inspect/sql-type", json=body).json() == {"code": 0, "message": ""}

    def test_mismatch(self, client):
        body = {"content": CLEAN, "sql_type": "DML"}
        data = client.post("/inspect/sql-type", json=body).json()
        assert data["code"] == 1
        assert data["message"] == "DML模式下，不允许提交DDL语句"

    def test_syntax_error(self, client):
        body = {"content": "UPDATE", "sql_type": "DML"}
        data = client.post("/inspect/sql-type", json=body).json()
        assert data["code"] == 1
        assert data["message"].startswith("SQL语法错误: ")


# ============================================================================
# PARAMETERS ENDPOINT
# ============================================================================

def test_default_params(client):
    response = client.get("/inspect/params/default")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["MAX_AFFECTED_ROWS"] == 100
    assert data["ENABLE_TIDB_MERGE_ALTER_TABLE"] is False
