"""
Inspect Schemas
===============
Request and response models for review endpoints.
"""
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List


class InstanceInfo(BaseModel):
    """Connection details of the instance under review"""

    host: str = Field(..., description="Instance host")
    port: int = Field(default=3306)
    user: str = Field(default="")
    password: str = Field(default="")
    instance_id: str = Field(default="", description="Identifier used in parameter warnings")


class InspectRequest(BaseModel):
    """Request to review one or more SQL statements"""

    content: str = Field(..., description="SQL text, one or more statements")
    db_type: str = Field(default="MySQL", description="MySQL, TiDB or ClickHouse")
    sql_type: str = Field(default="", description="Ticket type gate: DDL, DML or EXPORT")
    db_schema: str = Field(default="", alias="schema", description="Default database for unqualified tables")
    instance: Optional[InstanceInfo] = Field(default=None, description="Reviewed offline when omitted")
    params: Dict[str, Any] = Field(default_factory=dict, description="Review parameter overrides")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "content": "ALTER TABLE t1 ADD COLUMN c2 INT NOT NULL DEFAULT 0 COMMENT 'c2';",
                "db_type": "MySQL",
                "sql_type": "DDL",
                "schema": "app",
                "instance": {"host": "127.0.0.1", "port": 3306, "user": "review"},
                "params": {"MAX_INSERT_ROWS": 1000}
            }
        }


class AuditResultModel(BaseModel):
    """Review outcome for a single statement"""

    query: str = Field(default="")
    type: str = Field(default="")
    level: str = Field(..., description="INFO, WARN or ERROR")
    affected_rows: int = Field(default=0)
    messages: List[str] = Field(default_factory=list)
    summary: List[str] = Field(default_factory=list)
    fix_suggestion: str = Field(default="")


class InspectResponseModel(BaseModel):
    """Response from a review request"""

    code: int = Field(..., description="0 processed, 1 rejected (see message)")
    message: str = Field(default="")
    status: int = Field(default=0, description="0 when every statement passed review")
    data: List[AuditResultModel] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "code": 0,
                "message": "",
                "status": 1,
                "data": [
                    {
                        "query": "UPDATE t SET a = 1",
                        "type": "DML",
                        "level": "WARN",
                        "affected_rows": 0,
                        "messages": ["UPDATE语句必须包含WHERE条件"],
                        "summary": ["UPDATE语句必须包含WHERE条件"],
                        "fix_suggestion": ""
                    }
                ]
            }
        }


class SQLTypeRequest(BaseModel):
    """Request to check that every statement matches a ticket type"""

    content: str = Field(..., description="SQL text, one or more statements")
    sql_type: str = Field(..., description="DDL, DML or EXPORT")


class SQLTypeResponse(BaseModel):
    """Result of a ticket type check"""

    code: int = Field(..., description="0 when every statement matches")
    message: str = Field(default="")


class ParamsResponse(BaseModel):
    """Default review parameters"""

    code: int = Field(default=0)
    data: Dict[str, Any] = Field(default_factory=dict)
