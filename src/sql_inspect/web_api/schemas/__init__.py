"""
API Schemas
===========
Pydantic models for request/response validation.
"""
from .inspect import (
    AuditResultModel,
    InspectRequest,
    InspectResponseModel,
    InstanceInfo,
    ParamsResponse,
    SQLTypeRequest,
    SQLTypeResponse,
)

__all__ = [
    "AuditResultModel",
    "InspectRequest",
    "InspectResponseModel",
    "InstanceInfo",
    "ParamsResponse",
    "SQLTypeRequest",
    "SQLTypeResponse",
]
