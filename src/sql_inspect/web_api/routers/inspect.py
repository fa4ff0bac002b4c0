"""
Inspect Router
==============
Endpoints for reviewing SQL change requests.
"""
import logging

from fastapi import APIRouter, HTTPException

from sql_inspect import api as core_api
from sql_inspect.core.config import InspectParams
from sql_inspect.dao.db import DB
from sql_inspect.parser import ParseError, SQLTypeError
from sql_inspect.parser.classify import check_sql_type
from sql_inspect.web_api.config import settings
from sql_inspect.web_api.schemas.inspect import (
    InspectRequest,
    InspectResponseModel,
    ParamsResponse,
    SQLTypeRequest,
    SQLTypeResponse,
)

_logger = logging.getLogger(__name__)

router = APIRouter()


def _base_params() -> InspectParams:
    if settings.INSPECT_PARAMS_FILE:
        return InspectParams.load(settings.INSPECT_PARAMS_FILE)
    return InspectParams()


@router.post("/sql", response_model=InspectResponseModel)
def inspect_sql(request: InspectRequest):
    """
    Review SQL statements.

    - **content**: One or more SQL statements
    - **sql_type**: Optional ticket type gate (DDL, DML, EXPORT)
    - **instance**: Instance to read metadata from; offline when omitted
    - **params**: Overrides layered on the server's parameter file
    """
    instance_id = request.instance.instance_id if request.instance else ""
    try:
        params = InspectParams.from_dict(request.params, base=_base_params()).normalize(instance_id)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    db = None
    if request.instance is not None:
        db = DB(
            host=request.instance.host,
            port=request.instance.port,
            user=request.instance.user,
            password=request.instance.password,
            database=request.db_schema,
        )

    try:
        resp = core_api.inspect_sql(
            request.content,
            sql_type=request.sql_type,
            db_type=request.db_type,
            params=params,
            db=db,
            timeout=settings.INSPECT_TIMEOUT,
        )
    except OSError as e:
        _logger.exception("review failed")
        raise HTTPException(status_code=500, detail=f"Review failed: {str(e)}")

    return resp.to_dict()


@router.post("/sql-type", response_model=SQLTypeResponse)
def check_type(request: SQLTypeRequest):
    """
    Check that every statement belongs to the requested ticket type.
    """
    try:
        check_sql_type(request.content, request.sql_type)
    except SQLTypeError as e:
        return SQLTypeResponse(code=1, message=str(e))
    except ParseError as e:
        return SQLTypeResponse(code=1, message=f"SQL语法错误: {e}")
    return SQLTypeResponse(code=0)


@router.get("/params/default", response_model=ParamsResponse)
async def default_params():
    """
    Default review parameters, as accepted by **params** on `/inspect/sql`.
    """
    return ParamsResponse(data=core_api.default_params())
