"""sql_inspect: rule-based review engine for MySQL and TiDB change requests."""

import logging

__all__ = [
    "__version__",
    "AuditResult",
    "Checker",
    "DB",
    "InspectParams",
    "InspectResponse",
    "ParseError",
    "default_inspect_params",
    "inspect_sql",
    "validate_instance",
]
__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from sql_inspect.api import InspectResponse, inspect_sql, validate_instance  # noqa: E402
from sql_inspect.core.checker import Checker  # noqa: E402
from sql_inspect.core.config import InspectParams, default_inspect_params  # noqa: E402
from sql_inspect.dao.db import DB  # noqa: E402
from sql_inspect.model.audit_result import AuditResult  # noqa: E402
from sql_inspect.parser import ParseError  # noqa: E402
