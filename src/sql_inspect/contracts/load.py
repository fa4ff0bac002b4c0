"""Schemas shipped with the package and the validators built from them.

Usage::

    from sql_inspect.contracts.load import validate_instance

    validate_instance([r.to_dict() for r in results], "audit_result.schema.json")
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import jsonschema

SCHEMA_PACKAGE = "sql_inspect"
SCHEMA_DIR = "data/schemas"


def load_schema(name: str) -> dict[str, Any]:
    """Read the bundled schema *name* (``FileNotFoundError`` if absent)."""
    ref = resources.files(SCHEMA_PACKAGE) / SCHEMA_DIR / name
    if not ref.is_file():
        raise FileNotFoundError(f"no bundled schema {name!r} in {SCHEMA_DIR}")
    return json.loads(ref.read_text(encoding="utf-8"))


@lru_cache(maxsize=None)
def _validator(name: str) -> jsonschema.protocols.Validator:
    schema = load_schema(name)
    cls = jsonschema.validators.validator_for(schema)
    cls.check_schema(schema)
    return cls(schema)


def validate_instance(instance: Any, schema_name: str) -> None:
    """Validate *instance* against the named schema.

    Raises the most relevant ``jsonschema.ValidationError`` on failure.
    """
    error = jsonschema.exceptions.best_match(_validator(schema_name).iter_errors(instance))
    if error is not None:
        raise error


def validate_file(instance_path: Path, schema_name: str) -> None:
    """Validate the JSON document at *instance_path*."""
    instance = json.loads(Path(instance_path).read_text(encoding="utf-8"))
    validate_instance(instance, schema_name)
