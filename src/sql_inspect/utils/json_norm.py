"""Canonical JSON text for CLI and API output.

Keys are sorted, review messages stay readable (no ``\\uXXXX`` escapes) and
the text always ends with a newline, so two runs over the same batch produce
byte-identical output.
"""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import PurePath
from typing import IO, Any, Mapping

_SCALARS = (str, int, float, bool, type(None))


def _to_builtin(obj: Any) -> Any:
    """Reduce *obj* to dicts, lists and scalars."""
    if isinstance(obj, Enum):
        obj = obj.value
    if isinstance(obj, _SCALARS):
        return obj
    if isinstance(obj, PurePath):
        return obj.as_posix()
    # results and responses know their own wire shape
    if callable(getattr(obj, "to_dict", None)):
        return _to_builtin(obj.to_dict())
    if is_dataclass(obj) and not isinstance(obj, type):
        return _to_builtin(asdict(obj))
    if isinstance(obj, Mapping):
        return {str(k): _to_builtin(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [_to_builtin(v) for v in obj]
    return str(obj)


def stable_json_dumps(obj: Any, *, indent: int | None = 2) -> str:
    text = json.dumps(_to_builtin(obj), indent=indent, sort_keys=True, ensure_ascii=False)
    return text + "\n"


def stable_json_dump(obj: Any, fp: IO[str], *, indent: int | None = 2) -> None:
    fp.write(stable_json_dumps(obj, indent=indent))
