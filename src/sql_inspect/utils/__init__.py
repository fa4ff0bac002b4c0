"""Shared utilities for sql_inspect."""

from sql_inspect.utils.json_norm import stable_json_dump, stable_json_dumps

__all__ = ["stable_json_dump", "stable_json_dumps"]
