"""Per-request metadata cache.

One :class:`KVCache` lives for exactly one review request.  It holds server
variables (``dbVersion``, ``dbCharset``, ``largePrefix``,
``innodbDefaultRowFormat``), parsed ``SHOW CREATE TABLE`` results keyed by
bare table name, and ``True`` markers keyed by statement fingerprint IDs.

Use :func:`request_cache` so the cache is cleared on every exit path.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator


class KVCache:
    """String-keyed store owned by a single request; no locking."""

    __slots__ = ("request_id", "_data")

    def __init__(self, request_id: str) -> None:
        self.request_id = request_id
        self._data: dict[str, Any] = {}

    def put(self, key: str, value: Any) -> None:
        self._data[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"KVCache({self.request_id!r}, keys={len(self._data)})"


@contextmanager
def request_cache(request_id: str) -> Iterator[KVCache]:
    """Yield a fresh cache for *request_id* and clear it when the block exits."""
    cache = KVCache(request_id)
    try:
        yield cache
    finally:
        cache.clear()
