"""Server version parsing for dialect-gated rules."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

_TIDB_RELEASE = re.compile(r"tidb-v?(\d+)\.(\d+)(?:\.(\d+))?", re.IGNORECASE)
_MYSQL_RELEASE = re.compile(r"^(\d+)\.(\d+)(?:\.(\d+))?")


def _triple(m: "re.Match[str]") -> tuple[int, int, int]:
    return int(m.group(1)), int(m.group(2)), int(m.group(3) or 0)


@dataclass(frozen=True)
class DbVersion:
    """Wraps the ``version`` server variable, e.g. ``8.0.32`` or
    ``5.7.25-TiDB-v6.5.0``."""

    version: str = ""

    def is_tidb(self) -> bool:
        return "tidb" in self.version.lower()

    def release(self) -> Optional[tuple[int, int, int]]:
        """Product release: the TiDB release under TiDB, else the MySQL one."""
        if self.is_tidb():
            m = _TIDB_RELEASE.search(self.version)
        else:
            m = _MYSQL_RELEASE.match(self.version.strip())
        return _triple(m) if m else None

    def at_least(self, *release: int) -> bool:
        """True when the release is known and not older than *release*."""
        current = self.release()
        if current is None:
            return False
        want = tuple(release) + (0,) * (3 - len(release))
        return current >= want
