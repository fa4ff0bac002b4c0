"""Process exit codes shared by every CLI command."""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0     # every statement passed review
    VIOLATION = 1   # diagnostics found, or the ticket type was rejected
    ERROR = 2       # bad usage, unreadable input or unparseable SQL

    @classmethod
    def for_review(cls, code: int, status: int, has_results: bool) -> "ExitCode":
        """Map an ``InspectResponse`` to an exit code.

        A rejected request (``code != 0``) carries results only when the SQL
        failed to parse; a ticket-type mismatch carries none.
        """
        if code != 0:
            return cls.ERROR if has_results else cls.VIOLATION
        return cls.VIOLATION if status else cls.SUCCESS
