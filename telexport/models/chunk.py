"""Chunk data model."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date

from ..core.enums import ChunkStatus


@dataclass(frozen=True)
class Chunk:
    """One date-bounded unit of fetch work.

    Both bounds are inclusive days. Status changes produce a new ``Chunk``
    via ``with_status``; the date bounds never change after planning.
    """

    start: date
    end: date
    status: ChunkStatus = ChunkStatus.PENDING
    record_count: int = 0
    error: str | None = None

    @property
    def days(self) -> int:
        """Number of calendar days covered, bounds included."""
        return (self.end - self.start).days + 1

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def with_status(
        self,
        status: ChunkStatus,
        *,
        record_count: int | None = None,
        error: str | None = None,
    ) -> Chunk:
        """Return a copy in ``status``; ``error`` is replaced, not merged."""
        return replace(
            self,
            status=status,
            record_count=self.record_count if record_count is None else record_count,
            error=error,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "status": self.status.value,
            "record_count": self.record_count,
            "error": self.error,
        }
