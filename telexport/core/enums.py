"""Core enumerations shared by the planner, orchestrator and event payloads.

Design Decisions:
    - String enums: statuses serialize directly into progress snapshots
    - Values match the labels a progress UI shows per chunk
"""

from enum import Enum


class ChunkStatus(str, Enum):
    """Lifecycle of a single chunk within a run."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"

    @property
    def is_terminal(self) -> bool:
        """True once the chunk needs no further work in the main loop."""
        return self in (ChunkStatus.COMPLETED, ChunkStatus.FAILED, ChunkStatus.SKIPPED)


class RunOutcome(str, Enum):
    """How a call to ``start_fetch`` ended."""

    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ERRORED = "errored"
    STORAGE_LIMITED = "storage_limited"
