"""Run state for the fetch orchestrator and its transition functions.

The orchestrator drives a single ``RunState`` through a run. Every chunk
status change goes through one of the transition functions below, which
replace the affected ``Chunk`` and keep the failed/skipped ledgers in step,
so the state machine can be exercised without timers or a data source.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from ..core.enums import ChunkStatus
from ..core.exceptions import InvalidTransitionError
from ..models import Chunk, FailedChunk, SkippedChunk

STORAGE_LIMIT_REASON = "Storage limit reached"


_ALLOWED: dict[ChunkStatus, frozenset[ChunkStatus]] = {
    ChunkStatus.PENDING: frozenset({ChunkStatus.IN_PROGRESS, ChunkStatus.SKIPPED}),
    # Retry may re-drive failed and completed chunks
    ChunkStatus.FAILED: frozenset({ChunkStatus.IN_PROGRESS}),
    ChunkStatus.COMPLETED: frozenset({ChunkStatus.IN_PROGRESS}),
    # Back to pending when a cancelled run drops the in-flight result
    ChunkStatus.IN_PROGRESS: frozenset(
        {ChunkStatus.COMPLETED, ChunkStatus.FAILED, ChunkStatus.PENDING}
    ),
    ChunkStatus.SKIPPED: frozenset({ChunkStatus.IN_PROGRESS}),
}


@dataclass
class RunState:
    """Mutable state of one orchestrator run."""

    chunks: list[Chunk] = field(default_factory=list)
    records: list[Any] = field(default_factory=list)
    failed_chunks: list[FailedChunk] = field(default_factory=list)
    skipped_chunks: list[SkippedChunk] = field(default_factory=list)
    is_paused: bool = False
    is_cancelled: bool = False
    is_storage_limit_reached: bool = False
    started_at: datetime | None = None
    started_clock: float | None = None
    current_chunk_index: int | None = None

    @property
    def total_chunks(self) -> int:
        return len(self.chunks)

    @property
    def completed_count(self) -> int:
        return sum(1 for c in self.chunks if c.status is ChunkStatus.COMPLETED)

    @property
    def total_records(self) -> int:
        return len(self.records)

    def chunk_tuple(self) -> tuple[Chunk, ...]:
        return tuple(self.chunks)

    def snapshot_dict(self) -> dict[str, Any]:
        """Statuses and counts only; record payloads are left out."""
        return {
            "chunks": [c.to_dict() for c in self.chunks],
            "completed_chunks": self.completed_count,
            "failed_chunks": [
                {"index": f.index, "error": f.error} for f in self.failed_chunks
            ],
            "skipped_chunks": [s.index for s in self.skipped_chunks],
            "total_records": self.total_records,
            "started_at": self.started_at.isoformat() if self.started_at else None,
        }


def new_run(chunks: list[Chunk], started_clock: float | None = None) -> RunState:
    """Fresh state for a run over ``chunks``."""
    return RunState(
        chunks=list(chunks),
        started_at=datetime.now(UTC),
        started_clock=started_clock,
    )


def _move(state: RunState, index: int, status: ChunkStatus, **changes: Any) -> Chunk:
    current = state.chunks[index]
    if status not in _ALLOWED[current.status]:
        raise InvalidTransitionError(
            f"Chunk {index} cannot move from {current.status.value} to {status.value}"
        )
    updated = current.with_status(status, **changes)
    state.chunks[index] = updated
    return updated


def start_chunk(state: RunState, index: int) -> RunState:
    """Mark a chunk in progress and clear its previous error."""
    _move(state, index, ChunkStatus.IN_PROGRESS)
    state.current_chunk_index = index
    return state


def complete_chunk(state: RunState, index: int, records: list[Any]) -> RunState:
    """Mark a chunk completed and append its records to the accumulator."""
    _move(state, index, ChunkStatus.COMPLETED, record_count=len(records))
    state.records.extend(records)
    state.failed_chunks = [f for f in state.failed_chunks if f.index != index]
    state.skipped_chunks = [s for s in state.skipped_chunks if s.index != index]
    return state


def fail_chunk(state: RunState, index: int, error: str) -> RunState:
    """Mark a chunk failed; a chunk appears at most once in ``failed_chunks``."""
    chunk = _move(state, index, ChunkStatus.FAILED, error=error)
    entry = FailedChunk(index=index, chunk=chunk, error=error)
    for pos, existing in enumerate(state.failed_chunks):
        if existing.index == index:
            state.failed_chunks[pos] = entry
            break
    else:
        state.failed_chunks.append(entry)
    return state


def skip_remaining(
    state: RunState, after_index: int, reason: str = STORAGE_LIMIT_REASON
) -> RunState:
    """Mark every pending chunk after ``after_index`` skipped."""
    for index in range(after_index + 1, len(state.chunks)):
        if state.chunks[index].status is not ChunkStatus.PENDING:
            continue
        chunk = _move(state, index, ChunkStatus.SKIPPED, error=reason)
        state.skipped_chunks.append(SkippedChunk(index=index, chunk=chunk, reason=reason))
    return state


def reach_storage_limit(state: RunState, after_index: int) -> RunState:
    state.is_storage_limit_reached = True
    return skip_remaining(state, after_index, STORAGE_LIMIT_REASON)


def reset_chunk(state: RunState, index: int) -> RunState:
    """Return an in-progress chunk to pending without recording a result."""
    _move(state, index, ChunkStatus.PENDING)
    if state.current_chunk_index == index:
        state.current_chunk_index = None
    return state
