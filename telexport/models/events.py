"""Event payloads emitted by the fetch orchestrator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..core.enums import ChunkStatus
from .chunk import Chunk
from .projection import StorageProjection


@dataclass(frozen=True)
class FailedChunk:
    """A chunk whose last fetch attempt failed."""

    index: int
    chunk: Chunk
    error: str


@dataclass(frozen=True)
class SkippedChunk:
    """A chunk left unfetched because the run stopped early."""

    index: int
    chunk: Chunk
    reason: str


@dataclass(frozen=True)
class ProgressSnapshot:
    """Point-in-time view of a run, emitted around every chunk transition."""

    total_chunks: int
    completed_chunks: int
    chunks: tuple[Chunk, ...]
    total_records: int = 0
    current_chunk: Chunk | None = None
    current_chunk_index: int | None = None
    elapsed_ms: int = 0

    @property
    def percent_complete(self) -> float:
        if self.total_chunks == 0:
            return 0.0
        return self.completed_chunks / self.total_chunks * 100


@dataclass(frozen=True)
class CompletionResult:
    """Final payload of a run that visited every chunk."""

    records: list[Any]
    total_records: int
    chunks: tuple[Chunk, ...]
    failed_chunks: tuple[FailedChunk, ...] = ()
    skipped_chunks: tuple[SkippedChunk, ...] = ()
    elapsed_ms: int = 0
    success: bool = True

    @property
    def completed_chunks(self) -> int:
        return sum(1 for c in self.chunks if c.status is ChunkStatus.COMPLETED)


@dataclass(frozen=True)
class FailureReport:
    """Payload for a run aborted by an unexpected exception."""

    error: str
    chunks: tuple[Chunk, ...]
    failed_chunks: tuple[FailedChunk, ...] = ()
    error_type: str = ""


@dataclass(frozen=True)
class StorageLimitReport:
    """Payload for a run stopped early because of the storage budget.

    The records gathered so far are valid partial results.
    """

    records: list[Any]
    total_records: int
    chunks: tuple[Chunk, ...]
    skipped_chunks: tuple[SkippedChunk, ...]
    failed_chunks: tuple[FailedChunk, ...] = ()
    projection: StorageProjection | None = None
    elapsed_ms: int = 0


@dataclass(frozen=True)
class RetryResult:
    """Outcome of a manual single-chunk retry."""

    index: int
    success: bool
    record_count: int = 0
    error: str | None = None
