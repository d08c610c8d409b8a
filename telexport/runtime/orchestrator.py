"""Sequential, week-chunked fetch orchestrator.

Drives a paginated data source across a date range one chunk at a time:

- plans 7-day chunks and walks them strictly in order
- isolates failures per chunk; failed chunks can be retried individually
- pause/resume/cancel are cooperative and take effect between chunks
- after every completed chunk a storage projection decides whether the run
  can finish inside the session budget; if not, the rest is skipped
- progress, completion, error and storage-limit events go to registered
  handlers (sync functions or coroutine functions)

Notes:
- Only one chunk and one page request are in flight at a time. A hung HTTP
  call blocks the run until the HTTP layer's own timeout fires.
- Retrying a chunk while ``start_fetch`` is running is not guarded against.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from datetime import date, datetime
from time import perf_counter
from typing import Any

from ..core.base import PagedSource
from ..core.enums import RunOutcome
from ..core.exceptions import InvalidChunkIndexError
from ..models import (
    Chunk,
    CompletionResult,
    Credentials,
    FailedChunk,
    FailureReport,
    ProgressSnapshot,
    RetryResult,
    SkippedChunk,
    StorageLimitReport,
)
from ..storage import SessionCache
from ..utils.formatting import format_elapsed_time
from .chunking import ChunkFetcher, ChunkPlanner, FetchPolicy, StoragePredictor
from .chunking.telemetry import (
    log_chunk_completed,
    log_chunk_error,
    log_chunk_started,
    log_run_cancelled,
    log_run_complete,
    log_storage_limit,
)
from .state import (
    RunState,
    complete_chunk,
    fail_chunk,
    new_run,
    reach_storage_limit,
    reset_chunk,
    start_chunk,
)

logger = logging.getLogger(__name__)

PROGRESS_CACHE_KEY = "chunk_fetch_progress"

Handler = Callable[[Any], Awaitable[None]] | Callable[[Any], None]


class FetchOrchestrator:
    """Runs chunked fetches and reports on them through four handlers."""

    def __init__(
        self,
        source: PagedSource,
        *,
        policy: FetchPolicy | None = None,
        predictor: StoragePredictor | None = None,
        cache: SessionCache | None = None,
        clock: Callable[[], float] = perf_counter,
    ) -> None:
        """Initialize orchestrator.

        Args:
            source: Paginated data source queried for every chunk
            policy: Pacing and sizing policy (default: FetchPolicy())
            predictor: Storage predictor (default: probes ``cache``)
            cache: Session cache for the progress snapshot
            clock: Monotonic clock in seconds, used for elapsed time
        """
        self._policy = policy or FetchPolicy()
        self._cache = cache if cache is not None else SessionCache()
        self._predictor = predictor or StoragePredictor(cache=self._cache)
        self._clock = clock
        self._planner = ChunkPlanner(self._policy.window_days)
        self._fetcher = ChunkFetcher(
            source,
            page_delay=self._policy.page_delay,
            max_pages=self._policy.max_pages,
            wait=self._sleep,
        )

        self._state = RunState()
        self._running = False
        # Identifies the latest start_fetch call; an abandoned run must not
        # clear the running flag of its successor
        self._run_id = 0

        # Set while not paused; cancel() also sets it to wake a paused run
        self._resume = asyncio.Event()
        self._resume.set()
        # Wakes any inter-chunk or inter-page delay
        self._cancel = asyncio.Event()

        self._on_progress: Handler | None = None
        self._on_complete: Handler | None = None
        self._on_error: Handler | None = None
        self._on_storage_limit: Handler | None = None

    # ----------------------
    # Handler registration
    # ----------------------
    def on_progress(self, handler: Handler | None) -> None:
        self._on_progress = handler

    def on_complete(self, handler: Handler | None) -> None:
        self._on_complete = handler

    def on_error(self, handler: Handler | None) -> None:
        self._on_error = handler

    def on_storage_limit(self, handler: Handler | None) -> None:
        self._on_storage_limit = handler

    # ----------------------
    # Read-only state
    # ----------------------
    @property
    def state(self) -> RunState:
        return self._state

    @property
    def policy(self) -> FetchPolicy:
        return self._policy

    @property
    def predictor(self) -> StoragePredictor:
        return self._predictor

    @property
    def chunks(self) -> list[Chunk]:
        return list(self._state.chunks)

    @property
    def records(self) -> list[Any]:
        return self._state.records

    @property
    def failed_chunks(self) -> list[FailedChunk]:
        return list(self._state.failed_chunks)

    @property
    def skipped_chunks(self) -> list[SkippedChunk]:
        return list(self._state.skipped_chunks)

    @property
    def completed_count(self) -> int:
        return self._state.completed_count

    @property
    def is_paused(self) -> bool:
        return self._state.is_paused

    @property
    def is_cancelled(self) -> bool:
        return self._state.is_cancelled

    @property
    def is_storage_limit_reached(self) -> bool:
        return self._state.is_storage_limit_reached

    @property
    def is_running(self) -> bool:
        return self._running

    # ----------------------
    # Lifecycle
    # ----------------------
    async def start_fetch(
        self,
        credentials: Credentials,
        start_date: date | datetime,
        end_date: date | datetime,
    ) -> RunOutcome:
        """Fetch every chunk of ``[start_date, end_date]``.

        The caller validates ``start_date <= end_date``. Exactly one of the
        complete, error or storage-limit handlers fires per run unless the
        run is cancelled, in which case none does.

        Returns:
            How the run ended
        """
        self.reset()
        state = self._state
        self._run_id += 1
        run_id = self._run_id
        self._running = True
        try:
            chunks = self._planner.plan(start_date, end_date)
            state = self._state = new_run(chunks, started_clock=self._clock())
            await self._emit_progress(state)
            outcome = await self._process_chunks(state, credentials)
        except Exception as e:
            logger.exception("run_failed")
            await self._emit(
                self._on_error,
                FailureReport(
                    error=str(e) or type(e).__name__,
                    chunks=state.chunk_tuple(),
                    failed_chunks=tuple(state.failed_chunks),
                    error_type=type(e).__name__,
                ),
            )
            outcome = RunOutcome.ERRORED
        finally:
            if self._run_id == run_id:
                self._running = False

        if outcome is RunOutcome.COMPLETED:
            await self._emit(
                self._on_complete,
                CompletionResult(
                    records=state.records,
                    total_records=state.total_records,
                    chunks=state.chunk_tuple(),
                    failed_chunks=tuple(state.failed_chunks),
                    skipped_chunks=tuple(state.skipped_chunks),
                    elapsed_ms=self._elapsed_ms(state),
                ),
            )

        log_run_complete(
            outcome=outcome.value,
            completed_chunks=state.completed_count,
            failed_chunks=len(state.failed_chunks),
            total_records=state.total_records,
            elapsed_ms=self._elapsed_ms(state),
        )
        return outcome

    async def _process_chunks(self, state: RunState, credentials: Credentials) -> RunOutcome:
        total = state.total_chunks
        for index in range(total):
            if await self._wait_until_runnable(state):
                log_run_cancelled(chunk_index=index, completed_chunks=state.completed_count)
                return RunOutcome.CANCELLED

            start_chunk(state, index)
            chunk = state.chunks[index]
            log_chunk_started(chunk_index=index, start_date=chunk.start, end_date=chunk.end)
            await self._emit_progress(state, current_index=index, include_current=True)

            chunk_start = perf_counter()
            try:
                records = await self._fetcher.fetch(credentials, chunk)
            except Exception as e:
                if state.is_cancelled:
                    reset_chunk(state, index)
                    log_run_cancelled(chunk_index=index, completed_chunks=state.completed_count)
                    return RunOutcome.CANCELLED
                message = str(e) or type(e).__name__
                fail_chunk(state, index, message)
                log_chunk_error(
                    chunk_index=index,
                    error_type=type(e).__name__,
                    error_message=message,
                )
            else:
                # The in-flight chunk's result is dropped once cancel is seen
                if state.is_cancelled:
                    reset_chunk(state, index)
                    log_run_cancelled(chunk_index=index, completed_chunks=state.completed_count)
                    return RunOutcome.CANCELLED
                complete_chunk(state, index, records)
                log_chunk_completed(
                    chunk_index=index,
                    rows_aggregated=len(records),
                    latency_ms=(perf_counter() - chunk_start) * 1000.0,
                )
                self._save_progress(state)

                projection = self._predictor.predict(state.records, index, total)
                if not projection.can_complete and index < total - 1:
                    reach_storage_limit(state, index)
                    log_storage_limit(
                        chunk_index=index,
                        skipped_chunks=len(state.skipped_chunks),
                        estimated_total_size=projection.estimated_total_size,
                    )
                    await self._emit_progress(state, current_index=index)
                    await self._emit(
                        self._on_storage_limit,
                        StorageLimitReport(
                            records=state.records,
                            total_records=state.total_records,
                            chunks=state.chunk_tuple(),
                            skipped_chunks=tuple(state.skipped_chunks),
                            failed_chunks=tuple(state.failed_chunks),
                            projection=projection,
                            elapsed_ms=self._elapsed_ms(state),
                        ),
                    )
                    return RunOutcome.STORAGE_LIMITED

            await self._emit_progress(state, current_index=index)

            if index < total - 1:
                await self._sleep(self._policy.delay_between_requests)

        return RunOutcome.COMPLETED

    async def retry_failed_chunk(
        self, credentials: Credentials, chunk_index: int
    ) -> RetryResult:
        """Re-fetch one chunk outside the main loop.

        Does not consult the storage predictor and does not wait between
        requests. Re-fetching a completed chunk appends its records again.

        Raises:
            InvalidChunkIndexError: If ``chunk_index`` is outside the run
        """
        state = self._state
        if not 0 <= chunk_index < state.total_chunks:
            raise InvalidChunkIndexError(chunk_index, state.total_chunks)
        if self._running:
            logger.warning("retry_during_active_run", extra={"chunk_index": chunk_index})
        else:
            # A cancel left over from the last run must not cut the page delays
            self._cancel.clear()

        start_chunk(state, chunk_index)
        chunk = state.chunks[chunk_index]
        await self._emit_progress(state, current_index=chunk_index, include_current=True)

        try:
            records = await self._fetcher.fetch(credentials, chunk)
        except Exception as e:
            message = str(e) or type(e).__name__
            fail_chunk(state, chunk_index, message)
            log_chunk_error(
                chunk_index=chunk_index,
                error_type=type(e).__name__,
                error_message=message,
            )
            await self._emit_progress(state, current_index=chunk_index)
            return RetryResult(index=chunk_index, success=False, error=message)

        complete_chunk(state, chunk_index, records)
        log_chunk_completed(chunk_index=chunk_index, rows_aggregated=len(records))
        self._save_progress(state)
        await self._emit_progress(state, current_index=chunk_index)
        return RetryResult(index=chunk_index, success=True, record_count=len(records))

    def pause(self) -> None:
        self._state.is_paused = True
        self._resume.clear()

    def resume(self) -> None:
        self._state.is_paused = False
        self._resume.set()

    def cancel(self) -> None:
        """Stop the run at its next check point and drop the progress snapshot."""
        self._state.is_cancelled = True
        self._cancel.set()
        self._resume.set()
        self.clear_progress_snapshot()

    def reset(self) -> None:
        """Discard all run state. A run still in flight is abandoned."""
        previous = self._state
        if self._running:
            previous.is_cancelled = True
            # Wake the abandoned run's waits; the events are reused below
            self._cancel.set()
            self._resume.set()
            self._running = False
        self._state = RunState()
        self._cancel.clear()
        self._resume.set()

    # ----------------------
    # Progress snapshot
    # ----------------------
    def load_progress_snapshot(self) -> dict[str, Any] | None:
        """Last saved progress, for display only; runs are never resumed from it."""
        try:
            return self._cache.get_json(PROGRESS_CACHE_KEY)
        except ValueError as e:
            logger.warning(f"Failed to read progress from session cache: {e}")
            return None

    def clear_progress_snapshot(self) -> None:
        try:
            self._cache.remove_item(PROGRESS_CACHE_KEY)
        except Exception as e:  # noqa: BLE001
            logger.warning(f"Failed to clear session cache: {e}")

    def _save_progress(self, state: RunState) -> None:
        try:
            self._cache.set_json(PROGRESS_CACHE_KEY, state.snapshot_dict())
        except Exception as e:  # noqa: BLE001
            logger.warning(f"Failed to save progress to session cache: {e}")

    # ----------------------
    # Timing helpers
    # ----------------------
    def get_estimated_time_remaining(self) -> int | None:
        """Seconds left, extrapolated from completed chunks (None until one completes)."""
        state = self._state
        completed = state.completed_count
        if state.started_clock is None or completed == 0:
            return None
        elapsed = self._clock() - state.started_clock
        remaining = state.total_chunks - completed
        return round(elapsed / completed * remaining)

    @staticmethod
    def format_elapsed_time(milliseconds: float) -> str:
        return format_elapsed_time(milliseconds)

    def _elapsed_ms(self, state: RunState) -> int:
        if state.started_clock is None:
            return 0
        return int((self._clock() - state.started_clock) * 1000)

    async def _sleep(self, seconds: float) -> None:
        """Sleep that returns early when the run is cancelled."""
        if seconds <= 0:
            await asyncio.sleep(0)
            return
        try:
            await asyncio.wait_for(self._cancel.wait(), timeout=seconds)
        except TimeoutError:
            pass

    async def _wait_until_runnable(self, state: RunState) -> bool:
        """Block while paused. Returns True if the run has been cancelled."""
        while state.is_paused and not state.is_cancelled:
            await self._resume.wait()
        return state.is_cancelled

    # ----------------------
    # Event dispatch
    # ----------------------
    async def _emit_progress(
        self,
        state: RunState,
        *,
        current_index: int | None = None,
        include_current: bool = False,
    ) -> None:
        if self._on_progress is None:
            return
        current = (
            state.chunks[current_index]
            if include_current and current_index is not None
            else None
        )
        await self._emit(
            self._on_progress,
            ProgressSnapshot(
                total_chunks=state.total_chunks,
                completed_chunks=state.completed_count,
                chunks=state.chunk_tuple(),
                total_records=state.total_records,
                current_chunk=current,
                current_chunk_index=current_index,
                elapsed_ms=self._elapsed_ms(state),
            ),
        )

    async def _emit(self, handler: Handler | None, payload: Any) -> None:
        if handler is None:
            return
        try:
            result = handler(payload)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"Error in {type(payload).__name__} handler: {e}")
