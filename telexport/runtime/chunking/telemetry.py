"""Structured logging for chunking operations.

This module provides telemetry hooks for chunked fetch runs, emitting
structured logs with a stable event name and an ``extra`` payload.
"""

from __future__ import annotations

import logging
from datetime import date

logger = logging.getLogger(__name__)


def log_chunk_plan(
    *,
    total_chunks: int,
    window_days: int,
    start_date: date,
    end_date: date,
) -> None:
    """Log chunk plan creation.

    Args:
        total_chunks: Total number of chunks planned
        window_days: Days per chunk window
        start_date: First day of the range
        end_date: Last day of the range
    """
    logger.info(
        "chunk_plan_created",
        extra={
            "total_chunks": total_chunks,
            "window_days": window_days,
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
        },
    )


def log_chunk_started(*, chunk_index: int, start_date: date, end_date: date) -> None:
    logger.debug(
        "chunk_started",
        extra={
            "chunk_index": chunk_index,
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
        },
    )


def log_page_fetched(*, page_number: int, records: int, has_more: bool) -> None:
    logger.debug(
        "page_fetched",
        extra={"page_number": page_number, "records": records, "has_more": has_more},
    )


def log_chunk_completed(
    *,
    chunk_index: int,
    rows_aggregated: int,
    pages: int | None = None,
    latency_ms: float | None = None,
) -> None:
    """Log completion of a single chunk.

    Args:
        chunk_index: Zero-based index of the chunk
        rows_aggregated: Number of records fetched for this chunk
        pages: Number of page requests issued (optional)
        latency_ms: Latency in milliseconds (optional)
    """
    logger.info(
        "chunk_completed",
        extra={
            "chunk_index": chunk_index,
            "rows_aggregated": rows_aggregated,
            "pages": pages,
            "latency_ms": latency_ms,
        },
    )


def log_chunk_error(
    *,
    chunk_index: int,
    error_type: str,
    error_message: str,
) -> None:
    """Log chunk fetch error.

    Args:
        chunk_index: Zero-based index of the chunk that failed
        error_type: Type of error (e.g., "ProviderError", "PaginationExhaustedError")
        error_message: Error message
    """
    logger.error(
        "chunk_error",
        extra={
            "chunk_index": chunk_index,
            "error_type": error_type,
            "error_message": error_message,
        },
    )


def log_storage_limit(
    *,
    chunk_index: int,
    skipped_chunks: int,
    estimated_total_size: float,
) -> None:
    logger.warning(
        "storage_limit_reached",
        extra={
            "chunk_index": chunk_index,
            "skipped_chunks": skipped_chunks,
            "estimated_total_size": estimated_total_size,
        },
    )


def log_run_complete(
    *,
    outcome: str,
    completed_chunks: int,
    failed_chunks: int,
    total_records: int,
    elapsed_ms: int,
) -> None:
    """Log the end of a run.

    Args:
        outcome: RunOutcome value
        completed_chunks: Chunks completed in the run
        failed_chunks: Chunks that ended failed
        total_records: Records accumulated
        elapsed_ms: Wall time since the run started
    """
    logger.info(
        "run_complete",
        extra={
            "outcome": outcome,
            "completed_chunks": completed_chunks,
            "failed_chunks": failed_chunks,
            "total_records": total_records,
            "elapsed_ms": elapsed_ms,
        },
    )


def log_run_cancelled(*, chunk_index: int | None, completed_chunks: int) -> None:
    logger.info(
        "run_cancelled",
        extra={"chunk_index": chunk_index, "completed_chunks": completed_chunks},
    )
