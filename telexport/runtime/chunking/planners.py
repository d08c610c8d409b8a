"""Chunk planning logic for splitting a date range into windows.

This module provides the ChunkPlanner class that turns a user-supplied date
range into ordered, contiguous, non-overlapping day windows.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

from ...models import Chunk
from .telemetry import log_chunk_plan


def _as_date(value: date | datetime) -> date:
    # datetime is a date subclass; drop the time of day
    if isinstance(value, datetime):
        return value.date()
    return value


class ChunkPlanner:
    """Plans fixed-size day windows over an inclusive date range."""

    def __init__(self, window_days: int = 7) -> None:
        if window_days < 1:
            raise ValueError("window_days must be at least 1")
        self._window_days = window_days

    @property
    def window_days(self) -> int:
        return self._window_days

    def plan(self, start_date: date | datetime, end_date: date | datetime) -> list[Chunk]:
        """Plan chunks for ``[start_date, end_date]``, both days inclusive.

        The caller guarantees ``start_date <= end_date``; a reversed range
        yields an empty plan.

        Args:
            start_date: First day of the range
            end_date: Last day of the range

        Returns:
            Pending chunks in chronological order; each spans ``window_days``
            except the last, which is clipped to ``end_date``
        """
        start = _as_date(start_date)
        end = _as_date(end_date)
        span = timedelta(days=self._window_days - 1)
        step = timedelta(days=self._window_days)

        chunks: list[Chunk] = []
        current = start
        while current <= end:
            chunk_end = min(current + span, end)
            chunks.append(Chunk(start=current, end=chunk_end))
            current += step

        log_chunk_plan(
            total_chunks=len(chunks),
            window_days=self._window_days,
            start_date=start,
            end_date=end,
        )
        return chunks


def plan_chunks(
    start_date: date | datetime,
    end_date: date | datetime,
    *,
    window_days: int = 7,
) -> list[Chunk]:
    """Split an inclusive date range into ``window_days`` chunks."""
    return ChunkPlanner(window_days).plan(start_date, end_date)
