"""Heuristic storage projection for chunked runs.

After each completed chunk the orchestrator asks whether fetching every
remaining chunk would overflow the session storage budget. The estimate
extrapolates the observed records-per-chunk and the serialized size of a
record sample, so it assumes uniform density and record size across the
whole range.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import Any

from pydantic_core import to_json

from ...models import StorageProjection
from ...storage import SessionCache

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY_BYTES = 5 * 1024 * 1024
DEFAULT_SAFETY_MARGIN = 0.85
SAMPLE_SIZE = 100
NEAR_LIMIT_PERCENT = 70
AT_LIMIT_PERCENT = 85


def estimate_data_size(data: Any) -> int:
    """Serialized JSON size of ``data`` in bytes (0 if it cannot be serialized)."""
    try:
        return len(to_json(data, fallback=str))
    except Exception as e:  # noqa: BLE001
        logger.error(f"Error estimating data size: {e}")
        return 0


def format_bytes(num_bytes: float) -> str:
    """Human readable size, e.g. ``1.5 KB``."""
    if num_bytes <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    i = max(0, min(int(math.floor(math.log(num_bytes, 1024))), len(units) - 1))
    value = round(num_bytes / (1024**i), 2)
    return f"{value:g} {units[i]}"


class StoragePredictor:
    """Projects total storage needs against a soft capacity budget."""

    def __init__(
        self,
        *,
        capacity_bytes: int | None = None,
        safety_margin: float = DEFAULT_SAFETY_MARGIN,
        cache: SessionCache | None = None,
    ) -> None:
        """Initialize predictor.

        Args:
            capacity_bytes: Explicit capacity; when None it is probed from
                ``cache``, falling back to 5 MiB
            safety_margin: Fraction of capacity a run may project to use
            cache: Session cache used for probing and current usage
        """
        if not 0 < safety_margin <= 1:
            raise ValueError("safety_margin must be in (0, 1]")
        self._cache = cache
        self.safety_margin = safety_margin
        self.capacity_bytes = capacity_bytes if capacity_bytes is not None else self._probe()

    def _probe(self) -> int:
        if self._cache is None:
            return DEFAULT_CAPACITY_BYTES
        try:
            probed = self._cache.probe_capacity()
        except Exception as e:  # noqa: BLE001
            logger.warning(f"Could not probe storage capacity, using default estimate: {e}")
            return DEFAULT_CAPACITY_BYTES
        return probed if probed else DEFAULT_CAPACITY_BYTES

    @property
    def budget_bytes(self) -> float:
        return self.capacity_bytes * self.safety_margin

    def current_usage(self) -> int:
        return self._cache.used_bytes if self._cache is not None else 0

    def available_space(self) -> int:
        return self.capacity_bytes - self.current_usage()

    def predict(
        self,
        records: Sequence[Any],
        current_chunk_index: int,
        total_chunks: int,
    ) -> StorageProjection:
        """Project whether the remaining chunks fit in the budget.

        Args:
            records: Records accumulated so far in the run
            current_chunk_index: Zero-based index of the chunk just completed
            total_chunks: Number of chunks in the run

        Returns:
            StorageProjection; never blocks on the first chunk
        """
        available = self.available_space()
        if current_chunk_index == 0 or not records:
            return StorageProjection(
                can_complete=True,
                available_space=available,
                reason="Insufficient data to predict",
            )

        count = len(records)
        avg_per_chunk = count / (current_chunk_index + 1)
        remaining_chunks = max(total_chunks - current_chunk_index - 1, 0)
        remaining_records = math.ceil(avg_per_chunk * remaining_chunks)

        sample = list(records[:SAMPLE_SIZE])
        avg_record_size = estimate_data_size(sample) / len(sample)
        remaining_size = remaining_records * avg_record_size
        current_size = count * avg_record_size
        total_size = current_size + remaining_size

        can_complete = total_size < self.budget_bytes
        return StorageProjection(
            can_complete=can_complete,
            estimated_total_size=total_size,
            current_size=current_size,
            estimated_remaining_size=remaining_size,
            available_space=available,
            usage_percentage=total_size / self.capacity_bytes * 100,
            estimated_remaining_records=remaining_records,
            avg_records_per_chunk=avg_per_chunk,
            avg_record_size=avg_record_size,
            reason="Sufficient space" if can_complete else "Estimated to exceed storage quota",
        )

    def storage_report(self) -> dict[str, Any]:
        """Current cache usage against capacity, for display."""
        used = self.current_usage()
        available = self.available_space()
        usage = used / self.capacity_bytes * 100
        return {
            "current_size": used,
            "current_size_formatted": format_bytes(used),
            "available_space": available,
            "available_space_formatted": format_bytes(available),
            "total_quota": self.capacity_bytes,
            "total_quota_formatted": format_bytes(self.capacity_bytes),
            "usage_percentage": round(usage, 2),
            "is_near_limit": usage > NEAR_LIMIT_PERCENT,
            "is_at_limit": usage > AT_LIMIT_PERCENT,
        }
