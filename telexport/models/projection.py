"""Storage projection produced by the storage predictor."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class StorageProjection:
    """Estimate of whether a run can finish inside the storage budget.

    Attributes:
        can_complete: Whether the projected total stays under the budget
        estimated_total_size: Projected bytes once every chunk is fetched
        current_size: Estimated bytes of the records held so far
        estimated_remaining_size: Projected bytes of the chunks not yet fetched
        available_space: Capacity minus bytes currently in the session cache
        usage_percentage: Projected total as a percentage of capacity
        estimated_remaining_records: Records expected from remaining chunks
        avg_records_per_chunk: Observed records per completed chunk
        avg_record_size: Serialized bytes per record in the sample
        assumes_uniform_density: The estimate treats record size and per-chunk
            volume as uniform; callers with highly variable payloads should
            discount it
        reason: Human readable summary
    """

    can_complete: bool
    estimated_total_size: float = 0.0
    current_size: float = 0.0
    estimated_remaining_size: float = 0.0
    available_space: int = 0
    usage_percentage: float = 0.0
    estimated_remaining_records: int = 0
    avg_records_per_chunk: float = 0.0
    avg_record_size: float = 0.0
    assumes_uniform_density: bool = True
    reason: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
