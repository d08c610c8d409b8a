"""Chunking layer for date-windowed, paginated fetches.

Architecture:
    The chunking layer consists of:
    - definitions.py: Pacing and sizing policy (FetchPolicy)
    - planners.py: Chunk planning logic (splits a date range into windows)
    - executors.py: Chunk execution logic (drains one chunk's pages)
    - predictor.py: Storage projection used to stop runs early
    - telemetry.py: Structured logging
"""

from __future__ import annotations

from .definitions import FetchPolicy
from .executors import ChunkFetcher
from .planners import ChunkPlanner, plan_chunks
from .predictor import StoragePredictor, estimate_data_size, format_bytes

__all__ = [
    "FetchPolicy",
    "ChunkPlanner",
    "ChunkFetcher",
    "StoragePredictor",
    "plan_chunks",
    "estimate_data_size",
    "format_bytes",
]
