"""Runtime: chunk planning, fetching, orchestration and REST sources."""

from ..core.exceptions import InvalidTransitionError
from .chunking import (
    ChunkFetcher,
    ChunkPlanner,
    FetchPolicy,
    StoragePredictor,
    plan_chunks,
)
from .orchestrator import PROGRESS_CACHE_KEY, FetchOrchestrator
from .state import RunState

__all__ = [
    "ChunkFetcher",
    "ChunkPlanner",
    "FetchPolicy",
    "StoragePredictor",
    "plan_chunks",
    "FetchOrchestrator",
    "PROGRESS_CACHE_KEY",
    "RunState",
    "InvalidTransitionError",
]
