"""Core enums and exceptions."""

from .base import PagedSource
from .enums import ChunkStatus, RunOutcome
from .exceptions import (
    ChunkFetchError,
    DataError,
    InvalidChunkIndexError,
    InvalidTransitionError,
    PaginationExhaustedError,
    ProviderError,
    RateLimitError,
    StorageQuotaExceededError,
)

__all__ = [
    "PagedSource",
    "ChunkStatus",
    "RunOutcome",
    "DataError",
    "ProviderError",
    "RateLimitError",
    "ChunkFetchError",
    "PaginationExhaustedError",
    "InvalidChunkIndexError",
    "StorageQuotaExceededError",
    "InvalidTransitionError",
]
