"""telexport - chunked record export for LaML-compatible telephony APIs."""

from .core import (
    ChunkFetchError,
    ChunkStatus,
    DataError,
    InvalidChunkIndexError,
    InvalidTransitionError,
    PagedSource,
    PaginationExhaustedError,
    ProviderError,
    RateLimitError,
    RunOutcome,
    StorageQuotaExceededError,
)
from .models import (
    Chunk,
    CompletionResult,
    Credentials,
    FailedChunk,
    FailureReport,
    Message,
    Page,
    ProgressSnapshot,
    RetryResult,
    SkippedChunk,
    StorageLimitReport,
    StorageProjection,
)
from .runtime import (
    ChunkFetcher,
    ChunkPlanner,
    FetchOrchestrator,
    FetchPolicy,
    RunState,
    StoragePredictor,
    plan_chunks,
)
from .runtime.rest import HTTPClient, LamlListSource, LamlMessagesSource
from .storage import SessionCache
from .utils import format_elapsed_time

__version__ = "0.1.0"

__all__ = [
    # Core enums
    "ChunkStatus",
    "RunOutcome",
    "PagedSource",
    # Orchestration
    "FetchOrchestrator",
    "FetchPolicy",
    "ChunkPlanner",
    "ChunkFetcher",
    "StoragePredictor",
    "RunState",
    "plan_chunks",
    # Sources
    "HTTPClient",
    "LamlListSource",
    "LamlMessagesSource",
    "SessionCache",
    # Models
    "Chunk",
    "Credentials",
    "Message",
    "Page",
    "StorageProjection",
    "ProgressSnapshot",
    "CompletionResult",
    "FailureReport",
    "StorageLimitReport",
    "FailedChunk",
    "SkippedChunk",
    "RetryResult",
    # Exceptions
    "DataError",
    "ProviderError",
    "RateLimitError",
    "ChunkFetchError",
    "PaginationExhaustedError",
    "InvalidChunkIndexError",
    "StorageQuotaExceededError",
    "InvalidTransitionError",
    "format_elapsed_time",
]
