"""Data models."""

from .chunk import Chunk
from .credentials import Credentials
from .events import (
    CompletionResult,
    FailedChunk,
    FailureReport,
    ProgressSnapshot,
    RetryResult,
    SkippedChunk,
    StorageLimitReport,
)
from .message import Message
from .page import Page
from .projection import StorageProjection

__all__ = [
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
]
