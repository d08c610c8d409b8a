"""Custom exception hierarchy."""

from __future__ import annotations


class DataError(Exception):
    """Base exception for all library errors."""

    pass


class ProviderError(DataError):
    """Error from the remote telephony API."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(ProviderError):
    """Provider rate limit exceeded."""

    def __init__(self, message: str, retry_after: int = 60) -> None:
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class ChunkFetchError(DataError):
    """A chunk could not be fetched in full."""

    def __init__(self, message: str, chunk_index: int | None = None) -> None:
        super().__init__(message)
        self.chunk_index = chunk_index


class PaginationExhaustedError(ChunkFetchError):
    """The data source kept reporting more pages past the page cap."""

    def __init__(self, message: str, pages_fetched: int) -> None:
        super().__init__(message)
        self.pages_fetched = pages_fetched


class InvalidChunkIndexError(DataError, IndexError):
    """Retry requested for a chunk index outside the planned run."""

    def __init__(self, chunk_index: int, total_chunks: int) -> None:
        super().__init__(
            f"Invalid chunk index {chunk_index} (run has {total_chunks} chunks)"
        )
        self.chunk_index = chunk_index
        self.total_chunks = total_chunks


class StorageQuotaExceededError(DataError):
    """Session cache write would exceed its quota."""

    def __init__(self, message: str, requested: int = 0, available: int = 0) -> None:
        super().__init__(message)
        self.requested = requested
        self.available = available


class InvalidTransitionError(DataError):
    """A chunk was asked to move to a status its current status cannot reach."""

    pass
