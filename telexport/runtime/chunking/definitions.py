"""Chunking policy structures.

This module defines the knobs that control how a run is split into chunks
and how quickly the orchestrator walks through them.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FetchPolicy:
    """Pacing and sizing policy for a chunked fetch run.

    Attributes:
        window_days: Days per chunk (the final chunk may be shorter)
        delay_between_requests: Seconds to wait between chunks
        page_delay: Seconds to wait between page requests inside a chunk
        max_pages: Page cap per chunk (None = unlimited)
    """

    window_days: int = 7
    delay_between_requests: float = 1.0
    page_delay: float = 0.5
    max_pages: int | None = 1000

    def __post_init__(self) -> None:
        """Validate policy configuration."""
        if self.window_days < 1:
            raise ValueError("FetchPolicy window_days must be at least 1")
        if self.delay_between_requests < 0:
            raise ValueError("FetchPolicy delay_between_requests cannot be negative")
        if self.page_delay < 0:
            raise ValueError("FetchPolicy page_delay cannot be negative")
        if self.max_pages is not None and self.max_pages < 1:
            raise ValueError("FetchPolicy max_pages must be at least 1 or None")

    @classmethod
    def immediate(cls, **overrides: object) -> FetchPolicy:
        """Policy with every delay set to zero, for tests and local sources."""
        values: dict[str, object] = {"delay_between_requests": 0.0, "page_delay": 0.0}
        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]
