"""Chunk execution logic for draining one chunk's pages.

This module provides the ChunkFetcher class that walks a paginated data
source across a single chunk's date window and concatenates the records.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from ...core.base import PagedSource
from ...core.exceptions import PaginationExhaustedError
from ...models import Chunk, Credentials
from .telemetry import log_page_fetched

Wait = Callable[[float], Awaitable[Any]]


class ChunkFetcher:
    """Fetches every page of one chunk, one request at a time.

    There is no retry here: the first failing page request propagates and
    fails the whole chunk.
    """

    def __init__(
        self,
        source: PagedSource,
        *,
        page_delay: float = 0.5,
        max_pages: int | None = 1000,
        wait: Wait | None = None,
    ) -> None:
        """Initialize chunk fetcher.

        Args:
            source: Paginated data source
            page_delay: Seconds to wait between page requests
            max_pages: Page cap per chunk (None = unlimited)
            wait: Async sleep used for the page delay (default: asyncio.sleep)
        """
        self._source = source
        self._page_delay = page_delay
        self._max_pages = max_pages
        self._wait = wait or asyncio.sleep

    @property
    def source(self) -> PagedSource:
        return self._source

    async def fetch(self, credentials: Credentials, chunk: Chunk) -> list[Any]:
        """Fetch all records in ``chunk``'s window.

        Args:
            credentials: Account credentials passed through to the source
            chunk: Chunk whose date bounds define the window

        Returns:
            Records from every page, in page order

        Raises:
            PaginationExhaustedError: If the source still reports more pages
                after ``max_pages`` requests
            DataError: Whatever the source raises for a failed page
        """
        records: list[Any] = []
        cursor: str | None = None
        pages = 0

        while True:
            if pages > 0 and self._page_delay > 0:
                await self._wait(self._page_delay)

            page = await self._source.fetch_page(credentials, chunk.start, chunk.end, cursor)
            pages += 1
            records.extend(page.records)
            log_page_fetched(page_number=pages, records=page.count, has_more=page.has_more)

            if not page.has_more or not page.next_cursor:
                return records

            if self._max_pages is not None and pages >= self._max_pages:
                raise PaginationExhaustedError(
                    f"Source still reported more pages after {pages} requests "
                    f"for {chunk.start.isoformat()}..{chunk.end.isoformat()}",
                    pages_fetched=pages,
                )
            cursor = page.next_cursor
