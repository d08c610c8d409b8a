"""Shared fixtures: an in-memory paginated source and a controllable clock."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import date

import pytest

from telexport.core import ProviderError
from telexport.models import Credentials, Page


class FakeSource:
    """Paginated source serving synthetic string records per date window.

    Records look like ``"2024-01-01#7"`` so their chunk and order are visible.
    """

    def __init__(
        self,
        records_per_chunk: int = 50,
        pages_per_chunk: int = 1,
        fail_starts: set[date] | None = None,
        on_fetch: Callable[[date, str | None], Awaitable[None] | None] | None = None,
    ) -> None:
        self.records_per_chunk = records_per_chunk
        self.pages_per_chunk = pages_per_chunk
        self.fail_starts = set(fail_starts or ())
        self.on_fetch = on_fetch
        self.calls: list[tuple[date, date, str | None]] = []

    @property
    def fetched_starts(self) -> list[date]:
        return [start for start, _, cursor in self.calls if cursor is None]

    async def fetch_page(
        self,
        credentials: Credentials,
        start_date: date,
        end_date: date,
        cursor: str | None = None,
    ) -> Page:
        self.calls.append((start_date, end_date, cursor))
        if self.on_fetch is not None:
            result = self.on_fetch(start_date, cursor)
            if result is not None:
                await result
        if start_date in self.fail_starts:
            raise ProviderError(f"API error for {start_date.isoformat()}", status_code=500)

        page = 0 if cursor is None else int(cursor)
        per_page = self.records_per_chunk // self.pages_per_chunk
        lo = page * per_page
        last = page + 1 >= self.pages_per_chunk
        hi = self.records_per_chunk if last else lo + per_page
        records = [f"{start_date.isoformat()}#{n}" for n in range(lo, hi)]
        return Page(
            records=records,
            has_more=not last,
            next_cursor=None if last else str(page + 1),
        )


class FakeClock:
    """Monotonic clock whose time only moves when a test says so."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(project_id="proj-123", auth_token="secret", space_url="example.signalwire.com")


@pytest.fixture
def fake_source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_source() -> type[FakeSource]:
    """Factory for sources with non-default behaviour."""
    return FakeSource
