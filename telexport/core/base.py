"""Base interfaces for paginated data sources."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..models import Credentials, Page


@runtime_checkable
class PagedSource(Protocol):
    """A remote collection that can be listed by date window, page by page.

    Implementations return one ``Page`` per call and raise a ``DataError``
    subclass when a request fails. The cursor is whatever the previous page
    returned as ``next_cursor``; ``None`` requests the first page.
    """

    async def fetch_page(
        self,
        credentials: Credentials,
        start_date: date,
        end_date: date,
        cursor: str | None = None,
    ) -> Page: ...
