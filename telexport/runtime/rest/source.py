"""Paginated list sources for the LaML REST API.

Each source lists one account resource (Messages, Calls, ...) filtered to a
date window and returns it one ``Page`` at a time. The API's
``next_page_uri`` is passed back to the caller as the page cursor.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date
from typing import Any

import aiohttp

from ...core.exceptions import ProviderError
from ...models import Credentials, Message, Page
from .config import DEFAULT_PAGE_SIZE, LIST_RESOURCES, MAX_PAGE_SIZE, list_url, page_url
from .http import HTTPClient

logger = logging.getLogger(__name__)

RecordParser = Callable[[dict[str, Any]], Any]


def _identity(record: dict[str, Any]) -> dict[str, Any]:
    return record


class LamlListSource:
    """Lists one LaML account resource within an inclusive date window."""

    def __init__(
        self,
        resource: str,
        client: HTTPClient | None = None,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        parse_record: RecordParser | None = None,
    ) -> None:
        """Initialize list source.

        Args:
            resource: List resource name, e.g. "Messages" or "Calls"
            client: Shared HTTP client; one is created (and owned) if omitted
            page_size: Items per page, 1..1000
            parse_record: Converts each raw item (default: keep the dict)
        """
        if resource not in LIST_RESOURCES:
            raise ValueError(
                f"Unsupported resource {resource!r}; expected one of {sorted(LIST_RESOURCES)}"
            )
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")
        self.resource = resource
        self.record_key, self.date_param = LIST_RESOURCES[resource]
        self.page_size = page_size
        self._parse_record = parse_record or _identity
        self._owns_client = client is None
        self._client = client or HTTPClient()

    def build_params(self, start_date: date, end_date: date) -> dict[str, str]:
        """First-page query: page size plus the inclusive date filter."""
        return {
            "PageSize": str(self.page_size),
            f"{self.date_param}>": start_date.isoformat(),
            f"{self.date_param}<": end_date.isoformat(),
        }

    async def fetch_page(
        self,
        credentials: Credentials,
        start_date: date,
        end_date: date,
        cursor: str | None = None,
    ) -> Page:
        auth = aiohttp.BasicAuth(credentials.project_id, credentials.auth_token)
        if cursor is None:
            url = list_url(credentials.space_url, credentials.project_id, self.resource)
            params: dict[str, str] | None = self.build_params(start_date, end_date)
        else:
            url = page_url(credentials.space_url, cursor)
            params = None

        logger.debug(
            "list_page_request",
            extra={"resource": self.resource, "first_page": cursor is None},
        )
        payload = await self._client.get(
            url, params=params, headers={"Accept": "application/json"}, auth=auth
        )
        return self.parse_page(payload)

    def parse_page(self, payload: Any) -> Page:
        """Turn a list response into a ``Page``.

        Items are read from the resource key, falling back to ``data``.

        Raises:
            ProviderError: If the payload is not a JSON object
        """
        if not isinstance(payload, dict):
            raise ProviderError(f"Unexpected {self.resource} response: {type(payload).__name__}")
        items = payload.get(self.record_key)
        if items is None:
            items = payload.get("data") or []
        next_uri = payload.get("next_page_uri") or payload.get("nextPageUri")
        return Page(
            records=[self._parse_record(item) for item in items],
            has_more=bool(next_uri),
            next_cursor=next_uri or None,
        )

    async def close(self) -> None:
        if self._owns_client:
            await self._client.close()

    async def __aenter__(self) -> LamlListSource:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


class LamlMessagesSource(LamlListSource):
    """Messages list source yielding ``Message`` models."""

    def __init__(
        self, client: HTTPClient | None = None, *, page_size: int = DEFAULT_PAGE_SIZE
    ) -> None:
        super().__init__("Messages", client, page_size=page_size, parse_record=Message.from_api)
