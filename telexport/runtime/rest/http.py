"""HTTP client helper."""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

import aiohttp

from ...core.exceptions import ProviderError, RateLimitError

logger = logging.getLogger(__name__)

# A hook receives each response and may return seconds to hold off the next request
ResponseHook = Callable[[aiohttp.ClientResponse], float | None | Awaitable[float | None]]


def _retry_after(response: aiohttp.ClientResponse, default: int = 60) -> int:
    value = response.headers.get("Retry-After") if response.headers else None
    try:
        return int(value) if value is not None else default
    except (TypeError, ValueError):
        return default


class HTTPClient:
    """Async HTTP client wrapper."""

    def __init__(self, base_url: str | None = None, timeout: float = 30.0) -> None:
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None
        self._response_hooks: list[ResponseHook] = []
        self._throttle_until: float | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    def add_response_hook(self, hook: ResponseHook) -> None:
        self._response_hooks.append(hook)

    def set_throttle(self, seconds: float) -> None:
        """Hold off requests for ``seconds``; never shortens an existing window."""
        if seconds <= 0:
            return
        until = time.time() + seconds
        if self._throttle_until is None or until > self._throttle_until:
            self._throttle_until = until

    async def _wait_for_throttle(self) -> None:
        if self._throttle_until is None:
            return
        delay = self._throttle_until - time.time()
        if delay > 0:
            await asyncio.sleep(delay)
        self._throttle_until = None

    async def _run_hooks(self, response: aiohttp.ClientResponse) -> None:
        for hook in self._response_hooks:
            try:
                delay = hook(response)
                if inspect.isawaitable(delay):
                    delay = await delay
            except Exception as e:  # noqa: BLE001
                logger.warning(f"Response hook failed: {e}")
                continue
            if delay:
                self.set_throttle(delay)

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        auth: aiohttp.BasicAuth | None = None,
    ) -> Any:
        """GET request returning decoded JSON.

        Raises:
            RateLimitError: On HTTP 429
            ProviderError: On any other error status or transport failure
        """
        # If base_url is set and url is relative, combine them
        if self.base_url and not url.startswith("http"):
            url = f"{self.base_url}{url}"

        await self._wait_for_throttle()
        try:
            async with self.session.get(
                url, params=params, headers=headers, auth=auth
            ) as response:
                await self._run_hooks(response)

                if response.status == 429:
                    retry_after = _retry_after(response)
                    self.set_throttle(retry_after)
                    raise RateLimitError(
                        f"Rate limit exceeded for {url}", retry_after=retry_after
                    )
                if response.status >= 400:
                    detail = await response.text()
                    raise ProviderError(
                        f"API error: {response.status} {response.reason or ''} {detail}".strip(),
                        status_code=response.status,
                    )
                return await response.json()
        except aiohttp.ClientError as e:
            raise ProviderError(f"Request to {url} failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise ProviderError(f"Request to {url} timed out") from e

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
