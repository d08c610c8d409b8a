"""Unit tests for HTTPClient.

Tests focus on session management, throttling, response hooks, and error mapping.
"""

from __future__ import annotations

import asyncio
import time
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from telexport.core import ProviderError, RateLimitError
from telexport.runtime.rest import HTTPClient


def mock_response(status=200, payload=None, headers=None, text="", reason="OK"):
    response = AsyncMock()
    response.status = status
    response.reason = reason
    response.headers = headers or {}
    response.json = AsyncMock(return_value=payload if payload is not None else {"data": "test"})
    response.text = AsyncMock(return_value=text)
    response.__aenter__ = AsyncMock(return_value=response)
    response.__aexit__ = AsyncMock(return_value=None)
    return response


def attach_session(client: HTTPClient, *responses) -> MagicMock:
    session = MagicMock()
    session.closed = False
    if len(responses) == 1:
        session.get = MagicMock(return_value=responses[0])
    else:
        session.get = MagicMock(side_effect=list(responses))
    client._session = session
    return session


class TestHTTPClientSessionManagement:
    """Test HTTPClient session management."""

    def test_init(self):
        client = HTTPClient(timeout=10.0)
        assert client.timeout.total == 10.0
        assert client._session is None
        assert client._response_hooks == []
        assert client._throttle_until is None

    @pytest.mark.asyncio
    async def test_session_property_creates_session(self):
        """Test session property creates session when needed."""
        client = HTTPClient()

        session = client.session
        assert isinstance(session, aiohttp.ClientSession)
        assert client._session is session
        await client.close()

    @pytest.mark.asyncio
    async def test_session_property_recreates_closed_session(self):
        client = HTTPClient()
        session1 = client.session
        await session1.close()

        session2 = client.session
        assert session1 is not session2
        assert not session2.closed
        await client.close()

    @pytest.mark.asyncio
    async def test_close_idempotent(self):
        client = HTTPClient()
        await client.close()
        await client.close()

    @pytest.mark.asyncio
    async def test_context_manager(self):
        """Test HTTPClient closes its session on context exit."""
        async with HTTPClient() as client:
            assert client.session is not None

        assert client._session is None or client._session.closed


class TestHTTPClientThrottling:
    """Test HTTPClient throttle window."""

    def test_set_throttle_zero_does_nothing(self):
        client = HTTPClient()
        client.set_throttle(5.0)
        original = client._throttle_until

        client.set_throttle(0.0)
        assert client._throttle_until == original

    def test_set_throttle_never_shortens(self):
        client = HTTPClient()
        client.set_throttle(10.0)
        long_end = client._throttle_until

        client.set_throttle(1.0)
        assert client._throttle_until == long_end

        client.set_throttle(20.0)
        assert client._throttle_until > long_end

    @pytest.mark.asyncio
    async def test_get_respects_throttle(self):
        """Test get() waits out the throttle window and then clears it."""
        client = HTTPClient()
        client.set_throttle(0.05)
        attach_session(client, mock_response())

        start = time.time()
        await client.get("https://api.example.com/test")
        elapsed = time.time() - start

        assert elapsed >= 0.04, f"Expected at least 0.04s, got {elapsed:.6f}s"
        assert client._throttle_until is None


class TestHTTPClientResponseHooks:
    """Test HTTPClient response hooks."""

    @pytest.mark.asyncio
    async def test_response_hook_called(self):
        client = HTTPClient()
        hook = MagicMock(return_value=None)
        client.add_response_hook(hook)
        response = mock_response()
        attach_session(client, response)

        await client.get("https://api.example.com/test")

        hook.assert_called_once_with(response)
        assert client._throttle_until is None

    @pytest.mark.asyncio
    async def test_response_hook_returns_delay(self):
        client = HTTPClient()
        client.add_response_hook(lambda response: 2.0)
        attach_session(client, mock_response())

        await client.get("https://api.example.com/test")

        assert client._throttle_until is not None

    @pytest.mark.asyncio
    async def test_response_hook_async(self):
        client = HTTPClient()

        async def async_hook(response):
            await asyncio.sleep(0)
            return 1.0

        client.add_response_hook(async_hook)
        attach_session(client, mock_response())

        await client.get("https://api.example.com/test")

        assert client._throttle_until is not None

    @pytest.mark.asyncio
    async def test_response_hook_exception_handled(self):
        """Test a failing hook does not break the request."""
        client = HTTPClient()

        def failing_hook(response):
            raise RuntimeError("Hook error")

        client.add_response_hook(failing_hook)
        attach_session(client, mock_response())

        result = await client.get("https://api.example.com/test")
        assert result == {"data": "test"}


class TestHTTPClientErrors:
    """Test status and transport error mapping."""

    @pytest.mark.asyncio
    async def test_429_raises_rate_limit_with_retry_after(self):
        client = HTTPClient()
        attach_session(client, mock_response(status=429, headers={"Retry-After": "7"}))

        with pytest.raises(RateLimitError) as exc_info:
            await client.get("https://api.example.com/test")

        assert exc_info.value.retry_after == 7
        assert exc_info.value.status_code == 429
        assert client._throttle_until is not None

    @pytest.mark.asyncio
    async def test_429_without_retry_after_uses_default(self):
        client = HTTPClient()
        attach_session(client, mock_response(status=429))

        with pytest.raises(RateLimitError) as exc_info:
            await client.get("https://api.example.com/test")

        assert exc_info.value.retry_after == 60

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 401, 404, 500, 503])
    async def test_error_status_raises_provider_error(self, status):
        client = HTTPClient()
        attach_session(
            client, mock_response(status=status, text='{"message":"nope"}', reason="Error")
        )

        with pytest.raises(ProviderError) as exc_info:
            await client.get("https://api.example.com/test")

        assert exc_info.value.status_code == status
        assert str(status) in str(exc_info.value)
        assert "nope" in str(exc_info.value)
        assert not isinstance(exc_info.value, RateLimitError)

    @pytest.mark.asyncio
    async def test_transport_error_raises_provider_error(self):
        client = HTTPClient()
        session = attach_session(client, mock_response())
        session.get = MagicMock(side_effect=aiohttp.ClientConnectionError("connection reset"))

        with pytest.raises(ProviderError) as exc_info:
            await client.get("https://api.example.com/test")

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, aiohttp.ClientError)

    @pytest.mark.asyncio
    async def test_timeout_raises_provider_error(self):
        client = HTTPClient()
        session = attach_session(client, mock_response())
        session.get = MagicMock(side_effect=asyncio.TimeoutError())

        with pytest.raises(ProviderError, match="timed out"):
            await client.get("https://api.example.com/test")


class TestHTTPClientRequests:
    """Test request construction."""

    @pytest.mark.asyncio
    async def test_get_passes_params_headers_and_auth(self):
        client = HTTPClient()
        session = attach_session(client, mock_response(payload={"messages": []}))
        auth = aiohttp.BasicAuth("proj", "token")

        result = await client.get(
            "https://api.example.com/test",
            params={"PageSize": "10"},
            headers={"Accept": "application/json"},
            auth=auth,
        )

        assert result == {"messages": []}
        session.get.assert_called_once_with(
            "https://api.example.com/test",
            params={"PageSize": "10"},
            headers={"Accept": "application/json"},
            auth=auth,
        )

    @pytest.mark.asyncio
    async def test_get_with_base_url(self):
        """Test get() combines base_url with relative path."""
        client = HTTPClient(base_url="https://api.example.com")
        session = attach_session(client, mock_response())

        await client.get("/test")

        assert session.get.call_args.args[0] == "https://api.example.com/test"

    @pytest.mark.asyncio
    async def test_get_with_absolute_url(self):
        client = HTTPClient(base_url="https://api.example.com")
        session = attach_session(client, mock_response())

        await client.get("https://other.com/test")

        assert session.get.call_args.args[0] == "https://other.com/test"
