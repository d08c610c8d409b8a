"""Unit tests for SessionCache."""

from __future__ import annotations

import pytest

from telexport.core import StorageQuotaExceededError
from telexport.storage import SessionCache


class TestSessionCacheItems:
    """Test item storage and size accounting."""

    def test_set_get_remove(self):
        cache = SessionCache()
        cache.set_item("key", "value")

        assert cache.get_item("key") == "value"
        assert "key" in cache
        assert len(cache) == 1
        assert cache.used_bytes == len("key") + len("value")

        cache.remove_item("key")
        assert cache.get_item("key") is None
        assert cache.used_bytes == 0

    def test_remove_missing_key_is_noop(self):
        cache = SessionCache()
        cache.remove_item("absent")
        assert cache.used_bytes == 0

    def test_overwrite_replaces_size(self):
        cache = SessionCache()
        cache.set_item("k", "a" * 10)
        cache.set_item("k", "b" * 3)

        assert cache.get_item("k") == "bbb"
        assert cache.used_bytes == 4

    def test_clear(self):
        cache = SessionCache()
        cache.set_item("a", "1")
        cache.set_item("b", "2")

        cache.clear()

        assert len(cache) == 0
        assert cache.keys() == []
        assert cache.used_bytes == 0

    def test_json_round_trip_stringifies_unknown_types(self):
        from datetime import date

        cache = SessionCache()
        cache.set_json("progress", {"day": date(2024, 1, 1), "n": 3})

        assert cache.get_json("progress") == {"day": "2024-01-01", "n": 3}
        assert cache.get_json("missing") is None


class TestSessionCacheQuota:
    """Test quota enforcement."""

    def test_write_over_quota_rejected(self):
        cache = SessionCache(quota_bytes=10)
        cache.set_item("k", "12345")

        with pytest.raises(StorageQuotaExceededError) as exc_info:
            cache.set_item("other", "123456")

        assert exc_info.value.requested == 11
        assert exc_info.value.available == 4
        assert "other" not in cache

    def test_failed_overwrite_keeps_previous_value(self):
        cache = SessionCache(quota_bytes=10)
        cache.set_item("k", "old")

        with pytest.raises(StorageQuotaExceededError):
            cache.set_item("k", "x" * 20)

        assert cache.get_item("k") == "old"
        assert cache.used_bytes == 4

    def test_overwrite_may_reuse_own_space(self):
        cache = SessionCache(quota_bytes=10)
        cache.set_item("k", "a" * 9)
        cache.set_item("k", "b" * 9)

        assert cache.used_bytes == 10
        assert cache.available_bytes == 0

    def test_unbounded_cache(self):
        cache = SessionCache(quota_bytes=None)
        cache.set_item("k", "v" * 100_000)

        assert cache.available_bytes is None

    def test_invalid_quota(self):
        with pytest.raises(ValueError):
            SessionCache(quota_bytes=0)


class TestSessionCacheProbe:
    """Test capacity probing."""

    def test_probe_finds_quota_and_cleans_up(self):
        cache = SessionCache(quota_bytes=50_000)
        cache.set_item("keep", "me")

        capacity = cache.probe_capacity()

        assert capacity is not None
        assert 50_000 - 1100 < capacity <= 50_000
        assert cache.keys() == ["keep"]
        assert cache.used_bytes == 6

    def test_probe_unbounded_returns_none(self):
        cache = SessionCache(quota_bytes=None)

        assert cache.probe_capacity() is None
        assert len(cache) == 0
