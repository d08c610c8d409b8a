"""Session-scoped key/value cache with a soft byte quota.

Holds small JSON documents (such as the last-known progress of a run) for
the lifetime of a process. Sizes are counted as characters of key plus value,
which is what the quota is enforced against.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from ..core.exceptions import StorageQuotaExceededError

logger = logging.getLogger(__name__)

DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024
_PROBE_KEY = "_storage_probe_"
_PROBE_BLOCK = "a" * 1023
_PROBE_MAX_BLOCKS = 10000


class SessionCache:
    """In-memory string store that rejects writes past its quota."""

    def __init__(self, quota_bytes: int | None = DEFAULT_QUOTA_BYTES) -> None:
        """Initialize cache.

        Args:
            quota_bytes: Maximum characters held across keys and values
                (None = unbounded)
        """
        if quota_bytes is not None and quota_bytes <= 0:
            raise ValueError("quota_bytes must be positive")
        self.quota_bytes = quota_bytes
        self._items: dict[str, str] = {}
        self._used = 0

    def __contains__(self, key: str) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def keys(self) -> list[str]:
        return list(self._items)

    @property
    def used_bytes(self) -> int:
        return self._used

    @property
    def available_bytes(self) -> int | None:
        if self.quota_bytes is None:
            return None
        return max(self.quota_bytes - self.used_bytes, 0)

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``.

        Raises:
            StorageQuotaExceededError: If the write would exceed the quota.
                The previous value, if any, is kept.
        """
        if self.quota_bytes is not None:
            existing = self._items.get(key)
            freed = len(key) + len(existing) if existing is not None else 0
            needed = len(key) + len(value)
            available = self.quota_bytes - (self._used - freed)
            if needed > available:
                raise StorageQuotaExceededError(
                    f"Storage quota exceeded writing {key!r}",
                    requested=needed,
                    available=max(available, 0),
                )
        self.remove_item(key)
        self._items[key] = value
        self._used += len(key) + len(value)

    def remove_item(self, key: str) -> None:
        value = self._items.pop(key, None)
        if value is not None:
            self._used -= len(key) + len(value)

    def clear(self) -> None:
        self._items.clear()
        self._used = 0

    def set_json(self, key: str, value: Any) -> None:
        self.set_item(key, json.dumps(value, default=str))

    def get_json(self, key: str) -> Any | None:
        raw = self.get_item(key)
        if raw is None:
            return None
        return json.loads(raw)

    def probe_capacity(self) -> int | None:
        """Estimate capacity by writing 1 KiB blocks until a write is refused.

        Returns the number of bytes written before refusal (existing items
        included), or None if the probe never hit a limit. Probe keys are
        always removed afterwards.
        """
        size = self.used_bytes
        written: list[str] = []
        try:
            for i in range(_PROBE_MAX_BLOCKS):
                key = f"{_PROBE_KEY}{i}"
                self.set_item(key, _PROBE_BLOCK)
                written.append(key)
                size += len(key) + len(_PROBE_BLOCK)
        except StorageQuotaExceededError:
            logger.debug("storage_probe_complete", extra={"capacity_bytes": size})
            return size
        finally:
            for key in written:
                self.remove_item(key)
        return None
