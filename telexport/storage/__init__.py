"""Session-scoped storage."""

from .session_cache import DEFAULT_QUOTA_BYTES, SessionCache

__all__ = ["SessionCache", "DEFAULT_QUOTA_BYTES"]
