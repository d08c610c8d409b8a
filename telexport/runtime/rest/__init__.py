"""REST transport and LaML list sources."""

from .config import API_VERSION_PATH, DEFAULT_PAGE_SIZE, LIST_RESOURCES
from .http import HTTPClient
from .source import LamlListSource, LamlMessagesSource

__all__ = [
    "HTTPClient",
    "LamlListSource",
    "LamlMessagesSource",
    "API_VERSION_PATH",
    "DEFAULT_PAGE_SIZE",
    "LIST_RESOURCES",
]
