"""LaML REST API constants.

Centralizes the URL layout and list-resource settings used by the sources
so they can stay small and focused.
"""

from __future__ import annotations

API_VERSION_PATH = "/api/laml/2010-04-01"

DEFAULT_PAGE_SIZE = 1000
MAX_PAGE_SIZE = 1000

# List resource -> (JSON key holding the items, date filter parameter)
LIST_RESOURCES: dict[str, tuple[str, str]] = {
    "Messages": ("messages", "DateSent"),
    "Calls": ("calls", "StartTime"),
    "Faxes": ("faxes", "DateCreated"),
    "Recordings": ("recordings", "DateCreated"),
}


def list_url(space_url: str, project_id: str, resource: str) -> str:
    return f"https://{space_url}{API_VERSION_PATH}/Accounts/{project_id}/{resource}.json"


def page_url(space_url: str, next_page_uri: str) -> str:
    """Absolute URL for a ``next_page_uri``, which the API returns as a path."""
    if next_page_uri.startswith("http"):
        return next_page_uri
    return f"https://{space_url}{next_page_uri}"
