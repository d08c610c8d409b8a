"""Single page returned by a paginated data source."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Page(BaseModel):
    """Records from one request plus the pagination indicator."""

    records: list[Any] = Field(default_factory=list)
    has_more: bool = False
    next_cursor: str | None = None

    @property
    def count(self) -> int:
        return len(self.records)

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)
