"""Message record model."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# API field name -> alternative camelCase spelling seen in proxied payloads
_FIELD_ALIASES = {
    "sid": "sid",
    "from": "from",
    "to": "to",
    "date_sent": "dateSent",
    "status": "status",
    "direction": "direction",
    "error_code": "errorCode",
    "error_message": "errorMessage",
    "body": "body",
    "num_segments": "numSegments",
    "price": "price",
    "price_unit": "priceUnit",
}


class Message(BaseModel):
    """One message as returned by the Messages list endpoint."""

    sid: str = ""
    from_number: str = Field("", alias="from")
    to_number: str = Field("", alias="to")
    date_sent: str = ""
    status: str = ""
    direction: str = ""
    error_code: int | None = None
    error_message: str | None = None
    body: str = ""
    num_segments: int = 0
    price: Decimal = Decimal("0")
    price_unit: str = "USD"

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v: Any) -> Any:
        """Unbilled messages come back with a null or empty price."""
        if v is None or v == "":
            return Decimal("0")
        return v

    @field_validator("num_segments", mode="before")
    @classmethod
    def coerce_segments(cls, v: Any) -> Any:
        if v is None or v == "":
            return 0
        return v

    @field_validator("error_code", mode="before")
    @classmethod
    def coerce_error_code(cls, v: Any) -> Any:
        if v == "":
            return None
        return v

    @classmethod
    def from_api(cls, record: dict[str, Any]) -> Message:
        """Build from a raw API item, accepting snake_case or camelCase keys.

        Missing or null string fields fall back to the model defaults.
        """
        values: dict[str, Any] = {}
        for key, alt in _FIELD_ALIASES.items():
            value = record.get(key)
            if value is None:
                value = record.get(alt)
            if value is not None:
                values[key] = value
        return cls.model_validate(values)

    def to_row(self) -> dict[str, Any]:
        """Flatten to a CSV-friendly dict keyed by API field names."""
        return self.model_dump(mode="json", by_alias=True)

    model_config = ConfigDict(frozen=True, populate_by_name=True)
