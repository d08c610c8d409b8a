"""Unit tests for Message model."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from telexport.models import Message


def test_message_from_snake_case_item():
    """Test a raw list item maps onto the model."""
    message = Message.from_api(
        {
            "sid": "SM123",
            "from": "+15550001111",
            "to": "+15550002222",
            "date_sent": "Mon, 01 Jan 2024 10:00:00 +0000",
            "status": "delivered",
            "direction": "outbound-api",
            "error_code": None,
            "error_message": None,
            "body": "  padded body  ",
            "num_segments": "2",
            "price": "-0.00750",
            "price_unit": "USD",
        }
    )
    assert message.sid == "SM123"
    assert message.from_number == "+15550001111"
    assert message.to_number == "+15550002222"
    assert message.num_segments == 2
    assert message.price == Decimal("-0.00750")
    assert message.error_code is None
    # Bodies are kept verbatim
    assert message.body == "  padded body  "


def test_message_from_camel_case_item():
    message = Message.from_api(
        {
            "sid": "SM9",
            "dateSent": "2024-01-02T00:00:00Z",
            "numSegments": 3,
            "errorCode": 30007,
            "errorMessage": "Carrier violation",
            "priceUnit": "EUR",
        }
    )
    assert message.date_sent == "2024-01-02T00:00:00Z"
    assert message.num_segments == 3
    assert message.error_code == 30007
    assert message.error_message == "Carrier violation"
    assert message.price_unit == "EUR"


def test_message_null_fields_use_defaults():
    """Test unbilled or partial items fall back to defaults."""
    message = Message.from_api(
        {"sid": "SM1", "price": None, "num_segments": "", "error_code": "", "body": None}
    )
    assert message.price == Decimal("0")
    assert message.num_segments == 0
    assert message.error_code is None
    assert message.body == ""
    assert message.from_number == ""
    assert message.price_unit == "USD"


def test_message_string_error_code_coerced():
    assert Message.from_api({"error_code": "30003"}).error_code == 30003


def test_message_to_row_uses_api_names():
    message = Message.from_api(
        {"sid": "SM1", "from": "+1", "to": "+2", "price": "-0.0075", "num_segments": 1}
    )
    row = message.to_row()

    assert row["from"] == "+1"
    assert row["to"] == "+2"
    assert row["price"] == "-0.0075"
    assert row["num_segments"] == 1
    assert "from_number" not in row
    assert list(row)[0] == "sid"


def test_message_frozen():
    message = Message(sid="SM1")
    with pytest.raises(ValidationError):
        message.sid = "SM2"  # type: ignore[misc]


def test_message_populate_by_name():
    message = Message(from_number="+1", to_number="+2")
    assert message.from_number == "+1"
    assert message.to_number == "+2"
