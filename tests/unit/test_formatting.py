"""Unit tests for display helpers."""

import pytest

from telexport.utils import format_elapsed_time


@pytest.mark.parametrize(
    ("milliseconds", "expected"),
    [
        (0, "0s"),
        (3_000, "3s"),
        (59_999, "59s"),
        (123_000, "2m 3s"),
        (3_600_000, "1h 0m 0s"),
        (3_723_000, "1h 2m 3s"),
    ],
)
def test_format_elapsed_time(milliseconds, expected):
    assert format_elapsed_time(milliseconds) == expected
