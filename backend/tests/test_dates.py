from datetime import date

import pytest

from savings_ledger.services.dates import format_date, parse_date, require_date
from savings_ledger.services.errors import MalformedDate


def test_parses_iso_dates():
    assert parse_date("2026-01-05") == date(2026, 1, 5)


def test_accepts_unpadded_fields_and_trailing_text():
    assert parse_date("2026-1-5") == date(2026, 1, 5)
    assert parse_date("2026-01-05T10:30:00") == date(2026, 1, 5)
    assert parse_date(" 2026-01-05") == date(2026, 1, 5)


def test_out_of_range_fields_roll_over():
    assert parse_date("2024-13-01") == date(2025, 1, 1)
    assert parse_date("2024-02-30") == date(2024, 3, 1)
    assert parse_date("2024-03-00") == date(2024, 2, 29)


@pytest.mark.parametrize("raw", ["", None, "not a date", "2026/01/05", "05-01", "0000-00-01"])
def test_unparseable_values_return_none(raw):
    assert parse_date(raw) is None


def test_require_date_raises_malformed_date():
    with pytest.raises(MalformedDate) as exc:
        require_date("yesterday")
    assert exc.value.value == "yesterday"
    assert isinstance(exc.value, ValueError)


def test_format_date_is_zero_padded():
    assert format_date(date(2026, 3, 7)) == "2026-03-07"
