"""Tests for month-year token normalization."""

from datetime import datetime, timezone

import pytest

from app.domain.dates import format_month, normalize_end, normalize_start
from app.domain.errors import InvalidDateFormat, ValidationError


class TestNormalizeStart:
    def test_first_day_at_midnight_utc(self):
        assert normalize_start("07-2025") == datetime(2025, 7, 1, tzinfo=timezone.utc)

    def test_january(self):
        assert normalize_start("01-2024") == datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "token",
        [
            "13-2024",
            "00-2024",
            "--",
            "",
            "1-2024",
            "01-24",
            "2024-01",
            "01/2024",
            "01-2024\n",
            " 01-2024",
            "٠١-٢٠٢٤",
        ],
    )
    def test_rejects_malformed_tokens(self, token):
        with pytest.raises(InvalidDateFormat):
            normalize_start(token)


class TestNormalizeEnd:
    @pytest.mark.parametrize(
        "token, expected_day",
        [
            ("02-2024", 29),
            ("02-2023", 28),
            ("04-2024", 30),
            ("01-2024", 31),
            ("02-2000", 29),
            ("02-1900", 28),
        ],
    )
    def test_last_day_of_month(self, token, expected_day):
        month, year = int(token[:2]), int(token[3:])
        assert normalize_end(token) == datetime(
            year, month, expected_day, 23, 59, 59, tzinfo=timezone.utc
        )

    def test_december_stays_in_same_year(self):
        assert normalize_end("12-2024") == datetime(2024, 12, 31, 23, 59, 59, tzinfo=timezone.utc)

    def test_last_representable_month(self):
        assert normalize_end("12-9999").year == 9999

    def test_rejects_invalid_month(self):
        with pytest.raises(InvalidDateFormat):
            normalize_end("13-2024")

    def test_invalid_format_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            normalize_end("--")


def test_format_month_round_trips_start():
    assert format_month(normalize_start("03-2021")) == "03-2021"
