"""Tests for calendar date helpers."""
from datetime import date, datetime

import pytest

from src.data_layer.exceptions import InvalidArgumentError
from src.nutrition.dates import add_days, date_range, month_start, parse_date, week_start


class TestDates:
    def test_parse_date(self):
        assert parse_date("2024-03-04") == date(2024, 3, 4)
        assert parse_date(date(2024, 3, 4)) == date(2024, 3, 4)
        assert parse_date(datetime(2024, 3, 4, 23, 59)) == date(2024, 3, 4)

    def test_parse_invalid_date(self):
        with pytest.raises(InvalidArgumentError, match="03/04/2024"):
            parse_date("03/04/2024")
        with pytest.raises(InvalidArgumentError):
            parse_date("2024-13-45")

    def test_add_days_crosses_month(self):
        assert add_days("2024-02-28", 2) == date(2024, 3, 1)
        assert add_days(date(2024, 3, 1), -1) == date(2024, 2, 29)

    def test_date_range_inclusive(self):
        days = date_range("2024-03-04", "2024-03-06")
        assert days == [date(2024, 3, 4), date(2024, 3, 5), date(2024, 3, 6)]
        assert date_range("2024-03-06", "2024-03-04") == []

    def test_week_start_is_monday(self):
        assert week_start("2024-03-10") == date(2024, 3, 4)
        assert week_start("2024-03-04") == date(2024, 3, 4)

    def test_month_start(self):
        assert month_start("2024-03-17") == date(2024, 3, 1)
