"""
Tests for the reporting helpers.

These cover type classification, the day and month windows used by the
search and report endpoints, and the in-process aggregation.
"""
from datetime import date, datetime
from types import SimpleNamespace

import pytest

from expense_service.reporting import (
    classify_amount,
    day_window,
    month_window,
    parse_day,
    summarize,
)
from expense_service.reporting.periods import to_naive_utc


class TestClassifyAmount:
    """Income iff the amount is zero or positive."""

    @pytest.mark.parametrize("amount", [0, 0.01, 100, 1e9])
    def test_income(self, amount):
        assert classify_amount(amount) == "income"

    @pytest.mark.parametrize("amount", [-0.01, -1, -1e9])
    def test_expense(self, amount):
        assert classify_amount(amount) == "expense"


class TestDayWindow:

    def test_bounds(self):
        start, end = day_window(date(2024, 3, 5))
        assert start == datetime(2024, 3, 5, 0, 0, 0)
        assert end == datetime(2024, 3, 5, 23, 59, 59)

    def test_parse_plain_date(self):
        assert parse_day("2024-03-05") == date(2024, 3, 5)

    def test_parse_datetime_keeps_day(self):
        assert parse_day("2024-03-05T18:45:00") == date(2024, 3, 5)

    def test_parse_garbage(self):
        with pytest.raises(ValueError):
            parse_day("yesterday")


class TestMonthWindow:

    def test_thirty_one_day_month(self):
        assert month_window(2024, 3) == (datetime(2024, 3, 1), datetime(2024, 3, 31))

    def test_leap_february(self):
        assert month_window(2024, 2)[1] == datetime(2024, 2, 29)

    def test_common_february(self):
        assert month_window(2023, 2)[1] == datetime(2023, 2, 28)

    def test_december(self):
        assert month_window(2024, 12) == (datetime(2024, 12, 1), datetime(2024, 12, 31))

    def test_invalid_month(self):
        with pytest.raises(ValueError):
            month_window(2024, 13)


class TestSummarize:

    def _txn(self, amount, type=None):
        return SimpleNamespace(amount=amount, type=type or classify_amount(amount))

    def test_example_month(self):
        totals = summarize([self._txn(100), self._txn(-40)])
        assert totals.income == 100
        assert totals.expense == 40
        assert totals.transaction_count == 2

    def test_empty(self):
        totals = summarize([])
        assert (totals.income, totals.expense, totals.transaction_count) == (0, 0, 0)

    def test_zero_counts_as_income(self):
        totals = summarize([self._txn(0), self._txn(-5)])
        assert totals.income == 0
        assert totals.expense == 5

    def test_uses_stored_type(self):
        # A row whose stored type disagrees with its sign is summed by type
        totals = summarize([self._txn(-10, type="income")])
        assert totals.income == -10
        assert totals.expense == 0


def test_to_naive_utc():
    aware = datetime.fromisoformat("2024-03-05T10:00:00+02:00")
    assert to_naive_utc(aware) == datetime(2024, 3, 5, 8, 0, 0)
    naive = datetime(2024, 3, 5, 10, 0, 0)
    assert to_naive_utc(naive) is naive
