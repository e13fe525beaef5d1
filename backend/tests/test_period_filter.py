"""Tests for period filtering."""

from datetime import date, datetime
from types import SimpleNamespace

from serendipia.services.period_filter import (
    DateRange,
    FilterPeriod,
    build_custom_range,
    describe_period,
    filter_transactions,
    parse_day,
    parse_period,
    resolve_range,
)

TODAY = date(2026, 3, 18)  # Wednesday


def dated(*days):
    return [SimpleNamespace(id=str(i), date=day) for i, day in enumerate(days)]


def days_of(transactions):
    return [t.date for t in transactions]


class TestResolveRange:
    """Windows are computed from the given 'today', inclusive on both ends."""

    def test_today(self):
        assert resolve_range(FilterPeriod.today, TODAY) == DateRange(TODAY, TODAY)

    def test_week_starts_monday(self):
        window = resolve_range(FilterPeriod.week, TODAY, week_start=0)
        assert window == DateRange(date(2026, 3, 16), date(2026, 3, 22))

    def test_week_on_sunday_belongs_to_previous_monday(self):
        window = resolve_range(FilterPeriod.week, date(2026, 3, 22), week_start=0)
        assert window.start_date == date(2026, 3, 16)

    def test_week_on_monday(self):
        window = resolve_range(FilterPeriod.week, date(2026, 3, 16), week_start=0)
        assert window.start_date == date(2026, 3, 16)

    def test_week_starting_sunday(self):
        window = resolve_range(FilterPeriod.week, TODAY, week_start=6)
        assert window == DateRange(date(2026, 3, 15), date(2026, 3, 21))

    def test_month(self):
        assert resolve_range(FilterPeriod.month, TODAY) == DateRange(date(2026, 3, 1), date(2026, 3, 31))

    def test_month_february_leap_year(self):
        window = resolve_range(FilterPeriod.month, date(2028, 2, 10))
        assert window.end_date == date(2028, 2, 29)

    def test_december(self):
        window = resolve_range(FilterPeriod.month, date(2026, 12, 31))
        assert window == DateRange(date(2026, 12, 1), date(2026, 12, 31))

    def test_all_has_no_window(self):
        assert resolve_range(FilterPeriod.all, TODAY) is None

    def test_custom_without_range_has_no_window(self):
        assert resolve_range(FilterPeriod.custom, TODAY, None) is None


class TestFilterTransactions:
    """Filtering never raises and keeps only transactions inside the window."""

    def test_all_keeps_everything(self):
        transactions = dated(date(2020, 1, 1), TODAY, "garbage")
        assert len(filter_transactions(transactions, "all", today=TODAY)) == 3

    def test_today(self):
        transactions = dated(date(2026, 3, 17), TODAY, date(2026, 3, 19))
        assert days_of(filter_transactions(transactions, "today", today=TODAY)) == [TODAY]

    def test_week_boundaries(self):
        transactions = dated(
            date(2026, 3, 15), date(2026, 3, 16), date(2026, 3, 22), date(2026, 3, 23)
        )
        result = filter_transactions(transactions, FilterPeriod.week, today=TODAY, week_start=0)
        assert days_of(result) == [date(2026, 3, 16), date(2026, 3, 22)]

    def test_month_boundaries(self):
        transactions = dated(date(2026, 2, 28), date(2026, 3, 1), date(2026, 3, 31), date(2026, 4, 1))
        result = filter_transactions(transactions, "month", today=TODAY)
        assert days_of(result) == [date(2026, 3, 1), date(2026, 3, 31)]

    def test_custom_is_inclusive(self):
        transactions = dated(date(2026, 1, 9), date(2026, 1, 10), date(2026, 1, 20), date(2026, 1, 21))
        custom = DateRange(date(2026, 1, 10), date(2026, 1, 20))
        result = filter_transactions(transactions, "custom", today=TODAY, custom=custom)
        assert days_of(result) == [date(2026, 1, 10), date(2026, 1, 20)]

    def test_inverted_custom_range_is_empty(self):
        transactions = dated(date(2026, 1, 15))
        custom = DateRange(date(2026, 1, 20), date(2026, 1, 10))
        assert filter_transactions(transactions, "custom", today=TODAY, custom=custom) == []

    def test_custom_without_range_keeps_everything(self):
        transactions = dated(date(2020, 1, 1), TODAY)
        assert len(filter_transactions(transactions, "custom", today=TODAY)) == 2

    def test_unknown_period_means_all(self):
        transactions = dated(date(2020, 1, 1), TODAY)
        assert len(filter_transactions(transactions, "fortnight", today=TODAY)) == 2

    def test_unreadable_dates_are_skipped(self):
        transactions = dated(TODAY, "not-a-date", None)
        assert days_of(filter_transactions(transactions, "today", today=TODAY)) == [TODAY]

    def test_string_and_datetime_dates(self):
        transactions = dated("2026-03-18", datetime(2026, 3, 18, 23, 59), "2026-03-17T10:00:00")
        assert len(filter_transactions(transactions, "today", today=TODAY)) == 2

    def test_preserves_order(self):
        transactions = dated(date(2026, 3, 20), date(2026, 3, 16), date(2026, 3, 18))
        result = filter_transactions(transactions, "week", today=TODAY, week_start=0)
        assert days_of(result) == [date(2026, 3, 20), date(2026, 3, 16), date(2026, 3, 18)]

    def test_empty_input(self):
        assert filter_transactions([], "month", today=TODAY) == []


class TestParsing:
    """Raw request values."""

    def test_parse_period(self):
        assert parse_period("WEEK") == FilterPeriod.week
        assert parse_period(None) == FilterPeriod.all
        assert parse_period("bogus") == FilterPeriod.all

    def test_parse_day(self):
        assert parse_day("2026-03-18") == TODAY
        assert parse_day("18/03/2026") is None
        assert parse_day(42) is None

    def test_build_custom_range_needs_both_ends(self):
        assert build_custom_range("2026-01-01", None) is None
        assert build_custom_range("2026-01-01", "2026-01-31") == DateRange(date(2026, 1, 1), date(2026, 1, 31))

    def test_describe_period(self):
        assert describe_period("month") == "This month"
        custom = DateRange(date(2026, 1, 1), date(2026, 1, 31))
        assert describe_period("custom", custom) == "Custom range: 01/01/2026 - 31/01/2026"
