"""Period filtering for transaction lists and period totals."""

import enum
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo

from serendipia.config import settings

logger = logging.getLogger(__name__)


class FilterPeriod(str, enum.Enum):
    all = "all"
    today = "today"
    week = "week"
    month = "month"
    custom = "custom"


PERIOD_LABELS = {
    FilterPeriod.all: "All time",
    FilterPeriod.today: "Today",
    FilterPeriod.week: "This week",
    FilterPeriod.month: "This month",
    FilterPeriod.custom: "Custom range",
}


@dataclass(frozen=True)
class DateRange:
    """Inclusive on both ends."""
    start_date: date
    end_date: date

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


def reference_today(tz_name: Optional[str] = None) -> date:
    """Current calendar date in the reference timezone."""
    return datetime.now(ZoneInfo(tz_name or settings.reference_timezone)).date()


def parse_period(value) -> FilterPeriod:
    """Coerce a raw period value; anything unknown means all-time."""
    if isinstance(value, FilterPeriod):
        return value
    try:
        return FilterPeriod(str(value).strip().lower())
    except ValueError:
        logger.debug(f"Unknown filter period {value!r}, using 'all'")
        return FilterPeriod.all


def parse_day(value) -> Optional[date]:
    """Read a YYYY-MM-DD value (or date/datetime). Returns None when unreadable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def build_custom_range(start, end) -> Optional[DateRange]:
    start_date = parse_day(start)
    end_date = parse_day(end)
    if start_date is None or end_date is None:
        return None
    return DateRange(start_date, end_date)


def resolve_range(
    period: FilterPeriod,
    today: date,
    custom: Optional[DateRange] = None,
    week_start: int = 0,
) -> Optional[DateRange]:
    """
    Window for a period relative to `today`.

    Returns None for all-time, and for a custom period with no range, which
    both mean "no filtering".
    """
    if period == FilterPeriod.today:
        return DateRange(today, today)
    if period == FilterPeriod.week:
        offset = (today.weekday() - week_start) % 7
        start = today - timedelta(days=offset)
        return DateRange(start, start + timedelta(days=6))
    if period == FilterPeriod.month:
        start = today.replace(day=1)
        if start.month == 12:
            next_month = date(start.year + 1, 1, 1)
        else:
            next_month = date(start.year, start.month + 1, 1)
        return DateRange(start, next_month - timedelta(days=1))
    if period == FilterPeriod.custom:
        return custom
    return None


def filter_transactions(
    transactions: Iterable,
    period,
    today: Optional[date] = None,
    custom: Optional[DateRange] = None,
    week_start: Optional[int] = None,
    tz_name: Optional[str] = None,
) -> List:
    """
    Keep the transactions whose date falls inside the period window.

    Never raises for bad input: unknown periods behave as all-time, an
    inverted custom range yields an empty list, and transactions with an
    unreadable date are left out of any bounded window.
    """
    period = parse_period(period)
    if week_start is None:
        week_start = settings.week_start_day
    if today is None and period != FilterPeriod.all:
        today = reference_today(tz_name)

    window = resolve_range(period, today, custom, week_start) if period != FilterPeriod.all else None
    if window is None:
        return list(transactions)
    if window.start_date > window.end_date:
        return []

    result = []
    for txn in transactions:
        day = parse_day(getattr(txn, "date", None))
        if day is None:
            logger.warning(f"Skipping transaction {getattr(txn, 'id', '?')} with unreadable date")
            continue
        if window.contains(day):
            result.append(txn)
    return result


def describe_period(period, custom: Optional[DateRange] = None) -> str:
    period = parse_period(period)
    if period == FilterPeriod.custom:
        if custom is None:
            return PERIOD_LABELS[FilterPeriod.all]
        return f"Custom range: {custom.start_date.strftime('%d/%m/%Y')} - {custom.end_date.strftime('%d/%m/%Y')}"
    return PERIOD_LABELS[period]