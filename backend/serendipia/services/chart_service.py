"""
Chart series built from the full transaction set.

Every value is expressed in USD, the reporting currency: Bs. amounts are
divided by the exchange rate (Bs. per USD). Without a usable rate, Bs.
amounts contribute nothing.
"""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, Sequence, Tuple

from serendipia.models.payment_method import Currency
from serendipia.models.transaction import TransactionType
from serendipia.schemas.dashboard import (
    BalancePoint,
    CategoryTotal,
    DashboardKpis,
    MonthFlowPoint,
    SignificantTransaction,
)
from serendipia.schemas.summary import FinancialSummary
from serendipia.services.period_filter import parse_day
from serendipia.services.summary_service import (
    counts_as_income,
    read_amount,
    read_currency,
    read_type,
    signed_amount,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
UNCATEGORIZED = "Uncategorized"
MONTH_ABBR = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

YearMonth = Tuple[int, int]


def usable_rate(rate) -> Optional[Decimal]:
    """The rate as a positive Decimal, or None if it cannot convert anything."""
    if rate is None:
        return None
    try:
        value = rate if isinstance(rate, Decimal) else Decimal(str(rate))
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite() or value <= 0:
        return None
    return value


def to_reporting_currency(amount: Decimal, currency: Currency, rate) -> Decimal:
    if currency == Currency.USD:
        return amount
    converted_rate = usable_rate(rate)
    if converted_rate is None:
        logger.debug(f"No usable exchange rate ({rate!r}); {currency.value} amount counts as zero")
        return ZERO
    return amount / converted_rate


def _to_float(value: Decimal) -> float:
    return float(round(value, 2))


def month_key(year_month: YearMonth) -> str:
    return f"{year_month[0]}-{year_month[1]:02d}"


def month_label(year_month: YearMonth) -> str:
    return f"{MONTH_ABBR[year_month[1] - 1]} {year_month[0]}"


def trailing_months(today: date, months: int = 12) -> List[YearMonth]:
    """The `months` calendar months ending with today's month, oldest first."""
    result = []
    year, month = today.year, today.month
    for _ in range(max(months, 0)):
        result.append((year, month))
        month -= 1
        if month == 0:
            month = 12
            year -= 1
    result.reverse()
    return result


def _converted(txn) -> Optional[Tuple[TransactionType, date, Decimal, Currency]]:
    """Readable (type, date, amount, currency) of a transaction, or None if malformed."""
    txn_type = read_type(getattr(txn, "type", None))
    day = parse_day(getattr(txn, "date", None))
    amount = read_amount(getattr(txn, "amount", None))
    currency = read_currency(getattr(txn, "currency", None))
    if txn_type is None or day is None or amount is None or currency is None:
        logger.warning(f"Skipping transaction {getattr(txn, 'id', '?')} in chart series: malformed record")
        return None
    return txn_type, day, amount, currency


def monthly_flow(
    transactions: Sequence,
    rate,
    today: date,
    months: int = 12,
    adjustments_as_income: bool = False,
) -> List[MonthFlowPoint]:
    """Income vs expenses per month over the trailing window, zero-filled."""
    window = trailing_months(today, months)
    buckets: Dict[YearMonth, Dict[str, Decimal]] = {ym: {"income": ZERO, "expenses": ZERO} for ym in window}

    for txn in transactions:
        fields = _converted(txn)
        if fields is None:
            continue
        txn_type, day, amount, currency = fields
        bucket = buckets.get((day.year, day.month))
        if bucket is None:
            continue
        value = to_reporting_currency(amount, currency, rate)
        if txn_type == TransactionType.expense:
            bucket["expenses"] += value
        elif counts_as_income(txn_type, adjustments_as_income):
            bucket["income"] += value

    return [
        MonthFlowPoint(
            month=month_key(ym),
            label=month_label(ym),
            income=_to_float(buckets[ym]["income"]),
            expenses=_to_float(buckets[ym]["expenses"]),
            net=_to_float(buckets[ym]["income"] - buckets[ym]["expenses"]),
        )
        for ym in window
    ]


def balance_evolution(
    transactions: Sequence,
    rate,
    today: date,
    months: int = 12,
) -> List[BalancePoint]:
    """
    Running combined balance at the end of each month in the trailing window.

    Everything dated before the window is folded into the starting balance.
    Transactions dated after today's month are ignored.
    """
    window = trailing_months(today, months)
    if not window:
        return []
    first = window[0]
    changes: Dict[YearMonth, Decimal] = defaultdict(lambda: ZERO)
    running = ZERO

    for txn in transactions:
        fields = _converted(txn)
        if fields is None:
            continue
        txn_type, day, amount, currency = fields
        value = signed_amount(txn_type, to_reporting_currency(amount, currency, rate))
        ym = (day.year, day.month)
        if ym < first:
            running += value
        else:
            changes[ym] += value

    points = []
    for ym in window:
        running += changes[ym]
        points.append(BalancePoint(month=month_key(ym), label=month_label(ym), balance=_to_float(running)))
    return points


def category_breakdown(
    transactions: Sequence,
    rate,
    kind: TransactionType = TransactionType.expense,
) -> List[CategoryTotal]:
    """
    Totals per category for one transaction type, largest first.

    Missing or blank categories are grouped under "Uncategorized".
    """
    kind = read_type(kind) or TransactionType.expense
    totals: Dict[str, Decimal] = {}

    for txn in transactions:
        fields = _converted(txn)
        if fields is None or fields[0] != kind:
            continue
        _, _, amount, currency = fields
        name = (getattr(txn, "category", None) or "").strip() or UNCATEGORIZED
        totals[name] = totals.get(name, ZERO) + to_reporting_currency(amount, currency, rate)

    grand_total = sum(totals.values(), ZERO)
    return [
        CategoryTotal(
            category=name,
            amount=_to_float(amount),
            percent=round(float(amount / grand_total * 100), 1) if grand_total > 0 else 0.0,
        )
        for name, amount in sorted(totals.items(), key=lambda x: x[1], reverse=True)
    ]


def significant_transactions(transactions: Sequence, rate, limit: int = 5) -> List[SignificantTransaction]:
    """Largest transactions in the set by USD-equivalent magnitude."""
    ranked = []
    for txn in transactions:
        fields = _converted(txn)
        if fields is None:
            continue
        txn_type, day, amount, currency = fields
        ranked.append((to_reporting_currency(amount, currency, rate), txn, txn_type, day, amount, currency))

    ranked.sort(key=lambda row: row[0], reverse=True)
    return [
        SignificantTransaction(
            id=str(getattr(txn, "id", "")),
            date=day.isoformat(),
            description=getattr(txn, "description", "") or "",
            type=txn_type.value,
            currency=currency.value,
            amount=_to_float(amount),
            amount_usd=_to_float(usd),
        )
        for usd, txn, txn_type, day, amount, currency in ranked[:limit]
    ]


def dashboard_kpis(
    period_filtered: Sequence,
    summary: FinancialSummary,
    rate,
    adjustments_as_income: bool = False,
) -> DashboardKpis:
    """Period income/expenses in USD plus the combined current balance."""
    income = ZERO
    expenses = ZERO
    for txn in period_filtered:
        fields = _converted(txn)
        if fields is None:
            continue
        txn_type, _, amount, currency = fields
        value = to_reporting_currency(amount, currency, rate)
        if txn_type == TransactionType.expense:
            expenses += value
        elif counts_as_income(txn_type, adjustments_as_income):
            income += value

    total_balance = (
        to_reporting_currency(summary.bs.total_balance, Currency.BS, rate)
        + summary.usd.total_balance
    )
    usable = usable_rate(rate)

    return DashboardKpis(
        period_income_usd=_to_float(income),
        period_expenses_usd=_to_float(expenses),
        net_usd=_to_float(income - expenses),
        total_balance_usd=_to_float(total_balance),
        exchange_rate=float(usable) if usable is not None else 0.0,
        significant_transactions=significant_transactions(period_filtered, rate),
    )
