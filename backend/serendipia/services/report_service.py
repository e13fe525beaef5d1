"""Report data for the document renderer."""

import re
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from serendipia.config import settings
from serendipia.models.payment_method import PaymentMethodCatalog, DEFAULT_CATALOG
from serendipia.models.transaction import TransactionType
from serendipia.schemas.report import FinancialReport, ReportRow
from serendipia.schemas.summary import FinancialSummary
from serendipia.services.period_filter import DateRange, describe_period, parse_day
from serendipia.services.summary_service import read_amount, read_currency, read_type, split_by_type

REPORT_TITLE = "Financial Report"
LABEL_SUFFIX = re.compile(r"\s*\([\w.]+\)")


def format_amount(value: Decimal, currency_code: str) -> str:
    """12345.6 -> '12.345,60 Bs.' (Venezuelan grouping)."""
    text = f"{value:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{text} {currency_code}"


def payment_methods_text(txn, catalog: PaymentMethodCatalog = DEFAULT_CATALOG) -> str:
    parts = getattr(txn, "payment_methods", None) or []
    if not parts:
        return "N/A"
    rendered = []
    for part in parts:
        option = catalog.get(part.method)
        label = LABEL_SUFFIX.sub("", option.label) if option else str(part.method)
        amount = read_amount(part.amount) or Decimal("0")
        rendered.append(f"{label} ({format_amount(amount, '').strip()})")
    return ", ".join(rendered)


def _row(txn, catalog: PaymentMethodCatalog) -> ReportRow:
    day = parse_day(txn.date)
    currency = read_currency(txn.currency)
    amount = read_amount(txn.amount) or Decimal("0")
    sign = "-" if read_type(txn.type) == TransactionType.expense else ""
    return ReportRow(
        date=day.strftime("%d/%m/%Y") if day else "",
        description=txn.description or "",
        category=txn.category or "-",
        payment_methods=payment_methods_text(txn, catalog),
        amount=f"{sign}{format_amount(amount, currency.value if currency else '')}".strip(),
    )


def build_report(
    period_filtered: Sequence,
    summary: FinancialSummary,
    period,
    custom: Optional[DateRange],
    rate: Decimal,
    catalog: PaymentMethodCatalog = DEFAULT_CATALOG,
    generated_at: Optional[datetime] = None,
) -> FinancialReport:
    income_and_adjustments, expenses = split_by_type(period_filtered)
    return FinancialReport(
        title=f"{settings.app_name} - {REPORT_TITLE}",
        period_label=describe_period(period, custom),
        generated_at=generated_at or datetime.now(ZoneInfo(settings.reference_timezone)),
        exchange_rate=rate,
        summary=summary,
        income_and_adjustments=[_row(t, catalog) for t in income_and_adjustments],
        expenses=[_row(t, catalog) for t in expenses],
    )
