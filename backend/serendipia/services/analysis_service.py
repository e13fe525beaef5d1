import json
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from serendipia.ai.client import get_ai_client
from serendipia.ai.prompts import ANALYSIS_TASKS, FINANCIAL_ANALYSIS_SYSTEM, FINANCIAL_ANALYSIS_USER
from serendipia.config import settings
from serendipia.errors import AnalysisUnavailableError
from serendipia.models.transaction import TransactionType
from serendipia.schemas.analysis import FinancialAnalysis
from serendipia.services.chart_service import (
    category_breakdown,
    monthly_flow,
    to_reporting_currency,
)
from serendipia.services.period_filter import parse_day
from serendipia.services.summary_service import counts_as_income, read_amount, read_currency, read_type

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 20


def build_digest(
    transactions: Sequence,
    rate,
    today: date,
    months: int = 12,
    adjustments_as_income: bool = False,
) -> Dict[str, Any]:
    """Totals, category spending and monthly trend, all in USD. Income follows the dashboard rule for adjustments."""
    income = Decimal("0")
    expenses = Decimal("0")
    for txn in transactions:
        txn_type = read_type(getattr(txn, "type", None))
        amount = read_amount(getattr(txn, "amount", None))
        currency = read_currency(getattr(txn, "currency", None))
        if txn_type is None or amount is None or currency is None:
            continue
        value = to_reporting_currency(amount, currency, rate)
        if txn_type == TransactionType.expense:
            expenses += value
        elif counts_as_income(txn_type, adjustments_as_income):
            income += value

    spending = category_breakdown(transactions, rate, TransactionType.expense)
    flow = monthly_flow(transactions, rate, today, months, adjustments_as_income)
    trend = [point for point in flow if point.income or point.expenses]

    return {
        "total_transactions": len(transactions),
        "total_income_usd": float(round(income, 2)),
        "total_expenses_usd": float(round(expenses, 2)),
        "net_usd": float(round(income - expenses, 2)),
        "spending_by_category": {item.category: item.amount for item in spending},
        "monthly_trend": trend,
    }


def _transaction_lines(transactions: Sequence) -> str:
    lines = []
    for txn in list(transactions)[:SAMPLE_SIZE]:
        day = parse_day(getattr(txn, "date", None))
        txn_type = read_type(getattr(txn, "type", None))
        currency = read_currency(getattr(txn, "currency", None))
        category = f" [{txn.category}]" if getattr(txn, "category", None) else ""
        lines.append(
            f"- {day.isoformat() if day else '?'}: {getattr(txn, 'description', '')} "
            f"({txn_type.value if txn_type else '?'}): {getattr(txn, 'amount', '?')} "
            f"{currency.value if currency else '?'}{category}"
        )
    return "\n".join(lines) or "No transactions."


def _as_list(value) -> List[str]:
    if isinstance(value, list):
        return [str(item) for item in value if item]
    if isinstance(value, str) and value:
        return [value]
    return []


async def analyze_transactions(
    transactions: Sequence,
    analysis_type: str,
    rate,
    today: date,
    custom_prompt: Optional[str] = None,
) -> FinancialAnalysis:
    """
    Ask the AI provider for an analysis of the given transactions.

    Raises AnalysisUnavailableError when analysis is disabled, when the
    provider fails, or when its answer is not usable.
    """
    if not settings.ai_analysis_enabled:
        raise AnalysisUnavailableError("AI analysis is disabled")

    if analysis_type == "custom":
        if not (custom_prompt or "").strip():
            raise ValueError("custom analysis needs a prompt")
        task = custom_prompt.strip()
    else:
        task = ANALYSIS_TASKS.get(analysis_type, ANALYSIS_TASKS["summary"])

    digest = build_digest(
        transactions, rate, today, settings.trend_months, settings.adjustments_count_as_income
    )
    digest_for_prompt = dict(digest, monthly_trend=[p.model_dump() for p in digest["monthly_trend"]])

    user_prompt = FINANCIAL_ANALYSIS_USER.format(
        digest_json=json.dumps(digest_for_prompt, indent=2, ensure_ascii=False),
        sample_size=SAMPLE_SIZE,
        transactions=_transaction_lines(transactions),
        task=task,
    )

    client = get_ai_client()
    try:
        result = await client.complete_json(
            system_prompt=FINANCIAL_ANALYSIS_SYSTEM,
            user_prompt=user_prompt,
        )
    except Exception as e:
        logger.error(f"Financial analysis failed: {e}")
        raise AnalysisUnavailableError(f"Analysis service unavailable: {e}") from e

    summary = result.get("summary") if isinstance(result, dict) else None
    if not summary:
        raise AnalysisUnavailableError("Analysis service returned no summary")

    return FinancialAnalysis(
        summary=str(summary),
        insights=_as_list(result.get("insights")),
        recommendations=_as_list(result.get("recommendations")),
        spending_by_category=digest["spending_by_category"],
        monthly_trend=digest["monthly_trend"],
    )
