"""
Dashboard API endpoints.
"""

from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from serendipia.config import settings
from serendipia.dependencies import get_db, get_owner_id, get_period_query, get_today, PeriodQuery
from serendipia.models.exchange_rate import get_current_rate
from serendipia.models.transaction import TransactionType
from serendipia.schemas.dashboard import BalancePoint, CategoryTotal, DashboardKpis, MonthFlowPoint
from serendipia.schemas.summary import FinancialSummary
from serendipia.services import chart_service, summary_service
from serendipia.services.period_filter import filter_transactions
from serendipia.services.transaction_service import load_snapshot

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=FinancialSummary)
def get_financial_summary(
    period: PeriodQuery = Depends(get_period_query),
    today: date = Depends(get_today),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """
    Per-currency summary.
    Balances cover all history; period income/expenses cover the filter window.
    """
    transactions = load_snapshot(db, owner_id)
    filtered = filter_transactions(
        transactions, period.period, today=today, custom=period.custom, week_start=settings.week_start_day
    )
    return summary_service.aggregate(
        transactions, filtered, adjustments_as_income=settings.adjustments_count_as_income
    )


@router.get("/kpis", response_model=DashboardKpis)
def get_kpis(
    period: PeriodQuery = Depends(get_period_query),
    today: date = Depends(get_today),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """Period income/expenses/net and combined balance in USD, plus the largest transactions"""
    transactions = load_snapshot(db, owner_id)
    filtered = filter_transactions(
        transactions, period.period, today=today, custom=period.custom, week_start=settings.week_start_day
    )
    summary = summary_service.aggregate(
        transactions, filtered, adjustments_as_income=settings.adjustments_count_as_income
    )
    return chart_service.dashboard_kpis(
        filtered, summary, get_current_rate(db), adjustments_as_income=settings.adjustments_count_as_income
    )


@router.get("/monthly-flow", response_model=list[MonthFlowPoint])
def get_monthly_flow(
    months: int = Query(settings.trend_months, ge=1, le=36),
    today: date = Depends(get_today),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """Income vs expenses per month, USD equivalent. Returns: [{month, label, income, expenses, net}, ...]"""
    return chart_service.monthly_flow(
        load_snapshot(db, owner_id),
        get_current_rate(db),
        today,
        months,
        adjustments_as_income=settings.adjustments_count_as_income,
    )


@router.get("/balance-evolution", response_model=list[BalancePoint])
def get_balance_evolution(
    months: int = Query(settings.trend_months, ge=1, le=36),
    today: date = Depends(get_today),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """Running combined balance at each month end, USD equivalent"""
    return chart_service.balance_evolution(load_snapshot(db, owner_id), get_current_rate(db), today, months)


@router.get("/categories", response_model=list[CategoryTotal])
def get_category_breakdown(
    kind: TransactionType = Query(TransactionType.expense),
    period: PeriodQuery = Depends(get_period_query),
    today: date = Depends(get_today),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """Totals per category for expenses or income in the filter window"""
    filtered = filter_transactions(
        load_snapshot(db, owner_id), period.period, today=today, custom=period.custom,
        week_start=settings.week_start_day
    )
    return chart_service.category_breakdown(filtered, get_current_rate(db), kind)
