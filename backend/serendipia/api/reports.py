"""
Report API endpoints.
"""

from datetime import date
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from serendipia.config import settings
from serendipia.dependencies import get_db, get_owner_id, get_period_query, get_today, PeriodQuery
from serendipia.models.exchange_rate import get_current_rate
from serendipia.schemas.report import FinancialReport
from serendipia.services import summary_service
from serendipia.services.period_filter import filter_transactions
from serendipia.services.report_service import build_report
from serendipia.services.transaction_service import load_snapshot

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/financial", response_model=FinancialReport)
def get_financial_report(
    period: PeriodQuery = Depends(get_period_query),
    today: date = Depends(get_today),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """Summary plus income/adjustment and expense rows for the period, ready to render"""
    transactions = load_snapshot(db, owner_id)
    filtered = filter_transactions(
        transactions, period.period, today=today, custom=period.custom, week_start=settings.week_start_day
    )
    summary = summary_service.aggregate(
        transactions, filtered, adjustments_as_income=settings.adjustments_count_as_income
    )
    return build_report(filtered, summary, period.period, period.custom, get_current_rate(db))
