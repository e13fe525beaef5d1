from datetime import date
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from serendipia.config import settings
from serendipia.dependencies import get_db, get_owner_id, get_today
from serendipia.errors import AnalysisUnavailableError
from serendipia.models.exchange_rate import get_current_rate
from serendipia.schemas.analysis import AnalysisRequest, FinancialAnalysis
from serendipia.services import analysis_service
from serendipia.services.period_filter import build_custom_range, filter_transactions
from serendipia.services.transaction_service import load_snapshot

router = APIRouter(prefix="/analysis", tags=["analysis"])


@router.post("", response_model=FinancialAnalysis)
async def analyze(
    request: AnalysisRequest,
    today: date = Depends(get_today),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """AI analysis of the owner's transactions in a period. 503 means retry later."""
    transactions = filter_transactions(
        load_snapshot(db, owner_id),
        request.period,
        today=today,
        custom=build_custom_range(request.start_date, request.end_date),
        week_start=settings.week_start_day,
    )
    if not transactions:
        raise HTTPException(status_code=400, detail="No transactions to analyze in this period")

    try:
        return await analysis_service.analyze_transactions(
            transactions,
            request.analysis_type,
            get_current_rate(db),
            today,
            custom_prompt=request.custom_prompt,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AnalysisUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
