from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from serendipia.dependencies import get_db
from serendipia.models.exchange_rate import get_or_create_exchange_rate
from serendipia.schemas.exchange_rate import ExchangeRateResponse, ExchangeRateUpdate

router = APIRouter(prefix="/exchange-rate", tags=["exchange-rate"])


@router.get("", response_model=ExchangeRateResponse)
def get_exchange_rate(db: Session = Depends(get_db)):
    return get_or_create_exchange_rate(db)


@router.put("", response_model=ExchangeRateResponse)
def update_exchange_rate(update: ExchangeRateUpdate, db: Session = Depends(get_db)):
    exchange_rate = get_or_create_exchange_rate(db)
    exchange_rate.rate = update.rate
    db.commit()
    db.refresh(exchange_rate)
    return exchange_rate
