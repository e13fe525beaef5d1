"""Exchange rate model - a single persisted Bs. per USD value."""

from decimal import Decimal
from sqlalchemy import Column, Integer, Numeric, DateTime
from sqlalchemy.sql import func

from serendipia.config import settings
from serendipia.database import Base


class ExchangeRate(Base):
    """
    Current exchange rate.
    Singleton pattern - only one row with id=1.
    """
    __tablename__ = "exchange_rates"

    id = Column(Integer, primary_key=True, default=1)
    rate = Column(Numeric(14, 4), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


def get_or_create_exchange_rate(db) -> ExchangeRate:
    """Get the singleton rate row, creating it with the configured default if needed."""
    exchange_rate = db.query(ExchangeRate).filter(ExchangeRate.id == 1).first()
    if not exchange_rate:
        exchange_rate = ExchangeRate(id=1, rate=settings.default_exchange_rate)
        db.add(exchange_rate)
        db.commit()
        db.refresh(exchange_rate)
    return exchange_rate


def get_current_rate(db) -> Decimal:
    return Decimal(str(get_or_create_exchange_rate(db).rate))
