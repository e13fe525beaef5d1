"""
FastAPI dependencies.
"""

from dataclasses import dataclass
from datetime import date
from typing import Generator, Optional
from fastapi import Header, HTTPException, Query
from sqlalchemy.orm import Session
from serendipia.config import settings
from serendipia.database import SessionLocal
from serendipia.services.period_filter import (
    DateRange,
    FilterPeriod,
    build_custom_range,
    parse_period,
    reference_today,
)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for getting database sessions.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_owner_id(x_owner_id: Optional[str] = Header(None)) -> str:
    """
    Owner of the request, set by the authenticating proxy.
    Every transaction read and write is scoped to it.
    """
    if not x_owner_id or not x_owner_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-Owner-Id header")
    return x_owner_id.strip()


@dataclass(frozen=True)
class PeriodQuery:
    period: FilterPeriod
    custom: Optional[DateRange]


def get_period_query(
    period: str = Query("all", description="all, today, week, month or custom"),
    start_date: Optional[str] = Query(None, description="YYYY-MM-DD, custom period only"),
    end_date: Optional[str] = Query(None, description="YYYY-MM-DD, custom period only"),
) -> PeriodQuery:
    """Unknown periods fall back to all-time instead of failing the request."""
    return PeriodQuery(parse_period(period), build_custom_range(start_date, end_date))


def get_today() -> date:
    """Today in the reference timezone."""
    return reference_today(settings.reference_timezone)
