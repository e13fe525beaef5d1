from pydantic import BaseModel, Field
from decimal import Decimal
from datetime import datetime
from typing import Optional


class ExchangeRateResponse(BaseModel):
    rate: Decimal
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ExchangeRateUpdate(BaseModel):
    rate: Decimal = Field(..., gt=0)
