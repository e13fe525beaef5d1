"""
Transaction schemas.
"""

import datetime
from pydantic import BaseModel, Field
from typing import Optional, List
from decimal import Decimal

from serendipia.models.payment_method import Currency
from serendipia.models.transaction import TransactionType


class PaymentPartIn(BaseModel):
    method: str
    amount: Decimal


class PaymentPartResponse(BaseModel):
    method: str
    amount: Decimal

    class Config:
        from_attributes = True


class TransactionBase(BaseModel):
    description: str
    type: TransactionType
    currency: Currency
    date: datetime.date
    payment_methods: List[PaymentPartIn]
    category: Optional[str] = None
    notes: Optional[str] = None


class TransactionCreate(TransactionBase):
    amount: Optional[Decimal] = None  # Derived from unit_price * quantity when omitted
    unit_price: Optional[Decimal] = None
    quantity: Decimal = Decimal("1")


class TransactionUpdate(BaseModel):
    description: Optional[str] = None
    type: Optional[TransactionType] = None
    currency: Optional[Currency] = None
    amount: Optional[Decimal] = None
    unit_price: Optional[Decimal] = None
    quantity: Optional[Decimal] = None
    date: Optional[datetime.date] = None
    payment_methods: Optional[List[PaymentPartIn]] = None
    category: Optional[str] = None
    notes: Optional[str] = None


class TransactionResponse(BaseModel):
    id: str
    owner_id: str
    description: str
    type: TransactionType
    currency: Currency
    amount: Decimal
    unit_price: Optional[Decimal]
    quantity: Decimal
    date: datetime.date
    payment_methods: List[PaymentPartResponse]
    category: Optional[str]
    notes: Optional[str]
    created_at: datetime.datetime
    updated_at: datetime.datetime

    class Config:
        from_attributes = True


class TransactionListResponse(BaseModel):
    items: list[TransactionResponse]
    total: int
    page: int
    pages: int


class LegacyImportRequest(BaseModel):
    records: List[dict] = Field(..., min_length=1)


class LegacyImportResponse(BaseModel):
    imported: int
    skipped: int
    errors: List[str]
    unrecognized_methods: List[str]
    catalog_version: int
