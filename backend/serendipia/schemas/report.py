"""
Report schemas consumed by the document renderer.
"""

from pydantic import BaseModel
from datetime import datetime
from decimal import Decimal
from typing import List

from serendipia.schemas.summary import FinancialSummary


class ReportRow(BaseModel):
    date: str
    description: str
    category: str
    payment_methods: str
    amount: str


class FinancialReport(BaseModel):
    title: str
    period_label: str
    generated_at: datetime
    exchange_rate: Decimal
    summary: FinancialSummary
    income_and_adjustments: List[ReportRow]
    expenses: List[ReportRow]
