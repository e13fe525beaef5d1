"""
Dashboard schemas. Chart values are USD equivalents.
"""

from pydantic import BaseModel
from typing import List


class CategoryTotal(BaseModel):
    category: str
    amount: float
    percent: float


class MonthFlowPoint(BaseModel):
    month: str  # YYYY-MM
    label: str
    income: float
    expenses: float
    net: float


class BalancePoint(BaseModel):
    month: str
    label: str
    balance: float


class SignificantTransaction(BaseModel):
    id: str
    date: str
    description: str
    type: str
    currency: str
    amount: float
    amount_usd: float


class DashboardKpis(BaseModel):
    period_income_usd: float
    period_expenses_usd: float
    net_usd: float
    total_balance_usd: float
    exchange_rate: float
    significant_transactions: List[SignificantTransaction]
