"""
Financial summary schemas.

Balances are cumulative over every transaction the owner has. Period fields
only cover the active filter window.
"""

from decimal import Decimal
from pydantic import BaseModel, Field


ZERO = Decimal("0")


class BsSummary(BaseModel):
    period_income: Decimal = Field(
        ZERO,
        description="Income in the window. Adjustments are included only when "
                    "adjustments_in_period_income is true.",
    )
    period_expenses: Decimal = ZERO
    cash_balance: Decimal = ZERO
    bank_balance: Decimal = ZERO
    total_balance: Decimal = ZERO


class UsdSummary(BaseModel):
    period_income: Decimal = Field(
        ZERO,
        description="Income in the window. Adjustments are included only when "
                    "adjustments_in_period_income is true.",
    )
    period_expenses: Decimal = ZERO
    cash_balance: Decimal = ZERO
    digital_balance: Decimal = ZERO
    total_balance: Decimal = ZERO


class FinancialSummary(BaseModel):
    bs: BsSummary = Field(default_factory=BsSummary)
    usd: UsdSummary = Field(default_factory=UsdSummary)
    adjustments_in_period_income: bool = False
