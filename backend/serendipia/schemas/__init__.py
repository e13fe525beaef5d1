"""
Pydantic schemas package.
"""

from serendipia.schemas.transaction import (
    PaymentPartIn,
    PaymentPartResponse,
    TransactionBase,
    TransactionCreate,
    TransactionUpdate,
    TransactionResponse,
    TransactionListResponse,
    LegacyImportRequest,
    LegacyImportResponse,
)
from serendipia.schemas.summary import BsSummary, UsdSummary, FinancialSummary
from serendipia.schemas.dashboard import (
    BalancePoint,
    CategoryTotal,
    DashboardKpis,
    MonthFlowPoint,
    SignificantTransaction,
)
from serendipia.schemas.exchange_rate import ExchangeRateResponse, ExchangeRateUpdate
from serendipia.schemas.report import FinancialReport, ReportRow
from serendipia.schemas.analysis import AnalysisRequest, FinancialAnalysis

__all__ = [
    "PaymentPartIn",
    "PaymentPartResponse",
    "TransactionBase",
    "TransactionCreate",
    "TransactionUpdate",
    "TransactionResponse",
    "TransactionListResponse",
    "LegacyImportRequest",
    "LegacyImportResponse",
    "BsSummary",
    "UsdSummary",
    "FinancialSummary",
    "BalancePoint",
    "CategoryTotal",
    "DashboardKpis",
    "MonthFlowPoint",
    "SignificantTransaction",
    "ExchangeRateResponse",
    "ExchangeRateUpdate",
    "FinancialReport",
    "ReportRow",
    "AnalysisRequest",
    "FinancialAnalysis",
]
