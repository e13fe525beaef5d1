"""Custom exceptions for the finance backend."""

from typing import Dict


class SerendipiaError(Exception):
    """Base exception for application errors"""
    pass


class CatalogError(SerendipiaError):
    """Malformed payment-method catalog (programmer error)"""
    pass


class TransactionValidationError(SerendipiaError):
    """Transaction rejected at entry time"""

    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))


class TransactionNotFoundError(SerendipiaError):
    """Transaction missing or owned by someone else"""

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id} not found")


class LegacyRecordError(SerendipiaError):
    """Legacy export record that cannot be migrated"""
    pass


class AnalysisUnavailableError(SerendipiaError):
    """AI analysis could not be produced; the caller may retry"""
    pass
