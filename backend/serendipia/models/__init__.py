"""
Database models package.
"""

from serendipia.models.payment_method import (
    AccountType,
    Currency,
    PaymentMethod,
    PaymentMethodOption,
    PaymentMethodCatalog,
    DEFAULT_CATALOG,
    build_catalog,
)
from serendipia.models.transaction import Transaction, TransactionType, PaymentPart
from serendipia.models.exchange_rate import ExchangeRate, get_or_create_exchange_rate, get_current_rate

__all__ = [
    "AccountType",
    "Currency",
    "PaymentMethod",
    "PaymentMethodOption",
    "PaymentMethodCatalog",
    "DEFAULT_CATALOG",
    "build_catalog",
    "Transaction",
    "TransactionType",
    "PaymentPart",
    "ExchangeRate",
    "get_or_create_exchange_rate",
    "get_current_rate",
]
