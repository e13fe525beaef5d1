"""Service for rolling transactions up into per-currency balances and period totals."""

import logging
import math
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from serendipia.models.payment_method import (
    AccountType,
    Currency,
    PaymentMethodCatalog,
    DEFAULT_CATALOG,
)
from serendipia.models.transaction import TransactionType
from serendipia.schemas.summary import BsSummary, UsdSummary, FinancialSummary

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

BALANCE_INCREASING = (TransactionType.income, TransactionType.adjustment)


def read_amount(value) -> Optional[Decimal]:
    """
    Read a monetary value as a non-negative Decimal.

    Returns None for missing or non-numeric values. A negative value is a
    pre-negated expense from old data; its magnitude is used since the
    transaction type decides the sign.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    if amount < 0:
        logger.warning(f"Negative amount {amount} found, using its magnitude")
        amount = -amount
    return amount


def read_type(value) -> Optional[TransactionType]:
    if isinstance(value, TransactionType):
        return value
    try:
        return TransactionType(str(value).strip().lower())
    except ValueError:
        return None


def read_currency(value) -> Optional[Currency]:
    if isinstance(value, Currency):
        return value
    raw = str(value or "").strip().upper().rstrip(".")
    if raw == "BS":
        return Currency.BS
    if raw == "USD":
        return Currency.USD
    return None


def signed_amount(txn_type: TransactionType, amount: Decimal) -> Decimal:
    """Income and adjustments add to balances, expenses subtract."""
    return amount if txn_type in BALANCE_INCREASING else -amount


def counts_as_income(txn_type: TransactionType, adjustments_as_income: bool) -> bool:
    if txn_type == TransactionType.income:
        return True
    return adjustments_as_income and txn_type == TransactionType.adjustment


def split_by_type(transactions: Sequence) -> Tuple[List, List]:
    """Split into (income and adjustments, expenses) for list and report views."""
    income_and_adjustments = []
    expenses = []
    for txn in transactions:
        txn_type = read_type(getattr(txn, "type", None))
        if txn_type in BALANCE_INCREASING:
            income_and_adjustments.append(txn)
        elif txn_type == TransactionType.expense:
            expenses.append(txn)
    return income_and_adjustments, expenses


def _accumulate_balances(
    transactions: Iterable,
    catalog: PaymentMethodCatalog,
) -> Dict[Tuple[Currency, AccountType], Decimal]:
    balances = {
        (currency, account_type): ZERO
        for currency in Currency
        for account_type in catalog.account_types_for(currency)
    }

    for txn in transactions:
        txn_id = getattr(txn, "id", "?")
        txn_type = read_type(getattr(txn, "type", None))
        if txn_type is None:
            logger.warning(f"Skipping transaction {txn_id}: unknown type {getattr(txn, 'type', None)!r}")
            continue
        txn_currency = read_currency(getattr(txn, "currency", None))
        if txn_currency is None:
            logger.warning(f"Skipping transaction {txn_id}: unknown currency {getattr(txn, 'currency', None)!r}")
            continue
        if read_amount(getattr(txn, "amount", None)) is None:
            logger.warning(f"Skipping transaction {txn_id}: invalid amount {getattr(txn, 'amount', None)!r}")
            continue

        for part in getattr(txn, "payment_methods", None) or []:
            method = getattr(part, "method", None)
            option = catalog.get(method)
            if option is None:
                logger.warning(f"Skipping payment part of {txn_id}: unrecognized method {method!r}")
                continue
            amount = read_amount(getattr(part, "amount", None))
            if amount is None:
                logger.warning(f"Skipping payment part of {txn_id}: invalid amount {getattr(part, 'amount', None)!r}")
                continue
            if option.currency != txn_currency:
                logger.warning(
                    f"Transaction {txn_id} in {txn_currency.value} has a {option.currency.value} "
                    f"part ({option.id.value}); routing by payment method"
                )
            key = (option.currency, option.account_type)
            balances[key] = balances[key] + signed_amount(txn_type, amount)

    return balances


def _accumulate_period(
    transactions: Iterable,
    adjustments_as_income: bool,
) -> Dict[Currency, Dict[str, Decimal]]:
    totals = {currency: {"income": ZERO, "expenses": ZERO} for currency in Currency}

    for txn in transactions:
        txn_id = getattr(txn, "id", "?")
        txn_type = read_type(getattr(txn, "type", None))
        currency = read_currency(getattr(txn, "currency", None))
        amount = read_amount(getattr(txn, "amount", None))
        if txn_type is None or currency is None or amount is None:
            logger.warning(f"Skipping transaction {txn_id} in period totals: malformed type, currency or amount")
            continue

        if txn_type == TransactionType.expense:
            totals[currency]["expenses"] += amount
        elif counts_as_income(txn_type, adjustments_as_income):
            totals[currency]["income"] += amount

    return totals


def aggregate(
    all_transactions: Sequence,
    period_filtered: Sequence,
    catalog: PaymentMethodCatalog = DEFAULT_CATALOG,
    adjustments_as_income: bool = False,
) -> FinancialSummary:
    """
    Build the financial summary.

    Balances are cumulative over `all_transactions`, routed part by part
    through the payment-method catalog. Period income and expenses use the
    transaction totals of `period_filtered` only. Adjustments always move
    balances; they count as period income only when `adjustments_as_income`
    is set. Balances are never clamped, so negative values are kept.
    """
    balances = _accumulate_balances(all_transactions, catalog)
    period = _accumulate_period(period_filtered, adjustments_as_income)

    halves = {}
    for currency in Currency:
        fields = {
            f"{account_type.value}_balance": balances[(currency, account_type)]
            for account_type in catalog.account_types_for(currency)
        }
        fields["total_balance"] = sum(fields.values(), ZERO)
        fields["period_income"] = period[currency]["income"]
        fields["period_expenses"] = period[currency]["expenses"]
        halves[currency] = fields

    return FinancialSummary(
        bs=BsSummary(**halves[Currency.BS]),
        usd=UsdSummary(**halves[Currency.USD]),
        adjustments_in_period_income=adjustments_as_income,
    )
