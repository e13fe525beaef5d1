"""
Migration of legacy payment-method labels and legacy export records.

Historical data used free-form labels ("banco", "Pago Móvil", "cripto",
{"efectivo": 20}, ...). Every label observed in old exports is listed in
LEGACY_METHOD_LABELS; anything else falls back to the cash method of the
transaction currency and is reported as unrecognized.
"""

import logging
import re
import unicodedata
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from serendipia.errors import LegacyRecordError
from serendipia.models.payment_method import (
    Currency,
    PaymentMethod,
    PaymentMethodCatalog,
    DEFAULT_CATALOG,
)
from serendipia.models.transaction import TransactionType
from serendipia.schemas.transaction import PaymentPartIn, TransactionCreate
from serendipia.services.period_filter import parse_day
from serendipia.services.summary_service import read_amount, read_currency

logger = logging.getLogger(__name__)

CATALOG_VERSION = 2

# Normalized label -> method, per currency. Labels are upper-case, accents
# removed, spaces and dashes collapsed to "_".
LEGACY_METHOD_LABELS: Dict[Currency, Dict[str, PaymentMethod]] = {
    Currency.BS: {
        "EFECTIVO": PaymentMethod.EFECTIVO_BS,
        "EFECTIVO_BS": PaymentMethod.EFECTIVO_BS,
        "CASH": PaymentMethod.EFECTIVO_BS,
        "PAGO_MOVIL": PaymentMethod.PAGO_MOVIL_BS,
        "PAGOMOVIL": PaymentMethod.PAGO_MOVIL_BS,
        "PAGO_MOVIL_BS": PaymentMethod.PAGO_MOVIL_BS,
        "PM": PaymentMethod.PAGO_MOVIL_BS,
        "TRANSFERENCIA": PaymentMethod.PAGO_MOVIL_BS,
        "TRANSFERENCIA_BS": PaymentMethod.PAGO_MOVIL_BS,
        "TRANSFER": PaymentMethod.PAGO_MOVIL_BS,
        "BANK_TRANSFER": PaymentMethod.PAGO_MOVIL_BS,
        "BANCO": PaymentMethod.PAGO_MOVIL_BS,
        "BANCO_BS": PaymentMethod.PAGO_MOVIL_BS,
        "BANK": PaymentMethod.PAGO_MOVIL_BS,
    },
    Currency.USD: {
        "EFECTIVO": PaymentMethod.EFECTIVO_USD,
        "EFECTIVO_USD": PaymentMethod.EFECTIVO_USD,
        "EFECTIVO_US": PaymentMethod.EFECTIVO_USD,
        "DOLARES": PaymentMethod.EFECTIVO_USD,
        "USD": PaymentMethod.EFECTIVO_USD,
        "CASH": PaymentMethod.EFECTIVO_USD,
        "USDT": PaymentMethod.USDT,
        "EFECTIVO_USDT": PaymentMethod.USDT,
        "CRIPTO": PaymentMethod.USDT,
        "CRYPTO": PaymentMethod.USDT,
        "DIGITAL": PaymentMethod.USDT,
        "BINANCE": PaymentMethod.USDT,
    },
}

# Labels that name their own currency regardless of the record's currency.
CURRENCY_BOUND_LABELS = {
    "EFECTIVO_BS": Currency.BS,
    "PAGO_MOVIL_BS": Currency.BS,
    "TRANSFERENCIA_BS": Currency.BS,
    "BANCO_BS": Currency.BS,
    "EFECTIVO_USD": Currency.USD,
    "EFECTIVO_US": Currency.USD,
    "DOLARES": Currency.USD,
    "USD": Currency.USD,
    "USDT": Currency.USD,
    "EFECTIVO_USDT": Currency.USD,
    "CRIPTO": Currency.USD,
    "CRYPTO": Currency.USD,
    "BINANCE": Currency.USD,
}

LEGACY_TYPE_LABELS = {
    "venta": TransactionType.income,
    "ingreso": TransactionType.income,
    "income": TransactionType.income,
    "gasto": TransactionType.expense,
    "egreso": TransactionType.expense,
    "expense": TransactionType.expense,
    "ajuste": TransactionType.adjustment,
    "adjustment": TransactionType.adjustment,
}

CATEGORY_PREFIX = re.compile(r"\[(.*?)\]\s*")


@dataclass(frozen=True)
class MigratedMethod:
    method: PaymentMethod
    recognized: bool
    source: str


def normalize_label(raw: Any) -> str:
    """Upper-case, accent-free label; dict-shaped values join their non-empty keys."""
    if isinstance(raw, dict):
        keys = [str(k) for k, v in raw.items() if v not in (None, "", 0)]
        text = "_".join(keys)
    elif raw is None:
        text = ""
    elif hasattr(raw, "value"):
        text = str(raw.value)
    else:
        text = str(raw)
    text = unicodedata.normalize("NFKD", text)
    text = "".join(c for c in text if not unicodedata.combining(c))
    text = re.sub(r"[\s\-]+", "_", text.strip().upper())
    return text.strip("_")


def migrate_payment_method(
    raw: Any,
    currency: Currency,
    catalog: PaymentMethodCatalog = DEFAULT_CATALOG,
) -> MigratedMethod:
    """
    Map any historical payment-method value onto the current catalog.

    Total: always returns a method valid for `currency`. Unknown labels, and
    labels that belong to the other currency, fall back to the currency's
    cash method with recognized=False.
    """
    label = normalize_label(raw)
    fallback = catalog.cash_method_for(currency)

    option = catalog.get(label)
    if option is not None:
        if option.currency == currency:
            return MigratedMethod(option.id, True, label)
        logger.warning(f"Method {label} is not valid for {currency.value}; using {fallback.value}")
        return MigratedMethod(fallback, False, label)

    bound = CURRENCY_BOUND_LABELS.get(label)
    if bound is not None and bound != currency:
        logger.warning(f"Legacy method {label} belongs to {bound.value}, not {currency.value}; using {fallback.value}")
        return MigratedMethod(fallback, False, label)

    method = LEGACY_METHOD_LABELS[currency].get(label)
    if method is not None and catalog.get(method) is not None:
        return MigratedMethod(method, True, label)

    logger.warning(f"Unrecognized payment method {raw!r}; using {fallback.value}")
    return MigratedMethod(fallback, False, label)


def _text(value: Any) -> Optional[str]:
    """Free-text field as a trimmed string; numbers and other scalars are stringified."""
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def currency_for_legacy_label(raw: Any) -> Currency:
    """Currency implied by a legacy label; Bs. unless the label names USD."""
    return CURRENCY_BOUND_LABELS.get(normalize_label(raw), Currency.BS)


def migrate_legacy_record(
    record: Dict[str, Any],
    catalog: PaymentMethodCatalog = DEFAULT_CATALOG,
) -> tuple:
    """
    Convert one legacy export record into a TransactionCreate.

    Returns (TransactionCreate, unrecognized method labels). Raises
    LegacyRecordError when the record has no usable date or amount, or when
    its fields still fail schema validation.
    """
    if not isinstance(record, dict):
        raise LegacyRecordError("Record is not an object")

    txn_type = LEGACY_TYPE_LABELS.get(str(record.get("type", "")).strip().lower(), TransactionType.expense)

    day = parse_day(record.get("date"))
    if day is None:
        raise LegacyRecordError(f"Record {record.get('id', '?')} has no valid date")

    quantity = read_amount(record.get("quantity")) or Decimal("1")
    unit_price = read_amount(record.get("unitPrice"))

    amount = None
    for key in ("income", "expense", "amount"):
        value = read_amount(record.get(key))
        if value:
            amount = value
            break
    if amount is None and unit_price is not None:
        amount = unit_price * quantity

    raw_payment = record.get("payment")
    raw_parts = []
    if isinstance(raw_payment, dict) and raw_payment:
        for label, value in raw_payment.items():
            part_amount = read_amount(value)
            if part_amount:
                raw_parts.append((label, part_amount))
    elif isinstance(record.get("paymentMethods"), list):
        for part in record["paymentMethods"]:
            if isinstance(part, dict):
                part_amount = read_amount(part.get("amount"))
                if part_amount:
                    raw_parts.append((part.get("method"), part_amount))

    if amount is None:
        amount = sum((value for _, value in raw_parts), Decimal("0")) or None
    if amount is None:
        raise LegacyRecordError(f"Record {record.get('id', '?')} has no amount")

    currency = read_currency(record.get("currency"))
    if currency is None:
        currency = currency_for_legacy_label(raw_parts[0][0]) if raw_parts else Currency.BS

    unrecognized: List[str] = []
    parts: List[PaymentPartIn] = []
    for label, part_amount in raw_parts:
        migrated = migrate_payment_method(label, currency, catalog)
        if not migrated.recognized:
            unrecognized.append(migrated.source or str(label))
        parts.append(PaymentPartIn(method=migrated.method.value, amount=part_amount))
    if not parts:
        parts.append(PaymentPartIn(method=catalog.cash_method_for(currency).value, amount=amount))

    description = _text(record.get("description")) or ""
    category = _text(record.get("category"))
    match = CATEGORY_PREFIX.search(description)
    if match:
        category = category or match.group(1).strip() or None
        description = CATEGORY_PREFIX.sub("", description, count=1).strip()

    try:
        created = TransactionCreate(
            description=description or "No description",
            type=txn_type,
            currency=currency,
            date=day,
            amount=amount,
            unit_price=unit_price,
            quantity=quantity,
            payment_methods=parts,
            category=category,
            notes=_text(record.get("notes")),
        )
    except ValidationError as e:
        raise LegacyRecordError(f"Record {record.get('id', '?')} is invalid: {e}") from e
    return created, unrecognized