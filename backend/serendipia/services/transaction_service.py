"""Service for validating and persisting an owner's transactions."""

import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from serendipia.errors import (
    LegacyRecordError,
    TransactionNotFoundError,
    TransactionValidationError,
)
from serendipia.models.payment_method import Currency, PaymentMethodCatalog, DEFAULT_CATALOG
from serendipia.models.transaction import PaymentPart, Transaction, TransactionType
from serendipia.schemas.transaction import (
    LegacyImportResponse,
    TransactionCreate,
    TransactionUpdate,
)
from serendipia.services.migration_service import CATALOG_VERSION, migrate_legacy_record
from serendipia.services.period_filter import DateRange, FilterPeriod, parse_period, resolve_range

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _money(value) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def validate_transaction(data: Dict[str, Any], catalog: PaymentMethodCatalog = DEFAULT_CATALOG) -> Dict[str, Any]:
    """
    Check a full transaction record and return its cleaned fields.

    The amount is derived from unit_price * quantity when not given, and must
    equal it to the cent when both are given. Payment
    parts must use methods of the transaction currency and add up to the
    amount. Raises TransactionValidationError with one message per field.
    """
    errors: Dict[str, str] = {}

    description = (data.get("description") or "").strip()
    if not description:
        errors["description"] = "Description is required."

    txn_type = data.get("type")
    if txn_type is None:
        errors["type"] = "Type is required."

    currency = data.get("currency")
    if currency is None:
        errors["currency"] = "Currency is required."

    if data.get("date") is None:
        errors["date"] = "Date is required."

    quantity = data.get("quantity")
    quantity = Decimal("1") if quantity is None else Decimal(str(quantity))
    if quantity <= 0:
        errors["quantity"] = "Quantity must be greater than zero."

    unit_price = data.get("unit_price")
    if unit_price is not None and Decimal(str(unit_price)) < 0:
        errors["unit_price"] = "Unit price must be zero or greater."

    derived = None
    if unit_price is not None and "quantity" not in errors and "unit_price" not in errors:
        derived = _money(Decimal(str(unit_price)) * quantity)

    amount = _money(data.get("amount"))
    if amount is None:
        amount = derived
    if amount is None or amount <= 0:
        errors["amount"] = "Amount must be greater than zero."
    elif derived is not None and amount != derived:
        errors["amount"] = f"Amount {amount} does not match unit price x quantity ({derived})."

    parts = data.get("payment_methods") or []
    if not parts:
        errors["payment_methods"] = "At least one payment method is required."

    cleaned_parts: List[Tuple[str, Decimal]] = []
    parts_total = Decimal("0")
    for index, part in enumerate(parts):
        method = part.get("method") if isinstance(part, dict) else getattr(part, "method", None)
        part_amount = part.get("amount") if isinstance(part, dict) else getattr(part, "amount", None)

        option = catalog.get(method)
        if option is None:
            errors[f"payment_method_{index}"] = f"Unknown payment method {method!r}."
        elif currency is not None and option.currency != currency:
            errors[f"payment_method_{index}"] = (
                f"{option.label} cannot be used for {Currency(currency).value} transactions."
            )

        part_amount = _money(part_amount)
        if part_amount is None or part_amount <= 0:
            errors[f"payment_amount_{index}"] = "Amount must be positive."
        else:
            parts_total += part_amount
            if option is not None:
                cleaned_parts.append((option.id.value, part_amount))

    if parts and amount is not None and amount > 0 and not any(k.startswith("payment_amount_") for k in errors):
        if parts_total != amount:
            errors["payment_parts_sum"] = (
                f"Payment parts add up to {parts_total} but the total is {amount}."
            )

    if errors:
        raise TransactionValidationError(errors)

    category = (data.get("category") or "").strip() or None
    notes = (data.get("notes") or "").strip() or None

    return {
        "description": description,
        "type": TransactionType(txn_type),
        "currency": Currency(currency),
        "amount": amount,
        "unit_price": _money(unit_price),
        "quantity": quantity,
        "date": data["date"],
        "category": category,
        "notes": notes,
        "payment_methods": cleaned_parts,
    }


def _apply(transaction: Transaction, cleaned: Dict[str, Any]) -> None:
    for field in ("description", "type", "currency", "amount", "unit_price", "quantity", "date", "category", "notes"):
        setattr(transaction, field, cleaned[field])
    transaction.payment_methods = [
        PaymentPart(position=position, method=method, amount=amount)
        for position, (method, amount) in enumerate(cleaned["payment_methods"])
    ]


def _snapshot_fields(transaction: Transaction) -> Dict[str, Any]:
    return {
        "description": transaction.description,
        "type": transaction.type,
        "currency": transaction.currency,
        "amount": transaction.amount,
        "unit_price": transaction.unit_price,
        "quantity": transaction.quantity,
        "date": transaction.date,
        "category": transaction.category,
        "notes": transaction.notes,
        "payment_methods": [{"method": p.method, "amount": p.amount} for p in transaction.payment_methods],
    }


def create_transaction(
    db: Session,
    owner_id: str,
    payload: TransactionCreate,
    catalog: PaymentMethodCatalog = DEFAULT_CATALOG,
) -> Transaction:
    cleaned = validate_transaction(payload.model_dump(), catalog)
    transaction = Transaction(owner_id=owner_id)
    _apply(transaction, cleaned)
    db.add(transaction)
    db.commit()
    db.refresh(transaction)
    logger.info(f"Created transaction {transaction.id} for owner {owner_id}")
    return transaction


def get_transaction(db: Session, owner_id: str, transaction_id: str) -> Transaction:
    transaction = db.query(Transaction).filter(
        Transaction.id == transaction_id,
        Transaction.owner_id == owner_id
    ).first()
    if not transaction:
        raise TransactionNotFoundError(transaction_id)
    return transaction


def update_transaction(
    db: Session,
    owner_id: str,
    transaction_id: str,
    update: TransactionUpdate,
    catalog: PaymentMethodCatalog = DEFAULT_CATALOG,
) -> Transaction:
    """Replace the given fields, then re-validate the whole record."""
    transaction = get_transaction(db, owner_id, transaction_id)

    changes = update.model_dump(exclude_unset=True)
    merged = _snapshot_fields(transaction)
    merged.update(changes)
    if "amount" not in changes and ("unit_price" in changes or "quantity" in changes) and merged.get("unit_price") is not None:
        merged["amount"] = None

    cleaned = validate_transaction(merged, catalog)
    _apply(transaction, cleaned)
    db.commit()
    db.refresh(transaction)
    return transaction


def delete_transaction(db: Session, owner_id: str, transaction_id: str) -> None:
    transaction = get_transaction(db, owner_id, transaction_id)
    db.delete(transaction)
    db.commit()
    logger.info(f"Deleted transaction {transaction_id} for owner {owner_id}")


def list_transactions(
    db: Session,
    owner_id: str,
    today: date,
    period=FilterPeriod.all,
    custom: Optional[DateRange] = None,
    txn_type: Optional[TransactionType] = None,
    search: Optional[str] = None,
    page: int = 1,
    per_page: int = 50,
    week_start: int = 0,
) -> Tuple[List[Transaction], int]:
    """One page of an owner's transactions inside the period, newest first."""
    query = db.query(Transaction).filter(Transaction.owner_id == owner_id)

    window = resolve_range(parse_period(period), today, custom, week_start)
    if window is not None:
        if window.start_date > window.end_date:
            return [], 0
        query = query.filter(Transaction.date >= window.start_date, Transaction.date <= window.end_date)
    if txn_type is not None:
        query = query.filter(Transaction.type == txn_type)
    if search:
        search_term = f"%{search}%"
        query = query.filter(
            or_(
                Transaction.description.ilike(search_term),
                Transaction.category.ilike(search_term),
                Transaction.notes.ilike(search_term)
            )
        )

    total = query.count()
    query = query.order_by(Transaction.date.desc(), Transaction.created_at.desc())
    query = query.offset((page - 1) * per_page).limit(per_page)
    return query.all(), total


def load_snapshot(db: Session, owner_id: str) -> List[Transaction]:
    """Every transaction of the owner, fully loaded, newest first."""
    return db.query(Transaction).filter(
        Transaction.owner_id == owner_id
    ).order_by(Transaction.date.desc(), Transaction.created_at.desc()).all()


def import_legacy_records(
    db: Session,
    owner_id: str,
    records: List[Dict[str, Any]],
    catalog: PaymentMethodCatalog = DEFAULT_CATALOG,
) -> LegacyImportResponse:
    """Migrate and store legacy export records; bad records are reported and skipped."""
    imported = 0
    errors: List[str] = []
    unrecognized: List[str] = []

    for index, record in enumerate(records):
        try:
            payload, unknown_methods = migrate_legacy_record(record, catalog)
            cleaned = validate_transaction(payload.model_dump(), catalog)
        except (LegacyRecordError, TransactionValidationError) as e:
            logger.warning(f"Legacy record {index} skipped: {e}")
            errors.append(f"Record {index}: {e}")
            continue

        transaction = Transaction(owner_id=owner_id)
        _apply(transaction, cleaned)
        db.add(transaction)
        imported += 1
        for label in unknown_methods:
            if label not in unrecognized:
                unrecognized.append(label)

    db.commit()
    logger.info(f"Imported {imported} legacy records for owner {owner_id} ({len(errors)} skipped)")

    return LegacyImportResponse(
        imported=imported,
        skipped=len(errors),
        errors=errors,
        unrecognized_methods=unrecognized,
        catalog_version=CATALOG_VERSION,
    )
