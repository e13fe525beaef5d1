"""Tests for transaction validation and storage."""

import pytest
from datetime import date
from decimal import Decimal

from serendipia.errors import TransactionNotFoundError, TransactionValidationError
from serendipia.models.payment_method import Currency
from serendipia.models.transaction import TransactionType
from serendipia.services.transaction_service import (
    list_transactions,
    load_snapshot,
    delete_transaction,
    validate_transaction,
)

TODAY = date(2026, 3, 18)


def record(**overrides):
    data = {
        "description": "Harina",
        "type": TransactionType.expense,
        "currency": Currency.BS,
        "date": TODAY,
        "amount": Decimal("100"),
        "payment_methods": [{"method": "EFECTIVO_BS", "amount": Decimal("100")}],
    }
    data.update(overrides)
    return data


class TestValidateTransaction:

    def test_valid_record(self):
        cleaned = validate_transaction(record(description="  Harina  ", category=" "))
        assert cleaned["description"] == "Harina"
        assert cleaned["category"] is None
        assert cleaned["payment_methods"] == [("EFECTIVO_BS", Decimal("100.00"))]

    def test_parts_compared_at_cent_precision(self):
        cleaned = validate_transaction(record(
            amount=Decimal("10.005"),
            payment_methods=[
                {"method": "EFECTIVO_BS", "amount": Decimal("5")},
                {"method": "PAGO_MOVIL_BS", "amount": Decimal("5.01")},
            ],
        ))
        assert cleaned["amount"] == Decimal("10.01")

    def test_collects_every_error(self):
        with pytest.raises(TransactionValidationError) as exc_info:
            validate_transaction(record(description="", amount=None, payment_methods=[]))
        assert {"description", "amount", "payment_methods"} <= set(exc_info.value.errors)

    def test_negative_unit_price(self):
        with pytest.raises(TransactionValidationError) as exc_info:
            validate_transaction(record(amount=None, unit_price=Decimal("-1")))
        assert "unit_price" in exc_info.value.errors

    def test_explicit_amount_matching_unit_price(self):
        cleaned = validate_transaction(record(
            amount=Decimal("25.00"), unit_price=Decimal("12.5"), quantity=Decimal("2"),
            payment_methods=[{"method": "EFECTIVO_BS", "amount": Decimal("25")}],
        ))
        assert cleaned["amount"] == Decimal("25.00")

    def test_explicit_amount_off_by_a_cent(self):
        with pytest.raises(TransactionValidationError) as exc_info:
            validate_transaction(record(
                amount=Decimal("25.01"), unit_price=Decimal("12.5"), quantity=Decimal("2"),
                payment_methods=[{"method": "EFECTIVO_BS", "amount": Decimal("25.01")}],
            ))
        assert set(exc_info.value.errors) == {"amount"}

    def test_derived_amount_rounded_to_cent(self):
        """0.3333 kg at 10 Bs. rounds to 3.33; an explicit 3.33 agrees."""
        cleaned = validate_transaction(record(
            amount=Decimal("3.33"), unit_price=Decimal("10"), quantity=Decimal("0.3333"),
            payment_methods=[{"method": "EFECTIVO_BS", "amount": Decimal("3.33")}],
        ))
        assert cleaned["amount"] == Decimal("3.33")


class TestStore:

    def test_pagination(self, db_session, save_txn):
        for day in range(1, 6):
            save_txn("1", day=date(2026, 3, day))
        items, total = list_transactions(db_session, "owner-1", TODAY, page=2, per_page=2)
        assert total == 5
        assert [t.date.day for t in items] == [3, 2]

    def test_snapshot_is_owner_scoped(self, db_session, save_txn):
        save_txn("1")
        save_txn("1", owner_id="owner-2")
        assert len(load_snapshot(db_session, "owner-1")) == 1

    def test_delete_other_owner(self, db_session, save_txn):
        foreign = save_txn("1", owner_id="owner-2")
        with pytest.raises(TransactionNotFoundError):
            delete_transaction(db_session, "owner-1", foreign.id)
