"""Shared test fixtures."""

import os

# Keep app startup off the on-disk database
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from datetime import date
from decimal import Decimal

from serendipia.database import Base
from serendipia.dependencies import get_db, get_today
from serendipia.main import app
from serendipia.models.payment_method import Currency
from serendipia.models.transaction import Transaction, TransactionType, PaymentPart

OWNER_ID = "owner-1"
OTHER_OWNER_ID = "owner-2"

# Wednesday; its week runs Monday 2026-03-16 to Sunday 2026-03-22
TODAY = date(2026, 3, 18)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test using in-memory SQLite."""
    # Use StaticPool to ensure all connections use the same in-memory database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    Base.metadata.create_all(bind=engine)

    # Create session
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def client(db_session):
    """Test client bound to the test database, a fixed 'today' and an owner header."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY
    with TestClient(app, headers={"X-Owner-Id": OWNER_ID}) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_txn():
    """
    Build an unsaved transaction.

    `parts` is a list of (method, amount); it defaults to a single part on
    the currency's cash method for the full amount.
    """
    def _make(
        amount,
        txn_type=TransactionType.expense,
        currency=Currency.BS,
        day=TODAY,
        parts=None,
        description="Test transaction",
        category=None,
        owner_id=OWNER_ID,
    ):
        amount = Decimal(str(amount))
        if parts is None:
            method = "EFECTIVO_BS" if currency == Currency.BS else "EFECTIVO_USD"
            parts = [(method, amount)]
        return Transaction(
            owner_id=owner_id,
            description=description,
            type=txn_type,
            currency=currency,
            amount=amount,
            quantity=Decimal("1"),
            date=day,
            category=category,
            payment_methods=[
                PaymentPart(position=i, method=method, amount=Decimal(str(value)))
                for i, (method, value) in enumerate(parts)
            ],
        )
    return _make


@pytest.fixture
def save_txn(db_session, make_txn):
    """Build a transaction with `make_txn` and persist it."""
    def _save(*args, **kwargs):
        txn = make_txn(*args, **kwargs)
        db_session.add(txn)
        db_session.commit()
        db_session.refresh(txn)
        return txn
    return _save


@pytest.fixture
def sample_transaction(save_txn):
    """A Bs. grocery expense paid with Pago Móvil."""
    return save_txn(
        "400.00",
        TransactionType.expense,
        Currency.BS,
        day=date(2026, 3, 17),
        parts=[("PAGO_MOVIL_BS", "400.00")],
        description="Groceries at the market",
        category="Food",
    )
