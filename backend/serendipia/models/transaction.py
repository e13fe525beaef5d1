"""
Transaction database model.
"""

import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Date, Numeric, Text, Integer, Enum, ForeignKey, Index
from sqlalchemy.orm import relationship
from serendipia.database import Base
from serendipia.models.payment_method import Currency


class TransactionType(str, enum.Enum):
    """Transaction type enumeration."""
    income = "income"
    expense = "expense"
    adjustment = "adjustment"


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String(128), nullable=False, index=True)
    description = Column(String(255), nullable=False)
    type = Column(Enum(TransactionType), nullable=False)
    currency = Column(Enum(Currency, values_callable=lambda e: [m.value for m in e]), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)  # Always a positive magnitude; type decides the sign
    unit_price = Column(Numeric(14, 2), nullable=True)
    quantity = Column(Numeric(12, 3), default=1, nullable=False)
    date = Column(Date, nullable=False, index=True)
    category = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    payment_methods = relationship(
        "PaymentPart",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="PaymentPart.position",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_transaction_owner_date", "owner_id", "date"),
    )


class PaymentPart(Base):
    """One {method, amount} slice of a transaction."""

    __tablename__ = "payment_parts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    transaction_id = Column(String(36), ForeignKey("transactions.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, default=0, nullable=False)
    method = Column(String(32), nullable=False)  # PaymentMethod id; kept as text so legacy rows still load
    amount = Column(Numeric(14, 2), nullable=False)

    transaction = relationship("Transaction", back_populates="payment_methods")
