"""
Transaction API endpoints.
"""

from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional

from serendipia.config import settings
from serendipia.dependencies import get_db, get_owner_id, get_period_query, get_today, PeriodQuery
from serendipia.errors import TransactionNotFoundError, TransactionValidationError
from serendipia.models.transaction import TransactionType
from serendipia.schemas.transaction import (
    LegacyImportRequest,
    LegacyImportResponse,
    TransactionCreate,
    TransactionResponse,
    TransactionUpdate,
    TransactionListResponse
)
from serendipia.services import transaction_service

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=TransactionListResponse)
def list_transactions(
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=100),
    type: Optional[TransactionType] = None,
    search: Optional[str] = None,
    period: PeriodQuery = Depends(get_period_query),
    today: date = Depends(get_today),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """List the owner's transactions in a period with filtering and pagination"""
    transactions, total = transaction_service.list_transactions(
        db,
        owner_id,
        today,
        period=period.period,
        custom=period.custom,
        txn_type=type,
        search=search,
        page=page,
        per_page=per_page,
        week_start=settings.week_start_day,
    )
    pages = (total + per_page - 1) // per_page

    return TransactionListResponse(
        items=[TransactionResponse.model_validate(t) for t in transactions],
        total=total,
        page=page,
        pages=pages
    )


@router.post("", response_model=TransactionResponse, status_code=201)
def create_transaction(
    payload: TransactionCreate,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """Create a transaction"""
    try:
        transaction = transaction_service.create_transaction(db, owner_id, payload)
    except TransactionValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors)
    return TransactionResponse.model_validate(transaction)


@router.post("/import-legacy", response_model=LegacyImportResponse)
def import_legacy(
    request: LegacyImportRequest,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """Migrate records from the old export format"""
    return transaction_service.import_legacy_records(db, owner_id, request.records)


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: str,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """Get a single transaction"""
    try:
        transaction = transaction_service.get_transaction(db, owner_id, transaction_id)
    except TransactionNotFoundError:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return TransactionResponse.model_validate(transaction)


@router.patch("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: str,
    update: TransactionUpdate,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """Replace some fields of a transaction"""
    try:
        transaction = transaction_service.update_transaction(db, owner_id, transaction_id, update)
    except TransactionNotFoundError:
        raise HTTPException(status_code=404, detail="Transaction not found")
    except TransactionValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors)
    return TransactionResponse.model_validate(transaction)


@router.delete("/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: str,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """Delete a transaction"""
    try:
        transaction_service.delete_transaction(db, owner_id, transaction_id)
    except TransactionNotFoundError:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return None
