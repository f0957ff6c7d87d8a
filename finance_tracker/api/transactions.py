"""
Transaction API endpoints.

Each write endpoint commits once, after the service has
finished every step, and rolls back on any failure, storage
errors included. That keeps a transaction row and the balance
change it causes together. Storage errors are re-raised after
the rollback and reported as a 500 by the app's error handler.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finance_tracker.errors import NotFoundError, StoreError, ValidationError
from finance_tracker.models.base import get_db
from finance_tracker.services.transaction_service import TransactionService
from finance_tracker.schemas.transaction import (
    TransactionCreate,
    TransactionUpdate,
    TransactionResponse,
    MessageResponse,
)

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.get("", response_model=list[TransactionResponse])
def list_transactions(db: Session = Depends(get_db)):
    """List all transactions, most recent first."""
    return TransactionService(db).list_transactions()


@router.post("", response_model=TransactionResponse, status_code=201)
def create_transaction(
    request: TransactionCreate,
    db: Session = Depends(get_db),
):
    """Record an income or expense and update the account balance."""
    service = TransactionService(db)
    try:
        txn = service.create_transaction(request)
        db.commit()
        return txn
    except ValidationError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except (StoreError, SQLAlchemyError):
        db.rollback()
        raise


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
):
    """Get transaction details."""
    service = TransactionService(db)
    try:
        return service.get_transaction(transaction_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: int,
    request: TransactionUpdate,
    db: Session = Depends(get_db),
):
    """
    Edit a transaction.

    The old impact is taken off the old account and the new
    impact is put on the (possibly different) new account.
    """
    service = TransactionService(db)
    try:
        txn = service.update_transaction(transaction_id, request)
        db.commit()
        return txn
    except ValidationError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except (StoreError, SQLAlchemyError):
        db.rollback()
        raise


@router.delete("/{transaction_id}", response_model=MessageResponse)
def delete_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
):
    """Delete a transaction after reversing its balance impact."""
    service = TransactionService(db)
    try:
        service.delete_transaction(transaction_id)
        db.commit()
        return MessageResponse(message="Transaction deleted")
    except ValidationError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except (StoreError, SQLAlchemyError):
        db.rollback()
        raise
