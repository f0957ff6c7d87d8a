"""
Account API endpoints.

Write endpoints commit once and roll back on any failure.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finance_tracker.errors import NotFoundError, StoreError, ValidationError
from finance_tracker.models.base import get_db
from finance_tracker.services.account_service import AccountService
from finance_tracker.schemas.account import (
    AccountCreate,
    AccountUpdate,
    AccountResponse,
)

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post("/setup", response_model=list[AccountResponse])
def seed_accounts(db: Session = Depends(get_db)):
    """
    Create the default Cash Wallet and Bank Account.

    Does nothing if any account already exists. Always
    returns the full account list.
    """
    service = AccountService(db)
    try:
        accounts = service.seed_accounts()
        db.commit()
        return accounts
    except (StoreError, SQLAlchemyError):
        db.rollback()
        raise


@router.get("", response_model=list[AccountResponse])
def list_accounts(db: Session = Depends(get_db)):
    """List all accounts with their balances."""
    return AccountService(db).list_accounts()


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    request: AccountCreate,
    db: Session = Depends(get_db),
):
    """Create a new account with a zero balance."""
    service = AccountService(db)
    try:
        account = service.create_account(request)
        db.commit()
        return account
    except ValidationError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except (StoreError, SQLAlchemyError):
        db.rollback()
        raise


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: int,
    db: Session = Depends(get_db),
):
    """Get account details, including its balance."""
    service = AccountService(db)
    try:
        return service.get_account(account_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: int,
    request: AccountUpdate,
    db: Session = Depends(get_db),
):
    """
    Rename an account.

    The balance cannot be set here; sending it is a 400.
    """
    service = AccountService(db)
    try:
        account = service.update_account(account_id, request)
        db.commit()
        return account
    except ValidationError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except (StoreError, SQLAlchemyError):
        db.rollback()
        raise
