"""
Trading account API endpoints for TradeJournal
"""

from typing import Any, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tradejournal.api.deps import get_current_user, get_db, get_owned_record
from tradejournal.models.user import User
from tradejournal.repositories.trading import TradingAccountRepository
from tradejournal.schemas.trading import TradingAccount, TradingAccountCreate, TradingAccountUpdate

router = APIRouter()


@router.get("", response_model=List[TradingAccount])
def list_accounts(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Get the current user's trading accounts.
    """
    return TradingAccountRepository(db).get_user_accounts(current_user.id)


@router.post("", response_model=TradingAccount, status_code=status.HTTP_201_CREATED)
def create_account(
    *,
    db: Session = Depends(get_db),
    account_in: TradingAccountCreate,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Create a manual trading account.
    """
    return TradingAccountRepository(db).create(
        obj_in=account_in, user_id=current_user.id, connection_type="manual"
    )


@router.get("/{account_id}", response_model=TradingAccount)
def get_account(
    account_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Get a trading account by ID.
    """
    return get_owned_record(TradingAccountRepository(db).get(account_id), current_user, "Trading account")


@router.put("/{account_id}", response_model=TradingAccount)
def update_account(
    *,
    account_id: int,
    db: Session = Depends(get_db),
    account_in: TradingAccountUpdate,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Update a trading account, e.g. its risk settings.
    """
    repository = TradingAccountRepository(db)
    account = get_owned_record(repository.get(account_id), current_user, "Trading account")
    return repository.update(db_obj=account, obj_in=account_in)


@router.delete("/{account_id}", response_model=TradingAccount)
def delete_account(
    account_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Delete a trading account.
    """
    repository = TradingAccountRepository(db)
    account = get_owned_record(repository.get(account_id), current_user, "Trading account")
    response = TradingAccount.model_validate(account)
    repository.delete(id=account.id)
    return response
