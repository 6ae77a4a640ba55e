"""
Strategy API endpoints for TradeJournal

This module provides API endpoints for the strategy playbook and automatic
strategy assignment.
"""

from typing import Any, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tradejournal.api.deps import get_current_user, get_db, get_owned_record
from tradejournal.models.user import User
from tradejournal.repositories.journal import StrategyRepository
from tradejournal.schemas.journal import AutoAssignResponse, Strategy, StrategyCreate, StrategyUpdate
from tradejournal.schemas.trading import TradeIdRequest
from tradejournal.services.strategy_matcher import auto_assign_strategy

router = APIRouter()


@router.get("", response_model=List[Strategy])
def list_strategies(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Get the current user's strategies.
    """
    return StrategyRepository(db).filter({"user_id": current_user.id})


@router.post("", response_model=Strategy, status_code=status.HTTP_201_CREATED)
def create_strategy(
    *,
    db: Session = Depends(get_db),
    strategy_in: StrategyCreate,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Create a strategy.
    """
    return StrategyRepository(db).create(obj_in=strategy_in, user_id=current_user.id)


@router.post("/auto-assign", response_model=AutoAssignResponse, response_model_exclude_none=True)
def auto_assign(
    *,
    db: Session = Depends(get_db),
    request: TradeIdRequest,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Assign the best matching active strategy to a trade.
    """
    return auto_assign_strategy(db, request.trade_id, current_user)


@router.get("/{strategy_id}", response_model=Strategy)
def get_strategy(
    strategy_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Get a strategy by ID.
    """
    return get_owned_record(StrategyRepository(db).get(strategy_id), current_user, "Strategy")


@router.put("/{strategy_id}", response_model=Strategy)
def update_strategy(
    *,
    strategy_id: int,
    db: Session = Depends(get_db),
    strategy_in: StrategyUpdate,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Update a strategy.
    """
    repository = StrategyRepository(db)
    strategy = get_owned_record(repository.get(strategy_id), current_user, "Strategy")
    return repository.update(db_obj=strategy, obj_in=strategy_in)


@router.delete("/{strategy_id}", response_model=Strategy)
def delete_strategy(
    strategy_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Delete a strategy.
    """
    repository = StrategyRepository(db)
    strategy = get_owned_record(repository.get(strategy_id), current_user, "Strategy")
    response = Strategy.model_validate(strategy)
    repository.delete(id=strategy.id)
    return response
