"""
Trade API endpoints for TradeJournal

This module provides API endpoints for journaled trades, P&L recomputation
and CSV import/export.
"""

from typing import Any, List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from sqlalchemy.orm import Session

from tradejournal.api.deps import get_current_user, get_db, get_owned_record, get_settings
from tradejournal.core.config import Settings
from tradejournal.models.user import User
from tradejournal.repositories.journal import StrategyRepository
from tradejournal.repositories.trading import TradeRepository, TradingAccountRepository
from tradejournal.schemas.trading import (
    DirectionEnum,
    ExportRequest,
    ImportResponse,
    RecomputePnLResponse,
    Trade,
    TradeCreate,
    TradeIdRequest,
    TradeStatusEnum,
    TradeUpdate,
)
from tradejournal.services.pnl import apply_trade_pnl, recompute_trade_pnl, with_initial_risk
from tradejournal.services.trade_csv import export_trades_csv, import_trades_csv

router = APIRouter()


def _check_references(db: Session, values: dict, current_user: User) -> None:
    """Linked account and strategy must be visible to the user"""
    if values.get("account_id") is not None:
        account = TradingAccountRepository(db).get(values["account_id"])
        get_owned_record(account, current_user, "Trading account")
    if values.get("strategy_id") is not None:
        strategy = StrategyRepository(db).get(values["strategy_id"])
        get_owned_record(strategy, current_user, "Strategy")


def _refresh_pnl(db: Session, trade) -> None:
    if trade.status == "closed" and trade.entry_price and trade.exit_price and trade.quantity:
        apply_trade_pnl(db, trade)


@router.get("", response_model=List[Trade])
def list_trades(
    db: Session = Depends(get_db),
    account_id: Optional[int] = None,
    strategy_id: Optional[int] = None,
    status: Optional[TradeStatusEnum] = None,
    direction: Optional[DirectionEnum] = None,
    symbol: Optional[str] = None,
    sort: str = "-entry_time",
    limit: int = Query(default=100, ge=1, le=10000),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Get the current user's trades.
    """
    filters = {"user_id": current_user.id}
    if account_id is not None:
        filters["account_id"] = account_id
    if strategy_id is not None:
        filters["strategy_id"] = strategy_id
    if status is not None:
        filters["status"] = status.value
    if direction is not None:
        filters["direction"] = direction.value
    if symbol:
        filters["symbol"] = symbol

    return TradeRepository(db).filter(filters, sort=sort, limit=limit)


@router.post("", response_model=Trade, status_code=status.HTTP_201_CREATED)
def create_trade(
    *,
    db: Session = Depends(get_db),
    trade_in: TradeCreate,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Create a manual trade.
    """
    values = with_initial_risk(trade_in.model_dump())
    _check_references(db, values, current_user)

    trade = TradeRepository(db).create(obj_in=values, user_id=current_user.id, source="manual")
    _refresh_pnl(db, trade)
    return trade


@router.post("/recompute-pnl", response_model=RecomputePnLResponse)
def recompute_pnl(
    *,
    db: Session = Depends(get_db),
    request: TradeIdRequest,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Recompute and store the P&L fields of a trade.
    """
    computed = recompute_trade_pnl(db, request.trade_id, current_user)
    return {"success": True, "trade_id": request.trade_id, "computed": computed}


@router.post("/export")
def export_trades(
    *,
    db: Session = Depends(get_db),
    request: ExportRequest,
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings)
) -> Response:
    """
    Export the current user's trades as CSV.
    """
    filters = request.filters.model_dump(exclude_none=True) if request.filters else None
    filename, content = export_trades_csv(db, current_user, filters, limit=settings.export_limit)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import", response_model=ImportResponse)
def import_trades(
    *,
    db: Session = Depends(get_db),
    file: UploadFile = File(...),
    account_id: int = Form(...),
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings)
) -> Any:
    """
    Import trades from a CSV file into one of the current user's accounts.
    """
    content = file.file.read()
    return import_trades_csv(
        db, current_user, content, account_id, stats_trade_limit=settings.stats_trade_limit
    )


@router.get("/{trade_id}", response_model=Trade)
def get_trade(
    trade_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Get a trade by ID.
    """
    return get_owned_record(TradeRepository(db).get(trade_id), current_user, "Trade")


@router.put("/{trade_id}", response_model=Trade)
def update_trade(
    *,
    trade_id: int,
    db: Session = Depends(get_db),
    trade_in: TradeUpdate,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Update a trade and refresh its computed fields.
    """
    repository = TradeRepository(db)
    trade = get_owned_record(repository.get(trade_id), current_user, "Trade")

    values = with_initial_risk(trade_in.model_dump(exclude_unset=True), current=trade)
    _check_references(db, values, current_user)

    trade = repository.update(db_obj=trade, obj_in=values)
    _refresh_pnl(db, trade)
    return trade


@router.delete("/{trade_id}", response_model=Trade)
def delete_trade(
    trade_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Delete a trade.
    """
    repository = TradeRepository(db)
    trade = get_owned_record(repository.get(trade_id), current_user, "Trade")
    response = Trade.model_validate(trade)
    repository.delete(id=trade.id)
    return response
