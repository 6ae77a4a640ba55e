"""
Daily statistics API endpoints for TradeJournal
"""

from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tradejournal.api.deps import get_current_user, get_db, get_settings, resolve_target_user_id
from tradejournal.core.config import Settings
from tradejournal.models.user import User
from tradejournal.repositories.journal import DailyStatsRepository
from tradejournal.schemas.journal import ComputeDailyStatsRequest, ComputeDailyStatsResponse, DailyStats
from tradejournal.services.daily_stats import compute_daily_stats

router = APIRouter()


@router.post("/daily/compute", response_model=ComputeDailyStatsResponse)
def compute_daily(
    *,
    db: Session = Depends(get_db),
    request: Optional[ComputeDailyStatsRequest] = None,
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings)
) -> Any:
    """
    Recompute the daily statistics of the current user, or any user for admins.
    """
    request = request or ComputeDailyStatsRequest()
    user_id = resolve_target_user_id(current_user, request.user_id)
    results = compute_daily_stats(
        db,
        user_id,
        date_from=request.date_from,
        date_to=request.date_to,
        trade_limit=settings.stats_trade_limit,
    )
    return {"success": True, "computed_dates": len(results), "results": results}


@router.get("/daily", response_model=List[DailyStats])
def list_daily_stats(
    db: Session = Depends(get_db),
    limit: int = Query(default=90, ge=1, le=10000),
    user_id: Optional[int] = None,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Get stored daily statistics, most recent date first.
    """
    target = resolve_target_user_id(current_user, user_id)
    return DailyStatsRepository(db).filter({"user_id": target}, sort="-date", limit=limit)
