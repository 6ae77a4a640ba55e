"""
Emotional log API endpoints for TradeJournal
"""

from typing import Any, List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tradejournal.api.deps import get_current_user, get_db, get_owned_record
from tradejournal.models.user import User
from tradejournal.repositories.journal import EmotionalLogRepository
from tradejournal.schemas.journal import EmotionalLog, EmotionalLogUpsert

router = APIRouter()


@router.get("", response_model=List[EmotionalLog])
def list_logs(
    db: Session = Depends(get_db),
    limit: int = Query(default=30, ge=1, le=1000),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Get the current user's emotional logs, most recent date first.
    """
    return EmotionalLogRepository(db).get_recent(current_user.id, limit=limit)


@router.put("", response_model=EmotionalLog)
def save_log(
    *,
    db: Session = Depends(get_db),
    log_in: EmotionalLogUpsert,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Save the log of a date and log type, replacing any existing one.
    """
    return EmotionalLogRepository(db).upsert(current_user.id, log_in)


@router.delete("/{log_id}", response_model=EmotionalLog)
def delete_log(
    log_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Delete an emotional log.
    """
    repository = EmotionalLogRepository(db)
    log = get_owned_record(repository.get(log_id), current_user, "Emotional log")
    response = EmotionalLog.model_validate(log)
    repository.delete(id=log.id)
    return response
