"""
Alert API endpoints for TradeJournal

This module provides API endpoints for running the alert rules and managing
the alert inbox.
"""

from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tradejournal.api.deps import get_current_user, get_db, get_owned_record, resolve_target_user_id
from tradejournal.models.user import User
from tradejournal.repositories.journal import AlertRepository
from tradejournal.schemas.journal import Alert, AlertsRunRequest, AlertsRunResponse
from tradejournal.services.alerts_engine import AlertsEngine

router = APIRouter()


@router.post("/run", response_model=AlertsRunResponse)
def run_alerts(
    *,
    db: Session = Depends(get_db),
    request: Optional[AlertsRunRequest] = None,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Evaluate the alert rules for the current user, or any user for admins.
    """
    request = request or AlertsRunRequest()
    user_id = resolve_target_user_id(current_user, request.user_id)
    alerts = AlertsEngine(db).run(user_id)
    return {"success": True, "alerts_created": len(alerts), "alerts": alerts}


@router.get("", response_model=List[Alert])
def list_alerts(
    db: Session = Depends(get_db),
    is_read: Optional[bool] = None,
    is_dismissed: Optional[bool] = None,
    limit: int = Query(default=50, ge=1, le=1000),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Get the current user's alerts, newest first.
    """
    return AlertRepository(db).get_user_alerts(
        current_user.id, is_read=is_read, is_dismissed=is_dismissed, limit=limit
    )


@router.post("/{alert_id}/read", response_model=Alert)
def mark_alert_read(
    alert_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Mark an alert as read.
    """
    alert = get_owned_record(AlertRepository(db).get(alert_id), current_user, "Alert")
    return AlertsEngine(db).mark_read(alert)


@router.post("/{alert_id}/dismiss", response_model=Alert)
def dismiss_alert(
    alert_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Dismiss an alert.
    """
    alert = get_owned_record(AlertRepository(db).get(alert_id), current_user, "Alert")
    return AlertsEngine(db).dismiss(alert)
