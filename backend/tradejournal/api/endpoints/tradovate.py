"""
Tradovate API endpoints for TradeJournal

This module provides API endpoints for connecting a Tradovate environment
through OAuth, disconnecting it and syncing its accounts and fills.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from tradejournal.api.deps import get_current_user, get_db, get_settings
from tradejournal.core.config import Settings
from tradejournal.core.exceptions import ValidationError
from tradejournal.models.user import User
from tradejournal.schemas.tradovate import (
    TradovateAuthStartResponse,
    TradovateDisconnectResponse,
    TradovateEnvironmentRequest,
    TradovateSyncRequest,
    TradovateSyncResponse,
)
from tradejournal.services import tradovate_sync
from tradejournal.services.tradovate_broker import TradovateBroker

router = APIRouter()

# The OAuth redirect lands outside the /tradovate prefix
callback_router = APIRouter()


def _origin(request: Request) -> str:
    return str(request.base_url).rstrip("/")


@router.post("/auth/start", response_model=TradovateAuthStartResponse)
def auth_start(
    *,
    http_request: Request,
    request: TradovateEnvironmentRequest,
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings)
) -> Any:
    """
    Start the OAuth authorization of a Tradovate environment.
    """
    broker = TradovateBroker(request.environment, settings)
    return tradovate_sync.start_authorization(
        broker, current_user, request.environment, _origin(http_request)
    )


@callback_router.get("/tradovate-callback")
def auth_callback(
    http_request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
) -> RedirectResponse:
    """
    Complete the OAuth authorization and send the browser back to the accounts page.
    """
    if not code or not state:
        raise ValidationError("Missing code or state")

    oauth_state = tradovate_sync.decode_state(state)
    environment = oauth_state.environment.value
    broker = TradovateBroker(environment, settings)
    tradovate_sync.complete_authorization(
        db, broker, oauth_state, code, _origin(http_request), settings
    )
    return RedirectResponse(url=f"/accounts?tradovate_connected={environment}", status_code=302)


@router.post("/disconnect", response_model=TradovateDisconnectResponse)
def disconnect(
    *,
    db: Session = Depends(get_db),
    request: TradovateEnvironmentRequest,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Disconnect a Tradovate environment.
    """
    return tradovate_sync.disconnect(db, current_user, request.environment)


@router.post("/sync", response_model=TradovateSyncResponse, response_model_exclude_none=True)
def sync(
    *,
    db: Session = Depends(get_db),
    request: TradovateSyncRequest,
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings)
) -> Any:
    """
    Sync accounts and fills from a connected Tradovate environment.
    """
    broker = TradovateBroker(request.environment, settings)
    return tradovate_sync.TradovateSync(db, broker, settings).run(
        current_user, request.environment, account_id=request.account_id
    )
