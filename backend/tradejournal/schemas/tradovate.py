"""
Tradovate schemas for TradeJournal API

This module defines Pydantic models for the Tradovate connect/sync flow.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict


class TradovateEnvironmentEnum(str, Enum):
    """Tradovate environments"""
    DEMO = "demo"
    LIVE = "live"


class TradovateEnvironmentRequest(BaseModel):
    """Request body naming a Tradovate environment"""
    model_config = ConfigDict(use_enum_values=True)

    environment: TradovateEnvironmentEnum


class TradovateSyncRequest(TradovateEnvironmentRequest):
    """Request body for a Tradovate sync"""
    account_id: Optional[Union[int, str]] = None


class TradovateOAuthState(BaseModel):
    """Payload carried through the OAuth ``state`` parameter"""
    user_id: int
    environment: TradovateEnvironmentEnum
    timestamp: int


class TradovateAuthStartResponse(BaseModel):
    """Response for the OAuth start"""
    success: bool = True
    auth_url: str
    environment: TradovateEnvironmentEnum


class TradovateDisconnectResponse(BaseModel):
    """Response for a disconnect"""
    success: bool = True
    message: str


class TradovateSyncResponse(BaseModel):
    """Response for a sync"""
    success: bool = True
    accounts_synced: int
    trades_created: Optional[int] = None
    trades_updated: Optional[int] = None
    total_trades: Optional[int] = None
    message: Optional[str] = None
