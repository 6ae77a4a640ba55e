"""
Trading schemas for TradeJournal API

This module defines Pydantic models for trades, trading accounts and the
trade-level operations (P&L recompute, CSV import/export).
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tradejournal.utils.time_utils import to_utc_naive


class DirectionEnum(str, Enum):
    """Trade directions"""
    LONG = "long"
    SHORT = "short"


class TradeStatusEnum(str, Enum):
    """Trade statuses"""
    OPEN = "open"
    CLOSED = "closed"


class TradeSourceEnum(str, Enum):
    """Where a trade record came from"""
    MANUAL = "manual"
    IMPORT = "import"
    TRADOVATE = "tradovate"


class AssetClassEnum(str, Enum):
    """Asset classes"""
    FUTURES = "futures"
    FOREX = "forex"
    STOCKS = "stocks"
    OPTIONS = "options"
    CRYPTO = "crypto"
    CFD = "cfd"


class TradeBase(BaseModel):
    """Base schema for trade"""
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    symbol: str
    direction: DirectionEnum
    asset_class: Optional[AssetClassEnum] = None
    status: TradeStatusEnum = TradeStatusEnum.CLOSED
    account_id: Optional[int] = None
    strategy_id: Optional[int] = None
    session: Optional[str] = None
    setup_type: Optional[str] = None
    entry_price: float
    exit_price: Optional[float] = None
    quantity: float = Field(gt=0)
    entry_time: Optional[datetime] = None
    exit_time: Optional[datetime] = None
    commission: float = 0
    fees: float = 0
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    initial_risk: Optional[float] = None
    trade_quality: Optional[str] = None
    followed_rules: Optional[bool] = None
    mistakes: List[str] = []
    emotional_state_entry: Optional[str] = None
    emotional_state_exit: Optional[str] = None
    tags: List[str] = []
    notes: Optional[str] = None

    @field_validator("entry_time", "exit_time")
    @classmethod
    def normalize_time(cls, v):
        return to_utc_naive(v)


class TradeCreate(TradeBase):
    """Schema for creating a trade"""
    pass


class TradeUpdate(BaseModel):
    """Schema for updating a trade"""
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    symbol: Optional[str] = None
    direction: Optional[DirectionEnum] = None
    asset_class: Optional[AssetClassEnum] = None
    status: Optional[TradeStatusEnum] = None
    account_id: Optional[int] = None
    strategy_id: Optional[int] = None
    session: Optional[str] = None
    setup_type: Optional[str] = None
    entry_price: Optional[float] = None
    exit_price: Optional[float] = None
    quantity: Optional[float] = Field(default=None, gt=0)
    entry_time: Optional[datetime] = None
    exit_time: Optional[datetime] = None
    commission: Optional[float] = None
    fees: Optional[float] = None
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    initial_risk: Optional[float] = None
    trade_quality: Optional[str] = None
    followed_rules: Optional[bool] = None
    mistakes: Optional[List[str]] = None
    emotional_state_entry: Optional[str] = None
    emotional_state_exit: Optional[str] = None
    tags: Optional[List[str]] = None
    notes: Optional[str] = None

    @field_validator("entry_time", "exit_time")
    @classmethod
    def normalize_time(cls, v):
        return to_utc_naive(v)


class Trade(BaseModel):
    """Schema for trade from database"""
    id: int
    user_id: int
    account_id: Optional[int] = None
    strategy_id: Optional[int] = None
    symbol: str
    direction: str
    asset_class: Optional[str] = None
    status: Optional[str] = None
    source: Optional[TradeSourceEnum] = None
    external_trade_id: Optional[str] = None
    session: Optional[str] = None
    setup_type: Optional[str] = None
    entry_price: Optional[float] = None
    exit_price: Optional[float] = None
    quantity: Optional[float] = None
    entry_time: Optional[datetime] = None
    exit_time: Optional[datetime] = None
    commission: Optional[float] = None
    fees: Optional[float] = None
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    gross_pnl: Optional[float] = None
    net_pnl: Optional[float] = None
    pnl_percentage: Optional[float] = None
    r_multiple: Optional[float] = None
    initial_risk: Optional[float] = None
    duration_minutes: Optional[int] = None
    trade_quality: Optional[str] = None
    followed_rules: Optional[bool] = None
    mistakes: Optional[List[str]] = None
    emotional_state_entry: Optional[str] = None
    emotional_state_exit: Optional[str] = None
    tags: Optional[List[str]] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TradingAccountBase(BaseModel):
    """Base schema for trading account"""
    account_name: str
    broker: Optional[str] = None
    account_type: Optional[str] = None
    account_number: Optional[str] = None
    initial_balance: Optional[float] = None
    current_balance: Optional[float] = None
    currency: str = "USD"
    status: str = "active"
    risk_settings: Dict[str, Any] = {}


class TradingAccountCreate(TradingAccountBase):
    """Schema for creating a trading account"""
    pass


class TradingAccountUpdate(BaseModel):
    """Schema for updating a trading account"""
    account_name: Optional[str] = None
    broker: Optional[str] = None
    account_type: Optional[str] = None
    account_number: Optional[str] = None
    initial_balance: Optional[float] = None
    current_balance: Optional[float] = None
    currency: Optional[str] = None
    status: Optional[str] = None
    risk_settings: Optional[Dict[str, Any]] = None


class TradingAccount(TradingAccountBase):
    """Schema for trading account from database"""
    id: int
    user_id: int
    connection_type: Optional[str] = None
    risk_settings: Optional[Dict[str, Any]] = None
    tradovate_environment: Optional[str] = None
    tradovate_account_id: Optional[str] = None
    last_sync_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TradeIdRequest(BaseModel):
    """Request body for single-trade operations"""
    trade_id: int


class PnLComputed(BaseModel):
    """Fields written back by the P&L calculator"""
    gross_pnl: float
    net_pnl: float
    pnl_percentage: float
    duration_minutes: Optional[int] = None
    r_multiple: Optional[float] = None


class RecomputePnLResponse(BaseModel):
    """Response for P&L recompute"""
    success: bool = True
    trade_id: int
    computed: PnLComputed


class ExportFilters(BaseModel):
    """Filters accepted by the CSV export"""
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    account_id: Optional[int] = None
    strategy_id: Optional[int] = None
    status: Optional[TradeStatusEnum] = None
    direction: Optional[DirectionEnum] = None


class ExportRequest(BaseModel):
    """Request body for the CSV export"""
    filters: Optional[ExportFilters] = None


class ImportRowError(BaseModel):
    """One skipped or failed row of a CSV import"""
    row: Optional[int] = None
    trade: Optional[str] = None
    error: str


class ImportResponse(BaseModel):
    """Response for the CSV import"""
    success: bool = True
    imported: int
    errors: List[ImportRowError] = []
