"""
Journal schemas for TradeJournal API

This module defines Pydantic models for strategies, emotional logs, alerts
and daily statistics, plus the request/response bodies of the analytics
operations built on them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tradejournal.utils.time_utils import is_iso_date


def _validate_iso_date(v: Optional[str]) -> Optional[str]:
    if v is not None and not is_iso_date(v):
        raise ValueError("Date must be formatted as YYYY-MM-DD")
    return v


class StrategyStatusEnum(str, Enum):
    """Strategy statuses"""
    ACTIVE = "active"
    INACTIVE = "inactive"


class AlertTypeEnum(str, Enum):
    """Alert types"""
    STREAK = "streak_alert"
    DAILY_LOSS_LIMIT = "daily_loss_limit"
    TILT = "tilt_detected"


class AlertSeverityEnum(str, Enum):
    """Alert severities"""
    WARNING = "warning"
    CRITICAL = "critical"


class LogTypeEnum(str, Enum):
    """Emotional log types"""
    PRE_SESSION = "pre_session"
    POST_SESSION = "post_session"


# Strategies

class StrategyBase(BaseModel):
    """Base schema for strategy"""
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    name: str
    description: Optional[str] = None
    status: StrategyStatusEnum = StrategyStatusEnum.ACTIVE
    symbols: List[str] = []
    asset_classes: List[str] = []
    sessions: List[str] = []
    setup_types: List[str] = []
    timeframes: List[str] = []
    entry_rules: List[Dict[str, Any]] = []
    exit_rules: List[Dict[str, Any]] = []
    risk_rules: Dict[str, Any] = {}
    tags: List[str] = []


class StrategyCreate(StrategyBase):
    """Schema for creating a strategy"""
    pass


class StrategyUpdate(BaseModel):
    """Schema for updating a strategy"""
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[StrategyStatusEnum] = None
    symbols: Optional[List[str]] = None
    asset_classes: Optional[List[str]] = None
    sessions: Optional[List[str]] = None
    setup_types: Optional[List[str]] = None
    timeframes: Optional[List[str]] = None
    entry_rules: Optional[List[Dict[str, Any]]] = None
    exit_rules: Optional[List[Dict[str, Any]]] = None
    risk_rules: Optional[Dict[str, Any]] = None
    tags: Optional[List[str]] = None


class Strategy(StrategyBase):
    """Schema for strategy from database"""
    id: int
    user_id: int
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AutoAssignResponse(BaseModel):
    """Response for strategy auto-assignment"""
    success: bool = True
    assigned: bool
    strategy_id: Optional[int] = None
    strategy_name: Optional[str] = None
    match_score: Optional[int] = None
    reason: Optional[str] = None


# Emotional logs

class EmotionalLogBase(BaseModel):
    """Base schema for emotional log"""
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    date: str
    log_type: LogTypeEnum = LogTypeEnum.PRE_SESSION
    overall_mood: Optional[int] = Field(default=None, ge=1, le=10)
    energy_level: Optional[int] = Field(default=None, ge=1, le=10)
    focus_level: Optional[int] = Field(default=None, ge=1, le=10)
    confidence_level: Optional[int] = Field(default=None, ge=1, le=10)
    stress_level: Optional[int] = Field(default=None, ge=1, le=10)
    sleep_quality: Optional[int] = Field(default=None, ge=1, le=10)
    sleep_hours: Optional[float] = None
    physical_state: Optional[str] = None
    emotions: List[str] = []
    external_factors: List[str] = []
    tilt_detected: bool = False
    pre_session_plan: Optional[str] = None
    session_review: Optional[str] = None
    lessons_learned: Optional[str] = None
    gratitude: Optional[str] = None
    goals_for_tomorrow: Optional[str] = None

    @field_validator("date")
    @classmethod
    def check_date(cls, v):
        return _validate_iso_date(v)


class EmotionalLogUpsert(EmotionalLogBase):
    """Schema for saving the log of a date and log type"""
    pass


class EmotionalLog(EmotionalLogBase):
    """Schema for emotional log from database"""
    id: int
    user_id: int
    log_type: str
    emotions: Optional[List[str]] = None
    external_factors: Optional[List[str]] = None
    tilt_detected: Optional[bool] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# Alerts

class Alert(BaseModel):
    """Schema for alert from database"""
    id: int
    user_id: int
    type: AlertTypeEnum
    severity: AlertSeverityEnum
    title: Optional[str] = None
    message: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    is_read: bool = False
    is_dismissed: bool = False
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AlertsRunRequest(BaseModel):
    """Request body for the alert rule evaluator"""
    user_id: Optional[int] = None


class AlertsRunResponse(BaseModel):
    """Response for the alert rule evaluator"""
    success: bool = True
    alerts_created: int
    alerts: List[Alert]


# Daily statistics

class DailyStatsData(BaseModel):
    """Aggregated statistics for one user and date"""
    user_id: int
    date: str
    total_trades: int
    winning_trades: int
    losing_trades: int
    breakeven_trades: int
    gross_pnl: float
    net_pnl: float
    commissions: float
    win_rate: float
    avg_winner: float
    avg_loser: float
    largest_winner: float
    largest_loser: float
    profit_factor: float
    avg_rr: float
    total_r: float
    discipline_score: float
    rules_followed_pct: float
    mistakes_count: int
    sessions_traded: List[str]
    symbols_traded: List[str]
    strategies_used: List[int]


class DailyStats(DailyStatsData):
    """Schema for daily stats from database"""
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ComputeDailyStatsRequest(BaseModel):
    """Request body for the daily aggregator"""
    user_id: Optional[int] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None

    @field_validator("date_from", "date_to")
    @classmethod
    def check_dates(cls, v):
        return _validate_iso_date(v)


class DailyStatsResult(BaseModel):
    """Stats computed for one date"""
    date: str
    stats: DailyStatsData


class ComputeDailyStatsResponse(BaseModel):
    """Response for the daily aggregator"""
    success: bool = True
    computed_dates: int
    results: List[DailyStatsResult]
