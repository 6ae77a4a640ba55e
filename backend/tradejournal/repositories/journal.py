"""
Journal repository for TradeJournal

This module provides repositories for strategies, daily statistics, alerts
and emotional logs.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from tradejournal.models.alert import Alert
from tradejournal.models.daily_stats import DailyStats
from tradejournal.models.emotional_log import EmotionalLog
from tradejournal.models.strategy import Strategy
from tradejournal.repositories.base import BaseRepository
from tradejournal.schemas.journal import (
    EmotionalLogUpsert,
    StrategyCreate, StrategyUpdate,
)


class StrategyRepository(BaseRepository[Strategy, StrategyCreate, StrategyUpdate]):
    """Repository for strategy operations"""

    def __init__(self, db: Session):
        super().__init__(Strategy, db)

    def get_active_strategies(self, user_id: int) -> List[Strategy]:
        """
        Get a user's active strategies in creation order

        Args:
            user_id: User ID

        Returns:
            List[Strategy]: Active strategies
        """
        return self.filter({"user_id": user_id, "status": "active"})


class DailyStatsRepository(BaseRepository[DailyStats, Any, Any]):
    """Repository for daily statistics"""

    def __init__(self, db: Session):
        super().__init__(DailyStats, db)

    def get_for_date(self, user_id: int, date: str) -> Optional[DailyStats]:
        return self.first({"user_id": user_id, "date": date})

    def upsert(self, user_id: int, date: str, stats: Dict[str, Any]) -> DailyStats:
        """
        Update the row of (user_id, date) or create it

        Args:
            user_id: User ID
            date: Calendar date, YYYY-MM-DD
            stats: Column values

        Returns:
            DailyStats: The stored row
        """
        existing = self.get_for_date(user_id, date)
        if existing:
            return self.update(db_obj=existing, obj_in=stats)
        return self.create(obj_in=stats)


class AlertRepository(BaseRepository[Alert, Any, Any]):
    """Repository for alerts"""

    def __init__(self, db: Session):
        super().__init__(Alert, db)

    def get_user_alerts(
        self,
        user_id: int,
        is_read: Optional[bool] = None,
        is_dismissed: Optional[bool] = None,
        limit: int = 50
    ) -> List[Alert]:
        """
        Get a user's alerts, newest first

        Args:
            user_id: User ID
            is_read: Optional read flag filter
            is_dismissed: Optional dismissed flag filter
            limit: Maximum number of alerts to return

        Returns:
            List[Alert]: Alerts
        """
        filters: Dict[str, Any] = {"user_id": user_id}
        if is_read is not None:
            filters["is_read"] = is_read
        if is_dismissed is not None:
            filters["is_dismissed"] = is_dismissed
        return self.filter(filters, sort="-created_at", limit=limit)


class EmotionalLogRepository(BaseRepository[EmotionalLog, EmotionalLogUpsert, EmotionalLogUpsert]):
    """Repository for emotional logs"""

    def __init__(self, db: Session):
        super().__init__(EmotionalLog, db)

    def get_recent(self, user_id: int, limit: int) -> List[EmotionalLog]:
        return self.filter({"user_id": user_id}, sort="-date", limit=limit)

    def upsert(self, user_id: int, log_in: EmotionalLogUpsert) -> EmotionalLog:
        """
        Save the log of one date and log type, replacing an existing entry

        Args:
            user_id: User ID
            log_in: Log contents

        Returns:
            EmotionalLog: The stored log
        """
        existing = self.first({"user_id": user_id, "date": log_in.date, "log_type": log_in.log_type})
        if existing:
            return self.update(db_obj=existing, obj_in=log_in.model_dump())
        return self.create(obj_in=log_in, user_id=user_id)
