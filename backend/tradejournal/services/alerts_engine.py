"""
Alerts Engine for TradeJournal

This module evaluates a trader's recent activity against three fixed rules
(losing streak, daily loss limit, tilt) and stores an Alert for each rule
that fires. The rules are independent; each creates at most one alert per
run.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from tradejournal.models.alert import Alert
from tradejournal.repositories.journal import AlertRepository, EmotionalLogRepository
from tradejournal.repositories.trading import TradeRepository, TradingAccountRepository
from tradejournal.utils.time_utils import date_key, today_key

logger = logging.getLogger(__name__)

RECENT_TRADES = 10
RECENT_LOGS = 3
STREAK_WARNING = 3
STREAK_CRITICAL = 5
LOSS_LIMIT_WARNING_RATIO = 0.8
TILT_EMOTIONS = ("greedy", "revenge", "frustrated")
LOW_MOOD = 4
HIGH_STRESS = 8


def count_losing_streak(trades: Sequence[Any]) -> int:
    """Length of the leading run of losing trades, most recent first"""
    streak = 0
    for trade in trades:
        if (trade.net_pnl or 0) < 0:
            streak += 1
        else:
            break
    return streak


def is_tilt_log(log: Any) -> bool:
    """Whether an emotional log shows tilt indicators"""
    if log.tilt_detected:
        return True
    if log.emotions and any(emotion in log.emotions for emotion in TILT_EMOTIONS):
        return True
    if log.overall_mood and log.overall_mood <= LOW_MOOD:
        return True
    if log.stress_level and log.stress_level >= HIGH_STRESS:
        return True
    return False


def evaluate_losing_streak(trades: Sequence[Any]) -> Optional[Dict[str, Any]]:
    """
    Losing streak rule

    Args:
        trades: Recent closed trades, most recent entry first

    Returns:
        Optional[Dict[str, Any]]: Alert fields, or None if the rule does not fire
    """
    streak = count_losing_streak(trades)
    if streak < STREAK_WARNING:
        return None
    return {
        "type": "streak_alert",
        "severity": "critical" if streak >= STREAK_CRITICAL else "warning",
        "title": f"{streak} Losing Trades in a Row",
        "message": (
            f"You've had {streak} consecutive losing trades. "
            "Consider taking a break and reviewing your strategy."
        ),
        "data": {"streak_count": streak},
    }


def evaluate_daily_loss(today_pnl: float, max_daily_loss: Optional[float]) -> Optional[Dict[str, Any]]:
    """
    Daily loss limit rule

    Args:
        today_pnl: Net P&L of today's trades
        max_daily_loss: The account's configured limit, sign ignored

    Returns:
        Optional[Dict[str, Any]]: Alert fields, or None if the rule does not fire
    """
    if today_pnl >= 0 or not max_daily_loss:
        return None
    max_loss = -abs(max_daily_loss)
    if today_pnl > max_loss * LOSS_LIMIT_WARNING_RATIO:
        return None

    limit_reached = today_pnl <= max_loss
    suffix = "Daily limit reached!" if limit_reached else "80% of daily limit reached."
    return {
        "type": "daily_loss_limit",
        "severity": "critical" if limit_reached else "warning",
        "title": "Daily Loss Limit Alert",
        "message": f"You're at ${today_pnl:.2f} today. {suffix}",
        "data": {"today_pnl": today_pnl, "max_loss": max_loss},
    }


def evaluate_tilt(logs: Sequence[Any]) -> Optional[Dict[str, Any]]:
    """
    Tilt detection rule

    Args:
        logs: Recent emotional logs, most recent date first

    Returns:
        Optional[Dict[str, Any]]: Alert fields for the first tilted log, or None
    """
    for log in logs:
        if is_tilt_log(log):
            return {
                "type": "tilt_detected",
                "severity": "warning",
                "title": "Emotional State Alert",
                "message": (
                    "Your recent journal entries show potential tilt indicators. "
                    "Consider taking a break."
                ),
                "data": {"log_date": log.date, "mood": log.overall_mood, "stress": log.stress_level},
            }
    return None


class AlertsEngine:
    """
    Evaluate alert rules for one user and store the resulting alerts
    """

    def __init__(self, db: Session):
        """
        Initialize the alerts engine

        Args:
            db: Database session
        """
        self.db = db
        self.trades = TradeRepository(db)
        self.accounts = TradingAccountRepository(db)
        self.logs = EmotionalLogRepository(db)
        self.alerts = AlertRepository(db)

    def add_alert(self, user_id: int, fields: Dict[str, Any]) -> Alert:
        """
        Store an alert and log it at its severity

        Args:
            user_id: Alert owner
            fields: type, severity, title, message, data

        Returns:
            Alert: Stored alert
        """
        alert = self.alerts.create(obj_in={**fields, "user_id": user_id})
        log_method = getattr(logger, fields["severity"], logger.info)
        log_method(f"Alert {alert.id} for user {user_id}: {fields['title']}")
        return alert

    def _today_loss_alert(self, recent_trades: Sequence[Any], today: str) -> Optional[Dict[str, Any]]:
        today_trades = [t for t in recent_trades if t.entry_time and date_key(t.entry_time) == today]
        today_pnl = sum(t.net_pnl or 0 for t in today_trades)
        if not today_trades or today_pnl >= 0:
            return None

        account = self.accounts.get(today_trades[0].account_id) if today_trades[0].account_id else None
        if not account:
            return None
        max_daily_loss = (account.risk_settings or {}).get("max_daily_loss")
        return evaluate_daily_loss(today_pnl, max_daily_loss)

    def run(self, user_id: int, today: Optional[str] = None) -> List[Alert]:
        """
        Evaluate every rule for a user

        Args:
            user_id: User to evaluate
            today: Calendar date treated as today, defaults to the current UTC date

        Returns:
            List[Alert]: Alerts created by this run
        """
        today = today or today_key()
        created = []

        recent_trades = self.trades.get_closed_trades(user_id, limit=RECENT_TRADES)
        recent_logs = self.logs.get_recent(user_id, limit=RECENT_LOGS)

        candidates = [
            evaluate_losing_streak(recent_trades),
            self._today_loss_alert(recent_trades, today),
            evaluate_tilt(recent_logs),
        ]
        for fields in candidates:
            if fields:
                created.append(self.add_alert(user_id, fields))

        logger.info(f"Alerts engine created {len(created)} alert(s) for user {user_id}")
        return created

    def mark_read(self, alert: Alert) -> Alert:
        return self.alerts.update(db_obj=alert, obj_in={"is_read": True})

    def dismiss(self, alert: Alert) -> Alert:
        return self.alerts.update(db_obj=alert, obj_in={"is_read": True, "is_dismissed": True})
