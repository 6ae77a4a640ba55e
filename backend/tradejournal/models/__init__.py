"""
Database models for TradeJournal

Importing this package registers every table on ``Base.metadata``.
"""

from tradejournal.models.user import User
from tradejournal.models.trading_account import TradingAccount
from tradejournal.models.strategy import Strategy
from tradejournal.models.trade import Trade
from tradejournal.models.daily_stats import DailyStats
from tradejournal.models.alert import Alert
from tradejournal.models.emotional_log import EmotionalLog

__all__ = [
    "User",
    "TradingAccount",
    "Strategy",
    "Trade",
    "DailyStats",
    "Alert",
    "EmotionalLog",
]
