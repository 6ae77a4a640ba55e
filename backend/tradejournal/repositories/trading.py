"""
Trading repository for TradeJournal

This module provides repositories for trades and trading accounts.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from tradejournal.models.trade import Trade
from tradejournal.models.trading_account import TradingAccount
from tradejournal.repositories.base import BaseRepository
from tradejournal.schemas.trading import (
    TradeCreate, TradeUpdate,
    TradingAccountCreate, TradingAccountUpdate,
)


class TradeRepository(BaseRepository[Trade, TradeCreate, TradeUpdate]):
    """Repository for trade operations"""

    def __init__(self, db: Session):
        """
        Initialize the repository

        Args:
            db: Database session
        """
        super().__init__(Trade, db)

    def get_closed_trades(self, user_id: int, limit: Optional[int] = None) -> List[Trade]:
        """
        Get a user's closed trades, most recent entry first

        Args:
            user_id: User ID
            limit: Maximum number of trades to return

        Returns:
            List[Trade]: Closed trades
        """
        return self.filter({"user_id": user_id, "status": "closed"}, sort="-entry_time", limit=limit)

    def get_by_external_id(self, user_id: int, external_trade_id: str) -> Optional[Trade]:
        """
        Get a broker-synced trade by its external ID

        Args:
            user_id: User ID
            external_trade_id: ID derived from the broker order

        Returns:
            Optional[Trade]: Trade or None if not found
        """
        return self.first({"user_id": user_id, "external_trade_id": external_trade_id})


class TradingAccountRepository(BaseRepository[TradingAccount, TradingAccountCreate, TradingAccountUpdate]):
    """Repository for trading account operations"""

    def __init__(self, db: Session):
        """
        Initialize the repository

        Args:
            db: Database session
        """
        super().__init__(TradingAccount, db)

    def get_user_accounts(self, user_id: int) -> List[TradingAccount]:
        return self.filter({"user_id": user_id})

    def get_by_tradovate_id(self, user_id: int, tradovate_account_id: str) -> Optional[TradingAccount]:
        """
        Get an account linked to a Tradovate account

        Args:
            user_id: User ID
            tradovate_account_id: Tradovate's account ID

        Returns:
            Optional[TradingAccount]: Account or None if not found
        """
        return self.first({"user_id": user_id, "tradovate_account_id": tradovate_account_id})
