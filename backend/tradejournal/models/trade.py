"""
Trade model for TradeJournal

This module defines the Trade model for journaled round-trip trades.
"""

import sqlalchemy as sa
from sqlalchemy.orm import relationship

from tradejournal.db.base import Base


class Trade(Base):
    """Model for journaled trades"""
    __tablename__ = "trades"

    user_id = sa.Column(sa.Integer, sa.ForeignKey("users.id"), index=True, nullable=False)
    account_id = sa.Column(sa.Integer, sa.ForeignKey("trading_accounts.id"), index=True)
    strategy_id = sa.Column(sa.Integer, sa.ForeignKey("strategies.id"), index=True)

    symbol = sa.Column(sa.String(32), nullable=False)
    direction = sa.Column(sa.String(10), nullable=False)  # 'long' or 'short'
    asset_class = sa.Column(sa.String(20))
    status = sa.Column(sa.String(10), default="closed", index=True)  # 'open' or 'closed'
    source = sa.Column(sa.String(20), default="manual")  # 'manual', 'import', 'tradovate'
    external_trade_id = sa.Column(sa.String(100), index=True)
    session = sa.Column(sa.String(30))
    setup_type = sa.Column(sa.String(50))

    entry_price = sa.Column(sa.Float)
    exit_price = sa.Column(sa.Float)
    quantity = sa.Column(sa.Float)
    entry_time = sa.Column(sa.DateTime, index=True)
    exit_time = sa.Column(sa.DateTime)
    commission = sa.Column(sa.Float, default=0)
    fees = sa.Column(sa.Float, default=0)
    stop_loss = sa.Column(sa.Float)
    take_profit = sa.Column(sa.Float)

    # Computed by the P&L calculator
    gross_pnl = sa.Column(sa.Float)
    net_pnl = sa.Column(sa.Float)
    pnl_percentage = sa.Column(sa.Float)
    r_multiple = sa.Column(sa.Float)
    initial_risk = sa.Column(sa.Float)
    duration_minutes = sa.Column(sa.Integer)

    # Psychology
    trade_quality = sa.Column(sa.String(10))
    followed_rules = sa.Column(sa.Boolean)
    mistakes = sa.Column(sa.JSON, default=list)
    emotional_state_entry = sa.Column(sa.String(30))
    emotional_state_exit = sa.Column(sa.String(30))
    tags = sa.Column(sa.JSON, default=list)
    notes = sa.Column(sa.Text)

    # Relationships
    user = relationship("User", back_populates="trades")
    account = relationship("TradingAccount", back_populates="trades")
    strategy = relationship("Strategy", back_populates="trades")

    def __repr__(self):
        return f"<Trade {self.id}: {self.direction} {self.quantity} {self.symbol} @ {self.entry_price}>"
