"""
Trading account model for TradeJournal
"""

import sqlalchemy as sa
from sqlalchemy.orm import relationship

from tradejournal.db.base import Base


class TradingAccount(Base):
    """Model for broker accounts, manual or linked through OAuth"""
    __tablename__ = "trading_accounts"

    user_id = sa.Column(sa.Integer, sa.ForeignKey("users.id"), index=True, nullable=False)
    account_name = sa.Column(sa.String(100), nullable=False)
    broker = sa.Column(sa.String(50))
    account_type = sa.Column(sa.String(20))  # e.g. 'live', 'demo', 'prop_firm'
    account_number = sa.Column(sa.String(50))
    initial_balance = sa.Column(sa.Float)
    current_balance = sa.Column(sa.Float)
    currency = sa.Column(sa.String(10), default="USD")
    status = sa.Column(sa.String(20), default="active")
    connection_type = sa.Column(sa.String(20), default="manual")  # 'manual' or 'oauth'
    risk_settings = sa.Column(sa.JSON, default=dict)  # max_daily_loss, max_drawdown, ...

    tradovate_environment = sa.Column(sa.String(10))
    tradovate_account_id = sa.Column(sa.String(50), index=True)
    last_sync_at = sa.Column(sa.DateTime)

    # Relationships
    user = relationship("User", back_populates="accounts")
    trades = relationship("Trade", back_populates="account")

    def __repr__(self):
        return f"<TradingAccount {self.account_name} ({self.broker})>"
