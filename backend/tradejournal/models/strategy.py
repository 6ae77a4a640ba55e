"""
Strategy model for TradeJournal

This module defines the Strategy model: a playbook with matching criteria
used to classify journaled trades.
"""

import sqlalchemy as sa
from sqlalchemy.orm import relationship

from tradejournal.db.base import Base


class Strategy(Base):
    """Model for trading strategies"""
    __tablename__ = "strategies"

    user_id = sa.Column(sa.Integer, sa.ForeignKey("users.id"), index=True, nullable=False)
    name = sa.Column(sa.String(100), nullable=False)
    description = sa.Column(sa.Text)
    status = sa.Column(sa.String(20), default="active", index=True)  # 'active' or 'inactive'

    # Matching criteria
    symbols = sa.Column(sa.JSON, default=list)
    asset_classes = sa.Column(sa.JSON, default=list)
    sessions = sa.Column(sa.JSON, default=list)
    setup_types = sa.Column(sa.JSON, default=list)
    timeframes = sa.Column(sa.JSON, default=list)

    # Playbook
    entry_rules = sa.Column(sa.JSON, default=list)
    exit_rules = sa.Column(sa.JSON, default=list)
    risk_rules = sa.Column(sa.JSON, default=dict)
    tags = sa.Column(sa.JSON, default=list)

    # Relationships
    trades = relationship("Trade", back_populates="strategy")

    def __repr__(self):
        return f"<Strategy {self.name}>"
