"""
User model for TradeJournal

This module defines the User model, including the per-environment Tradovate
OAuth linkage.
"""

import sqlalchemy as sa
from sqlalchemy.orm import relationship

from tradejournal.db.base import Base


class User(Base):
    """User model for authentication, roles and broker connections"""
    __tablename__ = "users"

    email = sa.Column(sa.String(100), unique=True, index=True, nullable=False)
    username = sa.Column(sa.String(50), unique=True, index=True, nullable=False)
    hashed_password = sa.Column(sa.String(255), nullable=False)
    full_name = sa.Column(sa.String(100))
    role = sa.Column(sa.String(20), default="user", nullable=False)  # 'user' or 'admin'
    is_active = sa.Column(sa.Boolean, default=True)

    # Tradovate OAuth tokens, encrypted when a key is configured
    tradovate_demo_tokens = sa.Column(sa.Text)
    tradovate_demo_expires_at = sa.Column(sa.DateTime)
    tradovate_live_tokens = sa.Column(sa.Text)
    tradovate_live_expires_at = sa.Column(sa.DateTime)

    # Relationships
    trades = relationship("Trade", back_populates="user")
    accounts = relationship("TradingAccount", back_populates="user")

    @property
    def is_admin(self) -> bool:
        """Check if user has admin privileges"""
        return self.role == "admin"

    def tradovate_tokens(self, environment: str):
        return getattr(self, f"tradovate_{environment}_tokens")

    def set_tradovate_tokens(self, environment: str, tokens, expires_at) -> None:
        setattr(self, f"tradovate_{environment}_tokens", tokens)
        setattr(self, f"tradovate_{environment}_expires_at", expires_at)

    def __repr__(self):
        return f"<User {self.username}>"
