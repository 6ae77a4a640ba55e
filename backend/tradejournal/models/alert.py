"""
Alert model for TradeJournal
"""

import sqlalchemy as sa

from tradejournal.db.base import Base


class Alert(Base):
    """Model for rule-generated trader alerts"""
    __tablename__ = "alerts"

    user_id = sa.Column(sa.Integer, sa.ForeignKey("users.id"), index=True, nullable=False)
    type = sa.Column(sa.String(30), nullable=False)  # 'streak_alert', 'daily_loss_limit', 'tilt_detected'
    severity = sa.Column(sa.String(10), nullable=False)  # 'warning' or 'critical'
    title = sa.Column(sa.String(200))
    message = sa.Column(sa.Text)
    data = sa.Column(sa.JSON, default=dict)
    is_read = sa.Column(sa.Boolean, default=False, index=True)
    is_dismissed = sa.Column(sa.Boolean, default=False, index=True)

    def __repr__(self):
        return f"<Alert {self.type} ({self.severity})>"
