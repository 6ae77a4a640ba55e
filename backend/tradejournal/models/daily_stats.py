"""
Daily statistics model for TradeJournal

One row per user and calendar date, fully derived from that day's trades.
"""

import sqlalchemy as sa

from tradejournal.db.base import Base


class DailyStats(Base):
    """Model for per-day trading summaries"""
    __tablename__ = "daily_stats"
    __table_args__ = (sa.UniqueConstraint("user_id", "date", name="uq_daily_stats_user_date"),)

    user_id = sa.Column(sa.Integer, sa.ForeignKey("users.id"), index=True, nullable=False)
    date = sa.Column(sa.String(10), nullable=False, index=True)  # YYYY-MM-DD

    total_trades = sa.Column(sa.Integer, default=0)
    winning_trades = sa.Column(sa.Integer, default=0)
    losing_trades = sa.Column(sa.Integer, default=0)
    breakeven_trades = sa.Column(sa.Integer, default=0)
    gross_pnl = sa.Column(sa.Float, default=0)
    net_pnl = sa.Column(sa.Float, default=0)
    commissions = sa.Column(sa.Float, default=0)
    win_rate = sa.Column(sa.Float, default=0)
    avg_winner = sa.Column(sa.Float, default=0)
    avg_loser = sa.Column(sa.Float, default=0)
    largest_winner = sa.Column(sa.Float, default=0)
    largest_loser = sa.Column(sa.Float, default=0)
    profit_factor = sa.Column(sa.Float, default=0)
    avg_rr = sa.Column(sa.Float, default=0)
    total_r = sa.Column(sa.Float, default=0)
    discipline_score = sa.Column(sa.Float, default=0)
    rules_followed_pct = sa.Column(sa.Float, default=0)
    mistakes_count = sa.Column(sa.Integer, default=0)
    sessions_traded = sa.Column(sa.JSON, default=list)
    symbols_traded = sa.Column(sa.JSON, default=list)
    strategies_used = sa.Column(sa.JSON, default=list)

    def __repr__(self):
        return f"<DailyStats {self.user_id} {self.date}: {self.net_pnl}>"
