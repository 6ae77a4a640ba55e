"""
Emotional log model for TradeJournal

Pre- and post-session psychological check-ins, one of each per day.
"""

import sqlalchemy as sa

from tradejournal.db.base import Base


class EmotionalLog(Base):
    """Model for daily psychology journal entries"""
    __tablename__ = "emotional_logs"

    user_id = sa.Column(sa.Integer, sa.ForeignKey("users.id"), index=True, nullable=False)
    date = sa.Column(sa.String(10), nullable=False, index=True)  # YYYY-MM-DD
    log_type = sa.Column(sa.String(20), default="pre_session")  # 'pre_session' or 'post_session'

    # 1-10 scales
    overall_mood = sa.Column(sa.Integer)
    energy_level = sa.Column(sa.Integer)
    focus_level = sa.Column(sa.Integer)
    confidence_level = sa.Column(sa.Integer)
    stress_level = sa.Column(sa.Integer)
    sleep_quality = sa.Column(sa.Integer)
    sleep_hours = sa.Column(sa.Float)
    physical_state = sa.Column(sa.String(20))

    emotions = sa.Column(sa.JSON, default=list)
    external_factors = sa.Column(sa.JSON, default=list)
    tilt_detected = sa.Column(sa.Boolean, default=False)

    pre_session_plan = sa.Column(sa.Text)
    session_review = sa.Column(sa.Text)
    lessons_learned = sa.Column(sa.Text)
    gratitude = sa.Column(sa.Text)
    goals_for_tomorrow = sa.Column(sa.Text)

    def __repr__(self):
        return f"<EmotionalLog {self.date} {self.log_type}>"
