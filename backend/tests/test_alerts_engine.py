"""
Tests for the alerts engine
"""

import unittest
from datetime import datetime, timedelta
from types import SimpleNamespace

from tradejournal.models.alert import Alert
from tradejournal.models.emotional_log import EmotionalLog
from tradejournal.services.alerts_engine import (
    AlertsEngine,
    count_losing_streak,
    evaluate_daily_loss,
    evaluate_losing_streak,
    evaluate_tilt,
)


def log(**fields):
    values = {
        "date": "2024-03-04",
        "tilt_detected": False,
        "emotions": [],
        "overall_mood": 7,
        "stress_level": 3,
    }
    values.update(fields)
    return SimpleNamespace(**values)


class TestAlertRules(unittest.TestCase):
    """Test case for the individual alert rules"""

    def test_losing_streak_counts_leading_losses(self):
        trades = [SimpleNamespace(net_pnl=p) for p in (-1, -2, -3, 5, -1)]
        self.assertEqual(count_losing_streak(trades), 3)

    def test_losing_streak_severity(self):
        self.assertIsNone(evaluate_losing_streak([SimpleNamespace(net_pnl=-1)] * 2))

        warning = evaluate_losing_streak([SimpleNamespace(net_pnl=-1)] * 3)
        self.assertEqual(warning["type"], "streak_alert")
        self.assertEqual(warning["severity"], "warning")
        self.assertEqual(warning["data"], {"streak_count": 3})

        critical = evaluate_losing_streak([SimpleNamespace(net_pnl=-1)] * 5)
        self.assertEqual(critical["severity"], "critical")
        self.assertEqual(critical["title"], "5 Losing Trades in a Row")

    def test_daily_loss_thresholds(self):
        self.assertIsNone(evaluate_daily_loss(-300, 500))
        self.assertIsNone(evaluate_daily_loss(-450, None))

        warning = evaluate_daily_loss(-400, 500)
        self.assertEqual(warning["severity"], "warning")
        self.assertEqual(warning["data"], {"today_pnl": -400, "max_loss": -500})
        self.assertIn("80% of daily limit reached.", warning["message"])

        critical = evaluate_daily_loss(-500, -500)
        self.assertEqual(critical["severity"], "critical")
        self.assertEqual(critical["message"], "You're at $-500.00 today. Daily limit reached!")

    def test_tilt_indicators(self):
        self.assertIsNone(evaluate_tilt([log(), log(overall_mood=None, stress_level=None)]))
        self.assertIsNotNone(evaluate_tilt([log(tilt_detected=True)]))
        self.assertIsNotNone(evaluate_tilt([log(emotions=["calm", "revenge"])]))
        self.assertIsNotNone(evaluate_tilt([log(overall_mood=4)]))
        self.assertIsNotNone(evaluate_tilt([log(stress_level=8)]))

    def test_tilt_reports_first_matching_log(self):
        alert = evaluate_tilt([log(date="2024-03-05"), log(date="2024-03-04", stress_level=9)])
        self.assertEqual(alert["data"], {"log_date": "2024-03-04", "mood": 7, "stress": 9})


def test_streak_alert_created_once(db, user, make_trade):
    start = datetime(2024, 3, 4, 10, 0)
    make_trade(net_pnl=50.0, entry_time=start)
    for i in range(1, 4):
        make_trade(net_pnl=-10.0, entry_time=start + timedelta(hours=i))

    created = AlertsEngine(db).run(user.id, today="2024-03-10")

    assert [a.type for a in created] == ["streak_alert"]
    assert created[0].severity == "warning"
    assert db.query(Alert).filter(Alert.user_id == user.id).count() == 1


def test_daily_loss_alert_uses_account_limit(db, user, account, make_trade):
    today = datetime(2024, 3, 4, 9, 0)
    make_trade(net_pnl=-300.0, entry_time=today, account_id=account.id)
    make_trade(net_pnl=50.0, entry_time=today + timedelta(hours=1), account_id=account.id)
    make_trade(net_pnl=-160.0, entry_time=today + timedelta(hours=2), account_id=account.id)

    created = AlertsEngine(db).run(user.id, today="2024-03-04")

    assert [a.type for a in created] == ["daily_loss_limit"]
    assert created[0].severity == "warning"
    assert created[0].data == {"today_pnl": -410.0, "max_loss": -500}


def test_tilt_alert_from_recent_logs(db, user):
    for day, stress in (("2024-03-01", 9), ("2024-03-02", 2), ("2024-03-03", 2), ("2024-03-04", 2)):
        db.add(EmotionalLog(user_id=user.id, date=day, stress_level=stress, overall_mood=7))
    db.commit()

    # The stressed day is outside the three most recent logs
    assert AlertsEngine(db).run(user.id) == []

    db.add(EmotionalLog(user_id=user.id, date="2024-03-05", emotions=["frustrated"]))
    db.commit()

    created = AlertsEngine(db).run(user.id)
    assert [a.type for a in created] == ["tilt_detected"]
    assert created[0].data["log_date"] == "2024-03-05"


def test_mark_read_and_dismiss(db, user):
    engine = AlertsEngine(db)
    alert = engine.add_alert(user.id, {
        "type": "streak_alert",
        "severity": "warning",
        "title": "3 Losing Trades in a Row",
        "message": "Take a break.",
        "data": {"streak_count": 3},
    })

    assert engine.mark_read(alert).is_read is True
    dismissed = engine.dismiss(alert)
    assert dismissed.is_dismissed is True
