"""
Tests for the daily statistics aggregator
"""

import unittest
from datetime import datetime
from types import SimpleNamespace

from tradejournal.models.daily_stats import DailyStats
from tradejournal.services.daily_stats import (
    PROFIT_FACTOR_CAP,
    compute_daily_stats,
    compute_day_stats,
    group_trades_by_date,
)


def trade(net_pnl, **fields):
    values = {
        "net_pnl": net_pnl,
        "gross_pnl": net_pnl,
        "commission": 0,
        "fees": 0,
        "r_multiple": None,
        "followed_rules": True,
        "mistakes": [],
        "session": None,
        "symbol": "ES",
        "strategy_id": None,
        "entry_time": datetime(2024, 3, 4, 14, 30),
    }
    values.update(fields)
    return SimpleNamespace(**values)


class TestComputeDayStats(unittest.TestCase):
    """Test case for single-day aggregation"""

    def test_counts_and_sums(self):
        stats = compute_day_stats(1, "2024-03-04", [
            trade(200, commission=2, fees=1),
            trade(-50),
            trade(0),
            trade(None),
        ])

        self.assertEqual(stats["total_trades"], 4)
        self.assertEqual(stats["winning_trades"], 1)
        self.assertEqual(stats["losing_trades"], 1)
        self.assertEqual(stats["breakeven_trades"], 1)
        self.assertEqual(stats["net_pnl"], 150)
        self.assertEqual(stats["commissions"], 3)
        self.assertEqual(stats["win_rate"], 25)
        self.assertEqual(stats["avg_winner"], 200)
        self.assertEqual(stats["avg_loser"], 50)
        self.assertEqual(stats["largest_winner"], 200)
        self.assertEqual(stats["largest_loser"], -50)
        self.assertEqual(stats["profit_factor"], 4)

    def test_profit_factor_cap_without_losers(self):
        stats = compute_day_stats(1, "2024-03-04", [trade(100), trade(50)])
        self.assertEqual(stats["profit_factor"], PROFIT_FACTOR_CAP)
        self.assertEqual(stats["profit_factor"], 999)

    def test_profit_factor_zero_without_winners_or_losers(self):
        stats = compute_day_stats(1, "2024-03-04", [trade(0)])
        self.assertEqual(stats["profit_factor"], 0)

    def test_r_statistics_skip_missing_values(self):
        stats = compute_day_stats(1, "2024-03-04", [
            trade(100, r_multiple=2.0),
            trade(-50, r_multiple=-1.0),
            trade(10, r_multiple=None),
        ])
        self.assertEqual(stats["avg_rr"], 0.5)
        self.assertEqual(stats["total_r"], 1.0)

    def test_discipline_score(self):
        stats = compute_day_stats(1, "2024-03-04", [
            trade(100, followed_rules=True),
            trade(-50, followed_rules=False, mistakes=["fomo", "moved stop"]),
        ])
        self.assertEqual(stats["rules_followed_pct"], 50)
        self.assertEqual(stats["mistakes_count"], 2)
        self.assertEqual(stats["discipline_score"], 40)

    def test_discipline_score_clamped_at_zero(self):
        stats = compute_day_stats(1, "2024-03-04", [
            trade(-50, followed_rules=False, mistakes=["a"] * 30),
        ])
        self.assertEqual(stats["discipline_score"], 0)

    def test_unique_lists_keep_first_seen_order(self):
        stats = compute_day_stats(1, "2024-03-04", [
            trade(1, session="new_york", symbol="NQ", strategy_id=2),
            trade(1, session="london", symbol="ES", strategy_id=None),
            trade(1, session="new_york", symbol="NQ", strategy_id=1),
        ])
        self.assertEqual(stats["sessions_traded"], ["new_york", "london"])
        self.assertEqual(stats["symbols_traded"], ["NQ", "ES"])
        self.assertEqual(stats["strategies_used"], [2, 1])


class TestGroupTradesByDate(unittest.TestCase):
    """Test case for date grouping"""

    def test_bounds_are_inclusive(self):
        trades = [
            trade(1, entry_time=datetime(2024, 3, 1, 10)),
            trade(1, entry_time=datetime(2024, 3, 2, 23, 59)),
            trade(1, entry_time=datetime(2024, 3, 3, 0, 1)),
            trade(1, entry_time=None),
        ]

        grouped = group_trades_by_date(trades, date_from="2024-03-02", date_to="2024-03-03")
        self.assertEqual(list(grouped), ["2024-03-02", "2024-03-03"])


def test_compute_daily_stats_is_idempotent(db, user, make_trade):
    make_trade(net_pnl=100.0, gross_pnl=100.0)
    make_trade(net_pnl=-40.0, gross_pnl=-40.0, entry_time=datetime(2024, 3, 4, 16, 0))
    make_trade(net_pnl=25.0, gross_pnl=25.0, entry_time=datetime(2024, 3, 5, 9, 0))
    make_trade(net_pnl=999.0, status="open")

    first = compute_daily_stats(db, user.id)
    rows_after_first = [row.to_dict() for row in db.query(DailyStats).order_by(DailyStats.date)]
    second = compute_daily_stats(db, user.id)
    rows_after_second = [row.to_dict() for row in db.query(DailyStats).order_by(DailyStats.date)]

    assert [r["date"] for r in first] == ["2024-03-05", "2024-03-04"]
    assert first == second
    assert len(rows_after_second) == 2
    for before, after in zip(rows_after_first, rows_after_second):
        before.pop("updated_at")
        after.pop("updated_at")
        assert before == after

    march_4 = rows_after_second[0]
    assert march_4["total_trades"] == 2
    assert march_4["net_pnl"] == 60.0


def test_compute_daily_stats_date_range(db, user, make_trade):
    make_trade(net_pnl=10.0, entry_time=datetime(2024, 3, 4, 10, 0))
    make_trade(net_pnl=20.0, entry_time=datetime(2024, 3, 6, 10, 0))

    results = compute_daily_stats(db, user.id, date_from="2024-03-05")

    assert [r["date"] for r in results] == ["2024-03-06"]
    assert db.query(DailyStats).count() == 1
