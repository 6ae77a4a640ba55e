"""
Daily statistics aggregation for TradeJournal

Groups a user's closed trades by the UTC calendar date of their entry and
upserts one DailyStats row per date. The stored row is a pure function of
that date's trades, so recomputing is always safe.
"""

import logging
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy.orm import Session

from tradejournal.repositories.journal import DailyStatsRepository
from tradejournal.repositories.trading import TradeRepository
from tradejournal.utils.time_utils import date_key

logger = logging.getLogger(__name__)

# Profit factor reported when a day has winners but no losers
PROFIT_FACTOR_CAP = 999
MISTAKE_PENALTY = 5


def _unique(values: Iterable[Any]) -> List[Any]:
    """Deduplicate truthy values, keeping first-seen order"""
    seen = OrderedDict()
    for value in values:
        if value and value not in seen:
            seen[value] = True
    return list(seen)


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0


def group_trades_by_date(
    trades: Iterable[Any],
    date_from: Optional[str] = None,
    date_to: Optional[str] = None
) -> "OrderedDict[str, List[Any]]":
    """
    Group trades by the UTC date of their entry time

    Args:
        trades: Trades in the order they should be aggregated
        date_from: Inclusive lower bound, YYYY-MM-DD
        date_to: Inclusive upper bound, YYYY-MM-DD

    Returns:
        OrderedDict[str, List[Any]]: Trades per date, dates in first-seen order
    """
    grouped: "OrderedDict[str, List[Any]]" = OrderedDict()
    for trade in trades:
        if not trade.entry_time:
            continue
        trade_date = date_key(trade.entry_time)
        if date_from and trade_date < date_from:
            continue
        if date_to and trade_date > date_to:
            continue
        grouped.setdefault(trade_date, []).append(trade)
    return grouped


def compute_day_stats(user_id: int, date: str, trades: Sequence[Any]) -> Dict[str, Any]:
    """
    Compute the summary statistics of one trading day

    Args:
        user_id: Owner of the trades
        date: Calendar date, YYYY-MM-DD
        trades: The day's closed trades

    Returns:
        Dict[str, Any]: DailyStats column values
    """
    total = len(trades)
    winners = [t for t in trades if (t.net_pnl or 0) > 0]
    losers = [t for t in trades if (t.net_pnl or 0) < 0]
    breakeven = [t for t in trades if t.net_pnl is not None and t.net_pnl == 0]

    gross_pnl = sum(t.gross_pnl or 0 for t in trades)
    net_pnl = sum(t.net_pnl or 0 for t in trades)
    commissions = sum((t.commission or 0) + (t.fees or 0) for t in trades)

    win_rate = (len(winners) / total) * 100 if total > 0 else 0
    avg_winner = _mean([t.net_pnl for t in winners])
    avg_loser = abs(_mean([t.net_pnl for t in losers]))

    largest_winner = max(t.net_pnl for t in winners) if winners else 0
    largest_loser = min(t.net_pnl for t in losers) if losers else 0

    total_winnings = sum(t.net_pnl for t in winners)
    total_losses = abs(sum(t.net_pnl for t in losers))
    if total_losses > 0:
        profit_factor = total_winnings / total_losses
    else:
        profit_factor = PROFIT_FACTOR_CAP if total_winnings > 0 else 0

    avg_rr = _mean([t.r_multiple for t in trades if t.r_multiple])
    total_r = sum(t.r_multiple or 0 for t in trades)

    rules_followed = len([t for t in trades if t.followed_rules])
    rules_followed_pct = (rules_followed / total) * 100 if total > 0 else 0
    mistakes_count = sum(len(t.mistakes or []) for t in trades)
    discipline_score = max(0, min(100, rules_followed_pct - mistakes_count * MISTAKE_PENALTY))

    return {
        "user_id": user_id,
        "date": date,
        "total_trades": total,
        "winning_trades": len(winners),
        "losing_trades": len(losers),
        "breakeven_trades": len(breakeven),
        "gross_pnl": gross_pnl,
        "net_pnl": net_pnl,
        "commissions": commissions,
        "win_rate": win_rate,
        "avg_winner": avg_winner,
        "avg_loser": avg_loser,
        "largest_winner": largest_winner,
        "largest_loser": largest_loser,
        "profit_factor": profit_factor,
        "avg_rr": avg_rr,
        "total_r": total_r,
        "discipline_score": discipline_score,
        "rules_followed_pct": rules_followed_pct,
        "mistakes_count": mistakes_count,
        "sessions_traded": _unique(t.session for t in trades),
        "symbols_traded": _unique(t.symbol for t in trades),
        "strategies_used": _unique(t.strategy_id for t in trades),
    }


def compute_daily_stats(
    db: Session,
    user_id: int,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    trade_limit: int = 10000
) -> List[Dict[str, Any]]:
    """
    Recompute and upsert the DailyStats rows of a user

    Args:
        db: Database session
        user_id: Whose trades to aggregate
        date_from: Inclusive lower bound, YYYY-MM-DD
        date_to: Inclusive upper bound, YYYY-MM-DD
        trade_limit: Maximum number of recent closed trades to read

    Returns:
        List[Dict[str, Any]]: One ``{"date", "stats"}`` entry per computed date
    """
    trades = TradeRepository(db).get_closed_trades(user_id, limit=trade_limit)
    stats_repo = DailyStatsRepository(db)

    results = []
    for trade_date, date_trades in group_trades_by_date(trades, date_from, date_to).items():
        stats = compute_day_stats(user_id, trade_date, date_trades)
        stats_repo.upsert(user_id, trade_date, stats)
        results.append({"date": trade_date, "stats": stats})

    logger.info(f"Computed daily stats for user {user_id}: {len(results)} date(s)")
    return results
