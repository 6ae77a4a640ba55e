"""
Strategy auto-matching for TradeJournal

Scores a trade against the owner's active strategies with a fixed weighted
criteria sum and assigns the best match.
"""

import logging
from typing import Any, Dict, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from tradejournal.models.user import User
from tradejournal.repositories.journal import StrategyRepository
from tradejournal.repositories.trading import TradeRepository
from tradejournal.services.pnl import get_owned_trade

logger = logging.getLogger(__name__)

SYMBOL_WEIGHT = 3
ASSET_CLASS_WEIGHT = 2
SESSION_WEIGHT = 2
SETUP_TYPE_WEIGHT = 2
MIN_MATCH_SCORE = 3


def score_strategy(trade: Any, strategy: Any) -> Optional[int]:
    """
    Score how well a trade fits a strategy

    A strategy that lists symbols only applies to those symbols.

    Returns:
        Optional[int]: The score, or None when the strategy does not apply
    """
    score = 0

    if strategy.symbols:
        if trade.symbol not in strategy.symbols:
            return None
        score += SYMBOL_WEIGHT

    if strategy.asset_classes and trade.asset_class in strategy.asset_classes:
        score += ASSET_CLASS_WEIGHT

    if strategy.sessions and trade.session in strategy.sessions:
        score += SESSION_WEIGHT

    if strategy.setup_types and trade.setup_type and trade.setup_type in strategy.setup_types:
        score += SETUP_TYPE_WEIGHT

    return score


def find_best_strategy(trade: Any, strategies: Sequence[Any]) -> Tuple[Optional[Any], int]:
    """
    Pick the highest scoring strategy

    Ties keep the strategy seen first.

    Returns:
        Tuple[Optional[Any], int]: Best strategy (or None) and its score
    """
    best, best_score = None, 0
    for strategy in strategies:
        score = score_strategy(trade, strategy)
        if score is not None and score > best_score:
            best, best_score = strategy, score
    return best, best_score


def auto_assign_strategy(db: Session, trade_id: int, user: User) -> Dict[str, Any]:
    """
    Assign the best matching active strategy to a trade without one

    Args:
        db: Database session
        trade_id: Trade ID
        user: Acting user

    Returns:
        Dict[str, Any]: Assignment outcome
    """
    trade = get_owned_trade(db, trade_id, user)

    if trade.strategy_id:
        return {"success": True, "assigned": False, "reason": "Strategy already assigned"}

    strategies = StrategyRepository(db).get_active_strategies(trade.user_id)
    strategy, score = find_best_strategy(trade, strategies)

    if strategy is None or score < MIN_MATCH_SCORE:
        return {"success": True, "assigned": False, "reason": "No matching strategy found"}

    TradeRepository(db).update(db_obj=trade, obj_in={"strategy_id": strategy.id})
    logger.info(f"Assigned strategy {strategy.id} to trade {trade.id} (score {score})")

    return {
        "success": True,
        "assigned": True,
        "strategy_id": strategy.id,
        "strategy_name": strategy.name,
        "match_score": score,
    }
