"""
P&L calculation for TradeJournal

Derives gross/net P&L, percentage return, R-multiple and holding time for a
single trade from its price, quantity and time fields.
"""

import logging
import math
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from tradejournal.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from tradejournal.models.trade import Trade
from tradejournal.models.user import User
from tradejournal.repositories.trading import TradeRepository

logger = logging.getLogger(__name__)


def compute_initial_risk(entry_price: Optional[float], stop_loss: Optional[float], quantity: Optional[float]) -> Optional[float]:
    """
    Dollar risk of a trade: stop distance times quantity

    Returns:
        Optional[float]: The risk, or None when it cannot be derived or is zero
    """
    if not entry_price or not stop_loss or not quantity:
        return None
    risk = abs(entry_price - stop_loss) * quantity
    return risk if risk > 0 else None


def with_initial_risk(values: Dict[str, Any], current: Optional[Any] = None) -> Dict[str, Any]:
    """
    Fill in initial_risk from the stop loss when it was not given explicitly

    Args:
        values: Incoming trade fields
        current: The stored trade when editing, supplying fields not in values
    """
    if values.get("initial_risk") is not None:
        return values

    inputs = ("entry_price", "stop_loss", "quantity")
    if current is not None and current.initial_risk is not None and not any(name in values for name in inputs):
        return values

    def field(name):
        return values[name] if name in values else getattr(current, name, None)

    risk = compute_initial_risk(field("entry_price"), field("stop_loss"), field("quantity"))
    if risk is not None:
        values = {**values, "initial_risk": risk}
    return values


def compute_trade_pnl(trade: Any) -> Dict[str, Any]:
    """
    Compute the P&L fields of a trade

    Args:
        trade: Any object exposing the Trade attributes

    Returns:
        Dict[str, Any]: gross_pnl, net_pnl, pnl_percentage, duration_minutes
        and, when derivable or previously set, r_multiple

    Raises:
        ValidationError: If entry price, exit price or quantity is missing
    """
    if not trade.entry_price or not trade.exit_price or not trade.quantity:
        raise ValidationError("Missing required fields for P&L calculation")

    if trade.direction == "long":
        price_diff = trade.exit_price - trade.entry_price
    else:
        price_diff = trade.entry_price - trade.exit_price

    gross_pnl = price_diff * trade.quantity
    net_pnl = gross_pnl - (trade.commission or 0) - (trade.fees or 0)
    pnl_percentage = (price_diff / trade.entry_price) * 100 if trade.entry_price > 0 else 0

    # R-multiple needs a stop loss and a positive initial risk
    r_multiple = trade.r_multiple
    if trade.stop_loss and trade.initial_risk and trade.initial_risk > 0:
        r_multiple = net_pnl / trade.initial_risk

    duration_minutes = trade.duration_minutes
    if trade.entry_time and trade.exit_time:
        elapsed = trade.exit_time - trade.entry_time
        # Half-minutes round up
        duration_minutes = math.floor(elapsed.total_seconds() / 60 + 0.5)

    computed = {
        "gross_pnl": gross_pnl,
        "net_pnl": net_pnl,
        "pnl_percentage": pnl_percentage,
        "duration_minutes": duration_minutes,
    }
    if r_multiple is not None:
        computed["r_multiple"] = r_multiple
    return computed


def apply_trade_pnl(db: Session, trade: Trade) -> Dict[str, Any]:
    """Compute and store the P&L fields of a trade"""
    computed = compute_trade_pnl(trade)
    TradeRepository(db).update(db_obj=trade, obj_in=computed)
    logger.debug(f"Recomputed P&L for trade {trade.id}: net {computed['net_pnl']}")
    return computed


def get_owned_trade(db: Session, trade_id: int, user: User) -> Trade:
    """
    Load a trade the user may act on

    Raises:
        NotFoundError: If the trade does not exist
        AuthorizationError: If the trade belongs to someone else and the user is not admin
    """
    trade = TradeRepository(db).get(trade_id)
    if not trade:
        raise NotFoundError("Trade not found")
    if trade.user_id != user.id and not user.is_admin:
        raise AuthorizationError()
    return trade


def recompute_trade_pnl(db: Session, trade_id: int, user: User) -> Dict[str, Any]:
    """
    Recompute and store the P&L of one trade

    Args:
        db: Database session
        trade_id: Trade ID
        user: Acting user

    Returns:
        Dict[str, Any]: The stored fields
    """
    trade = get_owned_trade(db, trade_id, user)
    return apply_trade_pnl(db, trade)
