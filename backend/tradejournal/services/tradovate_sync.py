"""
Tradovate connection and sync for TradeJournal

This module drives the per-environment connection lifecycle of a user
(authorize, callback, disconnect) and imports Tradovate accounts and fills
into the journal. Fills are grouped by order and each order becomes one
closed trade, matched on re-sync by its external trade ID.
"""

import base64
import binascii
import json
import logging
import time
from collections import OrderedDict
from datetime import timedelta
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.orm import Session

from tradejournal.core.config import Settings
from tradejournal.core.crypto import open_tokens, seal_tokens
from tradejournal.core.exceptions import NotFoundError, UpstreamError, ValidationError
from tradejournal.models.user import User
from tradejournal.repositories.trading import TradeRepository, TradingAccountRepository
from tradejournal.repositories.user import UserRepository
from tradejournal.schemas.tradovate import TradovateOAuthState
from tradejournal.services.broker_base import BrokerBase
from tradejournal.services.daily_stats import compute_daily_stats
from tradejournal.services.pnl import apply_trade_pnl
from tradejournal.utils.time_utils import parse_timestamp, utcnow

logger = logging.getLogger(__name__)

CALLBACK_PATH = "/api/tradovate-callback"


def callback_url(origin: str) -> str:
    return f"{origin.rstrip('/')}{CALLBACK_PATH}"


def encode_state(user_id: int, environment: str) -> str:
    """Pack the OAuth state as base64 JSON"""
    payload = {"user_id": user_id, "environment": environment, "timestamp": int(time.time() * 1000)}
    return base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")


def decode_state(state: str) -> TradovateOAuthState:
    """
    Unpack the OAuth state

    Raises:
        ValidationError: If the state is not base64 JSON of the expected shape
    """
    try:
        payload = json.loads(base64.b64decode(state, validate=True).decode("utf-8"))
        return TradovateOAuthState.model_validate(payload)
    except (binascii.Error, UnicodeDecodeError, ValueError, SchemaValidationError):
        logger.warning("Rejected undecodable Tradovate OAuth state")
        raise ValidationError("Invalid state")


def start_authorization(broker: BrokerBase, user: User, environment: str, origin: str) -> Dict[str, Any]:
    """
    Build the authorization URL for a user

    Returns:
        Dict[str, Any]: success, auth_url, environment
    """
    state = encode_state(user.id, environment)
    auth_url = broker.authorization_url(callback_url(origin), state)
    logger.info(f"Starting Tradovate {environment} authorization for user {user.id}")
    return {"success": True, "auth_url": auth_url, "environment": environment}


def complete_authorization(
    db: Session,
    broker: BrokerBase,
    state: TradovateOAuthState,
    code: str,
    origin: str,
    settings: Settings
) -> User:
    """
    Exchange the authorization code and store the tokens on the user

    Raises:
        NotFoundError: If the user named in the state does not exist
        UpstreamError: If the code exchange fails
    """
    users = UserRepository(db)
    user = users.get(state.user_id)
    if not user:
        raise NotFoundError("User not found")

    environment = state.environment.value
    token_data = broker.exchange_code(code, callback_url(origin))

    tokens = {
        "access_token": token_data.get("access_token"),
        "refresh_token": token_data.get("refresh_token"),
    }
    expires_in = token_data.get("expires_in")
    expires_at = utcnow() + timedelta(seconds=expires_in) if expires_in else None

    users.set_tradovate_tokens(
        user, environment, seal_tokens(tokens, settings.tradovate_encryption_key), expires_at
    )
    logger.info(f"Connected Tradovate {environment} for user {user.id}")
    return user


def disconnect(db: Session, user: User, environment: str) -> Dict[str, Any]:
    """Forget the tokens of one environment"""
    UserRepository(db).set_tradovate_tokens(user, environment, None, None)
    logger.info(f"Disconnected Tradovate {environment} for user {user.id}")
    return {"success": True, "message": f"Tradovate {environment} disconnected successfully"}


def group_fills_by_order(fills: Sequence[Dict[str, Any]]) -> "OrderedDict[str, List[Dict[str, Any]]]":
    """Group fills by orderId, keeping the order each ID was first seen"""
    grouped: "OrderedDict[str, List[Dict[str, Any]]]" = OrderedDict()
    for fill in fills:
        grouped.setdefault(str(fill.get("orderId")), []).append(fill)
    return grouped


def build_trade_from_fills(order_fills: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Reconstruct one trade from the fills of a single order

    Args:
        order_fills: Fills in broker order, at least one

    Returns:
        Dict[str, Any]: Trade column values derived from the fills
    """
    first_fill, last_fill = order_fills[0], order_fills[-1]

    total_qty = sum(fill.get("qty") or 0 for fill in order_fills)
    if total_qty:
        entry_price = sum((fill.get("price") or 0) * (fill.get("qty") or 0) for fill in order_fills) / total_qty
    else:
        entry_price = first_fill.get("price")

    return {
        "symbol": first_fill.get("contractName") or "UNKNOWN",
        "direction": "long" if first_fill.get("action") == "Buy" else "short",
        "entry_price": entry_price,
        "exit_price": last_fill.get("price"),
        "quantity": total_qty,
        "entry_time": parse_timestamp(first_fill.get("timestamp")),
        "exit_time": parse_timestamp(last_fill.get("timestamp")),
        "commission": sum(fill.get("commission") or 0 for fill in order_fills),
        "fees": sum(fill.get("fees") or 0 for fill in order_fills),
        "status": "closed",
        "asset_class": "futures",
        "source": "tradovate",
    }


class TradovateSync:
    """
    Import one user's Tradovate accounts and fills for one environment
    """

    def __init__(self, db: Session, broker: BrokerBase, settings: Settings, stats_trade_limit: Optional[int] = None):
        self.db = db
        self.broker = broker
        self.settings = settings
        self.trades = TradeRepository(db)
        self.accounts = TradingAccountRepository(db)
        self.stats_trade_limit = stats_trade_limit or settings.stats_trade_limit

    def _access_token(self, user: User, environment: str) -> str:
        stored = user.tradovate_tokens(environment)
        if not stored:
            raise ValidationError(f"Tradovate {environment} not connected. Please authorize first.")
        tokens = open_tokens(stored, self.settings.tradovate_encryption_key)
        return tokens.get("access_token")

    def sync_accounts(self, user: User, environment: str, broker_accounts: Sequence[Dict[str, Any]]) -> "OrderedDict[str, Any]":
        """
        Upsert a TradingAccount per broker account

        Returns:
            OrderedDict[str, Any]: Local account per Tradovate account ID
        """
        synced: "OrderedDict[str, Any]" = OrderedDict()
        for broker_account in broker_accounts:
            tradovate_id = str(broker_account.get("id"))
            account_data = {
                "account_name": broker_account.get("name") or f"Tradovate {environment.upper()}",
                "broker": "tradovate",
                "account_type": environment,
                "account_number": tradovate_id,
                "current_balance": broker_account.get("balance") or 0,
                "currency": "USD",
                "status": "active" if broker_account.get("active") else "inactive",
                "connection_type": "oauth",
                "tradovate_environment": environment,
                "tradovate_account_id": tradovate_id,
                "last_sync_at": utcnow(),
            }

            existing = self.accounts.get_by_tradovate_id(user.id, tradovate_id)
            if existing:
                synced[tradovate_id] = self.accounts.update(db_obj=existing, obj_in=account_data)
            else:
                synced[tradovate_id] = self.accounts.create(obj_in=account_data, user_id=user.id)
        return synced

    def sync_fills(self, user: User, environment: str, fills: Sequence[Dict[str, Any]], account_id: Optional[int]) -> Dict[str, int]:
        """
        Upsert one trade per order

        Returns:
            Dict[str, int]: trades_created and trades_updated counts
        """
        created, updated = 0, 0
        for order_id, order_fills in group_fills_by_order(fills).items():
            external_trade_id = f"tradovate_{environment}_{order_id}"
            trade_data = build_trade_from_fills(order_fills)
            trade_data.update({"account_id": account_id, "external_trade_id": external_trade_id})

            existing = self.trades.get_by_external_id(user.id, external_trade_id)
            if existing:
                self.trades.update(db_obj=existing, obj_in=trade_data)
                updated += 1
            else:
                trade = self.trades.create(obj_in=trade_data, user_id=user.id)
                if trade.entry_price and trade.exit_price and trade.quantity:
                    apply_trade_pnl(self.db, trade)
                created += 1
        return {"trades_created": created, "trades_updated": updated}

    def run(self, user: User, environment: str, account_id: Optional[Union[int, str]] = None) -> Dict[str, Any]:
        """
        Sync accounts and fills

        Args:
            user: Connected user
            environment: 'demo' or 'live'
            account_id: Tradovate account to read fills from, defaults to the first

        Returns:
            Dict[str, Any]: Sync summary

        Raises:
            ValidationError: If the environment is not connected
            UpstreamError: If the account list cannot be fetched
        """
        access_token = self._access_token(user, environment)

        broker_accounts = self.broker.list_accounts(access_token)
        synced_accounts = self.sync_accounts(user, environment, broker_accounts)
        summary = {"success": True, "accounts_synced": len(synced_accounts)}

        target_id = str(account_id) if account_id else next(iter(synced_accounts), None)
        if not target_id:
            logger.info(f"Tradovate {environment} sync for user {user.id}: no accounts")
            return {**summary, "message": "No accounts found"}

        try:
            fills = self.broker.list_fills(access_token, target_id)
        except UpstreamError:
            logger.warning(f"Tradovate {environment} sync for user {user.id}: fills unavailable")
            return {**summary, "message": "Accounts synced, but failed to fetch trades"}

        local_account = synced_accounts.get(target_id)
        if local_account is None and synced_accounts:
            local_account = next(iter(synced_accounts.values()))
        counts = self.sync_fills(user, environment, fills, local_account.id if local_account else None)

        total = counts["trades_created"] + counts["trades_updated"]
        if total:
            compute_daily_stats(self.db, user.id, trade_limit=self.stats_trade_limit)

        logger.info(
            f"Tradovate {environment} sync for user {user.id}: "
            f"{summary['accounts_synced']} account(s), {counts['trades_created']} created, "
            f"{counts['trades_updated']} updated"
        )
        return {**summary, **counts, "total_trades": total}
