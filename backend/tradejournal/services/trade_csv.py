"""
CSV import and export of trades

The export writes every cell quoted, with empty strings for missing values.
The import accepts several spellings of each column and is best-effort: a
bad row is reported with its line number and the rest of the file still
imports.
"""

import csv
import io
import logging
import math
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tradejournal.core.exceptions import AuthorizationError, JournalError, NotFoundError, ValidationError
from tradejournal.models.user import User
from tradejournal.repositories.trading import TradeRepository, TradingAccountRepository
from tradejournal.schemas.trading import TradeCreate
from tradejournal.services.daily_stats import compute_daily_stats
from tradejournal.services.pnl import apply_trade_pnl
from tradejournal.utils.time_utils import date_key, parse_timestamp, today_key, utcnow

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "ID", "Date", "Time", "Symbol", "Direction", "Status",
    "Entry Price", "Exit Price", "Quantity", "Gross P&L", "Commission",
    "Fees", "Net P&L", "R-Multiple", "Stop Loss", "Take Profit",
    "Setup", "Session", "Quality", "Followed Rules", "Mistakes", "Notes",
]

EXPORT_FILTERS = ("account_id", "strategy_id", "status", "direction")

# Header is line 1, data starts on line 2
FIRST_DATA_LINE = 2


def _cell(value: Any) -> str:
    """Render an export cell; falsy values are blank"""
    if not value:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def trade_to_row(trade: Any) -> List[str]:
    """Render one trade as an export row"""
    entry_date = date_key(trade.entry_time) or ""
    entry_clock = trade.entry_time.strftime("%H:%M:%S") if trade.entry_time else ""
    return [
        _cell(trade.id),
        entry_date,
        entry_clock,
        _cell(trade.symbol),
        _cell(trade.direction),
        _cell(trade.status),
        _cell(trade.entry_price),
        _cell(trade.exit_price),
        _cell(trade.quantity),
        _cell(trade.gross_pnl),
        _cell(trade.commission),
        _cell(trade.fees),
        _cell(trade.net_pnl),
        _cell(trade.r_multiple),
        _cell(trade.stop_loss),
        _cell(trade.take_profit),
        _cell(trade.setup_type),
        _cell(trade.session),
        _cell(trade.trade_quality),
        "Yes" if trade.followed_rules else "No",
        "; ".join(trade.mistakes or []),
        trade.notes or "",
    ]


def export_trades_csv(
    db: Session,
    user: User,
    filters: Optional[Dict[str, Any]] = None,
    limit: int = 10000
) -> Tuple[str, str]:
    """
    Export a user's trades, most recent entry first

    Args:
        db: Database session
        user: Owner of the trades
        filters: Optional account_id, strategy_id, status, direction
        limit: Maximum number of trades

    Returns:
        Tuple[str, str]: Filename and CSV text
    """
    query = {"user_id": user.id}
    for key in EXPORT_FILTERS:
        if filters and filters.get(key):
            query[key] = filters[key]

    trades = TradeRepository(db).filter(query, sort="-entry_time", limit=limit)
    frame = pd.DataFrame([trade_to_row(t) for t in trades], columns=EXPORT_COLUMNS)
    content = frame.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")

    logger.info(f"Exported {len(trades)} trade(s) for user {user.id}")
    return f"trades_export_{today_key()}.csv", content


def _pick(row: Dict[str, str], *labels: str) -> Optional[str]:
    """First non-empty value among the column labels"""
    for label in labels:
        value = (row.get(label) or "").strip()
        if value:
            return value
    return None


def _to_float(value: Optional[str], default: Optional[float] = None) -> Optional[float]:
    if value is None:
        return default
    try:
        number = float(value)
    except ValueError:
        return None
    # nan and inf are not prices
    return number if math.isfinite(number) else None


def parse_trade_row(row: Dict[str, str]) -> Dict[str, Any]:
    """
    Map one CSV row onto trade fields

    Raises:
        ValueError: If a timestamp cannot be parsed
    """
    date_part, time_part = _pick(row, "Date"), _pick(row, "Time")
    combined_time = f"{date_part}T{time_part}Z" if date_part and time_part else None

    entry_time = combined_time or _pick(row, "Entry Time")
    exit_time = _pick(row, "Exit Time") or combined_time

    return {
        "symbol": _pick(row, "Symbol", "symbol"),
        "direction": (_pick(row, "Direction", "direction") or "").lower(),
        "entry_price": _to_float(_pick(row, "Entry Price", "entry_price")),
        "exit_price": _to_float(_pick(row, "Exit Price", "exit_price")),
        "quantity": _to_float(_pick(row, "Quantity", "quantity", "Size"), default=1),
        "commission": _to_float(_pick(row, "Commission", "commission"), default=0) or 0,
        "fees": _to_float(_pick(row, "Fees", "fees"), default=0) or 0,
        "entry_time": parse_timestamp(entry_time) if entry_time else utcnow(),
        "exit_time": parse_timestamp(exit_time) if exit_time else None,
        "status": (_pick(row, "Status", "status") or "closed").lower(),
        "setup_type": _pick(row, "Setup", "setup_type"),
        "session": _pick(row, "Session", "session"),
        "notes": _pick(row, "Notes", "notes"),
    }


def read_csv_rows(content: bytes) -> List[Dict[str, str]]:
    """
    Read CSV bytes into row dictionaries keyed by stripped header labels

    Rows with surplus fields are truncated to the header width so that the
    Nth returned row is always file line N + 2.

    Raises:
        ValidationError: If the file has no data rows
    """
    text = content.decode("utf-8-sig", errors="replace")
    header = _header(text)
    if not header:
        raise ValidationError("CSV file is empty or invalid")

    try:
        frame = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            index_col=False,
            engine="python",
            on_bad_lines=lambda fields: fields[:len(header)],
        )
    except pd.errors.EmptyDataError:
        raise ValidationError("CSV file is empty or invalid")

    if frame.empty:
        raise ValidationError("CSV file is empty or invalid")

    frame.columns = [str(c).strip().replace('"', "") for c in frame.columns]
    frame = frame.fillna("")
    return frame.to_dict(orient="records")


def _header(text: str) -> List[str]:
    for line in text.splitlines():
        if line.strip():
            return next(csv.reader([line]))
    return []


def _schema_error_message(error: SchemaValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else first.get("msg", "Invalid trade")


def import_trades_csv(
    db: Session,
    user: User,
    content: bytes,
    account_id: int,
    stats_trade_limit: int = 10000
) -> Dict[str, Any]:
    """
    Import trades from a CSV file into one of the user's accounts

    Args:
        db: Database session
        user: Importing user; trades belong to the account owner
        content: Raw file content
        account_id: Destination account
        stats_trade_limit: Trade limit passed to the daily aggregator

    Returns:
        Dict[str, Any]: success, imported count and per-row errors

    Raises:
        NotFoundError: If the account does not exist
        AuthorizationError: If the account belongs to someone else
        ValidationError: If the file has no data rows
    """
    account = TradingAccountRepository(db).get(account_id)
    if not account:
        raise NotFoundError("Trading account not found")
    if account.user_id != user.id and not user.is_admin:
        raise AuthorizationError()

    rows = read_csv_rows(content)
    parsed, errors = [], []

    for index, row in enumerate(rows):
        line = index + FIRST_DATA_LINE
        try:
            trade_data = parse_trade_row(row)
        except ValueError as e:
            errors.append({"row": line, "error": str(e)})
            continue

        if not (trade_data["symbol"] and trade_data["direction"] and trade_data["entry_price"] and trade_data["quantity"]):
            logger.debug(f"Skipping CSV line {line}: missing required fields")
            errors.append({"row": line, "error": "Missing required fields"})
            continue
        parsed.append(trade_data)

    trades = TradeRepository(db)
    created = []
    for trade_data in parsed:
        try:
            trade_in = TradeCreate(**trade_data, account_id=account.id)
        except SchemaValidationError as e:
            errors.append({"trade": trade_data["symbol"], "error": _schema_error_message(e)})
            continue

        stored_id = None
        try:
            trade = trades.create(obj_in=trade_in, user_id=account.user_id, source="import")
            stored_id = trade.id
            if trade.status == "closed" and trade.exit_price:
                apply_trade_pnl(db, trade)
        except (JournalError, SQLAlchemyError) as e:
            db.rollback()
            # A trade whose P&L failed is not kept
            if stored_id is not None:
                trades.delete(id=stored_id)
            logger.warning(f"CSV import for user {account.user_id}: could not store {trade_data['symbol']}: {e}")
            errors.append({"trade": trade_data["symbol"], "error": getattr(e, "message", None) or str(e)})
            continue
        created.append(trade)

    if created:
        dates = sorted(date_key(t.entry_time) for t in created)
        compute_daily_stats(db, account.user_id, date_from=dates[0], date_to=dates[-1], trade_limit=stats_trade_limit)

    if errors:
        logger.warning(f"CSV import for user {account.user_id}: {len(errors)} row(s) rejected")
    logger.info(f"CSV import for user {account.user_id}: {len(created)} trade(s) imported")

    return {"success": True, "imported": len(created), "errors": errors}
