"""
Tests for CSV import and export of trades
"""

import csv
import io
from datetime import datetime
from unittest.mock import patch

import pytest

from tradejournal.core.exceptions import AuthorizationError, ValidationError
from tradejournal.models.daily_stats import DailyStats
from tradejournal.models.trade import Trade
from tradejournal.services import trade_csv
from tradejournal.services.trade_csv import (
    EXPORT_COLUMNS,
    export_trades_csv,
    import_trades_csv,
    parse_trade_row,
)

IMPORT_CSV = (
    "Date,Time,Symbol,Direction,Entry Price,Exit Price,Quantity,Commission,Setup\n"
    "2024-03-04,14:30:00,ES,Long,5000,5010,2,4.5,breakout\n"
    "2024-03-04,15:00:00,NQ,,18000,17990,1,0,\n"
    "2024-03-05,09:45:00,ES,short,,4990,1,0,\n"
    "\n"
    "2024-03-05,10:15:00,CL,short,80.5,80.0,3,1,reversal\n"
).encode("utf-8")


def test_import_skips_rows_missing_required_fields(db, user, account):
    result = import_trades_csv(db, user, IMPORT_CSV, account.id)

    assert result["success"] is True
    assert result["imported"] == 2
    assert result["errors"] == [
        {"row": 3, "error": "Missing required fields"},
        {"row": 4, "error": "Missing required fields"},
    ]

    trades = db.query(Trade).order_by(Trade.entry_time).all()
    assert [t.symbol for t in trades] == ["ES", "CL"]
    es = trades[0]
    assert es.direction == "long"
    assert es.source == "import"
    assert es.account_id == account.id
    assert es.entry_time == datetime(2024, 3, 4, 14, 30)
    assert es.setup_type == "breakout"
    assert es.gross_pnl == 20.0
    assert es.net_pnl == 15.5


def test_import_recomputes_daily_stats_for_imported_dates(db, user, account):
    import_trades_csv(db, user, IMPORT_CSV, account.id)

    dates = [row.date for row in db.query(DailyStats).order_by(DailyStats.date)]
    assert dates == ["2024-03-04", "2024-03-05"]


def test_import_accepts_snake_case_labels_and_size(db, user, account):
    content = (
        "symbol,direction,entry_price,exit_price,Size,status,Entry Time\n"
        "MES,LONG,5000.25,5001.25,,open,2024-03-04T10:00:00Z\n"
    ).encode("utf-8")

    result = import_trades_csv(db, user, content, account.id)

    assert result["imported"] == 1
    trade = db.query(Trade).one()
    assert trade.quantity == 1
    assert trade.status == "open"
    assert trade.gross_pnl is None


def test_import_reports_invalid_values(db, user, account):
    content = (
        "Symbol,Direction,Entry Price,Quantity\n"
        "ES,sideways,5000,1\n"
    ).encode("utf-8")

    result = import_trades_csv(db, user, content, account.id)

    assert result["imported"] == 0
    assert result["errors"][0]["trade"] == "ES"
    assert result["errors"][0]["error"].startswith("direction")


def test_import_rejects_empty_file(db, user, account):
    with pytest.raises(ValidationError):
        import_trades_csv(db, user, b"Symbol,Direction\n", account.id)
    with pytest.raises(ValidationError):
        import_trades_csv(db, user, b"", account.id)


def test_import_into_foreign_account_is_forbidden(db, other_user, account):
    with pytest.raises(AuthorizationError):
        import_trades_csv(db, other_user, IMPORT_CSV, account.id)


def test_import_treats_non_finite_numbers_as_missing(db, user, account):
    content = (
        "Symbol,Direction,Entry Price,Exit Price,Quantity\n"
        "ES,long,100,101,1\n"
        "NQ,long,nan,101,1\n"
        "YM,long,100,inf,1\n"
        "CL,long,80,81,1\n"
    ).encode("utf-8")

    result = import_trades_csv(db, user, content, account.id)

    assert result["imported"] == 3
    assert result["errors"] == [{"row": 3, "error": "Missing required fields"}]
    stored = {t.symbol: (t.entry_price, t.exit_price, t.net_pnl) for t in db.query(Trade)}
    assert stored == {"ES": (100.0, 101.0, 1.0), "YM": (100.0, None, None), "CL": (80.0, 81.0, 1.0)}


def test_import_keeps_going_after_a_failed_trade(db, user, account):
    content = (
        "Date,Time,Symbol,Direction,Entry Price,Exit Price,Quantity\n"
        "2024-03-04,14:30:00,ES,long,100,101,1\n"
        "2024-03-04,15:00:00,NQ,long,200,201,1\n"
        "2024-03-05,09:30:00,CL,long,80,81,1\n"
    ).encode("utf-8")
    real_apply = trade_csv.apply_trade_pnl

    def apply_or_fail(session, trade):
        if trade.symbol == "NQ":
            raise ValidationError("Missing required fields for P&L calculation")
        return real_apply(session, trade)

    with patch.object(trade_csv, "apply_trade_pnl", side_effect=apply_or_fail):
        result = import_trades_csv(db, user, content, account.id)

    assert result["imported"] == 2
    assert result["errors"] == [{"trade": "NQ", "error": "Missing required fields for P&L calculation"}]
    assert sorted(t.symbol for t in db.query(Trade)) == ["CL", "ES"]
    dates = [row.date for row in db.query(DailyStats).order_by(DailyStats.date)]
    assert dates == ["2024-03-04", "2024-03-05"]


def test_admin_import_belongs_to_account_owner(db, user, admin, account):
    result = import_trades_csv(db, admin, IMPORT_CSV, account.id)

    assert result["imported"] == 2
    assert {t.user_id for t in db.query(Trade)} == {user.id}
    assert {row.user_id for row in db.query(DailyStats)} == {user.id}


def test_parse_trade_row_prefers_date_and_time():
    parsed = parse_trade_row({
        "Date": "2024-03-04",
        "Time": "14:30:00",
        "Entry Time": "2024-01-01T00:00:00Z",
        "Symbol": "ES",
        "Direction": "Short",
    })

    assert parsed["entry_time"] == datetime(2024, 3, 4, 14, 30)
    assert parsed["exit_time"] == datetime(2024, 3, 4, 14, 30)
    assert parsed["direction"] == "short"
    assert parsed["quantity"] == 1
    assert parsed["status"] == "closed"


def test_export_quotes_every_cell(db, user, account, make_trade):
    make_trade(
        entry_time=datetime(2024, 3, 4, 14, 30, 15),
        account_id=account.id,
        net_pnl=15.5,
        followed_rules=True,
        mistakes=["fomo", "late exit"],
        notes='said "never again"',
    )
    make_trade(symbol="NQ", entry_time=datetime(2024, 3, 5, 9, 0), quantity=2.0)

    filename, content = export_trades_csv(db, user)

    assert filename.startswith("trades_export_") and filename.endswith(".csv")
    lines = content.splitlines()
    assert lines[0] == ",".join(f'"{column}"' for column in EXPORT_COLUMNS)
    assert all(line.startswith('"') for line in lines)

    rows = list(csv.DictReader(io.StringIO(content)))
    assert [r["Symbol"] for r in rows] == ["NQ", "ES"]
    es = rows[1]
    assert es["Date"] == "2024-03-04"
    assert es["Time"] == "14:30:15"
    assert es["Entry Price"] == "100"
    assert es["Net P&L"] == "15.5"
    assert es["Gross P&L"] == ""
    assert es["Followed Rules"] == "Yes"
    assert es["Mistakes"] == "fomo; late exit"
    assert es["Notes"] == 'said "never again"'
    assert rows[0]["Followed Rules"] == "No"


def test_export_filters(db, user, account, make_trade):
    make_trade(account_id=account.id)
    make_trade(symbol="NQ", direction="short")

    _, content = export_trades_csv(db, user, {"direction": "short"})
    rows = list(csv.DictReader(io.StringIO(content)))
    assert [r["Symbol"] for r in rows] == ["NQ"]

    _, content = export_trades_csv(db, user, {"account_id": account.id})
    rows = list(csv.DictReader(io.StringIO(content)))
    assert [r["Symbol"] for r in rows] == ["ES"]
