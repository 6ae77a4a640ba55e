"""
Integration tests for trade endpoints
"""

from unittest.mock import patch

from tradejournal.core.security import create_access_token
from tradejournal.models.trade import Trade


def test_create_trade_derives_risk_and_pnl(client, auth_headers, account):
    response = client.post("/api/trades", json={
        "symbol": "ES",
        "direction": "long",
        "account_id": account.id,
        "entry_price": 5000,
        "exit_price": 5010,
        "stop_loss": 4995,
        "quantity": 2,
        "entry_time": "2024-03-04T14:30:00Z",
        "exit_time": "2024-03-04T14:45:00Z",
    }, headers=auth_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["source"] == "manual"
    assert body["initial_risk"] == 10
    assert body["gross_pnl"] == 20
    assert body["r_multiple"] == 2
    assert body["duration_minutes"] == 15


def test_create_trade_rejects_invalid_body(client, auth_headers):
    response = client.post("/api/trades", json={"symbol": "ES", "direction": "up", "entry_price": 1, "quantity": 1},
                           headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_create_trade_in_foreign_account_is_forbidden(client, db, other_user, settings, account):
    headers = {"Authorization": f"Bearer {create_access_token(subject=other_user.id, settings=settings)}"}
    response = client.post("/api/trades", json={
        "symbol": "ES", "direction": "long", "entry_price": 1, "quantity": 1, "account_id": account.id,
    }, headers=headers)
    assert response.status_code == 403


def test_list_update_and_delete(client, auth_headers, make_trade):
    trade = make_trade()
    make_trade(symbol="NQ", status="open")

    response = client.get("/api/trades", params={"status": "closed"}, headers=auth_headers)
    assert [t["symbol"] for t in response.json()] == ["ES"]

    response = client.put(f"/api/trades/{trade.id}", json={"exit_price": 103}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["gross_pnl"] == 3

    assert client.delete(f"/api/trades/{trade.id}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/trades/{trade.id}", headers=auth_headers).status_code == 404


def test_unknown_sort_field_is_400(client, auth_headers):
    response = client.get("/api/trades", params={"sort": "-nope"}, headers=auth_headers)
    assert response.status_code == 400


def test_sort_by_non_column_attribute_is_400(client, auth_headers):
    for sort in ("to_dict", "-metadata", "user"):
        response = client.get("/api/trades", params={"sort": sort}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": f"Unknown sort field: {sort}"}


def test_recompute_pnl(client, auth_headers, make_trade):
    trade = make_trade(entry_price=100, exit_price=110, quantity=10, commission=5, fees=2)

    response = client.post("/api/trades/recompute-pnl", json={"trade_id": trade.id}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "trade_id": trade.id,
        "computed": {
            "gross_pnl": 100.0,
            "net_pnl": 93.0,
            "pnl_percentage": 10.0,
            "duration_minutes": None,
            "r_multiple": None,
        },
    }


def test_recompute_pnl_errors(client, auth_headers, admin_headers, db, other_user, make_trade):
    assert client.post("/api/trades/recompute-pnl", json={}, headers=auth_headers).status_code == 400
    assert client.post("/api/trades/recompute-pnl", json={"trade_id": 999}, headers=auth_headers).status_code == 404

    foreign = make_trade(user_id=other_user.id)
    response = client.post("/api/trades/recompute-pnl", json={"trade_id": foreign.id}, headers=auth_headers)
    assert response.status_code == 403
    assert response.json() == {"success": False, "error": "Forbidden"}

    response = client.post("/api/trades/recompute-pnl", json={"trade_id": foreign.id}, headers=admin_headers)
    assert response.status_code == 200

    incomplete = make_trade(exit_price=None)
    response = client.post("/api/trades/recompute-pnl", json={"trade_id": incomplete.id}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields for P&L calculation"


def test_unhandled_error_is_500(client, auth_headers):
    with patch("tradejournal.api.endpoints.trades.recompute_trade_pnl", side_effect=RuntimeError("disk full")):
        response = client.post("/api/trades/recompute-pnl", json={"trade_id": 1}, headers=auth_headers)

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "disk full"}


def test_export_endpoint(client, auth_headers, make_trade):
    make_trade()

    response = client.post("/api/trades/export", json={"filters": {"status": "closed"}}, headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    disposition = response.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="trades_export_')
    assert response.text.splitlines()[0].startswith('"ID","Date","Time","Symbol"')
    assert len(response.text.splitlines()) == 2


def test_import_endpoint(client, db, auth_headers, account):
    content = (
        "Symbol,Direction,Entry Price,Exit Price,Quantity\n"
        "ES,long,5000,5002,1\n"
        "NQ,,18000,18010,1\n"
    )

    response = client.post(
        "/api/trades/import",
        data={"account_id": str(account.id)},
        files={"file": ("trades.csv", content, "text/csv")},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "imported": 1,
        "errors": [{"row": 3, "trade": None, "error": "Missing required fields"}],
    }
    assert db.query(Trade).count() == 1


def test_import_requires_account(client, auth_headers):
    response = client.post(
        "/api/trades/import",
        files={"file": ("trades.csv", "Symbol\nES\n", "text/csv")},
        headers=auth_headers,
    )
    assert response.status_code == 400
