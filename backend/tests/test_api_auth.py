"""
Integration tests for authentication and user endpoints
"""

from datetime import timedelta

from tradejournal.core.security import create_access_token


def test_register_and_login(client):
    response = client.post("/api/auth/register", json={
        "email": "new@example.com",
        "username": "newbie",
        "password": "longenough",
    })
    assert response.status_code == 201
    body = response.json()
    assert body["role"] == "user"
    assert body["tradovate_demo_connected"] is False
    assert "hashed_password" not in body

    response = client.post("/api/auth/login", data={"username": "new@example.com", "password": "longenough"})
    assert response.status_code == 200
    token = response.json()["access_token"]

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["username"] == "newbie"


def test_register_validation(client, user):
    response = client.post("/api/auth/register", json={
        "email": "trader@example.com", "username": "someone", "password": "longenough",
    })
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "A user with this email already exists."}

    response = client.post("/api/auth/register", json={
        "email": "short@example.com", "username": "short", "password": "abc",
    })
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_login_with_wrong_password(client, user):
    response = client.post("/api/auth/login", data={"username": "trader@example.com", "password": "wrong-password"})
    assert response.status_code == 401
    assert response.json()["error"] == "Incorrect email or password"


def test_missing_token_is_401(client):
    response = client.post("/api/trades/recompute-pnl", json={"trade_id": 1})
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Unauthorized"}
    assert response.headers["www-authenticate"] == "Bearer"


def test_invalid_and_expired_tokens_are_401(client, user, settings):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401

    expired = create_access_token(subject=user.id, expires_delta=timedelta(minutes=-5), settings=settings)
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401


def test_update_me(client, auth_headers):
    response = client.put("/api/auth/me", json={"full_name": "Day Trader"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["full_name"] == "Day Trader"


def test_user_list_is_admin_only(client, auth_headers, admin_headers):
    assert client.get("/api/users", headers=auth_headers).status_code == 403

    response = client.get("/api/users", headers=admin_headers)
    assert response.status_code == 200
    assert {u["username"] for u in response.json()} == {"trader", "admin"}


def test_health(client):
    assert client.get("/api/health").json()["status"] == "healthy"
