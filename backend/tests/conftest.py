"""
Configuration for pytest

This module contains fixtures and configuration for pytest.
"""

from datetime import datetime
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import tradejournal.models  # noqa: F401
from tradejournal.api.deps import get_db, get_settings
from tradejournal.core.config import Settings
from tradejournal.core.security import create_access_token
from tradejournal.db.base import Base
from tradejournal.main import app
from tradejournal.models.trade import Trade
from tradejournal.models.trading_account import TradingAccount
from tradejournal.models.user import User
from tradejournal.repositories.user import UserRepository
from tradejournal.schemas.user import UserCreate

TEST_ENCRYPTION_KEY = "0123456789abcdef" * 4

# A single in-memory database shared by every connection
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_settings(**overrides) -> Settings:
    values = {
        "secret_key": "test-secret-key",
        "database_url": "sqlite://",
        "tradovate_demo_client_id": "demo-client",
        "tradovate_demo_client_secret": "demo-secret",
        "tradovate_live_client_id": None,
        "tradovate_live_client_secret": None,
        "tradovate_encryption_key": TEST_ENCRYPTION_KEY,
        "log_to_file": False,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture(scope="function")
def settings() -> Settings:
    """Settings used by the app under test"""
    return make_settings()


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Get a database session on a fresh schema"""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    yield session

    # Clean up
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db, settings) -> Generator[TestClient, None, None]:
    """Get a TestClient wired to the test session and settings"""
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_settings] = lambda: settings

    yield TestClient(app, raise_server_exceptions=False)

    app.dependency_overrides.clear()


def _create_user(db: Session, username: str, role: str = "user") -> User:
    user_in = UserCreate(
        email=f"{username}@example.com",
        username=username,
        password="password123",
    )
    return UserRepository(db).create(obj_in=user_in, role=role)


@pytest.fixture(scope="function")
def user(db) -> User:
    return _create_user(db, "trader")


@pytest.fixture(scope="function")
def other_user(db) -> User:
    return _create_user(db, "rival")


@pytest.fixture(scope="function")
def admin(db) -> User:
    return _create_user(db, "admin", role="admin")


def auth_headers_for(user: User, settings: Settings) -> dict:
    token = create_access_token(subject=user.id, settings=settings)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def auth_headers(user, settings) -> dict:
    return auth_headers_for(user, settings)


@pytest.fixture(scope="function")
def admin_headers(admin, settings) -> dict:
    return auth_headers_for(admin, settings)


@pytest.fixture(scope="function")
def account(db, user) -> TradingAccount:
    account = TradingAccount(
        user_id=user.id,
        account_name="Main",
        broker="manual",
        risk_settings={"max_daily_loss": 500},
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


@pytest.fixture(scope="function")
def make_trade(db, user) -> Callable[..., Trade]:
    """Factory storing a closed trade for the default user"""

    def _make_trade(**fields) -> Trade:
        values = {
            "user_id": user.id,
            "symbol": "ES",
            "direction": "long",
            "status": "closed",
            "entry_price": 100.0,
            "exit_price": 101.0,
            "quantity": 1.0,
            "entry_time": datetime(2024, 3, 4, 14, 30),
            "commission": 0.0,
            "fees": 0.0,
        }
        values.update(fields)
        trade = Trade(**values)
        db.add(trade)
        db.commit()
        db.refresh(trade)
        return trade

    return _make_trade
