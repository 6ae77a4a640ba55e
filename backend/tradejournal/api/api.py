"""
Main API router for TradeJournal

This module combines all API endpoint routers.
"""

from fastapi import APIRouter

from tradejournal.api.endpoints import (
    accounts, alerts, auth, journal, stats, strategies, trades, tradovate, users
)

# Create main API router
api_router = APIRouter()

# Include endpoint routers
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(trades.router, prefix="/trades", tags=["Trades"])
api_router.include_router(accounts.router, prefix="/accounts", tags=["Trading Accounts"])
api_router.include_router(strategies.router, prefix="/strategies", tags=["Strategies"])
api_router.include_router(journal.router, prefix="/emotional-logs", tags=["Emotional Logs"])
api_router.include_router(alerts.router, prefix="/alerts", tags=["Alerts"])
api_router.include_router(stats.router, prefix="/stats", tags=["Statistics"])
api_router.include_router(tradovate.router, prefix="/tradovate", tags=["Tradovate"])
api_router.include_router(tradovate.callback_router, tags=["Tradovate"])
