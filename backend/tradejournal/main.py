"""
TradeJournal - Trading Journal and Analytics
FastAPI Backend Application
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import tradejournal.models  # noqa: F401  registers every table on Base.metadata
from tradejournal.api.api import api_router
from tradejournal.core.config import settings
from tradejournal.core.exceptions import JournalError, UpstreamError
from tradejournal.db.base import Base
from tradejournal.db.session import engine
from tradejournal.monitoring.logger import setup_logging

setup_logging(settings)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create all database tables
    Base.metadata.create_all(bind=engine)
    logger.info("TradeJournal API started")
    yield


app = FastAPI(
    title="TradeJournal API",
    description="Trading journal with P&L analytics, alerts and Tradovate sync",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message}, headers=headers)


@app.exception_handler(JournalError)
async def journal_error_handler(request: Request, exc: JournalError):
    if isinstance(exc, UpstreamError):
        logger.error(
            f"Upstream failure on {request.url.path}: {exc.message} "
            f"(status {exc.upstream_status}): {exc.upstream_body}"
        )
    elif exc.status_code >= 500:
        logger.error(f"{request.url.path}: {exc.message}")
    return error_response(exc.status_code, exc.message, exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return error_response(400, f"{location}: {message}" if location else message)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    return error_response(500, str(exc) or exc.__class__.__name__)


# Include routers
app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/api/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "version": "1.0.0"}


if __name__ == "__main__":
    # Run the application
    uvicorn.run(
        "tradejournal.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
