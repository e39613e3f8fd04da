"""
FastAPI application factory and entry point.

This module creates and configures the FastAPI application:
  1. Logging — console logging at settings.LOG_LEVEL
  2. Lifespan manager — creates tables on startup, disposes the engine on shutdown
  3. CORS middleware — allows the dashboard origin(s) to call the API
  4. Exception handlers — maps ledger errors to HTTP responses
  5. Router registration — mounts all endpoint groups

Running locally:
    uvicorn bitsplit.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bitsplit.config import settings
from bitsplit.database import engine, Base
from bitsplit.exceptions import register_exception_handlers
from bitsplit.logging_config import setup_logging
from bitsplit.routers import accounts, admin, transactions, transfers
import bitsplit.models  # noqa: F401  (registers tables on Base.metadata)

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup:
      Creates all tables if they don't exist. Accounts and transactions are
      reloaded from them on every request, and the next transaction id is
      derived from the stored rows, so nothing else needs restoring.

    Shutdown:
      Disposes of the database engine, closing all connections cleanly.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s %s started", settings.APP_NAME, settings.APP_VERSION)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Income splitting ledger: spend, save and invest balances with full history",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------

register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

app.include_router(accounts.router, prefix="/account", tags=["Account"])
app.include_router(transactions.router, prefix="/account", tags=["Transactions"])
app.include_router(transfers.router, prefix="/account", tags=["Transfers"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

@app.get("/health", tags=["Health"])
async def health_check():
    """Liveness probe for load balancers and orchestrators."""
    return {"status": "ok", "version": settings.APP_VERSION}
