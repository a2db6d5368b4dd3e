"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session

from tradejournal.api import analytics, dashboard, export, journal, positions, system, trades
from tradejournal.config import settings
from tradejournal.database import create_db_and_tables, engine
from tradejournal.services.trade_store import trade_store
from tradejournal.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    setup_logging()
    create_db_and_tables()

    if settings.seed_mock_data:
        from tradejournal.services.mock_data import seed_database
        with Session(engine) as session:
            seed_database(session)

    trade_store.invalidate()
    logger.info(f"Trade journal ready ({settings.network})")
    yield


app = FastAPI(
    title="Trade Journal",
    description="Trading journal and performance analytics service",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(trades.router)
app.include_router(analytics.router)
app.include_router(dashboard.router)
app.include_router(positions.router)
app.include_router(journal.router)
app.include_router(export.router)
app.include_router(system.router)
