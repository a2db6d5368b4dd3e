"""System API: health check, persisted preferences, mock data reseed."""

import logging

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session, func, select

from tradejournal.api.deps import StoreDep
from tradejournal.config import settings
from tradejournal.database import get_session
from tradejournal.models.trade import Trade
from tradejournal.schemas.preferences import PreferencesRead, PreferencesUpdate
from tradejournal.services.app_state import load_app_state, save_preferences
from tradejournal.services.mock_data import seed_database
from tradejournal.services.trade_store import TradeStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/system", tags=["system"])


@router.get("/health")
def health_check(session: Session = Depends(get_session)):
    trade_count = session.exec(select(func.count()).select_from(Trade)).one()
    return {"status": "ok", "network": settings.network, "trades": trade_count}


@router.get("/preferences", response_model=PreferencesRead)
def get_preferences(session: Session = Depends(get_session)):
    return load_app_state(session).preferences()


@router.put("/preferences", response_model=PreferencesRead)
def update_preferences(data: PreferencesUpdate, session: Session = Depends(get_session)):
    state = load_app_state(session)
    updates = data.model_dump(exclude_unset=True, exclude_none=True)
    if "sidebar_collapsed" in updates:
        state.sidebar_collapsed = updates["sidebar_collapsed"]
    if "theme" in updates:
        state.theme = updates["theme"]
    if "selected_period" in updates:
        state.set_period(updates["selected_period"])
    save_preferences(session, state)
    return state.preferences()


@router.post("/preferences/toggle-sidebar", response_model=PreferencesRead)
def toggle_sidebar(session: Session = Depends(get_session)):
    state = load_app_state(session)
    state.toggle_sidebar()
    save_preferences(session, state)
    return state.preferences()


@router.post("/reseed")
def reseed(
    count: int | None = Query(default=None, ge=1, le=10_000),
    session: Session = Depends(get_session),
    store: TradeStore = StoreDep,
):
    """Replace all trades, positions and journal entries with fresh mock data."""
    created = seed_database(session, count=count, force=True)
    store.invalidate()
    logger.info(f"Reseeded mock data ({created} trades)")
    return {"status": "ok", "trades": created}
