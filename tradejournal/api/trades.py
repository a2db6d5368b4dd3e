"""Trade history API."""

import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError
from sqlmodel import Session

from tradejournal.api.deps import FiltersDep, StoreDep, select_trades
from tradejournal.config import settings
from tradejournal.database import get_session
from tradejournal.models.trade import Trade
from tradejournal.schemas.filters import TradeFilters
from tradejournal.schemas.trade import TradeCreate, TradeImportResult, TradePage, TradeRead, TradeUpdate
from tradejournal.services.filtering import SORTABLE_FIELDS, paginate, sort_trades
from tradejournal.services.trade_store import TradeStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/trades", tags=["trades"])


@router.get("", response_model=TradePage)
def list_trades(
    filters: TradeFilters = FiltersDep,
    sort: str = "timestamp",
    order: Literal["asc", "desc"] = "desc",
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=settings.default_page_size, ge=1, le=500),
    store: TradeStore = StoreDep,
):
    if sort not in SORTABLE_FIELDS:
        raise HTTPException(
            status_code=422,
            detail=f"Unknown sort field '{sort}'. Use one of: {', '.join(SORTABLE_FIELDS)}",
        )
    trades = sort_trades(select_trades(store, filters), sort, descending=order == "desc")
    result = paginate(trades, page, page_size)
    return TradePage(
        items=[TradeRead.model_validate(t) for t in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
    )


@router.post("", response_model=TradeRead, status_code=201)
def create_trade(
    data: TradeCreate,
    session: Session = Depends(get_session),
    store: TradeStore = StoreDep,
):
    if session.get(Trade, data.id):
        raise HTTPException(status_code=409, detail=f"Trade '{data.id}' already exists")

    trade = Trade(**data.model_dump())
    session.add(trade)
    session.commit()
    session.refresh(trade)
    store.invalidate()
    return trade


@router.post("/import", response_model=TradeImportResult)
def import_trades(
    data: list[TradeCreate],
    session: Session = Depends(get_session),
    store: TradeStore = StoreDep,
):
    """Bulk insert; ids that already exist (or repeat in the payload) are skipped."""
    created = 0
    skipped: list[str] = []
    seen: set[str] = set()
    for item in data:
        if item.id in seen or session.get(Trade, item.id):
            skipped.append(item.id)
            continue
        seen.add(item.id)
        session.add(Trade(**item.model_dump()))
        created += 1

    session.commit()
    if created:
        store.invalidate()
    logger.info(f"Imported {created} trades, skipped {len(skipped)}")
    return TradeImportResult(created=created, skipped=skipped)


@router.get("/{trade_id}", response_model=TradeRead)
def get_trade(trade_id: str, session: Session = Depends(get_session)):
    trade = session.get(Trade, trade_id)
    if not trade:
        raise HTTPException(status_code=404, detail="Trade not found")
    return trade


@router.put("/{trade_id}", response_model=TradeRead)
def update_trade(
    trade_id: str,
    data: TradeUpdate,
    session: Session = Depends(get_session),
    store: TradeStore = StoreDep,
):
    trade = session.get(Trade, trade_id)
    if not trade:
        raise HTTPException(status_code=404, detail="Trade not found")

    update_data = data.model_dump(exclude_unset=True)

    # Validate the merged record so partial updates cannot break cross-field rules
    merged = {**trade.model_dump(), **update_data}
    try:
        TradeCreate.model_validate(merged)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))

    for key, value in update_data.items():
        setattr(trade, key, value)

    session.add(trade)
    session.commit()
    session.refresh(trade)
    store.invalidate()
    return trade


@router.delete("/{trade_id}", status_code=204)
def delete_trade(
    trade_id: str,
    session: Session = Depends(get_session),
    store: TradeStore = StoreDep,
):
    trade = session.get(Trade, trade_id)
    if not trade:
        raise HTTPException(status_code=404, detail="Trade not found")

    session.delete(trade)
    session.commit()
    store.invalidate()
