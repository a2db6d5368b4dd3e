"""Shared API dependencies."""

from collections.abc import Callable
from datetime import datetime
from typing import Any

from fastapi import Depends, HTTPException, Query
from pydantic import ValidationError

from tradejournal.models.enums import MarketType, OrderType, Period, TradeSide, TradeStatus
from tradejournal.models.trade import Trade
from tradejournal.schemas.filters import DateRange, TradeFilters
from tradejournal.services.filtering import filter_trades, period_date_range
from tradejournal.services.trade_store import TradeStore, get_trade_store


def get_trade_filters(
    period: Period | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    symbol: list[str] | None = Query(default=None),
    side: list[TradeSide] | None = Query(default=None),
    market: list[MarketType] | None = Query(default=None),
    order_type: list[OrderType] | None = Query(default=None),
    status: list[TradeStatus] | None = Query(default=None),
    min_pnl: float | None = None,
    max_pnl: float | None = None,
    q: str | None = None,
) -> TradeFilters:
    """Build TradeFilters from query parameters.

    An explicit ``start``/``end`` wins over ``period``; a single open bound
    is closed with the period range (or the full history when no period).
    """
    date_range = None
    if start is not None or end is not None or period is not None:
        base = period_date_range(period or Period.ALL)
        try:
            date_range = DateRange(start=start or base.start, end=end or base.end)
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))

    return TradeFilters(
        date_range=date_range,
        symbols=symbol,
        sides=side,
        markets=market,
        order_types=order_type,
        status=status,
        min_pnl=min_pnl,
        max_pnl=max_pnl,
        search_query=q or None,
    )


def is_unfiltered(filters: TradeFilters) -> bool:
    return all(value is None or value == [] for value in filters.model_dump().values())


def select_trades(store: TradeStore, filters: TradeFilters) -> list[Trade]:
    trades = store.snapshot()
    if is_unfiltered(filters):
        return list(trades)
    return filter_trades(trades, filters)


def derive(
    store: TradeStore,
    filters: TradeFilters,
    name: str,
    compute: Callable[[list[Trade]], Any],
) -> Any:
    """Run ``compute`` on the filtered trades, memoizing the unfiltered case."""
    if is_unfiltered(filters):
        return store.memo(name, lambda trades: compute(list(trades)))
    return compute(filter_trades(store.snapshot(), filters))


StoreDep = Depends(get_trade_store)
FiltersDep = Depends(get_trade_filters)
