"""Trade filtering, sorting and pagination for the history views."""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from dateutil.relativedelta import relativedelta

from tradejournal.models.enums import Period
from tradejournal.models.trade import Trade
from tradejournal.schemas.filters import DateRange, TradeFilters
from tradejournal.utils.constants import ALL_TIME_START

SORTABLE_FIELDS = (
    "timestamp", "symbol", "market", "side", "order_type", "size",
    "entry_price", "exit_price", "fee", "pnl", "status", "duration", "leverage",
)


@dataclass
class Page:
    items: list
    total: int
    page: int
    page_size: int
    total_pages: int


def _in_date_range(trade: Trade, date_range: DateRange) -> bool:
    # Naive bounds are local wall-clock times, aware bounds are absolute instants
    if date_range.start.tzinfo is not None or date_range.end.tzinfo is not None:
        moment = datetime.fromtimestamp(trade.timestamp / 1000, tz=timezone.utc)
        start = date_range.start if date_range.start.tzinfo else date_range.start.astimezone()
        end = date_range.end if date_range.end.tzinfo else date_range.end.astimezone()
    else:
        moment = datetime.fromtimestamp(trade.timestamp / 1000)
        start, end = date_range.start, date_range.end
    return start <= moment <= end


def _allowed(value, allow_list) -> bool:
    # An empty allow-list is no constraint
    return not allow_list or value in allow_list


def matches(trade: Trade, filters: TradeFilters) -> bool:
    """True when ``trade`` satisfies every constraint present in ``filters``."""
    if filters.date_range is not None and not _in_date_range(trade, filters.date_range):
        return False
    if not _allowed(trade.symbol, filters.symbols):
        return False
    if not _allowed(trade.side, filters.sides):
        return False
    if not _allowed(trade.market, filters.markets):
        return False
    if not _allowed(trade.order_type, filters.order_types):
        return False
    if not _allowed(trade.status, filters.status):
        return False

    # Trades without a realized pnl are never removed by PnL bounds
    if trade.pnl is not None:
        if filters.min_pnl is not None and trade.pnl < filters.min_pnl:
            return False
        if filters.max_pnl is not None and trade.pnl > filters.max_pnl:
            return False

    if filters.search_query:
        query = filters.search_query.lower()
        if query not in trade.symbol.lower() and query not in trade.id.lower():
            return False

    return True


def filter_trades(trades: Sequence[Trade], filters: TradeFilters | None) -> list[Trade]:
    """Return a new list of the trades that pass ``filters``, input order kept."""
    if filters is None:
        return list(trades)
    return [t for t in trades if matches(t, filters)]


def period_date_range(period: Period, now: datetime | None = None) -> DateRange:
    """Date range covering ``period`` and ending at ``now``."""
    end = now or datetime.now()
    if period == Period.ONE_DAY:
        start = end - timedelta(days=1)
    elif period == Period.ONE_WEEK:
        start = end - timedelta(days=7)
    elif period == Period.ONE_MONTH:
        start = end - relativedelta(months=1)
    elif period == Period.THREE_MONTHS:
        start = end - relativedelta(months=3)
    elif period == Period.ONE_YEAR:
        start = end - relativedelta(years=1)
    else:
        start = end.replace(year=ALL_TIME_START.year, month=ALL_TIME_START.month, day=ALL_TIME_START.day)
        if start > end:
            start = end
    return DateRange(start=start, end=end)


def _sort_value(trade: Trade, field: str) -> Any:
    value = getattr(trade, field)
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def sort_trades(
    trades: Sequence[Trade],
    field: str = "timestamp",
    descending: bool = True,
) -> list[Trade]:
    """Sort by ``field``; trades missing the value always go last."""
    if field not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort trades by {field!r}")

    present = [t for t in trades if _sort_value(t, field) is not None]
    missing = [t for t in trades if _sort_value(t, field) is None]
    # Stable two-pass sort so ties keep a reproducible id order
    present.sort(key=lambda t: t.id)
    present.sort(key=lambda t: _sort_value(t, field), reverse=descending)
    return present + missing


def paginate(items: Sequence, page: int = 1, page_size: int = 20) -> Page:
    """Slice out one 1-based page of ``items``."""
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")

    total = len(items)
    start = (page - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size),
    )
