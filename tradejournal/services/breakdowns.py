"""Secondary analytics views: time buckets, direction, order type, fees, volume.

Unlike the daily stats, every win rate here is taken over closed trades only.
"""

import math
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from tradejournal.models.enums import SIDE_DIRECTION, FeeType, MarketType, OrderType, TradeSide, TradeStatus
from tradejournal.models.position import Position
from tradejournal.models.trade import Trade
from tradejournal.services.analytics import closed_trades, day_key, trade_datetime, win_rate
from tradejournal.utils.constants import DATE_FORMAT, TRADING_SESSIONS, WEEKDAY_NAMES


@dataclass
class BucketStats:
    label: str
    pnl: float = 0.0
    trades: int = 0
    wins: int = 0
    win_rate: float = 0.0


@dataclass
class SideStats:
    count: int = 0
    wins: int = 0
    win_rate: float = 0.0
    pnl: float = 0.0
    volume: float = 0.0


@dataclass
class DirectionalStats:
    long: SideStats
    short: SideStats
    total: int
    ratio: float  # long/short count, inf when only longs


@dataclass
class OrderTypeStats:
    order_type: OrderType
    trades: int = 0
    wins: int = 0
    pnl: float = 0.0
    volume: float = 0.0
    win_rate: float = 0.0


@dataclass
class SymbolWinRate:
    symbol: str
    win_rate: float
    trades: int


@dataclass
class FeeBreakdown:
    total: float = 0.0
    spot: float = 0.0
    perp: float = 0.0
    maker: float = 0.0
    taker: float = 0.0
    unknown: float = 0.0
    rebates: float = 0.0
    net: float = 0.0  # fees paid minus rebates received


@dataclass
class DailyActivity:
    date: str
    volume: float = 0.0
    fees: float = 0.0
    trades: int = 0
    cumulative_fees: float = 0.0


@dataclass
class AllocationSlice:
    name: str
    value: float
    percentage: float


# ---------------------------------------------------------------------------
# Time buckets
# ---------------------------------------------------------------------------

def _bucketed(trades: Sequence[Trade], labels: list[str], key) -> list[BucketStats]:
    buckets = {label: BucketStats(label=label) for label in labels}
    pnl_parts: dict[str, list[float]] = defaultdict(list)

    for trade in closed_trades(trades):
        stats = buckets[key(trade)]
        pnl_parts[stats.label].append(trade.pnl)
        stats.trades += 1
        if trade.pnl > 0:
            stats.wins += 1

    for stats in buckets.values():
        stats.pnl = math.fsum(pnl_parts[stats.label])
        stats.win_rate = win_rate(stats.wins, stats.trades)
    return list(buckets.values())


def hourly_stats(trades: Sequence[Trade]) -> list[BucketStats]:
    """PnL and win rate per local hour of day, 00:00 through 23:00."""
    labels = [f"{hour:02d}:00" for hour in range(24)]
    return _bucketed(trades, labels, lambda t: f"{trade_datetime(t).hour:02d}:00")


def weekday_stats(trades: Sequence[Trade]) -> list[BucketStats]:
    """PnL and win rate per weekday, Sunday first."""
    # isoweekday: Mon=1 .. Sun=7, so % 7 puts Sunday at 0
    return _bucketed(trades, WEEKDAY_NAMES, lambda t: WEEKDAY_NAMES[trade_datetime(t).isoweekday() % 7])


def _session_for(trade: Trade) -> str:
    hour = trade_datetime(trade).hour
    for name, first, end in TRADING_SESSIONS:
        if first <= hour < end:
            return name
    return TRADING_SESSIONS[-1][0]


def session_stats(trades: Sequence[Trade]) -> list[BucketStats]:
    return _bucketed(trades, [name for name, _, _ in TRADING_SESSIONS], _session_for)


# ---------------------------------------------------------------------------
# Direction and order type
# ---------------------------------------------------------------------------

def _side_stats(trades: list[Trade]) -> SideStats:
    wins = sum(1 for t in trades if t.pnl > 0)
    return SideStats(
        count=len(trades),
        wins=wins,
        win_rate=win_rate(wins, len(trades)),
        pnl=math.fsum(t.pnl for t in trades),
        volume=math.fsum(t.size * t.entry_price for t in trades),
    )


def directional_stats(trades: Sequence[Trade], fold_spot: bool = False) -> DirectionalStats:
    """LONG vs SHORT performance.

    Spot BUY/SELL trades are not counted unless ``fold_spot`` is set, in which
    case BUY joins the longs and SELL the shorts. ``total`` is always every
    closed trade.
    """
    closed = closed_trades(trades)
    if fold_spot:
        sides = [SIDE_DIRECTION[TradeSide(t.side)] for t in closed]
    else:
        sides = [t.side for t in closed]
    longs = [t for t, side in zip(closed, sides) if side == TradeSide.LONG]
    shorts = [t for t, side in zip(closed, sides) if side == TradeSide.SHORT]

    if shorts:
        ratio = len(longs) / len(shorts)
    else:
        ratio = math.inf if longs else 0.0

    return DirectionalStats(
        long=_side_stats(longs),
        short=_side_stats(shorts),
        total=len(closed),
        ratio=ratio,
    )


def order_type_stats(trades: Sequence[Trade]) -> list[OrderTypeStats]:
    """Per order type: counts and volume over all trades, PnL over closed ones."""
    stats = {ot: OrderTypeStats(order_type=ot) for ot in OrderType}
    closed_counts: dict[OrderType, int] = defaultdict(int)
    volumes: dict[OrderType, list[float]] = defaultdict(list)
    pnls: dict[OrderType, list[float]] = defaultdict(list)

    for trade in trades:
        entry = stats[OrderType(trade.order_type)]
        entry.trades += 1
        volumes[entry.order_type].append(trade.size * trade.entry_price)
        if trade.status == TradeStatus.CLOSED:
            closed_counts[entry.order_type] += 1
            if trade.pnl is not None:
                pnls[entry.order_type].append(trade.pnl)
                if trade.pnl > 0:
                    entry.wins += 1

    for ot, entry in stats.items():
        entry.volume = math.fsum(volumes[ot])
        entry.pnl = math.fsum(pnls[ot])
        entry.win_rate = win_rate(entry.wins, closed_counts[ot])
    return list(stats.values())


def win_rate_by_symbol(trades: Sequence[Trade]) -> list[SymbolWinRate]:
    counts: dict[str, list[int]] = defaultdict(lambda: [0, 0])  # [wins, total]
    for trade in closed_trades(trades):
        entry = counts[trade.symbol]
        entry[1] += 1
        if trade.pnl > 0:
            entry[0] += 1

    rows = [
        SymbolWinRate(symbol=symbol, win_rate=win_rate(wins, total), trades=total)
        for symbol, (wins, total) in counts.items()
    ]
    return sorted(rows, key=lambda r: (-r.win_rate, r.symbol))


# ---------------------------------------------------------------------------
# Fees and volume
# ---------------------------------------------------------------------------

def fee_breakdown(trades: Sequence[Trade]) -> FeeBreakdown:
    def fees(predicate) -> float:
        return math.fsum(t.fee for t in trades if predicate(t))

    total = math.fsum(t.fee for t in trades)
    rebates = math.fsum(t.rebate or 0.0 for t in trades)
    return FeeBreakdown(
        total=total,
        spot=fees(lambda t: t.market == MarketType.SPOT),
        perp=fees(lambda t: t.market == MarketType.PERP),
        maker=fees(lambda t: t.fee_type == FeeType.MAKER),
        taker=fees(lambda t: t.fee_type == FeeType.TAKER),
        unknown=fees(lambda t: t.fee_type is None),
        rebates=rebates,
        net=total - rebates,
    )


def daily_activity(
    trades: Sequence[Trade],
    days: int = 30,
    today: date | None = None,
) -> list[DailyActivity]:
    """Volume, fees and trade count for each of the trailing ``days`` days.

    Days without trades are present with zeros; trades outside the window
    are ignored.
    """
    if days < 1:
        return []
    today = today or date.today()
    window = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
    rows = {d.strftime(DATE_FORMAT): DailyActivity(date=d.strftime(DATE_FORMAT)) for d in window}

    for trade in trades:
        row = rows.get(day_key(trade))
        if row is None:
            continue
        row.volume += trade.size * trade.entry_price
        row.fees += trade.fee
        row.trades += 1

    cumulative = 0.0
    for row in rows.values():
        cumulative += row.fees
        row.cumulative_fees = cumulative
    return list(rows.values())


def _allocation(values: dict[str, float], limit: int | None) -> list[AllocationSlice]:
    ranked = sorted(values.items(), key=lambda kv: (-kv[1], kv[0]))
    if limit is not None:
        ranked = ranked[:limit]
    total = math.fsum(v for _, v in ranked)
    return [
        AllocationSlice(name=name, value=value, percentage=value / total * 100 if total > 0 else 0.0)
        for name, value in ranked
    ]


def volume_allocation(trades: Sequence[Trade], limit: int = 8) -> list[AllocationSlice]:
    """Share of traded volume per symbol, top ``limit`` symbols."""
    values: dict[str, float] = defaultdict(float)
    for trade in trades:
        values[trade.symbol] += trade.size * trade.entry_price
    return _allocation(values, limit)


def position_allocation(positions: Sequence[Position]) -> list[AllocationSlice]:
    """Share of open exposure (size x mark price) per symbol."""
    values: dict[str, float] = defaultdict(float)
    for position in positions:
        values[position.symbol] += position.size * position.current_price
    return _allocation(values, None)
