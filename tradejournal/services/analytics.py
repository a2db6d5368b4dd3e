"""Trade performance aggregation.

Turns a flat list of trades into the statistics shown on the dashboard:
the headline analytics snapshot, the equity curve with drawdown, daily and
per-symbol statistics, the calendar heatmap and the cumulative PnL series.

All functions are pure computation: no I/O, no database access. Inputs may
be in any order; sums use ``math.fsum`` so results do not depend on it.
A trade counts as *closed* when its status is CLOSED and it carries a pnl;
closed records without a pnl are ignored by every PnL-dependent figure.
"""

import logging
import math
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from dateutil.relativedelta import relativedelta

from tradejournal.models.enums import TradeSide, TradeStatus
from tradejournal.models.trade import Trade
from tradejournal.utils.constants import CALENDAR_INTENSITY_THRESHOLDS, DATE_FORMAT

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class AnalyticsSnapshot:
    """Headline performance figures for a set of trades."""
    total_pnl: float = 0.0
    total_volume: float = 0.0
    total_fees: float = 0.0
    total_trades: int = 0
    closed_trades: int = 0
    open_trades: int = 0
    win_rate: float = 0.0
    profit_factor: float = 0.0  # inf when there are wins and no losses
    avg_win: float = 0.0
    avg_loss: float = 0.0  # positive magnitude
    largest_win: float = 0.0
    largest_loss: float = 0.0  # most negative pnl
    gross_profit: float = 0.0
    gross_loss: float = 0.0  # positive magnitude
    expectancy: float = 0.0
    avg_duration: float = 0.0  # milliseconds
    long_trades: int = 0
    short_trades: int = 0
    long_pnl: float = 0.0
    short_pnl: float = 0.0
    long_win_rate: float = 0.0
    short_win_rate: float = 0.0
    long_short_ratio: float = 0.0


@dataclass
class EquityPoint:
    timestamp: int
    equity: float
    drawdown: float
    drawdown_percent: float


@dataclass
class DailyStats:
    date: str  # YYYY-MM-DD, local calendar day
    pnl: float
    trades: int
    volume: float
    fees: float
    win_rate: float


@dataclass
class SymbolStats:
    symbol: str
    trades: int
    volume: float
    pnl: float
    win_rate: float
    avg_trade_duration: float


@dataclass
class CalendarDay:
    date: str
    pnl: float
    trades: int
    intensity: int  # -4..4, sign follows pnl


@dataclass
class PnLChartPoint:
    date: str
    pnl: float
    cumulative: float


@dataclass
class PeriodPnL:
    today: float = 0.0
    week: float = 0.0
    month: float = 0.0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def is_closed(trade: Trade) -> bool:
    """Closed with a realized pnl; the only trades PnL figures look at."""
    return trade.status == TradeStatus.CLOSED and trade.pnl is not None


def closed_trades(trades: Iterable[Trade]) -> list[Trade]:
    result = []
    for trade in trades:
        if is_closed(trade):
            result.append(trade)
        elif trade.status == TradeStatus.CLOSED:
            logger.debug(f"Trade {trade.id} is CLOSED without a pnl; left out of PnL figures")
    return result


def trade_datetime(trade: Trade) -> datetime:
    """Local wall-clock time of the trade."""
    return datetime.fromtimestamp(trade.timestamp / 1000)


def day_key(trade: Trade) -> str:
    return trade_datetime(trade).strftime(DATE_FORMAT)


def chronological(trades: Iterable[Trade]) -> list[Trade]:
    """Oldest first; ties broken by id so the order is reproducible."""
    return sorted(trades, key=lambda t: (t.timestamp, t.id))


def win_rate(wins: int, total: int) -> float:
    if total == 0:
        return 0.0
    return wins / total * 100


def profit_factor(gross_profit: float, gross_loss: float) -> float:
    if gross_loss > 0:
        return gross_profit / gross_loss
    return math.inf if gross_profit > 0 else 0.0


# ---------------------------------------------------------------------------
# Aggregations
# ---------------------------------------------------------------------------

def compute_analytics(trades: Sequence[Trade]) -> AnalyticsSnapshot:
    """Compute the analytics snapshot for ``trades`` (open and closed)."""
    if not trades:
        return AnalyticsSnapshot()

    closed = closed_trades(trades)
    wins = [t.pnl for t in closed if t.pnl > 0]
    losses = [t.pnl for t in closed if t.pnl < 0]

    gross_profit = math.fsum(wins)
    gross_loss = abs(math.fsum(losses))

    avg_win = gross_profit / len(wins) if wins else 0.0
    avg_loss = gross_loss / len(losses) if losses else 0.0
    rate = win_rate(len(wins), len(closed))

    # Expectancy = (Win% x Avg Win) - (Loss% x Avg Loss)
    expectancy = (rate / 100 * avg_win) - ((100 - rate) / 100 * avg_loss)

    # Zero or missing durations are left out of the average
    durations = [t.duration for t in closed if t.duration]
    avg_duration = math.fsum(durations) / len(durations) if durations else 0.0

    longs = [t for t in closed if t.side == TradeSide.LONG]
    shorts = [t for t in closed if t.side == TradeSide.SHORT]
    long_wins = sum(1 for t in longs if t.pnl > 0)
    short_wins = sum(1 for t in shorts if t.pnl > 0)

    # With no shorts the ratio degrades to the raw long count
    long_short_ratio = len(longs) / len(shorts) if shorts else float(len(longs))

    return AnalyticsSnapshot(
        total_pnl=math.fsum(t.pnl for t in closed),
        total_volume=math.fsum(t.size * t.entry_price for t in trades),
        total_fees=math.fsum(t.fee for t in trades),
        total_trades=len(trades),
        closed_trades=len(closed),
        open_trades=sum(1 for t in trades if t.status == TradeStatus.OPEN),
        win_rate=rate,
        profit_factor=profit_factor(gross_profit, gross_loss),
        avg_win=avg_win,
        avg_loss=avg_loss,
        largest_win=max(wins) if wins else 0.0,
        largest_loss=min(losses) if losses else 0.0,
        gross_profit=gross_profit,
        gross_loss=gross_loss,
        expectancy=expectancy,
        avg_duration=avg_duration,
        long_trades=len(longs),
        short_trades=len(shorts),
        long_pnl=math.fsum(t.pnl for t in longs),
        short_pnl=math.fsum(t.pnl for t in shorts),
        long_win_rate=win_rate(long_wins, len(longs)),
        short_win_rate=win_rate(short_wins, len(shorts)),
        long_short_ratio=long_short_ratio,
    )


def generate_equity_curve(
    trades: Sequence[Trade],
    initial_equity: float = 10000.0,
) -> list[EquityPoint]:
    """Rebuild account equity from closed trades, net of fees.

    Returns an empty list when nothing has closed. Otherwise the first point
    is the starting equity at the first trade's timestamp, followed by one
    point per closed trade.
    """
    ordered = chronological(closed_trades(trades))
    if not ordered:
        return []

    equity = initial_equity
    peak = equity
    curve = [EquityPoint(timestamp=ordered[0].timestamp, equity=equity, drawdown=0.0, drawdown_percent=0.0)]

    for trade in ordered:
        equity += trade.pnl - trade.fee
        peak = max(peak, equity)
        drawdown = peak - equity
        drawdown_percent = drawdown / peak * 100 if peak > 0 else 0.0
        curve.append(EquityPoint(
            timestamp=trade.timestamp,
            equity=equity,
            drawdown=drawdown,
            drawdown_percent=drawdown_percent,
        ))

    return curve


def generate_daily_stats(trades: Sequence[Trade]) -> list[DailyStats]:
    """Per-day totals over every trade, sorted by date.

    The win rate here is wins over *all* trades of the day, open ones
    included. Per-symbol and per-time-bucket views divide by closed trades
    instead; both conventions are kept as they are.
    """
    buckets: dict[str, dict] = defaultdict(
        lambda: {"pnl": [], "trades": 0, "volume": [], "fees": [], "wins": 0}
    )

    for trade in trades:
        bucket = buckets[day_key(trade)]
        bucket["trades"] += 1
        bucket["volume"].append(trade.size * trade.entry_price)
        bucket["fees"].append(trade.fee)
        if trade.pnl is not None:
            bucket["pnl"].append(trade.pnl)
            if trade.pnl > 0:
                bucket["wins"] += 1

    return [
        DailyStats(
            date=key,
            pnl=math.fsum(b["pnl"]),
            trades=b["trades"],
            volume=math.fsum(b["volume"]),
            fees=math.fsum(b["fees"]),
            win_rate=win_rate(b["wins"], b["trades"]),
        )
        for key, b in sorted(buckets.items())
    ]


def generate_symbol_stats(trades: Sequence[Trade]) -> list[SymbolStats]:
    """Per-symbol totals, highest volume first."""
    by_symbol: dict[str, list[Trade]] = defaultdict(list)
    for trade in trades:
        by_symbol[trade.symbol].append(trade)

    stats = []
    for symbol, symbol_trades in by_symbol.items():
        closed = [t for t in symbol_trades if t.status == TradeStatus.CLOSED]
        wins = sum(1 for t in closed if (t.pnl or 0) > 0)
        avg_duration = (
            math.fsum(t.duration or 0 for t in closed) / len(closed) if closed else 0.0
        )
        stats.append(SymbolStats(
            symbol=symbol,
            trades=len(symbol_trades),
            volume=math.fsum(t.size * t.entry_price for t in symbol_trades),
            pnl=math.fsum(t.pnl or 0 for t in closed),
            win_rate=win_rate(wins, len(closed)),
            avg_trade_duration=avg_duration,
        ))

    return sorted(stats, key=lambda s: (-s.volume, s.symbol))


def calendar_intensity(pnl: float) -> int:
    """Heatmap bucket 0-4 from |pnl|, negated for losing days."""
    magnitude = abs(pnl)
    intensity = 0
    for threshold, level in CALENDAR_INTENSITY_THRESHOLDS:
        if magnitude > threshold:
            intensity = level
            break
    return intensity if pnl >= 0 else -intensity


def generate_calendar_data(daily_stats: Sequence[DailyStats]) -> list[CalendarDay]:
    return [
        CalendarDay(date=day.date, pnl=day.pnl, trades=day.trades, intensity=calendar_intensity(day.pnl))
        for day in daily_stats
    ]


def generate_pnl_chart_data(daily_stats: Sequence[DailyStats]) -> list[PnLChartPoint]:
    points = []
    cumulative = 0.0
    for stat in daily_stats:
        cumulative += stat.pnl
        points.append(PnLChartPoint(date=stat.date, pnl=stat.pnl, cumulative=cumulative))
    return points


def period_pnl(daily_stats: Sequence[DailyStats], today: date | None = None) -> PeriodPnL:
    """PnL for today, the trailing week and the trailing month."""
    if not daily_stats:
        return PeriodPnL()

    today = today or date.today()
    week_ago = today - timedelta(days=7)
    month_ago = today - relativedelta(months=1)

    result = PeriodPnL()
    for stat in daily_stats:
        day = date.fromisoformat(stat.date)
        if day == today:
            result.today += stat.pnl
        if day >= week_ago:
            result.week += stat.pnl
        if day >= month_ago:
            result.month += stat.pnl
    return result


def pnl_change_percent(points: Sequence[PnLChartPoint], lookback: int = 7) -> float:
    """Change of cumulative PnL over the last ``lookback`` days, in percent."""
    if len(points) < 2:
        return 0.0
    base = points[max(0, len(points) - 1 - lookback)].cumulative
    return (points[-1].cumulative - base) / abs(base or 1) * 100
