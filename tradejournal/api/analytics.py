"""Analytics API: performance metrics, curves and breakdowns.

Every endpoint accepts the trade filter query parameters (``period``,
``start``/``end``, ``symbol``, ``side`` ...). Non-finite floats are returned
as null.
"""

import math

from fastapi import APIRouter, Query

from tradejournal.api.deps import FiltersDep, StoreDep, derive, select_trades
from tradejournal.config import settings
from tradejournal.schemas.filters import TradeFilters
from tradejournal.services import analytics, breakdowns, risk_metrics
from tradejournal.services.scoring import compute_score
from tradejournal.services.streaks import compute_streaks
from tradejournal.services.trade_store import TradeStore
from tradejournal.utils.formatting import format_currency, format_profit_factor, format_ratio
from tradejournal.utils.serialization import to_jsonable

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


def analytics_payload(snapshot: analytics.AnalyticsSnapshot) -> dict:
    payload = to_jsonable(snapshot)
    payload["profit_factor_display"] = format_profit_factor(snapshot.profit_factor)
    return payload


def _daily(store: TradeStore, filters: TradeFilters) -> list[analytics.DailyStats]:
    return derive(store, filters, "daily_stats", analytics.generate_daily_stats)


@router.get("/summary")
def summary(filters: TradeFilters = FiltersDep, store: TradeStore = StoreDep):
    """Headline performance snapshot."""
    return analytics_payload(derive(store, filters, "analytics", analytics.compute_analytics))


@router.get("/equity")
def equity_curve(filters: TradeFilters = FiltersDep, store: TradeStore = StoreDep):
    curve = derive(
        store, filters, "equity_curve",
        lambda trades: analytics.generate_equity_curve(trades, settings.initial_equity),
    )
    return to_jsonable(curve)


@router.get("/daily")
def daily_stats(filters: TradeFilters = FiltersDep, store: TradeStore = StoreDep):
    return to_jsonable(_daily(store, filters))


@router.get("/calendar")
def calendar(filters: TradeFilters = FiltersDep, store: TradeStore = StoreDep):
    return to_jsonable(analytics.generate_calendar_data(_daily(store, filters)))


@router.get("/pnl-chart")
def pnl_chart(filters: TradeFilters = FiltersDep, store: TradeStore = StoreDep):
    return to_jsonable(analytics.generate_pnl_chart_data(_daily(store, filters)))


@router.get("/symbols")
def symbol_stats(filters: TradeFilters = FiltersDep, store: TradeStore = StoreDep):
    return {
        "symbols": to_jsonable(derive(store, filters, "symbol_stats", analytics.generate_symbol_stats)),
        "win_rates": to_jsonable(derive(store, filters, "win_rate_by_symbol", breakdowns.win_rate_by_symbol)),
    }


@router.get("/streaks")
def streaks(filters: TradeFilters = FiltersDep, store: TradeStore = StoreDep):
    info = derive(store, filters, "streaks", compute_streaks)
    payload = to_jsonable(info)
    payload["is_hot"] = info.is_hot
    payload["is_cold"] = info.is_cold
    return payload


@router.get("/score")
def score(filters: TradeFilters = FiltersDep, store: TradeStore = StoreDep):
    snapshot = derive(store, filters, "analytics", analytics.compute_analytics)
    return to_jsonable(compute_score(snapshot))


@router.get("/time")
def time_analysis(filters: TradeFilters = FiltersDep, store: TradeStore = StoreDep):
    """PnL by hour of day, weekday and trading session."""
    return to_jsonable({
        "hourly": derive(store, filters, "hourly", breakdowns.hourly_stats),
        "weekday": derive(store, filters, "weekday", breakdowns.weekday_stats),
        "session": derive(store, filters, "session", breakdowns.session_stats),
    })


@router.get("/direction")
def direction(
    include_spot: bool = False,
    filters: TradeFilters = FiltersDep,
    store: TradeStore = StoreDep,
):
    """Long vs short performance; ``include_spot`` folds BUY into long and SELL into short."""
    stats = derive(
        store, filters, ("direction", include_spot),
        lambda trades: breakdowns.directional_stats(trades, fold_spot=include_spot),
    )
    payload = to_jsonable(stats)
    payload["ratio_display"] = format_ratio(stats.ratio)
    return payload


@router.get("/order-types")
def order_types(filters: TradeFilters = FiltersDep, store: TradeStore = StoreDep):
    return to_jsonable(derive(store, filters, "order_types", breakdowns.order_type_stats))


@router.get("/fees")
def fees(
    days: int = Query(default=30, ge=1, le=366),
    filters: TradeFilters = FiltersDep,
    store: TradeStore = StoreDep,
):
    """Fee totals by market and liquidity side, plus trailing daily fees."""
    breakdown = derive(store, filters, "fee_breakdown", breakdowns.fee_breakdown)
    # Depends on today, so it is recomputed on every call
    activity = breakdowns.daily_activity(select_trades(store, filters), days)
    return to_jsonable({"breakdown": breakdown, "daily": activity})


@router.get("/volume")
def volume(
    days: int = Query(default=30, ge=1, le=366),
    filters: TradeFilters = FiltersDep,
    store: TradeStore = StoreDep,
):
    # Depends on today, so it is recomputed on every call
    activity = breakdowns.daily_activity(select_trades(store, filters), days)
    allocation = derive(store, filters, "volume_allocation", breakdowns.volume_allocation)
    total_volume = math.fsum(d.volume for d in activity)
    total_fees = math.fsum(d.fees for d in activity)
    return to_jsonable({
        "daily": activity,
        "total_volume": total_volume,
        "total_volume_display": format_currency(total_volume),
        "total_fees": total_fees,
        "total_fees_display": format_currency(total_fees),
        "allocation": allocation,
    })


@router.get("/risk")
def risk(filters: TradeFilters = FiltersDep, store: TradeStore = StoreDep):
    def compute(trades):
        curve = analytics.generate_equity_curve(trades, settings.initial_equity)
        return risk_metrics.compute_risk_metrics(curve, analytics.compute_analytics(trades))

    metrics = derive(store, filters, "risk", compute)
    payload = to_jsonable(metrics)
    payload["risk_reward_display"] = format_ratio(metrics.risk_reward_ratio)
    return payload
