"""Dashboard API: headline stats, quick stats, streaks and recent trades."""

from fastapi import APIRouter, Query

from tradejournal.api.analytics import analytics_payload
from tradejournal.api.deps import FiltersDep, StoreDep, derive
from tradejournal.schemas.filters import TradeFilters
from tradejournal.schemas.trade import TradeRead
from tradejournal.services import analytics
from tradejournal.services.analytics import closed_trades
from tradejournal.services.filtering import sort_trades
from tradejournal.services.streaks import compute_streaks
from tradejournal.services.trade_store import TradeStore
from tradejournal.utils.formatting import format_duration, format_percentage, format_pnl, time_ago
from tradejournal.utils.serialization import to_jsonable

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/summary")
def dashboard_summary(
    recent: int = Query(default=10, ge=0, le=100),
    filters: TradeFilters = FiltersDep,
    store: TradeStore = StoreDep,
):
    """Everything the overview page shows, in one call."""
    snapshot = derive(store, filters, "analytics", analytics.compute_analytics)
    daily = derive(store, filters, "daily_stats", analytics.generate_daily_stats)
    streaks = derive(store, filters, "streaks", compute_streaks)
    chart = analytics.generate_pnl_chart_data(daily)
    periods = analytics.period_pnl(daily)

    def recent_trades(trades):
        return sort_trades(trades, "timestamp", descending=True)

    ordered = derive(store, filters, "recent_trades", recent_trades)
    closed = closed_trades(ordered)
    best = max(closed, key=lambda t: t.pnl, default=None)
    worst = min(closed, key=lambda t: t.pnl, default=None)

    streak_payload = to_jsonable(streaks)
    streak_payload["is_hot"] = streaks.is_hot
    streak_payload["is_cold"] = streaks.is_cold

    change = analytics.pnl_change_percent(chart)
    recent_payload = []
    for trade in ordered[:recent]:
        item = TradeRead.model_validate(trade).model_dump(mode="json")
        item["age"] = time_ago(trade.timestamp)
        recent_payload.append(item)

    return {
        "analytics": analytics_payload(snapshot),
        "quick_stats": {
            "today_pnl": periods.today,
            "today_pnl_display": format_pnl(periods.today),
            "week_pnl": periods.week,
            "week_pnl_display": format_pnl(periods.week),
            "month_pnl": periods.month,
            "month_pnl_display": format_pnl(periods.month),
            "best_trade": TradeRead.model_validate(best).model_dump(mode="json") if best else None,
            "worst_trade": TradeRead.model_validate(worst).model_dump(mode="json") if worst else None,
            "avg_duration": snapshot.avg_duration,
            "avg_duration_display": format_duration(snapshot.avg_duration),
            "expectancy": snapshot.expectancy,
        },
        "pnl_change_percent": change,
        "pnl_change_display": format_percentage(change),
        "streaks": streak_payload,
        "recent_trades": recent_payload,
    }
