"""Export API: trade history as CSV, JSON or a plain-text report."""

from fastapi import APIRouter
from fastapi.responses import Response

from tradejournal.api.deps import FiltersDep, StoreDep, select_trades
from tradejournal.schemas.filters import TradeFilters
from tradejournal.services.export import export_filename, generate_report, trades_to_csv, trades_to_json
from tradejournal.services.filtering import sort_trades
from tradejournal.services.trade_store import TradeStore

router = APIRouter(prefix="/api/export", tags=["export"])


def _download(content: str, filename: str, media_type: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _trades(store: TradeStore, filters: TradeFilters):
    return sort_trades(select_trades(store, filters), "timestamp", descending=True)


@router.get("/csv")
def export_csv(filters: TradeFilters = FiltersDep, store: TradeStore = StoreDep):
    return _download(trades_to_csv(_trades(store, filters)), export_filename("trades", "csv"), "text/csv")


@router.get("/json")
def export_json(filters: TradeFilters = FiltersDep, store: TradeStore = StoreDep):
    return _download(
        trades_to_json(_trades(store, filters)),
        export_filename("trades", "json"),
        "application/json",
    )


@router.get("/report")
def export_report(filters: TradeFilters = FiltersDep, store: TradeStore = StoreDep):
    return _download(generate_report(_trades(store, filters)), export_filename("report", "txt"), "text/plain")
