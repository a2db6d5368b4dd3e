"""Trade history export: CSV, JSON and a plain-text performance report."""

import csv
import io
import json
import math
from collections.abc import Sequence
from datetime import date, datetime

import pandas as pd

from tradejournal.models.enums import FeeType, MarketType, OrderType, TradeSide, TradeStatus
from tradejournal.models.trade import Trade
from tradejournal.services.analytics import compute_analytics, trade_datetime
from tradejournal.services.breakdowns import fee_breakdown
from tradejournal.utils.constants import CSV_HEADERS, DATE_FORMAT, DATETIME_FORMAT
from tradejournal.utils.formatting import format_profit_factor

RULE = "=" * 80


def _fixed(value: float | None, missing: str = "") -> str:
    if value is None:
        return missing
    return f"{value:.6f}"


def _raw_number(value: float | None) -> str:
    """Plain number text; 0 and missing both render empty."""
    if not value:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _enum_text(value) -> str:
    return getattr(value, "value", value)


def _csv_row(trade: Trade) -> list[str]:
    return [
        trade.id,
        trade_datetime(trade).strftime(DATETIME_FORMAT),
        trade.symbol,
        _enum_text(trade.market),
        _enum_text(trade.side),
        _enum_text(trade.order_type),
        _fixed(trade.size),
        _fixed(trade.entry_price),
        _fixed(trade.exit_price),
        _fixed(trade.fee),
        _enum_text(trade.fee_type) if trade.fee_type else "UNKNOWN",
        _fixed(trade.rebate, missing="0"),
        _fixed(trade.pnl),
        _enum_text(trade.status),
        _raw_number(trade.leverage),
        _raw_number(trade.duration),
    ]


def trades_to_csv(trades: Sequence[Trade]) -> str:
    """Render trades as CSV with the fixed 16-column header.

    The header row is unquoted; every data cell is quoted. Lines are joined
    with "\\n" and there is no trailing newline.
    """
    header = ",".join(CSV_HEADERS)
    if not trades:
        return header

    df = pd.DataFrame([_csv_row(t) for t in trades], columns=CSV_HEADERS, dtype=str)
    buf = io.StringIO()
    df.to_csv(buf, index=False, header=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
    return header + "\n" + buf.getvalue().rstrip("\n")


def _json_record(trade: Trade) -> dict:
    record = {}
    for key, value in trade.model_dump().items():
        if value is None:
            continue
        if isinstance(value, float) and not math.isfinite(value):
            continue
        record[key] = _enum_text(value)
    record["date"] = trade_datetime(trade).strftime(DATETIME_FORMAT)
    return record


def trades_to_json(trades: Sequence[Trade]) -> str:
    """Trade objects plus a human-readable ``date``; missing fields are omitted."""
    return json.dumps([_json_record(t) for t in trades], indent=2, ensure_ascii=False)


def export_filename(prefix: str, ext: str, today: date | None = None) -> str:
    today = today or date.today()
    return f"{prefix}-{today.strftime(DATE_FORMAT)}.{ext}"


def _line(label: str, value) -> str:
    return f"{label + ':':<21}{value}"


def generate_report(trades: Sequence[Trade], now: datetime | None = None) -> str:
    """Fixed-format plaintext performance report."""
    now = now or datetime.now()
    a = compute_analytics(trades)
    fees = fee_breakdown(trades)

    wins = sum(1 for t in trades if t.status == TradeStatus.CLOSED and t.pnl is not None and t.pnl > 0)
    losses = sum(1 for t in trades if t.status == TradeStatus.CLOSED and t.pnl is not None and t.pnl < 0)
    fee_ratio = a.total_fees / a.total_volume * 100 if a.total_volume > 0 else 0.0

    def count(predicate) -> int:
        return sum(1 for t in trades if predicate(t))

    lines = [
        "",
        RULE,
        f"{'TRADING PERFORMANCE REPORT':^80}".rstrip(),
        f"{'Generated: ' + now.strftime(DATETIME_FORMAT):^80}".rstrip(),
        RULE,
        "",
        "SUMMARY",
        "-------",
        _line("Total Trades", a.total_trades),
        _line("Closed Trades", a.closed_trades),
        _line("Open Trades", a.open_trades),
        "",
        "PERFORMANCE",
        "-----------",
        _line("Total PnL", f"${a.total_pnl:.2f}"),
        _line("Win Rate", f"{a.win_rate:.2f}%"),
        _line("Profit Factor", format_profit_factor(a.profit_factor)),
        "",
        _line("Winning Trades", wins),
        _line("Losing Trades", losses),
        "",
        _line("Average Win", f"${a.avg_win:.2f}"),
        _line("Average Loss", f"${a.avg_loss:.2f}"),
        "",
        _line("Largest Win", f"${a.largest_win:.2f}"),
        _line("Largest Loss", f"${a.largest_loss:.2f}"),
        "",
        "VOLUME & FEES",
        "-------------",
        _line("Total Volume", f"${a.total_volume:.2f}"),
        _line("Total Fees", f"${a.total_fees:.2f}"),
        _line("Fee Ratio", f"{fee_ratio:.4f}%"),
        "",
        _line("Maker Fees", f"${fees.maker:.2f}"),
        _line("Taker Fees", f"${fees.taker:.2f}"),
        _line("Total Rebates", f"${fees.rebates:.2f}"),
        "",
        "BY MARKET TYPE",
        "--------------",
        _line("Spot Trades", count(lambda t: t.market == MarketType.SPOT)),
        _line("Perp Trades", count(lambda t: t.market == MarketType.PERP)),
        "",
        "BY DIRECTION",
        "------------",
        _line("Long Trades", count(lambda t: t.side == TradeSide.LONG)),
        _line("Short Trades", count(lambda t: t.side == TradeSide.SHORT)),
        "",
        "BY ORDER TYPE",
        "-------------",
        _line("IOC", count(lambda t: t.order_type == OrderType.IOC)),
        _line("Limit", count(lambda t: t.order_type == OrderType.LIMIT)),
        _line("Market", count(lambda t: t.order_type == OrderType.MARKET)),
        "",
        RULE,
        f"{'END OF REPORT':^80}".rstrip(),
        RULE,
        "",
    ]
    return "\n".join(lines)
