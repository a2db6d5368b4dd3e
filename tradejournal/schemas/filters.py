"""Pydantic schemas for trade filtering."""

from datetime import datetime

from pydantic import BaseModel, model_validator

from tradejournal.models.enums import MarketType, OrderType, TradeSide, TradeStatus


class DateRange(BaseModel):
    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _validate_order(self):
        if self.start > self.end:
            raise ValueError("start must not be after end")
        return self


class TradeFilters(BaseModel):
    """Declarative trade filter. Every field is optional; None means no constraint.

    PnL bounds only apply to trades that have a realized pnl. Open trades
    always pass ``min_pnl`` / ``max_pnl`` so they stay visible when the
    history is narrowed by profit.
    """

    date_range: DateRange | None = None
    symbols: list[str] | None = None
    sides: list[TradeSide] | None = None
    markets: list[MarketType] | None = None
    order_types: list[OrderType] | None = None
    status: list[TradeStatus] | None = None
    min_pnl: float | None = None
    max_pnl: float | None = None
    search_query: str | None = None
