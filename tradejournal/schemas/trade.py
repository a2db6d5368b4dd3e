"""Pydantic schemas for Trade API."""

from pydantic import BaseModel, Field, field_validator, model_validator

from tradejournal.models.enums import (
    SIDES_BY_MARKET,
    FeeType,
    MarketType,
    OrderType,
    TradeSide,
    TradeStatus,
)


class TradeCreate(BaseModel):
    id: str = Field(min_length=1, max_length=200)
    timestamp: int = Field(ge=0)
    market: MarketType
    symbol: str = Field(min_length=1, max_length=32)
    side: TradeSide
    order_type: OrderType
    size: float = Field(gt=0)
    entry_price: float = Field(gt=0)
    exit_price: float | None = Field(default=None, gt=0)
    fee: float = Field(default=0.0, ge=0)
    fee_type: FeeType | None = None
    rebate: float | None = Field(default=None, ge=0)
    pnl: float | None = None
    status: TradeStatus
    duration: float | None = Field(default=None, ge=0)
    leverage: float | None = Field(default=None, gt=0)

    @field_validator("id", "symbol")
    @classmethod
    def _trim_required_text(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text

    @model_validator(mode="after")
    def _validate_relationships(self):
        if self.side not in SIDES_BY_MARKET[self.market]:
            allowed = ", ".join(sorted(s.value for s in SIDES_BY_MARKET[self.market]))
            raise ValueError(f"side for {self.market.value} trades must be one of: {allowed}")
        if self.status == TradeStatus.CLOSED and self.pnl is None:
            raise ValueError("closed trades must carry a realized pnl")
        if self.status == TradeStatus.OPEN and self.pnl is not None:
            raise ValueError("open trades must not carry a realized pnl")
        if self.status == TradeStatus.OPEN and self.duration is not None:
            raise ValueError("duration is only known once a trade is closed")
        if self.leverage is not None and self.market != MarketType.PERP:
            raise ValueError("leverage only applies to PERP trades")
        return self


class TradeUpdate(BaseModel):
    timestamp: int | None = Field(default=None, ge=0)
    market: MarketType | None = None
    symbol: str | None = Field(default=None, min_length=1, max_length=32)
    side: TradeSide | None = None
    order_type: OrderType | None = None
    size: float | None = Field(default=None, gt=0)
    entry_price: float | None = Field(default=None, gt=0)
    exit_price: float | None = Field(default=None, gt=0)
    fee: float | None = Field(default=None, ge=0)
    fee_type: FeeType | None = None
    rebate: float | None = Field(default=None, ge=0)
    pnl: float | None = None
    status: TradeStatus | None = None
    duration: float | None = Field(default=None, ge=0)
    leverage: float | None = Field(default=None, gt=0)

    @field_validator("symbol")
    @classmethod
    def _trim_optional_text(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text


class TradeRead(BaseModel):
    id: str
    timestamp: int
    market: MarketType
    symbol: str
    side: TradeSide
    order_type: OrderType
    size: float
    entry_price: float
    exit_price: float | None
    fee: float
    fee_type: FeeType | None
    rebate: float | None
    pnl: float | None
    status: TradeStatus
    duration: float | None
    leverage: float | None

    model_config = {"from_attributes": True}


class TradePage(BaseModel):
    items: list[TradeRead]
    total: int
    page: int
    page_size: int
    total_pages: int


class TradeImportResult(BaseModel):
    created: int
    skipped: list[str]
