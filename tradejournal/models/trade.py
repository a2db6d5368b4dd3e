"""Trade model: immutable record of one executed order."""

from sqlmodel import SQLModel, Field

from tradejournal.models.enums import FeeType, MarketType, OrderType, TradeSide, TradeStatus


class Trade(SQLModel, table=True):
    __tablename__ = "trade"

    id: str = Field(primary_key=True)
    timestamp: int = Field(index=True)  # epoch milliseconds
    market: MarketType
    symbol: str = Field(index=True)  # e.g. "SOL-PERP", "SOL/USDC"
    side: TradeSide  # LONG/SHORT for perps, BUY/SELL for spot
    order_type: OrderType
    size: float
    entry_price: float
    exit_price: float | None = None
    fee: float = 0.0
    fee_type: FeeType | None = None
    rebate: float | None = None  # maker rebate
    pnl: float | None = None  # realized, set only once closed
    status: TradeStatus
    duration: float | None = None  # milliseconds, closed trades only
    leverage: float | None = None  # perps only

    @property
    def volume(self) -> float:
        return self.size * self.entry_price
