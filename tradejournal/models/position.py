"""Position model: a currently open exposure reported by the trade source."""

from sqlmodel import SQLModel, Field

from tradejournal.models.enums import MarketType, TradeSide


class Position(SQLModel, table=True):
    __tablename__ = "position"

    id: str = Field(primary_key=True)
    symbol: str = Field(index=True)
    market: MarketType
    side: TradeSide
    size: float
    entry_price: float
    current_price: float
    unrealized_pnl: float
    leverage: float | None = None
    liquidation_price: float | None = None
    margin: float | None = None
    timestamp: int  # epoch milliseconds the position was opened
