"""Enumerations shared by the trade, position and journal models."""

from enum import Enum


class MarketType(str, Enum):
    SPOT = "SPOT"
    PERP = "PERP"


class TradeSide(str, Enum):
    LONG = "LONG"
    SHORT = "SHORT"
    BUY = "BUY"
    SELL = "SELL"


class OrderType(str, Enum):
    IOC = "IOC"
    LIMIT = "LIMIT"
    MARKET = "MARKET"


class TradeStatus(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class FeeType(str, Enum):
    MAKER = "MAKER"
    TAKER = "TAKER"


class Sentiment(str, Enum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"


class Period(str, Enum):
    ONE_DAY = "1D"
    ONE_WEEK = "1W"
    ONE_MONTH = "1M"
    THREE_MONTHS = "3M"
    ONE_YEAR = "1Y"
    ALL = "ALL"


class Theme(str, Enum):
    DARK = "dark"
    LIGHT = "light"


# Perps quote LONG/SHORT, spot quotes BUY/SELL.
SIDES_BY_MARKET: dict[MarketType, frozenset[TradeSide]] = {
    MarketType.PERP: frozenset({TradeSide.LONG, TradeSide.SHORT}),
    MarketType.SPOT: frozenset({TradeSide.BUY, TradeSide.SELL}),
}

# Economic direction of each side, for views that want spot folded in.
SIDE_DIRECTION: dict[TradeSide, TradeSide] = {
    TradeSide.LONG: TradeSide.LONG,
    TradeSide.SHORT: TradeSide.SHORT,
    TradeSide.BUY: TradeSide.LONG,
    TradeSide.SELL: TradeSide.SHORT,
}
