"""Deterministic mock trade source.

Generates a reproducible trade history, open positions and journal entries
for demos and tests. The generator uses a sine-based PRNG so the same seed
always yields the same data, independent of Python's ``random`` state.
"""

import logging
import math
import time
from collections.abc import Sequence

from sqlmodel import Session, delete, select

from tradejournal.config import settings
from tradejournal.models.enums import (
    FeeType,
    MarketType,
    OrderType,
    Sentiment,
    TradeSide,
    TradeStatus,
)
from tradejournal.models.journal_entry import JournalEntry
from tradejournal.models.position import Position
from tradejournal.models.trade import Trade
from tradejournal.services.analytics import day_key

logger = logging.getLogger(__name__)

PERP_SYMBOLS = ["SOL-PERP", "BTC-PERP", "ETH-PERP"]
SPOT_SYMBOLS = ["SOL/USDC", "BTC/USDC", "ETH/USDC"]
SYMBOLS = PERP_SYMBOLS + SPOT_SYMBOLS

POSITION_SEED = 54321
JOURNAL_SEED = 22222

FEE_RATE = 0.0006
HISTORY_MS = 90 * 24 * 60 * 60 * 1000

JOURNAL_TAGS = ["scalp", "swing", "breakout", "reversal", "trend", "range", "news"]
JOURNAL_STRATEGIES = ["Momentum", "Mean Reversion", "Breakout", "Support/Resistance", "VWAP"]
JOURNAL_MISTAKES = [
    "Entered too early",
    "Sized too large",
    "Ignored stop loss",
    "FOMO entry",
    "Revenge trading",
]
JOURNAL_LESSONS = [
    "Wait for confirmation",
    "Stick to the plan",
    "Risk management is key",
    "Patience pays",
    "Cut losses quickly",
]


class SeededRandom:
    """Sine-hash PRNG: frac(sin(seed++) * 10000)."""

    def __init__(self, seed: int):
        self.seed = seed

    def random(self) -> float:
        x = math.sin(self.seed) * 10000
        self.seed += 1
        return x - math.floor(x)

    def uniform(self, low: float, high: float) -> float:
        return low + self.random() * (high - low)

    def choice(self, items: Sequence):
        return items[math.floor(self.random() * len(items))]


def _size_multiplier(symbol: str) -> float:
    if "BTC" in symbol:
        return 0.1
    if "ETH" in symbol:
        return 1.0
    return 10.0


def _now_ms() -> int:
    return int(time.time() * 1000)


def generate_trades(
    count: int = 200,
    start_ms: int | None = None,
    now_ms: int | None = None,
    seed: int | None = None,
) -> list[Trade]:
    """Generate ``count`` trades spread over ``[start_ms, now_ms]``, newest first.

    Defaults to the last 90 days. Spot trades use BUY/SELL, perps LONG/SHORT
    with a 1-19x leverage that scales the pnl.
    """
    rng = SeededRandom(settings.mock_seed if seed is None else seed)
    now_ms = _now_ms() if now_ms is None else now_ms
    start_ms = now_ms - HISTORY_MS if start_ms is None else start_ms

    trades = []
    for i in range(count):
        timestamp = int(start_ms + rng.random() * (now_ms - start_ms))
        symbol = rng.choice(SYMBOLS)
        market = MarketType.PERP if symbol in PERP_SYMBOLS else MarketType.SPOT
        is_long = rng.random() > 0.48
        if market == MarketType.PERP:
            side = TradeSide.LONG if is_long else TradeSide.SHORT
        else:
            side = TradeSide.BUY if is_long else TradeSide.SELL

        if rng.random() > 0.6:
            order_type = OrderType.LIMIT
        elif rng.random() > 0.5:
            order_type = OrderType.IOC
        else:
            order_type = OrderType.MARKET

        if "BTC" in symbol:
            base_price = rng.uniform(40000, 70000)
        elif "ETH" in symbol:
            base_price = rng.uniform(2000, 4000)
        else:
            base_price = rng.uniform(80, 200)

        entry_price = base_price * (1 + rng.uniform(-0.02, 0.02))
        is_closed = rng.random() > 0.15

        # Slightly biased towards winners
        is_win = rng.random() > 0.45
        price_change = rng.uniform(0.001, 0.05) * (1 if is_win else -1)
        exit_price = None
        if is_closed:
            exit_price = entry_price * (1 + (price_change if is_long else -price_change))

        size = rng.uniform(0.1, 10) * _size_multiplier(symbol)
        leverage = float(math.floor(rng.uniform(1, 20))) if market == MarketType.PERP else None

        pnl = None
        if exit_price is not None:
            diff = exit_price - entry_price
            pnl = diff * size if is_long else -diff * size
            if leverage:
                pnl *= leverage

        duration = rng.uniform(60_000, 86_400_000) if is_closed else None

        trades.append(Trade(
            id=f"mock-{i:04d}-{timestamp:x}",
            timestamp=timestamp,
            market=market,
            symbol=symbol,
            side=side,
            order_type=order_type,
            size=size,
            entry_price=entry_price,
            exit_price=exit_price,
            fee=size * entry_price * FEE_RATE,
            fee_type=FeeType.MAKER if order_type == OrderType.LIMIT else FeeType.TAKER,
            pnl=pnl,
            status=TradeStatus.CLOSED if is_closed else TradeStatus.OPEN,
            duration=duration,
            leverage=leverage,
        ))

    trades.sort(key=lambda t: (t.timestamp, t.id), reverse=True)
    return trades


def generate_positions(now_ms: int | None = None) -> list[Position]:
    """Open perp positions; each perp symbol is held with probability 1/2."""
    rng = SeededRandom(POSITION_SEED)
    now_ms = _now_ms() if now_ms is None else now_ms

    positions = []
    for symbol in PERP_SYMBOLS:
        if rng.random() <= 0.5:
            continue

        if "BTC" in symbol:
            base_price = rng.uniform(45000, 65000)
        elif "ETH" in symbol:
            base_price = rng.uniform(2500, 3500)
        else:
            base_price = rng.uniform(100, 180)

        entry_price = base_price * (1 + rng.uniform(-0.02, 0.02))
        current_price = entry_price * (1 + rng.uniform(-0.05, 0.08))
        side = TradeSide.LONG if rng.random() > 0.5 else TradeSide.SHORT
        size = rng.uniform(1, 20) * _size_multiplier(symbol)
        leverage = float(math.floor(rng.uniform(2, 10)))

        diff = current_price - entry_price
        unrealized = (diff if side == TradeSide.LONG else -diff) * size * leverage
        if side == TradeSide.LONG:
            liquidation = entry_price * (1 - 1 / leverage * 0.9)
        else:
            liquidation = entry_price * (1 + 1 / leverage * 0.9)

        positions.append(Position(
            id=f"pos-{symbol.lower()}",
            symbol=symbol,
            market=MarketType.PERP,
            side=side,
            size=size,
            entry_price=entry_price,
            current_price=current_price,
            unrealized_pnl=unrealized,
            leverage=leverage,
            liquidation_price=liquidation,
            margin=size * entry_price / leverage,
            timestamp=int(now_ms - rng.uniform(3_600_000, 86_400_000 * 3)),
        ))

    return positions


def generate_journal_entries(trades: Sequence[Trade]) -> list[JournalEntry]:
    """Journal notes for roughly 40% of the 50 newest closed trades."""
    rng = SeededRandom(JOURNAL_SEED)
    closed = [t for t in trades if t.status == TradeStatus.CLOSED][:50]

    entries = []
    for trade in closed:
        if rng.random() <= 0.6:
            continue

        pnl = trade.pnl or 0.0
        if pnl > 0:
            sentiment = Sentiment.BULLISH
        elif pnl < 0:
            sentiment = Sentiment.BEARISH
        else:
            sentiment = Sentiment.NEUTRAL

        tags: list[str] = []
        for _ in range(math.floor(rng.uniform(1, 4))):
            tag = rng.choice(JOURNAL_TAGS)
            if tag not in tags:
                tags.append(tag)

        verdict = "Good execution." if pnl > 0 else "Need to review entry timing."
        rating = math.floor(rng.uniform(1, 6))
        strategy = rng.choice(JOURNAL_STRATEGIES)
        mistakes = [rng.choice(JOURNAL_MISTAKES)] if pnl < 0 else None
        lessons = [rng.choice(JOURNAL_LESSONS)] if rng.random() > 0.5 else None

        entries.append(JournalEntry(
            id=f"journal-{trade.id}",
            trade_id=trade.id,
            date=day_key(trade),
            notes=f"Trade on {trade.symbol}. {verdict}",
            tags=tags,
            sentiment=sentiment,
            rating=rating,
            strategy=strategy,
            mistakes=mistakes,
            lessons=lessons,
        ))

    entries.sort(key=lambda e: e.date, reverse=True)
    return entries


def clear_database(session: Session) -> None:
    for model in (JournalEntry, Position, Trade):
        session.exec(delete(model))
    session.commit()


def seed_database(session: Session, count: int | None = None, force: bool = False) -> int:
    """Insert mock trades, positions and journal entries.

    Does nothing when trades already exist unless ``force`` is set, in which
    case the existing data is replaced. Returns the number of trades inserted.
    """
    existing = session.exec(select(Trade.id).limit(1)).first()
    if existing is not None and not force:
        logger.info("Trade table already populated, skipping mock seed")
        return 0
    if force:
        clear_database(session)

    trades = generate_trades(count or settings.mock_trade_count)
    positions = generate_positions()
    entries = generate_journal_entries(trades)

    session.add_all(trades)
    session.add_all(positions)
    session.add_all(entries)
    session.commit()

    logger.info(
        f"Seeded {len(trades)} mock trades, {len(positions)} positions, "
        f"{len(entries)} journal entries"
    )
    return len(trades)
