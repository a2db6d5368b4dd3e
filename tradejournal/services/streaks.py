"""Win/loss streak detection over closed trades."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from tradejournal.models.trade import Trade
from tradejournal.services.analytics import chronological, closed_trades
from tradejournal.utils.constants import HOT_STREAK_LENGTH, STREAK_RECENT_LIMIT


@dataclass
class Streak:
    count: int = 0
    pnl: float = 0.0


@dataclass
class CurrentStreak:
    type: str = "none"  # "win", "loss" or "none"
    count: int = 0
    pnl: float = 0.0


@dataclass
class StreakInfo:
    current: CurrentStreak = field(default_factory=CurrentStreak)
    longest_win: Streak = field(default_factory=Streak)
    longest_loss: Streak = field(default_factory=Streak)
    recent: list[str] = field(default_factory=list)  # most recent first

    @property
    def is_hot(self) -> bool:
        return self.current.type == "win" and self.current.count >= HOT_STREAK_LENGTH

    @property
    def is_cold(self) -> bool:
        return self.current.type == "loss" and self.current.count >= HOT_STREAK_LENGTH


def _classify(trade: Trade) -> str:
    # Zero pnl is not a win, so it extends a losing run.
    return "win" if trade.pnl > 0 else "loss"


def compute_streaks(trades: Sequence[Trade]) -> StreakInfo:
    """Current, longest winning and longest losing runs of closed trades."""
    ordered = chronological(closed_trades(trades))
    if not ordered:
        return StreakInfo()

    longest = {"win": Streak(), "loss": Streak()}
    run_type = None
    run = Streak()

    for trade in ordered:
        kind = _classify(trade)
        if kind != run_type:
            run_type = kind
            run = Streak()
        run.count += 1
        run.pnl += trade.pnl
        if run.count > longest[kind].count:
            longest[kind] = Streak(count=run.count, pnl=run.pnl)

    recent = [_classify(t) for t in reversed(ordered[-STREAK_RECENT_LIMIT:])]

    return StreakInfo(
        current=CurrentStreak(type=run_type, count=run.count, pnl=run.pnl),
        longest_win=longest["win"],
        longest_loss=longest["loss"],
        recent=recent,
    )
