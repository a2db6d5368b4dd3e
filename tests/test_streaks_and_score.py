"""Tests for streak detection and the composite trading score."""

import math

import pytest

from conftest import ts
from tradejournal.services.analytics import AnalyticsSnapshot, compute_analytics
from tradejournal.services.scoring import compute_score, grade_for
from tradejournal.services.streaks import StreakInfo, compute_streaks


def _history(make_trade, pnls):
    """Closed trades one minute apart, oldest first."""
    return [make_trade(pnl=p, timestamp=ts(2024, 5, 1) + i * 60_000) for i, p in enumerate(pnls)]


# ---------------------------------------------------------------------------
# 1. Streaks
# ---------------------------------------------------------------------------

class TestStreaks:
    def test_empty(self):
        info = compute_streaks([])
        assert info == StreakInfo()
        assert info.current.type == "none"
        assert info.current.count == 0
        assert info.longest_win.count == 0
        assert info.longest_loss.count == 0
        assert info.recent == []

    def test_win_win_loss_win_win_win(self, make_trade):
        trades = _history(make_trade, [10, 20, -5, 1, 2, 3])
        info = compute_streaks(trades)
        assert info.longest_win.count == 3
        assert info.longest_win.pnl == pytest.approx(6)
        assert info.longest_loss.count == 1
        assert info.current.type == "win"
        assert info.current.count == 3
        assert info.current.pnl == pytest.approx(6)
        assert info.is_hot
        assert not info.is_cold

    def test_input_order_does_not_matter(self, make_trade):
        trades = _history(make_trade, [10, 20, -5, 1, 2, 3])
        assert compute_streaks(list(reversed(trades))) == compute_streaks(trades)

    def test_zero_pnl_is_a_loss(self, make_trade):
        info = compute_streaks(_history(make_trade, [5, 0, -1]))
        assert info.current.type == "loss"
        assert info.current.count == 2
        assert info.is_cold is False

    def test_recent_is_most_recent_first_and_capped(self, make_trade):
        pnls = [1] * 8 + [-1] * 4
        info = compute_streaks(_history(make_trade, pnls))
        assert len(info.recent) == 10
        assert info.recent[:4] == ["loss"] * 4
        assert info.recent[4:] == ["win"] * 6

    def test_open_trades_ignored(self, make_trade):
        trades = _history(make_trade, [1, -1]) + [make_trade(timestamp=ts(2024, 6, 1))]
        info = compute_streaks(trades)
        assert info.current.type == "loss"
        assert info.current.count == 1

    def test_cold_streak(self, make_trade):
        info = compute_streaks(_history(make_trade, [1, -1, -2, -3]))
        assert info.is_cold
        assert info.longest_loss.pnl == pytest.approx(-6)


# ---------------------------------------------------------------------------
# 2. Score
# ---------------------------------------------------------------------------

class TestScore:
    def test_perfect_example(self):
        snap = AnalyticsSnapshot(
            win_rate=62, profit_factor=2.1, avg_win=220, avg_loss=100,
            total_trades=60, long_short_ratio=1.1, expectancy=75,
        )
        score = compute_score(snap)
        assert (score.win_rate, score.profit_factor, score.risk_management) == (25, 25, 20)
        assert score.consistency == 15
        assert score.discipline == 15
        assert score.total == 100
        assert score.percentage == 100
        assert score.grade == "A+"
        assert score.label == "Elite Trader"

    def test_empty_snapshot_scores_zero(self):
        score = compute_score(compute_analytics([]))
        assert score.total == 0
        assert score.grade == "F"

    def test_infinite_profit_factor_is_top_tier(self):
        score = compute_score(AnalyticsSnapshot(profit_factor=math.inf))
        assert score.profit_factor == 25

    @pytest.mark.parametrize("win_rate, points", [(60, 25), (55, 20), (40, 15), (10, 10), (0, 0)])
    def test_win_rate_tiers(self, win_rate, points):
        assert compute_score(AnalyticsSnapshot(win_rate=win_rate)).win_rate == points

    @pytest.mark.parametrize("pf, points", [(2.0, 25), (1.5, 20), (1.0, 15), (0.5, 5), (0, 0)])
    def test_profit_factor_tiers(self, pf, points):
        assert compute_score(AnalyticsSnapshot(profit_factor=pf)).profit_factor == points

    def test_risk_ratio_zero_without_losses(self):
        score = compute_score(AnalyticsSnapshot(avg_win=100, avg_loss=0))
        assert score.risk_management == 0

    @pytest.mark.parametrize("trades, ratio, points", [
        (50, 1.0, 15), (20, 3.0, 9), (10, 0.4, 7), (5, 0, 0),
    ])
    def test_consistency(self, trades, ratio, points):
        snap = AnalyticsSnapshot(total_trades=trades, long_short_ratio=ratio)
        assert compute_score(snap).consistency == points

    @pytest.mark.parametrize("expectancy, points", [(51, 15), (50, 10), (0.1, 10), (0, 0), (-5, 0)])
    def test_discipline(self, expectancy, points):
        assert compute_score(AnalyticsSnapshot(expectancy=expectancy)).discipline == points

    @pytest.mark.parametrize("pct, grade", [
        (95, "A+"), (90, "A+"), (85, "A"), (70, "B+"), (65, "B"), (50, "C+"), (45, "C"), (30, "D"), (29.9, "F"),
    ])
    def test_grades(self, pct, grade):
        assert grade_for(pct)[0] == grade
