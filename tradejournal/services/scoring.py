"""Composite trading score.

Maps a handful of analytics figures onto a 100-point rubric and a letter
grade. The rubric is fixed:

    win rate        25
    profit factor   25
    risk management 20  (avg win / avg loss)
    consistency     15  (trade count + long/short balance)
    discipline      15  (expectancy)
"""

from dataclasses import dataclass

from tradejournal.services.analytics import AnalyticsSnapshot
from tradejournal.utils.constants import (
    GRADE_THRESHOLDS,
    PROFIT_FACTOR_TIERS,
    RISK_RATIO_TIERS,
    TRADE_COUNT_TIERS,
    WIN_RATE_TIERS,
)

MAX_SCORE = 100


@dataclass
class ScoreBreakdown:
    win_rate: int = 0
    profit_factor: int = 0
    risk_management: int = 0
    consistency: int = 0
    discipline: int = 0
    total: int = 0
    max_total: int = MAX_SCORE
    percentage: float = 0.0
    grade: str = "F"
    label: str = "Critical"


def _tiered(value: float, tiers, fallback: int = 0) -> int:
    for minimum, points in tiers:
        if value >= minimum:
            return points
    # Anything positive below the lowest tier still earns the fallback
    return fallback if value > 0 else 0


def grade_for(percentage: float) -> tuple[str, str]:
    """Letter grade and label for a score percentage."""
    for minimum, grade, label in GRADE_THRESHOLDS:
        if percentage >= minimum:
            return grade, label
    return "F", "Critical"


def compute_score(analytics: AnalyticsSnapshot) -> ScoreBreakdown:
    win_rate_score = _tiered(analytics.win_rate, WIN_RATE_TIERS, fallback=10)
    # inf >= 2.0, so an unbeaten record lands in the top tier
    profit_factor_score = _tiered(analytics.profit_factor, PROFIT_FACTOR_TIERS, fallback=5)

    risk_ratio = analytics.avg_win / analytics.avg_loss if analytics.avg_loss > 0 else 0.0
    risk_score = _tiered(risk_ratio, RISK_RATIO_TIERS, fallback=5)

    consistency_score = _tiered(analytics.total_trades, TRADE_COUNT_TIERS)
    ratio = analytics.long_short_ratio
    if 0.5 <= ratio <= 2.0:
        consistency_score += 5
    elif ratio > 0:
        consistency_score += 2

    discipline_score = 0
    if analytics.expectancy > 0:
        discipline_score += 10
    if analytics.expectancy > 50:
        discipline_score += 5

    total = win_rate_score + profit_factor_score + risk_score + consistency_score + discipline_score
    percentage = total / MAX_SCORE * 100
    grade, label = grade_for(percentage)

    return ScoreBreakdown(
        win_rate=win_rate_score,
        profit_factor=profit_factor_score,
        risk_management=risk_score,
        consistency=consistency_score,
        discipline=discipline_score,
        total=total,
        max_total=MAX_SCORE,
        percentage=percentage,
        grade=grade,
        label=label,
    )
