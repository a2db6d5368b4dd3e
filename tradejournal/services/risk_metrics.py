"""Portfolio risk metrics derived from the equity curve.

All functions are pure computation: no I/O, no database access.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from tradejournal.services.analytics import AnalyticsSnapshot, EquityPoint
from tradejournal.utils.constants import TRADING_DAYS_PER_YEAR


@dataclass
class RiskMetrics:
    max_drawdown: float = 0.0  # percent
    current_drawdown: float = 0.0  # percent
    sharpe_ratio: float = 0.0
    avg_return: float = 0.0
    return_std: float = 0.0
    risk_reward_ratio: float = 0.0  # inf when there are wins and no losses
    risk_level: str = "Low"


def equity_returns(curve: Sequence[EquityPoint]) -> np.ndarray:
    """Per-step simple returns of the equity curve."""
    if len(curve) < 2:
        return np.array([], dtype=float)
    equity = np.array([p.equity for p in curve], dtype=float)
    previous = equity[:-1]
    # A zero base has no meaningful return
    with np.errstate(divide="ignore", invalid="ignore"):
        returns = np.where(previous != 0, np.diff(equity) / previous, 0.0)
    return returns


def sharpe_ratio(returns: np.ndarray) -> tuple[float, float, float]:
    """Simplified annualised Sharpe: mean / population std x sqrt(252).

    Returns: (sharpe, mean_return, std_return)
    """
    if len(returns) == 0:
        return 0.0, 0.0, 0.0
    mean = float(np.mean(returns))
    std = float(np.std(returns))
    if std == 0 or np.isnan(std):
        return 0.0, mean, std
    return mean / std * math.sqrt(TRADING_DAYS_PER_YEAR), mean, std


def risk_level(max_drawdown: float, win_rate: float, profit_factor: float) -> str:
    if max_drawdown > 30 or win_rate < 40 or profit_factor < 1:
        return "High"
    if max_drawdown > 15 or win_rate < 50 or profit_factor < 1.5:
        return "Medium"
    return "Low"


def compute_risk_metrics(curve: Sequence[EquityPoint], analytics: AnalyticsSnapshot) -> RiskMetrics:
    max_drawdown = max((p.drawdown_percent for p in curve), default=0.0)
    current_drawdown = curve[-1].drawdown_percent if curve else 0.0

    sharpe, mean, std = sharpe_ratio(equity_returns(curve))

    if analytics.avg_loss != 0:
        reward_risk = analytics.avg_win / abs(analytics.avg_loss)
    else:
        reward_risk = math.inf if analytics.avg_win > 0 else 0.0

    return RiskMetrics(
        max_drawdown=max_drawdown,
        current_drawdown=current_drawdown,
        sharpe_ratio=sharpe,
        avg_return=mean,
        return_std=std,
        risk_reward_ratio=reward_risk,
        risk_level=risk_level(max_drawdown, analytics.win_rate, analytics.profit_factor),
    )
