"""Display formatting helpers shared by the report, API and CLI."""

import math
import time


def format_currency(value: float, decimals: int = 2) -> str:
    abs_value = abs(value)
    if abs_value >= 1_000_000:
        return f"${value / 1_000_000:.2f}M"
    if abs_value >= 1_000:
        return f"${value / 1_000:.2f}K"
    return f"${value:.{decimals}f}"


def format_percentage(value: float, decimals: int = 2) -> str:
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.{decimals}f}%"


def format_pnl(value: float) -> str:
    prefix = "+" if value >= 0 else ""
    return f"{prefix}{format_currency(value)}"


def format_profit_factor(value: float, decimals: int = 2) -> str:
    """Render a profit factor; an infinite factor (no losing trades) is "∞"."""
    if math.isinf(value) and value > 0:
        return "∞"
    return f"{value:.{decimals}f}"


def format_ratio(value: float, decimals: int = 2) -> str:
    if math.isinf(value) and value > 0:
        return "∞"
    return f"{value:.{decimals}f}"


def format_duration(ms: float) -> str:
    """Format a millisecond duration as "2d 3h", "4h 12m" or "35m"."""
    hours = int(ms // 3_600_000)
    minutes = int((ms % 3_600_000) // 60_000)
    if hours > 24:
        return f"{hours // 24}d {hours % 24}h"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def time_ago(timestamp_ms: float, now_ms: float | None = None) -> str:
    if now_ms is None:
        now_ms = time.time() * 1000
    seconds = int((now_ms - timestamp_ms) // 1000)

    if seconds < 60:
        return f"{seconds}s ago"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days < 7:
        return f"{days}d ago"
    return f"{days // 7}w ago"
