"""Shared constants and thresholds for the analytics views."""

from datetime import datetime

# Calendar heatmap: (|pnl| strictly above, intensity), checked top-down
CALENDAR_INTENSITY_THRESHOLDS: list[tuple[float, int]] = [
    (2000.0, 4),
    (1000.0, 3),
    (500.0, 2),
    (0.0, 1),
]

# Trading score tiers: (minimum value, points), checked top-down
WIN_RATE_TIERS: list[tuple[float, int]] = [(60.0, 25), (50.0, 20), (40.0, 15)]
PROFIT_FACTOR_TIERS: list[tuple[float, int]] = [(2.0, 25), (1.5, 20), (1.0, 15)]
RISK_RATIO_TIERS: list[tuple[float, int]] = [(2.0, 20), (1.5, 15), (1.0, 10)]
TRADE_COUNT_TIERS: list[tuple[int, int]] = [(50, 10), (20, 7), (10, 5)]

GRADE_THRESHOLDS: list[tuple[float, str, str]] = [
    (90.0, "A+", "Elite Trader"),
    (80.0, "A", "Excellent"),
    (70.0, "B+", "Very Good"),
    (60.0, "B", "Good"),
    (50.0, "C+", "Average"),
    (40.0, "C", "Below Average"),
    (30.0, "D", "Needs Work"),
]

STREAK_RECENT_LIMIT = 10
HOT_STREAK_LENGTH = 3

# Start of the "ALL" period
ALL_TIME_START = datetime(2020, 1, 1)

# Trading sessions by local hour: (name, first hour, end hour exclusive)
TRADING_SESSIONS: list[tuple[str, int, int]] = [
    ("Asia (00-08)", 0, 8),
    ("Europe (08-16)", 8, 16),
    ("US (16-24)", 16, 24),
]

WEEKDAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

TRADING_DAYS_PER_YEAR = 252

CSV_HEADERS = [
    "ID",
    "Date",
    "Symbol",
    "Market",
    "Side",
    "Order Type",
    "Size",
    "Entry Price",
    "Exit Price",
    "Fee",
    "Fee Type",
    "Rebate",
    "PnL",
    "Status",
    "Leverage",
    "Duration (ms)",
]

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"
