"""Database models."""

from tradejournal.models.trade import Trade
from tradejournal.models.position import Position
from tradejournal.models.journal_entry import JournalEntry
from tradejournal.models.preferences import Preferences

__all__ = [
    "Trade",
    "Position",
    "JournalEntry",
    "Preferences",
]
