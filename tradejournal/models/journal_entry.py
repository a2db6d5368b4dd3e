"""JournalEntry model: free-form notes attached to a trading day or trade."""

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import JSON

from tradejournal.models.enums import Sentiment


class JournalEntry(SQLModel, table=True):
    __tablename__ = "journal_entry"

    id: str = Field(primary_key=True)
    trade_id: str | None = Field(default=None, index=True)
    date: str = Field(index=True)  # YYYY-MM-DD
    notes: str = ""
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    sentiment: Sentiment = Sentiment.NEUTRAL
    rating: int = 0  # 1-5, 0 = unrated
    screenshots: list[str] | None = Field(default=None, sa_column=Column(JSON))
    strategy: str | None = None
    mistakes: list[str] | None = Field(default=None, sa_column=Column(JSON))
    lessons: list[str] | None = Field(default=None, sa_column=Column(JSON))
