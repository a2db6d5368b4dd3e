"""Preferences model: the slice of UI state that survives a restart."""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field

from tradejournal.models.enums import Period, Theme


class Preferences(SQLModel, table=True):
    __tablename__ = "preferences"

    id: int | None = Field(default=None, primary_key=True)
    sidebar_collapsed: bool = False
    theme: Theme = Theme.DARK
    selected_period: Period = Period.ONE_MONTH
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
