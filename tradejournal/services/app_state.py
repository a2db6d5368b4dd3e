"""Application state with a persisted preferences subset.

``AppState`` holds the session-level UI state. Only the sidebar flag, the
theme and the selected period are written to the ``preferences`` table;
date range, loading flag and error message live for the process only.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlmodel import Session, select

from tradejournal.models.enums import Period, Theme
from tradejournal.models.preferences import Preferences
from tradejournal.schemas.filters import DateRange
from tradejournal.services.filtering import period_date_range

logger = logging.getLogger(__name__)

PERSISTED_FIELDS = ("sidebar_collapsed", "theme", "selected_period")


@dataclass
class AppState:
    sidebar_collapsed: bool = False
    theme: Theme = Theme.DARK
    selected_period: Period = Period.ONE_MONTH
    date_range: DateRange = field(default_factory=lambda: period_date_range(Period.ONE_MONTH))
    is_loading: bool = False
    error: str | None = None

    def toggle_sidebar(self) -> bool:
        self.sidebar_collapsed = not self.sidebar_collapsed
        return self.sidebar_collapsed

    def set_period(self, period: Period, now: datetime | None = None) -> None:
        self.selected_period = period
        self.date_range = period_date_range(period, now)

    def set_error(self, message: str | None) -> None:
        self.error = message

    def clear_error(self) -> None:
        self.error = None

    def preferences(self) -> dict:
        """The subset of state that survives a restart."""
        return {name: getattr(self, name) for name in PERSISTED_FIELDS}


def _get_row(session: Session) -> Preferences | None:
    return session.exec(select(Preferences).order_by(Preferences.id)).first()


def load_app_state(session: Session) -> AppState:
    """Build a fresh AppState from the stored preferences, if any."""
    row = _get_row(session)
    if row is None:
        return AppState()
    state = AppState(
        sidebar_collapsed=row.sidebar_collapsed,
        theme=Theme(row.theme),
    )
    state.set_period(Period(row.selected_period))
    return state


def save_preferences(session: Session, state: AppState) -> Preferences:
    row = _get_row(session)
    if row is None:
        row = Preferences()
    for name, value in state.preferences().items():
        setattr(row, name, value)
    row.updated_at = datetime.now(timezone.utc)

    session.add(row)
    session.commit()
    session.refresh(row)
    logger.debug(f"Saved preferences: {state.preferences()}")
    return row
