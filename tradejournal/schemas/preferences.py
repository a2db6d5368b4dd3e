"""Pydantic schemas for the persisted UI preferences."""

from pydantic import BaseModel

from tradejournal.models.enums import Period, Theme


class PreferencesRead(BaseModel):
    sidebar_collapsed: bool
    theme: Theme
    selected_period: Period

    model_config = {"from_attributes": True}


class PreferencesUpdate(BaseModel):
    sidebar_collapsed: bool | None = None
    theme: Theme | None = None
    selected_period: Period | None = None
