"""Pydantic schemas for Journal API."""

from datetime import date

from pydantic import BaseModel, Field, field_validator

from tradejournal.models.enums import Sentiment


def _validate_date(value: str) -> str:
    text = value.strip()
    try:
        date.fromisoformat(text)
    except ValueError:
        raise ValueError("must be an ISO date (YYYY-MM-DD)") from None
    return text


def _clean_tags(values: list[str]) -> list[str]:
    tags: list[str] = []
    for raw in values:
        tag = raw.strip().lower()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


class JournalEntryCreate(BaseModel):
    trade_id: str | None = None
    date: str
    notes: str = Field(default="", max_length=10_000)
    tags: list[str] = Field(default_factory=list)
    sentiment: Sentiment = Sentiment.NEUTRAL
    rating: int = Field(default=0, ge=0, le=5)
    screenshots: list[str] | None = None
    strategy: str | None = Field(default=None, max_length=120)
    mistakes: list[str] | None = None
    lessons: list[str] | None = None

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: str) -> str:
        return _validate_date(value)

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str]) -> list[str]:
        return _clean_tags(value)


class JournalEntryUpdate(BaseModel):
    trade_id: str | None = None
    date: str | None = None
    notes: str | None = Field(default=None, max_length=10_000)
    tags: list[str] | None = None
    sentiment: Sentiment | None = None
    rating: int | None = Field(default=None, ge=0, le=5)
    screenshots: list[str] | None = None
    strategy: str | None = Field(default=None, max_length=120)
    mistakes: list[str] | None = None
    lessons: list[str] | None = None

    @field_validator("date")
    @classmethod
    def _check_optional_date(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _validate_date(value)

    @field_validator("tags")
    @classmethod
    def _normalize_optional_tags(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        return _clean_tags(value)


class JournalEntryRead(BaseModel):
    id: str
    trade_id: str | None
    date: str
    notes: str
    tags: list[str]
    sentiment: Sentiment
    rating: int
    screenshots: list[str] | None
    strategy: str | None
    mistakes: list[str] | None
    lessons: list[str] | None

    model_config = {"from_attributes": True}
