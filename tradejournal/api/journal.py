"""CRUD API for journal entries."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlmodel import Session, select

from tradejournal.database import get_session
from tradejournal.models.enums import Sentiment
from tradejournal.models.journal_entry import JournalEntry
from tradejournal.schemas.journal import JournalEntryCreate, JournalEntryRead, JournalEntryUpdate
from tradejournal.services.journal import all_tags, filter_entries, journal_stats
from tradejournal.utils.serialization import to_jsonable

router = APIRouter(prefix="/api/journal", tags=["journal"])


def _all_entries(session: Session) -> list[JournalEntry]:
    return session.exec(
        select(JournalEntry).order_by(JournalEntry.date.desc(), JournalEntry.id)
    ).all()


@router.get("", response_model=list[JournalEntryRead])
def list_entries(
    date: str | None = None,
    tag: str | None = None,
    sentiment: Sentiment | None = None,
    trade_id: str | None = None,
    session: Session = Depends(get_session),
):
    return filter_entries(_all_entries(session), date=date, tag=tag, sentiment=sentiment, trade_id=trade_id)


@router.get("/stats")
def stats(session: Session = Depends(get_session)):
    return to_jsonable(journal_stats(_all_entries(session)))


@router.get("/tags", response_model=list[str])
def tags(session: Session = Depends(get_session)):
    return all_tags(_all_entries(session))


@router.post("", response_model=JournalEntryRead, status_code=201)
def create_entry(data: JournalEntryCreate, session: Session = Depends(get_session)):
    entry = JournalEntry(id=uuid.uuid4().hex, **data.model_dump())
    session.add(entry)
    session.commit()
    session.refresh(entry)
    return entry


@router.get("/{entry_id}", response_model=JournalEntryRead)
def get_entry(entry_id: str, session: Session = Depends(get_session)):
    entry = session.get(JournalEntry, entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Journal entry not found")
    return entry


@router.put("/{entry_id}", response_model=JournalEntryRead)
def update_entry(
    entry_id: str,
    data: JournalEntryUpdate,
    session: Session = Depends(get_session),
):
    entry = session.get(JournalEntry, entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Journal entry not found")

    update_data = data.model_dump(exclude_unset=True)
    merged = {**entry.model_dump(), **update_data}
    try:
        JournalEntryCreate.model_validate(merged)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))

    for key, value in update_data.items():
        setattr(entry, key, value)

    session.add(entry)
    session.commit()
    session.refresh(entry)
    return entry


@router.delete("/{entry_id}", status_code=204)
def delete_entry(entry_id: str, session: Session = Depends(get_session)):
    entry = session.get(JournalEntry, entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Journal entry not found")
    session.delete(entry)
    session.commit()
