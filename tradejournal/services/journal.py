"""Journal statistics and lookups."""

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field

from tradejournal.models.enums import Sentiment
from tradejournal.models.journal_entry import JournalEntry

TOP_TAG_LIMIT = 5


@dataclass
class TagCount:
    tag: str
    count: int


@dataclass
class SentimentCount:
    sentiment: Sentiment
    count: int


@dataclass
class JournalStats:
    total_entries: int = 0
    avg_rating: float = 0.0
    most_used_tags: list[TagCount] = field(default_factory=list)
    sentiment_breakdown: list[SentimentCount] = field(default_factory=list)


def journal_stats(entries: Sequence[JournalEntry]) -> JournalStats:
    # Unrated entries (rating 0) do not pull the average down
    rated = [e.rating for e in entries if e.rating > 0]
    avg_rating = sum(rated) / len(rated) if rated else 0.0

    tag_counts = Counter(tag for e in entries for tag in (e.tags or []))
    # Counter.most_common keeps first-seen order among equal counts
    top_tags = [TagCount(tag=tag, count=n) for tag, n in tag_counts.most_common(TOP_TAG_LIMIT)]

    sentiments = Counter(Sentiment(e.sentiment) for e in entries)
    breakdown = [SentimentCount(sentiment=s, count=sentiments.get(s, 0)) for s in Sentiment]

    return JournalStats(
        total_entries=len(entries),
        avg_rating=avg_rating,
        most_used_tags=top_tags,
        sentiment_breakdown=breakdown,
    )


def all_tags(entries: Sequence[JournalEntry]) -> list[str]:
    return sorted({tag for e in entries for tag in (e.tags or [])})


def filter_entries(
    entries: Sequence[JournalEntry],
    date: str | None = None,
    tag: str | None = None,
    sentiment: Sentiment | None = None,
    trade_id: str | None = None,
) -> list[JournalEntry]:
    result = []
    for entry in entries:
        if date is not None and entry.date != date:
            continue
        if tag is not None and tag not in (entry.tags or []):
            continue
        if sentiment is not None and entry.sentiment != sentiment:
            continue
        if trade_id is not None and entry.trade_id != trade_id:
            continue
        result.append(entry)
    return result
