"""In-memory trade snapshot with memoized derived results.

The store reads the ``trade`` table once and keeps the rows as an immutable
tuple. Writers never mutate the tuple; they commit to the database and call
``invalidate()``, and the next reader swaps in a freshly loaded snapshot.
Derived results (analytics, curves, breakdowns) are cached per snapshot and
dropped together with it.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from typing import Any

from sqlmodel import Session, select

from tradejournal.models.trade import Trade

logger = logging.getLogger(__name__)


class TradeStore:
    def __init__(self, session_factory: Callable[[], Session] | None = None):
        self._session_factory = session_factory
        self._snapshot: tuple[Trade, ...] | None = None
        self._cache: dict[Any, Any] = {}
        self._lock = threading.Lock()

    def _open_session(self) -> Session:
        if self._session_factory is not None:
            return self._session_factory()
        from tradejournal.database import engine
        return Session(engine)

    def _load(self) -> tuple[Trade, ...]:
        with self._open_session() as session:
            rows = session.exec(select(Trade).order_by(Trade.timestamp.desc(), Trade.id)).all()
            # Detach so the snapshot outlives the session
            session.expunge_all()
        return tuple(rows)

    def snapshot(self) -> tuple[Trade, ...]:
        """Current trades, newest first."""
        with self._lock:
            if self._snapshot is None:
                self._swap(self._load())
            return self._snapshot

    def replace(self, trades: Iterable[Trade]) -> None:
        """Swap in an explicit trade list without touching the database."""
        with self._lock:
            self._swap(tuple(trades))

    def invalidate(self) -> None:
        with self._lock:
            self._snapshot = None
            self._cache = {}

    def _swap(self, trades: tuple[Trade, ...]) -> None:
        self._snapshot = trades
        self._cache = {}
        logger.info(f"Trade snapshot swapped ({len(trades)} trades)")

    def memo(self, key: Any, compute: Callable[[tuple[Trade, ...]], Any]) -> Any:
        """Return ``compute(snapshot)``, cached until the snapshot changes."""
        trades = self.snapshot()
        with self._lock:
            # A concurrent swap may have replaced the snapshot meanwhile
            if self._snapshot is trades and key in self._cache:
                return self._cache[key]
        value = compute(trades)
        with self._lock:
            if self._snapshot is trades:
                self._cache[key] = value
        return value


trade_store = TradeStore()


def get_trade_store() -> TradeStore:
    """FastAPI dependency returning the process-wide store."""
    return trade_store
