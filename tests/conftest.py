"""Shared fixtures. Points the app at a throwaway SQLite file before import."""

import itertools
import os
import tempfile
from datetime import datetime

_TMP_DIR = tempfile.mkdtemp(prefix="tradejournal-tests-")
os.environ["TJ_DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["TJ_SEED_MOCK_DATA"] = "false"

import pytest  # noqa: E402

from tradejournal.models.trade import Trade  # noqa: E402

_ids = itertools.count(1)


def ts(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> int:
    """Epoch milliseconds for a local wall-clock time."""
    return int(datetime(year, month, day, hour, minute).timestamp() * 1000)


@pytest.fixture
def make_trade():
    """Factory for Trade rows with sensible defaults.

    ``status`` follows ``pnl`` unless given: a pnl makes the trade CLOSED.
    """
    def _make(pnl=None, **overrides) -> Trade:
        fields = {
            "id": f"t{next(_ids):05d}",
            "timestamp": ts(2024, 3, 1),
            "market": "PERP",
            "symbol": "SOL-PERP",
            "side": "LONG",
            "order_type": "MARKET",
            "size": 1.0,
            "entry_price": 100.0,
            "fee": 0.0,
            "pnl": pnl,
            "status": "CLOSED" if pnl is not None else "OPEN",
        }
        fields.update(overrides)
        return Trade(**fields)

    return _make


@pytest.fixture
def db():
    """Fresh tables for every test that touches the database."""
    from sqlmodel import SQLModel

    import tradejournal.models  # noqa: F401
    from tradejournal.database import create_db_and_tables, engine
    from tradejournal.services.trade_store import trade_store

    SQLModel.metadata.drop_all(engine)
    create_db_and_tables()
    trade_store.invalidate()
    yield engine
    trade_store.invalidate()


@pytest.fixture
def session(db):
    from sqlmodel import Session

    with Session(db) as s:
        yield s


@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient

    from tradejournal.main import app

    with TestClient(app) as c:
        yield c
