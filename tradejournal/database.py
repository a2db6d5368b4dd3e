"""SQLModel database engine and session management."""

import logging
from pathlib import Path

from sqlmodel import SQLModel, create_engine, Session

from tradejournal.config import settings

logger = logging.getLogger(__name__)

# SQLite needs check_same_thread=False; PostgreSQL does not
connect_args = {}
if settings.database_url.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(
    settings.database_url,
    echo=False,
    connect_args=connect_args,
)


def _ensure_sqlite_dir():
    """Create the parent directory of a file-backed SQLite database."""
    prefix = "sqlite:///"
    if not settings.database_url.startswith(prefix):
        return
    db_path = settings.database_url[len(prefix):]
    if db_path and db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)


def create_db_and_tables():
    """Create all tables. Called on startup."""
    # Import models so metadata is populated
    import tradejournal.models  # noqa: F401

    _ensure_sqlite_dir()
    SQLModel.metadata.create_all(engine)
    logger.info("Database tables ready")


def get_session() -> Session:
    """Dependency that yields a database session."""
    with Session(engine) as session:
        yield session
