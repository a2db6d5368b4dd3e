"""CLI tool for admin operations.

Usage:
    python -m tradejournal.cli seed [--force]
    python -m tradejournal.cli report
    python -m tradejournal.cli export-csv <path>
"""

import sys
from pathlib import Path

from sqlmodel import Session, select

from tradejournal.database import create_db_and_tables, engine
from tradejournal.models.trade import Trade
from tradejournal.services.export import generate_report, trades_to_csv
from tradejournal.services.filtering import sort_trades
from tradejournal.services.mock_data import seed_database
from tradejournal.utils.logging import setup_logging

COMMANDS = "seed, report, export-csv"


def _load_trades() -> list[Trade]:
    with Session(engine) as session:
        trades = session.exec(select(Trade)).all()
        session.expunge_all()
    return sort_trades(trades, "timestamp", descending=True)


def seed(force: bool = False):
    """Populate the database with mock trades."""
    create_db_and_tables()
    with Session(engine) as session:
        created = seed_database(session, force=force)
    if created:
        print(f"Inserted {created} mock trades.")
    else:
        print("Trades already present; use --force to replace them.")


def report():
    """Print the plain-text performance report."""
    create_db_and_tables()
    print(generate_report(_load_trades()))


def export_csv(path: str):
    create_db_and_tables()
    trades = _load_trades()
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(trades_to_csv(trades), encoding="utf-8")
    print(f"Wrote {len(trades)} trades to {target}")


def main(argv: list[str] | None = None):
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print("Usage: python -m tradejournal.cli <command>")
        print(f"Commands: {COMMANDS}")
        sys.exit(1)

    setup_logging()
    command = args[0]
    if command == "seed":
        seed(force="--force" in args[1:])
    elif command == "report":
        report()
    elif command == "export-csv":
        if len(args) < 2:
            print("Usage: python -m tradejournal.cli export-csv <path>")
            sys.exit(1)
        export_csv(args[1])
    else:
        print(f"Unknown command: {command}")
        sys.exit(1)


if __name__ == "__main__":
    main()
