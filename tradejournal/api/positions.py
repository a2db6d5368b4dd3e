"""Open positions API."""

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from tradejournal.database import get_session
from tradejournal.models.position import Position
from tradejournal.services.breakdowns import position_allocation
from tradejournal.utils.serialization import to_jsonable

router = APIRouter(prefix="/api/positions", tags=["positions"])


@router.get("")
def list_positions(
    symbol: str | None = None,
    session: Session = Depends(get_session),
):
    stmt = select(Position).order_by(Position.timestamp.desc())
    if symbol is not None:
        stmt = stmt.where(Position.symbol == symbol)
    return session.exec(stmt).all()


@router.get("/allocation")
def allocation(session: Session = Depends(get_session)):
    """Share of open exposure per symbol, largest first."""
    positions = session.exec(select(Position)).all()
    return {
        "allocation": to_jsonable(position_allocation(positions)),
        "total_unrealized_pnl": sum(p.unrealized_pnl for p in positions),
        "total_margin": sum(p.margin or 0.0 for p in positions),
    }
