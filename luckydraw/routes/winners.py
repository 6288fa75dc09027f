"""Winner routes for listing and undoing wins."""
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlmodel import Session

from luckydraw.core.database import get_session
from luckydraw.lottery import roster
from luckydraw.lottery.winners import remove_winner, remove_winners
from luckydraw.models.operations import RemovalResult, WinnerBulkDelete
from luckydraw.models.winner import WinnerRead

router = APIRouter(prefix="/winners", tags=["winners"])


@router.get("", response_model=list[WinnerRead])
def list_winners(session: Session = Depends(get_session)):
    """All winners, newest first."""
    return roster.list_winners(session)


@router.post("/delete", response_model=RemovalResult)
def delete_winners(data: WinnerBulkDelete, session: Session = Depends(get_session)):
    """
    Undo several wins, restoring one unit of stock per winner.

    All-or-nothing: returns 404 and removes nothing if any id is unknown.
    """
    return RemovalResult(removed=remove_winners(session, data.winner_ids))


@router.delete("/{winner_id}", response_model=RemovalResult)
def delete_winner(winner_id: UUID, session: Session = Depends(get_session)):
    """Undo one win and restore its prize's stock."""
    return RemovalResult(removed=remove_winner(session, winner_id))
