"""Manual draw routes: pick tentative winners on stage, then confirm them."""
from fastapi import APIRouter, Depends
from sqlmodel import Session

from luckydraw.core.database import get_session
from luckydraw.lottery.manual import draw_candidates
from luckydraw.lottery.winners import confirm_winners
from luckydraw.models.operations import ConfirmRequest, ConfirmResult, DrawRequest, DrawResult
from luckydraw.models.participant import ParticipantRead
from luckydraw.models.prize import PrizeRead

router = APIRouter(prefix="/draw", tags=["draw"])


@router.post("", response_model=DrawResult)
def draw(data: DrawRequest, session: Session = Depends(get_session)):
    """
    Draw ``count`` tentative winners for a prize.

    Nothing is saved. The client shows the result and sends the chosen ids
    back to ``/draw/confirm`` once the operator accepts them.
    """
    tentative = draw_candidates(session, data.prize_id, data.count)
    return DrawResult(
        prize=PrizeRead.model_validate(tentative.prize),
        winners=[ParticipantRead.model_validate(p) for p in tentative.winners],
    )


@router.post("/confirm", response_model=ConfirmResult)
def confirm(data: ConfirmRequest, session: Session = Depends(get_session)):
    """Commit tentative winners. All of them win, or none do."""
    return confirm_winners(session, data.participant_ids, data.prize_id)
