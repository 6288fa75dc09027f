"""Check-in routes used by the attendance kiosk."""

from fastapi import APIRouter, Depends
from sqlmodel import Session

from luckydraw.core.database import get_session
from luckydraw.core.errors import InvalidInputError
from luckydraw.lottery.checkin import audit_checkins, check_in, check_in_by_external_id
from luckydraw.models.operations import CheckInAudit, CheckInRequest, CheckInResult

router = APIRouter(prefix="/checkins", tags=["checkins"])


@router.post("", response_model=CheckInResult)
def create_checkin(data: CheckInRequest, session: Session = Depends(get_session)):
    """
    Check in a participant by id or badge number.

    Safe to retry: a repeated check-in returns the original position and
    prize with ``already_checked_in`` set, and never draws again.
    """
    if data.participant_id is not None:
        return check_in(session, data.participant_id)
    if data.external_id:
        return check_in_by_external_id(session, data.external_id.strip())
    raise InvalidInputError("participant_id or external_id is required")


@router.get("/audit", response_model=CheckInAudit)
def checkin_audit(session: Session = Depends(get_session)):
    """Replay every check-in position against the draw rule."""
    return audit_checkins(session)
