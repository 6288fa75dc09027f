"""Participant routes for registration, lookup and admin management."""
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from luckydraw.core.database import get_session
from luckydraw.lottery import roster
from luckydraw.models.operations import (
    BulkImportResult,
    ParticipantBulkCreate,
    ParticipantBulkDelete,
    ParticipantCreated,
    RemovalResult,
)
from luckydraw.models.participant import ParticipantCreate, ParticipantRead, ParticipantUpdate

router = APIRouter(prefix="/participants", tags=["participants"])


@router.get("", response_model=list[ParticipantRead])
def list_participants(session: Session = Depends(get_session)):
    """List all participants ordered by name."""
    return roster.list_participants(session)


@router.post("", response_model=ParticipantCreated, status_code=201)
def create_participant(data: ParticipantCreate, session: Session = Depends(get_session)):
    """
    Register a participant.

    With ``checked_in`` set (self-service registration at the kiosk) the
    participant is also checked in, and the check-in result, including any
    prize won, is returned alongside the new record.
    """
    participant, check_in = roster.create_participant(session, data)
    return ParticipantCreated(
        participant=ParticipantRead.model_validate(participant),
        check_in=check_in,
    )


@router.post("/bulk", response_model=BulkImportResult)
def import_participants(data: ParticipantBulkCreate, session: Session = Depends(get_session)):
    """Import a batch of participants. Any duplicate rejects the whole batch."""
    count = roster.import_participants(session, data.participants)
    return BulkImportResult(count=count)


@router.get("/search", response_model=ParticipantRead)
def search_participant(
    external_id: str = Query(..., min_length=1),
    session: Session = Depends(get_session),
):
    """Find a participant by badge number. Returns 404 if unknown."""
    return roster.find_participant_by_external_id(session, external_id.strip())


@router.get("/eligible", response_model=list[ParticipantRead])
def eligible_participants(session: Session = Depends(get_session)):
    """Checked-in participants who have not won yet."""
    return roster.list_eligible_participants(session)


@router.post("/delete", response_model=RemovalResult)
def delete_participants(data: ParticipantBulkDelete, session: Session = Depends(get_session)):
    """Delete several participants, returning any prizes they held to stock."""
    removed = roster.delete_participants(session, data.participant_ids)
    return RemovalResult(removed=removed)


@router.get("/{participant_id}", response_model=ParticipantRead)
def get_participant(participant_id: UUID, session: Session = Depends(get_session)):
    return roster.get_participant(session, participant_id)


@router.put("/{participant_id}", response_model=ParticipantRead)
def update_participant(
    participant_id: UUID,
    data: ParticipantUpdate,
    session: Session = Depends(get_session),
):
    return roster.update_participant(session, participant_id, data)


@router.delete("/{participant_id}", response_model=RemovalResult)
def delete_participant(participant_id: UUID, session: Session = Depends(get_session)):
    """Delete a participant, returning their prize (if any) to stock."""
    removed = roster.delete_participants(session, [participant_id])
    return RemovalResult(removed=removed)
