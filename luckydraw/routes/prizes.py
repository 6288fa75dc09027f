"""Prize routes for stock management."""
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlmodel import Session

from luckydraw.core.database import get_session
from luckydraw.lottery import roster
from luckydraw.models.operations import RemovalResult
from luckydraw.models.prize import PrizeCreate, PrizeRead, PrizeUpdate

router = APIRouter(prefix="/prizes", tags=["prizes"])


@router.get("", response_model=list[PrizeRead])
def list_prizes(session: Session = Depends(get_session)):
    return roster.list_prizes(session)


@router.get("/available", response_model=list[PrizeRead])
def available_prizes(session: Session = Depends(get_session)):
    """Prizes with stock left."""
    return roster.list_available_prizes(session)


@router.post("", response_model=PrizeRead, status_code=201)
def create_prize(data: PrizeCreate, session: Session = Depends(get_session)):
    return roster.create_prize(session, data)


@router.put("/{prize_id}", response_model=PrizeRead)
def update_prize(prize_id: UUID, data: PrizeUpdate, session: Session = Depends(get_session)):
    """
    Edit a prize.

    A new ``initial_quota`` shifts the remaining stock by the same delta
    unless ``current_quota`` is sent as well. Returns 409 if the remaining
    stock would drop below zero.
    """
    return roster.update_prize(session, prize_id, data)


@router.delete("/{prize_id}", response_model=RemovalResult)
def delete_prize(prize_id: UUID, session: Session = Depends(get_session)):
    """Delete a prize. Returns 409 while any winner holds it."""
    roster.delete_prize(session, prize_id)
    return RemovalResult(removed=1)
