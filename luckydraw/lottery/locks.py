"""Row-lock helpers shared by every multi-row transaction.

All transactions acquire locks in one global order to rule out circular
waits between concurrent check-ins, confirmations, undos and deletes:

    participants (by id) -> settings row -> prizes (by id) -> winners (by id)

Rows are locked one at a time in sorted id order rather than with a single
``IN (...)`` query, so the acquisition order does not depend on the
database's choice of scan.
"""

from collections.abc import Iterable
from uuid import UUID

from sqlmodel import Session, select

from luckydraw.core.errors import ParticipantNotFound, PrizeNotFound, WinnerNotFound
from luckydraw.models import Participant, Prize, Winner


def _lock_one(session: Session, model, row_id: UUID):
    statement = (
        select(model)
        .where(model.id == row_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return session.exec(statement).first()


def lock_participant(session: Session, participant_id: UUID) -> Participant:
    participant = _lock_one(session, Participant, participant_id)
    if participant is None:
        raise ParticipantNotFound(f"Participant {participant_id} not found")
    return participant


def lock_participants(session: Session, participant_ids: Iterable[UUID]) -> list[Participant]:
    """Lock participants in ascending id order; all must exist."""
    return [lock_participant(session, pid) for pid in sorted(set(participant_ids))]


def lock_prize(session: Session, prize_id: UUID) -> Prize:
    prize = _lock_one(session, Prize, prize_id)
    if prize is None:
        raise PrizeNotFound(f"Prize {prize_id} not found")
    return prize


def lock_prizes(session: Session, prize_ids: Iterable[UUID]) -> dict[UUID, Prize]:
    """Lock prizes in ascending id order; all must exist."""
    return {pid: lock_prize(session, pid) for pid in sorted(set(prize_ids))}


def lock_winners(session: Session, winner_ids: Iterable[UUID]) -> list[Winner]:
    winners = []
    for winner_id in sorted(set(winner_ids)):
        winner = _lock_one(session, Winner, winner_id)
        if winner is None:
            raise WinnerNotFound(f"Winner {winner_id} not found")
        winners.append(winner)
    return winners
