"""Confirming tentative winners and undoing wins.

Both directions keep ``current_quota + winners == initial_quota`` for every
prize and keep ``Participant.is_winner`` in step with the Winner rows.
"""
import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from uuid import UUID

from sqlmodel import Session, func, select

from luckydraw.core.database import atomic
from luckydraw.core.errors import (
    AlreadyWinner,
    InsufficientQuota,
    InvalidInputError,
    NotCheckedIn,
    WinnerNotFound,
)
from luckydraw.lottery.locks import lock_participants, lock_prize, lock_prizes, lock_winners
from luckydraw.models import Participant, Winner
from luckydraw.models.operations import ConfirmResult

logger = logging.getLogger(__name__)


def confirm_winners(
    session: Session,
    participant_ids: list[UUID],
    prize_id: UUID,
) -> ConfirmResult:
    """
    Commit a tentative draw: every participant wins ``prize_id``.

    Participant rows are locked in ascending id order, then the prize row.
    Either every participant becomes a winner and the quota drops by
    ``len(participant_ids)``, or nothing changes.

    Raises:
        InvalidInputError: empty or duplicated participant ids.
        ParticipantNotFound / PrizeNotFound: unknown ids.
        InsufficientQuota: fewer units left than participants.
        NotCheckedIn / AlreadyWinner: a participant is not eligible.
    """
    if not participant_ids:
        raise InvalidInputError("participant_ids must not be empty")
    if len(set(participant_ids)) != len(participant_ids):
        raise InvalidInputError("participant_ids must not contain duplicates")

    with atomic(session):
        participants = lock_participants(session, participant_ids)
        prize = lock_prize(session, prize_id)

        if prize.current_quota < len(participants):
            raise InsufficientQuota(
                f"Not enough quota for '{prize.name}'. "
                f"Available: {prize.current_quota}, Requested: {len(participants)}"
            )

        for participant in participants:
            if not participant.checked_in:
                raise NotCheckedIn(f"{participant.name} has not checked in")
            if participant.is_winner:
                raise AlreadyWinner(f"{participant.name} has already won a prize")

        now = datetime.now(UTC)
        winners = []
        for participant in participants:
            participant.is_winner = True
            winner = Winner(participant_id=participant.id, prize_id=prize.id, won_at=now)
            session.add(participant)
            session.add(winner)
            winners.append(winner)

        prize.current_quota -= len(participants)
        session.add(prize)
        session.flush()

        logger.info(
            f"Confirmed {len(winners)} winner(s) for '{prize.name}' "
            f"({prize.current_quota} left)"
        )
        return ConfirmResult(
            remaining_quota=prize.current_quota,
            winner_ids=[winner.id for winner in winners],
        )


def remove_winner(session: Session, winner_id: UUID) -> int:
    """Undo one win, restoring one unit of the prize. Raises WinnerNotFound."""
    return remove_winners(session, [winner_id])


def remove_winners(session: Session, winner_ids: Iterable[UUID]) -> int:
    """
    Undo several wins at once.

    All-or-nothing: if any id does not resolve to a Winner row, nothing is
    removed and WinnerNotFound is raised. Repeated ids count once. Returns
    the number of Winner rows removed.
    """
    winner_ids = set(winner_ids)
    if not winner_ids:
        raise InvalidInputError("winner_ids must not be empty")

    with atomic(session):
        rows = session.exec(select(Winner).where(Winner.id.in_(list(winner_ids)))).all()
        missing = winner_ids - {row.id for row in rows}
        if missing:
            raise WinnerNotFound(
                "Winner record(s) not found: " + ", ".join(sorted(str(m) for m in missing))
            )

        lock_participants(session, [row.participant_id for row in rows])
        lock_prizes(session, [row.prize_id for row in rows])
        winners = lock_winners(session, winner_ids)
        release_wins(session, winners)

    logger.info(f"Removed {len(winners)} winner(s)")
    return len(winners)


def release_wins(session: Session, winners: list[Winner]) -> None:
    """
    Delete ``winners``, give their prizes back and clear the winner flags.

    The caller must already hold the participant and prize locks, in the
    global order, inside its own transaction.
    """
    participant_ids = set()
    for winner in winners:
        prize = winner.prize
        prize.current_quota += 1
        session.add(prize)
        participant_ids.add(winner.participant_id)
        session.delete(winner)
    session.flush()

    for participant_id in participant_ids:
        remaining = session.exec(
            select(func.count()).select_from(Winner).where(Winner.participant_id == participant_id)
        ).one()
        participant = session.get(Participant, participant_id)
        participant.is_winner = remaining > 0
        session.add(participant)
    session.flush()
