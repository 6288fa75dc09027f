"""Operator-triggered draws of several winners for one prize.

Unlike the check-in draw this one is truly random: it happens on stage in
front of the audience. The result is tentative. Nothing is written until the
operator confirms it with :func:`luckydraw.lottery.winners.confirm_winners`.
"""
import logging
import random
from dataclasses import dataclass
from uuid import UUID

from sqlmodel import Session, select

from luckydraw.core.errors import (
    InsufficientParticipants,
    InsufficientQuota,
    InvalidInputError,
    PrizeNotFound,
)
from luckydraw.models import Participant, Prize

logger = logging.getLogger(__name__)

_system_random = random.SystemRandom()


@dataclass(frozen=True)
class TentativeDraw:
    """Winners picked for ``prize`` but not yet committed."""

    prize: Prize
    winners: list[Participant]

    @property
    def participant_ids(self) -> list[UUID]:
        return [participant.id for participant in self.winners]


def eligible_participants(session: Session) -> list[Participant]:
    """Checked-in participants who have not won anything yet."""
    statement = (
        select(Participant)
        .where(Participant.checked_in == True)  # noqa: E712
        .where(Participant.is_winner == False)  # noqa: E712
        .order_by(Participant.name, Participant.id)
    )
    return list(session.exec(statement).all())


def draw_candidates(
    session: Session,
    prize_id: UUID,
    count: int,
    rng: random.Random | None = None,
) -> TentativeDraw:
    """
    Pick ``count`` distinct winners from the eligible pool.

    The pool is shuffled in full (Fisher-Yates, via ``random.shuffle``) and
    the first ``count`` participants are taken. Reads only.

    Raises:
        InvalidInputError: ``count`` is less than 1.
        PrizeNotFound: unknown ``prize_id``.
        InsufficientQuota: the prize has fewer than ``count`` units left.
        InsufficientParticipants: fewer than ``count`` eligible participants.
    """
    if count < 1:
        raise InvalidInputError("count must be at least 1")

    prize = session.get(Prize, prize_id)
    if prize is None:
        raise PrizeNotFound(f"Prize {prize_id} not found")

    if prize.current_quota < count:
        raise InsufficientQuota(
            f"Not enough quota. Available: {prize.current_quota}, Requested: {count}"
        )

    pool = eligible_participants(session)
    if len(pool) < count:
        raise InsufficientParticipants(
            f"Not enough eligible participants. Available: {len(pool)}, Requested: {count}"
        )

    (rng or _system_random).shuffle(pool)
    selected = pool[:count]
    logger.info(f"Drew {count} tentative winner(s) for '{prize.name}'")
    return TentativeDraw(prize=prize, winners=selected)
