"""Prize selection for check-ins the draw function says have won."""
import logging
import random
from datetime import UTC, datetime

from sqlmodel import Session, select

from luckydraw.models import Participant, Prize, Winner

logger = logging.getLogger(__name__)

_system_random = random.SystemRandom()


def lock_available_prizes(session: Session) -> list[Prize]:
    """Lock and return every prize with stock left, ordered by id."""
    statement = (
        select(Prize)
        .where(Prize.current_quota > 0)
        .order_by(Prize.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return list(session.exec(statement).all())


def select_prize(
    session: Session,
    participant: Participant,
    rng: random.Random | None = None,
) -> Winner | None:
    """
    Award ``participant`` one prize chosen uniformly among those in stock.

    Every prize with remaining quota is equally likely, however much of it is
    left. The chosen prize's quota drops by one and a Winner row is added in
    the caller's transaction; the participant row must already be locked by
    the caller.

    Returns None if every prize is out of stock.
    """
    available = lock_available_prizes(session)
    if not available:
        logger.warning(
            f"Participant {participant.external_id} won but no prize has quota left"
        )
        return None

    prize = (rng or _system_random).choice(available)
    prize.current_quota -= 1

    winner = Winner(
        participant_id=participant.id,
        prize_id=prize.id,
        won_at=datetime.now(UTC),
    )
    participant.is_winner = True
    session.add(prize)
    session.add(participant)
    session.add(winner)
    session.flush()

    logger.info(
        f"Participant {participant.external_id} won '{prize.name}' "
        f"({prize.current_quota} left)"
    )
    return winner
