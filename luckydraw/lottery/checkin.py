"""Check-in transaction: mark an attendee present and run the automatic draw."""
import logging
from datetime import UTC, datetime
from uuid import UUID

from sqlmodel import Session, select

from luckydraw.core.database import atomic
from luckydraw.core.errors import ParticipantNotFound
from luckydraw.lottery.digits import DrawRule
from luckydraw.lottery.locks import lock_participant
from luckydraw.lottery.selector import select_prize
from luckydraw.lottery.sequence import allocate_position, peek_next_position
from luckydraw.models import Participant, Prize, Winner
from luckydraw.models.operations import AuditEntry, CheckInAudit, CheckInResult
from luckydraw.models.prize import PrizeInfo

logger = logging.getLogger(__name__)


def _prize_info(session: Session, winner: Winner | None) -> PrizeInfo | None:
    if winner is None:
        return None
    prize = session.get(Prize, winner.prize_id)
    return PrizeInfo(name=prize.name, image_ref=prize.image_ref)


def _find_winner(session: Session, participant_id: UUID) -> Winner | None:
    return session.exec(
        select(Winner).where(Winner.participant_id == participant_id)
    ).first()


def check_in(
    session: Session,
    participant_id: UUID,
    rule: DrawRule | None = None,
) -> CheckInResult:
    """
    Check in a participant and, on their first check-in, run the draw.

    Runs as a single transaction. The participant row is locked first, then
    the sequence row, then (only on a win) the prize rows. A repeated call
    for an already checked-in participant does not draw again: it returns the
    original position and whatever prize the participant holds, so a client
    retrying after a lost response still learns about the win.

    Raises ParticipantNotFound for an unknown id. Any failure rolls back the
    whole check-in, including the sequence position.
    """
    with atomic(session):
        participant = lock_participant(session, participant_id)
        return check_in_locked(session, participant, rule)


def check_in_by_external_id(
    session: Session,
    external_id: str,
    rule: DrawRule | None = None,
) -> CheckInResult:
    """Resolve a badge number and check that participant in."""
    participant_id = session.exec(
        select(Participant.id).where(Participant.external_id == external_id)
    ).first()
    if participant_id is None:
        raise ParticipantNotFound(f"No participant with external id '{external_id}'")
    return check_in(session, participant_id, rule)


def check_in_locked(
    session: Session,
    participant: Participant,
    rule: DrawRule | None = None,
) -> CheckInResult:
    """Check-in body; the caller holds the participant lock and the transaction."""
    rule = rule or DrawRule.from_settings()

    if participant.checked_in:
        winner = _find_winner(session, participant.id)
        position = participant.checkin_position
        return CheckInResult(
            participant_id=participant.id,
            position=position,
            digit=rule.evaluate(position).digit if position is not None else None,
            is_winner=winner is not None,
            prize=_prize_info(session, winner),
            already_checked_in=True,
        )

    position = allocate_position(session)
    participant.checked_in = True
    participant.checked_in_at = datetime.now(UTC)
    participant.checkin_position = position
    session.add(participant)

    decision = rule.evaluate(position)
    winner = None
    no_prize_available = False
    if decision.wins and not participant.is_winner:
        winner = select_prize(session, participant)
        no_prize_available = winner is None
    elif participant.is_winner:
        winner = _find_winner(session, participant.id)

    session.flush()
    logger.info(
        f"Checked in {participant.external_id} at position {position} "
        f"(digit {decision.digit}, wins={decision.wins})"
    )
    return CheckInResult(
        participant_id=participant.id,
        position=position,
        digit=decision.digit,
        is_winner=participant.is_winner,
        prize=_prize_info(session, winner),
        no_prize_available=no_prize_available,
    )


def audit_checkins(session: Session, rule: DrawRule | None = None) -> CheckInAudit:
    """Replay every recorded check-in position against the draw rule."""
    rule = rule or DrawRule.from_settings()
    participants = session.exec(
        select(Participant)
        .where(Participant.checkin_position.is_not(None))
        .order_by(Participant.checkin_position)
    ).all()

    entries = []
    for participant in participants:
        decision = rule.evaluate(participant.checkin_position)
        winner = participant.winner
        entries.append(
            AuditEntry(
                participant_id=participant.id,
                name=participant.name,
                external_id=participant.external_id,
                position=decision.position,
                digit=decision.digit,
                draw_wins=decision.wins,
                has_prize=winner is not None,
                prize_name=winner.prize.name if winner is not None else None,
            )
        )
    return CheckInAudit(next_position=peek_next_position(session), entries=entries)
