"""Participant and prize administration.

Plain CRUD is here too, but the interesting parts are the edits that touch
prize stock: deleting a participant gives back the prize they held, editing
a prize's nominal quota shifts its remaining stock, and a prize that has been
awarded cannot be deleted.
"""
import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, func, select

from luckydraw.core.database import atomic
from luckydraw.core.errors import (
    DuplicateEntry,
    InsufficientQuota,
    InvalidInputError,
    ParticipantNotFound,
    PrizeInUse,
)
from luckydraw.lottery.checkin import check_in_locked
from luckydraw.lottery.digits import DrawRule
from luckydraw.lottery.locks import lock_participant, lock_participants, lock_prize, lock_prizes, lock_winners
from luckydraw.lottery.manual import eligible_participants
from luckydraw.lottery.winners import release_wins
from luckydraw.models import Participant, Prize, Winner
from luckydraw.models.operations import CheckInResult
from luckydraw.models.participant import ParticipantCreate, ParticipantUpdate
from luckydraw.models.prize import PrizeCreate, PrizeUpdate
from luckydraw.models.winner import WinnerRead

logger = logging.getLogger(__name__)


def _flush_unique(session: Session, what: str):
    """Flush, reporting a unique-constraint violation as DuplicateEntry."""
    try:
        session.flush()
    except IntegrityError as e:
        raise DuplicateEntry(f"{what} already exists") from e


def _ensure_external_id_free(session: Session, external_id: str):
    existing = session.exec(
        select(Participant.id).where(Participant.external_id == external_id)
    ).first()
    if existing is not None:
        raise DuplicateEntry(f"A participant with external id '{external_id}' already exists")


def _ensure_prize_name_free(session: Session, name: str):
    existing = session.exec(select(Prize.id).where(Prize.name == name)).first()
    if existing is not None:
        raise DuplicateEntry(f"A prize named '{name}' already exists")


# Participants


def list_participants(session: Session) -> list[Participant]:
    return list(session.exec(select(Participant).order_by(Participant.name)).all())


def list_eligible_participants(session: Session) -> list[Participant]:
    return eligible_participants(session)


def get_participant(session: Session, participant_id: UUID) -> Participant:
    participant = session.get(Participant, participant_id)
    if participant is None:
        raise ParticipantNotFound(f"Participant {participant_id} not found")
    return participant


def find_participant_by_external_id(session: Session, external_id: str) -> Participant:
    participant = session.exec(
        select(Participant).where(Participant.external_id == external_id)
    ).first()
    if participant is None:
        raise ParticipantNotFound(f"No participant with external id '{external_id}'")
    return participant


def _new_participant(data: ParticipantCreate) -> Participant:
    return Participant(
        name=data.name,
        external_id=data.external_id,
        category=data.category,
        employment_type=data.employment_type,
    )


def create_participant(
    session: Session,
    data: ParticipantCreate,
    rule: DrawRule | None = None,
) -> tuple[Participant, CheckInResult | None]:
    """
    Register a participant, optionally checking them in straight away.

    Self-service registration at the kiosk sets ``checked_in``; the check-in
    then runs in the same transaction as the insert, so the newcomer takes a
    sequence position and a draw exactly like anyone else.
    """
    with atomic(session):
        _ensure_external_id_free(session, data.external_id)
        participant = _new_participant(data)
        session.add(participant)
        _flush_unique(session, f"Participant '{participant.external_id}'")

        result = None
        if data.checked_in:
            result = check_in_locked(session, participant, rule)

    logger.info(f"Registered participant {participant.external_id}")
    return participant, result


def import_participants(
    session: Session,
    rows: list[ParticipantCreate],
    rule: DrawRule | None = None,
) -> int:
    """Insert many participants at once; any duplicate aborts the whole batch."""
    if not rows:
        raise InvalidInputError("participants must not be empty")

    external_ids = [row.external_id for row in rows]
    duplicates = {eid for eid in external_ids if external_ids.count(eid) > 1}
    if duplicates:
        raise DuplicateEntry(
            "Duplicate external ids in import: " + ", ".join(sorted(duplicates))
        )

    with atomic(session):
        existing = session.exec(
            select(Participant.external_id).where(Participant.external_id.in_(external_ids))
        ).all()
        if existing:
            raise DuplicateEntry(
                "External ids already registered: " + ", ".join(sorted(existing))
            )

        participants = [_new_participant(row) for row in rows]
        session.add_all(participants)
        _flush_unique(session, "Participant")

        for participant, row in zip(participants, rows):
            if row.checked_in:
                check_in_locked(session, participant, rule)

    logger.info(f"Imported {len(participants)} participants")
    return len(participants)


def update_participant(
    session: Session,
    participant_id: UUID,
    data: ParticipantUpdate,
) -> Participant:
    with atomic(session):
        participant = lock_participant(session, participant_id)
        changes = data.model_dump(exclude_unset=True)

        external_id = changes.get("external_id")
        if external_id is not None and external_id != participant.external_id:
            _ensure_external_id_free(session, external_id)

        for field, value in changes.items():
            if value is None and field in ("name", "external_id"):
                continue
            setattr(participant, field, value)
        session.add(participant)
        _flush_unique(session, f"Participant '{participant.external_id}'")
    return participant


def delete_participants(session: Session, participant_ids: list[UUID]) -> int:
    """
    Delete participants, returning any prize they won to stock.

    All-or-nothing: an unknown id raises ParticipantNotFound and nothing is
    deleted. Returns the number of participants deleted.
    """
    if not participant_ids:
        raise InvalidInputError("participant_ids must not be empty")

    with atomic(session):
        participants = lock_participants(session, participant_ids)
        ids = [participant.id for participant in participants]
        held = session.exec(select(Winner).where(Winner.participant_id.in_(ids))).all()

        if held:
            lock_prizes(session, [winner.prize_id for winner in held])
            release_wins(session, lock_winners(session, [winner.id for winner in held]))

        for participant in participants:
            session.delete(participant)
        session.flush()

    logger.info(f"Deleted {len(participants)} participant(s), released {len(held)} prize(s)")
    return len(participants)


# Prizes


def list_prizes(session: Session) -> list[Prize]:
    return list(session.exec(select(Prize).order_by(Prize.name)).all())


def list_available_prizes(session: Session) -> list[Prize]:
    return list(
        session.exec(
            select(Prize).where(Prize.current_quota > 0).order_by(Prize.name)
        ).all()
    )


def create_prize(session: Session, data: PrizeCreate) -> Prize:
    with atomic(session):
        name = data.name
        _ensure_prize_name_free(session, name)
        prize = Prize(
            name=name,
            image_ref=data.image_ref,
            initial_quota=data.quota,
            current_quota=data.quota,
        )
        session.add(prize)
        _flush_unique(session, f"Prize '{name}'")
    logger.info(f"Created prize '{prize.name}' with quota {prize.initial_quota}")
    return prize


def update_prize(session: Session, prize_id: UUID, data: PrizeUpdate) -> Prize:
    """
    Edit a prize.

    Changing ``initial_quota`` moves ``current_quota`` by the same amount, so
    units already awarded stay accounted for. An explicit ``current_quota``
    overrides that. Raises InsufficientQuota if the remaining stock would end
    up below zero.
    """
    with atomic(session):
        prize = lock_prize(session, prize_id)

        if data.name is not None and data.name != prize.name:
            _ensure_prize_name_free(session, data.name)
            prize.name = data.name
        if "image_ref" in data.model_fields_set:
            prize.image_ref = data.image_ref

        awarded = prize.initial_quota - prize.current_quota
        current_quota = prize.current_quota
        if data.initial_quota is not None:
            current_quota += data.initial_quota - prize.initial_quota
            prize.initial_quota = data.initial_quota
        if data.current_quota is not None:
            current_quota = data.current_quota
        if current_quota < 0:
            raise InsufficientQuota(
                f"Quota for '{prize.name}' cannot go below the {awarded} unit(s) already awarded"
            )
        prize.current_quota = current_quota

        session.add(prize)
        _flush_unique(session, f"Prize '{prize.name}'")
    return prize


def delete_prize(session: Session, prize_id: UUID) -> None:
    """Delete a prize nobody has won. Raises PrizeInUse otherwise."""
    with atomic(session):
        prize = lock_prize(session, prize_id)
        awarded = session.exec(
            select(func.count()).select_from(Winner).where(Winner.prize_id == prize.id)
        ).one()
        if awarded:
            raise PrizeInUse(
                f"'{prize.name}' has {awarded} winner(s); remove them before deleting the prize"
            )
        session.delete(prize)
    logger.info(f"Deleted prize {prize_id}")


# Winners


def list_winners(session: Session) -> list[WinnerRead]:
    winners = session.exec(select(Winner).order_by(Winner.won_at.desc())).all()
    return [WinnerRead.from_winner(winner) for winner in winners]
