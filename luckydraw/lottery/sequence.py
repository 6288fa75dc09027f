"""Gapless check-in sequence positions backed by a single settings row."""
import logging

from sqlmodel import Session, select

from luckydraw.core.errors import SequenceCounterMissing
from luckydraw.models import Setting
from luckydraw.models.setting import CHECKIN_SEQUENCE_KEY

logger = logging.getLogger(__name__)


def _counter_statement(lock: bool):
    statement = select(Setting).where(Setting.key == CHECKIN_SEQUENCE_KEY)
    if lock:
        statement = statement.with_for_update()
    return statement.execution_options(populate_existing=True)


def allocate_position(session: Session) -> int:
    """
    Take the next check-in position.

    Locks the counter row for the rest of the caller's transaction, returns
    its current value and stores value + 1. A rolled-back transaction gives
    the position back, so committed positions stay gap-free.

    Raises SequenceCounterMissing if the row was never seeded.
    """
    counter = session.exec(_counter_statement(lock=True)).first()
    if counter is None:
        raise SequenceCounterMissing(
            f"Settings row '{CHECKIN_SEQUENCE_KEY}' is missing; run create_db_and_tables()"
        )

    position = int(counter.value)
    counter.value = str(position + 1)
    session.add(counter)
    session.flush()
    return position


def peek_next_position(session: Session) -> int | None:
    """Position the next check-in would receive, without locking."""
    counter = session.exec(_counter_statement(lock=False)).first()
    return int(counter.value) if counter is not None else None


def seed_sequence_counter(session: Session, start: int = 0) -> bool:
    """Create the counter row if it does not exist. Returns True if created."""
    if session.get(Setting, CHECKIN_SEQUENCE_KEY) is not None:
        return False
    session.add(Setting(key=CHECKIN_SEQUENCE_KEY, value=str(start)))
    session.flush()
    logger.info(f"Seeded check-in sequence at {start}")
    return True
