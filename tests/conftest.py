"""Shared test fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel
from sqlmodel.pool import StaticPool

from luckydraw.core.database import build_engine, create_db_and_tables, get_session
from luckydraw.lottery.digits import DrawRule
from luckydraw.main import app
from luckydraw.models import Participant, Prize, Setting
from luckydraw.models.setting import CHECKIN_SEQUENCE_KEY


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    create_db_and_tables(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Create a new database session for each test."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Create a test client with the test database session."""

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="always_win")
def always_win_fixture() -> DrawRule:
    """A rule under which every position wins."""
    return DrawRule(cutover=0, early_digits=frozenset(), late_digits=frozenset(range(10)))


@pytest.fixture(name="never_win")
def never_win_fixture() -> DrawRule:
    """A rule under which no position wins."""
    return DrawRule(cutover=0, early_digits=frozenset(), late_digits=frozenset())


@pytest.fixture(name="make_participant")
def make_participant_fixture(session: Session):
    """Factory for persisted participants."""
    counter = iter(range(10000, 99999))

    def make(
        name: str = "Attendee",
        external_id: str | None = None,
        checked_in: bool = False,
        **kwargs,
    ) -> Participant:
        participant = Participant(
            name=name,
            external_id=external_id or str(next(counter)),
            checked_in=checked_in,
            **kwargs,
        )
        session.add(participant)
        session.commit()
        session.refresh(participant)
        return participant

    return make


@pytest.fixture(name="make_prize")
def make_prize_fixture(session: Session):
    """Factory for persisted prizes with ``quota`` units in stock."""

    def make(name: str, quota: int = 1, **kwargs) -> Prize:
        prize = Prize(name=name, initial_quota=quota, current_quota=quota, **kwargs)
        session.add(prize)
        session.commit()
        session.refresh(prize)
        return prize

    return make


@pytest.fixture(name="set_sequence")
def set_sequence_fixture(session: Session):
    """Move the check-in sequence counter to a given position."""

    def set_to(value: int):
        counter = session.get(Setting, CHECKIN_SEQUENCE_KEY)
        counter.value = str(value)
        session.add(counter)
        session.commit()

    return set_to
