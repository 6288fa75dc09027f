"""Tests for database models."""

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from luckydraw.models import Participant, Prize, Setting, Winner
from luckydraw.models.participant import ParticipantCreate, ParticipantUpdate
from luckydraw.models.prize import PrizeCreate, PrizeUpdate
from luckydraw.models.setting import CHECKIN_SEQUENCE_KEY


class TestParticipantModel:
    """Tests for the Participant model."""

    def test_create_participant(self, session: Session):
        """Test creating a participant with defaults."""
        participant = Participant(name="Siti Aisyah", external_id="176781232", category="Staff")
        session.add(participant)
        session.commit()

        retrieved = session.exec(
            select(Participant).where(Participant.external_id == "176781232")
        ).first()

        assert retrieved is not None
        assert retrieved.name == "Siti Aisyah"
        assert retrieved.is_winner is False
        assert retrieved.checked_in is False
        assert retrieved.checkin_position is None
        assert retrieved.created_at is not None

    def test_external_id_unique(self, session: Session):
        """Test that external_id must be unique."""
        session.add(Participant(name="First", external_id="duplicate"))
        session.commit()

        session.add(Participant(name="Second", external_id="duplicate"))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_checkin_position_unique(self, session: Session):
        """Test that two participants cannot share a sequence position."""
        session.add(Participant(name="First", external_id="1", checkin_position=5))
        session.commit()

        session.add(Participant(name="Second", external_id="2", checkin_position=5))
        with pytest.raises(IntegrityError):
            session.commit()


class TestWinnerModel:
    """Tests for the Winner model."""

    def test_winner_relationships(self, session: Session, make_participant, make_prize):
        """Test that a winner links participant and prize both ways."""
        participant = make_participant("Budi Santoso")
        prize = make_prize("TWS", quota=3)

        winner = Winner(participant_id=participant.id, prize_id=prize.id)
        session.add(winner)
        session.commit()
        session.refresh(participant)
        session.refresh(prize)

        assert participant.winner.id == winner.id
        assert [w.id for w in prize.winners] == [winner.id]
        assert winner.won_at is not None

    def test_one_winner_per_participant(self, session: Session, make_participant, make_prize):
        """Test that a participant cannot hold two prizes."""
        participant = make_participant()
        first = make_prize("TWS")
        second = make_prize("Smart Watch")

        session.add(Winner(participant_id=participant.id, prize_id=first.id))
        session.commit()

        session.add(Winner(participant_id=participant.id, prize_id=second.id))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_winner_requires_existing_prize(self, session: Session, make_participant):
        """Test that foreign keys are enforced."""
        from uuid import uuid4

        participant = make_participant()
        session.add(Winner(participant_id=participant.id, prize_id=uuid4()))
        with pytest.raises(IntegrityError):
            session.commit()


class TestPrizeModel:
    """Tests for the Prize model."""

    def test_prize_name_unique(self, session: Session):
        session.add(Prize(name="Magic Com", initial_quota=1, current_quota=1))
        session.commit()

        session.add(Prize(name="Magic Com", initial_quota=2, current_quota=2))
        with pytest.raises(IntegrityError):
            session.commit()


class TestSettingModel:
    """Tests for the Setting model."""

    def test_sequence_row_seeded(self, session: Session):
        """Test that schema creation seeds the check-in counter at zero."""
        counter = session.get(Setting, CHECKIN_SEQUENCE_KEY)
        assert counter is not None
        assert counter.value == "0"


class TestRequestSchemas:
    """Tests for whitespace handling on registration and edit payloads."""

    def test_names_are_stripped(self):
        data = ParticipantCreate(name="  Andi Wijaya ", external_id=" 176781240 ")
        assert data.name == "Andi Wijaya"
        assert data.external_id == "176781240"

    @pytest.mark.parametrize("field", ["name", "external_id"])
    def test_blank_participant_fields_rejected(self, field):
        values = {"name": "Andi", "external_id": "1", field: "   "}
        with pytest.raises(ValidationError):
            ParticipantCreate(**values)

    def test_blank_update_rejected(self):
        with pytest.raises(ValidationError):
            ParticipantUpdate(name="   ")

    def test_blank_prize_name_rejected(self):
        with pytest.raises(ValidationError):
            PrizeCreate(name="   ", quota=1)
        with pytest.raises(ValidationError):
            PrizeUpdate(name=" ")

    def test_prize_name_stripped(self):
        assert PrizeCreate(name=" Magic Com ", quota=1).name == "Magic Com"
