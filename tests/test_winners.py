"""Tests for confirming and undoing wins."""

from uuid import uuid4

import pytest
from sqlmodel import Session, func, select

from luckydraw.core.errors import (
    AlreadyWinner,
    InsufficientQuota,
    InvalidInputError,
    NotCheckedIn,
    ParticipantNotFound,
    PrizeNotFound,
    WinnerNotFound,
)
from luckydraw.lottery.manual import draw_candidates
from luckydraw.lottery.winners import confirm_winners, remove_winner, remove_winners
from luckydraw.models import Participant, Prize, Winner


def winner_count(session: Session) -> int:
    return session.exec(select(func.count()).select_from(Winner)).one()


class TestConfirmWinners:
    def test_confirm_tentative_draw(self, session: Session, make_participant, make_prize):
        for i in range(3):
            make_participant(f"Attendee {i}", checked_in=True)
        prize = make_prize("Sepeda Listrik", quota=2)
        draw = draw_candidates(session, prize.id, 2)

        result = confirm_winners(session, draw.participant_ids, prize.id)

        assert result.remaining_quota == 0
        assert len(result.winner_ids) == 2
        assert session.get(Prize, prize.id).current_quota == 0
        for participant_id in draw.participant_ids:
            assert session.get(Participant, participant_id).is_winner is True
        assert winner_count(session) == 2

    def test_insufficient_quota_changes_nothing(
        self, session: Session, make_participant, make_prize
    ):
        participants = [make_participant(f"A{i}", checked_in=True) for i in range(2)]
        prize = make_prize("TWS", quota=1)

        with pytest.raises(InsufficientQuota):
            confirm_winners(session, [p.id for p in participants], prize.id)

        assert session.get(Prize, prize.id).current_quota == 1
        assert winner_count(session) == 0

    def test_participant_already_won(self, session: Session, make_participant, make_prize):
        fresh = make_participant("Fresh", checked_in=True)
        lucky = make_participant("Lucky", checked_in=True)
        first = make_prize("TWS", quota=1)
        second = make_prize("Magic Com", quota=2)
        confirm_winners(session, [lucky.id], first.id)

        with pytest.raises(AlreadyWinner):
            confirm_winners(session, [fresh.id, lucky.id], second.id)

        assert session.get(Participant, fresh.id).is_winner is False
        assert session.get(Prize, second.id).current_quota == 2

    def test_participant_not_checked_in(self, session: Session, make_participant, make_prize):
        absent = make_participant("Absent")
        prize = make_prize("TWS", quota=1)

        with pytest.raises(NotCheckedIn):
            confirm_winners(session, [absent.id], prize.id)

    @pytest.mark.parametrize("ids", [[], "dup"])
    def test_rejects_empty_or_repeated_ids(self, session: Session, make_participant, make_prize, ids):
        prize = make_prize("TWS", quota=2)
        if ids == "dup":
            participant = make_participant(checked_in=True)
            ids = [participant.id, participant.id]

        with pytest.raises(InvalidInputError):
            confirm_winners(session, ids, prize.id)

    def test_unknown_ids(self, session: Session, make_participant, make_prize):
        participant = make_participant(checked_in=True)
        prize = make_prize("TWS", quota=2)

        with pytest.raises(ParticipantNotFound):
            confirm_winners(session, [uuid4()], prize.id)
        with pytest.raises(PrizeNotFound):
            confirm_winners(session, [participant.id], uuid4())


class TestRemoveWinners:
    def test_undo_restores_quota_and_eligibility(
        self, session: Session, make_participant, make_prize
    ):
        participant = make_participant(checked_in=True)
        prize = make_prize("Sepeda Listrik", quota=1)
        result = confirm_winners(session, [participant.id], prize.id)

        removed = remove_winner(session, result.winner_ids[0])

        assert removed == 1
        assert session.get(Prize, prize.id).current_quota == 1
        assert session.get(Participant, participant.id).is_winner is False
        assert winner_count(session) == 0

    def test_undo_then_draw_again(self, session: Session, make_participant, make_prize):
        participant = make_participant(checked_in=True)
        prize = make_prize("TWS", quota=1)
        result = confirm_winners(session, [participant.id], prize.id)
        remove_winner(session, result.winner_ids[0])

        draw = draw_candidates(session, prize.id, 1)

        assert draw.participant_ids == [participant.id]

    def test_undo_then_confirm_again_restores_state(
        self, session: Session, make_participant, make_prize
    ):
        participant = make_participant(checked_in=True)
        prize = make_prize("TWS", quota=2)

        def snapshot():
            session.expire_all()
            return (
                session.get(Prize, prize.id).current_quota,
                session.get(Participant, participant.id).is_winner,
                winner_count(session),
            )

        before = snapshot()
        first = confirm_winners(session, [participant.id], prize.id)
        after_win = snapshot()

        remove_winner(session, first.winner_ids[0])
        assert snapshot() == before

        second = confirm_winners(session, [participant.id], prize.id)
        assert snapshot() == after_win == (1, True, 1)
        assert second.remaining_quota == first.remaining_quota

    def test_bulk_undo(self, session: Session, make_participant, make_prize):
        participants = [make_participant(f"A{i}", checked_in=True) for i in range(3)]
        tws = make_prize("TWS", quota=2)
        rice = make_prize("Magic Com", quota=1)
        first = confirm_winners(session, [p.id for p in participants[:2]], tws.id)
        second = confirm_winners(session, [participants[2].id], rice.id)

        removed = remove_winners(session, first.winner_ids + second.winner_ids)

        assert removed == 3
        assert session.get(Prize, tws.id).current_quota == 2
        assert session.get(Prize, rice.id).current_quota == 1
        assert all(not session.get(Participant, p.id).is_winner for p in participants)

    def test_bulk_undo_is_all_or_nothing(self, session: Session, make_participant, make_prize):
        participant = make_participant(checked_in=True)
        prize = make_prize("TWS", quota=1)
        result = confirm_winners(session, [participant.id], prize.id)

        with pytest.raises(WinnerNotFound):
            remove_winners(session, [result.winner_ids[0], uuid4()])

        assert winner_count(session) == 1
        assert session.get(Prize, prize.id).current_quota == 0
        assert session.get(Participant, participant.id).is_winner is True

    def test_repeated_ids_count_once(self, session: Session, make_participant, make_prize):
        participant = make_participant(checked_in=True)
        prize = make_prize("TWS", quota=1)
        winner_id = confirm_winners(session, [participant.id], prize.id).winner_ids[0]

        assert remove_winners(session, [winner_id, winner_id]) == 1
        assert session.get(Prize, prize.id).current_quota == 1

    def test_unknown_winner(self, session: Session):
        with pytest.raises(WinnerNotFound):
            remove_winner(session, uuid4())

    def test_empty_bulk_undo(self, session: Session):
        with pytest.raises(InvalidInputError):
            remove_winners(session, [])
