"""Winner model linking a participant to the prize they won.

A Winner row is only ever created by the check-in draw or by confirming a
manual draw, and only ever deleted by undoing a win or deleting the
participant. Each row accounts for exactly one unit taken from the prize's
``current_quota``.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from luckydraw.models.participant import Participant
    from luckydraw.models.prize import Prize


class Winner(SQLModel, table=True):
    """A participant's win of a specific prize.

    Attributes:
        id: Unique identifier (UUID).
        participant_id: Foreign key to the winning Participant. Unique, as a
            participant holds at most one prize.
        prize_id: Foreign key to the Prize won.
        won_at: When the win was recorded.
    """
    __tablename__ = "winners"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    participant_id: UUID = Field(foreign_key="participants.id", unique=True)
    prize_id: UUID = Field(foreign_key="prizes.id", index=True)
    won_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationships
    participant: Optional["Participant"] = Relationship(back_populates="winner")
    prize: Optional["Prize"] = Relationship(back_populates="winners")


class WinnerRead(SQLModel):
    """Winner row joined with the names the admin list displays."""
    id: UUID
    participant_id: UUID
    prize_id: UUID
    won_at: datetime
    participant_name: str
    external_id: str
    prize_name: str

    @classmethod
    def from_winner(cls, winner: Winner) -> "WinnerRead":
        return cls(
            id=winner.id,
            participant_id=winner.participant_id,
            prize_id=winner.prize_id,
            won_at=winner.won_at,
            participant_name=winner.participant.name,
            external_id=winner.participant.external_id,
            prize_name=winner.prize.name,
        )
