"""Participant model for attendees eligible for the lucky draw.

This module defines the Participant table together with the request and
response shapes the API accepts and returns for it. A participant is created
by bulk import, by an admin, or by self-service registration at the check-in
kiosk, and is identified at the kiosk by its external (badge) number.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from pydantic import field_validator
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from luckydraw.models.winner import Winner


class ParticipantBase(SQLModel):
    name: str = Field(min_length=1)
    external_id: str = Field(min_length=1, index=True, unique=True)
    category: str | None = None
    employment_type: str | None = None

    @field_validator("name", "external_id", mode="before")
    @classmethod
    def strip_whitespace(cls, value):
        return value.strip() if isinstance(value, str) else value


class Participant(ParticipantBase, table=True):
    """An attendee who can be checked in and drawn as a winner.

    Attributes:
        id: Unique identifier (UUID).
        name: Display name.
        external_id: Badge or employee number, unique across participants.
        category: Informational segment tag (e.g. "Staff").
        employment_type: Informational tag (e.g. "Permanent").
        is_winner: True while a Winner row references this participant.
        checked_in: Flips to True on the first check-in and never back.
        checkin_position: Sequence position assigned at the first check-in.
            Kept so that a repeated check-in returns the same position and
            so the draw can be replayed during an audit.
        checked_in_at: When the first check-in happened.
        created_at: When the record was created.
        winner: The Winner row for this participant, if any.
    """
    __tablename__ = "participants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    is_winner: bool = Field(default=False)
    checked_in: bool = Field(default=False, index=True)
    checkin_position: int | None = Field(default=None, unique=True)
    checked_in_at: datetime | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationship
    winner: Optional["Winner"] = Relationship(
        back_populates="participant",
        sa_relationship_kwargs={"uselist": False},
    )


class ParticipantCreate(ParticipantBase):
    """Registration payload; ``checked_in`` registers and checks in at once."""
    checked_in: bool = False


class ParticipantUpdate(SQLModel):
    name: str | None = Field(default=None, min_length=1)
    external_id: str | None = Field(default=None, min_length=1)
    category: str | None = None
    employment_type: str | None = None

    @field_validator("name", "external_id", mode="before")
    @classmethod
    def strip_whitespace(cls, value):
        return value.strip() if isinstance(value, str) else value


class ParticipantRead(ParticipantBase):
    id: UUID
    is_winner: bool
    checked_in: bool
    checkin_position: int | None = None
    checked_in_at: datetime | None = None
    created_at: datetime
