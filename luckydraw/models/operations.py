"""Request and result shapes for the lucky draw operations.

These are plain (non-table) SQLModel classes. Request bodies are validated at
the HTTP boundary; results are what the core transactions hand back to their
callers.
"""

from uuid import UUID

from sqlmodel import Field, SQLModel

from luckydraw.models.participant import ParticipantCreate, ParticipantRead
from luckydraw.models.prize import PrizeInfo, PrizeRead


class CheckInRequest(SQLModel):
    """Check in by participant id, or by badge number at the kiosk."""
    participant_id: UUID | None = None
    external_id: str | None = None


class CheckInResult(SQLModel):
    """Outcome of a check-in.

    Attributes:
        success: Always True; failures are raised, not returned.
        participant_id: The participant checked in.
        position: Sequence position assigned at the first check-in.
        digit: Pi digit observed at ``position``, for diagnostics.
        is_winner: Whether the participant holds a prize.
        prize: Prize won, if any.
        already_checked_in: True when this call was a repeat and no draw ran.
        no_prize_available: The draw said "win" but every prize was out of
            stock, so the participant was checked in without a prize.
    """
    success: bool = True
    participant_id: UUID
    position: int | None
    digit: int | None
    is_winner: bool
    prize: PrizeInfo | None = None
    already_checked_in: bool = False
    no_prize_available: bool = False


class DrawRequest(SQLModel):
    prize_id: UUID
    count: int = Field(ge=1)


class DrawResult(SQLModel):
    """Tentative winners of a manual draw; nothing has been persisted."""
    prize: PrizeRead
    winners: list[ParticipantRead]


class ConfirmRequest(SQLModel):
    participant_ids: list[UUID] = Field(min_length=1)
    prize_id: UUID


class ConfirmResult(SQLModel):
    remaining_quota: int
    winner_ids: list[UUID]


class WinnerBulkDelete(SQLModel):
    winner_ids: list[UUID] = Field(min_length=1)


class RemovalResult(SQLModel):
    ok: bool = True
    removed: int


class ParticipantBulkCreate(SQLModel):
    participants: list[ParticipantCreate] = Field(min_length=1)


class ParticipantBulkDelete(SQLModel):
    participant_ids: list[UUID] = Field(min_length=1)


class BulkImportResult(SQLModel):
    count: int


class ParticipantCreated(SQLModel):
    participant: ParticipantRead
    check_in: CheckInResult | None = None


class AuditEntry(SQLModel):
    participant_id: UUID
    name: str
    external_id: str
    position: int
    digit: int
    draw_wins: bool
    has_prize: bool
    prize_name: str | None = None


class CheckInAudit(SQLModel):
    """Replay of every recorded check-in against the draw function."""
    next_position: int | None
    entries: list[AuditEntry]
