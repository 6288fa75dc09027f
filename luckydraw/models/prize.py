"""Prize model for reward categories with finite stock."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from pydantic import field_validator
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from luckydraw.models.winner import Winner


class PrizeBase(SQLModel):
    name: str = Field(min_length=1, unique=True)
    image_ref: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class Prize(PrizeBase, table=True):
    """A prize category and its remaining stock.

    ``current_quota`` goes down by one for every Winner row pointing at the
    prize and back up by one for every Winner row removed, so at any time
    ``current_quota + len(winners) == initial_quota`` unless an admin
    overrode the remaining stock.

    Attributes:
        id: Unique identifier (UUID).
        name: Display name, unique across prizes.
        image_ref: Optional reference to an uploaded image.
        initial_quota: Nominal total stock.
        current_quota: Remaining stock, never negative.
        created_at: When the prize was created.
        winners: Winner rows awarded this prize.
    """
    __tablename__ = "prizes"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    initial_quota: int
    current_quota: int
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationship
    winners: list["Winner"] = Relationship(back_populates="prize")


class PrizeCreate(PrizeBase):
    quota: int = Field(ge=1)


class PrizeUpdate(SQLModel):
    """Prize edit.

    A new ``initial_quota`` shifts the remaining stock by the same delta
    unless ``current_quota`` is given explicitly.
    """
    name: str | None = Field(default=None, min_length=1)
    image_ref: str | None = None
    initial_quota: int | None = Field(default=None, ge=0)
    current_quota: int | None = Field(default=None, ge=0)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class PrizeRead(PrizeBase):
    id: UUID
    initial_quota: int
    current_quota: int
    created_at: datetime


class PrizeInfo(SQLModel):
    """The slice of a prize shown to a winning attendee."""
    name: str
    image_ref: str | None = None
