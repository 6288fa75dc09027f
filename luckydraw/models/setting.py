"""Key/value settings rows shared by all requests."""

from sqlmodel import Field, SQLModel

CHECKIN_SEQUENCE_KEY = "checkin_sequence"


class Setting(SQLModel, table=True):
    """A single named value.

    The ``checkin_sequence`` row holds the next check-in sequence position.
    It is the hottest row in the database during an event and is only
    written while locked by the check-in transaction.
    """
    __tablename__ = "settings"

    key: str = Field(primary_key=True)
    value: str
